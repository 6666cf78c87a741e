import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "converter"))

from asciify_converter import AsciiArtifact, AsciiCell, parse_markup, strip_markup, to_markup


class MarkupTests(unittest.TestCase):
    def setUp(self):
        self.artifact = AsciiArtifact(
            rows=(
                (AsciiCell("@", "#ff0000"), AsciiCell("<", "#00ff00")),
                (AsciiCell("."), AsciiCell("&")),
            )
        )

    def test_spans_for_colored_cells(self):
        text = to_markup(self.artifact)
        self.assertEqual(
            text,
            '<span style="color: #ff0000">@</span><span style="color: #00ff00">&lt;</span>\n.&amp;',
        )

    def test_strip_gives_plain_text(self):
        self.assertEqual(strip_markup(to_markup(self.artifact)), "@<\n.&")
        self.assertEqual(strip_markup(to_markup(self.artifact)), self.artifact.to_text())

    def test_parse_recovers_cells(self):
        self.assertEqual(parse_markup(to_markup(self.artifact)), self.artifact)

    def test_empty(self):
        self.assertEqual(to_markup(AsciiArtifact()), "")
        self.assertEqual(parse_markup(""), AsciiArtifact())

    def test_parse_normalises_hex_case(self):
        artifact = parse_markup('<span style="color: #AABBCC">x</span>')
        self.assertEqual(artifact.rows[0][0], AsciiCell("x", "#aabbcc"))


if __name__ == "__main__":
    unittest.main()
