import contextlib
import io
import json
import sys
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from PIL import Image

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "apps" / "cli"))
sys.path.insert(0, str(ROOT / "packages" / "core"))
sys.path.insert(0, str(ROOT / "packages" / "converter"))

from asciify_app import cli
from asciify_app.cli import build_parser


class CliParserTests(unittest.TestCase):
    def test_convert_command(self):
        args = build_parser().parse_args(["convert", "in.png", "--density", "120", "--color", "--char-set", "BLOCK"])
        self.assertEqual(args.command, "convert")
        self.assertEqual(args.image, "in.png")
        self.assertEqual(args.density, 120)
        self.assertTrue(args.color)
        self.assertEqual(args.char_set, "BLOCK")

    def test_convert_defaults_leave_settings_alone(self):
        args = build_parser().parse_args(["convert", "in.png"])
        self.assertIsNone(args.density)
        self.assertIsNone(args.color)
        self.assertIsNone(args.format)

    def test_config_command(self):
        args = build_parser().parse_args(["config", "show"])
        self.assertEqual(args.command, "config")
        self.assertEqual(args.config_cmd, "show")

    def test_doctor_command(self):
        args = build_parser().parse_args(["doctor", "--export"])
        self.assertTrue(args.export)


class CliRunTests(unittest.TestCase):
    def setUp(self):
        for name in ("configure_logging", "install_crash_hooks"):
            patcher = mock.patch.object(cli, name)
            patcher.start()
            self.addCleanup(patcher.stop)
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.dir = Path(self.tmp.name)
        self.config = self.dir / "config.json"

    def _run(self, *argv: str) -> tuple[int, str, str]:
        out, err = io.StringIO(), io.StringIO()
        with contextlib.redirect_stdout(out), contextlib.redirect_stderr(err):
            rc = cli.main(["--config", str(self.config), *argv])
        return rc, out.getvalue(), err.getvalue()

    def _image(self, color=(0, 0, 0), size=(4, 4)) -> Path:
        path = self.dir / "img.png"
        Image.new("RGB", size, color).save(path)
        return path

    def test_convert_prints_text(self):
        image = self._image()
        rc, out, _ = self._run("convert", str(image), "--char-set", "SIMPLE", "--density", "200", "--aspect", "0")
        self.assertEqual(rc, 0)
        self.assertEqual(out, "@@@@\n@@@@\n@@@@\n@@@@\n")

    def test_convert_color_writes_markup(self):
        image = self._image(color=(255, 0, 0), size=(2, 2))
        target = self.dir / "out" / "art.html"
        rc, _, _ = self._run(
            "convert", str(image), "--char-set", "SIMPLE", "--density", "5", "--aspect", "0", "--color", "--out", str(target)
        )
        self.assertEqual(rc, 0)
        self.assertEqual(target.read_text(encoding="utf-8"), '<span style="color: #ff0000">%</span>')

    def test_convert_color_as_plain_text(self):
        image = self._image(color=(255, 0, 0), size=(2, 2))
        rc, out, _ = self._run(
            "convert", str(image), "--char-set", "SIMPLE", "--density", "5", "--aspect", "0", "--color", "--format", "text"
        )
        self.assertEqual(rc, 0)
        self.assertEqual(out, "%\n")

    def test_save_persists_settings(self):
        image = self._image()
        rc, _, _ = self._run("convert", str(image), "--density", "999", "--save")
        self.assertEqual(rc, 0)
        saved = json.loads(self.config.read_text(encoding="utf-8"))
        self.assertEqual(saved["conversion"]["density"], 200)

    def test_missing_image_exits_with_error(self):
        rc, _, err = self._run("convert", str(self.dir / "missing.png"))
        self.assertEqual(rc, cli.EXIT_INVALID)
        self.assertIn("error:", err)

    def test_config_reset_and_show(self):
        rc, _, _ = self._run("config", "reset")
        self.assertEqual(rc, 0)
        rc, out, _ = self._run("config", "show")
        self.assertEqual(json.loads(out)["conversion"]["char_set"], "CUSTOM")

    def test_presets(self):
        rc, out, _ = self._run("presets")
        self.assertEqual(rc, 0)
        self.assertEqual(json.loads(out)["MINIMAL"], "#. ")


if __name__ == "__main__":
    unittest.main()
