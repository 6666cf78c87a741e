"""Color markup serialisation for conversion artifacts.

Colored cells are written as ``<span style="color: #rrggbb">c</span>``;
uncolored cells are written as bare (HTML-escaped) characters.
"""

from __future__ import annotations

import html
import re

from .models import AsciiArtifact, AsciiCell

_SPAN_RE = re.compile(r'<span style="color: (#[0-9a-fA-F]{6})">(.*?)</span>', re.DOTALL)
_ENTITY_RE = re.compile(r"&(?:#\d+|#x[0-9a-fA-F]+|[a-zA-Z]+);")


def _cell_markup(cell: AsciiCell) -> str:
    char = html.escape(cell.char, quote=False)
    if cell.color is None:
        return char
    return f'<span style="color: {cell.color}">{char}</span>'


def to_markup(artifact: AsciiArtifact) -> str:
    return "\n".join("".join(_cell_markup(cell) for cell in row) for row in artifact.rows)


def strip_markup(text: str) -> str:
    """Drop color annotations, leaving the plain characters."""
    return html.unescape(_SPAN_RE.sub(lambda m: m.group(2), text))


def _plain_cells(fragment: str) -> list[AsciiCell]:
    cells: list[AsciiCell] = []
    pos = 0
    while pos < len(fragment):
        entity = _ENTITY_RE.match(fragment, pos)
        if entity:
            cells.append(AsciiCell(html.unescape(entity.group(0))))
            pos = entity.end()
        else:
            cells.append(AsciiCell(fragment[pos]))
            pos += 1
    return cells


def _parse_row(line: str) -> tuple[AsciiCell, ...]:
    cells: list[AsciiCell] = []
    pos = 0
    for match in _SPAN_RE.finditer(line):
        cells.extend(_plain_cells(line[pos : match.start()]))
        cells.append(AsciiCell(html.unescape(match.group(2)), match.group(1).lower()))
        pos = match.end()
    cells.extend(_plain_cells(line[pos:]))
    return tuple(cells)


def parse_markup(text: str) -> AsciiArtifact:
    if not text:
        return AsciiArtifact()
    return AsciiArtifact(rows=tuple(_parse_row(line) for line in text.split("\n")))
