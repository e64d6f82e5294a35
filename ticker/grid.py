"""Layout of styled terminal text into rows of fixed and flexible width cells."""

from __future__ import annotations

import enum
import re
import unicodedata
from dataclasses import dataclass, field
from itertools import zip_longest

_ANSI_RE = re.compile(r"\x1b\[[0-9;?]*[A-Za-z]")
_RESET = "\x1b[0m"


class Align(enum.Enum):
    """Horizontal alignment of text within a cell."""

    LEFT = "left"
    RIGHT = "right"


@dataclass
class Cell:
    """A block of text; a width of zero or less makes it share the free row width."""

    text: str = ""
    width: int = 0
    visible_min_width: int = 0
    align: Align = Align.LEFT


@dataclass
class Row:
    width: int = 0
    cells: list[Cell] = field(default_factory=list)


@dataclass
class Grid:
    rows: list[Row] = field(default_factory=list)
    gutter_horizontal: int = 0
    gutter_vertical: int = 0


def _char_width(char: str) -> int:
    if unicodedata.combining(char):
        return 0
    return 2 if unicodedata.east_asian_width(char) in ("W", "F") else 1


def visible_width(text: str) -> int:
    """Number of terminal columns the text occupies, ignoring escape sequences."""
    return sum(_char_width(char) for char in _ANSI_RE.sub("", text))


def _truncate(text: str, width: int) -> str:
    parts: list[str] = []
    used = 0
    position = 0
    styled = False
    while position < len(text):
        match = _ANSI_RE.match(text, position)
        if match:
            parts.append(match.group())
            styled = True
            position = match.end()
            continue
        char_width = _char_width(text[position])
        if used + char_width > width:
            break
        parts.append(text[position])
        used += char_width
        position += 1
    if styled:
        parts.append(_RESET)
    return "".join(parts)


def _fit(text: str, width: int, align: Align) -> str:
    text_width = visible_width(text)
    if text_width > width:
        text = _truncate(text, width)
        text_width = visible_width(text)
    padding = " " * (width - text_width)
    return padding + text if align is Align.RIGHT else text + padding


def _cell_widths(cells: list[Cell], row_width: int, gutter: int) -> list[int]:
    flexible_count = sum(1 for cell in cells if cell.width <= 0)
    if not flexible_count:
        return [cell.width for cell in cells]
    fixed = sum(cell.width for cell in cells if cell.width > 0)
    available = max(0, row_width - fixed - gutter * (len(cells) - 1))
    share, extra = divmod(available, flexible_count)
    widths = []
    for cell in cells:
        if cell.width > 0:
            widths.append(cell.width)
        else:
            widths.append(share + (1 if extra > 0 else 0))
            extra -= 1
    return widths


def _render_row(row: Row, gutter: int) -> str:
    cells = [cell for cell in row.cells if cell.visible_min_width <= row.width]
    if not cells:
        return ""
    widths = _cell_widths(cells, row.width, gutter)
    columns = [cell.text.split("\n") for cell in cells]
    gap = " " * gutter
    lines = [
        gap.join(
            _fit(part, width, cell.align)
            for part, cell, width in zip(line_parts, cells, widths)
        )
        for line_parts in zip_longest(*columns, fillvalue="")
    ]
    return "\n".join(lines)


def render(grid: Grid) -> str:
    """Render the grid; cells whose minimum visible width exceeds the row width are hidden."""
    separator = "\n" * (grid.gutter_vertical + 1)
    return separator.join(_render_row(row, grid.gutter_horizontal) for row in grid.rows)