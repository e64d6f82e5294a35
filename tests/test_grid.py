import re

from ticker.grid import Align, Cell, Grid, Row, render, visible_width


def strip_ansi(text):
    return re.sub(r"\x1b\[[0-9;]*m", "", text)


def single_row(cells, width=40, gutter=1):
    return Grid(rows=[Row(width=width, cells=cells)], gutter_horizontal=gutter)


def test_empty_grid_renders_nothing():
    assert render(Grid()) == ""


def test_fixed_cells_are_padded_and_aligned():
    grid = single_row(
        [Cell(text="ab", width=4), Cell(text="cd", width=3, align=Align.RIGHT)], width=20
    )
    assert render(grid) == "ab    cd"


def test_flexible_cell_fills_row_width():
    grid = single_row([Cell(text="name"), Cell(text="x", width=5, align=Align.RIGHT)], width=30)
    line = render(grid)
    assert visible_width(line) == 30
    assert line.startswith("name")
    assert line.endswith("x")


def test_multiple_flexible_cells_share_row_width():
    grid = single_row([Cell(text="a"), Cell(text="b"), Cell(text="c", width=3)], width=31)
    assert visible_width(render(grid)) == 31


def test_row_without_flexible_cells_is_not_padded_to_row_width():
    grid = single_row([Cell(text="abc", width=3), Cell(text="de", width=2)], width=100)
    assert visible_width(render(grid)) < 100


def test_cell_hidden_when_min_width_exceeds_row_width():
    hidden = single_row(
        [Cell(text="keep", width=4), Cell(text="drop", width=4, visible_min_width=41)], width=40
    )
    without = single_row([Cell(text="keep", width=4)], width=40)
    assert render(hidden) == render(without)
    assert "drop" not in render(hidden)


def test_cell_shown_when_min_width_equals_row_width():
    grid = single_row(
        [Cell(text="keep", width=4), Cell(text="show", width=4, visible_min_width=40)], width=40
    )
    assert "show" in render(grid)


def test_multiline_cells_produce_aligned_lines():
    grid = single_row(
        [Cell(text="a\nb\nc", width=3), Cell(text="one", width=5)], width=40
    )
    lines = render(grid).split("\n")
    assert len(lines) == 3
    assert len({visible_width(line) for line in lines}) == 1
    assert lines[2].startswith("c")


def test_long_text_is_truncated_to_cell_width():
    grid = single_row([Cell(text="abcdef", width=3)], width=10)
    assert render(grid) == "abcdef"[:3]


def test_escape_sequences_do_not_count_towards_width():
    styled = single_row([Cell(text="\x1b[31mab\x1b[0m", width=5), Cell(text="z", width=2)])
    plain = single_row([Cell(text="ab", width=5), Cell(text="z", width=2)])
    output = render(styled)
    assert strip_ansi(output) == render(plain)
    assert "\x1b[31m" in output


def test_truncating_styled_text_keeps_visible_width():
    grid = single_row([Cell(text="\x1b[31mabcdef\x1b[0m", width=3)], width=10)
    output = render(grid)
    assert visible_width(output) == 3
    assert strip_ansi(output) == "abcdef"[:3]


def test_rows_are_separated_by_vertical_gutter():
    rows = [Row(width=10, cells=[Cell(text="one")]), Row(width=10, cells=[Cell(text="two")])]
    compact = render(Grid(rows=rows)).split("\n")
    spaced = render(Grid(rows=rows, gutter_vertical=1)).split("\n")
    assert len(compact) == 2
    assert len(spaced) == 3
    assert spaced[1] == ""
    assert spaced[0] == compact[0]
    assert spaced[2] == compact[1]


def test_visible_width_ignores_styling():
    assert visible_width("\x1b[1mabc\x1b[0m") == visible_width("abc") == len("abc")