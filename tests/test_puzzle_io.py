from __future__ import annotations

import pytest

from contracts.errors import ParseError
from propagation import CandidateGrid
from puzzle_io import CellValue, format_status, inspect, parse, parse_into, parse_text, view
from puzzle_io.viewer import CANDIDATE_RULE, VALUE_RULE


def _puzzle_lines() -> list[str]:
    return [
        "53  7",
        "6  195",
        " 98    6",
        "8   6   3",
        "4  8 3  1",
        "7   2   6",
        " 6    28",
        "   419  5",
        "    8  79",
    ]


def test_parse_reads_givens_row_major():
    values = parse(_puzzle_lines())
    assert len(values) == 30
    assert values[:3] == [CellValue(0, 0, 4), CellValue(1, 0, 2), CellValue(4, 0, 6)]
    assert values[-1] == CellValue(8, 8, 8)


def test_short_and_empty_lines_are_blank_padded():
    values = parse(["", "", "", "", "    5", "", "", "", ""])
    assert values == [CellValue(4, 4, 4)]


def test_line_endings_and_trailing_whitespace_are_ignored():
    lines = [line + "\r\n" for line in _puzzle_lines()]
    lines[0] = "53  7       \t\r\n"
    assert parse(lines) == parse(_puzzle_lines())


def test_lines_after_the_ninth_are_ignored():
    assert parse(_puzzle_lines() + ["not a puzzle line"]) == parse(_puzzle_lines())


def test_parse_text():
    assert parse_text("\n".join(_puzzle_lines()) + "\n") == parse(_puzzle_lines())


@pytest.mark.parametrize(
    "line, column",
    [("12x", 3), ("0", 1), (".", 1), ("\t", 1), ("123456789x", 10)],
)
def test_bad_characters_report_position(line, column):
    lines = _puzzle_lines()
    lines[2] = line
    with pytest.raises(ParseError) as excinfo:
        parse(lines)
    assert excinfo.value.line == 3
    assert excinfo.value.column == column
    assert "line 3" in str(excinfo.value)


def test_too_few_lines():
    with pytest.raises(ParseError) as excinfo:
        parse(_puzzle_lines()[:7])
    assert excinfo.value.line == 8
    assert excinfo.value.column is None


def test_parse_into_seeds_grid():
    grid = CandidateGrid()
    values = parse_into(_puzzle_lines(), grid)
    assert len(values) == 30
    assert grid.get_cell_value(0, 0) == 5
    assert grid.get_cell_value(8, 8) == 9
    assert grid.get_cell_value(2, 0) is None


def test_value_view_layout():
    grid = CandidateGrid()
    grid.set_cell(0, 0, 4)
    grid.set_cell(8, 8, 8)
    lines = view(grid).splitlines()

    assert len(lines) == 13
    assert lines[0] == lines[4] == lines[8] == lines[12] == VALUE_RULE
    assert len(VALUE_RULE) == 31
    assert lines[1] == "| 5       |         |         |"
    assert lines[2] == "|         |         |         |"
    assert lines[11] == "|         |         |       9 |"
    assert view(grid).endswith("\n")


def test_candidate_view_layout():
    grid = CandidateGrid()
    grid.masks[0] = 0b100000101
    lines = inspect(grid).splitlines()

    full = " {123456789} "
    assert len(lines) == 13
    assert lines[0] == CANDIDATE_RULE
    assert len(CANDIDATE_RULE) == 121
    assert lines[1] == "| {1 3     9} " + full * 2 + ("|" + full * 3) * 2 + "|"
    assert all(len(line) == 121 for line in lines)


def test_status_line():
    assert format_status(True, 4) == "COMPLETE after 4 iterations."
    assert format_status(False, 1000) == "NOT COMPLETE after 1000 iterations."
