"""Text views of a candidate grid."""

from __future__ import annotations

from typing import Callable, List

from propagation.grid import SIZE, CandidateGrid

VALUE_RULE = "-" * 31
CANDIDATE_RULE = "-" * 121


def _render(grid: CandidateGrid, rule: str, cell: Callable[[int, int], str]) -> str:
    lines: List[str] = []
    for y in range(SIZE):
        if y % 3 == 0:
            lines.append(rule)
        parts: List[str] = []
        for x in range(SIZE):
            if x % 3 == 0:
                parts.append("|")
            parts.append(f" {cell(x, y)} ")
        parts.append("|")
        lines.append("".join(parts))
    lines.append(rule)
    return "\n".join(lines) + "\n"


def view(grid: CandidateGrid) -> str:
    """Resolved digits, blanks for unresolved cells."""

    def cell(x: int, y: int) -> str:
        value = grid.get_cell_value(x, y)
        return " " if value is None else str(value)

    return _render(grid, VALUE_RULE, cell)


def inspect(grid: CandidateGrid) -> str:
    """Every remaining candidate of every cell, e.g. ``{1  4    9}``."""

    def cell(x: int, y: int) -> str:
        bits = grid.get_cell_bits(x, y)
        digits = "".join(str(i + 1) if bits & (1 << i) else " " for i in range(SIZE))
        return "{" + digits + "}"

    return _render(grid, CANDIDATE_RULE, cell)


def format_status(complete: bool, iterations: int) -> str:
    state = "COMPLETE" if complete else "NOT COMPLETE"
    return f"{state} after {iterations} iterations."


__all__ = ["CANDIDATE_RULE", "VALUE_RULE", "format_status", "inspect", "view"]
