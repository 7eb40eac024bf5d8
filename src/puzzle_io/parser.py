"""Read the nine-line text form of a puzzle.

Each of the first nine lines holds up to nine characters, a space for an
unknown cell or a digit ``1``-``9``. Short lines count as blank-padded.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, List

from contracts.errors import ParseError
from propagation.grid import SIZE, CandidateGrid

BLANK = " "


@dataclass(frozen=True)
class CellValue:
    """A given: column ``x``, row ``y`` and ``value`` in 0..8."""

    x: int
    y: int
    value: int


def _parse_line(line: str, y: int) -> Iterator[CellValue]:
    line = line.rstrip("\r\n")
    for x, ch in enumerate(line):
        if x >= SIZE:
            if not ch.isspace():
                raise ParseError(f"unexpected {ch!r} past column {SIZE}", y + 1, x + 1)
            continue
        if ch == BLANK:
            continue
        if ch in "123456789":
            yield CellValue(x, y, int(ch) - 1)
        else:
            raise ParseError(f"expected a space or a digit 1-9, got {ch!r}", y + 1, x + 1)


def parse(lines: Iterable[str]) -> List[CellValue]:
    """Return the givens of the first nine lines in row-major order."""

    values: List[CellValue] = []
    count = 0
    for y, line in zip(range(SIZE), lines):
        values.extend(_parse_line(line, y))
        count += 1
    if count < SIZE:
        raise ParseError(f"expected {SIZE} lines, got {count}", count + 1)
    return values


def parse_text(text: str) -> List[CellValue]:
    return parse(text.splitlines())


def parse_into(lines: Iterable[str], grid: CandidateGrid) -> List[CellValue]:
    """Parse ``lines`` and fix every given in ``grid``."""

    values = parse(lines)
    for cell in values:
        grid.set_cell(cell.x, cell.y, cell.value)
    return values


__all__ = ["CellValue", "parse", "parse_into", "parse_text"]
