"""Static cell groupings: the 27 houses and the 54 pivot configurations.

Everything here is a tuple of flat cell indices (``y * 9 + x``); the
enumeration order is fixed so solves are reproducible.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Tuple

from .grid import SIZE, cell_index

House = Tuple[int, ...]
BOX_ORIGINS = (0, 3, 6)


@dataclass(frozen=True)
class PivotConfig:
    """One pivot application.

    ``axis`` is ``"column"`` when the pivot line is a column of the box and
    ``"row"`` when it is a row. ``group_a`` holds the six box cells off the
    pivot line, ``group_b`` the six cells of the pivot line outside the box.
    """

    axis: str
    box_x: int
    box_y: int
    offset: int
    group_a: Tuple[int, ...]
    group_b: Tuple[int, ...]


def column_house(x: int) -> House:
    return tuple(cell_index(x, y) for y in range(SIZE))


def row_house(y: int) -> House:
    return tuple(cell_index(x, y) for x in range(SIZE))


def box_house(box_x: int, box_y: int) -> House:
    return tuple(cell_index(box_x + i, box_y + j) for i in range(3) for j in range(3))


@lru_cache(maxsize=1)
def all_houses() -> Tuple[House, ...]:
    """Columns, then rows, then boxes."""

    columns = [column_house(x) for x in range(SIZE)]
    rows = [row_house(y) for y in range(SIZE)]
    boxes = [box_house(x, y) for x in BOX_ORIGINS for y in BOX_ORIGINS]
    return tuple(columns + rows + boxes)


def _column_pivot(x: int, y: int, i: int) -> PivotConfig:
    x1 = x + i
    x2 = x + (i + 1) % 3
    x3 = x + (i + 2) % 3
    group_a = tuple(cell_index(col, y + k) for col in (x2, x3) for k in range(3))
    group_b = tuple(cell_index(x1, (y + k) % SIZE) for k in range(3, 9))
    return PivotConfig("column", x, y, i, group_a, group_b)


def _row_pivot(x: int, y: int, j: int) -> PivotConfig:
    y1 = y + j
    y2 = y + (j + 1) % 3
    y3 = y + (j + 2) % 3
    group_a = tuple(cell_index(x + k, row) for row in (y2, y3) for k in range(3))
    group_b = tuple(cell_index((x + k) % SIZE, y1) for k in range(3, 9))
    return PivotConfig("row", x, y, j, group_a, group_b)


@lru_cache(maxsize=1)
def pivot_configurations() -> Tuple[PivotConfig, ...]:
    """Every box, three column pivots followed by three row pivots."""

    configs = []
    for x in BOX_ORIGINS:
        for y in BOX_ORIGINS:
            configs.extend(_column_pivot(x, y, i) for i in range(3))
            configs.extend(_row_pivot(x, y, j) for j in range(3))
    return tuple(configs)


__all__ = [
    "BOX_ORIGINS",
    "House",
    "PivotConfig",
    "all_houses",
    "box_house",
    "column_house",
    "pivot_configurations",
    "row_house",
]
