"""Candidate grid owned by a single solve."""

from __future__ import annotations

import hashlib
from typing import Iterable, List, Optional, Tuple

from contracts.errors import OutOfRangeError

from .bits import ALL_ONES, fast_popcount, single_value

SIZE = 9
CELLS = SIZE * SIZE


def cell_index(x: int, y: int) -> int:
    """Return the flat index of column ``x``, row ``y``."""

    return y * SIZE + x


def cell_coords(index: int) -> Tuple[int, int]:
    """Return ``(x, y)`` for a flat index."""

    return index % SIZE, index // SIZE


def _check(name: str, value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value < SIZE:
        raise OutOfRangeError(name, value)
    return value


class CandidateGrid:
    """A 9x9 grid of candidate masks stored as one flat list.

    Rules never copy cells; they address ``masks`` by index so that a change
    made through a row is immediately visible through the column, the box and
    every pivot group that shares the cell.
    """

    __slots__ = ("masks",)

    def __init__(self, masks: Optional[Iterable[int]] = None) -> None:
        if masks is None:
            self.masks: List[int] = [ALL_ONES] * CELLS
        else:
            self.masks = [int(mask) for mask in masks]
            if len(self.masks) != CELLS:
                raise ValueError(f"expected {CELLS} masks, got {len(self.masks)}")
            for index, mask in enumerate(self.masks):
                if not 0 <= mask <= ALL_ONES:
                    raise ValueError(f"mask {mask} at cell {index} is outside 0..{ALL_ONES}")

    @classmethod
    def create(cls) -> "CandidateGrid":
        return cls()

    def get_bits(self, x: int, y: int) -> int:
        return self.masks[cell_index(_check("x", x), _check("y", y))]

    def get_value(self, x: int, y: int) -> Optional[int]:
        """Return the fixed value (0..8) of a cell, or ``None`` when unresolved."""

        return single_value(self.get_bits(x, y))

    def set_cell(self, x: int, y: int, value: int) -> None:
        """Fix a cell to ``value`` (0..8). Only used while seeding."""

        index = cell_index(_check("x", x), _check("y", y))
        self.masks[index] = 1 << _check("value", value)

    def is_complete(self) -> bool:
        return all(fast_popcount(mask) == 1 for mask in self.masks)

    # Inspection interface ------------------------------------------------

    def get_cell_value(self, x: int, y: int) -> Optional[int]:
        """Return the resolved digit 1..9, or ``None``."""

        value = self.get_value(x, y)
        return None if value is None else value + 1

    def get_cell_bits(self, x: int, y: int) -> int:
        return self.get_bits(x, y)

    # Whole-grid queries --------------------------------------------------

    def snapshot(self) -> Tuple[int, ...]:
        return tuple(self.masks)

    def state_hash(self) -> str:
        payload = b"".join(mask.to_bytes(2, "big") for mask in self.masks)
        return f"sha256-{hashlib.sha256(payload).hexdigest()}"

    def find_contradiction(self) -> Optional[Tuple[int, int]]:
        """Return ``(x, y)`` of the first cell with no candidates, if any."""

        for index, mask in enumerate(self.masks):
            if mask == 0:
                return cell_coords(index)
        return None

    def unresolved_count(self) -> int:
        return sum(1 for mask in self.masks if fast_popcount(mask) != 1)

    def candidate_count(self) -> int:
        return sum(fast_popcount(mask) for mask in self.masks)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CandidateGrid):
            return NotImplemented
        return self.masks == other.masks

    def __repr__(self) -> str:
        return f"CandidateGrid(unresolved={self.unresolved_count()})"


__all__ = ["CELLS", "SIZE", "CandidateGrid", "cell_coords", "cell_index"]
