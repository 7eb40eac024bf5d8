"""Delta records describing how a rule pass narrowed the grid.

Rules mutate masks directly; deltas are derived afterwards by diffing two
snapshots, so the rule code stays free of bookkeeping.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, List, Mapping, Sequence, Tuple

from contracts.errors import TraceValidationError

from .bits import fast_popcount, iter_values


class DeltaOp(str, Enum):
    """``ELIM`` removes one candidate; ``PLACE`` marks a cell as resolved."""

    ELIM = "ELIM"
    PLACE = "PLACE"

    @classmethod
    def from_value(cls, value: str) -> "DeltaOp":
        try:
            return cls(value)
        except ValueError as exc:
            raise TraceValidationError(f"unsupported delta op: {value!r}", "$.op") from exc


@dataclass(frozen=True, slots=True)
class Delta:
    """A single candidate change. ``digit`` is 1..9."""

    op: DeltaOp
    cell: int
    digit: int

    def __post_init__(self) -> None:
        if not isinstance(self.op, DeltaOp):
            object.__setattr__(self, "op", DeltaOp.from_value(str(self.op)))
        if not 0 <= int(self.cell) <= 80:
            raise TraceValidationError(f"cell must be in [0, 80], got {self.cell!r}", "$.cell")
        if not 1 <= int(self.digit) <= 9:
            raise TraceValidationError(f"digit must be in [1, 9], got {self.digit!r}", "$.digit")

    def sort_key(self) -> Tuple[int, int, int]:
        """Canonical order: ELIM before PLACE, then cell, then digit."""

        return (0 if self.op is DeltaOp.ELIM else 1, int(self.cell), int(self.digit))

    def to_payload(self) -> dict:
        return {"op": self.op.value, "cell": int(self.cell), "digit": int(self.digit)}


DeltaLike = Delta | Mapping[str, object]


def ensure_delta(candidate: DeltaLike) -> Delta:
    """Normalise a mapping or :class:`Delta` to :class:`Delta`."""

    if isinstance(candidate, Delta):
        return candidate
    if isinstance(candidate, Mapping):
        try:
            op = candidate["op"]
            cell = candidate["cell"]
            digit = candidate["digit"]
        except KeyError as exc:
            raise TraceValidationError("delta mapping is missing required keys") from exc
        return Delta(DeltaOp.from_value(str(op)), int(cell), int(digit))
    raise TypeError(f"Unsupported delta descriptor: {type(candidate)!r}")


def _iter_canonical(deltas: Iterable[DeltaLike]) -> Iterator[Delta]:
    for item in deltas:
        yield ensure_delta(item)


def canonicalise_deltas(deltas: Iterable[DeltaLike]) -> Tuple[Delta, ...]:
    return tuple(sorted(_iter_canonical(deltas), key=Delta.sort_key))


def diff_deltas(before: Sequence[int], after: Sequence[int]) -> Tuple[Delta, ...]:
    """Return the canonical deltas that turn ``before`` into ``after``.

    Every cleared bit becomes an ``ELIM``; a cell that went from several
    candidates down to exactly one also gets a ``PLACE`` for its digit.
    """

    deltas: List[Delta] = []
    for cell, (old, new) in enumerate(zip(before, after)):
        if old == new:
            continue
        for value in iter_values(old & ~new):
            deltas.append(Delta(DeltaOp.ELIM, cell, value + 1))
        if fast_popcount(new) == 1 and fast_popcount(old) != 1:
            deltas.append(Delta(DeltaOp.PLACE, cell, new.bit_length()))
    return canonicalise_deltas(deltas)


__all__ = [
    "Delta",
    "DeltaLike",
    "DeltaOp",
    "canonicalise_deltas",
    "diff_deltas",
    "ensure_delta",
]
