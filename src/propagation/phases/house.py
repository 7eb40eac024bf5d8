"""Subset elimination within a single house (row, column or box)."""

from __future__ import annotations

from typing import Any, List, Mapping, Sequence

from ..bits import ALL_ONES, fast_popcount
from ..geometry import all_houses
from ..grid import CandidateGrid

Metrics = Mapping[str, Any]

# Skip 0 (empty subset) and ALL_ONES (the whole house): both are no-ops.
_SUBSETS = tuple(
    (
        fast_popcount(subset),
        tuple(i for i in range(9) if subset & (1 << i)),
        tuple(i for i in range(9) if not subset & (1 << i)),
    )
    for subset in range(1, ALL_ONES)
)


def apply_house_rule(masks: List[int], house: Sequence[int]) -> int:
    """Apply naked-subset elimination to the nine cells in ``house``.

    For every proper non-empty subset of the house, if the union of its
    candidates has as many digits as the subset has cells, those digits are
    spoken for and get cleared from every cell outside the subset. Naked and
    hidden singles, pairs, triples and so on are all special cases.

    ``masks`` is mutated in place. Returns how many subsets matched.
    """

    matched = 0
    for size, inside, outside in _SUBSETS:
        union = 0
        for i in inside:
            union |= masks[house[i]]
        if fast_popcount(union) != size:
            continue
        matched += 1
        keep = ALL_ONES ^ union
        for i in outside:
            masks[house[i]] &= keep
    return matched


def step_houses(grid: CandidateGrid, params: Mapping[str, Any] | None = None) -> Metrics:
    """Run :func:`apply_house_rule` over all 27 houses."""

    matched = 0
    for house in all_houses():
        matched += apply_house_rule(grid.masks, house)
    return {"houses": len(all_houses()), "subsets_matched": matched}


__all__ = ["apply_house_rule", "step_houses"]
