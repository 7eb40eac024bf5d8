"""Pivot (box/line cross) elimination.

Picture one box and one of its columns, the pivot column::

    a d * |
    b e * |
    c f * |
    ------+
        u |
        v |
        w |
    ------+
        x |
        y |
        z |

Here the pivot column is the third column of the top-left box, group A is
``a b c d e f`` and group B is ``u v w x y z``: the pivot column outside the
box's band, read downwards and wrapping past the bottom edge. A digit missing from every
cell of group A has to sit in the pivot column inside the box, so it cannot
appear anywhere in group B. The argument is symmetric, which is why group A
is then narrowed by the union of group B.
"""

from __future__ import annotations

from typing import Any, List, Mapping, Sequence

from ..geometry import pivot_configurations
from ..grid import CandidateGrid

Metrics = Mapping[str, Any]


def _union(masks: List[int], cells: Sequence[int]) -> int:
    union = 0
    for index in cells:
        union |= masks[index]
    return union


def apply_pivot_rule(masks: List[int], group_a: Sequence[int], group_b: Sequence[int]) -> bool:
    """Bound each group by the union of the other. Returns ``True`` on change."""

    changed = False
    union_a = _union(masks, group_a)
    for index in group_b:
        narrowed = masks[index] & union_a
        if narrowed != masks[index]:
            masks[index] = narrowed
            changed = True
    union_b = _union(masks, group_b)
    for index in group_a:
        narrowed = masks[index] & union_b
        if narrowed != masks[index]:
            masks[index] = narrowed
            changed = True
    return changed


def step_pivots(grid: CandidateGrid, params: Mapping[str, Any] | None = None) -> Metrics:
    """Run :func:`apply_pivot_rule` over all 54 pivot configurations."""

    fired = 0
    configs = pivot_configurations()
    for config in configs:
        if apply_pivot_rule(grid.masks, config.group_a, config.group_b):
            fired += 1
    return {"pivots": len(configs), "pivots_fired": fired}


__all__ = ["apply_pivot_rule", "step_pivots"]
