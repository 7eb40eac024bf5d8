"""Register the rule passes with the step runner."""

from __future__ import annotations

from ..step_runner import register_step
from .house import apply_house_rule, step_houses
from .pivot import apply_pivot_rule, step_pivots

register_step("house", step_houses)
register_step("pivot", step_pivots)

__all__ = ["apply_house_rule", "apply_pivot_rule", "step_houses", "step_pivots"]
