"""Constraint propagation engine for the classic 9x9 Sudoku."""

from __future__ import annotations

from .bits import ALL_ONES, popcount
from .delta import Delta, DeltaLike, DeltaOp, canonicalise_deltas, diff_deltas, ensure_delta
from .geometry import PivotConfig, all_houses, pivot_configurations
from .grid import CandidateGrid, cell_coords, cell_index
from .solver import DEFAULT_RULES, SolveOutcome, run_solver, solve
from .step_runner import (
    StepHandler,
    StepResult,
    StepRunner,
    StepTraceEntry,
    StepTraceRecorder,
    register_step,
    registered_steps,
)
from .trace import SolveTrace, SolveTraceEntry

# Trigger rule registration on import.
from . import phases as _phases  # noqa: F401
from .phases import apply_house_rule, apply_pivot_rule

__all__ = [
    "ALL_ONES",
    "CandidateGrid",
    "DEFAULT_RULES",
    "Delta",
    "DeltaLike",
    "DeltaOp",
    "PivotConfig",
    "SolveOutcome",
    "SolveTrace",
    "SolveTraceEntry",
    "StepHandler",
    "StepResult",
    "StepRunner",
    "StepTraceEntry",
    "StepTraceRecorder",
    "all_houses",
    "apply_house_rule",
    "apply_pivot_rule",
    "canonicalise_deltas",
    "cell_coords",
    "cell_index",
    "diff_deltas",
    "ensure_delta",
    "pivot_configurations",
    "popcount",
    "register_step",
    "registered_steps",
    "run_solver",
    "solve",
]
