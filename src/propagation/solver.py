"""Fixed-point loop that applies the rule passes until the grid is solved."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from contracts.errors import ContradictionError

from .grid import CandidateGrid
from .step_runner import StepRunner
from .trace import SolveTrace, SolveTraceEntry

_LOGGER = logging.getLogger(__name__)

DEFAULT_RULES = ("house", "pivot")


@dataclass(frozen=True)
class SolveOutcome:
    """Summary of a finished solve."""

    iterations: int
    complete: bool
    fixed_point: bool
    unresolved: int
    candidates_removed: int


def _check_contradiction(grid: CandidateGrid, iteration: int) -> None:
    found = grid.find_contradiction()
    if found is not None:
        x, y = found
        raise ContradictionError(x, y, iteration)


def run_solver(
    grid: CandidateGrid,
    max_iterations: int,
    *,
    rules: Sequence[str] = DEFAULT_RULES,
    runner: Optional[StepRunner] = None,
    trace: Optional[SolveTrace] = None,
    stop_on_fixed_point: bool = False,
) -> SolveOutcome:
    """Narrow ``grid`` in place for at most ``max_iterations`` iterations.

    One iteration runs every pass in ``rules`` in order (houses, then pivots
    by default). The loop ends when the grid is complete or the budget is
    spent. Once an iteration changes nothing the grid sits at a fixed point
    and every later iteration would be a no-op, so the remaining budget is
    counted as used without running it, unless ``stop_on_fixed_point`` asks
    for the real count.

    Raises :class:`ContradictionError` as soon as a cell loses its last
    candidate.
    """

    if max_iterations < 0:
        raise ValueError(f"max_iterations must be >= 0, got {max_iterations}")
    runner = runner or StepRunner()
    _check_contradiction(grid, 0)
    candidates_at_start = grid.candidate_count()

    iterations = 0
    fixed_point = False
    while iterations < max_iterations and not grid.is_complete():
        iterations += 1
        changed = False
        for name in rules:
            result = runner.run_step(grid, name, iteration=iterations)
            changed = changed or result.changed
            if trace is not None:
                trace.append(
                    SolveTraceEntry.from_deltas(
                        step=trace.next_step(),
                        iteration=iterations,
                        technique_id=name,
                        deltas=result.deltas,
                        state_hash_before=result.state_hash_before,
                        state_hash_after=result.state_hash_after,
                        time_us=result.time_us,
                    )
                )
        _check_contradiction(grid, iterations)
        if not changed:
            fixed_point = True
            _LOGGER.debug("fixed point reached after %d iterations", iterations)
            if not stop_on_fixed_point:
                iterations = max_iterations
            break

    outcome = SolveOutcome(
        iterations=iterations,
        complete=grid.is_complete(),
        fixed_point=fixed_point,
        unresolved=grid.unresolved_count(),
        candidates_removed=candidates_at_start - grid.candidate_count(),
    )
    _LOGGER.info(
        "solve finished: complete=%s iterations=%d unresolved=%d",
        outcome.complete,
        outcome.iterations,
        outcome.unresolved,
    )
    return outcome


def solve(grid: CandidateGrid, max_iterations: int) -> int:
    """Run both rules until complete or out of budget; return the iteration count.

    When the grid stalls short of completion the count is ``max_iterations``,
    not the number of passes that actually ran: the no-op iterations after the
    fixed point are skipped but still counted. Use :func:`run_solver` with
    ``stop_on_fixed_point=True`` for the executed count.
    """

    return run_solver(grid, max_iterations).iterations


__all__ = ["DEFAULT_RULES", "SolveOutcome", "run_solver", "solve"]
