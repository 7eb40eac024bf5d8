"""Execution of named rule passes against a candidate grid."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, MutableMapping, Optional, Tuple

from .delta import Delta, diff_deltas
from .grid import CandidateGrid

StepHandler = Callable[[CandidateGrid, Mapping[str, Any] | None], Mapping[str, Any]]

_LOGGER = logging.getLogger(__name__)

TRACE_LEVELS = ("none", "steps")


@dataclass(frozen=True)
class StepTraceEntry:
    """Single record emitted for a rule pass."""

    step_name: str
    iteration: int
    meta: Mapping[str, Any]


@dataclass(frozen=True)
class StepResult:
    """Outcome of one rule pass."""

    step_name: str
    deltas: Tuple[Delta, ...]
    metrics: Mapping[str, Any]
    state_hash_before: str
    state_hash_after: str
    time_us: int

    @property
    def changed(self) -> bool:
        return bool(self.deltas)


@dataclass
class StepTraceRecorder:
    """In-memory trace accumulator respecting ``trace_level`` semantics."""

    trace_level: str = "none"
    entries: List[StepTraceEntry] = field(default_factory=list)

    def record(self, entry: StepTraceEntry) -> None:
        if self.trace_level == "none":
            return
        self.entries.append(entry)

    def snapshot(self) -> Tuple[StepTraceEntry, ...]:
        return tuple(self.entries)

    def reset(self) -> None:
        self.entries.clear()


_STEP_REGISTRY: Dict[str, StepHandler] = {}


def register_step(name: str, handler: StepHandler) -> None:
    """Register a rule pass under ``name``. Re-registering replaces it."""

    if not name:
        raise ValueError("step name must be a non-empty string")
    _STEP_REGISTRY[name] = handler


def registered_steps() -> Tuple[str, ...]:
    return tuple(_STEP_REGISTRY)


class StepRunner:
    """Runs registered rule passes one at a time and reports what changed."""

    def __init__(
        self,
        *,
        trace_level: str = "none",
        trace_recorder: Optional[StepTraceRecorder] = None,
    ) -> None:
        if trace_level not in TRACE_LEVELS:
            raise ValueError(f"Unsupported trace level: {trace_level!r}")
        self.trace_recorder = trace_recorder or StepTraceRecorder(trace_level=trace_level)

    def run_step(
        self,
        grid: CandidateGrid,
        step_name: str,
        *,
        iteration: int = 1,
        params: Mapping[str, Any] | None = None,
    ) -> StepResult:
        """Apply the pass registered as ``step_name`` to ``grid`` in place.

        Raises :class:`KeyError` for an unknown step; a typo in a rule list
        must not silently turn into a no-op pass.
        """

        try:
            handler = _STEP_REGISTRY[step_name]
        except KeyError:
            raise KeyError(f"Unknown rule pass: {step_name!r}") from None

        before = grid.snapshot()
        hash_before = grid.state_hash()
        started = time.perf_counter_ns()
        metrics = handler(grid, params)
        elapsed_us = (time.perf_counter_ns() - started) // 1000
        deltas = diff_deltas(before, grid.masks)
        hash_after = grid.state_hash() if deltas else hash_before

        metrics_dict: MutableMapping[str, Any] = dict(metrics or {})
        metrics_dict["deltas"] = len(deltas)
        result = StepResult(
            step_name=step_name,
            deltas=deltas,
            metrics=metrics_dict,
            state_hash_before=hash_before,
            state_hash_after=hash_after,
            time_us=int(elapsed_us),
        )
        _LOGGER.debug("iteration %d: %s pass produced %d deltas", iteration, step_name, len(deltas))
        self._record(step_name, iteration, {"status": "ok", **metrics_dict})
        return result

    def _record(self, step_name: str, iteration: int, meta: Mapping[str, Any]) -> None:
        entry = StepTraceEntry(step_name=step_name, iteration=iteration, meta=dict(meta))
        self.trace_recorder.record(entry)


__all__ = [
    "StepHandler",
    "StepResult",
    "StepRunner",
    "StepTraceEntry",
    "StepTraceRecorder",
    "TRACE_LEVELS",
    "register_step",
    "registered_steps",
]
