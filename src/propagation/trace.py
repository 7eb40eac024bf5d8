"""SolveTrace: an ordered record of what every rule pass eliminated."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Iterable, List, Mapping, MutableSequence, Sequence

from contracts.errors import TraceValidationError

from .delta import Delta, DeltaOp, canonicalise_deltas


@dataclass(frozen=True, slots=True)
class SolveTraceEntry:
    """One rule pass within one iteration."""

    step: int
    iteration: int
    technique_id: str
    deltas: Sequence[Delta]
    placements: int
    candidates_removed: int
    state_hash_before: str
    state_hash_after: str
    time_us: int | None = None
    note: str | None = None

    def __post_init__(self) -> None:
        if self.step < 1:
            raise TraceValidationError("step must be >= 1", "$.step")
        if self.iteration < 1:
            raise TraceValidationError("iteration must be >= 1", "$.iteration")
        if not self.technique_id:
            raise TraceValidationError("technique_id must be a non-empty string", "$.technique_id")
        if self.placements < 0:
            raise TraceValidationError("placements must be >= 0", "$.placements")
        if self.candidates_removed < 0:
            raise TraceValidationError("candidates_removed must be >= 0", "$.candidates_removed")
        if self.time_us is not None and self.time_us < 0:
            raise TraceValidationError("time_us must be >= 0 when provided", "$.time_us")

    @classmethod
    def from_deltas(
        cls,
        *,
        step: int,
        iteration: int,
        technique_id: str,
        deltas: Sequence[Delta],
        state_hash_before: str,
        state_hash_after: str,
        time_us: int | None = None,
        note: str | None = None,
    ) -> "SolveTraceEntry":
        """Build an entry, deriving the counters from ``deltas``."""

        placements = sum(1 for delta in deltas if delta.op is DeltaOp.PLACE)
        return cls(
            step=step,
            iteration=iteration,
            technique_id=technique_id,
            deltas=tuple(deltas),
            placements=placements,
            candidates_removed=len(deltas) - placements,
            state_hash_before=state_hash_before,
            state_hash_after=state_hash_after,
            time_us=time_us,
            note=note,
        )

    @property
    def changed(self) -> bool:
        return self.state_hash_before != self.state_hash_after

    def to_payload(self, *, include_timing: bool = True) -> dict:
        payload = {
            "step": int(self.step),
            "iteration": int(self.iteration),
            "technique_id": str(self.technique_id),
            "deltas": [delta.to_payload() for delta in canonicalise_deltas(self.deltas)],
            "placements": int(self.placements),
            "candidates_removed": int(self.candidates_removed),
            "state_hash_before": str(self.state_hash_before),
            "state_hash_after": str(self.state_hash_after),
            "time_us": None if self.time_us is None or not include_timing else int(self.time_us),
        }
        if self.note is not None:
            payload["note"] = str(self.note)
        return payload


@dataclass
class SolveTrace:
    """Mutable trace accumulator producing JSON payloads."""

    entries: MutableSequence[SolveTraceEntry] = field(default_factory=list)

    def append(self, entry: SolveTraceEntry | Mapping[str, object]) -> None:
        if isinstance(entry, Mapping):
            entry = SolveTraceEntry(**entry)
        if self.entries and entry.step <= self.entries[-1].step:
            raise TraceValidationError("trace steps must be strictly increasing", "$.step")
        self.entries.append(entry)

    def extend(self, entries: Iterable[SolveTraceEntry | Mapping[str, object]]) -> None:
        for entry in entries:
            self.append(entry)

    def next_step(self) -> int:
        return self.entries[-1].step + 1 if self.entries else 1

    def snapshot(self) -> List[SolveTraceEntry]:
        return list(self.entries)

    def to_payload(self, *, include_timing: bool = True) -> list:
        return [entry.to_payload(include_timing=include_timing) for entry in self.entries]

    def to_json(self, *, indent: int | None = None, include_timing: bool = True) -> str:
        payload = self.to_payload(include_timing=include_timing)
        return json.dumps(payload, ensure_ascii=False, separators=(",", ":"), indent=indent)


__all__ = ["SolveTrace", "SolveTraceEntry"]
