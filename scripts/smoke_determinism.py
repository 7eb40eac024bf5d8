#!/usr/bin/env python3
"""Smoke-test that repeated solves of the same puzzle are identical."""

from __future__ import annotations

import hashlib
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from contracts.trace_schema import validate_trace
from orchestrator import run_pipeline
from project_config import SolverSettings

_SAMPLES = ROOT / "samples"


def _digest(puzzle: Path) -> tuple[str, str]:
    lines = puzzle.read_text(encoding="utf-8").splitlines()
    result = run_pipeline(lines, SolverSettings(max_iterations=50), record_trace=True)
    assert result.trace is not None
    payload = result.trace.to_payload(include_timing=False)
    validate_trace(payload)
    trace_sha = hashlib.sha256(result.trace.to_json(include_timing=False).encode("utf-8")).hexdigest()
    return result.grid.state_hash(), trace_sha


def main() -> int:
    puzzles = sorted(_SAMPLES.glob("*.txt"))
    if not puzzles:
        print(f"no sample puzzles found under {_SAMPLES}")
        return 1

    for puzzle in puzzles:
        first = _digest(puzzle)
        second = _digest(puzzle)
        if first != second:
            print(f"determinism failed for {puzzle.name}: {first} vs {second}")
            return 1
        print(f"{puzzle.name}: grid {first[0]} trace sha256-{first[1]}")

    print("Determinism smoke-test passed.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
