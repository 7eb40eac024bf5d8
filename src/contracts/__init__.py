"""Error types and the SolveTrace contract."""

from __future__ import annotations

from .errors import (
    ContradictionError,
    OutOfRangeError,
    ParseError,
    SudokuError,
    TraceValidationError,
)

__all__ = [
    "ContradictionError",
    "OutOfRangeError",
    "ParseError",
    "SudokuError",
    "TraceValidationError",
]
