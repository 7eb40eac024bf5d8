"""Shared error types for the propagation engine and its adapters."""

from __future__ import annotations


class SudokuError(Exception):
    """Base class for every error raised by this project."""


class OutOfRangeError(SudokuError, ValueError):
    """Raised when a coordinate or digit lies outside ``[0, 8]``."""

    def __init__(self, name: str, value: object) -> None:
        self.name = name
        self.value = value
        super().__init__(f"{name} must be in [0, 8], got {value!r}")


class ContradictionError(SudokuError):
    """Raised when a cell has no candidate left.

    A zero mask can only come from contradictory givens, so the puzzle is
    unsatisfiable as seeded.
    """

    def __init__(self, x: int, y: int, iteration: int | None = None) -> None:
        self.x = x
        self.y = y
        self.iteration = iteration
        where = f"r{y + 1}c{x + 1}"
        message = f"no candidates left at {where}"
        if iteration is not None:
            message += f" after iteration {iteration}"
        super().__init__(message)


class ParseError(SudokuError, ValueError):
    """Raised when puzzle text is malformed. ``line``/``column`` are 1-based."""

    def __init__(self, msg: str, line: int, column: int | None = None) -> None:
        self.msg = msg
        self.line = line
        self.column = column
        location = f"line {line}" if column is None else f"line {line}, column {column}"
        super().__init__(f"{location}: {msg}")


class TraceValidationError(SudokuError, ValueError):
    """Raised when a trace entry or payload violates the SolveTrace contract."""

    def __init__(self, msg: str, path: str = "$") -> None:
        self.msg = msg
        self.path = path
        super().__init__(msg if path == "$" else f"{path}: {msg}")


__all__ = [
    "ContradictionError",
    "OutOfRangeError",
    "ParseError",
    "SudokuError",
    "TraceValidationError",
]
