"""Puzzle pipeline: read text, seed a grid, propagate, render."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from contracts.errors import ContradictionError, ParseError
from contracts.trace_schema import validate_trace
from feature_flags import enabled_rules, known_profiles
from project_config import SolverSettings, get_section, resolve_solver_settings
from propagation import CandidateGrid, SolveOutcome, SolveTrace, StepRunner, StepTraceEntry, run_solver
from puzzle_io import CellValue, format_status, inspect, parse_into, view

from . import log as run_log

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineResult:
    """Everything a caller needs to report a solve."""

    run_id: str
    grid: CandidateGrid
    givens: Tuple[CellValue, ...]
    rules: Tuple[str, ...]
    outcome: SolveOutcome
    initial_view: str
    final_view: str
    status: str
    candidates_view: str
    trace: Optional[SolveTrace]
    step_entries: Tuple[StepTraceEntry, ...]

    @property
    def complete(self) -> bool:
        return self.outcome.complete

    @property
    def iterations(self) -> int:
        return self.outcome.iterations

    def render(self) -> str:
        """Initial board, final board, status line, candidate grid."""

        return self.initial_view + self.final_view + self.status + "\n" + self.candidates_view


def _log_settings(log_dir: str | Path | None) -> Tuple[bool, Path | None, int | None]:
    if log_dir is not None:
        return True, Path(log_dir), None
    section = get_section("log", {})
    if not isinstance(section, dict) or not section.get("enabled", False):
        return False, None, None
    max_bytes = section.get("max_bytes")
    return True, Path(section.get("dir", "logs/solve")), int(max_bytes) if max_bytes else None


def run_pipeline(
    lines: Iterable[str],
    settings: SolverSettings | None = None,
    *,
    profile: str | None = None,
    env: Mapping[str, str] | None = None,
    record_trace: bool = False,
    log_dir: str | Path | None = None,
) -> PipelineResult:
    """Solve the puzzle given as text lines.

    ``settings`` defaults to :func:`resolve_solver_settings` for ``env``. A
    :class:`SolveTrace` is collected when ``record_trace`` is set or the trace
    level is not ``"none"``. Raises :class:`ParseError` for malformed text and
    :class:`ContradictionError` for unsatisfiable givens; the latter is also
    written to the run log when logging is enabled. An unknown ``profile``
    raises ``ValueError`` before the puzzle is read.
    """

    settings = settings or resolve_solver_settings(env)
    rules = enabled_rules(env, profile=profile)
    puzzle_lines = list(lines)
    run_id = run_log.new_run_id()

    grid = CandidateGrid()
    givens = tuple(parse_into(puzzle_lines, grid))
    initial_view = view(grid)

    runner = StepRunner(trace_level=settings.trace_level)
    trace = SolveTrace() if record_trace or settings.trace_level != "none" else None
    _LOGGER.info("%s: %d givens, rules=%s", run_id, len(givens), ",".join(rules) or "-")

    logging_enabled, directory, max_bytes = _log_settings(log_dir)
    if logging_enabled and directory is not None:
        run_log.configure(directory, max_bytes=max_bytes)
    event_fields: Dict[str, Any] = {
        "run_id": run_id,
        "puzzle_sha": run_log.puzzle_digest(puzzle_lines[:9]),
        "givens": len(givens),
        "rules": rules,
        "max_iterations": settings.max_iterations,
    }

    try:
        outcome = run_solver(
            grid,
            settings.max_iterations,
            rules=rules,
            runner=runner,
            trace=trace,
            stop_on_fixed_point=settings.stop_on_fixed_point,
        )
    except ContradictionError as exc:
        if logging_enabled:
            run_log.append_event(run_log.make_solve_event("solve.contradiction", error=exc, **event_fields))
        raise

    if logging_enabled:
        run_log.append_event(run_log.make_solve_event("solve.completed", outcome=outcome, **event_fields))

    return PipelineResult(
        run_id=run_id,
        grid=grid,
        givens=givens,
        rules=rules,
        outcome=outcome,
        initial_view=initial_view,
        final_view=view(grid),
        status=format_status(outcome.complete, outcome.iterations),
        candidates_view=inspect(grid),
        trace=trace,
        step_entries=runner.trace_recorder.snapshot(),
    )


def write_trace(trace: SolveTrace, path: str | Path) -> Path:
    """Validate ``trace`` against the SolveTrace schema and write it as JSON."""

    validate_trace(trace.to_payload())
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(trace.to_json(indent=2) + "\n", encoding="utf-8")
    return target


def _read_puzzle(source: str) -> List[str]:
    if source == "-":
        return sys.stdin.read().splitlines()
    return Path(source).read_text(encoding="utf-8").splitlines()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Narrow a Sudoku puzzle by constraint propagation and print the result.",
    )
    parser.add_argument(
        "puzzle",
        nargs="?",
        default="-",
        help="Puzzle file: 9 lines of 9 characters, space or 1-9. Defaults to stdin.",
    )
    parser.add_argument(
        "--max-iterations",
        dest="max_iterations",
        type=int,
        help="Iteration budget. Overrides config and SOLVER_MAX_ITERATIONS.",
    )
    parser.add_argument(
        "--stop-on-fixed-point",
        dest="stop_on_fixed_point",
        action="store_true",
        help="Report the iteration at which nothing changed instead of the full budget.",
    )
    parser.set_defaults(stop_on_fixed_point=None)
    parser.add_argument(
        "--profile",
        help="Rule profile from config/features.toml (e.g. 'classic', 'houses-only').",
    )
    parser.add_argument(
        "--trace-out",
        dest="trace_out",
        help="Write a SolveTrace JSON document to this path.",
    )
    parser.add_argument(
        "--log-dir",
        dest="log_dir",
        help="Append a JSONL run event under this directory.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase diagnostic logging on stderr (-v info, -vv debug).",
    )
    return parser


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def main(argv: Optional[List[str]] = None, env: Mapping[str, str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    env_map = dict(env) if env is not None else dict(os.environ)
    overrides = {
        "max_iterations": args.max_iterations,
        "stop_on_fixed_point": args.stop_on_fixed_point,
    }
    try:
        settings = resolve_solver_settings(env_map, overrides)
    except ValueError as exc:
        parser.error(str(exc))
    if args.profile and args.profile.lower() not in known_profiles():
        parser.error(f"unknown rule profile {args.profile!r} (choose from {', '.join(known_profiles())})")

    try:
        lines = _read_puzzle(args.puzzle)
    except OSError as exc:
        parser.error(f"cannot read puzzle: {exc}")

    try:
        result = run_pipeline(
            lines,
            settings,
            profile=args.profile,
            env=env_map,
            record_trace=args.trace_out is not None,
            log_dir=args.log_dir,
        )
    except ParseError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    except ContradictionError as exc:
        print(f"CONTRADICTION: {exc}", file=sys.stderr)
        return 1

    sys.stdout.write(result.render())
    if args.trace_out is not None and result.trace is not None:
        write_trace(result.trace, args.trace_out)
    return 0


__all__ = ["PipelineResult", "build_parser", "main", "run_pipeline", "write_trace"]


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
