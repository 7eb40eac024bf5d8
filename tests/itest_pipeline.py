from __future__ import annotations

import json
from pathlib import Path

import pytest

from contracts.errors import ContradictionError, ParseError
from contracts.trace_schema import validate_trace_json
from orchestrator import log as run_log
from orchestrator import main, run_pipeline
from project_config import SolverSettings

_ROOT = Path(__file__).resolve().parents[1]


def _easy_lines() -> list[str]:
    return (_ROOT / "samples" / "easy.txt").read_text(encoding="utf-8").splitlines()


def _read_events(log_dir: Path) -> list[dict]:
    path = run_log.current_log_path()
    assert path is not None
    assert path.parent.parent == log_dir
    assert sorted(log_dir.rglob("*.jsonl")) == [path]
    return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]


@pytest.fixture(autouse=True)
def isolated_log(tmp_path):
    run_log.configure(tmp_path / "default-log")
    assert run_log.current_log_path() is None
    return tmp_path


def test_pipeline_solves_sample():
    result = run_pipeline(_easy_lines(), SolverSettings(max_iterations=100))

    assert result.complete
    assert len(result.givens) == 30
    assert result.rules == ("house", "pivot")
    assert result.status == f"COMPLETE after {result.iterations} iterations."
    assert result.initial_view != result.final_view
    assert "| 5  3  4 | 6  7  8 | 9  1  2 |" in result.final_view
    assert result.trace is None
    rendered = result.render()
    assert rendered.startswith(result.initial_view)
    assert result.status + "\n" in rendered
    assert rendered.endswith(result.candidates_view)


def test_pipeline_writes_run_event(tmp_path):
    log_dir = tmp_path / "events"
    result = run_pipeline(_easy_lines(), SolverSettings(max_iterations=100), log_dir=log_dir)

    events = _read_events(log_dir)
    assert len(events) == 1
    event = events[0]
    assert event["event"] == "solve.completed"
    assert event["run_id"] == result.run_id
    assert event["givens"] == 30
    assert event["puzzle_sha"].startswith("sha256-")
    assert event["result"]["complete"] is True
    assert event["result"]["iterations"] == result.iterations
    assert "ts" in event


def test_pipeline_logs_contradiction(tmp_path):
    lines = ["11"] + [""] * 8
    log_dir = tmp_path / "events"
    with pytest.raises(ContradictionError):
        run_pipeline(lines, SolverSettings(max_iterations=10), log_dir=log_dir)

    events = _read_events(log_dir)
    assert events[0]["event"] == "solve.contradiction"
    assert events[0]["error"]["type"] == "ContradictionError"


def test_pipeline_rejects_bad_text():
    with pytest.raises(ParseError):
        run_pipeline(["abc"] + [""] * 8, SolverSettings(max_iterations=10))


def test_houses_only_profile_and_trace_level():
    settings = SolverSettings(max_iterations=100, trace_level="steps")
    result = run_pipeline(_easy_lines(), settings, profile="houses-only")

    assert result.rules == ("house",)
    assert result.trace is not None
    assert {entry.technique_id for entry in result.trace.snapshot()} == {"house"}
    assert len(result.step_entries) == len(result.trace.snapshot())


def test_env_disables_pivot():
    result = run_pipeline(
        _easy_lines(),
        SolverSettings(max_iterations=100),
        env={"RULE_PIVOT_ENABLED": "0"},
    )
    assert result.rules == ("house",)


def test_cli_prints_views_and_status(tmp_path, capsys):
    puzzle = tmp_path / "puzzle.txt"
    puzzle.write_text("\n".join(_easy_lines()) + "\n", encoding="utf-8")
    trace_path = tmp_path / "out" / "trace.json"

    code = main([str(puzzle), "--max-iterations", "100", "--trace-out", str(trace_path)], env={})

    assert code == 0
    out = capsys.readouterr().out
    lines = out.splitlines()
    assert lines[0] == "-" * 31
    assert any(line.startswith("COMPLETE after ") for line in lines)
    assert lines[-1] == "-" * 121
    validate_trace_json(trace_path.read_text(encoding="utf-8"))


def test_cli_reports_incomplete_puzzle(tmp_path, capsys):
    puzzle = tmp_path / "puzzle.txt"
    puzzle.write_text("\n" * 4 + "    5\n" + "\n" * 4, encoding="utf-8")

    code = main([str(puzzle), "--max-iterations", "12"], env={})

    assert code == 0
    assert "NOT COMPLETE after 12 iterations." in capsys.readouterr().out


def test_cli_stop_on_fixed_point(tmp_path, capsys):
    puzzle = tmp_path / "puzzle.txt"
    puzzle.write_text("\n" * 4 + "    5\n" + "\n" * 4, encoding="utf-8")

    code = main([str(puzzle), "--stop-on-fixed-point"], env={})

    assert code == 0
    assert "NOT COMPLETE after 2 iterations." in capsys.readouterr().out


def test_cli_parse_error_exit_code(tmp_path, capsys):
    puzzle = tmp_path / "puzzle.txt"
    puzzle.write_text("12?\n", encoding="utf-8")

    assert main([str(puzzle)], env={}) == 2
    assert "line 1, column 3" in capsys.readouterr().err


def test_cli_contradiction_exit_code(tmp_path, capsys):
    puzzle = tmp_path / "puzzle.txt"
    puzzle.write_text("11\n" + "\n" * 8, encoding="utf-8")

    assert main([str(puzzle), "--max-iterations", "5"], env={}) == 1
    assert "CONTRADICTION" in capsys.readouterr().err


def test_pipeline_rejects_unknown_profile():
    with pytest.raises(ValueError, match="houses_only"):
        run_pipeline(_easy_lines(), SolverSettings(max_iterations=10), profile="houses_only")


def test_cli_rejects_unknown_profile(tmp_path, capsys):
    puzzle = tmp_path / "puzzle.txt"
    puzzle.write_text("\n".join(_easy_lines()) + "\n", encoding="utf-8")
    with pytest.raises(SystemExit) as excinfo:
        main([str(puzzle), "--profile", "houses_only"], env={})
    assert excinfo.value.code == 2
    assert "houses-only" in capsys.readouterr().err


def test_cli_rejects_bad_environment(tmp_path):
    puzzle = tmp_path / "puzzle.txt"
    puzzle.write_text("\n" * 9, encoding="utf-8")
    with pytest.raises(SystemExit) as excinfo:
        main([str(puzzle)], env={"SOLVER_MAX_ITERATIONS": "lots"})
    assert excinfo.value.code == 2
