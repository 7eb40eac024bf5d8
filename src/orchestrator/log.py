"""Light-weight JSONL run logger with rotation support."""

from __future__ import annotations

import hashlib
import json
import threading
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, Sequence

__all__ = [
    "append_event",
    "configure",
    "current_log_path",
    "make_solve_event",
    "new_run_id",
    "puzzle_digest",
]

_DEFAULT_MAX_BYTES = 100 * 1024 * 1024
_LOCK = threading.Lock()
_LOG_DIR = Path("logs/solve")
_MAX_BYTES = _DEFAULT_MAX_BYTES
_CURRENT_PATH: Path | None = None


def configure(base_dir: str | Path, *, max_bytes: int | None = None) -> None:
    """Configure the logger to use ``base_dir`` for all files."""

    global _LOG_DIR, _MAX_BYTES, _CURRENT_PATH
    _LOG_DIR = Path(base_dir)
    _MAX_BYTES = max_bytes or _DEFAULT_MAX_BYTES
    _CURRENT_PATH = None


def _date_prefix() -> str:
    return datetime.now(timezone.utc).strftime("%Y%m%d")


def _resolve_log_path() -> Path:
    global _CURRENT_PATH
    date_dir = _LOG_DIR / _date_prefix()
    date_dir.mkdir(parents=True, exist_ok=True)

    if _CURRENT_PATH is not None and _CURRENT_PATH.parent == date_dir and _CURRENT_PATH.exists():
        if _CURRENT_PATH.stat().st_size < _MAX_BYTES:
            return _CURRENT_PATH

    counter = 0
    while True:
        candidate = date_dir / f"solve_{counter:02d}.jsonl"
        if not candidate.exists() or candidate.stat().st_size < _MAX_BYTES:
            _CURRENT_PATH = candidate
            return candidate
        counter += 1


def append_event(event: Dict[str, Any]) -> Path:
    """Append ``event`` to the active JSONL file and return the file path."""

    payload = dict(event)
    payload.setdefault("ts", datetime.now(timezone.utc).isoformat(timespec="milliseconds"))

    line = json.dumps(payload, sort_keys=True, ensure_ascii=False)
    with _LOCK:
        path = _resolve_log_path()
        with path.open("a", encoding="utf-8") as handle:
            handle.write(line + "\n")
    return path


def current_log_path() -> Path | None:
    """File the last solve event went to, or ``None`` since :func:`configure`."""

    return _CURRENT_PATH


def new_run_id() -> str:
    return f"run-{uuid.uuid4().hex[:12]}"


def puzzle_digest(lines: Sequence[str]) -> str:
    """Digest of the puzzle text, ignoring line endings and trailing blanks."""

    canonical = "\n".join(line.rstrip() for line in lines)
    return f"sha256-{hashlib.sha256(canonical.encode('utf-8')).hexdigest()}"


def make_solve_event(
    event: str,
    *,
    run_id: str,
    puzzle_sha: str,
    givens: int,
    rules: Iterable[str],
    max_iterations: int,
    outcome: Any = None,
    error: BaseException | None = None,
) -> Dict[str, Any]:
    """Build a ``solve.*`` event payload.

    ``outcome`` is a ``SolveOutcome``; ``error`` is set for failed solves.
    """

    payload: Dict[str, Any] = {
        "event": event,
        "run_id": run_id,
        "puzzle_sha": puzzle_sha,
        "givens": int(givens),
        "rules": list(rules),
        "max_iterations": int(max_iterations),
    }
    if outcome is not None:
        payload["result"] = {
            "iterations": int(outcome.iterations),
            "complete": bool(outcome.complete),
            "fixed_point": bool(outcome.fixed_point),
            "unresolved": int(outcome.unresolved),
            "candidates_removed": int(outcome.candidates_removed),
        }
    if error is not None:
        payload["error"] = {"type": type(error).__name__, "message": str(error)}
    return payload
