"""JSON Schema validation for SolveTrace payloads."""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List

import jsonschema

from .errors import TraceValidationError

_SCHEMA_PATH = Path(__file__).resolve().parent / "schemas" / "solve_trace.schema.json"


@lru_cache(maxsize=1)
def load_schema() -> Dict[str, Any]:
    """Load and cache the SolveTrace schema."""

    try:
        return json.loads(_SCHEMA_PATH.read_text("utf-8"))
    except FileNotFoundError as exc:  # pragma: no cover - packaging error
        raise RuntimeError(f"SolveTrace schema is missing at '{_SCHEMA_PATH}'") from exc


def _jsonschema_path(exc: jsonschema.ValidationError) -> str:
    path = list(exc.absolute_path)
    if not path:
        return "$"
    components: List[str] = ["$"]
    for part in path:
        if isinstance(part, int):
            components.append(f"[{part}]")
        else:
            components.append(f".{part}")
    return "".join(components)


def validate_trace(payload: Any) -> None:
    """Validate a decoded trace payload, raising :class:`TraceValidationError`.

    Beyond the schema, steps must be strictly increasing and the
    ``placements``/``candidates_removed`` counters must agree with the deltas.
    """

    schema = load_schema()
    Validator = jsonschema.validators.validator_for(schema)
    Validator.check_schema(schema)
    validator = Validator(schema)
    error = jsonschema.exceptions.best_match(validator.iter_errors(payload))
    if error is not None:
        raise TraceValidationError(error.message, _jsonschema_path(error))

    previous = 0
    for position, entry in enumerate(payload):
        if entry["step"] <= previous:
            raise TraceValidationError("trace steps must be strictly increasing", f"$[{position}].step")
        previous = entry["step"]
        places = sum(1 for delta in entry["deltas"] if delta["op"] == "PLACE")
        if places != entry["placements"]:
            raise TraceValidationError("placements does not match PLACE deltas", f"$[{position}].placements")
        if len(entry["deltas"]) - places != entry["candidates_removed"]:
            raise TraceValidationError(
                "candidates_removed does not match ELIM deltas",
                f"$[{position}].candidates_removed",
            )


def validate_trace_json(text: str) -> None:
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise TraceValidationError(f"invalid JSON: {exc.msg}") from exc
    validate_trace(payload)


__all__ = ["load_schema", "validate_trace", "validate_trace_json"]
