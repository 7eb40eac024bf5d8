"""Utility helpers for loading project-wide configuration."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Mapping

try:  # Python 3.11+
    import tomllib  # type: ignore[attr-defined]
except ModuleNotFoundError:  # pragma: no cover - fallback for older Python
    import tomli as tomllib  # type: ignore[import-untyped]


_CONFIG_FILENAME = "config.toml"

_DEFAULT_MAX_ITERATIONS = 1000
_TRACE_LEVELS = ("none", "steps")
_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _config_path() -> Path:
    return Path(__file__).resolve().parents[1] / _CONFIG_FILENAME


@lru_cache(maxsize=1)
def get_config() -> Dict[str, Any]:
    """Load and cache the project configuration as a dictionary."""
    path = _config_path()
    try:
        with path.open("rb") as fh:
            return tomllib.load(fh)
    except FileNotFoundError as exc:  # pragma: no cover - defensive guard
        raise RuntimeError(
            f"Configuration file '{_CONFIG_FILENAME}' was not found next to the project root"
        ) from exc


def reload() -> None:
    """Clear the cached configuration."""

    get_config.cache_clear()


def get_section(path: str, default: Any = None) -> Any:
    """Retrieve a nested configuration value using dotted notation."""

    data: Any = get_config()
    for part in path.split("."):
        if isinstance(data, dict) and part in data:
            data = data[part]
        else:
            if default is not None:
                return default
            raise KeyError(f"Configuration path '{path}' not found")
    return data


@dataclass(frozen=True)
class SolverSettings:
    """Resolved knobs for one solve."""

    max_iterations: int = _DEFAULT_MAX_ITERATIONS
    stop_on_fixed_point: bool = False
    trace_level: str = "none"


def _coerce_int(name: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    try:
        result = int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{name} must be an integer, got {value!r}") from exc
    if result < 0:
        raise ValueError(f"{name} must be >= 0, got {result}")
    return result


def _coerce_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        normalised = value.strip().lower()
        if normalised in _TRUE:
            return True
        if normalised in _FALSE:
            return False
    raise ValueError(f"{name} must be a boolean, got {value!r}")


def _coerce_trace_level(name: str, value: Any) -> str:
    level = str(value).strip().lower()
    if level not in _TRACE_LEVELS:
        raise ValueError(f"{name} must be one of {', '.join(_TRACE_LEVELS)}, got {value!r}")
    return level


_FIELDS = (
    ("max_iterations", "solver.max_iterations", "SOLVER_MAX_ITERATIONS", _coerce_int),
    ("stop_on_fixed_point", "solver.stop_on_fixed_point", "SOLVER_STOP_ON_FIXED_POINT", _coerce_bool),
    ("trace_level", "trace.level", "SOLVER_TRACE_LEVEL", _coerce_trace_level),
)


def resolve_solver_settings(
    env: Mapping[str, str] | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> SolverSettings:
    """Merge TOML, environment and explicit overrides (highest wins).

    ``overrides`` normally comes from command line flags; ``None`` values in
    it are ignored so unset flags fall through to the environment.
    """

    defaults = SolverSettings()
    resolved: Dict[str, Any] = {}
    for field_name, toml_path, env_key, coerce in _FIELDS:
        value: Any = getattr(defaults, field_name)
        try:
            value = get_section(toml_path)
        except KeyError:
            pass
        if env and env.get(env_key) not in (None, ""):
            value = env[env_key]
        if overrides and overrides.get(field_name) is not None:
            value = overrides[field_name]
        resolved[field_name] = coerce(field_name, value)
    return SolverSettings(**resolved)


__all__ = ["SolverSettings", "get_config", "get_section", "reload", "resolve_solver_settings"]
