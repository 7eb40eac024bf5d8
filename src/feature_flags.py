"""Runtime toggles for the rule passes."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping, Tuple

try:  # Python 3.11+
    import tomllib  # type: ignore[attr-defined]
except ModuleNotFoundError:  # pragma: no cover - fallback for older Python
    import tomli as tomllib  # type: ignore[import-untyped]

__all__ = ["enabled_rules", "get_rules_feature", "is_rule_enabled", "known_profiles", "reload"]

_FEATURES_FILENAME = "config/features.toml"
_RULE_ORDER = ("house", "pivot")


def _features_path() -> Path:
    return Path(__file__).resolve().parents[1] / _FEATURES_FILENAME


@lru_cache(maxsize=1)
def _load_features() -> dict[str, Any]:
    path = _features_path()
    if not path.exists():
        return {}
    with path.open("rb") as handle:
        return tomllib.load(handle)


def reload() -> None:
    """Clear the cached feature configuration."""

    _load_features.cache_clear()


def _coerce_bool(value: Any) -> bool | None:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        normalised = value.strip().lower()
        if normalised in {"1", "true", "yes", "on"}:
            return True
        if normalised in {"0", "false", "no", "off"}:
            return False
    return None


def _profiles() -> dict[str, Any]:
    entry = _load_features().get("rules")
    by_profile = entry.get("by_profile") if isinstance(entry, dict) else None
    return by_profile if isinstance(by_profile, dict) else {}


def known_profiles() -> Tuple[str, ...]:
    return tuple(sorted(name for name, block in _profiles().items() if isinstance(block, dict)))


def get_rules_feature(profile: str | None = None) -> dict[str, Any]:
    """Return the merged ``[rules]`` block for the given profile.

    Raises ``ValueError`` when ``profile`` names no ``[rules.by_profile]`` table.
    """

    features = _load_features()
    entry = features.get("rules")
    merged: dict[str, Any] = {}
    if isinstance(entry, dict):
        for key, value in entry.items():
            if key == "by_profile":
                continue
            merged[key] = value

    if profile:
        profile_block = _profiles().get(profile.lower())
        if not isinstance(profile_block, dict):
            known = ", ".join(known_profiles()) or "none"
            raise ValueError(f"unknown rule profile {profile!r} (known: {known})")
        merged.update(profile_block)
    return merged


def is_rule_enabled(
    rule: str,
    env: Mapping[str, str] | None = None,
    *,
    profile: str | None = None,
) -> bool:
    """Return ``True`` when the named rule pass should run.

    Rules are on unless the features file or the environment turns them off.
    """

    feature_block = get_rules_feature(profile)
    enabled = _coerce_bool(feature_block.get(rule, True))
    if enabled is None:
        enabled = True

    if env:
        name = rule.upper()
        for key in (f"CLI_RULE_{name}_ENABLED", f"RULE_{name}_ENABLED"):
            override = _coerce_bool(env.get(key))
            if override is not None:
                enabled = override
                break

    return enabled


def enabled_rules(env: Mapping[str, str] | None = None, *, profile: str | None = None) -> Tuple[str, ...]:
    """Rule pass names to run, in execution order."""

    return tuple(rule for rule in _RULE_ORDER if is_rule_enabled(rule, env, profile=profile))
