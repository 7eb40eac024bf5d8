import pytest

from feature_flags import (
    enabled_rules,
    get_rules_feature,
    is_rule_enabled,
    known_profiles,
    reload as reload_features,
)


def setup_function():
    reload_features()


def test_both_rules_enabled_by_default():
    assert is_rule_enabled("house", {}) is True
    assert is_rule_enabled("pivot", {}) is True
    assert enabled_rules() == ("house", "pivot")


def test_rule_can_be_overridden_via_env():
    assert is_rule_enabled("pivot", {"RULE_PIVOT_ENABLED": "off"}) is False
    assert is_rule_enabled("pivot", {"CLI_RULE_PIVOT_ENABLED": "1", "RULE_PIVOT_ENABLED": "0"}) is True
    assert enabled_rules({"RULE_HOUSE_ENABLED": "false"}) == ("pivot",)


def test_unparseable_override_is_ignored():
    assert is_rule_enabled("house", {"RULE_HOUSE_ENABLED": "sometimes"}) is True


def test_profile_overrides_merge():
    assert get_rules_feature("houses-only")["pivot"] is False
    assert get_rules_feature("houses-only")["house"] is True
    assert enabled_rules(profile="houses-only") == ("house",)
    assert enabled_rules(profile="classic") == ("house", "pivot")
    assert enabled_rules(profile="Houses-Only") == ("house",)


def test_unknown_profile_is_rejected():
    assert known_profiles() == ("classic", "houses-only")
    with pytest.raises(ValueError, match="houses_only"):
        enabled_rules({}, profile="houses_only")
    with pytest.raises(ValueError):
        get_rules_feature("unknown")
