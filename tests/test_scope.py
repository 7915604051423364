import pytest

from rbac_portal.core.exceptions import AmbiguousDynamicScopeError
from rbac_portal.features.roles.constants import Attribute
from rbac_portal.features.roles.scope import matches


@pytest.mark.parametrize("value", ["ATL", "BLD", "NOT-A-SHIP", "", None])
def test_all_matches_any_value(value):
    assert matches(["All"], value, Attribute.SHIP) is True


def test_all_takes_precedence_over_dynamic_without_caller_value():
    # No caller value is needed once "All" is in scope
    assert matches(["Dynamic", "All", "BLD"], "ATL", Attribute.SHIP) is True


@pytest.mark.parametrize("value", ["ATL", "All", "Dynamic", None])
def test_empty_scope_denies(value):
    assert matches([], value, Attribute.SHIP, caller_own_value="ATL") is False


def test_literal_values_are_alternatives():
    scope = ["Catering", "Nautical"]
    assert matches(scope, "Catering", Attribute.FUNCTION) is True
    assert matches(scope, "Nautical", Attribute.FUNCTION) is True
    assert matches(scope, "Hotel", Attribute.FUNCTION) is False


def test_literal_match_is_exact():
    assert matches(["ATL"], "atl", Attribute.SHIP) is False
    assert matches(["ATL"], "ATL ", Attribute.SHIP) is False


def test_missing_value_never_matches_literal():
    assert matches(["ATL"], None, Attribute.SHIP) is False


def test_dynamic_matches_callers_own_value():
    assert matches(["Dynamic"], "ATL", Attribute.SHIP, caller_own_value="ATL") is True
    assert matches(["Dynamic"], "BLD", Attribute.SHIP, caller_own_value="ATL") is False


def test_dynamic_without_caller_value_fails_loudly():
    with pytest.raises(AmbiguousDynamicScopeError, match="Ship"):
        matches(["Dynamic"], "ATL", Attribute.SHIP)


def test_dynamic_does_not_match_missing_value():
    assert matches(["Dynamic"], None, Attribute.SHIP, caller_own_value="ATL") is False


def test_dynamic_with_literal_values():
    scope = ["Dynamic", "BLD"]
    assert matches(scope, "ATL", Attribute.SHIP, caller_own_value="ATL") is True
    assert matches(scope, "BLD", Attribute.SHIP, caller_own_value="ATL") is True
    assert matches(scope, "BEY", Attribute.SHIP, caller_own_value="ATL") is False
