from datetime import date, timedelta

import pytest
from pydantic import ValidationError

from rbac_portal.features.roles.access import (
    allows_day_type,
    allows_functionality,
    can_access_app,
    can_write_record,
    effective_write_restriction_days,
    has_write_access,
    new_role,
)
from rbac_portal.features.roles.constants import ATTRIBUTES
from rbac_portal.features.roles.schemas import Action, AppAccess, FunctionalityAccess, Role


AS_OF = date(2025, 1, 15)


def _writer(days) -> Role:
    return Role(
        id="role-w",
        name="Writer",
        write_restriction_days=days,
        app_access=[AppAccess(app_name="VPP", actions=[Action.READ, Action.WRITE])],
    )


# ============================================================================
# Role defaults and validation
# ============================================================================

def test_new_role_defaults():
    role = new_role("role-new", "Draft", "Not configured yet")

    assert [p.attribute for p in role.permissions] == list(ATTRIBUTES)
    assert all(p.values == [] for p in role.permissions)
    assert role.write_restriction_days is None
    assert role.functionality_access == FunctionalityAccess.BOTH
    assert role.day_type_access == ["All"]
    assert role.app_access == []


def test_all_day_type_subsumes_other_codes():
    role = Role(id="r", name="R", day_type_access=["W", "All", "T"])
    assert role.day_type_access == ["All"]


def test_unknown_day_type_rejected():
    with pytest.raises(ValidationError):
        Role(id="r", name="R", day_type_access=["W", "Weekend"])


def test_negative_write_restriction_rejected():
    with pytest.raises(ValidationError):
        _writer(-1)


def test_app_without_actions_is_dropped():
    role = Role(
        id="r",
        name="R",
        app_access=[
            AppAccess(app_name="VPP", actions=[]),
            AppAccess(app_name="Work Order", actions=[Action.READ, Action.READ]),
        ],
    )

    assert [access.app_name for access in role.app_access] == ["Work Order"]
    assert role.app("Work Order").actions == [Action.READ]


def test_entries_for_same_app_are_merged():
    role = Role(
        id="r",
        name="R",
        app_access=[
            AppAccess(app_name="VPP", actions=[Action.READ]),
            AppAccess(app_name="Work Order", actions=[Action.READ]),
            AppAccess(app_name="VPP", actions=[Action.WRITE, Action.READ]),
        ],
    )

    assert [access.app_name for access in role.app_access] == ["VPP", "Work Order"]
    assert role.app("VPP").actions == [Action.READ, Action.WRITE]
    assert has_write_access(role) is True
    assert can_access_app(role, "VPP", Action.WRITE) is True


# ============================================================================
# Applications and write window
# ============================================================================

def test_app_access(roles_by_id):
    corporate_captain = roles_by_id["role-3"]

    assert can_access_app(corporate_captain, "License View") is True
    assert can_access_app(corporate_captain, "License View", Action.WRITE) is False
    assert can_access_app(corporate_captain, "VPP") is False


def test_write_restriction_needs_write_access():
    read_only = Role(
        id="r",
        name="R",
        write_restriction_days=5,
        app_access=[AppAccess(app_name="VPP", actions=[Action.READ])],
    )

    assert has_write_access(read_only) is False
    assert effective_write_restriction_days(read_only) is None
    assert effective_write_restriction_days(_writer(5)) == 5


def test_write_window_in_days(roles_by_id):
    captain = roles_by_id["role-1"]

    assert can_write_record(captain, "VPP", AS_OF - timedelta(days=30), AS_OF) is True
    assert can_write_record(captain, "VPP", AS_OF - timedelta(days=31), AS_OF) is False
    assert can_write_record(captain, "VPP", AS_OF + timedelta(days=3), AS_OF) is False


def test_zero_day_window_allows_today_only():
    role = _writer(0)

    assert can_write_record(role, "VPP", AS_OF, AS_OF) is True
    assert can_write_record(role, "VPP", AS_OF - timedelta(days=1), AS_OF) is False
    assert can_write_record(role, "VPP", AS_OF + timedelta(days=1), AS_OF) is False
    assert can_write_record(role, "VPP", AS_OF + timedelta(days=365), AS_OF) is False


def test_unrestricted_write(roles_by_id):
    assert can_write_record(roles_by_id["role-5"], "VPP", date(2000, 1, 1), AS_OF) is True


def test_no_write_without_write_action(roles_by_id):
    assert can_write_record(roles_by_id["role-3"], "License View", AS_OF, AS_OF) is False


# ============================================================================
# Day types and views
# ============================================================================

def test_day_type_access(roles_by_id):
    hotel_manager = roles_by_id["role-2"]

    assert allows_day_type(hotel_manager, "W") is True
    assert allows_day_type(hotel_manager, "T") is False
    assert allows_day_type(roles_by_id["role-1"], "T") is True


def test_functionality_access(roles_by_id):
    hotel_manager = roles_by_id["role-2"]

    assert allows_functionality(hotel_manager, FunctionalityAccess.PLANNING_VIEW) is True
    assert allows_functionality(hotel_manager, FunctionalityAccess.SCHEDULING_VIEW) is False
    assert allows_functionality(roles_by_id["role-1"], FunctionalityAccess.SCHEDULING_VIEW) is True
