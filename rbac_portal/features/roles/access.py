"""
Application, write-window, day-type and view checks for a role.
"""
from datetime import date, timedelta
from typing import Optional

from rbac_portal.features.roles.constants import ALL, ATTRIBUTES
from rbac_portal.features.roles.schemas import (
    Action,
    FunctionalityAccess,
    Role,
    RolePermission,
)


def new_role(role_id: str, name: str, description: str = "") -> Role:
    """
    Blank role: every attribute present with an empty (deny-all) scope,
    no write restriction, both views, all day types and no applications.
    """
    return Role(
        id=role_id,
        name=name,
        description=description,
        permissions=[RolePermission(attribute=attr, values=[]) for attr in ATTRIBUTES],
        write_restriction_days=None,
        functionality_access=FunctionalityAccess.BOTH,
        day_type_access=[ALL],
        app_access=[],
    )


def has_write_access(role: Role) -> bool:
    return any(Action.WRITE in access.actions for access in role.app_access)


def effective_write_restriction_days(role: Role) -> Optional[int]:
    """
    Write window that applies to the role.

    A stored restriction only counts when some application grants Write;
    otherwise the role is treated as unrestricted (None).
    """
    if not has_write_access(role):
        return None
    return role.write_restriction_days


def can_access_app(role: Role, app_name: str, action: Action = Action.READ) -> bool:
    access = role.app(app_name)
    return access is not None and action in access.actions


def can_write_record(role: Role, app_name: str, record_date: date, as_of: date) -> bool:
    """
    Check whether the role may write a record of the given date in an app.

    With a restriction of N days the record must be dated between
    as_of - N days and as_of inclusive; N = 0 allows only as_of itself.
    """
    if not can_access_app(role, app_name, Action.WRITE):
        return False

    restriction = effective_write_restriction_days(role)
    if restriction is None:
        return True

    return as_of - timedelta(days=restriction) <= record_date <= as_of


def allows_day_type(role: Role, day_type: str) -> bool:
    return ALL in role.day_type_access or day_type in role.day_type_access


def allows_functionality(role: Role, view: FunctionalityAccess) -> bool:
    if role.functionality_access == FunctionalityAccess.BOTH:
        return True
    return role.functionality_access == view
