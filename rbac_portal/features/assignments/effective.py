"""
Access decisions for a user through the roles they actively hold.
"""
from datetime import date
from typing import Iterable, List

from rbac_portal.features.assignments.schemas import User
from rbac_portal.features.assignments.status import is_active
from rbac_portal.features.roles.resolver import authorize
from rbac_portal.features.roles.schemas import AccessContext, Role


def active_roles(user: User, roles: Iterable[Role], as_of: date) -> List[Role]:
    """
    Roles the user actively holds as of the given day, in role order.

    Grants of roles missing from the snapshot are ignored.
    """
    held = {assignment.role_id for assignment in user.roles if is_active(assignment, as_of)}
    return [role for role in roles if role.id in held]


def authorize_user(user: User, roles: Iterable[Role], context: AccessContext, as_of: date) -> bool:
    """True if any actively held role authorizes the context."""
    return any(authorize(role, context) for role in active_roles(user, roles, as_of))
