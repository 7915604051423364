"""
Access decision of a role against a resource context.

A role authorizes a context only when every one of the six attribute
scopes matches (conjunction).
"""
from typing import List

from rbac_portal.core.exceptions import ConfigurationError
from rbac_portal.features.roles.constants import ATTRIBUTES, Attribute
from rbac_portal.features.roles.schemas import AccessContext, Role
from rbac_portal.features.roles.scope import matches
from rbac_portal.utils import get_logger


log = get_logger(__name__)


def validate_role_permissions(role: Role) -> None:
    """
    Ensure the role declares exactly one permission entry per attribute.

    Raises:
        ConfigurationError: an attribute is missing or declared twice
    """
    declared = [permission.attribute for permission in role.permissions]

    missing = [attr.value for attr in ATTRIBUTES if attr not in declared]
    if missing:
        raise ConfigurationError(
            f"Role {role.id} has no permission entry for: {', '.join(missing)}"
        )

    duplicated = sorted({attr.value for attr in declared if declared.count(attr) > 1})
    if duplicated:
        raise ConfigurationError(
            f"Role {role.id} declares more than one permission entry for: {', '.join(duplicated)}"
        )


def denied_attributes(role: Role, context: AccessContext) -> List[Attribute]:
    """
    List the attributes whose scope does not match the context.

    An empty list means the role authorizes the context.
    """
    validate_role_permissions(role)

    denied = []
    for attribute in ATTRIBUTES:
        permission = role.permission_for(attribute)
        if not matches(
            permission.values,
            context.values.get(attribute),
            attribute,
            context.caller_values.get(attribute),
        ):
            denied.append(attribute)
    return denied


def authorize(role: Role, context: AccessContext) -> bool:
    """
    Decide whether the role grants access to the context.

    Raises:
        ConfigurationError: the role is missing a permission entry
        AmbiguousDynamicScopeError: a Dynamic scope lacks the caller's own value
    """
    # Every attribute is evaluated, so a missing caller value always raises
    denied = denied_attributes(role, context)
    if denied:
        log.debug(f"Role {role.id} denied on: {', '.join(attr.value for attr in denied)}")
        return False

    return True
