"""
Evaluation of a single attribute scope against a value.
"""
from typing import Optional, Sequence

from rbac_portal.core.exceptions import AmbiguousDynamicScopeError
from rbac_portal.features.roles.constants import ALL, DYNAMIC, Attribute


def matches(
    scope_values: Sequence[str],
    value: Optional[str],
    attribute: Attribute,
    caller_own_value: Optional[str] = None,
) -> bool:
    """
    Check whether a value falls within an attribute scope.

    Args:
        scope_values: Scope tokens of the role for this attribute
        value: The resource's value for the attribute
        attribute: Attribute being evaluated, named in errors
        caller_own_value: The caller's own value for the attribute,
            required only when the scope contains "Dynamic"

    Returns:
        True if "All" is in scope, if "Dynamic" is in scope and the value
        equals the caller's own value, or if the value is listed literally.
        An empty scope never matches.

    Raises:
        AmbiguousDynamicScopeError: "Dynamic" has to be evaluated but the
            caller's own value is unknown
    """
    if ALL in scope_values:
        return True

    if not scope_values:
        return False

    if DYNAMIC in scope_values:
        if caller_own_value is None:
            raise AmbiguousDynamicScopeError(
                f"Dynamic scope on {attribute.value} needs the caller's own {attribute.value} value"
            )
        if value is not None and value == caller_own_value:
            return True

    if value is None:
        return False

    return any(token == value for token in scope_values if token not in (ALL, DYNAMIC))
