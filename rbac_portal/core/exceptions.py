"""
Error taxonomy for the RBAC core.

Every core operation reports failure by raising one of these; nothing is
retried or silently defaulted. Callers (API layer, jobs) translate them
into user-facing messages.
"""


class RBACError(Exception):
    """Base class for all RBAC core errors."""
    pass


class ConfigurationError(RBACError):
    """
    Role or rule data is incomplete or inconsistent.

    Raised for a role missing a permission entry for one of the six
    attributes, a default rule without a job title, or an exception grant
    without reason/start date/end date.
    """
    pass


class InvalidRangeError(RBACError):
    """Start date is after end date on a grant request."""
    pass


class NotFoundError(RBACError):
    """A user, role, rule, or assignment key is not in the current snapshot."""
    pass


class InvalidStateTransitionError(RBACError):
    """The assignment's current status does not allow the requested change."""
    pass


class DuplicateAssignmentError(InvalidStateTransitionError):
    """The user already actively holds the role being granted."""
    pass


class AmbiguousDynamicScopeError(RBACError):
    """A Dynamic scope was evaluated without the caller's own attribute value."""
    pass
