"""
Lifecycle status of a role assignment as of a given day.
"""
from datetime import date

from rbac_portal.features.assignments.schemas import AssignmentStatus, UserRole


def resolve_status(assignment: UserRole, as_of: date) -> AssignmentStatus:
    """
    Classify an assignment. First match wins:

    1. removed_on set -> Removed, whatever the dates say
    2. end_date set and before as_of -> Expired
    3. otherwise -> Active, including a window that has not started yet
    """
    if assignment.removed_on is not None:
        return AssignmentStatus.REMOVED
    if assignment.end_date is not None and assignment.end_date < as_of:
        return AssignmentStatus.EXPIRED
    return AssignmentStatus.ACTIVE


def is_active(assignment: UserRole, as_of: date) -> bool:
    return resolve_status(assignment, as_of) == AssignmentStatus.ACTIVE
