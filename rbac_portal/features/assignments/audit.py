"""
Audit view over all users' assignment histories.
"""
from datetime import date
from typing import Iterable, List, Optional

from rbac_portal.features.assignments.schemas import (
    AssignmentType,
    AuditFilters,
    AuditRecord,
    User,
    UserRole,
)
from rbac_portal.features.assignments.status import resolve_status
from rbac_portal.features.roles.constants import AUTO_ASSIGNER, UNKNOWN_ROLE_NAME
from rbac_portal.features.roles.schemas import Role


def assignment_type(assignment: UserRole) -> AssignmentType:
    if assignment.assigned_by == AUTO_ASSIGNER:
        return AssignmentType.DEFAULT
    return AssignmentType.EXCEPTION


def _matches_filters(record: AuditRecord, filters: AuditFilters) -> bool:
    if filters.user_search:
        needle = filters.user_search.lower()
        if needle not in record.user_name.lower() and needle not in record.user_id.lower():
            return False
    if filters.start_date and record.assigned_on < filters.start_date:
        return False
    if filters.end_date and record.assigned_on > filters.end_date:
        return False
    if filters.assignment_type and record.assignment_type != filters.assignment_type:
        return False
    if filters.role_id and record.role_id != filters.role_id:
        return False
    if filters.status and record.status != filters.status:
        return False
    return True


def audit_records(
    users: Iterable[User],
    roles: Iterable[Role],
    as_of: date,
    filters: Optional[AuditFilters] = None,
) -> List[AuditRecord]:
    """
    Flatten every user's assignments into audit rows.

    Args:
        users: User snapshot with assignment histories
        roles: Role snapshot used to resolve role names
        as_of: Day the status of each assignment is computed for
        filters: Optional filters, see AuditFilters

    Returns:
        Matching rows, newest assigned_on first; rows with the same date keep
        user order, then history order.
    """
    role_names = {role.id: role.name for role in roles}
    filters = filters or AuditFilters()

    records = []
    for user in users:
        for assignment in user.roles:
            record = AuditRecord(
                user_id=user.id,
                user_name=user.name,
                role_id=assignment.role_id,
                role_name=role_names.get(assignment.role_id, UNKNOWN_ROLE_NAME),
                assignment_type=assignment_type(assignment),
                status=resolve_status(assignment, as_of),
                assigned_on=assignment.assigned_on,
                assigned_by=assignment.assigned_by,
                reason=assignment.reason,
                start_date=assignment.start_date,
                end_date=assignment.end_date,
                removed_on=assignment.removed_on,
            )
            if _matches_filters(record, filters):
                records.append(record)

    # sorted() is stable, so equal dates keep their original order
    return sorted(records, key=lambda record: record.assigned_on, reverse=True)
