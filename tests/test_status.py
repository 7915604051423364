from datetime import date

import pytest
from pydantic import ValidationError

from rbac_portal.features.assignments.schemas import AssignmentStatus, UserRole
from rbac_portal.features.assignments.status import is_active, resolve_status


def _grant(**fields) -> UserRole:
    return UserRole(role_id="role-6", assigned_on=date(2024, 7, 1), assigned_by="Admin", **fields)


def test_window_expires_after_end_date():
    grant = _grant(start_date=date(2024, 7, 1), end_date=date(2024, 12, 31))

    assert resolve_status(grant, date(2025, 1, 15)) == AssignmentStatus.EXPIRED
    assert resolve_status(grant, date(2024, 8, 1)) == AssignmentStatus.ACTIVE


def test_active_through_end_date():
    grant = _grant(end_date=date(2024, 12, 31))

    assert resolve_status(grant, date(2024, 12, 31)) == AssignmentStatus.ACTIVE
    assert resolve_status(grant, date(2025, 1, 1)) == AssignmentStatus.EXPIRED


@pytest.mark.parametrize(
    "as_of",
    [date(2024, 1, 1), date(2024, 8, 1), date(2025, 6, 1)],
)
def test_removed_wins_over_dates(as_of):
    grant = _grant(
        start_date=date(2024, 7, 1),
        end_date=date(2024, 12, 31),
        removed_on=date(2024, 9, 1),
    )

    assert resolve_status(grant, as_of) == AssignmentStatus.REMOVED


def test_open_ended_grant_stays_active():
    grant = UserRole(role_id="role-1", assigned_on=date(2025, 1, 1), assigned_by="Auto")

    assert is_active(grant, date(2099, 1, 1)) is True


def test_future_window_counts_as_active():
    grant = _grant(start_date=date(2025, 6, 1), end_date=date(2025, 7, 1))

    assert resolve_status(grant, date(2025, 1, 15)) == AssignmentStatus.ACTIVE


def test_reversed_window_rejected():
    with pytest.raises(ValidationError):
        _grant(start_date=date(2025, 2, 1), end_date=date(2025, 1, 1))


def test_records_are_immutable():
    grant = _grant()

    with pytest.raises(ValidationError):
        grant.removed_on = date(2025, 1, 1)
