"""
Assignment lifecycle: exception grants, default grants and revocation.

The manager works on an explicit snapshot of users and roles handed in by
the caller. It never edits a record in place: each mutation swaps the
user's snapshot for a copy holding the new or revised record and returns
that record, which the caller persists.
"""
from datetime import date
from typing import Dict, Iterable, List, Optional

from rbac_portal.core import config
from rbac_portal.core.clock import Clock, SystemClock
from rbac_portal.core.exceptions import (
    ConfigurationError,
    DuplicateAssignmentError,
    InvalidRangeError,
    InvalidStateTransitionError,
    NotFoundError,
)
from rbac_portal.features.assignments.schemas import User, UserRole
from rbac_portal.features.assignments.status import is_active, resolve_status
from rbac_portal.features.default_rules.matcher import resolve_default_roles
from rbac_portal.features.default_rules.schemas import DefaultAssignmentRule
from rbac_portal.features.roles.constants import AUTO_ASSIGNER
from rbac_portal.features.roles.schemas import Role
from rbac_portal.utils import get_logger


log = get_logger(__name__)


class AssignmentLifecycleManager:
    """
    Owns the append-only assignment history of a snapshot of users.

    Usage:
        manager = AssignmentLifecycleManager(users, roles, clock=FixedClock(today))
        record = manager.grant_exception("U003", "role-6", "Project lead",
                                         start, end, acting_admin_id="admin-1")
        repository.add_user_role("U003", record)
    """

    def __init__(
        self,
        users: Iterable[User],
        roles: Iterable[Role],
        clock: Optional[Clock] = None,
        enforce_unique_active: bool = config.ENFORCE_UNIQUE_ACTIVE_GRANTS,
    ):
        self._users: Dict[str, User] = {user.id: user for user in users}
        self._roles: Dict[str, Role] = {role.id: role for role in roles}
        self.clock = clock or SystemClock()
        self.enforce_unique_active = enforce_unique_active

    @property
    def users(self) -> List[User]:
        """Current snapshot, including every mutation made so far."""
        return list(self._users.values())

    def get_user(self, user_id: str) -> User:
        user = self._users.get(user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found")
        return user

    def get_role(self, role_id: str) -> Role:
        role = self._roles.get(role_id)
        if role is None:
            raise NotFoundError(f"Role {role_id} not found")
        return role

    def holds_active(self, user_id: str, role_id: str, as_of: date) -> bool:
        return any(
            assignment.role_id == role_id and is_active(assignment, as_of)
            for assignment in self.get_user(user_id).roles
        )

    # ------------------------------------------------------------------
    # Grants
    # ------------------------------------------------------------------

    def grant_exception(
        self,
        user_id: str,
        role_id: str,
        reason: Optional[str],
        start_date: Optional[date],
        end_date: Optional[date],
        acting_admin_id: Optional[str],
    ) -> UserRole:
        """
        Grant a time-boxed role outside the default rules.

        Raises:
            ConfigurationError: reason, window or acting admin missing
            InvalidRangeError: start_date after end_date
            NotFoundError: unknown user or role
            DuplicateAssignmentError: role already actively held
        """
        missing = [
            name for name, value in (
                ("reason", reason),
                ("start_date", start_date),
                ("end_date", end_date),
            )
            if value is None or (isinstance(value, str) and not value.strip())
        ]
        if missing:
            raise ConfigurationError(f"Exception grant is missing: {', '.join(missing)}")

        if not acting_admin_id or acting_admin_id == AUTO_ASSIGNER:
            raise ConfigurationError("Exception grant needs the acting administrator's id")

        if start_date > end_date:
            raise InvalidRangeError(
                f"Start date {start_date.isoformat()} is after end date {end_date.isoformat()}"
            )

        user = self.get_user(user_id)
        self.get_role(role_id)
        today = self.clock.today()
        self._ensure_not_held(user, role_id, today)

        assignment = UserRole(
            role_id=role_id,
            assigned_on=today,
            assigned_by=acting_admin_id,
            reason=reason.strip(),
            start_date=start_date,
            end_date=end_date,
        )
        self._append(user, assignment)
        log.info(
            f"Exception grant: user={user_id} role={role_id} by={acting_admin_id} "
            f"window={start_date.isoformat()}..{end_date.isoformat()}"
        )
        return assignment

    def grant_default(self, user_id: str, role_id: str) -> UserRole:
        """
        Grant a role on behalf of the default rules (assigned_by "Auto").

        Raises:
            NotFoundError: unknown user or role
            DuplicateAssignmentError: role already actively held
        """
        user = self.get_user(user_id)
        self.get_role(role_id)
        today = self.clock.today()
        self._ensure_not_held(user, role_id, today)

        assignment = UserRole(role_id=role_id, assigned_on=today, assigned_by=AUTO_ASSIGNER)
        self._append(user, assignment)
        log.info(f"Default grant: user={user_id} role={role_id}")
        return assignment

    def apply_default_roles(
        self,
        user_id: str,
        rules: Iterable[DefaultAssignmentRule],
    ) -> List[UserRole]:
        """
        Grant every rule-resolved role the user does not actively hold.

        Nothing is granted unless every resolved role exists.

        Returns:
            The new records, ordered by role id
        """
        user = self.get_user(user_id)
        role_ids = resolve_default_roles(rules, user.attributes())

        unknown = sorted(role_id for role_id in role_ids if role_id not in self._roles)
        if unknown:
            raise NotFoundError(f"Default rules reference unknown roles: {', '.join(unknown)}")

        today = self.clock.today()
        granted = []
        for role_id in sorted(role_ids):
            if self.holds_active(user_id, role_id, today):
                continue
            granted.append(self.grant_default(user_id, role_id))
        return granted

    # ------------------------------------------------------------------
    # Revocation
    # ------------------------------------------------------------------

    def revoke(
        self,
        user_id: str,
        role_id: str,
        assigned_on: date,
        as_of: Optional[date] = None,
    ) -> UserRole:
        """
        Mark the grant identified by (role_id, assigned_on) as removed.

        Only an Active grant can be revoked; removed_on is set to as_of.
        When several grants share the key, the first Active one is revoked.

        Raises:
            NotFoundError: the user has no grant with that key
            InvalidStateTransitionError: no grant with that key is Active
        """
        as_of = as_of or self.clock.today()
        user = self.get_user(user_id)

        positions = [
            index for index, assignment in enumerate(user.roles)
            if assignment.key == (role_id, assigned_on)
        ]
        if not positions:
            raise NotFoundError(
                f"User {user_id} has no assignment of {role_id} made on {assigned_on.isoformat()}"
            )

        for index in positions:
            current = user.roles[index]
            if not is_active(current, as_of):
                continue
            revoked = current.model_copy(update={"removed_on": as_of})
            roles = list(user.roles)
            roles[index] = revoked
            self._users[user_id] = user.model_copy(update={"roles": roles})
            log.info(f"Revoked: user={user_id} role={role_id} assigned_on={assigned_on.isoformat()}")
            return revoked

        status = resolve_status(user.roles[positions[0]], as_of)
        raise InvalidStateTransitionError(
            f"Assignment of {role_id} to {user_id} made on {assigned_on.isoformat()} "
            f"is {status.value}, only Active assignments can be revoked"
        )

    # ------------------------------------------------------------------

    def _ensure_not_held(self, user: User, role_id: str, as_of: date) -> None:
        if not self.enforce_unique_active:
            return
        if self.holds_active(user.id, role_id, as_of):
            raise DuplicateAssignmentError(f"User {user.id} already holds role {role_id}")

    def _append(self, user: User, assignment: UserRole) -> None:
        self._users[user.id] = user.model_copy(update={"roles": [*user.roles, assignment]})


def available_roles_for_exception(user: User, roles: Iterable[Role], as_of: date) -> List[Role]:
    """Roles the user does not actively hold, in input order."""
    held = {assignment.role_id for assignment in user.roles if is_active(assignment, as_of)}
    return [role for role in roles if role.id not in held]


def sort_for_display(assignments: Iterable[UserRole], as_of: date) -> List[UserRole]:
    """Active grants first, then newest assigned_on first."""
    return sorted(
        assignments,
        key=lambda assignment: (
            0 if is_active(assignment, as_of) else 1,
            -assignment.assigned_on.toordinal(),
        ),
    )


def active_exception_count(users: Iterable[User], as_of: date) -> int:
    """Number of Active grants not made by the default rules."""
    return sum(
        1
        for user in users
        for assignment in user.roles
        if assignment.assigned_by != AUTO_ASSIGNER and is_active(assignment, as_of)
    )
