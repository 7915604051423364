"""
Async orchestration of assignment changes against the repository.

Each operation loads a snapshot, lets the pure lifecycle manager decide,
then stores the resulting record together with an audit log entry and
commits once. Errors from the manager propagate before anything is written.
"""
from datetime import date
from typing import Any, Dict, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession

from rbac_portal.core import config
from rbac_portal.core.clock import Clock, SystemClock
from rbac_portal.core.exceptions import ConfigurationError
from rbac_portal.features.assignments.audit import audit_records
from rbac_portal.features.assignments.lifecycle import AssignmentLifecycleManager
from rbac_portal.features.assignments.models import AuditLog
from rbac_portal.features.assignments.schemas import AuditFilters, AuditRecord, UserRole
from rbac_portal.features.repository import RBACRepository
from rbac_portal.utils import get_logger


log = get_logger(__name__)


async def create_audit_log(
    db: AsyncSession,
    actor_id: str,
    action: str,
    user_id: str,
    role_id: str,
    assignment_id: Optional[int] = None,
    details: Optional[Dict[str, Any]] = None,
) -> AuditLog:
    """
    Create an audit log entry in the current transaction.

    Args:
        db: Database session
        actor_id: Administrator performing the change, or "Auto"
        action: "grant_exception", "grant_default" or "revoke"
        user_id: User whose history changed
        role_id: Role concerned
        assignment_id: Stored assignment row
        details: Additional details (dates, reason)
    """
    audit_log = AuditLog(
        actor_id=actor_id,
        action=action,
        user_id=user_id,
        role_id=role_id,
        assignment_id=assignment_id,
        details=details,
    )
    db.add(audit_log)
    await db.flush()

    log.info(f"Audit: actor={actor_id} action={action} user={user_id} role={role_id}")
    return audit_log


def _details(assignment: UserRole) -> Dict[str, Any]:
    return assignment.model_dump(mode="json", exclude={"id", "role_id"}, exclude_none=True)


class AssignmentService:
    """
    Usage:
        async for db in get_db():
            service = AssignmentService(RBACRepository(db))
            await service.grant_exception("U003", "role-6", "Project lead",
                                          start, end, acting_admin_id="admin-1")
    """

    def __init__(
        self,
        repository: RBACRepository,
        clock: Optional[Clock] = None,
        enforce_unique_active: bool = config.ENFORCE_UNIQUE_ACTIVE_GRANTS,
    ):
        self.repository = repository
        self.clock = clock or SystemClock()
        self.enforce_unique_active = enforce_unique_active

    async def _manager_for(self, user_id: str) -> AssignmentLifecycleManager:
        user = await self.repository.get_user(user_id)
        roles = await self.repository.list_roles()
        return AssignmentLifecycleManager(
            [user],
            roles,
            clock=self.clock,
            enforce_unique_active=self.enforce_unique_active,
        )

    async def _store_grant(self, user_id: str, assignment: UserRole, action: str) -> UserRole:
        stored = await self.repository.add_user_role(user_id, assignment)
        await create_audit_log(
            self.repository.db,
            actor_id=stored.assigned_by,
            action=action,
            user_id=user_id,
            role_id=stored.role_id,
            assignment_id=stored.id,
            details=_details(stored),
        )
        return stored

    async def grant_exception(
        self,
        user_id: str,
        role_id: str,
        reason: Optional[str],
        start_date: Optional[date],
        end_date: Optional[date],
        acting_admin_id: Optional[str],
    ) -> UserRole:
        manager = await self._manager_for(user_id)
        assignment = manager.grant_exception(
            user_id, role_id, reason, start_date, end_date, acting_admin_id
        )
        stored = await self._store_grant(user_id, assignment, "grant_exception")
        await self.repository.commit()
        return stored

    async def grant_default(self, user_id: str, role_id: str) -> UserRole:
        manager = await self._manager_for(user_id)
        assignment = manager.grant_default(user_id, role_id)
        stored = await self._store_grant(user_id, assignment, "grant_default")
        await self.repository.commit()
        return stored

    async def sync_default_roles(self, user_id: str) -> List[UserRole]:
        """
        Grant the user every rule-resolved role they do not actively hold.
        """
        manager = await self._manager_for(user_id)
        rules = await self.repository.list_rules()
        granted = manager.apply_default_roles(user_id, rules)

        stored = [
            await self._store_grant(user_id, assignment, "grant_default")
            for assignment in granted
        ]
        await self.repository.commit()
        if stored:
            log.info(f"Synced default roles for {user_id}: {[a.role_id for a in stored]}")
        return stored

    async def revoke(
        self,
        user_id: str,
        role_id: str,
        assigned_on: date,
        acting_admin_id: str,
        as_of: Optional[date] = None,
    ) -> UserRole:
        """
        Raises:
            ConfigurationError: acting admin missing
        """
        if not acting_admin_id or not acting_admin_id.strip():
            raise ConfigurationError("Revocation needs the acting administrator's id")

        manager = await self._manager_for(user_id)
        revoked = manager.revoke(user_id, role_id, assigned_on, as_of)

        stored = await self.repository.mark_removed(user_id, revoked)
        await create_audit_log(
            self.repository.db,
            actor_id=acting_admin_id,
            action="revoke",
            user_id=user_id,
            role_id=role_id,
            assignment_id=stored.id,
            details=_details(stored),
        )
        await self.repository.commit()
        return stored

    async def audit_report(
        self,
        filters: Optional[AuditFilters] = None,
        as_of: Optional[date] = None,
    ) -> List[AuditRecord]:
        users = await self.repository.list_users()
        roles = await self.repository.list_roles()
        return audit_records(users, roles, as_of or self.clock.today(), filters)
