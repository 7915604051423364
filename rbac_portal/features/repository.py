"""
SQLAlchemy-backed repository for roles, users, assignments and rules.

Reads return pydantic snapshots for the core to work on; writes accept the
records the core produced. Nothing here commits implicitly except commit().
"""
from typing import List, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from rbac_portal.core.exceptions import NotFoundError
from rbac_portal.features.assignments.models import AuditLog, UserRecord, UserRoleRecord
from rbac_portal.features.assignments.schemas import User, UserRole
from rbac_portal.features.default_rules.models import DefaultRuleRecord
from rbac_portal.features.default_rules.schemas import DefaultAssignmentRule
from rbac_portal.features.roles.models import RoleRecord
from rbac_portal.features.roles.schemas import Role
from rbac_portal.utils import get_logger


log = get_logger(__name__)


class RBACRepository:
    """
    Usage:
        async for db in get_db():
            repository = RBACRepository(db)
            roles = await repository.list_roles()
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    # ========================================================================
    # Roles
    # ========================================================================

    async def list_roles(self) -> List[Role]:
        result = await self.db.execute(select(RoleRecord).order_by(RoleRecord.id))
        return [record.to_schema() for record in result.scalars().all()]

    async def get_role(self, role_id: str) -> Role:
        record = await self.db.get(RoleRecord, role_id)
        if record is None:
            raise NotFoundError(f"Role {role_id} not found")
        return record.to_schema()

    async def save_role(self, role: Role) -> Role:
        """Insert or update a role definition."""
        record = await self.db.get(RoleRecord, role.id)
        if record is None:
            record = RoleRecord(id=role.id)
            self.db.add(record)
        record.apply(role)
        await self.db.flush()
        return record.to_schema()

    async def delete_role(self, role_id: str) -> None:
        """
        Delete a role definition.

        Assignment history referencing the role is kept; the audit view
        reports it under "Unknown Role".
        """
        record = await self.db.get(RoleRecord, role_id)
        if record is None:
            raise NotFoundError(f"Role {role_id} not found")
        await self.db.delete(record)
        await self.db.flush()
        log.info(f"Deleted role {role_id}")

    # ========================================================================
    # Users and assignments
    # ========================================================================

    def _users_query(self):
        return (
            select(UserRecord)
            .options(selectinload(UserRecord.assignments))
            .execution_options(populate_existing=True)
        )

    async def _get_user_record(self, user_id: str) -> UserRecord:
        result = await self.db.execute(self._users_query().where(UserRecord.id == user_id))
        record = result.scalar_one_or_none()
        if record is None:
            raise NotFoundError(f"User {user_id} not found")
        return record

    async def list_users(self) -> List[User]:
        result = await self.db.execute(self._users_query().order_by(UserRecord.id))
        return [record.to_schema() for record in result.scalars().all()]

    async def get_user(self, user_id: str) -> User:
        record = await self._get_user_record(user_id)
        return record.to_schema()

    async def save_user(self, user: User) -> User:
        """
        Insert or update a user's identity and job attributes.

        Assignments without an id are appended to the history; stored
        assignments are left as they are.
        """
        result = await self.db.execute(self._users_query().where(UserRecord.id == user.id))
        record = result.scalar_one_or_none()
        if record is None:
            record = UserRecord(id=user.id, assignments=[])
            self.db.add(record)
        record.apply(user)
        for assignment in user.roles:
            if assignment.id is None:
                record.assignments.append(UserRoleRecord.from_schema(user.id, assignment))
        await self.db.flush()
        return record.to_schema()

    async def add_user_role(self, user_id: str, assignment: UserRole) -> UserRole:
        """
        Append an assignment to the user's history.

        Returns:
            The stored assignment, carrying its row id
        """
        user = await self._get_user_record(user_id)
        record = UserRoleRecord.from_schema(user_id, assignment)
        user.assignments.append(record)
        await self.db.flush()
        log.debug(f"Stored assignment {record.id} for user {user_id}")
        return record.to_schema()

    async def mark_removed(self, user_id: str, assignment: UserRole) -> UserRole:
        """
        Persist the removed_on date of a revoked assignment.

        Raises:
            NotFoundError: the assignment was never stored for this user
        """
        record: Optional[UserRoleRecord] = None
        if assignment.id is not None:
            record = await self.db.get(UserRoleRecord, assignment.id)
        if record is None or record.user_id != user_id:
            raise NotFoundError(
                f"Stored assignment of {assignment.role_id} to {user_id} not found"
            )
        record.removed_on = assignment.removed_on
        await self.db.flush()
        return record.to_schema()

    # ========================================================================
    # Default assignment rules
    # ========================================================================

    async def list_rules(self) -> List[DefaultAssignmentRule]:
        result = await self.db.execute(select(DefaultRuleRecord).order_by(DefaultRuleRecord.id))
        return [record.to_schema() for record in result.scalars().all()]

    async def save_rule(self, rule: DefaultAssignmentRule) -> DefaultAssignmentRule:
        record = await self.db.get(DefaultRuleRecord, rule.id)
        if record is None:
            record = DefaultRuleRecord(id=rule.id)
            self.db.add(record)
        record.apply(rule)
        await self.db.flush()
        return record.to_schema()

    async def delete_rule(self, rule_id: str) -> None:
        record = await self.db.get(DefaultRuleRecord, rule_id)
        if record is None:
            raise NotFoundError(f"Default assignment rule {rule_id} not found")
        await self.db.delete(record)
        await self.db.flush()
        log.info(f"Deleted default assignment rule {rule_id}")

    # ========================================================================
    # Audit log
    # ========================================================================

    async def list_audit_logs(self, user_id: Optional[str] = None) -> List[AuditLog]:
        stmt = select(AuditLog).order_by(AuditLog.id)
        if user_id:
            stmt = stmt.where(AuditLog.user_id == user_id)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def commit(self) -> None:
        await self.db.commit()
