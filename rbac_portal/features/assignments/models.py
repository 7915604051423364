"""
User, assignment history and audit log records for the persistence adapter.

Assignment rows are append-only: revocation updates removed_on, nothing is
ever deleted. Row ids are autoincrementing so they preserve insertion order.
"""
from datetime import date
from typing import Any, Dict
from sqlalchemy import String, ForeignKey, Date, Integer, Text, JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rbac_portal.core.database.base import Base, TimestampMixin, generate_ulid
from rbac_portal.features.assignments.schemas import User, UserRole


class UserRecord(Base, TimestampMixin):
    """User identity and job attributes sourced from upstream systems."""
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, default="")

    job_title: Mapped[str | None] = mapped_column(String(100), nullable=True, index=True)
    department: Mapped[str | None] = mapped_column(String(100), nullable=True)
    company: Mapped[str | None] = mapped_column(String(100), nullable=True)
    function: Mapped[str | None] = mapped_column(String(100), nullable=True)
    operation: Mapped[str | None] = mapped_column(String(100), nullable=True)
    ship: Mapped[str | None] = mapped_column(String(100), nullable=True)

    assignments: Mapped[list["UserRoleRecord"]] = relationship(
        "UserRoleRecord",
        back_populates="user",
        order_by="UserRoleRecord.id",
        lazy="selectin",
    )

    def to_schema(self) -> User:
        return User(
            id=self.id,
            name=self.name,
            job_title=self.job_title,
            department=self.department,
            company=self.company,
            function=self.function,
            operation=self.operation,
            ship=self.ship,
            roles=[assignment.to_schema() for assignment in self.assignments],
        )

    def apply(self, user: User) -> None:
        """Copy identity and job attributes; assignment history is not touched."""
        self.name = user.name
        self.job_title = user.job_title
        self.department = user.department
        self.company = user.company
        self.function = user.function
        self.operation = user.operation
        self.ship = user.ship

    def __repr__(self) -> str:
        return f"<UserRecord(id={self.id}, name={self.name!r})>"


class UserRoleRecord(Base, TimestampMixin):
    """
    One grant of a role to a user.

    role_id is deliberately not a foreign key: history must survive the
    deletion of a role (the audit view reports it as an unknown role).
    """
    __tablename__ = "user_roles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    role_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)

    assigned_on: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    assigned_by: Mapped[str] = mapped_column(String(64), nullable=False)
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    removed_on: Mapped[date | None] = mapped_column(Date, nullable=True)

    user: Mapped["UserRecord"] = relationship("UserRecord", back_populates="assignments")

    @classmethod
    def from_schema(cls, user_id: str, assignment: UserRole) -> "UserRoleRecord":
        return cls(
            user_id=user_id,
            role_id=assignment.role_id,
            assigned_on=assignment.assigned_on,
            assigned_by=assignment.assigned_by,
            reason=assignment.reason,
            start_date=assignment.start_date,
            end_date=assignment.end_date,
            removed_on=assignment.removed_on,
        )

    def to_schema(self) -> UserRole:
        return UserRole(
            id=self.id,
            role_id=self.role_id,
            assigned_on=self.assigned_on,
            assigned_by=self.assigned_by,
            reason=self.reason,
            start_date=self.start_date,
            end_date=self.end_date,
            removed_on=self.removed_on,
        )

    def __repr__(self) -> str:
        return (
            f"<UserRoleRecord(id={self.id}, user_id={self.user_id}, role_id={self.role_id}, "
            f"assigned_on={self.assigned_on})>"
        )


class AuditLog(Base, TimestampMixin):
    """
    Audit log of assignment changes.

    Tracks who granted or revoked what, and when.
    """
    __tablename__ = "audit_logs"

    id: Mapped[str] = mapped_column(String(26), primary_key=True, default=generate_ulid)

    # Actor: admin id, or "Auto" for rule-driven grants
    actor_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)

    # Action details
    action: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    role_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    assignment_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    details: Mapped[Dict[str, Any] | None] = mapped_column(JSON, nullable=True)

    def __repr__(self) -> str:
        return f"<AuditLog(id={self.id}, actor_id={self.actor_id}, action={self.action}, user_id={self.user_id})>"
