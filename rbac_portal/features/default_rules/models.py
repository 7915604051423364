"""
Default assignment rule record for the persistence adapter.
"""
from sqlalchemy import String, JSON
from sqlalchemy.orm import Mapped, mapped_column

from rbac_portal.core.database.base import Base, TimestampMixin, generate_ulid
from rbac_portal.features.default_rules.schemas import DefaultAssignmentRule


class DefaultRuleRecord(Base, TimestampMixin):
    """
    Job title (plus optional constraints) -> role ids.

    role_ids are not foreign keys: a rule may outlive a deleted role, and
    the matcher simply keeps returning the id.
    """
    __tablename__ = "default_assignment_rules"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=generate_ulid)
    job_title: Mapped[str | None] = mapped_column(String(100), nullable=True, index=True)
    role_ids: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    company: Mapped[str | None] = mapped_column(String(100), nullable=True)
    function: Mapped[str | None] = mapped_column(String(100), nullable=True)
    operation: Mapped[str | None] = mapped_column(String(100), nullable=True)
    ship: Mapped[str | None] = mapped_column(String(100), nullable=True)
    department: Mapped[str | None] = mapped_column(String(100), nullable=True)

    def to_schema(self) -> DefaultAssignmentRule:
        return DefaultAssignmentRule(
            id=self.id,
            job_title=self.job_title,
            role_ids=list(self.role_ids or []),
            company=self.company,
            function=self.function,
            operation=self.operation,
            ship=self.ship,
            department=self.department,
        )

    def apply(self, rule: DefaultAssignmentRule) -> None:
        self.job_title = rule.job_title
        self.role_ids = list(rule.role_ids)
        self.company = rule.company
        self.function = rule.function
        self.operation = rule.operation
        self.ship = rule.ship
        self.department = rule.department

    def __repr__(self) -> str:
        return f"<DefaultRuleRecord(id={self.id}, job_title={self.job_title!r})>"
