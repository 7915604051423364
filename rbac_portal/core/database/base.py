"""
SQLAlchemy declarative base and common model utilities.

All ORM records of the persistence adapter inherit from Base.
"""
from datetime import datetime
from sqlalchemy import DateTime, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
import ulid


def generate_ulid() -> str:
    """Generate a new ULID string."""
    return str(ulid.ULID())


class Base(DeclarativeBase):
    """
    Base class for all ORM records.

    Usage:
        from rbac_portal.core.database.base import Base

        class RoleRecord(Base):
            __tablename__ = "roles"

            id: Mapped[str] = mapped_column(String(64), primary_key=True)
    """
    pass


class TimestampMixin:
    """
    Mixin to add created_at and updated_at timestamps to records.
    """
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
