"""
Role record for the persistence adapter.

Attribute scopes, application access and day types are stored as JSON
documents; the pydantic Role is the shape the core works with.
"""
from typing import Any
from sqlalchemy import String, Text, Integer, JSON
from sqlalchemy.orm import Mapped, mapped_column

from rbac_portal.core.database.base import Base, TimestampMixin
from rbac_portal.features.roles.schemas import Role


class RoleRecord(Base, TimestampMixin):
    """
    Role definition row.

    permissions example:
        [{"attribute": "Ship", "values": ["Dynamic"]}, ...]
    app_access example:
        [{"app_name": "VPP", "actions": ["Read", "Write"]}]
    """
    __tablename__ = "roles"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")

    permissions: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    # NULL = no restriction; 0 = today only
    write_restriction_days: Mapped[int | None] = mapped_column(Integer, nullable=True)
    functionality_access: Mapped[str] = mapped_column(String(32), nullable=False)
    day_type_access: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    app_access: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)

    def to_schema(self) -> Role:
        return Role.model_validate({
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "permissions": self.permissions,
            "write_restriction_days": self.write_restriction_days,
            "functionality_access": self.functionality_access,
            "day_type_access": self.day_type_access,
            "app_access": self.app_access,
        })

    def apply(self, role: Role) -> None:
        """Copy a pydantic role onto this record."""
        data = role.model_dump(mode="json")
        self.name = data["name"]
        self.description = data["description"]
        self.permissions = data["permissions"]
        self.write_restriction_days = data["write_restriction_days"]
        self.functionality_access = data["functionality_access"]
        self.day_type_access = data["day_type_access"]
        self.app_access = data["app_access"]

    def __repr__(self) -> str:
        return f"<RoleRecord(id={self.id}, name={self.name!r})>"
