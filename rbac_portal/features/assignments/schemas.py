"""
Pydantic schemas for users, role assignments and the audit view.
"""
import enum
from datetime import date
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator

from rbac_portal.features.default_rules.schemas import UserAttributes


class AssignmentStatus(str, enum.Enum):
    ACTIVE = "Active"
    EXPIRED = "Expired"
    REMOVED = "Removed"


class AssignmentType(str, enum.Enum):
    DEFAULT = "Default"
    EXCEPTION = "Exception"


# ============================================================================
# Assignment Schemas
# ============================================================================

class UserRole(BaseModel):
    """
    One grant of a role to a user.

    Records are never deleted or edited in place; revocation produces a copy
    with removed_on set. (role_id, assigned_on) identifies a grant within a
    user's history, id identifies the stored row (None until persisted).
    """
    id: Optional[int] = None
    role_id: str = Field(..., min_length=1)
    assigned_on: date
    assigned_by: str = Field(..., min_length=1, description='"Auto" for rule grants, else the admin id')
    reason: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    removed_on: Optional[date] = None

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def window_in_order(self) -> "UserRole":
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("start_date must not be after end_date")
        return self

    @property
    def key(self) -> tuple[str, date]:
        return (self.role_id, self.assigned_on)


class User(BaseModel):
    """User with job attributes and assignment history (insertion order)."""
    id: str = Field(..., min_length=1)
    name: str = ""
    job_title: Optional[str] = None
    department: Optional[str] = None
    company: Optional[str] = None
    function: Optional[str] = None
    operation: Optional[str] = None
    ship: Optional[str] = None
    roles: List[UserRole] = Field(default_factory=list)

    def attributes(self) -> UserAttributes:
        return UserAttributes(
            job_title=self.job_title,
            company=self.company,
            function=self.function,
            operation=self.operation,
            ship=self.ship,
            department=self.department,
        )


# ============================================================================
# Audit Schemas
# ============================================================================

class AuditRecord(BaseModel):
    """Denormalized assignment row of the audit report."""
    user_id: str
    user_name: str
    role_id: str
    role_name: str
    assignment_type: AssignmentType
    status: AssignmentStatus
    assigned_on: date
    assigned_by: str
    reason: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    removed_on: Optional[date] = None


class AuditFilters(BaseModel):
    """
    Audit report filters. Unset fields do not filter.

    user_search matches user name or id, case-insensitive substring.
    start_date/end_date are inclusive bounds on assigned_on.
    """
    user_search: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    assignment_type: Optional[AssignmentType] = None
    role_id: Optional[str] = None
    status: Optional[AssignmentStatus] = None
