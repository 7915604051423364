"""
Pydantic schemas for default (job-title based) role assignment.
"""
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator


# Optional constraints a rule may set, in display order
RULE_CONSTRAINTS: tuple[str, ...] = ("company", "function", "operation", "ship", "department")


class UserAttributes(BaseModel):
    """Job profile a user is matched on."""
    job_title: Optional[str] = None
    company: Optional[str] = None
    function: Optional[str] = None
    operation: Optional[str] = None
    ship: Optional[str] = None
    department: Optional[str] = None


class DefaultAssignmentRule(BaseModel):
    """
    Maps a job title, optionally narrowed by other attributes, to roles.

    An unset constraint matches any value. job_title is mandatory but is
    checked by the matcher so that a broken rule surfaces as a
    configuration error instead of failing to load.
    """
    id: str = Field(..., min_length=1)
    job_title: Optional[str] = None
    role_ids: List[str] = Field(default_factory=list)
    company: Optional[str] = None
    function: Optional[str] = None
    operation: Optional[str] = None
    ship: Optional[str] = None
    department: Optional[str] = None

    @field_validator(*RULE_CONSTRAINTS)
    @classmethod
    def blank_is_unset(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        return v

    def constraints(self) -> dict[str, str]:
        """The optional constraints this rule actually sets."""
        return {
            field: getattr(self, field)
            for field in RULE_CONSTRAINTS
            if getattr(self, field) is not None
        }
