"""
Pydantic schemas for role definitions.

A role scopes access by the six attributes, grants read/write per
application, and restricts how far back write operations may reach.
"""
import enum
from typing import Dict, List, Optional
from pydantic import BaseModel, Field, field_validator

from rbac_portal.features.roles.constants import ALL, DAY_TYPE_OPTIONS, Attribute


class Action(str, enum.Enum):
    READ = "Read"
    WRITE = "Write"


class FunctionalityAccess(str, enum.Enum):
    PLANNING_VIEW = "Planning View"
    SCHEDULING_VIEW = "Scheduling View"
    BOTH = "Both"


def _dedupe(values: list) -> list:
    seen = set()
    result = []
    for value in values:
        if value not in seen:
            seen.add(value)
            result.append(value)
    return result


# ============================================================================
# Permission Schemas
# ============================================================================

class RolePermission(BaseModel):
    """
    Scope of one attribute within a role.

    values holds "All", "Dynamic" and/or literal attribute values; several
    literal values are alternatives. An empty list denies every value.
    """
    attribute: Attribute
    values: List[str] = Field(default_factory=list)

    @field_validator("values")
    @classmethod
    def unique_values(cls, v: List[str]) -> List[str]:
        return _dedupe(v)


class AppAccess(BaseModel):
    """Actions a role may perform in one application."""
    app_name: str = Field(..., min_length=1, max_length=100)
    actions: List[Action] = Field(default_factory=list)

    @field_validator("actions")
    @classmethod
    def unique_actions(cls, v: List[Action]) -> List[Action]:
        return _dedupe(v)


# ============================================================================
# Role Schemas
# ============================================================================

class Role(BaseModel):
    """
    Role definition.

    Exactly one RolePermission per attribute is expected; that is checked by
    the resolver (see validate_role_permissions) rather than here, so an
    incomplete role can still be loaded and reported as a configuration error.
    """
    id: str = Field(..., min_length=1, max_length=64)
    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field("", max_length=1000)
    permissions: List[RolePermission] = Field(default_factory=list)
    write_restriction_days: Optional[int] = Field(
        None, ge=0, description="Write window in days (None = unrestricted, 0 = today only)"
    )
    functionality_access: FunctionalityAccess = FunctionalityAccess.BOTH
    day_type_access: List[str] = Field(default_factory=lambda: [ALL])
    app_access: List[AppAccess] = Field(default_factory=list)

    @field_validator("day_type_access")
    @classmethod
    def known_day_types(cls, v: List[str]) -> List[str]:
        """Reject unknown codes; "All" subsumes any other selection."""
        unknown = [code for code in v if code not in DAY_TYPE_OPTIONS]
        if unknown:
            raise ValueError(f"Unknown day type codes: {', '.join(unknown)}")
        if ALL in v:
            return [ALL]
        return _dedupe(v)

    @field_validator("app_access")
    @classmethod
    def merge_app_access(cls, v: List[AppAccess]) -> List[AppAccess]:
        """One entry per application; an application with no actions is dropped."""
        merged: Dict[str, List[Action]] = {}
        for access in v:
            actions = merged.setdefault(access.app_name, [])
            for action in access.actions:
                if action not in actions:
                    actions.append(action)
        return [
            AppAccess(app_name=app_name, actions=actions)
            for app_name, actions in merged.items()
            if actions
        ]

    def permission_for(self, attribute: Attribute) -> Optional[RolePermission]:
        for permission in self.permissions:
            if permission.attribute == attribute:
                return permission
        return None

    def app(self, app_name: str) -> Optional[AppAccess]:
        for access in self.app_access:
            if access.app_name == app_name:
                return access
        return None


# ============================================================================
# Evaluation Context
# ============================================================================

class AccessContext(BaseModel):
    """
    Input to an authorization decision.

    values: the resource's value for each attribute.
    caller_values: the caller's own values, used to resolve Dynamic scopes.
    """
    values: Dict[Attribute, str] = Field(default_factory=dict)
    caller_values: Dict[Attribute, str] = Field(default_factory=dict)
