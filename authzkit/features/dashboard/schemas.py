"""
Pydantic schemas for the dashboard API.

Grant request bodies accept both snake_case and the camelCase keys
(``roleName``, ``permissionName``) sent by existing dashboard clients.
"""
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


NAME_FIELD = Field(..., min_length=1, max_length=255)


# ============================================================================
# Registry Schemas
# ============================================================================

class PermissionCreate(BaseModel):
    """Schema for defining a permission."""
    name: str = NAME_FIELD
    guard_name: Optional[str] = Field(None, max_length=255)


class RoleCreate(BaseModel):
    """Schema for defining a role."""
    name: str = NAME_FIELD
    permissions: List[str] = Field(default_factory=list, description="Existing permission names")
    guard_name: Optional[str] = Field(None, max_length=255)


class RolePermissionAdd(BaseModel):
    permission_name: str = Field(..., min_length=1, max_length=255, alias="permissionName")

    model_config = ConfigDict(populate_by_name=True)


# ============================================================================
# Grant Schemas
# ============================================================================

class AssignRoleToUser(BaseModel):
    role_name: str = Field(..., min_length=1, max_length=255, alias="roleName")

    model_config = ConfigDict(populate_by_name=True)


class AssignPermissionToUser(BaseModel):
    permission_name: str = Field(..., min_length=1, max_length=255, alias="permissionName")

    model_config = ConfigDict(populate_by_name=True)


class AccessCheckResponse(BaseModel):
    """Result of checking one name as both a role and a permission."""
    user_id: str
    name: str
    has_role: bool
    has_permission: bool
    allowed: bool
