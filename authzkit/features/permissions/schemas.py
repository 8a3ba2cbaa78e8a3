"""
Pydantic schema for permission records.
"""
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class Permission(BaseModel):
    """An atomic, named capability. ``guard_name`` is a free-form namespace tag."""
    name: str = Field(..., min_length=1, max_length=255, description="Unique permission name")
    guard_name: Optional[str] = Field(None, max_length=255, description="Optional guard namespace")

    model_config = ConfigDict(from_attributes=True, frozen=True)
