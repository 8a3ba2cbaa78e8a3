"""
Pydantic schema for role records.
"""
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class Role(BaseModel):
    """
    A named bundle of permission names.

    ``permissions`` is the snapshot captured when the role was defined. It is
    not updated when a referenced permission is deleted later.
    """
    name: str = Field(..., min_length=1, max_length=255, description="Unique role name")
    guard_name: Optional[str] = Field(None, max_length=255, description="Optional guard namespace")
    permissions: List[str] = Field(default_factory=list, description="Ordered permission names")

    model_config = ConfigDict(from_attributes=True)
