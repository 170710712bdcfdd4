"""
Accounts module data models.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class Profile(BaseModel):
    """A user's practice profile."""

    user_id: str = Field(..., description="User ID")
    role: Optional[str] = Field(None, description="Job role, e.g. 'Backend engineer'")
    goals: list[str] = Field(default_factory=list, description="Practice goals")
    timezone: str = Field(default="UTC", description="IANA timezone name")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProfileUpdate(BaseModel):
    """Fields a user may change; unset fields are left as they are."""

    role: Optional[str] = Field(None, max_length=100)
    goals: Optional[list[str]] = Field(None, max_length=10)
    timezone: Optional[str] = Field(None, min_length=1, max_length=64)


class MigrateAnonRequest(BaseModel):
    anon_id: Optional[str] = None


class MigrateAnonResponse(BaseModel):
    migrated: int = Field(..., ge=0, description="Sessions moved to the user")
