"""
Shared data models used across modules.

These models are shared infrastructure, not business logic.
Module-specific models should stay in their respective module directories.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class AuthenticatedUser(BaseModel):
    """
    Represents an authenticated user in the system.

    This model is populated from JWT claims and made available
    to route handlers via dependency injection.
    """

    id: str = Field(..., description="User ID (UUID from Supabase)")
    email: str = Field(default="", description="User's email address")
    email_verified: bool = Field(default=False, description="Whether email is verified")

    created_at: Optional[datetime] = Field(None, description="Account creation time")
    last_sign_in: Optional[datetime] = Field(None, description="Last sign-in time")

    role: str = Field(default="user", description="User role")

    model_config = {
        "frozen": True,  # Make immutable for safety
        "extra": "ignore",  # Ignore extra fields from JWT
    }


class OwnerKind(str, Enum):
    """Who a session or usage record is attributed to."""

    USER = "user"
    ANON = "anon"


class OwnerRef(BaseModel):
    """
    Identity that owns sessions and usage.

    Exactly one identity: an authenticated user ID or a
    client-generated anonymous ID.
    """

    kind: OwnerKind
    id: str = Field(..., min_length=1)

    model_config = {"frozen": True}

    @classmethod
    def user(cls, user_id: str) -> "OwnerRef":
        return cls(kind=OwnerKind.USER, id=user_id)

    @classmethod
    def anon(cls, anon_id: str) -> "OwnerRef":
        return cls(kind=OwnerKind.ANON, id=anon_id)

    @property
    def is_user(self) -> bool:
        return self.kind == OwnerKind.USER

    @property
    def column(self) -> str:
        """Database column holding this owner's ID."""
        return "user_id" if self.is_user else "anon_id"
