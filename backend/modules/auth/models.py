"""
Authentication module data models.

These models define the data structures used by the auth module
and exposed to other modules through the interface.
"""

from typing import Optional

from pydantic import BaseModel, Field

# Re-exported for callers that import the user model from the auth module
from shared.models import AuthenticatedUser


class JWTPayload(BaseModel):
    """
    Decoded JWT token payload from Supabase.

    This matches the structure of Supabase Auth JWTs.
    """

    sub: str = Field(..., description="Subject (user ID)")
    email: Optional[str] = Field(None, description="User's email")
    exp: int = Field(..., description="Expiration timestamp")
    iat: int = Field(..., description="Issued at timestamp")
    aud: str = Field(default="authenticated", description="Audience")
    role: str = Field(default="authenticated", description="User role")

    # Supabase-specific claims
    app_metadata: dict = Field(default_factory=dict)
    user_metadata: dict = Field(default_factory=dict)

    @property
    def email_verified(self) -> bool:
        return bool(self.user_metadata.get("email_verified", False))


class TokenValidationResponse(BaseModel):
    """Response from token validation."""

    valid: bool = Field(..., description="Whether the token is valid")
    user: Optional[AuthenticatedUser] = Field(None, description="User if valid")
    error: Optional[str] = Field(None, description="Error message if invalid")
