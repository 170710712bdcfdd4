"""
Usage tracking module data models.

These models define the data structures used by the usage module
and exposed to other modules through the interface.
"""

from datetime import date, datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from shared.models import OwnerRef


class UsageRecord(BaseModel):
    """
    Simulations consumed by one identity in one calendar week.

    Exactly one of user_id / anon_id is set.
    """

    id: Optional[str] = Field(None, description="Record ID (set after save)")
    user_id: Optional[str] = Field(None, description="Authenticated owner")
    anon_id: Optional[str] = Field(None, description="Anonymous owner")
    week_start: date = Field(..., description="Monday of the tracked week (UTC)")
    simulations_used: int = Field(default=0, ge=0, description="Simulations started")
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Last change",
    )

    @model_validator(mode="after")
    def check_single_owner(self) -> "UsageRecord":
        """Reject records attributed to both or neither identity."""
        if (self.user_id is None) == (self.anon_id is None):
            raise ValueError("Usage record needs exactly one of user_id or anon_id")
        return self

    @property
    def owner(self) -> OwnerRef:
        if self.user_id is not None:
            return OwnerRef.user(self.user_id)
        return OwnerRef.anon(self.anon_id)  # type: ignore[arg-type]


class UsageSnapshot(BaseModel):
    """
    Quota check result for one identity.

    ``limit`` is None for paid identities (unbounded).
    """

    allowed: bool = Field(..., description="Whether another simulation may start")
    used: int = Field(..., ge=0, description="Simulations used this week")
    limit: Optional[int] = Field(..., description="Weekly ceiling, None when unlimited")
    week_start: date = Field(..., description="Monday of the current week")

    @property
    def remaining(self) -> Optional[int]:
        if self.limit is None:
            return None
        return max(self.limit - self.used, 0)


class UsageSummaryResponse(BaseModel):
    """API response for the current week's usage."""

    week_start: date
    week_end: date
    used: int
    limit: Optional[int]
    remaining: Optional[int]
    is_paid: bool
