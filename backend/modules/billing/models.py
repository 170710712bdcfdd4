"""
Billing module data models.

These models define the data structures used by the billing module
and exposed to other modules through the interface.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class SubscriptionStatus(str, Enum):
    """Subscription states mirrored from the payment provider."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    PAST_DUE = "past_due"
    CANCELED = "canceled"

    @classmethod
    def from_provider(cls, status: Optional[str]) -> "SubscriptionStatus":
        """
        Map a Stripe subscription status onto ours.

        active, past_due and canceled pass through; trialing, incomplete,
        unpaid and anything unknown become inactive.
        """
        if status in (cls.ACTIVE.value, cls.PAST_DUE.value, cls.CANCELED.value):
            return cls(status)
        return cls.INACTIVE


class Subscription(BaseModel):
    """
    A user's subscription record.

    A user without a record is on the free tier.
    """

    user_id: str = Field(..., description="User ID")
    stripe_customer_id: Optional[str] = Field(None, description="Stripe customer ID")
    stripe_subscription_id: Optional[str] = Field(
        None, description="Stripe subscription ID"
    )
    status: SubscriptionStatus = Field(
        default=SubscriptionStatus.INACTIVE,
        description="Current subscription status",
    )
    price_id: Optional[str] = Field(None, description="Subscribed Stripe price")
    current_period_end: Optional[datetime] = Field(
        None, description="End of the paid period"
    )
    updated_at: Optional[datetime] = Field(None, description="Last change")

    @property
    def is_paid(self) -> bool:
        return self.status == SubscriptionStatus.ACTIVE


class CheckoutRequest(BaseModel):
    """Request to start a subscription checkout."""

    price_id: Optional[str] = Field(
        None, alias="priceId", description="Stripe price to subscribe to"
    )

    model_config = {"populate_by_name": True}


class UrlResponse(BaseModel):
    """Redirect target for checkout and portal sessions."""

    url: str = Field(..., description="URL to redirect the user to")


class SubscriptionResponse(BaseModel):
    """API response for subscription queries."""

    status: SubscriptionStatus = Field(..., description="Subscription status")
    is_paid: bool = Field(..., description="Whether pro features are unlocked")
    price_id: Optional[str] = Field(None, description="Subscribed price")
    current_period_end: Optional[datetime] = Field(None, description="Period end")


class WebhookAck(BaseModel):
    """Acknowledgement returned to the payment provider."""

    received: bool = True
    error: Optional[str] = None
