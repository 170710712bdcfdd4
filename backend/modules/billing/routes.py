"""
Billing API endpoints.

Checkout, customer portal, subscription status and the Stripe webhook.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, Request

from api.dependencies import get_billing_service
from api.middleware.auth import get_current_user
from shared.models import AuthenticatedUser

from .exceptions import InvalidWebhookPayloadError, WebhookVerificationError
from .interfaces import IBillingService
from .models import (
    CheckoutRequest,
    SubscriptionResponse,
    SubscriptionStatus,
    UrlResponse,
    WebhookAck,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/checkout", response_model=UrlResponse)
async def create_checkout(
    request: CheckoutRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    billing: IBillingService = Depends(get_billing_service),
) -> UrlResponse:
    """Start a Stripe checkout for the monthly or annual plan."""
    url = await billing.create_checkout_session(user, request.price_id)
    return UrlResponse(url=url)


@router.post("/portal", response_model=UrlResponse)
async def create_portal(
    user: AuthenticatedUser = Depends(get_current_user),
    billing: IBillingService = Depends(get_billing_service),
) -> UrlResponse:
    """Open the Stripe customer portal to manage the subscription."""
    url = await billing.create_portal_session(user)
    return UrlResponse(url=url)


@router.get("/subscription", response_model=SubscriptionResponse)
async def get_subscription(
    user: AuthenticatedUser = Depends(get_current_user),
    billing: IBillingService = Depends(get_billing_service),
) -> SubscriptionResponse:
    """Get the caller's subscription status."""
    subscription = await billing.get_subscription(user.id)
    if subscription is None:
        return SubscriptionResponse(status=SubscriptionStatus.INACTIVE, is_paid=False)

    return SubscriptionResponse(
        status=subscription.status,
        is_paid=subscription.is_paid,
        price_id=subscription.price_id,
        current_period_end=subscription.current_period_end,
    )


@router.post("/webhook", response_model=WebhookAck, response_model_exclude_none=True)
async def stripe_webhook(
    request: Request,
    stripe_signature: Optional[str] = Header(None, alias="stripe-signature"),
    billing: IBillingService = Depends(get_billing_service),
) -> WebhookAck:
    """
    Receive Stripe events.

    Always answers 200 so Stripe does not retry; verification problems
    are reported in the ``error`` field.
    """
    payload = await request.body()

    try:
        event_type = await billing.handle_webhook(payload, stripe_signature)
    except (WebhookVerificationError, InvalidWebhookPayloadError) as e:
        logger.warning("Rejected Stripe webhook: %s", e.message)
        return WebhookAck(error=e.message)
    except Exception:
        logger.exception("Failed to handle Stripe webhook")
        return WebhookAck(error="Webhook processing failed")

    logger.info("Stripe webhook %s acknowledged", event_type)
    return WebhookAck()
