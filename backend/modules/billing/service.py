"""
Billing service implementation.

Bridges Stripe checkout, the customer portal and subscription webhooks
onto the subscriptions table. Storage is injected: SubscriptionRepository
for Supabase, InMemorySubscriptionRepository for tests and local runs.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Optional, Union

import stripe

from shared.config import Settings, get_settings
from shared.models import AuthenticatedUser

from .exceptions import (
    BillingNotConfiguredError,
    InvalidPriceError,
    InvalidWebhookPayloadError,
    NoSubscriptionError,
    PaymentProviderError,
    WebhookVerificationError,
)
from .models import Subscription, SubscriptionStatus
from .repository import InMemorySubscriptionRepository, SubscriptionRepository

logger = logging.getLogger(__name__)


def _field(obj: Any, key: str, default: Any = None) -> Any:
    """Read a key from a Stripe object or a plain webhook dict."""
    if obj is None:
        return default
    try:
        value = obj[key]
    except (KeyError, TypeError):
        return default
    return default if value is None else value


def _subscription_columns(sub: Any) -> dict[str, Any]:
    """Extract the columns we mirror from a Stripe subscription."""
    items = _field(_field(sub, "items"), "data", [])
    first_item = items[0] if items else None

    period_end = _field(sub, "current_period_end") or _field(
        first_item, "current_period_end"
    )

    return {
        "stripe_subscription_id": _field(sub, "id"),
        "status": SubscriptionStatus.from_provider(_field(sub, "status")).value,
        "price_id": _field(_field(first_item, "price"), "id"),
        "current_period_end": (
            datetime.fromtimestamp(period_end, tz=timezone.utc).isoformat()
            if period_end
            else None
        ),
    }


class BillingService:
    """
    Subscription billing through Stripe.

    Every Stripe call passes the secret key explicitly so no global
    SDK state is touched.
    """

    def __init__(
        self,
        repository: Union[SubscriptionRepository, InMemorySubscriptionRepository],
        settings: Optional[Settings] = None,
    ):
        self._repository = repository
        self._settings = settings or get_settings()

    def _require_configured(self) -> None:
        if not self._settings.stripe_configured:
            raise BillingNotConfiguredError()

    @property
    def _api_key(self) -> str:
        return self._settings.stripe_secret_key

    # -------------------------------------------------------------------------
    # Subscription state
    # -------------------------------------------------------------------------

    async def get_subscription(self, user_id: str) -> Optional[Subscription]:
        """Get a user's subscription record."""
        return self._repository.get_by_user(user_id)

    async def is_paid(self, user_id: str) -> bool:
        """Check whether a user has an active subscription."""
        subscription = self._repository.get_by_user(user_id)
        return subscription is not None and subscription.is_paid

    # -------------------------------------------------------------------------
    # Checkout and portal
    # -------------------------------------------------------------------------

    async def _ensure_customer(self, user: AuthenticatedUser) -> str:
        """Return the user's Stripe customer ID, creating the customer once."""
        existing = self._repository.get_by_user(user.id)
        if existing and existing.stripe_customer_id:
            return existing.stripe_customer_id

        try:
            customer = stripe.Customer.create(
                api_key=self._api_key,
                email=user.email or None,
                metadata={"user_id": user.id, "app": self._settings.app_name},
            )
        except stripe.StripeError as e:
            raise PaymentProviderError("Failed to create customer", str(e)) from e

        self._repository.upsert(user.id, {
            "stripe_customer_id": customer.id,
            "status": SubscriptionStatus.INACTIVE.value,
        })
        logger.info("Created Stripe customer %s for user %s", customer.id, user.id)
        return customer.id

    async def create_checkout_session(
        self,
        user: AuthenticatedUser,
        price_id: Optional[str],
    ) -> str:
        """Start a subscription checkout and return its URL."""
        self._require_configured()

        if not price_id or price_id not in self._settings.stripe_price_ids:
            raise InvalidPriceError(price_id)

        customer_id = await self._ensure_customer(user)
        frontend = self._settings.frontend_url.rstrip("/")

        try:
            session = stripe.checkout.Session.create(
                api_key=self._api_key,
                customer=customer_id,
                mode="subscription",
                line_items=[{"price": price_id, "quantity": 1}],
                success_url=f"{frontend}/account?success=true",
                cancel_url=f"{frontend}/pricing?canceled=true",
                metadata={"user_id": user.id},
            )
        except stripe.StripeError as e:
            raise PaymentProviderError("Failed to create checkout session", str(e)) from e

        return session.url

    async def create_portal_session(self, user: AuthenticatedUser) -> str:
        """Open the customer portal and return its URL."""
        self._require_configured()

        subscription = self._repository.get_by_user(user.id)
        if not subscription or not subscription.stripe_customer_id:
            raise NoSubscriptionError(user.id)

        frontend = self._settings.frontend_url.rstrip("/")
        try:
            session = stripe.billing_portal.Session.create(
                api_key=self._api_key,
                customer=subscription.stripe_customer_id,
                return_url=f"{frontend}/account",
            )
        except stripe.StripeError as e:
            raise PaymentProviderError("Failed to create portal session", str(e)) from e

        return session.url

    # -------------------------------------------------------------------------
    # Webhooks
    # -------------------------------------------------------------------------

    def _parse_event(self, payload: bytes, signature: Optional[str]) -> dict[str, Any]:
        try:
            body = payload.decode("utf-8") if isinstance(payload, bytes) else payload
        except UnicodeDecodeError as e:
            raise InvalidWebhookPayloadError() from e

        secret = self._settings.stripe_webhook_secret
        if secret:
            if not signature:
                raise WebhookVerificationError("Missing stripe-signature header")
            try:
                stripe.WebhookSignature.verify_header(
                    body, signature, secret, stripe.Webhook.DEFAULT_TOLERANCE
                )
            except stripe.SignatureVerificationError as e:
                raise WebhookVerificationError() from e

        try:
            event = json.loads(body)
        except json.JSONDecodeError as e:
            raise InvalidWebhookPayloadError() from e

        if not isinstance(event, dict) or "type" not in event:
            raise InvalidWebhookPayloadError()
        return event

    async def handle_webhook(self, payload: bytes, signature: Optional[str]) -> str:
        """
        Verify and apply a webhook event.

        Verification and parse errors propagate. Failures while applying
        a verified event are logged and the event is acknowledged anyway.
        """
        event = self._parse_event(payload, signature)
        event_type = event["type"]
        obj = _field(_field(event, "data"), "object", {})

        try:
            if event_type == "checkout.session.completed":
                self._on_checkout_completed(obj)
            elif event_type in (
                "customer.subscription.created",
                "customer.subscription.updated",
            ):
                self._on_subscription_changed(obj)
            elif event_type == "customer.subscription.deleted":
                self._on_subscription_deleted(obj)
            else:
                logger.info("Ignoring Stripe event %s", event_type)
        except Exception:
            logger.exception("Failed to process Stripe event %s", event_type)

        return event_type

    def _on_checkout_completed(self, session: Any) -> None:
        if _field(session, "mode") != "subscription":
            return

        customer_id = _field(session, "customer")
        subscription_id = _field(session, "subscription")
        if not customer_id or not subscription_id:
            logger.warning("Checkout session without customer or subscription")
            return

        sub = stripe.Subscription.retrieve(subscription_id, api_key=self._api_key)
        self._apply(customer_id, _subscription_columns(sub))

    def _on_subscription_changed(self, sub: Any) -> None:
        self._apply(_field(sub, "customer"), _subscription_columns(sub))

    def _on_subscription_deleted(self, sub: Any) -> None:
        self._apply(_field(sub, "customer"), {
            "status": SubscriptionStatus.CANCELED.value,
            "stripe_subscription_id": None,
            "price_id": None,
        })

    def _apply(self, customer_id: Optional[str], columns: dict[str, Any]) -> None:
        if not customer_id:
            logger.warning("Stripe event without customer ID")
            return

        updated = self._repository.update_by_customer(customer_id, columns)
        if updated is None:
            logger.warning("No subscription row for Stripe customer %s", customer_id)
        else:
            logger.info(
                "Subscription for user %s is now %s",
                updated.user_id, updated.status.value,
            )

