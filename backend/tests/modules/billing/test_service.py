"""Tests for the billing service."""

from unittest.mock import MagicMock, patch

import pytest
import stripe

from modules.billing.exceptions import (
    BillingNotConfiguredError,
    InvalidPriceError,
    InvalidWebhookPayloadError,
    NoSubscriptionError,
    PaymentProviderError,
    WebhookVerificationError,
)
from modules.billing.models import SubscriptionStatus
from modules.billing.service import BillingService
from shared.models import AuthenticatedUser

from .conftest import event, sign, stripe_settings

USER = AuthenticatedUser(id="user-1", email="user@example.com")

SUBSCRIPTION = {
    "id": "sub_123",
    "customer": "cus_123",
    "status": "active",
    "current_period_end": 1767225600,  # 2026-01-01T00:00:00Z
    "items": {"data": [{"price": {"id": "price_monthly"}}]},
}


class TestSubscriptionState:
    @pytest.mark.asyncio
    async def test_no_record_is_not_paid(self, billing_service):
        assert await billing_service.get_subscription("user-1") is None
        assert await billing_service.is_paid("user-1") is False

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status,paid", [
        ("active", True),
        ("past_due", False),
        ("canceled", False),
        ("inactive", False),
    ])
    async def test_only_active_is_paid(self, billing_service, repository, status, paid):
        repository.upsert("user-1", {"stripe_customer_id": "cus_123", "status": status})
        assert await billing_service.is_paid("user-1") is paid


class TestCheckout:
    @pytest.mark.asyncio
    @patch("modules.billing.service.stripe.checkout.Session.create")
    @patch("modules.billing.service.stripe.Customer.create")
    async def test_creates_customer_once(self, mock_customer, mock_session, billing_service, repository):
        mock_customer.return_value = MagicMock(id="cus_new")
        mock_session.return_value = MagicMock(url="https://checkout.stripe.com/c/1")

        url = await billing_service.create_checkout_session(USER, "price_monthly")
        await billing_service.create_checkout_session(USER, "price_annual")

        assert url == "https://checkout.stripe.com/c/1"
        mock_customer.assert_called_once()
        assert mock_customer.call_args.kwargs["metadata"]["user_id"] == "user-1"
        assert repository.get_by_user("user-1").stripe_customer_id == "cus_new"
        assert repository.get_by_user("user-1").status == SubscriptionStatus.INACTIVE

    @pytest.mark.asyncio
    @patch("modules.billing.service.stripe.checkout.Session.create")
    @patch("modules.billing.service.stripe.Customer.create")
    async def test_checkout_urls(self, mock_customer, mock_session, billing_service):
        mock_customer.return_value = MagicMock(id="cus_new")
        mock_session.return_value = MagicMock(url="https://checkout")

        await billing_service.create_checkout_session(USER, "price_monthly")

        kwargs = mock_session.call_args.kwargs
        assert kwargs["mode"] == "subscription"
        assert kwargs["customer"] == "cus_new"
        assert kwargs["line_items"] == [{"price": "price_monthly", "quantity": 1}]
        assert kwargs["success_url"] == "https://app.example.com/account?success=true"
        assert kwargs["cancel_url"] == "https://app.example.com/pricing?canceled=true"
        assert kwargs["api_key"] == "sk_test_123"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("price_id", [None, "", "price_unknown"])
    async def test_rejects_unknown_price(self, billing_service, price_id):
        with pytest.raises(InvalidPriceError):
            await billing_service.create_checkout_session(USER, price_id)

    @pytest.mark.asyncio
    async def test_not_configured(self, repository):
        service = BillingService(repository, settings=stripe_settings(stripe_secret_key=""))
        with pytest.raises(BillingNotConfiguredError) as exc_info:
            await service.create_checkout_session(USER, "price_monthly")
        assert exc_info.value.status_code == 503

    @pytest.mark.asyncio
    @patch("modules.billing.service.stripe.Customer.create")
    async def test_stripe_error_is_wrapped(self, mock_customer, billing_service):
        mock_customer.side_effect = stripe.StripeError("card network down")
        with pytest.raises(PaymentProviderError) as exc_info:
            await billing_service.create_checkout_session(USER, "price_monthly")
        assert exc_info.value.status_code == 502


class TestPortal:
    @pytest.mark.asyncio
    @patch("modules.billing.service.stripe.billing_portal.Session.create")
    async def test_returns_portal_url(self, mock_portal, billing_service, repository):
        repository.upsert("user-1", {"stripe_customer_id": "cus_123", "status": "active"})
        mock_portal.return_value = MagicMock(url="https://billing.stripe.com/p/1")

        url = await billing_service.create_portal_session(USER)

        assert url == "https://billing.stripe.com/p/1"
        assert mock_portal.call_args.kwargs["customer"] == "cus_123"
        assert mock_portal.call_args.kwargs["return_url"] == "https://app.example.com/account"

    @pytest.mark.asyncio
    async def test_requires_customer(self, billing_service):
        with pytest.raises(NoSubscriptionError):
            await billing_service.create_portal_session(USER)


class TestWebhook:
    @pytest.fixture(autouse=True)
    def customer_row(self, repository):
        repository.upsert("user-1", {"stripe_customer_id": "cus_123", "status": "inactive"})

    @pytest.mark.asyncio
    async def test_subscription_updated(self, billing_service, repository):
        body = event("customer.subscription.updated", SUBSCRIPTION)

        event_type = await billing_service.handle_webhook(body.encode(), sign(body))

        assert event_type == "customer.subscription.updated"
        sub = repository.get_by_user("user-1")
        assert sub.status == SubscriptionStatus.ACTIVE
        assert sub.stripe_subscription_id == "sub_123"
        assert sub.price_id == "price_monthly"
        assert sub.current_period_end.year == 2026

    @pytest.mark.asyncio
    @pytest.mark.parametrize("stripe_status,expected", [
        ("past_due", SubscriptionStatus.PAST_DUE),
        ("trialing", SubscriptionStatus.INACTIVE),
        ("incomplete", SubscriptionStatus.INACTIVE),
        ("unpaid", SubscriptionStatus.INACTIVE),
    ])
    async def test_status_mapping(self, billing_service, repository, stripe_status, expected):
        body = event("customer.subscription.updated", {**SUBSCRIPTION, "status": stripe_status})
        await billing_service.handle_webhook(body.encode(), sign(body))
        assert repository.get_by_user("user-1").status == expected

    @pytest.mark.asyncio
    async def test_subscription_deleted(self, billing_service, repository):
        repository.update_by_customer("cus_123", {"status": "active", "stripe_subscription_id": "sub_123"})
        body = event("customer.subscription.deleted", SUBSCRIPTION)

        await billing_service.handle_webhook(body.encode(), sign(body))

        sub = repository.get_by_user("user-1")
        assert sub.status == SubscriptionStatus.CANCELED
        assert sub.stripe_subscription_id is None
        assert sub.is_paid is False

    @pytest.mark.asyncio
    @patch("modules.billing.service.stripe.Subscription.retrieve")
    async def test_checkout_completed_fetches_subscription(self, mock_retrieve, billing_service, repository):
        mock_retrieve.return_value = SUBSCRIPTION
        body = event("checkout.session.completed", {
            "mode": "subscription",
            "customer": "cus_123",
            "subscription": "sub_123",
        })

        await billing_service.handle_webhook(body.encode(), sign(body))

        mock_retrieve.assert_called_once_with("sub_123", api_key="sk_test_123")
        assert repository.get_by_user("user-1").is_paid is True

    @pytest.mark.asyncio
    @patch("modules.billing.service.stripe.Subscription.retrieve")
    async def test_one_time_checkout_ignored(self, mock_retrieve, billing_service):
        body = event("checkout.session.completed", {"mode": "payment", "customer": "cus_123"})
        await billing_service.handle_webhook(body.encode(), sign(body))
        mock_retrieve.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_event_acknowledged(self, billing_service):
        body = event("invoice.paid", {"customer": "cus_123"})
        assert await billing_service.handle_webhook(body.encode(), sign(body)) == "invoice.paid"

    @pytest.mark.asyncio
    async def test_unknown_customer_is_ignored(self, billing_service, repository):
        body = event("customer.subscription.updated", {**SUBSCRIPTION, "customer": "cus_other"})
        await billing_service.handle_webhook(body.encode(), sign(body))
        assert repository.get_by_user("user-1").status == SubscriptionStatus.INACTIVE

    @pytest.mark.asyncio
    @patch("modules.billing.service.stripe.Subscription.retrieve")
    async def test_processing_error_is_swallowed(self, mock_retrieve, billing_service):
        """A verified event that fails to apply is still acknowledged."""
        mock_retrieve.side_effect = stripe.StripeError("boom")
        body = event("checkout.session.completed", {
            "mode": "subscription", "customer": "cus_123", "subscription": "sub_123",
        })
        assert await billing_service.handle_webhook(body.encode(), sign(body)) == "checkout.session.completed"

    @pytest.mark.asyncio
    async def test_missing_signature(self, billing_service):
        body = event("invoice.paid", {})
        with pytest.raises(WebhookVerificationError, match="Missing stripe-signature"):
            await billing_service.handle_webhook(body.encode(), None)

    @pytest.mark.asyncio
    async def test_bad_signature(self, billing_service):
        body = event("invoice.paid", {})
        with pytest.raises(WebhookVerificationError):
            await billing_service.handle_webhook(body.encode(), sign(body, secret="whsec_wrong"))

    @pytest.mark.asyncio
    async def test_unsigned_when_no_secret(self, repository):
        service = BillingService(repository, settings=stripe_settings(stripe_webhook_secret=""))
        body = event("customer.subscription.updated", SUBSCRIPTION)
        await service.handle_webhook(body.encode(), None)
        assert repository.get_by_user("user-1").is_paid is True

    @pytest.mark.asyncio
    async def test_invalid_json(self, repository):
        service = BillingService(repository, settings=stripe_settings(stripe_webhook_secret=""))
        with pytest.raises(InvalidWebhookPayloadError):
            await service.handle_webhook(b"not json", None)

    @pytest.mark.asyncio
    async def test_non_utf8_body(self, billing_service):
        with pytest.raises(InvalidWebhookPayloadError):
            await billing_service.handle_webhook(b"\xff\xfe{bad", "t=1,v1=abc")
