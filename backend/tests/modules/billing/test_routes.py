"""Tests for billing API endpoints."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from api.app import create_app
from api.dependencies import get_billing_service
from modules.billing.exceptions import (
    BillingNotConfiguredError,
    InvalidPriceError,
    WebhookVerificationError,
)
from modules.billing.models import Subscription, SubscriptionStatus
from modules.billing.service import BillingService

from .conftest import WEBHOOK_SECRET, stripe_settings


@pytest.fixture
def mock_billing():
    service = MagicMock()
    service.create_checkout_session = AsyncMock(return_value="https://checkout.stripe.com/c/1")
    service.create_portal_session = AsyncMock(return_value="https://billing.stripe.com/p/1")
    service.get_subscription = AsyncMock(return_value=None)
    service.handle_webhook = AsyncMock(return_value="invoice.paid")
    return service


@pytest.fixture
def client(mock_billing):
    app = create_app()
    app.dependency_overrides[get_billing_service] = lambda: mock_billing
    return TestClient(app)


class TestCheckoutEndpoint:
    def test_requires_authentication(self, client):
        assert client.post("/api/billing/checkout", json={"priceId": "price_1"}).status_code == 401

    def test_returns_checkout_url(self, client, mock_billing, auth_headers):
        response = client.post(
            "/api/billing/checkout", json={"priceId": "price_monthly"}, headers=auth_headers
        )
        assert response.status_code == 200
        assert response.json() == {"url": "https://checkout.stripe.com/c/1"}
        user, price_id = mock_billing.create_checkout_session.call_args.args
        assert user.id == "test-user-123"
        assert price_id == "price_monthly"

    def test_invalid_price(self, client, mock_billing, auth_headers):
        mock_billing.create_checkout_session.side_effect = InvalidPriceError("price_x")
        response = client.post("/api/billing/checkout", json={"priceId": "price_x"}, headers=auth_headers)
        assert response.status_code == 400
        assert response.json()["error"] == "INVALID_PRICE"

    def test_not_configured(self, client, mock_billing, auth_headers):
        mock_billing.create_checkout_session.side_effect = BillingNotConfiguredError()
        response = client.post("/api/billing/checkout", json={}, headers=auth_headers)
        assert response.status_code == 503
        assert response.json()["message"] == "Payments not configured"


class TestPortalEndpoint:
    def test_returns_portal_url(self, client, auth_headers):
        response = client.post("/api/billing/portal", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["url"] == "https://billing.stripe.com/p/1"


class TestSubscriptionEndpoint:
    def test_without_record(self, client, auth_headers):
        response = client.get("/api/billing/subscription", headers=auth_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "inactive"
        assert data["is_paid"] is False

    def test_active(self, client, mock_billing, auth_headers):
        mock_billing.get_subscription.return_value = Subscription(
            user_id="test-user-123",
            status=SubscriptionStatus.ACTIVE,
            price_id="price_monthly",
            current_period_end=datetime(2026, 1, 1, tzinfo=timezone.utc),
        )
        data = client.get("/api/billing/subscription", headers=auth_headers).json()
        assert data["status"] == "active"
        assert data["is_paid"] is True
        assert data["price_id"] == "price_monthly"


class TestWebhookEndpoint:
    def test_acknowledges(self, client, mock_billing):
        response = client.post(
            "/api/billing/webhook",
            content=b'{"type": "invoice.paid"}',
            headers={"stripe-signature": "t=1,v1=abc"},
        )
        assert response.status_code == 200
        assert response.json() == {"received": True}
        payload, signature = mock_billing.handle_webhook.call_args.args
        assert payload == b'{"type": "invoice.paid"}'
        assert signature == "t=1,v1=abc"

    def test_verification_failure_still_200(self, client, mock_billing):
        mock_billing.handle_webhook.side_effect = WebhookVerificationError()
        response = client.post("/api/billing/webhook", content=b"{}")
        assert response.status_code == 200
        assert response.json() == {
            "received": True,
            "error": "Webhook signature verification failed",
        }

    def test_unexpected_failure_still_200(self, client, mock_billing):
        mock_billing.handle_webhook.side_effect = RuntimeError("database down")
        response = client.post("/api/billing/webhook", content=b"{}")
        assert response.status_code == 200
        assert response.json() == {"received": True, "error": "Webhook processing failed"}


class TestWebhookUndecodableBody:
    @pytest.mark.parametrize("secret,headers", [
        ("", {}),
        (WEBHOOK_SECRET, {"stripe-signature": "t=1,v1=abc"}),
    ])
    def test_non_utf8_body_is_acknowledged(self, repository, secret, headers):
        service = BillingService(repository, settings=stripe_settings(stripe_webhook_secret=secret))
        app = create_app()
        app.dependency_overrides[get_billing_service] = lambda: service

        response = TestClient(app).post(
            "/api/billing/webhook", content=b"\xff\xfe{bad", headers=headers
        )

        assert response.status_code == 200
        assert response.json() == {"received": True, "error": "Invalid payload"}
