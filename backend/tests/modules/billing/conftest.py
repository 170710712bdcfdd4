"""Fixtures for billing module tests."""

import hashlib
import hmac
import json
import time

import pytest

from modules.billing.repository import InMemorySubscriptionRepository
from modules.billing.service import BillingService
from shared.config import Settings

WEBHOOK_SECRET = "whsec_test_secret"


def stripe_settings(**overrides) -> Settings:
    values = {
        "stripe_secret_key": "sk_test_123",
        "stripe_webhook_secret": WEBHOOK_SECRET,
        "stripe_price_id_monthly": "price_monthly",
        "stripe_price_id_annual": "price_annual",
        "frontend_url": "https://app.example.com/",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def sign(payload: str, secret: str = WEBHOOK_SECRET, timestamp: int | None = None) -> str:
    """Build a Stripe-Signature header for ``payload``."""
    timestamp = timestamp or int(time.time())
    digest = hmac.new(
        secret.encode(), f"{timestamp}.{payload}".encode(), hashlib.sha256
    ).hexdigest()
    return f"t={timestamp},v1={digest}"


def event(event_type: str, obj: dict) -> str:
    return json.dumps({"id": "evt_1", "type": event_type, "data": {"object": obj}})


@pytest.fixture
def repository() -> InMemorySubscriptionRepository:
    return InMemorySubscriptionRepository()


@pytest.fixture
def billing_service(repository) -> BillingService:
    return BillingService(repository, settings=stripe_settings())
