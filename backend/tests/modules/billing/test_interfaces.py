"""Tests that implementations satisfy the billing interface."""

from modules.billing.interfaces import IBillingService
from modules.billing.repository import InMemorySubscriptionRepository
from modules.billing.service import BillingService

from .conftest import stripe_settings


class TestBillingInterface:
    def test_billing_service_implements_interface(self):
        service = BillingService(InMemorySubscriptionRepository(), settings=stripe_settings())
        assert isinstance(service, IBillingService)
