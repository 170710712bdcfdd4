"""
Billing module.

Handles Stripe subscriptions: checkout, customer portal and webhooks
that keep the subscriptions table in sync.

Public API:
- IBillingService: Interface for billing operations
- Subscription: A user's subscription record
- SubscriptionStatus: Mirrored Stripe status
- Billing exceptions: BillingNotConfiguredError, etc.
"""

from .interfaces import IBillingService
from .models import (
    CheckoutRequest,
    Subscription,
    SubscriptionResponse,
    SubscriptionStatus,
    UrlResponse,
    WebhookAck,
)
from .exceptions import (
    BillingError,
    BillingNotConfiguredError,
    InvalidPriceError,
    InvalidWebhookPayloadError,
    NoSubscriptionError,
    PaymentProviderError,
    WebhookVerificationError,
)
from .repository import InMemorySubscriptionRepository, SubscriptionRepository
from .service import BillingService

__all__ = [
    # Interface
    "IBillingService",
    # Models
    "CheckoutRequest",
    "Subscription",
    "SubscriptionResponse",
    "SubscriptionStatus",
    "UrlResponse",
    "WebhookAck",
    # Exceptions
    "BillingError",
    "BillingNotConfiguredError",
    "InvalidPriceError",
    "InvalidWebhookPayloadError",
    "NoSubscriptionError",
    "PaymentProviderError",
    "WebhookVerificationError",
    # Storage
    "InMemorySubscriptionRepository",
    "SubscriptionRepository",
    # Service
    "BillingService",
]
