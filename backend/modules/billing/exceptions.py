"""
Billing module exceptions.

These exceptions are raised by the billing module and can be caught
by API error handlers to return appropriate HTTP responses.
"""

from typing import Optional

from shared.exceptions import (
    TutorError,
    NotFoundError,
    ServiceUnavailableError,
    ValidationError,
    ExternalServiceError,
)


class BillingError(TutorError):
    """Base exception for billing-related errors."""

    pass


class BillingNotConfiguredError(ServiceUnavailableError):
    """Raised when Stripe credentials are missing on this deployment."""

    def __init__(self):
        super().__init__(
            "Payments not configured",
            code="BILLING_NOT_CONFIGURED",
        )


class InvalidPriceError(ValidationError):
    """Raised when a checkout names no price or an unknown one."""

    def __init__(self, price_id: Optional[str]):
        if price_id:
            message = f"Invalid price ID: {price_id}"
        else:
            message = "Price ID is required"
        super().__init__(
            message,
            code="INVALID_PRICE",
            details={"price_id": price_id} if price_id else {},
        )


class NoSubscriptionError(NotFoundError):
    """Raised when a portal session is requested without a Stripe customer."""

    def __init__(self, user_id: Optional[str] = None):
        super().__init__(
            "No subscription found",
            code="NO_SUBSCRIPTION",
            details={"user_id": user_id} if user_id else {},
        )


class PaymentProviderError(ExternalServiceError):
    """Raised when a Stripe API call fails."""

    def __init__(self, message: str, stripe_error: Optional[str] = None):
        super().__init__(message, service="stripe")
        self.code = "PAYMENT_PROVIDER_ERROR"
        if stripe_error:
            self.details["stripe_error"] = stripe_error


class WebhookVerificationError(BillingError):
    """Raised when Stripe webhook signature verification fails."""

    def __init__(self, reason: str = "Webhook signature verification failed"):
        super().__init__(
            reason,
            code="WEBHOOK_VERIFICATION_FAILED",
        )


class InvalidWebhookPayloadError(BillingError):
    """Raised when a webhook body is not a JSON event."""

    def __init__(self):
        super().__init__(
            "Invalid payload",
            code="INVALID_WEBHOOK_PAYLOAD",
        )
