"""
Billing module interface.

Other modules should depend on IBillingService, not the concrete implementation.
This lets the sessions module ask whether a user is paid without knowing about Stripe.
"""

from typing import Protocol, Optional, runtime_checkable

from shared.models import AuthenticatedUser

from .models import Subscription


@runtime_checkable
class IBillingService(Protocol):
    """
    Interface for subscription and payment operations.

    The sessions and usage modules only need is_paid(); the rest backs
    the billing endpoints.
    """

    async def get_subscription(self, user_id: str) -> Optional[Subscription]:
        """
        Get a user's subscription record.

        Args:
            user_id: Supabase user ID (UUID)

        Returns:
            Subscription, or None when the user never started a checkout
        """
        ...

    async def is_paid(self, user_id: str) -> bool:
        """
        Check whether a user has an active subscription.

        A missing record means free tier.
        """
        ...

    async def create_checkout_session(
        self,
        user: AuthenticatedUser,
        price_id: Optional[str],
    ) -> str:
        """
        Start a Stripe checkout for a subscription.

        Creates the Stripe customer on first use and stores it with
        status inactive.

        Args:
            user: Authenticated caller
            price_id: One of the configured monthly/annual price IDs

        Returns:
            Checkout URL to redirect the user to

        Raises:
            BillingNotConfiguredError: If Stripe is not configured
            InvalidPriceError: If the price ID is missing or unknown
        """
        ...

    async def create_portal_session(self, user: AuthenticatedUser) -> str:
        """
        Open the Stripe customer portal.

        Raises:
            BillingNotConfiguredError: If Stripe is not configured
            NoSubscriptionError: If the user has no Stripe customer
        """
        ...

    async def handle_webhook(
        self,
        payload: bytes,
        signature: Optional[str],
    ) -> str:
        """
        Verify and apply a Stripe webhook event.

        Args:
            payload: Raw request body
            signature: Value of the Stripe-Signature header

        Returns:
            The event type that was received

        Raises:
            WebhookVerificationError: If the signature does not verify
            InvalidWebhookPayloadError: If the body is not a JSON event
        """
        ...
