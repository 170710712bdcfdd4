"""
Subscription repository for database access.

Encapsulates Supabase queries and data mapping for the subscriptions table.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from dateutil.parser import isoparse

from shared.repository import BaseRepository
from .models import Subscription, SubscriptionStatus


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    return isoparse(value)


class SubscriptionRepository(BaseRepository[Subscription]):
    """
    Repository for subscription data access.

    One row per user, keyed by user_id. Webhooks locate rows by
    Stripe customer ID.
    """

    TABLE = "subscriptions"

    def get_by_user(self, user_id: str) -> Optional[Subscription]:
        """Get a user's subscription, or None."""
        result = self._db.table(self.TABLE).select("*").eq("user_id", user_id).execute()
        if not result.data:
            return None
        return self._map_to_subscription(result.data[0])

    def upsert(self, user_id: str, data: dict[str, Any]) -> Subscription:
        """
        Create or update the user's row.

        Args:
            user_id: Owner of the row
            data: Columns to write (status values as plain strings)
        """
        row = {"user_id": user_id, **data, "updated_at": self._now_iso()}
        result = self._db.table(self.TABLE).upsert(row, on_conflict="user_id").execute()
        return self._map_to_subscription(result.data[0] if result.data else row)

    def update_by_customer(
        self,
        customer_id: str,
        data: dict[str, Any],
    ) -> Optional[Subscription]:
        """
        Update the row joined by Stripe customer ID.

        Returns:
            The updated subscription, or None if no row has that customer
        """
        result = self._db.table(self.TABLE).update(
            {**data, "updated_at": self._now_iso()}
        ).eq("stripe_customer_id", customer_id).execute()
        if not result.data:
            return None
        return self._map_to_subscription(result.data[0])

    # -------------------------------------------------------------------------
    # Mapping helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _map_to_subscription(row: dict[str, Any]) -> Subscription:
        return Subscription(
            user_id=row["user_id"],
            stripe_customer_id=row.get("stripe_customer_id"),
            stripe_subscription_id=row.get("stripe_subscription_id"),
            status=SubscriptionStatus.from_provider(row.get("status")),
            price_id=row.get("price_id"),
            current_period_end=_parse_timestamp(row.get("current_period_end")),
            updated_at=_parse_timestamp(row.get("updated_at")),
        )


class InMemorySubscriptionRepository:
    """
    Subscription storage kept in process memory.

    For tests and for running without Supabase.
    """

    def __init__(self) -> None:
        self._rows: dict[str, dict[str, Any]] = {}

    def get_by_user(self, user_id: str) -> Optional[Subscription]:
        row = self._rows.get(user_id)
        return SubscriptionRepository._map_to_subscription(row) if row else None

    def upsert(self, user_id: str, data: dict[str, Any]) -> Subscription:
        row = self._rows.setdefault(user_id, {"user_id": user_id})
        row.update(data)
        row["updated_at"] = datetime.now(timezone.utc)
        return SubscriptionRepository._map_to_subscription(row)

    def update_by_customer(
        self,
        customer_id: str,
        data: dict[str, Any],
    ) -> Optional[Subscription]:
        for row in self._rows.values():
            if row.get("stripe_customer_id") == customer_id:
                row.update(data)
                row["updated_at"] = datetime.now(timezone.utc)
                return SubscriptionRepository._map_to_subscription(row)
        return None
