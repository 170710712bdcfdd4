"""
Usage tracking service implementation.

Provides both in-memory (for testing) and Supabase-backed (for production)
implementations of the weekly simulation quota.
"""

import logging
from datetime import date, datetime, timezone
from typing import Any, Optional, Union

from dateutil.relativedelta import relativedelta, MO

from shared.models import OwnerRef

from .exceptions import InvalidUsageAmountError
from .models import UsageRecord, UsageSnapshot

logger = logging.getLogger(__name__)

DEFAULT_FREE_LIMIT = 3


def get_week_start(now: Optional[Union[datetime, date]] = None) -> date:
    """
    Get the Monday of the week containing ``now``, in UTC.

    Naive datetimes are treated as UTC. A Monday maps to itself.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    if isinstance(now, datetime):
        if now.tzinfo is not None:
            now = now.astimezone(timezone.utc)
        now = now.date()
    return now + relativedelta(weekday=MO(-1))


class UsageService:
    """
    Weekly usage service with in-memory storage.

    For testing and development. Use SupabaseUsageService for production.
    """

    def __init__(self, free_limit: int = DEFAULT_FREE_LIMIT):
        """
        Initialize the usage service.

        Args:
            free_limit: Simulations a free identity may start per week
        """
        self.free_limit = free_limit
        # (owner, week_start) -> record
        self._records: dict[tuple[OwnerRef, date], UsageRecord] = {}

    async def get_count(
        self,
        owner: OwnerRef,
        week_start: Optional[date] = None,
    ) -> int:
        """Get simulations used by an owner in a week."""
        week_start = week_start or get_week_start()
        record = self._records.get((owner, week_start))
        return record.simulations_used if record else 0

    async def check(
        self,
        owner: OwnerRef,
        is_paid: bool = False,
        week_start: Optional[date] = None,
    ) -> UsageSnapshot:
        """Check whether another simulation may start this week."""
        week_start = week_start or get_week_start()
        used = await self.get_count(owner, week_start)

        if is_paid:
            return UsageSnapshot(
                allowed=True, used=used, limit=None, week_start=week_start
            )

        return UsageSnapshot(
            allowed=used < self.free_limit,
            used=used,
            limit=self.free_limit,
            week_start=week_start,
        )

    async def increment(
        self,
        owner: OwnerRef,
        week_start: Optional[date] = None,
    ) -> int:
        """Record one simulation for the owner."""
        return await self.add(owner, 1, week_start)

    async def add(
        self,
        owner: OwnerRef,
        amount: int,
        week_start: Optional[date] = None,
    ) -> int:
        """Add simulations to the owner's weekly count."""
        if amount <= 0:
            raise InvalidUsageAmountError(amount, owner.id)

        week_start = week_start or get_week_start()
        key = (owner, week_start)
        record = self._records.get(key)
        if record is None:
            record = UsageRecord(
                **{owner.column: owner.id},
                week_start=week_start,
            )
            self._records[key] = record

        record.simulations_used += amount
        record.updated_at = datetime.now(timezone.utc)
        return record.simulations_used

    async def delete_all(self, owner: OwnerRef) -> None:
        """Delete all of the owner's records."""
        for key in [k for k in self._records if k[0] == owner]:
            del self._records[key]

    async def merge(
        self,
        source: OwnerRef,
        target: OwnerRef,
        week_start: Optional[date] = None,
    ) -> int:
        """
        Move the source's current-week count onto the target.

        Read, then delete, then add. If the process dies between the
        delete and the add the moved simulations are lost rather than
        counted twice, and a retry finds nothing left to move.
        """
        week_start = week_start or get_week_start()
        moved = await self.get_count(source, week_start)
        await self.delete_all(source)

        if moved > 0:
            await self.add(target, moved, week_start)
            logger.info(
                "Merged %d simulation(s) from %s %s to %s %s",
                moved, source.kind.value, source.id, target.kind.value, target.id,
            )
        return moved


class SupabaseUsageService(UsageService):
    """
    Usage service with Supabase persistence.

    Extends the base UsageService to store counts in the
    ``usage_limits`` table while maintaining the same interface.
    """

    TABLE = "usage_limits"

    def __init__(self, supabase_client: Any, free_limit: int = DEFAULT_FREE_LIMIT):
        """
        Initialize with Supabase client.

        Args:
            supabase_client: Supabase client instance
            free_limit: Simulations a free identity may start per week
        """
        super().__init__(free_limit)
        self._db = supabase_client

    def _select_week(self, owner: OwnerRef, week_start: date) -> Optional[dict]:
        result = self._db.table(self.TABLE).select("*").eq(
            owner.column, owner.id
        ).eq(
            "week_start", week_start.isoformat()
        ).execute()

        if result.data:
            return result.data[0]
        return None

    async def get_count(
        self,
        owner: OwnerRef,
        week_start: Optional[date] = None,
    ) -> int:
        """Get the weekly count from the database."""
        row = self._select_week(owner, week_start or get_week_start())
        if row:
            return row.get("simulations_used", 0) or 0
        return 0

    async def add(
        self,
        owner: OwnerRef,
        amount: int,
        week_start: Optional[date] = None,
    ) -> int:
        """Add to the weekly count, creating the row on first use."""
        if amount <= 0:
            raise InvalidUsageAmountError(amount, owner.id)

        week_start = week_start or get_week_start()
        now = datetime.now(timezone.utc).isoformat()
        row = self._select_week(owner, week_start)

        if row:
            new_count = (row.get("simulations_used", 0) or 0) + amount
            self._db.table(self.TABLE).update({
                "simulations_used": new_count,
                "updated_at": now,
            }).eq("id", row["id"]).execute()
        else:
            new_count = amount
            self._db.table(self.TABLE).insert({
                owner.column: owner.id,
                "week_start": week_start.isoformat(),
                "simulations_used": new_count,
                "updated_at": now,
            }).execute()

        return new_count

    async def delete_all(self, owner: OwnerRef) -> None:
        """Delete every row of the owner."""
        self._db.table(self.TABLE).delete().eq(owner.column, owner.id).execute()
