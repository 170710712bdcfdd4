"""
Usage tracking module interface.

Other modules should depend on IUsageService, not the concrete implementation.
This lets the sessions module enforce the weekly quota without knowing
where counts are stored.
"""

from datetime import date
from typing import Protocol, Optional, runtime_checkable

from shared.models import OwnerRef

from .models import UsageSnapshot


@runtime_checkable
class IUsageService(Protocol):
    """
    Interface for weekly usage quota operations.

    Counts are keyed by (owner, week_start). A missing record means zero.
    """

    free_limit: int

    async def get_count(
        self,
        owner: OwnerRef,
        week_start: Optional[date] = None,
    ) -> int:
        """
        Get the number of simulations used in a week.

        Args:
            owner: User or anonymous identity
            week_start: Monday of the week (defaults to the current week)

        Returns:
            Simulations used, 0 when no record exists
        """
        ...

    async def check(
        self,
        owner: OwnerRef,
        is_paid: bool = False,
        week_start: Optional[date] = None,
    ) -> UsageSnapshot:
        """
        Check whether the owner may start another simulation.

        This is a non-blocking check - it doesn't reserve anything.
        Paid owners are always allowed and report an unbounded limit.

        Args:
            owner: User or anonymous identity
            is_paid: Whether the owner has an active subscription
            week_start: Monday of the week (defaults to the current week)

        Returns:
            UsageSnapshot with allowed flag, used count and limit
        """
        ...

    async def increment(
        self,
        owner: OwnerRef,
        week_start: Optional[date] = None,
    ) -> int:
        """
        Record one consumed simulation.

        Returns:
            The new count for the week
        """
        ...

    async def add(
        self,
        owner: OwnerRef,
        amount: int,
        week_start: Optional[date] = None,
    ) -> int:
        """
        Add ``amount`` simulations to the owner's weekly count.

        Raises:
            InvalidUsageAmountError: If amount is not positive
        """
        ...

    async def delete_all(self, owner: OwnerRef) -> None:
        """Delete every usage record of an owner, across all weeks."""
        ...

    async def merge(
        self,
        source: OwnerRef,
        target: OwnerRef,
        week_start: Optional[date] = None,
    ) -> int:
        """
        Move the source's weekly count onto the target's (sum, not replace).

        All of the source's records are removed. Calling it again for the
        same source is a no-op.

        Returns:
            The number of simulations moved
        """
        ...
