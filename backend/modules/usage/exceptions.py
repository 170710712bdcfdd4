"""
Usage tracking module exceptions.
"""

from typing import Optional

from shared.exceptions import TutorError, QuotaExceededError, ValidationError


class UsageError(TutorError):
    """Base exception for usage-related errors."""

    pass


class WeeklyLimitReachedError(QuotaExceededError):
    """
    Raised when a free identity has used up this week's simulations.

    Anonymous users are nudged to sign up, authenticated users to upgrade.
    """

    def __init__(self, used: int, limit: int, anonymous: bool = False):
        if anonymous:
            message = "Weekly limit reached. Sign up for more."
        else:
            message = "Weekly limit reached. Upgrade to Pro for unlimited."
        super().__init__(
            message,
            code="WEEKLY_LIMIT_REACHED",
            details={"used": used, "limit": limit},
        )


class InvalidUsageAmountError(ValidationError):
    """Raised when a usage adjustment is not a positive count."""

    def __init__(self, amount: int, owner_id: Optional[str] = None):
        super().__init__(
            f"Invalid usage amount: {amount}. Amount must be positive",
            code="INVALID_USAGE_AMOUNT",
            details={"amount": amount},
        )
        if owner_id:
            self.details["owner_id"] = owner_id
