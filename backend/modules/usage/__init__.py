"""
Usage tracking module.

Counts simulations per identity per calendar week (Monday, UTC) and
enforces the free-tier weekly ceiling.

Public API:
- IUsageService: Interface for usage operations
- UsageRecord: One (owner, week) counter
- UsageSnapshot: Quota check result
- get_week_start: Monday of the week containing a timestamp
"""

from .interfaces import IUsageService
from .models import (
    UsageRecord,
    UsageSnapshot,
    UsageSummaryResponse,
)
from .exceptions import (
    UsageError,
    WeeklyLimitReachedError,
    InvalidUsageAmountError,
)
from .service import (
    DEFAULT_FREE_LIMIT,
    UsageService,
    SupabaseUsageService,
    get_week_start,
)

__all__ = [
    # Interfaces
    "IUsageService",
    # Models
    "UsageRecord",
    "UsageSnapshot",
    "UsageSummaryResponse",
    # Exceptions
    "UsageError",
    "WeeklyLimitReachedError",
    "InvalidUsageAmountError",
    # Service
    "DEFAULT_FREE_LIMIT",
    "UsageService",
    "SupabaseUsageService",
    "get_week_start",
]
