"""
Usage tracking endpoints.

Provides the weekly simulation count for the caller.
"""

from datetime import timedelta
from typing import Optional

from fastapi import APIRouter, Depends, Query

from shared.models import AuthenticatedUser
from ..middleware.auth import get_optional_user
from api.dependencies import get_billing_service, get_usage_service
from modules.billing.interfaces import IBillingService
from modules.sessions.service import resolve_owner
from modules.usage.interfaces import IUsageService
from modules.usage.models import UsageSummaryResponse

router = APIRouter()


@router.get("/summary", response_model=UsageSummaryResponse)
async def get_usage_summary(
    anon_id: Optional[str] = Query(None, description="Anonymous ID when signed out"),
    user: Optional[AuthenticatedUser] = Depends(get_optional_user),
    usage: IUsageService = Depends(get_usage_service),
    billing: IBillingService = Depends(get_billing_service),
) -> UsageSummaryResponse:
    """
    Get the simulation count for the current week.

    Signed-in callers see their own count; otherwise anon_id is required.
    Subscribers have no limit.
    """
    owner = resolve_owner(user, anon_id)
    is_paid = owner.is_user and await billing.is_paid(owner.id)
    snapshot = await usage.check(owner, is_paid=is_paid)

    return UsageSummaryResponse(
        week_start=snapshot.week_start,
        week_end=snapshot.week_start + timedelta(days=7),
        used=snapshot.used,
        limit=snapshot.limit,
        remaining=snapshot.remaining,
        is_paid=is_paid,
    )
