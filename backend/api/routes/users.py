"""
User-related endpoints.

Provides endpoints for the signed-in user's account and practice profile.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from shared.models import AuthenticatedUser
from ..middleware.auth import get_current_user
from ..dependencies import get_account_service, get_billing_service
from modules.accounts.models import Profile, ProfileUpdate
from modules.accounts.service import AccountService
from modules.billing.interfaces import IBillingService

router = APIRouter()


class UserProfileResponse(BaseModel):
    """User profile response model."""

    id: str
    email: str
    email_verified: bool
    tier: str
    role: str


@router.get("/me", response_model=UserProfileResponse)
async def get_current_user_profile(
    user: AuthenticatedUser = Depends(get_current_user),
    billing: IBillingService = Depends(get_billing_service),
) -> UserProfileResponse:
    """
    Get the current user's account.

    Requires authentication. Tier is "pro" while a subscription is active.
    """
    is_paid = await billing.is_paid(user.id)
    return UserProfileResponse(
        id=user.id,
        email=user.email,
        email_verified=user.email_verified,
        tier="pro" if is_paid else "free",
        role=user.role,
    )


@router.get("/me/profile", response_model=Profile)
async def get_practice_profile(
    user: AuthenticatedUser = Depends(get_current_user),
    accounts: AccountService = Depends(get_account_service),
) -> Profile:
    """Get the current user's practice profile."""
    return await accounts.get_profile(user.id)


@router.put("/me/profile", response_model=Profile)
async def update_practice_profile(
    update: ProfileUpdate,
    user: AuthenticatedUser = Depends(get_current_user),
    accounts: AccountService = Depends(get_account_service),
) -> Profile:
    """Update the current user's practice profile."""
    return await accounts.update_profile(user.id, update)
