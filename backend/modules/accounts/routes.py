"""
Account API endpoints.
"""

from typing import Optional

from fastapi import APIRouter, Body, Depends

from api.dependencies import get_account_service
from api.middleware.auth import get_current_user
from shared.models import AuthenticatedUser

from .models import MigrateAnonRequest, MigrateAnonResponse
from .service import AccountService

router = APIRouter()


@router.post("/migrate-anon", response_model=MigrateAnonResponse)
async def migrate_anonymous(
    request: Optional[MigrateAnonRequest] = Body(None),
    user: AuthenticatedUser = Depends(get_current_user),
    accounts: AccountService = Depends(get_account_service),
) -> MigrateAnonResponse:
    """
    Attach the caller's anonymous sessions and usage to their account.

    Call once after sign-up or sign-in. Without an anon_id nothing moves.
    """
    anon_id = request.anon_id if request else None
    migrated = await accounts.migrate_anonymous(anon_id, user)
    return MigrateAnonResponse(migrated=migrated)
