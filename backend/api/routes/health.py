"""
Health check endpoints.

Provides endpoints for monitoring application health and readiness.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from shared.config import get_settings
from ..dependencies import get_coach_service
from modules.coaching.interfaces import ICoach

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    version: str


class ReadinessResponse(BaseModel):
    """Readiness check response model."""

    status: str
    database: str
    coach: str
    payments: str


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Basic health check endpoint.

    Returns 200 if the API is running.
    """
    return HealthResponse(status="healthy", version=get_settings().app_version)


@router.get("/ready", response_model=ReadinessResponse)
async def readiness_check(coach: ICoach = Depends(get_coach_service)) -> ReadinessResponse:
    """
    Readiness check endpoint.

    Reports which integrations this deployment is running with.
    """
    settings = get_settings()
    return ReadinessResponse(
        status="ready",
        database="supabase" if settings.supabase_configured else "memory",
        coach="openai" if coach.is_live else "fallback",
        payments="stripe" if settings.stripe_configured else "disabled",
    )
