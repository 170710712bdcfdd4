"""
Scenario catalogue endpoint.
"""

from fastapi import APIRouter

from .generator import list_scenarios
from .models import ScenarioListResponse

router = APIRouter()


@router.get("", response_model=ScenarioListResponse)
async def get_scenarios() -> ScenarioListResponse:
    """List the scenario types a simulation can be started with."""
    return ScenarioListResponse(scenarios=list_scenarios())
