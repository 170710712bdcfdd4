"""
Practice session API endpoints.

Three routers, mounted by the app under /api/simulations, /api/sessions
and /api/drills.
"""

from typing import Optional

from fastapi import APIRouter, Depends

from api.dependencies import get_session_service
from api.middleware.auth import get_current_user, get_optional_user
from modules.coaching.models import DrillEvaluation
from shared.audio import decode_audio
from shared.models import AuthenticatedUser

from .interfaces import ISessionService
from .models import (
    CompleteSimulationRequest,
    DrillEvaluateRequest,
    SessionListResponse,
    SessionResponse,
    StartSimulationRequest,
    StartSimulationResponse,
)
from .service import resolve_owner

simulations_router = APIRouter()
sessions_router = APIRouter()
drills_router = APIRouter()


# =============================================================================
# Simulations
# =============================================================================


@simulations_router.post("/start", response_model=StartSimulationResponse)
async def start_simulation(
    request: StartSimulationRequest,
    user: Optional[AuthenticatedUser] = Depends(get_optional_user),
    service: ISessionService = Depends(get_session_service),
) -> StartSimulationResponse:
    """
    Start a practice session.

    Signed-in callers own the session; otherwise ``anon_id`` is required.
    Answers 429 when the weekly free limit is used up.
    """
    owner = resolve_owner(user, request.anon_id)
    return await service.start(owner, request.scenario_type)


@simulations_router.post("/complete", response_model=SessionResponse)
async def complete_simulation(
    request: CompleteSimulationRequest,
    user: Optional[AuthenticatedUser] = Depends(get_optional_user),
    service: ISessionService = Depends(get_session_service),
) -> SessionResponse:
    """Transcribe and score a session's recordings."""
    audio = decode_audio(request.audio)
    responses = [
        (r.question_id, decode_audio(r.audio, field=f"responses[{i}].audio"))
        for i, r in enumerate(request.responses)
    ]

    session = await service.complete(
        request.session_id,
        user,
        audio,
        request.duration_sec,
        responses,
    )
    return SessionResponse(session=session)


# =============================================================================
# Sessions
# =============================================================================


@sessions_router.get("", response_model=SessionListResponse)
async def list_sessions(
    user: AuthenticatedUser = Depends(get_current_user),
    service: ISessionService = Depends(get_session_service),
) -> SessionListResponse:
    """List the caller's sessions, most recent first."""
    sessions = await service.list_for_user(user)
    return SessionListResponse(sessions=sessions)


@sessions_router.get("/{session_id}", response_model=SessionResponse)
async def get_session(
    session_id: str,
    user: Optional[AuthenticatedUser] = Depends(get_optional_user),
    service: ISessionService = Depends(get_session_service),
) -> SessionResponse:
    """Get a session with its transcript and feedback."""
    session = await service.get(session_id, user)
    return SessionResponse(session=session)


@sessions_router.post("/{session_id}/recording", response_model=SessionResponse)
async def mark_recording(
    session_id: str,
    user: Optional[AuthenticatedUser] = Depends(get_optional_user),
    service: ISessionService = Depends(get_session_service),
) -> SessionResponse:
    """Signal that the client started recording."""
    session = await service.mark_recording(session_id, user)
    return SessionResponse(session=session)


# =============================================================================
# Drills
# =============================================================================


@drills_router.post("/evaluate", response_model=DrillEvaluation)
async def evaluate_drill(
    request: DrillEvaluateRequest,
    service: ISessionService = Depends(get_session_service),
) -> DrillEvaluation:
    """Evaluate a re-spoken sentence against the original."""
    audio = decode_audio(request.audio)
    return await service.evaluate_drill(
        request.session_id,
        audio,
        request.original_text,
        request.improvement_goal,
    )
