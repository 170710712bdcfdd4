"""
Sessions module interface.

Route handlers depend on ISessionService; the concrete service is wired
in the API container with its usage, billing and coach dependencies.
"""

from typing import Optional, Protocol, runtime_checkable

from modules.coaching.models import DrillEvaluation
from modules.scenarios.models import ScenarioType
from shared.models import AuthenticatedUser, OwnerRef

from .models import PracticeSession, SessionSummary, StartSimulationResponse


@runtime_checkable
class ISessionService(Protocol):
    """
    Interface for practice session lifecycle operations.

    Access rule for reads and writes: a session that has a user_id is
    only visible to that user. Anonymous sessions are open to anyone
    holding the session ID.
    """

    async def start(
        self,
        owner: OwnerRef,
        scenario_type: ScenarioType,
    ) -> StartSimulationResponse:
        """
        Start a new practice session.

        Args:
            owner: Authenticated user or anonymous identity
            scenario_type: Scenario to practice

        Returns:
            Session ID, generated seed and current usage

        Raises:
            WeeklyLimitReachedError: If a free owner has no simulations left
                (no session is created)
        """
        ...

    async def mark_recording(
        self,
        session_id: str,
        user: Optional[AuthenticatedUser],
    ) -> PracticeSession:
        """
        Record that the client started recording.

        Raises:
            SessionNotFoundError: If the session doesn't exist
            SessionAccessDeniedError: If it belongs to another user
            InvalidSessionTransitionError: If the session is not in started
        """
        ...

    async def complete(
        self,
        session_id: str,
        user: Optional[AuthenticatedUser],
        audio: bytes,
        duration_sec: float,
        responses: Optional[list[tuple[str, bytes]]] = None,
    ) -> PracticeSession:
        """
        Transcribe, score and store the results of a session.

        Args:
            session_id: Session to complete
            user: Caller, None when anonymous
            audio: Main recording
            duration_sec: Length of the main recording
            responses: (question_id, audio) for each follow-up answer

        Returns:
            The completed session

        Raises:
            SessionNotFoundError: If the session doesn't exist
            SessionAccessDeniedError: If it belongs to another user
            SessionAlreadyCompletedError: If it already has results
        """
        ...

    async def get(
        self,
        session_id: str,
        user: Optional[AuthenticatedUser],
    ) -> PracticeSession:
        """
        Get a session.

        Raises:
            SessionNotFoundError: If the session doesn't exist
            SessionAccessDeniedError: If it belongs to another user
        """
        ...

    async def list_for_user(self, user: AuthenticatedUser) -> list[SessionSummary]:
        """List a user's sessions, most recent first."""
        ...

    async def evaluate_drill(
        self,
        session_id: str,
        audio: bytes,
        original_text: str,
        improvement_goal: str,
    ) -> DrillEvaluation:
        """
        Evaluate a re-spoken sentence from a session.

        Raises:
            SessionNotFoundError: If the session doesn't exist
        """
        ...
