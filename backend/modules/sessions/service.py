"""
Session lifecycle service.

Coordinates the quota tracker, scenario generator, coach and session
storage for a practice session:

    started -> [recording ->] processing -> completed

Any non-terminal state may move to error, and an errored
session may be completed again.
"""

import logging
import uuid
from typing import Optional, Union

from modules.billing.interfaces import IBillingService
from modules.coaching.interfaces import ICoach
from modules.coaching.models import DrillEvaluation
from modules.scenarios.generator import ScenarioGenerator
from modules.scenarios.models import ScenarioType
from modules.usage.exceptions import WeeklyLimitReachedError
from modules.usage.interfaces import IUsageService
from shared.models import AuthenticatedUser, OwnerRef

from .exceptions import (
    InvalidSessionTransitionError,
    MissingOwnerError,
    SessionAccessDeniedError,
    SessionAlreadyCompletedError,
    SessionNotFoundError,
)
from .models import (
    PracticeSession,
    SessionStatus,
    SessionSummary,
    Speaker,
    StartSimulationResponse,
    TranscriptSegment,
    UsageInfo,
    UserResponse,
    can_transition,
)
from .repository import InMemorySessionRepository, SessionRepository

logger = logging.getLogger(__name__)

# Spacing between follow-up transcript segments, in seconds
SEGMENT_SPACING = 15


def resolve_owner(
    user: Optional[AuthenticatedUser],
    anon_id: Optional[str],
) -> OwnerRef:
    """
    Pick the identity a new session belongs to.

    A signed-in user always wins over an anonymous ID.

    Raises:
        MissingOwnerError: If there is neither
    """
    if user is not None:
        return OwnerRef.user(user.id)
    if anon_id:
        return OwnerRef.anon(anon_id)
    raise MissingOwnerError()


class SessionService:
    """
    Practice session service.

    Storage, quota, billing and coach are injected so each can be
    swapped for tests or local runs.
    """

    def __init__(
        self,
        repository: Union[SessionRepository, InMemorySessionRepository],
        usage: IUsageService,
        billing: IBillingService,
        coach: ICoach,
        generator: Optional[ScenarioGenerator] = None,
        history_limit_free: int = 10,
        history_limit_paid: int = 100,
    ):
        self._repository = repository
        self._usage = usage
        self._billing = billing
        self._coach = coach
        self._generator = generator or ScenarioGenerator()
        self._history_limit_free = history_limit_free
        self._history_limit_paid = history_limit_paid

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    async def _is_paid(self, owner: OwnerRef) -> bool:
        if not owner.is_user:
            return False
        return await self._billing.is_paid(owner.id)

    def _load(self, session_id: str, user: Optional[AuthenticatedUser]) -> PracticeSession:
        session = self._repository.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)

        if session.user_id and (user is None or user.id != session.user_id):
            raise SessionAccessDeniedError(session_id, user.id if user else None)
        return session

    def _transition(self, session: PracticeSession, target: SessionStatus) -> PracticeSession:
        if not can_transition(session.status, target):
            raise InvalidSessionTransitionError(
                session.id, session.status.value, target.value
            )
        updated = self._repository.update(session.id, {"status": target.value})
        if updated is None:
            raise SessionNotFoundError(session.id)
        return updated

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def start(
        self,
        owner: OwnerRef,
        scenario_type: ScenarioType,
    ) -> StartSimulationResponse:
        """Check the quota, generate a seed and create the session."""
        scenario_type = ScenarioType(scenario_type)

        is_paid = await self._is_paid(owner)
        snapshot = await self._usage.check(owner, is_paid)
        if not snapshot.allowed:
            logger.info(
                "Weekly limit reached for %s %s (%d/%s)",
                owner.kind.value, owner.id, snapshot.used, snapshot.limit,
            )
            raise WeeklyLimitReachedError(
                snapshot.used, snapshot.limit, anonymous=not owner.is_user
            )

        seed = self._generator.generate(scenario_type)
        session = PracticeSession(
            id=str(uuid.uuid4()),
            scenario_type=scenario_type,
            status=SessionStatus.STARTED,
            followup_questions=seed.followups,
            **{owner.column: owner.id},
        )
        session = self._repository.create(session)
        logger.info("Started %s session %s", scenario_type.value, session.id)

        return StartSimulationResponse(
            session_id=session.id,
            seed=seed,
            usage=UsageInfo(used=snapshot.used, limit=snapshot.limit),
        )

    async def mark_recording(
        self,
        session_id: str,
        user: Optional[AuthenticatedUser],
    ) -> PracticeSession:
        """Move a started session to recording."""
        session = self._load(session_id, user)
        return self._transition(session, SessionStatus.RECORDING)

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

        Any failure after the session enters processing marks it as
        error before the exception propagates.
        """
        session = self._load(session_id, user)
        if session.status == SessionStatus.COMPLETED:
            raise SessionAlreadyCompletedError(session_id)
        if session.status != SessionStatus.PROCESSING:
            session = self._transition(session, SessionStatus.PROCESSING)

        try:
            return await self._process(session, audio, duration_sec, responses or [])
        except Exception:
            logger.exception("Failed to complete session %s", session_id)
            self._repository.update(session_id, {"status": SessionStatus.ERROR.value})
            raise

    async def _process(
        self,
        session: PracticeSession,
        audio: bytes,
        duration_sec: float,
        responses: list[tuple[str, bytes]],
    ) -> PracticeSession:
        main_transcript = await self._coach.transcribe(audio)
        transcript = [
            TranscriptSegment(
                speaker=Speaker.USER,
                text=main_transcript,
                timestamp=0,
                duration=duration_sec,
            )
        ]

        questions = {q.id: q for q in session.followup_questions}
        followup_transcripts: list[str] = []
        user_responses: list[UserResponse] = []

        for question_id, answer_audio in responses:
            text = await self._coach.transcribe(answer_audio)
            followup_transcripts.append(text)
            user_responses.append(UserResponse(question_id=question_id, transcript=text))

            question = questions.get(question_id)
            if question is None:
                continue
            transcript.append(TranscriptSegment(
                speaker=Speaker.AI,
                text=question.question,
                timestamp=len(transcript) * SEGMENT_SPACING,
            ))
            transcript.append(TranscriptSegment(
                speaker=Speaker.USER,
                text=text,
                timestamp=len(transcript) * SEGMENT_SPACING,
            ))

        result = await self._coach.score(
            main_transcript, session.scenario_type, followup_transcripts
        )
        feedback = result.feedback

        is_pro = await self._is_paid(session.owner)
        if is_pro:
            feedback.moment_by_moment = await self._coach.analyze_moments(
                main_transcript, session.scenario_type
            )

        await self._usage.increment(session.owner)

        completed = session.model_copy(update={
            "status": SessionStatus.COMPLETED,
            "duration_sec": duration_sec,
            "transcript": transcript,
            "scores": result.scores,
            "detailed_feedback": feedback,
            "user_responses": user_responses,
            "is_pro_features_used": is_pro,
        })
        row = completed.model_dump(
            mode="json",
            by_alias=True,
            include={
                "status",
                "duration_sec",
                "transcript",
                "scores",
                "detailed_feedback",
                "user_responses",
                "is_pro_features_used",
            },
        )
        updated = self._repository.update(session.id, row)
        if updated is None:
            raise SessionNotFoundError(session.id)

        logger.info(
            "Completed session %s (overall %d)", session.id, result.scores.overall
        )
        return updated

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    async def get(
        self,
        session_id: str,
        user: Optional[AuthenticatedUser],
    ) -> PracticeSession:
        """Get a session the caller may see."""
        return self._load(session_id, user)

    async def list_for_user(self, user: AuthenticatedUser) -> list[SessionSummary]:
        """List a user's history, capped by tier."""
        is_paid = await self._billing.is_paid(user.id)
        limit = self._history_limit_paid if is_paid else self._history_limit_free

        return [
            SessionSummary(
                id=s.id,
                scenario_type=s.scenario_type,
                status=s.status,
                created_at=s.created_at,
                duration_sec=s.duration_sec,
                scores=s.scores,
            )
            for s in self._repository.list_by_user(user.id, limit)
        ]

    # -------------------------------------------------------------------------
    # Drills
    # -------------------------------------------------------------------------

    async def evaluate_drill(
        self,
        session_id: str,
        audio: bytes,
        original_text: str,
        improvement_goal: str,
    ) -> DrillEvaluation:
        """Transcribe a re-take and judge it against the original sentence."""
        if self._repository.get(session_id) is None:
            raise SessionNotFoundError(session_id)

        new_transcript = await self._coach.transcribe(audio)
        return await self._coach.evaluate_drill(
            original_text, new_transcript, improvement_goal
        )
