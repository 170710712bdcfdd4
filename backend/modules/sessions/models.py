"""
Sessions module data models.

These models define the data structures used by the sessions module
and exposed to other modules through the interface.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

from modules.coaching.models import DetailedFeedback, Scores
from modules.scenarios.models import FollowupQuestion, ScenarioSeed, ScenarioType
from shared.models import OwnerRef


class SessionStatus(str, Enum):
    """Lifecycle states of a practice session."""

    STARTED = "started"
    RECORDING = "recording"
    PROCESSING = "processing"
    COMPLETED = "completed"
    ERROR = "error"


# Allowed status changes. Completed is terminal; a session in error may be
# completed again, which moves it back to processing.
SESSION_TRANSITIONS: dict[SessionStatus, frozenset[SessionStatus]] = {
    SessionStatus.STARTED: frozenset({
        SessionStatus.RECORDING,
        SessionStatus.PROCESSING,
        SessionStatus.ERROR,
    }),
    SessionStatus.RECORDING: frozenset({
        SessionStatus.PROCESSING,
        SessionStatus.ERROR,
    }),
    SessionStatus.PROCESSING: frozenset({
        SessionStatus.COMPLETED,
        SessionStatus.ERROR,
    }),
    SessionStatus.COMPLETED: frozenset(),
    SessionStatus.ERROR: frozenset({SessionStatus.PROCESSING}),
}


def can_transition(current: SessionStatus, target: SessionStatus) -> bool:
    return target in SESSION_TRANSITIONS[current]


class Speaker(str, Enum):
    AI = "ai"
    USER = "user"


class TranscriptSegment(BaseModel):
    """One utterance in the session transcript."""

    speaker: Speaker
    text: str
    timestamp: float = Field(..., ge=0, description="Seconds from session start")
    duration: Optional[float] = Field(None, ge=0, description="Seconds spoken")


class UserResponse(BaseModel):
    """The transcribed answer to one follow-up question."""

    model_config = ConfigDict(populate_by_name=True)

    question_id: str = Field(..., alias="questionId")
    transcript: str


class PracticeSession(BaseModel):
    """
    A practice session.

    Owned by exactly one of user_id / anon_id.
    """

    id: str = Field(..., description="Session ID (UUID)")
    user_id: Optional[str] = Field(None, description="Authenticated owner")
    anon_id: Optional[str] = Field(None, description="Anonymous owner")
    scenario_type: ScenarioType
    status: SessionStatus = SessionStatus.STARTED
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    duration_sec: Optional[float] = Field(None, ge=0)
    transcript: list[TranscriptSegment] = Field(default_factory=list)
    scores: Optional[Scores] = None
    detailed_feedback: Optional[DetailedFeedback] = None
    followup_questions: list[FollowupQuestion] = Field(default_factory=list)
    user_responses: list[UserResponse] = Field(default_factory=list)
    is_pro_features_used: bool = False

    @model_validator(mode="after")
    def check_single_owner(self) -> "PracticeSession":
        if (self.user_id is None) == (self.anon_id is None):
            raise ValueError("Session needs exactly one of user_id or anon_id")
        return self

    @property
    def owner(self) -> OwnerRef:
        if self.user_id is not None:
            return OwnerRef.user(self.user_id)
        return OwnerRef.anon(self.anon_id)  # type: ignore[arg-type]


class SessionSummary(BaseModel):
    """Row in the history list."""

    id: str
    scenario_type: ScenarioType
    status: SessionStatus
    created_at: datetime
    duration_sec: Optional[float] = None
    scores: Optional[Scores] = None


# =============================================================================
# API request/response models
# =============================================================================


class StartSimulationRequest(BaseModel):
    scenario_type: ScenarioType
    anon_id: Optional[str] = Field(None, min_length=1, description="Client-generated ID")


class UsageInfo(BaseModel):
    used: int
    limit: Optional[int] = Field(..., description="None when unlimited")


class StartSimulationResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(..., alias="sessionId")
    seed: ScenarioSeed
    usage: UsageInfo


class ResponseAudio(BaseModel):
    """Recorded answer to a follow-up question."""

    model_config = ConfigDict(populate_by_name=True)

    question_id: str = Field(..., alias="questionId")
    audio: str = Field(
        ...,
        validation_alias=AliasChoices("audio", "transcript"),
        description="Base64-encoded audio",
    )


class CompleteSimulationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(..., alias="sessionId", min_length=1)
    audio: str = Field(..., min_length=1, description="Base64-encoded main recording")
    duration_sec: float = Field(..., ge=0)
    responses: list[ResponseAudio] = Field(default_factory=list)


class SessionResponse(BaseModel):
    session: PracticeSession


class SessionListResponse(BaseModel):
    sessions: list[SessionSummary]


class DrillEvaluateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(..., alias="sessionId", min_length=1)
    audio: str = Field(..., min_length=1, description="Base64-encoded re-take")
    original_text: str = Field("", alias="originalText")
    improvement_goal: str = Field("", alias="improvementGoal")
