"""
Coaching module data models.

Scores and feedback produced by a coach and stored on practice sessions,
plus the strict payload schemas that model output must satisfy and the
request/response bodies of the AI proxy endpoints.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from modules.scenarios.models import FollowupQuestion, FollowupType, ScenarioType


def clamp_score(value: Any) -> Any:
    """Round and clamp a numeric score into [0, 100]; leave other values for validation."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return value
    return max(0, min(100, int(round(value))))


class HighlightType(str, Enum):
    """Kind of highlighted moment."""

    POSITIVE = "positive"
    IMPROVEMENT = "improvement"


class Scores(BaseModel):
    """Sub-scores and overall score, each an integer in [0, 100]."""

    clarity: int = Field(..., ge=0, le=100)
    structure: int = Field(..., ge=0, le=100)
    tone: int = Field(..., ge=0, le=100)
    overall: int = Field(..., ge=0, le=100)

    @field_validator("clarity", "structure", "tone", "overall", mode="before")
    @classmethod
    def clamp(cls, v: Any) -> Any:
        return clamp_score(v)


class Highlight(BaseModel):
    """A quoted part of the response with an explanation."""

    quote: str
    type: HighlightType
    explanation: str
    timestamp: Optional[float] = None


class MomentFeedback(BaseModel):
    """Per-moment analysis (pro feature)."""

    timestamp: float = Field(..., ge=0)
    text: str
    score: int = Field(..., ge=0, le=100)
    feedback: str

    @field_validator("score", mode="before")
    @classmethod
    def clamp(cls, v: Any) -> Any:
        return clamp_score(v)


class DetailedFeedback(BaseModel):
    """Tips, highlights and optional moment-by-moment analysis."""

    tips: list[str] = Field(default_factory=list)
    highlights: list[Highlight] = Field(default_factory=list)
    moment_by_moment: Optional[list[MomentFeedback]] = Field(
        None, alias="momentByMoment"
    )

    model_config = {"populate_by_name": True}


class ScoringResult(BaseModel):
    """Output of scoring a session."""

    scores: Scores
    feedback: DetailedFeedback


class DrillEvaluation(BaseModel):
    """Output of comparing a re-spoken sentence with the original."""

    score: int = Field(..., ge=0, le=100)
    feedback: str
    improved: bool

    @field_validator("score", mode="before")
    @classmethod
    def clamp(cls, v: Any) -> Any:
        return clamp_score(v)


# =============================================================================
# Provider payloads
# =============================================================================


class FeedbackPayload(BaseModel):
    """Feedback as the model must return it: 3 tips, one highlight of each kind."""

    tips: list[str] = Field(..., min_length=3, max_length=3)
    highlights: list[Highlight] = Field(..., min_length=2, max_length=2)

    @model_validator(mode="after")
    def check_highlight_kinds(self) -> "FeedbackPayload":
        kinds = {h.type for h in self.highlights}
        if kinds != {HighlightType.POSITIVE, HighlightType.IMPROVEMENT}:
            raise ValueError("Expected one positive and one improvement highlight")
        return self


class ScoringPayload(BaseModel):
    scores: Scores
    feedback: FeedbackPayload

    def to_result(self) -> ScoringResult:
        return ScoringResult(
            scores=self.scores,
            feedback=DetailedFeedback(
                tips=self.feedback.tips,
                highlights=self.feedback.highlights,
            ),
        )


class GeneratedQuestion(BaseModel):
    question: str = Field(..., min_length=1)
    type: FollowupType


class FollowupsPayload(BaseModel):
    questions: list[GeneratedQuestion] = Field(default_factory=list)


class MomentPayload(BaseModel):
    text: str
    score: int = Field(..., ge=0, le=100)
    feedback: str

    @field_validator("score", mode="before")
    @classmethod
    def clamp(cls, v: Any) -> Any:
        return clamp_score(v)


class MomentsPayload(BaseModel):
    moments: list[MomentPayload] = Field(default_factory=list)


# =============================================================================
# API request/response models
# =============================================================================


class TranscribeRequest(BaseModel):
    audio: str = Field(..., min_length=1, description="Base64-encoded audio")


class TranscribeResponse(BaseModel):
    text: str
    fallback: bool = False


class ScoreRequest(BaseModel):
    transcript: str = Field(..., min_length=1)
    scenario_type: ScenarioType
    followup_responses: list[str] = Field(default_factory=list)


class ScoreResponse(BaseModel):
    scores: Scores
    feedback: DetailedFeedback
    fallback: bool = False


class FollowupsRequest(BaseModel):
    transcript: str = Field(..., min_length=1)
    scenario_type: ScenarioType


class FollowupsResponse(BaseModel):
    questions: list[FollowupQuestion]
    fallback: bool = False


class SpeechRequest(BaseModel):
    text: str = Field(..., min_length=1, max_length=4096)


class SpeechResponse(BaseModel):
    audio: Optional[str] = Field(None, description="mp3 data URL")
    fallback: bool = False
