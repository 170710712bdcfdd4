"""
Coaching module.

Speech-to-text, scoring and feedback for practice sessions. A live
OpenAI coach is used when configured; otherwise a fallback coach keeps
the flow working with realistically shaped results.

Public API:
- ICoach: Interface for coaching operations
- get_coach: Select the implementation from settings
- Scores, DetailedFeedback, Highlight, MomentFeedback: Feedback models
"""

from .interfaces import ICoach
from .models import (
    DetailedFeedback,
    DrillEvaluation,
    Highlight,
    HighlightType,
    MomentFeedback,
    Scores,
    ScoringResult,
)
from .exceptions import (
    CoachNotConfiguredError,
    CoachUnavailableError,
    ProviderResponseError,
)
from .fallback import (
    NO_SPEECH_DETECTED,
    TRANSCRIPT_UNAVAILABLE,
    TRANSCRIPTION_FAILED,
    FallbackCoach,
)
from .openai_coach import OpenAICoach
from .factory import get_coach

__all__ = [
    # Interface
    "ICoach",
    # Models
    "DetailedFeedback",
    "DrillEvaluation",
    "Highlight",
    "HighlightType",
    "MomentFeedback",
    "Scores",
    "ScoringResult",
    # Exceptions
    "CoachNotConfiguredError",
    "CoachUnavailableError",
    "ProviderResponseError",
    # Implementations
    "FallbackCoach",
    "OpenAICoach",
    "get_coach",
    # Sentinels
    "NO_SPEECH_DETECTED",
    "TRANSCRIPT_UNAVAILABLE",
    "TRANSCRIPTION_FAILED",
]
