"""
Coaching module interface.

The sessions module and the AI proxy endpoints depend on ICoach. Two
implementations exist: OpenAICoach (provider configured) and
FallbackCoach (deterministic-shaped stand-in). Neither raises to callers.
"""

from typing import Optional, Protocol, runtime_checkable

from modules.scenarios.models import FollowupQuestion, ScenarioType

from .models import DrillEvaluation, MomentFeedback, ScoringResult


@runtime_checkable
class ICoach(Protocol):
    """Speech and feedback capabilities used by practice sessions."""

    @property
    def is_live(self) -> bool:
        """True when backed by a real provider, False for the fallback."""
        ...

    async def transcribe(self, audio: bytes) -> str:
        """
        Convert recorded audio to text.

        Returns a bracketed sentinel string instead of raising when
        transcription is unavailable or fails.
        """
        ...

    async def score(
        self,
        transcript: str,
        scenario_type: ScenarioType,
        followup_transcripts: Optional[list[str]] = None,
    ) -> ScoringResult:
        """
        Score a response and its follow-up answers.

        Returns:
            Scores in [0, 100], 3 tips and two highlights
        """
        ...

    async def evaluate_drill(
        self,
        original_text: str,
        new_transcript: str,
        improvement_goal: str,
    ) -> DrillEvaluation:
        """Judge whether a re-spoken sentence improves on the original."""
        ...

    async def generate_followups(
        self,
        transcript: str,
        scenario_type: ScenarioType,
    ) -> list[FollowupQuestion]:
        """Suggest follow-up questions for a response (may be empty)."""
        ...

    async def analyze_moments(
        self,
        transcript: str,
        scenario_type: ScenarioType,
    ) -> list[MomentFeedback]:
        """Break a response into scored moments (may be empty)."""
        ...

    async def speak(self, text: str) -> Optional[str]:
        """
        Synthesize speech.

        Returns:
            An mp3 data URL, or None when speech is unavailable
        """
        ...
