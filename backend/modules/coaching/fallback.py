"""
Fallback coach used when no AI provider is configured.

Produces randomly generated but realistically shaped results so the
practice flow works end to end without OpenAI. Also holds the static
results the live coach degrades to when the provider fails.
"""

import random
from typing import Optional

from modules.scenarios.models import FollowupQuestion, ScenarioType

from .models import (
    DetailedFeedback,
    DrillEvaluation,
    Highlight,
    HighlightType,
    MomentFeedback,
    Scores,
    ScoringResult,
)

TRANSCRIPT_UNAVAILABLE = (
    "[Transcript unavailable - AI service not configured. Your audio has been recorded.]"
)
TRANSCRIPTION_FAILED = "[Transcription failed. Please try again.]"
NO_SPEECH_DETECTED = "[No speech detected]"

FALLBACK_TIPS: dict[ScenarioType, list[str]] = {
    ScenarioType.STANDUP: [
        "Try to lead with your most important update first.",
        "Keep each update to 1-2 sentences for clarity.",
        "Mention blockers explicitly rather than hinting at them.",
    ],
    ScenarioType.INCIDENT: [
        "Start with the current status: is the incident ongoing or resolved?",
        "Clearly state the impact on users or systems.",
        "Provide a clear timeline of events and next steps.",
    ],
}

FALLBACK_HIGHLIGHTS = [
    Highlight(
        quote="Your opening statement",
        type=HighlightType.POSITIVE,
        explanation="Good job setting context at the start.",
    ),
    Highlight(
        quote="Consider being more specific",
        type=HighlightType.IMPROVEMENT,
        explanation="Adding concrete details helps others understand better.",
    ),
]

# Result returned when a configured provider errors out
PROVIDER_ERROR_SCORING = ScoringResult(
    scores=Scores(clarity=70, structure=65, tone=72, overall=69),
    feedback=DetailedFeedback(
        tips=[
            "Consider being more specific about timelines.",
            "Lead with the most important information.",
            "Use concrete examples when possible.",
        ],
        highlights=[
            Highlight(
                quote="Your response",
                type=HighlightType.POSITIVE,
                explanation="Good attempt at communication.",
            ),
            Highlight(
                quote="Consider details",
                type=HighlightType.IMPROVEMENT,
                explanation="More specificity would help.",
            ),
        ],
    ),
)

PROVIDER_ERROR_DRILL = DrillEvaluation(
    score=75,
    feedback="Good effort! Consider being even more specific.",
    improved=True,
)

DRILL_FALLBACK_FEEDBACK = "Good effort! Keep practicing to improve your delivery."
DRILL_IMPROVED_THRESHOLD = 0.3


class FallbackCoach:
    """
    Coach that needs no provider.

    Score bands: clarity and structure in [60, 80), tone in [65, 85),
    overall in [65, 80). Drill scores in [70, 90).
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng or random.Random()

    @property
    def is_live(self) -> bool:
        return False

    async def transcribe(self, audio: bytes) -> str:
        return TRANSCRIPT_UNAVAILABLE

    async def score(
        self,
        transcript: str,
        scenario_type: ScenarioType,
        followup_transcripts: Optional[list[str]] = None,
    ) -> ScoringResult:
        scenario_type = ScenarioType(scenario_type)
        return ScoringResult(
            scores=Scores(
                clarity=self._rng.randrange(60, 80),
                structure=self._rng.randrange(60, 80),
                tone=self._rng.randrange(65, 85),
                overall=self._rng.randrange(65, 80),
            ),
            feedback=DetailedFeedback(
                tips=list(FALLBACK_TIPS[scenario_type]),
                highlights=[h.model_copy() for h in FALLBACK_HIGHLIGHTS],
            ),
        )

    async def evaluate_drill(
        self,
        original_text: str,
        new_transcript: str,
        improvement_goal: str,
    ) -> DrillEvaluation:
        return DrillEvaluation(
            score=self._rng.randrange(70, 90),
            feedback=DRILL_FALLBACK_FEEDBACK,
            improved=self._rng.random() > DRILL_IMPROVED_THRESHOLD,
        )

    async def generate_followups(
        self,
        transcript: str,
        scenario_type: ScenarioType,
    ) -> list[FollowupQuestion]:
        return []

    async def analyze_moments(
        self,
        transcript: str,
        scenario_type: ScenarioType,
    ) -> list[MomentFeedback]:
        return []

    async def speak(self, text: str) -> Optional[str]:
        return None
