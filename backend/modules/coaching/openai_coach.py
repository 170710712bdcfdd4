"""
OpenAI-backed coach.

Speech goes through the openai SDK (Whisper transcription, TTS). Text
feedback goes through langchain's ChatOpenAI in JSON mode, and every
reply is validated against a strict Pydantic payload before use. Any
provider or parse failure degrades to the static results in
``fallback`` so callers never see an exception.
"""

import base64
import json
import logging
from typing import Any, Optional, TypeVar

from langchain_core.messages import HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI
from openai import AsyncOpenAI, OpenAIError
from pydantic import BaseModel, ValidationError as PydanticValidationError

from modules.scenarios.models import FollowupQuestion, ScenarioType
from shared.config import Settings

from .exceptions import ProviderResponseError
from .fallback import (
    NO_SPEECH_DETECTED,
    PROVIDER_ERROR_DRILL,
    PROVIDER_ERROR_SCORING,
    TRANSCRIPTION_FAILED,
)
from .models import (
    DrillEvaluation,
    FollowupsPayload,
    MomentFeedback,
    MomentsPayload,
    ScoringPayload,
    ScoringResult,
)
from .prompts import drill_messages, followups_messages, moments_messages, scoring_messages

logger = logging.getLogger(__name__)

PayloadT = TypeVar("PayloadT", bound=BaseModel)

PROVIDER_ERRORS = (OpenAIError, ProviderResponseError)

# Completion budgets per operation
SCORING_MAX_TOKENS = 800
FOLLOWUPS_MAX_TOKENS = 300
MOMENTS_MAX_TOKENS = 1000
DRILL_MAX_TOKENS = 300

# Seconds between consecutive moments in the analysis
MOMENT_SPACING = 5


class OpenAICoach:
    """
    Coach backed by OpenAI.

    Clients can be injected for tests; otherwise they are built from
    settings.
    """

    def __init__(
        self,
        settings: Settings,
        chat: Optional[ChatOpenAI] = None,
        client: Optional[AsyncOpenAI] = None,
    ):
        self._settings = settings
        self._chat = chat or ChatOpenAI(
            model=settings.openai_chat_model,
            api_key=settings.openai_api_key,
            base_url=settings.openai_base_url,
            timeout=settings.openai_timeout,
        )
        self._client = client or AsyncOpenAI(
            api_key=settings.openai_api_key,
            base_url=settings.openai_base_url,
            timeout=settings.openai_timeout,
        )

    @property
    def is_live(self) -> bool:
        return True

    # -------------------------------------------------------------------------
    # Provider helpers
    # -------------------------------------------------------------------------

    async def _complete_json(
        self,
        system: str,
        user: str,
        max_tokens: int,
        operation: str,
    ) -> dict[str, Any]:
        """Run a JSON-mode chat completion and decode the object it returns."""
        llm = self._chat.bind(
            response_format={"type": "json_object"},
            max_tokens=max_tokens,
        )
        message = await llm.ainvoke([
            SystemMessage(content=system),
            HumanMessage(content=user),
        ])

        content = message.content
        if not isinstance(content, str) or not content.strip():
            raise ProviderResponseError("Empty completion", operation)

        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise ProviderResponseError("Completion is not valid JSON", operation) from e

        if not isinstance(data, dict):
            raise ProviderResponseError("Completion is not a JSON object", operation)
        return data

    @staticmethod
    def _validate(
        schema: type[PayloadT],
        data: dict[str, Any],
        operation: str,
    ) -> PayloadT:
        try:
            return schema.model_validate(data)
        except PydanticValidationError as e:
            raise ProviderResponseError(
                f"Unexpected {operation} payload: {e.error_count()} error(s)",
                operation,
            ) from e

    # -------------------------------------------------------------------------
    # ICoach
    # -------------------------------------------------------------------------

    async def transcribe(self, audio: bytes) -> str:
        try:
            result = await self._client.audio.transcriptions.create(
                model=self._settings.openai_stt_model,
                file=("audio.webm", audio, "audio/webm"),
                language="en",
            )
        except OpenAIError:
            logger.warning("Transcription failed", exc_info=True)
            return TRANSCRIPTION_FAILED

        text = (result.text or "").strip()
        return text or NO_SPEECH_DETECTED

    async def score(
        self,
        transcript: str,
        scenario_type: ScenarioType,
        followup_transcripts: Optional[list[str]] = None,
    ) -> ScoringResult:
        system, user = scoring_messages(
            transcript, ScenarioType(scenario_type), followup_transcripts or []
        )
        try:
            data = await self._complete_json(system, user, SCORING_MAX_TOKENS, "scoring")
            return self._validate(ScoringPayload, data, "scoring").to_result()
        except PROVIDER_ERRORS:
            logger.warning("Scoring failed, using static feedback", exc_info=True)
            return PROVIDER_ERROR_SCORING.model_copy(deep=True)

    async def evaluate_drill(
        self,
        original_text: str,
        new_transcript: str,
        improvement_goal: str,
    ) -> DrillEvaluation:
        system, user = drill_messages(original_text, new_transcript, improvement_goal)
        try:
            data = await self._complete_json(system, user, DRILL_MAX_TOKENS, "drill")
            return self._validate(DrillEvaluation, data, "drill")
        except PROVIDER_ERRORS:
            logger.warning("Drill evaluation failed, using static result", exc_info=True)
            return PROVIDER_ERROR_DRILL.model_copy()

    async def generate_followups(
        self,
        transcript: str,
        scenario_type: ScenarioType,
    ) -> list[FollowupQuestion]:
        system, user = followups_messages(transcript, ScenarioType(scenario_type))
        try:
            data = await self._complete_json(system, user, FOLLOWUPS_MAX_TOKENS, "followups")
            payload = self._validate(FollowupsPayload, data, "followups")
        except PROVIDER_ERRORS:
            logger.warning("Follow-up generation failed", exc_info=True)
            return []

        return [
            FollowupQuestion(
                id=f"generated-{i}",
                question=q.question,
                type=q.type,
                timing=0,
            )
            for i, q in enumerate(payload.questions)
        ]

    async def analyze_moments(
        self,
        transcript: str,
        scenario_type: ScenarioType,
    ) -> list[MomentFeedback]:
        system, user = moments_messages(transcript, ScenarioType(scenario_type))
        try:
            data = await self._complete_json(system, user, MOMENTS_MAX_TOKENS, "moments")
            payload = self._validate(MomentsPayload, data, "moments")
        except PROVIDER_ERRORS:
            logger.warning("Moment analysis failed", exc_info=True)
            return []

        return [
            MomentFeedback(
                timestamp=i * MOMENT_SPACING,
                text=m.text,
                score=m.score,
                feedback=m.feedback,
            )
            for i, m in enumerate(payload.moments)
        ]

    async def speak(self, text: str) -> Optional[str]:
        try:
            response = await self._client.audio.speech.create(
                model=self._settings.openai_tts_model,
                voice=self._settings.openai_tts_voice,
                input=text,
                response_format="mp3",
            )
        except OpenAIError:
            logger.warning("Text-to-speech failed", exc_info=True)
            return None

        encoded = base64.b64encode(response.content).decode("ascii")
        return f"data:audio/mp3;base64,{encoded}"
