"""
AI proxy endpoints.

Thin wrappers over the configured coach. Every response carries
``fallback: true`` when no provider is configured.
"""

from fastapi import APIRouter, Depends

from api.dependencies import get_coach_service
from shared.audio import decode_audio

from .exceptions import CoachUnavailableError
from .interfaces import ICoach
from .models import (
    FollowupsRequest,
    FollowupsResponse,
    ScoreRequest,
    ScoreResponse,
    SpeechRequest,
    SpeechResponse,
    TranscribeRequest,
    TranscribeResponse,
)

router = APIRouter()


@router.post("/stt", response_model=TranscribeResponse)
async def speech_to_text(
    request: TranscribeRequest,
    coach: ICoach = Depends(get_coach_service),
) -> TranscribeResponse:
    """Transcribe base64 audio."""
    audio = decode_audio(request.audio)
    text = await coach.transcribe(audio)
    return TranscribeResponse(text=text, fallback=not coach.is_live)


@router.post("/score", response_model=ScoreResponse)
async def score_transcript(
    request: ScoreRequest,
    coach: ICoach = Depends(get_coach_service),
) -> ScoreResponse:
    """Score a transcript and its follow-up answers."""
    result = await coach.score(
        request.transcript,
        request.scenario_type,
        request.followup_responses,
    )
    return ScoreResponse(
        scores=result.scores,
        feedback=result.feedback,
        fallback=not coach.is_live,
    )


@router.post("/followups", response_model=FollowupsResponse)
async def suggest_followups(
    request: FollowupsRequest,
    coach: ICoach = Depends(get_coach_service),
) -> FollowupsResponse:
    """Suggest follow-up questions for a transcript."""
    questions = await coach.generate_followups(request.transcript, request.scenario_type)
    return FollowupsResponse(questions=questions, fallback=not coach.is_live)


@router.post("/tts", response_model=SpeechResponse)
async def text_to_speech(
    request: SpeechRequest,
    coach: ICoach = Depends(get_coach_service),
) -> SpeechResponse:
    """
    Synthesize speech as an mp3 data URL.

    Without a provider the audio is null. A configured provider that
    fails answers 502.
    """
    if not coach.is_live:
        return SpeechResponse(audio=None, fallback=True)

    audio = await coach.speak(request.text)
    if audio is None:
        raise CoachUnavailableError("Text-to-speech")
    return SpeechResponse(audio=audio)
