"""Factory for selecting the coach implementation."""

import logging
from typing import Optional

from shared.config import Settings, get_settings

from .exceptions import CoachNotConfiguredError
from .fallback import FallbackCoach
from .interfaces import ICoach
from .openai_coach import OpenAICoach

logger = logging.getLogger(__name__)


def get_coach(settings: Optional[Settings] = None) -> ICoach:
    """Build the coach selected by ``COACH_BACKEND``.

    Args:
        settings: Settings to read; defaults to the cached application settings.

    Returns:
        ``auto``: OpenAICoach when OPENAI_API_KEY is set, else FallbackCoach.
        ``openai``: OpenAICoach.
        ``fallback``: FallbackCoach.

    Raises:
        CoachNotConfiguredError: If ``openai`` is forced without an API key
    """
    settings = settings or get_settings()
    backend = settings.coach_backend

    if backend == "fallback":
        return FallbackCoach()

    if not settings.openai_api_key:
        if backend == "openai":
            raise CoachNotConfiguredError()
        logger.warning("OPENAI_API_KEY not set, using fallback coach")
        return FallbackCoach()

    return OpenAICoach(settings)
