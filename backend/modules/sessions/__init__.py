"""
Sessions module.

Practice session lifecycle: start (quota check and scenario seed),
recording signal, completion (transcription, scoring, usage), history
and drill evaluation.

Public API:
- ISessionService: Interface for session operations
- SessionService: Implementation wired with usage, billing and coach
- PracticeSession, SessionStatus: Session model and states
"""

from .interfaces import ISessionService
from .models import (
    SESSION_TRANSITIONS,
    PracticeSession,
    SessionStatus,
    SessionSummary,
    Speaker,
    TranscriptSegment,
    UserResponse,
    can_transition,
)
from .exceptions import (
    InvalidSessionTransitionError,
    MissingOwnerError,
    SessionAccessDeniedError,
    SessionAlreadyCompletedError,
    SessionNotFoundError,
)
from .repository import InMemorySessionRepository, SessionRepository
from .service import SessionService, resolve_owner

__all__ = [
    # Interface
    "ISessionService",
    # Models
    "SESSION_TRANSITIONS",
    "PracticeSession",
    "SessionStatus",
    "SessionSummary",
    "Speaker",
    "TranscriptSegment",
    "UserResponse",
    "can_transition",
    # Exceptions
    "InvalidSessionTransitionError",
    "MissingOwnerError",
    "SessionAccessDeniedError",
    "SessionAlreadyCompletedError",
    "SessionNotFoundError",
    # Storage
    "InMemorySessionRepository",
    "SessionRepository",
    # Service
    "SessionService",
    "resolve_owner",
]
