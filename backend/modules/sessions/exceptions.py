"""
Sessions module exceptions.
"""

from typing import Optional

from shared.exceptions import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)


class SessionNotFoundError(NotFoundError):
    """Raised when a session doesn't exist."""

    def __init__(self, session_id: str):
        super().__init__(
            "Session not found",
            code="SESSION_NOT_FOUND",
            details={"session_id": session_id},
        )


class SessionAccessDeniedError(AuthorizationError):
    """Raised when a caller tries to access another user's session."""

    def __init__(self, session_id: str, user_id: Optional[str] = None):
        super().__init__(
            "Unauthorized",
            code="SESSION_ACCESS_DENIED",
            details={"session_id": session_id},
        )
        if user_id:
            self.details["user_id"] = user_id


class SessionAlreadyCompletedError(ConflictError):
    """Raised when completing a session that already has results."""

    def __init__(self, session_id: str):
        super().__init__(
            "Session already completed",
            code="SESSION_ALREADY_COMPLETED",
            details={"session_id": session_id},
        )


class InvalidSessionTransitionError(ConflictError):
    """Raised when a status change is not allowed from the current status."""

    def __init__(self, session_id: str, current: str, target: str):
        super().__init__(
            f"Cannot move session from {current} to {target}",
            code="INVALID_SESSION_TRANSITION",
            details={"session_id": session_id, "current": current, "target": target},
        )


class MissingOwnerError(ValidationError):
    """Raised when an unauthenticated start carries no anonymous ID."""

    def __init__(self):
        super().__init__(
            "anon_id is required when not signed in",
            code="MISSING_OWNER",
        )
