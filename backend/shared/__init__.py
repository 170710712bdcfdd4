"""
Shared infrastructure for the Conversation Tutor backend.

This package contains cross-cutting concerns that are used by multiple modules:
- config: Centralized settings management
- database: Supabase client factory
- exceptions: Base exception classes
- models: Authenticated user and owner identity
- audio: Base64 audio payload decoding

Note: Business logic should NOT go here. This is for infrastructure only.
"""

from .config import Settings, get_settings
from .database import get_supabase_client, reset_client_cache
from .exceptions import (
    TutorError,
    NotFoundError,
    ValidationError,
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    QuotaExceededError,
    ServiceUnavailableError,
    ExternalServiceError,
)
from .models import AuthenticatedUser, OwnerKind, OwnerRef
from .audio import decode_audio

__all__ = [
    "Settings",
    "get_settings",
    "get_supabase_client",
    "reset_client_cache",
    "TutorError",
    "NotFoundError",
    "ValidationError",
    "AuthenticationError",
    "AuthorizationError",
    "ConflictError",
    "QuotaExceededError",
    "ServiceUnavailableError",
    "ExternalServiceError",
    "AuthenticatedUser",
    "OwnerKind",
    "OwnerRef",
    "decode_audio",
]
