"""
Authentication module.

Handles Supabase JWT validation.

Public API:
- IAuthService: Interface for auth operations
- AuthService: HS256 token validation
- AuthenticatedUser: Minimal user info from JWT
- Auth exceptions: InvalidTokenError, ExpiredTokenError, etc.
"""

from .interfaces import IAuthService
from .models import AuthenticatedUser, JWTPayload, TokenValidationResponse
from .exceptions import (
    AuthNotConfiguredError,
    InvalidTokenError,
    ExpiredTokenError,
    MissingTokenError,
)
from .service import AuthService, get_auth_service, reset_auth_service

__all__ = [
    # Interface
    "IAuthService",
    # Models
    "AuthenticatedUser",
    "JWTPayload",
    "TokenValidationResponse",
    # Exceptions
    "AuthNotConfiguredError",
    "InvalidTokenError",
    "ExpiredTokenError",
    "MissingTokenError",
    # Service
    "AuthService",
    "get_auth_service",
    "reset_auth_service",
]
