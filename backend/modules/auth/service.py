"""
Authentication service implementation.

Validates Supabase JWT tokens and provides user authentication.
"""

from datetime import datetime, timezone
from typing import Optional

import jwt

from shared.config import get_settings
from shared.models import AuthenticatedUser

from .exceptions import (
    AuthNotConfiguredError,
    ExpiredTokenError,
    InvalidTokenError,
    MissingTokenError,
)
from .models import JWTPayload

JWT_ALGORITHMS = ["HS256"]
JWT_AUDIENCE = "authenticated"


class AuthService:
    """
    Implementation of the authentication service.

    Verifies Supabase-issued HS256 tokens with the project's JWT secret.
    """

    def __init__(self, jwt_secret: Optional[str] = None):
        self._jwt_secret = jwt_secret if jwt_secret is not None else get_settings().supabase_jwt_secret

    async def validate_token(self, token: str) -> AuthenticatedUser:
        """
        Validate a JWT token and return the authenticated user.

        This implementation validates Supabase JWTs using the JWT secret.
        """
        if not token:
            raise MissingTokenError()
        if not self._jwt_secret:
            raise AuthNotConfiguredError()

        try:
            payload = jwt.decode(
                token,
                self._jwt_secret,
                algorithms=JWT_ALGORITHMS,
                audience=JWT_AUDIENCE,
            )
        except jwt.ExpiredSignatureError:
            raise ExpiredTokenError()
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(f"Invalid token: {e}")

        try:
            claims = JWTPayload(**payload)
        except ValueError as e:
            raise InvalidTokenError("Token is missing required claims") from e

        return AuthenticatedUser(
            id=claims.sub,
            email=claims.email or "",
            email_verified=claims.email_verified,
            last_sign_in=datetime.fromtimestamp(claims.iat, tz=timezone.utc),
            role=claims.role if claims.role != JWT_AUDIENCE else "user",
        )


# Module-level instance getter
_service_instance: Optional[AuthService] = None


def get_auth_service() -> AuthService:
    """Get the auth service singleton."""
    global _service_instance
    if _service_instance is None:
        _service_instance = AuthService()
    return _service_instance


def reset_auth_service() -> None:
    """Reset the auth service singleton (for testing)."""
    global _service_instance
    _service_instance = None
