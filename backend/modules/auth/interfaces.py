"""
Authentication module interface.

Other modules should depend on IAuthService, not the concrete implementation.
This enables testing with mocks and future extraction to a microservice.
"""

from typing import Protocol, runtime_checkable

from shared.models import AuthenticatedUser


@runtime_checkable
class IAuthService(Protocol):
    """
    Interface for authentication operations.

    This protocol defines the contract that the auth module exposes
    to other modules.
    """

    async def validate_token(self, token: str) -> AuthenticatedUser:
        """
        Validate a JWT token and return the authenticated user.

        Args:
            token: JWT access token from Supabase Auth

        Returns:
            AuthenticatedUser with user ID and basic info

        Raises:
            MissingTokenError: If the token is empty
            ExpiredTokenError: If the token has expired
            InvalidTokenError: If the token is malformed or badly signed
            AuthNotConfiguredError: If no JWT secret is configured
        """
        ...
