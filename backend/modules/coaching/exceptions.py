"""
Coaching module exceptions.

Coaches never raise these to their callers; they are used internally to
route provider failures to the fallback path. The proxy endpoints raise
CoachUnavailableError when a live provider returns nothing usable.
"""

from typing import Optional

from shared.exceptions import ExternalServiceError, ServiceUnavailableError


class ProviderResponseError(ExternalServiceError):
    """Model output was missing, not JSON, or did not match the expected schema."""

    def __init__(self, message: str, operation: Optional[str] = None):
        super().__init__(message, service="openai", code="PROVIDER_RESPONSE_INVALID")
        if operation:
            self.details["operation"] = operation


class CoachUnavailableError(ExternalServiceError):
    """A live provider call produced no result."""

    def __init__(self, operation: str):
        super().__init__(
            f"{operation} failed",
            service="openai",
            code="COACH_UNAVAILABLE",
            details={"operation": operation},
        )


class CoachNotConfiguredError(ServiceUnavailableError):
    """The OpenAI coach was requested explicitly but no API key is set."""

    def __init__(self):
        super().__init__(
            "OPENAI_API_KEY is required when COACH_BACKEND=openai",
            code="COACH_NOT_CONFIGURED",
        )
