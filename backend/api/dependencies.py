"""
Dependency injection setup for FastAPI.

This module provides the "container" that wires together all module
implementations. Each module exposes its service through an interface,
and this file creates the concrete implementations.

Storage follows configuration: with Supabase credentials every store is
backed by Postgres tables, otherwise by process memory so the API runs
locally without any external services.
"""

import logging
from typing import TYPE_CHECKING, Union

from shared.config import get_settings

# Type checking imports for interfaces (avoids circular imports)
if TYPE_CHECKING:
    from modules.accounts.repository import InMemoryProfileRepository, ProfileRepository
    from modules.accounts.service import AccountService
    from modules.auth.interfaces import IAuthService
    from modules.billing.interfaces import IBillingService
    from modules.coaching.interfaces import ICoach
    from modules.sessions.interfaces import ISessionService
    from modules.sessions.repository import InMemorySessionRepository, SessionRepository
    from modules.usage.interfaces import IUsageService

logger = logging.getLogger(__name__)


class ServiceContainer:
    """
    Container for all service instances.

    This class manages the lifecycle of service instances and their
    dependencies. Services are created lazily on first access.

    All services are cached as singletons within the container.
    Use reset() to clear all cached services for testing.
    """

    def __init__(self) -> None:
        self._auth_service: "IAuthService | None" = None
        self._billing_service: "IBillingService | None" = None
        self._usage_service: "IUsageService | None" = None
        self._coach: "ICoach | None" = None
        self._session_repository: "Union[SessionRepository, InMemorySessionRepository, None]" = None
        self._session_service: "ISessionService | None" = None
        self._profile_repository: "Union[ProfileRepository, InMemoryProfileRepository, None]" = None
        self._account_service: "AccountService | None" = None
        self._warned_in_memory = False

    def _use_database(self) -> bool:
        if get_settings().supabase_configured:
            return True
        if not self._warned_in_memory:
            logger.warning("Supabase is not configured; using in-memory storage")
            self._warned_in_memory = True
        return False

    @property
    def auth(self) -> "IAuthService":
        """Get the auth service instance."""
        if self._auth_service is None:
            from modules.auth.service import AuthService
            self._auth_service = AuthService()
        return self._auth_service

    @property
    def billing(self) -> "IBillingService":
        """Get the billing service instance."""
        if self._billing_service is None:
            from modules.billing.repository import (
                InMemorySubscriptionRepository,
                SubscriptionRepository,
            )
            from modules.billing.service import BillingService

            if self._use_database():
                from shared.database import get_supabase_client
                repository = SubscriptionRepository(get_supabase_client())
            else:
                repository = InMemorySubscriptionRepository()
            self._billing_service = BillingService(repository)
        return self._billing_service

    @property
    def usage(self) -> "IUsageService":
        """Get the usage service instance."""
        if self._usage_service is None:
            from modules.usage.service import SupabaseUsageService, UsageService

            free_limit = get_settings().free_weekly_simulations
            if self._use_database():
                from shared.database import get_supabase_client
                self._usage_service = SupabaseUsageService(get_supabase_client(), free_limit)
            else:
                self._usage_service = UsageService(free_limit)
        return self._usage_service

    @property
    def coach(self) -> "ICoach":
        """Get the AI coach for the configured backend."""
        if self._coach is None:
            from modules.coaching.factory import get_coach
            self._coach = get_coach()
        return self._coach

    @property
    def session_repository(self) -> "Union[SessionRepository, InMemorySessionRepository]":
        """Get the session repository instance."""
        if self._session_repository is None:
            from modules.sessions.repository import (
                InMemorySessionRepository,
                SessionRepository,
            )

            if self._use_database():
                from shared.database import get_supabase_client
                self._session_repository = SessionRepository(get_supabase_client())
            else:
                self._session_repository = InMemorySessionRepository()
        return self._session_repository

    @property
    def sessions(self) -> "ISessionService":
        """Get the session service instance."""
        if self._session_service is None:
            from modules.sessions.service import SessionService

            settings = get_settings()
            self._session_service = SessionService(
                repository=self.session_repository,
                usage=self.usage,
                billing=self.billing,
                coach=self.coach,
                history_limit_free=settings.history_limit_free,
                history_limit_paid=settings.history_limit_paid,
            )
        return self._session_service

    @property
    def profile_repository(self) -> "Union[ProfileRepository, InMemoryProfileRepository]":
        """Get the profile repository instance."""
        if self._profile_repository is None:
            from modules.accounts.repository import (
                InMemoryProfileRepository,
                ProfileRepository,
            )

            if self._use_database():
                from shared.database import get_supabase_client
                self._profile_repository = ProfileRepository(get_supabase_client())
            else:
                self._profile_repository = InMemoryProfileRepository()
        return self._profile_repository

    @property
    def accounts(self) -> "AccountService":
        """Get the account service instance."""
        if self._account_service is None:
            from modules.accounts.service import AccountService
            self._account_service = AccountService(
                sessions=self.session_repository,
                usage=self.usage,
                profiles=self.profile_repository,
            )
        return self._account_service

    def reset(self) -> None:
        """
        Reset all cached services.

        This is primarily for testing - allows tests to get fresh
        service instances with different mock dependencies.
        """
        self._auth_service = None
        self._billing_service = None
        self._usage_service = None
        self._coach = None
        self._session_repository = None
        self._session_service = None
        self._profile_repository = None
        self._account_service = None
        self._warned_in_memory = False


# Module-level container singleton
_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """Get the singleton service container."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def reset_container() -> None:
    """
    Reset the service container.

    This clears the cached container, so the next call to get_container()
    will create a fresh container with new service instances.

    Primarily used for testing.
    """
    global _container
    _container = None


# FastAPI dependency functions
# These are the functions that should be used in route Depends() calls


def get_auth_service() -> "IAuthService":
    """FastAPI dependency for auth service."""
    return get_container().auth


def get_billing_service() -> "IBillingService":
    """FastAPI dependency for billing service."""
    return get_container().billing


def get_usage_service() -> "IUsageService":
    """FastAPI dependency for usage service."""
    return get_container().usage


def get_coach_service() -> "ICoach":
    """FastAPI dependency for the AI coach."""
    return get_container().coach


def get_session_service() -> "ISessionService":
    """FastAPI dependency for session service."""
    return get_container().sessions


def get_account_service() -> "AccountService":
    """FastAPI dependency for account service."""
    return get_container().accounts
