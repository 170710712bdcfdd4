"""Fixtures for sessions module tests."""

import random
from unittest.mock import AsyncMock, MagicMock

import pytest

from modules.coaching.fallback import FallbackCoach
from modules.scenarios.generator import ScenarioGenerator
from modules.sessions.repository import InMemorySessionRepository
from modules.sessions.service import SessionService
from modules.usage.service import UsageService
from shared.models import AuthenticatedUser


@pytest.fixture
def repository() -> InMemorySessionRepository:
    return InMemorySessionRepository()


@pytest.fixture
def usage() -> UsageService:
    return UsageService(free_limit=3)


@pytest.fixture
def billing():
    billing = MagicMock()
    billing.is_paid = AsyncMock(return_value=False)
    return billing


@pytest.fixture
def coach() -> FallbackCoach:
    return FallbackCoach(random.Random(0))


@pytest.fixture
def session_service(repository, usage, billing, coach) -> SessionService:
    return SessionService(
        repository=repository,
        usage=usage,
        billing=billing,
        coach=coach,
        generator=ScenarioGenerator(random.Random(0)),
        history_limit_free=10,
        history_limit_paid=100,
    )


@pytest.fixture
def user() -> AuthenticatedUser:
    return AuthenticatedUser(id="user-1", email="user@example.com")


@pytest.fixture
def other_user() -> AuthenticatedUser:
    return AuthenticatedUser(id="user-2", email="other@example.com")
