"""Tests for the session lifecycle service."""

import warnings
from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from modules.coaching.fallback import TRANSCRIPT_UNAVAILABLE
from modules.coaching.models import MomentFeedback
from modules.scenarios.models import ScenarioType
from modules.sessions.exceptions import (
    InvalidSessionTransitionError,
    MissingOwnerError,
    SessionAccessDeniedError,
    SessionAlreadyCompletedError,
    SessionNotFoundError,
)
from modules.sessions.models import PracticeSession, SessionStatus, Speaker
from modules.sessions import service as service_module
from modules.sessions.service import resolve_owner
from modules.usage.exceptions import WeeklyLimitReachedError
from shared.models import AuthenticatedUser, OwnerRef

ANON = OwnerRef.anon("anon-1")


class TestResolveOwner:
    def test_user_wins_over_anon_id(self, user):
        assert resolve_owner(user, "anon-1") == OwnerRef.user("user-1")

    def test_anon_id_when_signed_out(self):
        assert resolve_owner(None, "anon-1") == ANON

    @pytest.mark.parametrize("anon_id", [None, ""])
    def test_neither(self, anon_id):
        with pytest.raises(MissingOwnerError):
            resolve_owner(None, anon_id)


class TestStart:
    @pytest.mark.asyncio
    async def test_creates_started_session(self, session_service, repository):
        response = await session_service.start(ANON, ScenarioType.STANDUP)

        session = repository.get(response.session_id)
        assert session.status == SessionStatus.STARTED
        assert session.anon_id == "anon-1"
        assert session.user_id is None
        assert [q.id for q in session.followup_questions] == [q.id for q in response.seed.followups]
        assert response.seed.time_limit == 90
        assert response.usage.used == 0
        assert response.usage.limit == 3

    @pytest.mark.asyncio
    async def test_start_does_not_consume_quota(self, session_service, usage):
        await session_service.start(ANON, ScenarioType.INCIDENT)
        assert await usage.get_count(ANON) == 0

    @pytest.mark.asyncio
    async def test_limit_reached_creates_nothing(self, session_service, usage, repository):
        await usage.add(ANON, 3)

        with pytest.raises(WeeklyLimitReachedError) as exc_info:
            await session_service.start(ANON, ScenarioType.STANDUP)

        assert exc_info.value.status_code == 429
        assert "Sign up" in exc_info.value.message
        assert repository._rows == {}

    @pytest.mark.asyncio
    async def test_limit_message_for_users(self, session_service, usage, user):
        owner = OwnerRef.user(user.id)
        await usage.add(owner, 3)

        with pytest.raises(WeeklyLimitReachedError) as exc_info:
            await session_service.start(owner, ScenarioType.STANDUP)
        assert "Upgrade" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_paid_user_never_limited(self, session_service, usage, billing, user):
        billing.is_paid.return_value = True
        owner = OwnerRef.user(user.id)
        await usage.add(owner, 50)

        response = await session_service.start(owner, ScenarioType.STANDUP)

        assert response.usage.limit is None
        assert response.usage.used == 50

    @pytest.mark.asyncio
    async def test_anonymous_never_checks_billing(self, session_service, billing):
        await session_service.start(ANON, ScenarioType.STANDUP)
        billing.is_paid.assert_not_awaited()


class TestComplete:
    @pytest.mark.asyncio
    async def test_fallback_completion(self, session_service, usage):
        started = await session_service.start(ANON, ScenarioType.STANDUP)

        session = await session_service.complete(started.session_id, None, b"audio", 42.5)

        assert session.status == SessionStatus.COMPLETED
        assert session.duration_sec == 42.5
        assert session.transcript[0].text == TRANSCRIPT_UNAVAILABLE
        assert session.transcript[0].speaker == Speaker.USER
        assert session.transcript[0].duration == 42.5
        assert 60 <= session.scores.clarity < 80
        assert 65 <= session.scores.overall < 80
        assert len(session.detailed_feedback.tips) == 3
        assert session.detailed_feedback.moment_by_moment is None
        assert session.is_pro_features_used is False
        assert await usage.get_count(ANON) == 1

    @pytest.mark.asyncio
    async def test_followup_segments_are_spaced(self, session_service):
        started = await session_service.start(ANON, ScenarioType.INCIDENT)
        questions = started.seed.followups

        session = await session_service.complete(
            started.session_id,
            None,
            b"audio",
            60,
            [(q.id, b"answer") for q in questions[:2]],
        )

        assert [s.timestamp for s in session.transcript] == [0, 15, 30, 45, 60]
        assert [s.speaker for s in session.transcript] == [
            Speaker.USER, Speaker.AI, Speaker.USER, Speaker.AI, Speaker.USER,
        ]
        assert session.transcript[1].text == questions[0].question
        assert [r.question_id for r in session.user_responses] == [q.id for q in questions[:2]]

    @pytest.mark.asyncio
    async def test_unknown_question_keeps_response_only(self, session_service):
        started = await session_service.start(ANON, ScenarioType.STANDUP)

        session = await session_service.complete(
            started.session_id, None, b"audio", 30, [("not-a-question", b"answer")]
        )

        assert len(session.transcript) == 1
        assert session.user_responses[0].question_id == "not-a-question"

    @pytest.mark.asyncio
    async def test_pro_user_gets_moments(self, session_service, billing, coach, user):
        billing.is_paid.return_value = True
        coach.analyze_moments = AsyncMock(return_value=[
            MomentFeedback(timestamp=0, text="Opening", score=80, feedback="Clear"),
        ])
        started = await session_service.start(OwnerRef.user(user.id), ScenarioType.STANDUP)

        session = await session_service.complete(started.session_id, user, b"audio", 30)

        assert session.is_pro_features_used is True
        assert session.detailed_feedback.moment_by_moment[0].text == "Opening"

    @pytest.mark.asyncio
    async def test_second_completion_conflicts(self, session_service, usage):
        started = await session_service.start(ANON, ScenarioType.STANDUP)
        await session_service.complete(started.session_id, None, b"audio", 30)

        with pytest.raises(SessionAlreadyCompletedError) as exc_info:
            await session_service.complete(started.session_id, None, b"audio", 30)

        assert exc_info.value.status_code == 409
        assert await usage.get_count(ANON) == 1

    @pytest.mark.asyncio
    async def test_failure_marks_error(self, session_service, repository, coach, usage):
        started = await session_service.start(ANON, ScenarioType.STANDUP)
        coach.score = AsyncMock(side_effect=RuntimeError("scoring exploded"))

        with pytest.raises(RuntimeError):
            await session_service.complete(started.session_id, None, b"audio", 30)

        assert repository.get(started.session_id).status == SessionStatus.ERROR
        assert await usage.get_count(ANON) == 0

    @pytest.mark.asyncio
    async def test_error_session_can_be_retried(self, session_service, repository, coach):
        started = await session_service.start(ANON, ScenarioType.STANDUP)
        original_score = coach.score
        coach.score = AsyncMock(side_effect=RuntimeError("transient"))
        with pytest.raises(RuntimeError):
            await session_service.complete(started.session_id, None, b"audio", 30)

        coach.score = original_score
        session = await session_service.complete(started.session_id, None, b"audio", 30)
        assert session.status == SessionStatus.COMPLETED

    @pytest.mark.asyncio
    async def test_missing_session(self, session_service):
        with pytest.raises(SessionNotFoundError):
            await session_service.complete("missing", None, b"audio", 30)

    @pytest.mark.asyncio
    async def test_other_users_session(self, session_service, user, other_user):
        started = await session_service.start(OwnerRef.user(user.id), ScenarioType.STANDUP)

        with pytest.raises(SessionAccessDeniedError) as exc_info:
            await session_service.complete(started.session_id, other_user, b"audio", 30)
        assert exc_info.value.status_code == 403

    @pytest.mark.asyncio
    async def test_user_session_needs_sign_in(self, session_service, user):
        started = await session_service.start(OwnerRef.user(user.id), ScenarioType.STANDUP)
        with pytest.raises(SessionAccessDeniedError):
            await session_service.get(started.session_id, None)


class TestRecording:
    @pytest.mark.asyncio
    async def test_started_to_recording(self, session_service):
        started = await session_service.start(ANON, ScenarioType.STANDUP)
        session = await session_service.mark_recording(started.session_id, None)
        assert session.status == SessionStatus.RECORDING

    @pytest.mark.asyncio
    async def test_recording_twice_conflicts(self, session_service):
        started = await session_service.start(ANON, ScenarioType.STANDUP)
        await session_service.mark_recording(started.session_id, None)

        with pytest.raises(InvalidSessionTransitionError):
            await session_service.mark_recording(started.session_id, None)

    @pytest.mark.asyncio
    async def test_complete_after_recording(self, session_service):
        started = await session_service.start(ANON, ScenarioType.STANDUP)
        await session_service.mark_recording(started.session_id, None)

        session = await session_service.complete(started.session_id, None, b"audio", 30)
        assert session.status == SessionStatus.COMPLETED


class TestHistory:
    def _seed(self, repository, user_id, count):
        now = datetime.now(timezone.utc)
        for i in range(count):
            repository.create(PracticeSession(
                id=f"session-{i:03d}",
                user_id=user_id,
                scenario_type=ScenarioType.STANDUP,
                created_at=now - timedelta(minutes=i),
            ))

    @pytest.mark.asyncio
    async def test_most_recent_first(self, session_service, repository, user):
        self._seed(repository, user.id, 3)
        sessions = await session_service.list_for_user(user)
        assert [s.id for s in sessions] == ["session-000", "session-001", "session-002"]

    @pytest.mark.asyncio
    async def test_free_history_capped(self, session_service, repository, user):
        self._seed(repository, user.id, 15)
        assert len(await session_service.list_for_user(user)) == 10

    @pytest.mark.asyncio
    async def test_paid_history_cap(self, session_service, repository, billing, user):
        billing.is_paid.return_value = True
        self._seed(repository, user.id, 15)
        assert len(await session_service.list_for_user(user)) == 15

    @pytest.mark.asyncio
    async def test_only_own_sessions(self, session_service, repository, user, other_user):
        self._seed(repository, other_user.id, 2)
        assert await session_service.list_for_user(user) == []


class TestDrill:
    @pytest.mark.asyncio
    async def test_evaluates_retake(self, session_service):
        started = await session_service.start(ANON, ScenarioType.STANDUP)

        result = await session_service.evaluate_drill(
            started.session_id, b"audio", "I kind of fixed it", "Be definitive"
        )

        assert 70 <= result.score < 90

    @pytest.mark.asyncio
    async def test_missing_session(self, session_service):
        with pytest.raises(SessionNotFoundError):
            await session_service.evaluate_drill("missing", b"audio", "", "")


class TestModuleSource:
    def test_compiles_without_warnings(self):
        path = Path(service_module.__file__)
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            compile(path.read_text(encoding="utf-8"), str(path), "exec")
