"""Tests for usage module models."""

from datetime import date

import pytest
from pydantic import ValidationError

from modules.usage.models import UsageRecord, UsageSnapshot
from shared.models import OwnerRef


class TestUsageRecord:
    def test_user_owner(self):
        record = UsageRecord(user_id="user-1", week_start=date(2026, 3, 2))
        assert record.owner == OwnerRef.user("user-1")
        assert record.simulations_used == 0

    def test_anon_owner(self):
        record = UsageRecord(anon_id="anon-1", week_start=date(2026, 3, 2))
        assert record.owner == OwnerRef.anon("anon-1")

    def test_requires_exactly_one_owner(self):
        with pytest.raises(ValidationError):
            UsageRecord(week_start=date(2026, 3, 2))
        with pytest.raises(ValidationError):
            UsageRecord(user_id="u", anon_id="a", week_start=date(2026, 3, 2))

    def test_count_cannot_be_negative(self):
        with pytest.raises(ValidationError):
            UsageRecord(user_id="u", week_start=date(2026, 3, 2), simulations_used=-1)


class TestUsageSnapshot:
    def test_remaining_never_negative(self):
        snapshot = UsageSnapshot(allowed=False, used=5, limit=3, week_start=date(2026, 3, 2))
        assert snapshot.remaining == 0
