"""Tests for auth module models."""

import pytest
from pydantic import ValidationError

from modules.auth.models import JWTPayload


class TestJWTPayload:
    def test_minimal_claims(self):
        payload = JWTPayload(sub="user-1", exp=2000000000, iat=1700000000)
        assert payload.aud == "authenticated"
        assert payload.email is None
        assert payload.email_verified is False

    def test_email_verified_from_user_metadata(self):
        payload = JWTPayload(
            sub="user-1",
            exp=2000000000,
            iat=1700000000,
            user_metadata={"email_verified": True},
        )
        assert payload.email_verified is True

    def test_requires_subject(self):
        with pytest.raises(ValidationError):
            JWTPayload(exp=2000000000, iat=1700000000)
