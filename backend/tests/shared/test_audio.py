"""Tests for shared/audio.py."""

import base64

import pytest

from shared.audio import decode_audio
from shared.exceptions import ValidationError


class TestDecodeAudio:
    def test_plain_base64(self):
        assert decode_audio(base64.b64encode(b"webm-bytes").decode()) == b"webm-bytes"

    def test_data_url(self):
        payload = "data:audio/webm;base64," + base64.b64encode(b"abc").decode()
        assert decode_audio(payload) == b"abc"

    def test_surrounding_whitespace(self):
        assert decode_audio("  " + base64.b64encode(b"abc").decode() + "\n") == b"abc"

    @pytest.mark.parametrize("payload", ["", "   ", "data:audio/webm;base64,"])
    def test_empty_payload(self, payload):
        with pytest.raises(ValidationError) as exc_info:
            decode_audio(payload)
        assert exc_info.value.code == "INVALID_AUDIO"

    def test_invalid_base64_names_field(self):
        with pytest.raises(ValidationError) as exc_info:
            decode_audio("not base64!!", field="responses[0].audio")
        assert exc_info.value.status_code == 400
        assert exc_info.value.details == {"field": "responses[0].audio"}
