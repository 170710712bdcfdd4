"""
Audio payload decoding.

Clients send recorded audio as base64 strings, optionally wrapped in a
``data:audio/...;base64,`` URL.
"""

import base64
import binascii

from .exceptions import ValidationError


def decode_audio(payload: str, field: str = "audio") -> bytes:
    """
    Decode a base64 audio payload.

    Args:
        payload: Base64 text or a base64 data URL
        field: Request field name, reported in the error details

    Returns:
        Raw audio bytes

    Raises:
        ValidationError: If the payload is empty or not valid base64
    """
    data = payload.strip()
    if data.startswith("data:") and "," in data:
        data = data.split(",", 1)[1]

    if not data:
        raise ValidationError(
            f"Missing {field}",
            code="INVALID_AUDIO",
            details={"field": field},
        )

    try:
        return base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValidationError(
            f"Invalid base64 in {field}",
            code="INVALID_AUDIO",
            details={"field": field},
        ) from e
