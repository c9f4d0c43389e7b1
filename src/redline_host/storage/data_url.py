"""
PNG Data URL Decoder
====================

The ONLY place in the codebase that turns a data URL into image bytes.

Design Rules:
    - Accepts `data:image/png;base64,<payload>` only
    - Does not inspect or re-encode the PNG
    - Fails fast with INVALID_PAYLOAD on anything else
    - Base64 decoding is lenient: stray characters are skipped and
      missing padding is restored
"""

import base64
import re
from typing import Any

from redline_host.models.error_kinds import ErrorKind, FeedbackError


PNG_DATA_URL_PATTERN = re.compile(r"data:image/png;base64,(.+)")
NON_BASE64_PATTERN = re.compile(r"[^A-Za-z0-9+/\-_]")

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"

MISSING_DATA_URL_MESSAGE = "Request must include a non-empty PNG dataUrl."
NOT_PNG_DATA_URL_MESSAGE = "dataUrl must be a PNG data URL."
EMPTY_PNG_MESSAGE = "PNG payload was empty."


def parse_png_data_url(data_url: Any) -> bytes:
    """
    Decode the base64 payload of a PNG data URL.

    Args:
        data_url: Raw `dataUrl` value from the request

    Returns:
        Decoded PNG bytes (never empty)

    Raises:
        FeedbackError: INVALID_PAYLOAD when the value is missing, not a
            PNG data URL, or decodes to zero bytes
    """
    if not isinstance(data_url, str) or not data_url:
        raise FeedbackError(ErrorKind.INVALID_PAYLOAD, MISSING_DATA_URL_MESSAGE)

    match = PNG_DATA_URL_PATTERN.fullmatch(data_url)
    if match is None:
        raise FeedbackError(ErrorKind.INVALID_PAYLOAD, NOT_PNG_DATA_URL_MESSAGE)

    png_bytes = decode_base64_payload(match.group(1))

    if len(png_bytes) == 0:
        raise FeedbackError(ErrorKind.INVALID_PAYLOAD, EMPTY_PNG_MESSAGE)

    return png_bytes


def build_png_data_url(png_bytes: bytes) -> str:
    """Encode PNG bytes as a data URL."""
    return "data:image/png;base64," + base64.b64encode(png_bytes).decode("ascii")


def looks_like_png(png_bytes: bytes) -> bool:
    """Whether bytes start with the PNG file signature."""
    return png_bytes.startswith(PNG_SIGNATURE)


def decode_base64_payload(payload: str) -> bytes:
    """
    Decode base64 without rejecting sloppy input.

    Characters outside the standard and URL-safe alphabets are dropped
    before missing '=' padding is restored. A lone trailing character
    carries no full byte and is ignored.
    """
    cleaned = NON_BASE64_PATTERN.sub("", payload).replace("-", "+").replace("_", "/")
    if len(cleaned) % 4 == 1:
        cleaned = cleaned[:-1]
    return base64.b64decode(cleaned + "=" * (-len(cleaned) % 4))
