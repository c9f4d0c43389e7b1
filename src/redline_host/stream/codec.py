"""
Frame Codec
===========

Length-prefixed framing for the native messaging byte stream.

Wire Format:
    [u32 little-endian length][UTF-8 JSON payload of exactly that length]

Design Rules:
    - Stateless: all state lives in the buffer the caller threads through
    - A bad length or bad JSON fails the WHOLE decode call, no partial success
    - Incomplete trailing frames are returned untouched in `remaining`
    - Encode never truncates
"""

import json
import struct
from dataclasses import dataclass, field
from typing import Any, Optional, Tuple

from redline_host.models.error_kinds import ErrorKind, Failure


HEADER_FORMAT = "<I"
HEADER_SIZE = struct.calcsize(HEADER_FORMAT)

MAX_MESSAGE_BYTES = 10 * 1024 * 1024
MAX_ENCODABLE_BYTES = 0xFFFFFFFF

MALFORMED_PAYLOAD_MESSAGE = "Received malformed JSON payload from Chrome."


class FrameEncodeError(ValueError):
    """Raised when a message cannot be represented in one frame."""
    pass


@dataclass(frozen=True, slots=True)
class DecodeResult:
    """
    Outcome of one decode pass.

    Attributes:
        messages: Fully decoded JSON values, in stream order
        remaining: Unread bytes (0-3 header bytes or a partial frame)
        failure: Set when the buffer is corrupt; messages is then empty
    """

    messages: Tuple[Any, ...] = ()
    remaining: bytes = b""
    failure: Optional[Failure] = field(default=None)

    @property
    def ok(self) -> bool:
        return self.failure is None


def encode_message(message: Any) -> bytes:
    """
    Serialize a JSON value into one frame.

    Args:
        message: Any JSON-serializable value

    Returns:
        4-byte little-endian length prefix followed by the UTF-8 JSON body

    Raises:
        FrameEncodeError: If the body does not fit a 32-bit length
    """
    body = json.dumps(message, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
    if len(body) > MAX_ENCODABLE_BYTES:
        raise FrameEncodeError(
            f"Message of {len(body)} bytes exceeds the 32-bit frame length"
        )
    return struct.pack(HEADER_FORMAT, len(body)) + body


def decode_messages(
    buffer: bytes,
    max_message_bytes: int = MAX_MESSAGE_BYTES,
) -> DecodeResult:
    """
    Extract every complete frame from a buffer.

    Calling again with `remaining + more_bytes` continues where this
    call stopped.

    Args:
        buffer: Accumulated stream bytes
        max_message_bytes: Largest accepted payload length

    Returns:
        DecodeResult with decoded messages and leftover bytes, or a
        failure of kind INVALID_LENGTH / MALFORMED_PAYLOAD
    """
    view = memoryview(buffer)
    messages = []
    cursor = 0

    while len(view) - cursor >= HEADER_SIZE:
        (length,) = struct.unpack_from(HEADER_FORMAT, view, cursor)
        if length <= 0 or length > max_message_bytes:
            return DecodeResult(
                failure=Failure(
                    ErrorKind.INVALID_LENGTH,
                    f"Invalid native message length: {length}",
                ),
                remaining=bytes(buffer),
            )

        payload_start = cursor + HEADER_SIZE
        payload_end = payload_start + length
        if len(view) < payload_end:
            break

        try:
            parsed = json.loads(view[payload_start:payload_end].tobytes().decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError):
            return DecodeResult(
                failure=Failure(ErrorKind.MALFORMED_PAYLOAD, MALFORMED_PAYLOAD_MESSAGE),
                remaining=bytes(buffer),
            )

        messages.append(parsed)
        cursor = payload_end

    return DecodeResult(messages=tuple(messages), remaining=bytes(view[cursor:]))
