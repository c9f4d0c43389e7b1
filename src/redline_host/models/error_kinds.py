"""
Error Kinds
===========

Fixed set of machine-readable failure kinds for the native host.

Every failed decode or save carries exactly ONE kind plus a
human-readable message. The dispatcher branches on the kind,
the browser only ever sees the message.

Rules:
    - Protocol kinds poison the receive buffer
    - Request kinds affect a single message only
"""

from dataclasses import dataclass
from enum import Enum


class ErrorKind(str, Enum):
    """
    Machine-readable failure codes.

    Attributes:
        INVALID_LENGTH: Length prefix is zero or above the frame limit
        MALFORMED_PAYLOAD: Frame payload is not UTF-8 JSON
        INVALID_REQUEST: Message shape is wrong (action, metadata)
        INVALID_PAYLOAD: dataUrl is missing or not a usable PNG data URL
        FILESYSTEM: Directory creation, write or rename failed
        INTERNAL: Anything else raised while handling a message
    """

    # Protocol corruption
    INVALID_LENGTH = "INVALID_LENGTH"
    MALFORMED_PAYLOAD = "MALFORMED_PAYLOAD"

    # Per-message failures
    INVALID_REQUEST = "INVALID_REQUEST"
    INVALID_PAYLOAD = "INVALID_PAYLOAD"
    FILESYSTEM = "FILESYSTEM"
    INTERNAL = "INTERNAL"

    @property
    def is_protocol_error(self) -> bool:
        """Whether this kind means the byte stream can no longer be trusted."""
        return self in (ErrorKind.INVALID_LENGTH, ErrorKind.MALFORMED_PAYLOAD)


@dataclass(frozen=True, slots=True)
class Failure:
    """A failure value passed between components instead of an exception."""

    kind: ErrorKind
    message: str

    def to_response(self) -> dict:
        """Wire shape sent back to the browser."""
        return {"success": False, "error": self.message}


class FeedbackError(Exception):
    """Raised inside a component; converted to a Failure at its boundary."""

    def __init__(self, kind: ErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message

    def to_failure(self) -> Failure:
        return Failure(kind=self.kind, message=self.message)
