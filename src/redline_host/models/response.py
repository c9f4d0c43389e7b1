"""
Response and Index Models
=========================

Output contract of the native host.

Response Contract (one frame per request):
    {"success": true, "path": "/home/me/.claude/feedback/feedback-...png"}
    {"success": false, "error": "dataUrl must be a PNG data URL."}

Latest Index (latest.json):
    {
        "path": "/home/me/.claude/feedback/feedback-2026-02-11T10-20-30-123Z.png",
        "url": "http://localhost:3000",
        "timestamp": "2026-02-11T10:20:30.123Z"
    }
"""

from dataclasses import dataclass
from typing import Any, Optional

from pydantic import BaseModel, Field

from redline_host.models.error_kinds import Failure


class SaveResponse(BaseModel):
    """Successful save, as sent over the wire."""

    success: bool = Field(default=True, description="Always true")
    path: str = Field(..., description="Absolute path of the saved PNG")


class ErrorResponse(BaseModel):
    """Failed request, as sent over the wire."""

    success: bool = Field(default=False, description="Always false")
    error: str = Field(..., description="Human-readable failure message")


class LatestIndex(BaseModel):
    """
    Pointer record stored in latest.json.

    Attributes:
        path: Absolute path of the most recent artifact
        url: Page URL of the capture, or None
        timestamp: Effective capture timestamp
    """

    path: str = Field(..., description="Absolute artifact path")
    url: Optional[Any] = Field(default=None, description="Captured page URL")
    timestamp: Any = Field(..., description="Effective capture timestamp")


@dataclass(frozen=True, slots=True)
class SaveResult:
    """
    Outcome of one store call.

    Exactly one of `path` and `failure` is set.
    """

    path: Optional[str] = None
    failure: Optional[Failure] = None

    @property
    def success(self) -> bool:
        return self.failure is None

    @classmethod
    def saved(cls, path: str) -> "SaveResult":
        return cls(path=path)

    @classmethod
    def failed(cls, failure: Failure) -> "SaveResult":
        return cls(failure=failure)

    def to_response(self) -> dict:
        """Wire shape sent back to the browser."""
        if self.failure is not None:
            return ErrorResponse(error=self.failure.message).model_dump()
        return SaveResponse(path=self.path).model_dump()
