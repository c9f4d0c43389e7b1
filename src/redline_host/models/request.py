"""
Request Message Schema
======================

Pydantic models for save requests received from the browser extension.

Input Contract (from the extension background script):
    {
        "action": "save",
        "dataUrl": "data:image/png;base64,iVBORw0KGgo...",
        "metadata": {
            "url": "http://localhost:3000",
            "tabUrl": "http://localhost:3000",
            "timestamp": "2026-02-11T10:20:30.123Z",
            "capturedAt": "2026-02-11T10:20:30.456Z"
        }
    }

Only `action` is checked structurally here. The dataUrl is kept as the raw
JSON value so the store can report the exact payload problem, and metadata
accepts any extra keys the annotation layer chooses to send.

Example:
    from redline_host.models.request import FeedbackRequest

    request = FeedbackRequest.from_message(decoded_json)
    print(request.metadata.url)
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from redline_host.models.error_kinds import ErrorKind, FeedbackError


SAVE_ACTION = "save"

UNSUPPORTED_ACTION_MESSAGE = "Unsupported action. Expected action='save'."


class FeedbackMetadata(BaseModel):
    """
    Free-form capture metadata.

    Attributes:
        url: Page URL supplied by the annotation layer
        tabUrl: Tab URL added by the background script
        timestamp: Caller-chosen capture time
        capturedAt: Time the background script took the screenshot
    """

    model_config = ConfigDict(extra="allow")

    url: Optional[Any] = Field(default=None, description="Annotated page URL")
    tabUrl: Optional[Any] = Field(default=None, description="Tab URL at capture time")
    timestamp: Optional[Any] = Field(default=None, description="Caller-chosen timestamp")
    capturedAt: Optional[Any] = Field(default=None, description="Capture time")

    @property
    def page_url(self) -> Optional[Any]:
        """`url`, falling back to `tabUrl`."""
        return self.url if self.url is not None else self.tabUrl

    @property
    def raw_timestamp(self) -> Optional[Any]:
        """`timestamp`, falling back to `capturedAt`."""
        return self.timestamp if self.timestamp is not None else self.capturedAt


class FeedbackRequest(BaseModel):
    """
    Schema for a save request.

    Attributes:
        action: Must be "save"
        dataUrl: PNG data URL, validated later by the store
        metadata: Capture metadata, empty when absent
    """

    model_config = ConfigDict(extra="allow")

    action: Any = Field(default=None, description="Requested action")
    dataUrl: Any = Field(default=None, description="PNG data URL")
    metadata: FeedbackMetadata = Field(default_factory=FeedbackMetadata)

    @classmethod
    def from_message(cls, message: Any) -> "FeedbackRequest":
        """
        Build a request from one decoded JSON value.

        Raises:
            FeedbackError: INVALID_REQUEST for a non-object message,
                a wrong action or non-object metadata
        """
        if not isinstance(message, dict) or message.get("action") != SAVE_ACTION:
            raise FeedbackError(ErrorKind.INVALID_REQUEST, UNSUPPORTED_ACTION_MESSAGE)

        data = dict(message)
        if data.get("metadata") is None:
            data.pop("metadata", None)
        elif not isinstance(data["metadata"], dict):
            raise FeedbackError(ErrorKind.INVALID_REQUEST, "metadata must be an object.")

        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise FeedbackError(ErrorKind.INVALID_REQUEST, f"Invalid save request: {e}")
