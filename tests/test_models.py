"""
Model Tests
===========
"""

import pytest

from redline_host.models import (
    ErrorKind,
    FeedbackError,
    FeedbackRequest,
    LatestIndex,
    SaveResult,
)
from redline_host.models.error_kinds import Failure


class TestFeedbackRequest:
    """Tests for FeedbackRequest.from_message."""

    def test_keeps_extra_metadata(self, save_request):
        """Verify unknown metadata keys are kept."""
        save_request["metadata"]["annotations"] = [{"x": 1, "y": 2}]
        request = FeedbackRequest.from_message(save_request)

        assert request.metadata.url == "http://localhost:3000"
        assert request.metadata.model_extra["annotations"] == [{"x": 1, "y": 2}]

    def test_null_metadata_is_empty(self, png_data_url):
        """Verify null metadata behaves like no metadata."""
        request = FeedbackRequest.from_message({"action": "save", "dataUrl": png_data_url, "metadata": None})

        assert request.metadata.page_url is None
        assert request.metadata.raw_timestamp is None

    def test_url_prefers_url_over_tab_url(self):
        """Verify url wins over tabUrl."""
        request = FeedbackRequest.from_message({
            "action": "save",
            "metadata": {"url": "http://a", "tabUrl": "http://b"},
        })
        assert request.metadata.page_url == "http://a"

    def test_timestamp_prefers_timestamp_over_captured_at(self):
        """Verify timestamp wins over capturedAt."""
        request = FeedbackRequest.from_message({
            "action": "save",
            "metadata": {"timestamp": "t1", "capturedAt": "t2"},
        })
        assert request.metadata.raw_timestamp == "t1"

    def test_wrong_action(self):
        """Verify a wrong action raises INVALID_REQUEST."""
        with pytest.raises(FeedbackError) as exc_info:
            FeedbackRequest.from_message({"action": "SAVE"})
        assert exc_info.value.kind == ErrorKind.INVALID_REQUEST


class TestResults:
    """Tests for result values."""

    def test_protocol_kinds(self):
        """Verify which kinds count as protocol errors."""
        assert ErrorKind.INVALID_LENGTH.is_protocol_error
        assert ErrorKind.MALFORMED_PAYLOAD.is_protocol_error
        assert not ErrorKind.INVALID_PAYLOAD.is_protocol_error
        assert not ErrorKind.FILESYSTEM.is_protocol_error

    def test_failed_result_response(self):
        """Verify a failed result maps to {success, error}."""
        result = SaveResult.failed(Failure(ErrorKind.FILESYSTEM, "disk full"))
        assert not result.success
        assert result.to_response() == {"success": False, "error": "disk full"}

    def test_latest_index_null_url(self):
        """Verify a missing url is stored as null."""
        record = LatestIndex(path="/tmp/a.png", timestamp="2026-02-11T10:20:30.123Z")
        assert record.model_dump() == {
            "path": "/tmp/a.png",
            "url": None,
            "timestamp": "2026-02-11T10:20:30.123Z",
        }
