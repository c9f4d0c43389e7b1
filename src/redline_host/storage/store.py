"""
Feedback Store
==============

Persists one save request: the PNG artifact plus the latest.json pointer.

This module provides the FeedbackStore class which:
    - Resolves and creates the feedback directory per request
    - Validates the request shape and the PNG data URL
    - Writes feedback-<timestamp>.png
    - Commits latest.json through a temp file + rename

Design Rules:
    - Returns SaveResult values, never raises for request or filesystem errors
    - No retries, no locking
    - Artifacts are never deleted or rewritten except by a timestamp collision
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import ValidationError

from redline_host.models.error_kinds import ErrorKind, Failure, FeedbackError
from redline_host.models.request import FeedbackRequest
from redline_host.models.response import LatestIndex, SaveResult
from redline_host.storage.data_url import parse_png_data_url
from redline_host.storage.paths import (
    LATEST_INDEX_NAME,
    build_feedback_path,
    ensure_directory,
    parse_timestamp,
    resolve_feedback_dir,
    to_iso_string,
    utc_now,
)


logger = logging.getLogger(__name__)


UNEXPECTED_ERROR_MESSAGE = "Unexpected native host error"


def atomic_write_text(path: Path, content: str) -> None:
    """Write a file through a sibling temp file so readers never see a partial write."""
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(content)
        Path(tmp_path).replace(path)
    except Exception:
        Path(tmp_path).unlink(missing_ok=True)
        raise


class FeedbackStore:
    """
    Filesystem store for annotated screenshots.

    Attributes:
        feedback_dir: Explicit directory override, or None to resolve
            from REDLINE_FEEDBACK_DIR / the home directory on each save

    Example:
        store = FeedbackStore()
        result = store.save({"action": "save", "dataUrl": data_url})
        if result.success:
            print(result.path)
    """

    def __init__(self, feedback_dir: Optional[Union[str, Path]] = None) -> None:
        self.feedback_dir = Path(feedback_dir) if feedback_dir else None

    def resolve_dir(self) -> Path:
        """Directory the next save will write into."""
        return resolve_feedback_dir(self.feedback_dir)

    def save(self, message: Any) -> SaveResult:
        """
        Validate and persist one decoded message.

        Args:
            message: Decoded JSON value from one frame

        Returns:
            SaveResult with the absolute artifact path, or a failure of
            kind INVALID_REQUEST, INVALID_PAYLOAD or FILESYSTEM
        """
        try:
            path = self._save(message)
        except FeedbackError as e:
            logger.warning(f"Rejected save request ({e.kind.value}): {e.message}")
            return SaveResult.failed(e.to_failure())
        except OSError as e:
            logger.error(f"Filesystem error while saving feedback: {e}")
            return SaveResult.failed(Failure(ErrorKind.FILESYSTEM, str(e)))
        except Exception:
            logger.exception("Unexpected error while saving feedback")
            return SaveResult.failed(Failure(ErrorKind.INTERNAL, UNEXPECTED_ERROR_MESSAGE))

        logger.info(f"Saved feedback screenshot to {path}")
        return SaveResult.saved(str(path))

    def _save(self, message: Any) -> Path:
        feedback_dir = self.resolve_dir().absolute()
        ensure_directory(feedback_dir)

        request = FeedbackRequest.from_message(message)
        png_bytes = parse_png_data_url(request.dataUrl)

        raw_timestamp = request.metadata.raw_timestamp
        moment = parse_timestamp(raw_timestamp) if raw_timestamp is not None else None
        if moment is None:
            if raw_timestamp is not None:
                logger.debug(f"Unparseable timestamp {raw_timestamp!r}, using current time")
            moment = utc_now()
            raw_timestamp = to_iso_string(moment)

        output_path = build_feedback_path(feedback_dir, moment)
        if output_path.exists():
            logger.warning(f"Overwriting existing feedback artifact {output_path}")
        output_path.write_bytes(png_bytes)

        self._write_latest(
            feedback_dir,
            LatestIndex(
                path=str(output_path),
                url=request.metadata.page_url,
                timestamp=raw_timestamp,
            ),
        )
        return output_path

    def _write_latest(self, feedback_dir: Path, record: LatestIndex) -> None:
        content = json.dumps(record.model_dump(), indent=2, ensure_ascii=False)
        atomic_write_text(feedback_dir / LATEST_INDEX_NAME, content)

    def read_latest(self) -> Optional[LatestIndex]:
        """
        Read latest.json back.

        Returns:
            The pointer record, or None if no save has happened yet
            or the file does not hold a valid record.
        """
        latest_path = self.resolve_dir() / LATEST_INDEX_NAME
        try:
            data = json.loads(latest_path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.error(f"Unreadable {LATEST_INDEX_NAME} at {latest_path}: {e}")
            return None

        try:
            return LatestIndex.model_validate(data)
        except ValidationError as e:
            logger.error(f"Invalid {LATEST_INDEX_NAME} record at {latest_path}: {e}")
            return None


def save_feedback_message(
    message: Any,
    feedback_dir: Optional[Union[str, Path]] = None,
) -> SaveResult:
    """Save one message with a throwaway store."""
    return FeedbackStore(feedback_dir).save(message)
