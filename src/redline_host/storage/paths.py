"""Feedback directory resolution and artifact naming."""

import math
import os
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Optional, Union


FEEDBACK_DIR_ENV = "REDLINE_FEEDBACK_DIR"
LATEST_INDEX_NAME = "latest.json"
ARTIFACT_PREFIX = "feedback-"
ARTIFACT_SUFFIX = ".png"

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def default_feedback_dir() -> Path:
    """~/.claude/feedback"""
    return Path.home() / ".claude" / "feedback"


def resolve_feedback_dir(override: Optional[Union[str, Path]] = None) -> Path:
    """
    Pick the feedback directory for one request.

    Priority (highest to lowest):
        1. Explicit override
        2. REDLINE_FEEDBACK_DIR environment variable
        3. ~/.claude/feedback
    """
    if override:
        return Path(override).expanduser()
    if env_dir := os.environ.get(FEEDBACK_DIR_ENV):
        return Path(env_dir).expanduser()
    return default_feedback_dir()


def ensure_directory(feedback_dir: Path) -> None:
    feedback_dir.mkdir(parents=True, exist_ok=True)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Interpret a caller-supplied timestamp.

    Strings are ISO-8601 (a trailing "Z" is accepted, naive values are
    taken as UTC). Numbers are epoch milliseconds. Zero and empty strings
    give None, as does anything that does not parse.
    """
    if isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        if not value or not math.isfinite(value):
            return None
        try:
            return EPOCH + timedelta(milliseconds=value)
        except OverflowError:
            return None

    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
            if parsed.tzinfo is None:
                parsed = parsed.replace(tzinfo=timezone.utc)
            return parsed.astimezone(timezone.utc)
        except (ValueError, OverflowError):
            return None

    return None


def to_iso_string(moment: datetime) -> str:
    """UTC ISO-8601 with millisecond precision, e.g. 2026-02-11T10:20:30.123Z"""
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S") + f".{moment.microsecond // 1000:03d}Z"


def format_timestamp(moment: datetime) -> str:
    """ISO string made filename-safe: ':' and '.' become '-'."""
    return to_iso_string(moment).replace(":", "-").replace(".", "-")


def build_feedback_path(feedback_dir: Path, moment: datetime) -> Path:
    return feedback_dir / f"{ARTIFACT_PREFIX}{format_timestamp(moment)}{ARTIFACT_SUFFIX}"
