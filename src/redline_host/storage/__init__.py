"""
Storage Module
==============

Persistence of annotated screenshots and the latest.json pointer.

    - FeedbackStore: Validates a request and writes artifact + index
    - parse_png_data_url: PNG data URL decoding
    - resolve_feedback_dir: Override -> environment -> home directory

Example:
    from redline_host.storage import FeedbackStore

    store = FeedbackStore("/tmp/feedback")
    result = store.save(message)
"""

from redline_host.storage.data_url import build_png_data_url, parse_png_data_url
from redline_host.storage.paths import (
    FEEDBACK_DIR_ENV,
    LATEST_INDEX_NAME,
    build_feedback_path,
    default_feedback_dir,
    format_timestamp,
    resolve_feedback_dir,
)
from redline_host.storage.store import FeedbackStore, save_feedback_message


__all__ = [
    "FeedbackStore",
    "save_feedback_message",
    "parse_png_data_url",
    "build_png_data_url",
    "resolve_feedback_dir",
    "default_feedback_dir",
    "build_feedback_path",
    "format_timestamp",
    "FEEDBACK_DIR_ENV",
    "LATEST_INDEX_NAME",
]
