"""
Test Configuration
==================

Pytest fixtures and test configuration for redline_host.
"""

import pytest


# 1x1 grayscale PNG
FIXTURE_PNG = (
    "data:image/png;base64,"
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mP8/x8AAusB9oN7nFkAAAAASUVORK5CYII="
)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep tests away from the real home directory and environment."""
    for name in (
        "REDLINE_FEEDBACK_DIR",
        "REDLINE_CONFIG",
        "REDLINE_MAX_MESSAGE_BYTES",
        "REDLINE_LOG_LEVEL",
        "REDLINE_LOG_FORMAT",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))


@pytest.fixture
def png_data_url():
    """Provide a valid PNG data URL."""
    return FIXTURE_PNG


@pytest.fixture
def feedback_dir(tmp_path):
    """Feedback directory that does not exist yet."""
    return tmp_path / "feedback"


@pytest.fixture
def save_request(png_data_url):
    """Provide a complete save request."""
    return {
        "action": "save",
        "dataUrl": png_data_url,
        "metadata": {
            "url": "http://localhost:3000",
            "timestamp": "2026-02-11T10:20:30.123Z",
        },
    }
