"""
Redline Host Configuration
==========================

This module handles configuration loading for the native messaging host.

Configuration Sources (in order of precedence):
    1. Environment variables (highest priority)
    2. config.yaml file
    3. Default values (lowest priority)

Environment Variable Mapping:
    REDLINE_CONFIG             -> path of the YAML file
    REDLINE_MAX_MESSAGE_BYTES  -> protocol.max_message_bytes
    REDLINE_LOG_LEVEL          -> logging.level
    REDLINE_LOG_FORMAT         -> logging.format

REDLINE_FEEDBACK_DIR is not read here: the store consults it on every
save when storage.feedback_dir is unset.

Logs always go to stderr. Stdout belongs to the framed protocol.

Example:
    from redline_host.config import load_config, setup_logging

    settings = load_config()
    setup_logging(settings)
    print(settings.protocol.max_message_bytes)
"""

import logging
import os
import sys
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field

from redline_host.stream.codec import MAX_MESSAGE_BYTES


logger = logging.getLogger(__name__)


CONFIG_ENV = "REDLINE_CONFIG"


# =============================================================================
# Configuration Models
# =============================================================================

class StorageConfig(BaseModel):
    """Feedback storage configuration."""

    feedback_dir: Optional[str] = Field(
        default=None,
        description="Feedback directory (None = resolve per request)",
    )


class ProtocolConfig(BaseModel):
    """Framing configuration."""

    max_message_bytes: int = Field(
        default=MAX_MESSAGE_BYTES,
        ge=1,
        le=0xFFFFFFFF,
        description="Largest accepted frame payload in bytes",
    )
    read_chunk_size: int = Field(
        default=64 * 1024,
        ge=1,
        description="Bytes requested per stdin read",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="text", description="Log format: json or text")


class Settings(BaseModel):
    """
    Main settings class for the native host.

    Loads configuration from YAML file and environment variables.
    Environment variables take precedence over file values.
    """

    storage: StorageConfig = Field(default_factory=StorageConfig)
    protocol: ProtocolConfig = Field(default_factory=ProtocolConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# =============================================================================
# Configuration Loading
# =============================================================================

def load_config(config_path: Optional[str] = None) -> Settings:
    """
    Load configuration from YAML file and environment variables.

    Priority (highest to lowest):
        1. Environment variables
        2. YAML config file
        3. Default values

    Args:
        config_path: Path to config.yaml. If None, uses REDLINE_CONFIG
            or config.yaml in the working directory.

    Returns:
        Settings: Loaded configuration
    """
    if config_path is None:
        config_path = os.environ.get(CONFIG_ENV)
    if config_path is None:
        for path in (Path("config.yaml"), Path("config.yml")):
            if path.exists():
                config_path = str(path)
                break

    config_data = {}
    if config_path and Path(config_path).exists():
        logger.info(f"Loading config from: {config_path}")
        with open(config_path, "r") as f:
            config_data = yaml.safe_load(f) or {}
    else:
        logger.debug("No config file found, using defaults and environment variables")

    _apply_env_overrides(config_data)

    return Settings.model_validate(config_data)


def _apply_env_overrides(config_data: dict) -> None:
    """Apply environment variable overrides to config data."""

    # Protocol settings
    if env_max := os.environ.get("REDLINE_MAX_MESSAGE_BYTES"):
        config_data.setdefault("protocol", {})["max_message_bytes"] = int(env_max)

    # Logging settings
    if env_log := os.environ.get("REDLINE_LOG_LEVEL"):
        config_data.setdefault("logging", {})["level"] = env_log
    if env_format := os.environ.get("REDLINE_LOG_FORMAT"):
        config_data.setdefault("logging", {})["format"] = env_format


def setup_logging(settings: Settings) -> None:
    """Configure logging based on settings. Output goes to stderr."""
    log_level = getattr(logging, settings.logging.level.upper(), logging.INFO)

    if settings.logging.format == "json":
        log_format = '{"time": "%(asctime)s", "level": "%(levelname)s", "module": "%(name)s", "message": "%(message)s"}'
    else:
        log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=log_level,
        format=log_format,
        datefmt="%Y-%m-%dT%H:%M:%S",
        stream=sys.stderr,
    )
