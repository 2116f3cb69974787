"""
slideshow-video Configuration
=============================

This module handles configuration loading for the slideshow converter.

Configuration Sources (in order of precedence):
    1. Environment variables (highest priority)
    2. config.yaml file
    3. Default values (lowest priority)

Environment Variable Mapping:
    SLIDESHOW_CONFIG          -> path of the YAML file to load
    SLIDESHOW_LOG_LEVEL       -> logging.level
    SLIDESHOW_LOG_FORMAT      -> logging.format
    SLIDESHOW_REMOVE_PARTIAL  -> output.remove_partial_on_error
    SLIDESHOW_CREATE_DIRS     -> output.create_parent_dirs

Encoder tuning (crf 18, preset veryslow) is fixed and deliberately absent here.

Example:
    from slideshow_video.config import load_config, setup_logging

    settings = load_config()
    setup_logging(settings)
    print(settings.logging.level)
"""

import os
import logging
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field

from slideshow_video import __version__


logger = logging.getLogger(__name__)


_TRUE_VALUES = {"1", "true", "yes", "on"}


# =============================================================================
# Configuration Models
# =============================================================================

class AppConfig(BaseModel):
    """Application identification."""

    name: str = Field(default="slideshow-video", description="Application name")
    version: str = Field(default=__version__, description="Package version")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="text", description="Log format: json or text")


class OutputConfig(BaseModel):
    """Handling of the output file by the command-line caller."""

    remove_partial_on_error: bool = Field(
        default=True,
        description="Delete a partially written output file when conversion fails",
    )
    create_parent_dirs: bool = Field(
        default=True,
        description="Create missing parent directories of the output path",
    )


class Settings(BaseModel):
    """
    Main settings class for slideshow-video.

    Loads configuration from YAML file and environment variables.
    Environment variables take precedence over file values.
    """

    app: AppConfig = Field(default_factory=AppConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)


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
        config_path: Path to config.yaml. If None, uses SLIDESHOW_CONFIG or
            searches common locations.

    Returns:
        Settings: Loaded configuration
    """
    if config_path is None:
        config_path = os.environ.get("SLIDESHOW_CONFIG")

    if config_path is None:
        search_paths = [
            Path("slideshow.yaml"),
            Path("config.yaml"),
            Path("config.yml"),
        ]
        for path in search_paths:
            if path.exists():
                config_path = str(path)
                break

    config_data = {}
    if config_path and Path(config_path).exists():
        logger.info(f"Loading config from: {config_path}")
        with open(config_path, "r") as f:
            config_data = yaml.safe_load(f) or {}
    elif config_path:
        logger.warning(f"Config file not found: {config_path}, using defaults")
    else:
        logger.debug("No config file found, using defaults and environment variables")

    _apply_env_overrides(config_data)

    return Settings.model_validate(config_data)


def _env_flag(value: str) -> bool:
    return value.strip().lower() in _TRUE_VALUES


def _apply_env_overrides(config_data: dict) -> None:
    """Apply environment variable overrides to config data."""

    # Logging settings
    if env_level := os.environ.get("SLIDESHOW_LOG_LEVEL"):
        config_data.setdefault("logging", {})["level"] = env_level
    if env_format := os.environ.get("SLIDESHOW_LOG_FORMAT"):
        config_data.setdefault("logging", {})["format"] = env_format

    # Output settings
    if env_remove := os.environ.get("SLIDESHOW_REMOVE_PARTIAL"):
        config_data.setdefault("output", {})["remove_partial_on_error"] = _env_flag(env_remove)
    if env_dirs := os.environ.get("SLIDESHOW_CREATE_DIRS"):
        config_data.setdefault("output", {})["create_parent_dirs"] = _env_flag(env_dirs)


def setup_logging(settings: Settings) -> None:
    """Configure logging based on settings."""
    log_level = getattr(logging, settings.logging.level.upper(), logging.INFO)

    if settings.logging.format == "json":
        log_format = '{"time": "%(asctime)s", "level": "%(levelname)s", "module": "%(name)s", "message": "%(message)s"}'
    else:
        log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=log_level,
        format=log_format,
        datefmt="%Y-%m-%dT%H:%M:%S",
        force=True,
    )

    # FFmpeg's own log output is routed through PyAV's "libav" loggers
    logging.getLogger("libav").setLevel(max(log_level, logging.WARNING))
