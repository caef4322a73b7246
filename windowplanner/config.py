"""
Centralized configuration for windowplanner.

Settings are read from config/scheduler.yaml and may be overridden via
environment variables where marked.
"""

import logging
import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError

from windowplanner import paths

logger = logging.getLogger(__name__)

DEFAULT_BLOCK_SIZE_MINUTES = 30

ENV_BLOCK_SIZE = "WINDOWPLANNER_BLOCK_SIZE"
"""Overrides block_size_minutes from the settings file."""


class ConfigError(Exception):
    """Raised when settings cannot be parsed or fail validation."""

    pass


class SchedulerSettings(BaseModel):
    """Tunable scheduler parameters, fixed for the lifetime of a Scheduler."""

    block_size_minutes: int = Field(default=DEFAULT_BLOCK_SIZE_MINUTES, gt=0, le=24 * 60)

    model_config = {"frozen": True, "extra": "forbid"}


def _read_yaml(config_path: Path) -> dict:
    """Load YAML settings, return empty dict when the file is missing."""
    if not config_path.exists():
        logger.warning("Scheduler settings not found at %s, using defaults", config_path)
        return {}
    try:
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Could not parse {config_path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a mapping in {config_path}, got {type(data).__name__}")
    return data


def load_settings(config_path: Path | str | None = None) -> SchedulerSettings:
    """
    Load scheduler settings.

    Args:
        config_path: YAML file to read. Defaults to paths.settings_path().

    Returns:
        Validated SchedulerSettings

    Raises:
        ConfigError: If the file or an override holds invalid values
    """
    path = Path(config_path) if config_path is not None else paths.settings_path()
    data = _read_yaml(path)

    override = os.environ.get(ENV_BLOCK_SIZE)
    if override:
        try:
            data["block_size_minutes"] = int(override)
        except ValueError as e:
            raise ConfigError(f"{ENV_BLOCK_SIZE} must be an integer, got {override!r}") from e

    try:
        settings = SchedulerSettings(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid scheduler settings: {e}") from e

    logger.debug("Loaded scheduler settings", extra={"block_size_minutes": settings.block_size_minutes})
    return settings
