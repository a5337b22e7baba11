"""Runtime configuration and logging setup for krfiles.

Settings are read from ``KRFILES_*`` environment variables (and an
optional ``.env`` file).  Explicit CLI flags always take precedence over
these values; the CLI layer performs that merge.
"""

from __future__ import annotations

import sys
from pathlib import Path

from loguru import logger
from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from krfiles.exceptions import ConfigurationError

LOG_FORMAT: str = "{time:HH:mm:ss} | {level: <7} | {name}:{function}:{line} | {message}"


class Settings(BaseSettings):
    """krfiles configuration sourced from the environment."""

    server: str | None = None
    """Default Filebrowser server URL (``KRFILES_SERVER``)."""

    token: str | None = None
    """Auth token from a previous login (``KRFILES_TOKEN``)."""

    library: Path | None = None
    """Explicit path to the native shim library (``KRFILES_LIBRARY``)."""

    log_level: str = "WARNING"
    """Minimum loguru level written to stderr (``KRFILES_LOG_LEVEL``)."""

    model_config = SettingsConfigDict(
        env_prefix="KRFILES_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


def load_settings() -> Settings:
    """Build a fresh :class:`Settings` from the current environment."""
    try:
        return Settings()
    except ValidationError as exc:
        raise ConfigurationError(
            f"Invalid krfiles settings: {exc.error_count()} error(s).",
            hint=str(exc),
        ) from exc


def setup_logging(level: str) -> None:
    """Route loguru output to stderr at *level*.

    Called once per CLI invocation; replaces any previously installed
    sinks so repeated ``main()`` calls do not duplicate output.
    """
    logger.remove()
    try:
        logger.add(sys.stderr, level=level.upper(), format=LOG_FORMAT)
    except ValueError as exc:
        logger.add(sys.stderr, level="WARNING", format=LOG_FORMAT)
        raise ConfigurationError(
            f"Invalid log level: {level}",
            hint="Use DEBUG, INFO, WARNING, or ERROR.",
        ) from exc
