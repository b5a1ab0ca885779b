"""Root logger setup for command-line use."""

from __future__ import annotations

import logging
import os
import sys
from typing import Final

from .errors import ConfigurationError

LOG_FORMAT: Final[str] = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def log_level_from_env(name: str = "TRIPSYNC_LOG_LEVEL", default: int = logging.INFO) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    level = logging.getLevelNamesMapping().get(raw.strip().upper())
    if level is None:
        raise ConfigurationError(f"{name} must be a logging level name, got {raw!r}")
    return level


def configure_logging(*, level: int | None = None, force: bool = False) -> None:
    """Send log records to stderr so stdout stays clean for JSON output.

    Without an explicit ``level`` the ``TRIPSYNC_LOG_LEVEL`` variable applies,
    defaulting to INFO.
    """

    logging.basicConfig(
        level=level if level is not None else log_level_from_env(),
        format=LOG_FORMAT,
        datefmt="%H:%M:%S",
        stream=sys.stderr,
        force=force,
    )
