"""Application configuration helpers."""

from __future__ import annotations

from .env import bool_from_env, positive_int_from_env
from .errors import ConfigurationError
from .logging import configure_logging, log_level_from_env
from .storage import (
    DatabaseConfig,
    StorageConfig,
    get_database_config,
    get_database_uri,
    get_storage_config,
)
from .sync import SyncConfig, get_sync_config

__all__ = [
    "ConfigurationError",
    "DatabaseConfig",
    "StorageConfig",
    "SyncConfig",
    "bool_from_env",
    "configure_logging",
    "get_database_config",
    "get_database_uri",
    "get_storage_config",
    "get_sync_config",
    "log_level_from_env",
    "positive_int_from_env",
]
