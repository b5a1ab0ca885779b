"""SQLAlchemy adapter package for tripsync."""

from __future__ import annotations

from .mappings import create_all_tables, mapper_registry, start_mappers
from .repositories import SqlAlchemyTripRepository, SqlAlchemyUserSettingsRepository
from .unit_of_work import (
    SqlAlchemySyncUnitOfWork,
    StartupError,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemySyncUnitOfWork",
    "SqlAlchemyTripRepository",
    "SqlAlchemyUserSettingsRepository",
    "StartupError",
    "create_all_tables",
    "is_started",
    "mapper_registry",
    "shutdown",
    "start_mappers",
    "startup",
]
