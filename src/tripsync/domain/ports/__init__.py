"""Domain port definitions for adapters."""

from __future__ import annotations

from .persistence import Repository, TripRepository, UserSettingsRepository
from .unit_of_work import (
    RepositoryCollection,
    SyncRepositories,
    SyncUnitOfWork,
    UnitOfWork,
)

__all__ = [
    "Repository",
    "RepositoryCollection",
    "SyncRepositories",
    "SyncUnitOfWork",
    "TripRepository",
    "UnitOfWork",
    "UserSettingsRepository",
]
