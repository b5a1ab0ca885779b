"""Ports for persisting synchronised records."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from tripsync.domain.model import Trip, UserSettings

if TYPE_CHECKING:
    from collections.abc import Sequence


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class TripRepository(Repository[Trip], Protocol):
    """Persistence contract for trips, keyed by owner and trip id."""

    def get(self, *, user_id: str, trip_id: str) -> Trip | None: ...

    def changed_since(
        self,
        *,
        user_id: str,
        version: int | None,
        limit: int,
    ) -> Sequence[Trip]:
        """Return trips with ``sync_version > version`` ordered by (version, id)."""
        ...


@runtime_checkable
class UserSettingsRepository(Repository[UserSettings], Protocol):
    """Persistence contract for the per-user settings singleton."""

    def get(self, *, user_id: str) -> UserSettings | None: ...
