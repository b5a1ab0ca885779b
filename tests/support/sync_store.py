"""In-memory implementations of the sync persistence ports."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

from tripsync.domain.ports import SyncRepositories

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import TracebackType

    from tripsync.domain.model import Trip, UserSettings


class InMemoryTripRepository:
    def __init__(self, trips: dict[tuple[str, str], Trip]) -> None:
        self.trips = trips

    def add(self, entity: Trip) -> None:
        self.trips[(entity.user_id, entity.id)] = entity

    def get(self, *, user_id: str, trip_id: str) -> Trip | None:
        return self.trips.get((user_id, trip_id))

    def changed_since(
        self,
        *,
        user_id: str,
        version: int | None,
        limit: int,
    ) -> Sequence[Trip]:
        rows = [
            trip
            for (owner, _), trip in self.trips.items()
            if owner == user_id and (version is None or trip.sync_version > version)
        ]
        rows.sort(key=lambda trip: (trip.sync_version, trip.id))
        return rows[:limit]


class InMemoryUserSettingsRepository:
    def __init__(self, settings: dict[str, UserSettings]) -> None:
        self.settings = settings

    def add(self, entity: UserSettings) -> None:
        self.settings[entity.user_id] = entity

    def get(self, *, user_id: str) -> UserSettings | None:
        return self.settings.get(user_id)


@dataclass
class InMemorySyncDatabase:
    """Committed state shared by every unit of work created from it."""

    trips: dict[tuple[str, str], Trip] = field(default_factory=dict)
    settings: dict[str, UserSettings] = field(default_factory=dict)
    commits: int = 0
    fail_on_commit: Exception | None = None

    def seed_trip(self, trip: Trip) -> None:
        self.trips[(trip.user_id, trip.id)] = trip

    def seed_settings(self, settings: UserSettings) -> None:
        self.settings[settings.user_id] = settings

    def trip(self, user_id: str, trip_id: str) -> Trip | None:
        return self.trips.get((user_id, trip_id))

    def unit_of_work(self) -> FakeSyncUnitOfWork:
        return FakeSyncUnitOfWork(self)


class FakeSyncUnitOfWork:
    """Works on a private copy of the database; ``commit`` publishes it."""

    def __init__(self, database: InMemorySyncDatabase) -> None:
        self._database = database
        self._trips: dict[tuple[str, str], Trip] = {}
        self._settings: dict[str, UserSettings] = {}
        self._repositories: SyncRepositories | None = None
        self.committed = False
        self.rolled_back = False

    @property
    def repositories(self) -> SyncRepositories:
        assert self._repositories is not None, "unit of work not entered"
        return self._repositories

    def __enter__(self) -> FakeSyncUnitOfWork:
        self._trips = copy.deepcopy(self._database.trips)
        self._settings = copy.deepcopy(self._database.settings)
        self._repositories = SyncRepositories(
            trips=InMemoryTripRepository(self._trips),
            user_settings=InMemoryUserSettingsRepository(self._settings),
        )
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        if exc_type is not None:
            self.rollback()
        self._repositories = None
        return False

    def commit(self) -> None:
        if self._database.fail_on_commit is not None:
            raise self._database.fail_on_commit
        self._database.trips = self._trips
        self._database.settings = self._settings
        self._database.commits += 1
        self.committed = True

    def rollback(self) -> None:
        self.rolled_back = True
