"""Version-stamped access to a user's trips and settings.

Every write goes through here so that ``sync_version`` and ``updated_at`` are
stamped consistently. The caller owns the transaction.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from tripsync.domain.model import Trip, UserSettings, utcnow

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from datetime import datetime

    from tripsync.domain.ports import SyncRepositories
    from tripsync.domain.sync.contracts import SettingsChange, TripChange

log = logging.getLogger(__name__)


class VersionStampedStore:
    def __init__(
        self,
        repositories: SyncRepositories,
        *,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._repositories = repositories
        self._clock = clock

    # Reads

    def trip(self, user_id: str, trip_id: str) -> Trip | None:
        return self._repositories.trips.get(user_id=user_id, trip_id=trip_id)

    def settings(self, user_id: str) -> UserSettings | None:
        return self._repositories.user_settings.get(user_id=user_id)

    def trips_since(self, user_id: str, version: int | None, *, limit: int) -> Sequence[Trip]:
        """Trips (tombstones included) newer than ``version``, oldest first."""

        return self._repositories.trips.changed_since(
            user_id=user_id,
            version=version,
            limit=limit,
        )

    def settings_since(self, user_id: str, version: int | None) -> UserSettings | None:
        settings = self.settings(user_id)
        if settings is None:
            return None
        if version is not None and settings.sync_version <= version:
            return None
        return settings

    # Writes

    def upsert_trip(self, user_id: str, change: TripChange, version: int) -> Trip:
        now = self._clock()
        trip = self.trip(user_id, change.id)
        if trip is None:
            trip = Trip(
                id=change.id,
                user_id=user_id,
                departure_date=change.departure_date,
                return_date=change.return_date,
                location=change.location,
                is_simulated=change.is_simulated,
                device_id=change.device_id,
                deleted_at=change.deleted_at,
                sync_version=version,
                created_at=now,
                updated_at=now,
            )
            self._repositories.trips.add(trip)
            return trip

        _warn_on_regression("trip", trip.id, trip.sync_version, version)
        trip.departure_date = change.departure_date
        trip.return_date = change.return_date
        trip.location = change.location
        trip.is_simulated = change.is_simulated
        trip.device_id = change.device_id
        trip.deleted_at = change.deleted_at
        trip.stamp(version, at=now)
        return trip

    def upsert_settings(self, user_id: str, change: SettingsChange, version: int) -> UserSettings:
        now = self._clock()
        settings = self.settings(user_id)
        provided = change.provided()
        if settings is None:
            settings = UserSettings(  # type: ignore[arg-type]
                user_id=user_id, created_at=now, updated_at=now, **provided
            )
            settings.sync_version = version
            self._repositories.user_settings.add(settings)
            return settings

        _warn_on_regression("user_settings", settings.id, settings.sync_version, version)
        for name, value in provided.items():
            setattr(settings, name, value)
        settings.stamp(version, at=now)
        return settings

    def soft_delete_trip(self, user_id: str, trip_id: str, version: int) -> bool:
        """Tombstone a live trip. Returns ``False`` when there was nothing to delete."""

        trip = self.trip(user_id, trip_id)
        if trip is None or trip.is_deleted:
            return False
        _warn_on_regression("trip", trip.id, trip.sync_version, version)
        trip.tombstone(version, at=self._clock())
        return True


def _warn_on_regression(entity: str, entity_id: str, stored: int, incoming: int) -> None:
    if incoming < stored:
        log.warning(
            "Overwriting %s %s at version %d with lower version %d",
            entity,
            entity_id,
            stored,
            incoming,
        )
