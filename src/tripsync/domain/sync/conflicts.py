"""Classify incoming changes against the stored state.

Detection is read-only: it only looks records up through the store, so it can
be called repeatedly inside the same unit of work that later applies the safe
part of the batch.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

from tripsync.domain.model import SETTINGS_SYNC_FIELDS, TRIP_SYNC_FIELDS

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence
    from datetime import datetime

    from tripsync.domain.model import Trip, UserSettings
    from tripsync.domain.sync.contracts import SettingsChange, TripChange
    from tripsync.domain.sync.store import VersionStampedStore


class ConflictEntity(StrEnum):
    TRIP = "trip"
    USER_SETTINGS = "user_settings"


class ConflictKind(StrEnum):
    """Why a change could not be applied safely."""

    UPDATE_UPDATE = "update_update"
    DELETE_UPDATE = "delete_update"


@dataclass(frozen=True, slots=True, kw_only=True)
class ConflictSide:
    """One replica's view of a conflicting record."""

    data: Mapping[str, object]
    sync_version: int
    modified_at: datetime | None = None
    device_id: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class SyncConflict:
    entity_type: ConflictEntity
    entity_id: str
    kind: ConflictKind
    base_version: int
    server: ConflictSide
    incoming: ConflictSide | None = None
    conflicting_fields: tuple[str, ...] = ()


@dataclass(slots=True, kw_only=True)
class ConflictReport:
    """Conflicts plus the changes that can be applied, in request order."""

    conflicts: list[SyncConflict] = field(default_factory=list[SyncConflict])
    trips: list[TripChange] = field(default_factory=list["TripChange"])
    user_settings: SettingsChange | None = None
    deleted_trip_ids: list[str] = field(default_factory=list[str])

    @property
    def has_conflicts(self) -> bool:
        return bool(self.conflicts)


class ConflictDetector:
    def __init__(self, store: VersionStampedStore) -> None:
        self._store = store

    def classify(
        self,
        user_id: str,
        base_version: int,
        *,
        trips: Sequence[TripChange] = (),
        user_settings: SettingsChange | None = None,
        deleted_trip_ids: Iterable[str] = (),
        device_id: str | None = None,
    ) -> ConflictReport:
        report = ConflictReport()

        for change in trips:
            conflict = self._check_trip(user_id, base_version, change, device_id)
            if conflict is None:
                report.trips.append(change)
            else:
                report.conflicts.append(conflict)

        if user_settings is not None:
            conflict = self._check_settings(user_id, base_version, user_settings, device_id)
            if conflict is None:
                report.user_settings = user_settings
            else:
                report.conflicts.append(conflict)

        for trip_id in _unique(deleted_trip_ids):
            conflict = self._check_deletion(user_id, base_version, trip_id)
            if conflict is None:
                report.deleted_trip_ids.append(trip_id)
            else:
                report.conflicts.append(conflict)

        return report

    def _check_trip(
        self,
        user_id: str,
        base_version: int,
        change: TripChange,
        device_id: str | None,
    ) -> SyncConflict | None:
        stored = self._store.trip(user_id, change.id)
        if stored is None:
            return None

        incoming_deletes = change.deleted_at is not None
        if stored.sync_version > base_version:
            kind = ConflictKind.UPDATE_UPDATE
        elif stored.is_deleted and not incoming_deletes:
            kind = ConflictKind.DELETE_UPDATE
        else:
            return None

        fields = _differing(stored.snapshot(), change.snapshot(), TRIP_SYNC_FIELDS)
        if stored.is_deleted != incoming_deletes:
            fields = (*fields, "deleted_at")
        return SyncConflict(
            entity_type=ConflictEntity.TRIP,
            entity_id=change.id,
            kind=kind,
            base_version=base_version,
            server=_trip_side(stored),
            incoming=ConflictSide(
                data=change.snapshot(),
                sync_version=base_version,
                device_id=change.device_id or device_id,
            ),
            conflicting_fields=fields,
        )

    def _check_settings(
        self,
        user_id: str,
        base_version: int,
        change: SettingsChange,
        device_id: str | None,
    ) -> SyncConflict | None:
        stored = self._store.settings(user_id)
        if stored is None or stored.sync_version <= base_version:
            return None

        provided = change.provided()
        return SyncConflict(
            entity_type=ConflictEntity.USER_SETTINGS,
            entity_id=stored.id,
            kind=ConflictKind.UPDATE_UPDATE,
            base_version=base_version,
            server=_settings_side(stored),
            incoming=ConflictSide(
                data=provided,
                sync_version=base_version,
                device_id=change.sync_device_id or device_id,
            ),
            conflicting_fields=_differing(
                stored.snapshot(),
                provided,
                [name for name in SETTINGS_SYNC_FIELDS if name in provided],
            ),
        )

    def _check_deletion(self, user_id: str, base_version: int, trip_id: str) -> SyncConflict | None:
        stored = self._store.trip(user_id, trip_id)
        if stored is None or stored.is_deleted or stored.sync_version <= base_version:
            return None
        return SyncConflict(
            entity_type=ConflictEntity.TRIP,
            entity_id=trip_id,
            kind=ConflictKind.DELETE_UPDATE,
            base_version=base_version,
            server=_trip_side(stored),
            incoming=None,
            conflicting_fields=("deleted_at",),
        )


def _trip_side(trip: Trip) -> ConflictSide:
    return ConflictSide(
        data=trip.snapshot(),
        sync_version=trip.sync_version,
        modified_at=trip.updated_at,
        device_id=trip.device_id,
    )


def _settings_side(settings: UserSettings) -> ConflictSide:
    return ConflictSide(
        data=settings.snapshot(),
        sync_version=settings.sync_version,
        modified_at=settings.updated_at,
        device_id=settings.sync_device_id,
    )


def _differing(
    stored: Mapping[str, object],
    incoming: Mapping[str, object],
    names: Iterable[str],
) -> tuple[str, ...]:
    return tuple(name for name in names if stored.get(name) != incoming.get(name))


def _unique(values: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(values))
