"""Builders for trips, settings and push requests."""

from __future__ import annotations

from datetime import UTC, date, datetime
from typing import TYPE_CHECKING

from tripsync.domain.model import Trip, UserSettings
from tripsync.domain.sync import PushRequest, SettingsChange, TripChange

if TYPE_CHECKING:
    from collections.abc import Iterable

USER_ID = "user-1"
OTHER_USER_ID = "user-2"
FIXED_NOW = datetime(2025, 3, 1, 12, 0, tzinfo=UTC)


def fixed_clock() -> datetime:
    return FIXED_NOW


def make_trip_change(
    trip_id: str = "trip-1",
    *,
    departure: date = date(2025, 1, 10),
    return_: date = date(2025, 1, 20),
    location: str | None = "Mexico",
    is_simulated: bool = False,
    device_id: str | None = "device-a",
    user_id: str | None = None,
    deleted_at: datetime | None = None,
) -> TripChange:
    return TripChange(
        id=trip_id,
        departure_date=departure,
        return_date=return_,
        location=location,
        is_simulated=is_simulated,
        device_id=device_id,
        user_id=user_id,
        deleted_at=deleted_at,
    )


def make_trip(
    trip_id: str = "trip-1",
    *,
    user_id: str = USER_ID,
    version: int = 1,
    location: str | None = "Mexico",
    departure: date = date(2025, 1, 10),
    return_: date = date(2025, 1, 20),
    deleted_at: datetime | None = None,
    device_id: str | None = "device-a",
) -> Trip:
    return Trip(
        id=trip_id,
        user_id=user_id,
        departure_date=departure,
        return_date=return_,
        location=location,
        device_id=device_id,
        sync_version=version,
        deleted_at=deleted_at,
        created_at=FIXED_NOW,
        updated_at=FIXED_NOW,
    )


def make_settings(*, user_id: str = USER_ID, version: int = 1, **values: object) -> UserSettings:
    settings = UserSettings(user_id=user_id, created_at=FIXED_NOW, updated_at=FIXED_NOW)
    for name, value in values.items():
        setattr(settings, name, value)
    settings.sync_version = version
    return settings


def make_push(
    version: int,
    *,
    trips: Iterable[TripChange] = (),
    user_settings: SettingsChange | None = None,
    deleted_trip_ids: Iterable[str] = (),
    force_overwrite: bool = False,
    apply_non_conflicting: bool = False,
    device_id: str | None = "device-a",
) -> PushRequest:
    return PushRequest(
        sync_version=version,
        trips=tuple(trips),
        user_settings=user_settings,
        deleted_trip_ids=tuple(deleted_trip_ids),
        force_overwrite=force_overwrite,
        apply_non_conflicting=apply_non_conflicting,
        device_id=device_id,
    )
