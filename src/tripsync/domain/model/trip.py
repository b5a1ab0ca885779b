"""Trip records owned by a user and synchronised across devices."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from typing import Final

TRIP_SYNC_FIELDS: Final[tuple[str, ...]] = (
    "departure_date",
    "return_date",
    "location",
    "is_simulated",
)


def utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass(eq=False, kw_only=True)
class Trip:
    """One international trip.

    Identity is ``(user_id, id)``; ``id`` is assigned by the device that created
    the trip. Trips are never physically removed: deletion sets ``deleted_at``
    and stamps ``sync_version`` so the tombstone reaches the other devices.
    """

    id: str
    user_id: str
    departure_date: date
    return_date: date
    location: str | None = None
    is_simulated: bool = False
    device_id: str | None = None

    sync_version: int = 0
    deleted_at: datetime | None = None

    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def stamp(self, version: int, *, at: datetime) -> None:
        self.sync_version = version
        self.updated_at = at

    def tombstone(self, version: int, *, at: datetime) -> None:
        self.deleted_at = at
        self.stamp(version, at=at)

    def snapshot(self) -> dict[str, object]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "departure_date": self.departure_date,
            "return_date": self.return_date,
            "location": self.location,
            "is_simulated": self.is_simulated,
            "device_id": self.device_id,
            "sync_version": self.sync_version,
            "deleted_at": self.deleted_at,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
