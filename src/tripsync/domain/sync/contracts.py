"""Request and result records exchanged with the sync engine.

These are the transport-neutral shapes; wire payloads are translated into them
at the adapter boundary.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from datetime import date, datetime

    from tripsync.domain.model import (
        EntityKind,
        Language,
        SubscriptionTier,
        Theme,
        Trip,
        UserSettings,
    )

# Nullable settings a device may reset by sending an explicit null.
CLEARABLE_SETTINGS_FIELDS: Final[frozenset[str]] = frozenset(
    {"sync_last_sync_at", "sync_device_id"}
)


@dataclass(frozen=True, slots=True, kw_only=True)
class TripChange:
    """Incoming upsert of one trip as sent by a device."""

    id: str
    departure_date: date
    return_date: date
    location: str | None = None
    is_simulated: bool = False
    device_id: str | None = None
    user_id: str | None = None
    deleted_at: datetime | None = None

    def snapshot(self) -> dict[str, object]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "departure_date": self.departure_date,
            "return_date": self.return_date,
            "location": self.location,
            "is_simulated": self.is_simulated,
            "device_id": self.device_id,
            "deleted_at": self.deleted_at,
        }


@dataclass(frozen=True, slots=True, kw_only=True)
class SettingsChange:
    """Incoming upsert of the settings singleton.

    ``None`` means "not sent": on create the default applies, on update the
    stored value is kept. Clearable fields named in ``cleared`` are reset to
    ``None`` instead.
    """

    notification_milestones: bool | None = None
    notification_warnings: bool | None = None
    notification_reminders: bool | None = None
    biometric_auth_enabled: bool | None = None
    theme: Theme | None = None
    language: Language | None = None
    sync_enabled: bool | None = None
    sync_subscription_tier: SubscriptionTier | None = None
    sync_last_sync_at: datetime | None = None
    sync_device_id: str | None = None
    cleared: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        unknown = self.cleared - CLEARABLE_SETTINGS_FIELDS
        if unknown:
            raise ValueError(f"Settings fields cannot be cleared: {sorted(unknown)}")

    def provided(self) -> dict[str, object]:
        """Return only the fields the device actually sent."""

        values = {
            "notification_milestones": self.notification_milestones,
            "notification_warnings": self.notification_warnings,
            "notification_reminders": self.notification_reminders,
            "biometric_auth_enabled": self.biometric_auth_enabled,
            "theme": self.theme,
            "language": self.language,
            "sync_enabled": self.sync_enabled,
            "sync_subscription_tier": self.sync_subscription_tier,
            "sync_last_sync_at": self.sync_last_sync_at,
            "sync_device_id": self.sync_device_id,
        }
        return {
            name: value
            for name, value in values.items()
            if value is not None or name in self.cleared
        }


@dataclass(frozen=True, slots=True, kw_only=True)
class PullRequest:
    last_sync_version: int | None = None
    entity_types: frozenset[EntityKind] | None = None

    def wants(self, kind: EntityKind) -> bool:
        return self.entity_types is None or kind in self.entity_types


@dataclass(frozen=True, slots=True, kw_only=True)
class PullResult:
    """One page of the change feed."""

    sync_version: int
    trips: tuple[Trip, ...] = ()
    user_settings: UserSettings | None = None
    has_more: bool = False


@dataclass(frozen=True, slots=True, kw_only=True)
class PushRequest:
    """A device's batch of changes.

    ``sync_version`` is both the base version the device works from and the
    stamp written onto every record the push touches.
    """

    sync_version: int
    trips: tuple[TripChange, ...] = ()
    user_settings: SettingsChange | None = None
    deleted_trip_ids: tuple[str, ...] = ()
    force_overwrite: bool = False
    apply_non_conflicting: bool = False
    device_id: str | None = None

    @property
    def base_version(self) -> int:
        return self.sync_version

    @property
    def batch_size(self) -> int:
        return len(self.trips) + len(self.deleted_trip_ids)


@dataclass(frozen=True, slots=True)
class SyncedEntities:
    """Counts of what one push committed."""

    trips: int = 0
    user_settings: bool = False
    deleted_trips: int = 0


@dataclass(slots=True)
class ChangeSet:
    """The part of a push selected for application."""

    trips: list[TripChange] = field(default_factory=list["TripChange"])
    user_settings: SettingsChange | None = None
    deleted_trip_ids: list[str] = field(default_factory=list[str])

    @classmethod
    def from_request(cls, request: PushRequest) -> ChangeSet:
        return cls(
            trips=list(request.trips),
            user_settings=request.user_settings,
            deleted_trip_ids=list(request.deleted_trip_ids),
        )
