"""Pydantic models describing the sync wire payloads (camelCase JSON)."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictInt, field_validator
from pydantic.alias_generators import to_camel

from tripsync.domain.model import EntityKind, Language, SubscriptionTier, Theme
from tripsync.domain.sync.policy import MAX_SYNC_VERSION

ENTITY_TYPE_ALIASES: dict[str, str] = {"settings": EntityKind.USER_SETTINGS.value}


class ApiModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_wire(self, *, exclude_none: bool = False) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=exclude_none)


# Records ----------------------------------------------------------------------


class TripPayload(ApiModel):
    id: str = Field(min_length=1)
    user_id: str | None = None
    departure_date: date
    return_date: date
    location: str | None = None
    is_simulated: bool = False
    device_id: str | None = None
    sync_version: int | None = None
    deleted_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class NotificationsPayload(ApiModel):
    milestones: bool | None = None
    warnings: bool | None = None
    reminders: bool | None = None


class SettingsSyncPayload(ApiModel):
    enabled: bool | None = None
    subscription_tier: SubscriptionTier | None = None
    last_sync_at: datetime | None = None
    device_id: str | None = None


class SettingsPayload(ApiModel):
    notifications: NotificationsPayload | None = None
    biometric_auth_enabled: bool | None = None
    theme: Theme | None = None
    language: Language | None = None
    sync: SettingsSyncPayload | None = None
    sync_version: int | None = None
    updated_at: datetime | None = None


# Pull -------------------------------------------------------------------------


class PullRequestPayload(ApiModel):
    last_sync_version: StrictInt | None = Field(default=None, ge=0, le=MAX_SYNC_VERSION)
    entity_types: list[EntityKind] | None = None
    device_id: str | None = None

    @field_validator("entity_types", mode="before")
    @classmethod
    def _resolve_aliases(cls, value: object) -> object:
        if isinstance(value, str):
            value = [value]
        if isinstance(value, list):
            return [
                ENTITY_TYPE_ALIASES.get(item, item) if isinstance(item, str) else item
                for item in value
            ]
        return value


class PullResponsePayload(ApiModel):
    sync_version: int
    trips: list[TripPayload] = Field(default_factory=list[TripPayload])
    user_settings: SettingsPayload | None = None
    has_more: bool = False


# Push -------------------------------------------------------------------------


class PushRequestPayload(ApiModel):
    sync_version: StrictInt = Field(ge=0, le=MAX_SYNC_VERSION)
    trips: list[TripPayload] = Field(default_factory=list[TripPayload])
    user_settings: SettingsPayload | None = None
    deleted_trip_ids: list[str] = Field(default_factory=list[str])
    force_overwrite: bool = False
    apply_non_conflicting: bool = False
    device_id: str | None = None


class SyncedEntitiesPayload(ApiModel):
    trips: int = 0
    user_settings: bool = False
    deleted_trips: int = 0


class PushSuccessPayload(ApiModel):
    sync_version: int
    synced_entities: SyncedEntitiesPayload


class ConflictSidePayload(ApiModel):
    data: dict[str, Any]
    sync_version: int
    modified_at: datetime | None = None
    device_id: str | None = None


class ConflictPayload(ApiModel):
    entity_type: str
    entity_id: str
    conflict_type: str
    base_version: int
    conflicting_fields: list[str] = Field(default_factory=list[str])
    local_version: ConflictSidePayload | None = None
    remote_version: ConflictSidePayload


# Errors -----------------------------------------------------------------------


class ErrorDetailPayload(ApiModel):
    message: str
    code: str
    details: dict[str, Any] | None = None


class ErrorPayload(ApiModel):
    error: ErrorDetailPayload


class PushConflictPayload(ApiModel):
    error: ErrorDetailPayload
    conflicts: list[ConflictPayload]
    sync_version: int
    synced_entities: SyncedEntitiesPayload | None = None
