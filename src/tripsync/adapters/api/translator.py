"""Translate wire payloads into engine contracts and results back into payloads."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic.alias_generators import to_camel

from tripsync.domain.sync import (
    PullRequest,
    PushConflicted,
    PushPartiallyApplied,
    PushRequest,
    SettingsChange,
    TripChange,
)

from .schema import (
    ConflictPayload,
    ConflictSidePayload,
    ErrorDetailPayload,
    NotificationsPayload,
    PullResponsePayload,
    PushConflictPayload,
    PushSuccessPayload,
    SettingsPayload,
    SettingsSyncPayload,
    SyncedEntitiesPayload,
    TripPayload,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

    from tripsync.domain.model import Trip, UserSettings
    from tripsync.domain.sync import (
        ConflictSide,
        PullResult,
        PushResult,
        SyncConflict,
        SyncedEntities,
    )

    from .schema import PullRequestPayload, PushRequestPayload

# Settings columns whose wire name is nested rather than a plain camelCase rename.
_SETTINGS_WIRE_FIELDS: dict[str, str] = {
    "notification_milestones": "notifications.milestones",
    "notification_warnings": "notifications.warnings",
    "notification_reminders": "notifications.reminders",
    "sync_enabled": "sync.enabled",
    "sync_subscription_tier": "sync.subscriptionTier",
    "sync_last_sync_at": "sync.lastSyncAt",
    "sync_device_id": "sync.deviceId",
}

# Nested sync fields a device may null out, keyed by settings column.
_CLEARABLE_SYNC_FIELDS: dict[str, str] = {
    "sync_last_sync_at": "last_sync_at",
    "sync_device_id": "device_id",
}


# Inbound ----------------------------------------------------------------------


def trip_change_from_payload(payload: TripPayload) -> TripChange:
    return TripChange(
        id=payload.id,
        user_id=payload.user_id,
        departure_date=payload.departure_date,
        return_date=payload.return_date,
        location=payload.location,
        is_simulated=payload.is_simulated,
        device_id=payload.device_id,
        deleted_at=payload.deleted_at,
    )


def settings_change_from_payload(payload: SettingsPayload) -> SettingsChange:
    notifications = payload.notifications or NotificationsPayload()
    sync = payload.sync or SettingsSyncPayload()
    return SettingsChange(
        notification_milestones=notifications.milestones,
        notification_warnings=notifications.warnings,
        notification_reminders=notifications.reminders,
        biometric_auth_enabled=payload.biometric_auth_enabled,
        theme=payload.theme,
        language=payload.language,
        sync_enabled=sync.enabled,
        sync_subscription_tier=sync.subscription_tier,
        sync_last_sync_at=sync.last_sync_at,
        sync_device_id=sync.device_id,
        cleared=frozenset(
            column
            for column, field_name in _CLEARABLE_SYNC_FIELDS.items()
            if field_name in sync.model_fields_set and getattr(sync, field_name) is None
        ),
    )


def pull_request_from_payload(payload: PullRequestPayload) -> PullRequest:
    entity_types = frozenset(payload.entity_types) if payload.entity_types is not None else None
    return PullRequest(last_sync_version=payload.last_sync_version, entity_types=entity_types)


def push_request_from_payload(payload: PushRequestPayload) -> PushRequest:
    return PushRequest(
        sync_version=payload.sync_version,
        trips=tuple(trip_change_from_payload(trip) for trip in payload.trips),
        user_settings=(
            settings_change_from_payload(payload.user_settings)
            if payload.user_settings is not None
            else None
        ),
        deleted_trip_ids=tuple(payload.deleted_trip_ids),
        force_overwrite=payload.force_overwrite,
        apply_non_conflicting=payload.apply_non_conflicting,
        device_id=payload.device_id,
    )


# Outbound ---------------------------------------------------------------------


def trip_to_payload(trip: Trip) -> TripPayload:
    return TripPayload(
        id=trip.id,
        user_id=trip.user_id,
        departure_date=trip.departure_date,
        return_date=trip.return_date,
        location=trip.location,
        is_simulated=trip.is_simulated,
        device_id=trip.device_id,
        sync_version=trip.sync_version,
        deleted_at=trip.deleted_at,
        created_at=trip.created_at,
        updated_at=trip.updated_at,
    )


def settings_to_payload(settings: UserSettings) -> SettingsPayload:
    return SettingsPayload(
        notifications=NotificationsPayload(
            milestones=settings.notification_milestones,
            warnings=settings.notification_warnings,
            reminders=settings.notification_reminders,
        ),
        biometric_auth_enabled=settings.biometric_auth_enabled,
        theme=settings.theme,
        language=settings.language,
        sync=SettingsSyncPayload(
            enabled=settings.sync_enabled,
            subscription_tier=settings.sync_subscription_tier,
            last_sync_at=settings.sync_last_sync_at,
            device_id=settings.sync_device_id,
        ),
        sync_version=settings.sync_version,
        updated_at=settings.updated_at,
    )


def pull_result_to_payload(result: PullResult) -> PullResponsePayload:
    return PullResponsePayload(
        sync_version=result.sync_version,
        trips=[trip_to_payload(trip) for trip in result.trips],
        user_settings=(
            settings_to_payload(result.user_settings) if result.user_settings is not None else None
        ),
        has_more=result.has_more,
    )


def synced_to_payload(synced: SyncedEntities) -> SyncedEntitiesPayload:
    return SyncedEntitiesPayload(
        trips=synced.trips,
        user_settings=synced.user_settings,
        deleted_trips=synced.deleted_trips,
    )


def push_result_to_payload(result: PushResult) -> PushSuccessPayload | PushConflictPayload:
    match result:
        case PushConflicted():
            return PushConflictPayload(
                error=ErrorDetailPayload(message="Sync conflicts detected", code="SYNC_CONFLICT"),
                conflicts=[conflict_to_payload(conflict) for conflict in result.conflicts],
                sync_version=result.sync_version,
            )
        case PushPartiallyApplied():
            return PushConflictPayload(
                error=ErrorDetailPayload(
                    message="Partial sync completed with conflicts",
                    code="SYNC_PARTIAL_CONFLICT",
                ),
                conflicts=[conflict_to_payload(conflict) for conflict in result.conflicts],
                sync_version=result.sync_version,
                synced_entities=synced_to_payload(result.synced),
            )
        case _:
            return PushSuccessPayload(
                sync_version=result.sync_version,
                synced_entities=synced_to_payload(result.synced),
            )


def conflict_to_payload(conflict: SyncConflict) -> ConflictPayload:
    return ConflictPayload(
        entity_type=conflict.entity_type.value,
        entity_id=conflict.entity_id,
        conflict_type=conflict.kind.value,
        base_version=conflict.base_version,
        conflicting_fields=[wire_field_name(name) for name in conflict.conflicting_fields],
        local_version=_side_to_payload(conflict.incoming) if conflict.incoming else None,
        remote_version=_side_to_payload(conflict.server),
    )


def wire_field_name(name: str) -> str:
    return _SETTINGS_WIRE_FIELDS.get(name) or to_camel(name)


def _side_to_payload(side: ConflictSide) -> ConflictSidePayload:
    return ConflictSidePayload(
        data=_camelize(side.data),
        sync_version=side.sync_version,
        modified_at=side.modified_at,
        device_id=side.device_id,
    )


def _camelize(data: Mapping[str, object]) -> dict[str, Any]:
    return {to_camel(key): value for key, value in data.items()}
