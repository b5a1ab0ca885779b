"""Public domain model surface."""

from __future__ import annotations

from tripsync.domain.model.enums import EntityKind, Language, SubscriptionTier, Theme
from tripsync.domain.model.settings import SETTINGS_SYNC_FIELDS, UserSettings
from tripsync.domain.model.trip import TRIP_SYNC_FIELDS, Trip, utcnow

__all__ = [  # noqa: RUF022
    # records
    "Trip",
    "UserSettings",
    "TRIP_SYNC_FIELDS",
    "SETTINGS_SYNC_FIELDS",
    # enums
    "EntityKind",
    "Language",
    "SubscriptionTier",
    "Theme",
    # helpers
    "utcnow",
]
