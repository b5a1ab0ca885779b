"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class EntityKind(StrEnum):
    """Entity families that travel through the change feed."""

    TRIPS = "trips"
    USER_SETTINGS = "user_settings"


class Theme(StrEnum):
    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"


class Language(StrEnum):
    EN = "en"
    ES = "es"


class SubscriptionTier(StrEnum):
    NONE = "none"
    BASIC = "basic"
    PREMIUM = "premium"
