"""Per-user settings singleton."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final
from uuid import uuid4

from tripsync.domain.model.enums import Language, SubscriptionTier, Theme
from tripsync.domain.model.trip import utcnow

if TYPE_CHECKING:
    from datetime import datetime

SETTINGS_SYNC_FIELDS: Final[tuple[str, ...]] = (
    "notification_milestones",
    "notification_warnings",
    "notification_reminders",
    "biometric_auth_enabled",
    "theme",
    "language",
)


def new_settings_id() -> str:
    return uuid4().hex


@dataclass(eq=False, kw_only=True)
class UserSettings:
    """Settings shared by every device of one user.

    Exactly one row exists per user; it is created lazily by the first push
    that carries settings.
    """

    user_id: str
    id: str = field(default_factory=new_settings_id)

    notification_milestones: bool = True
    notification_warnings: bool = True
    notification_reminders: bool = True
    biometric_auth_enabled: bool = False
    theme: Theme = Theme.SYSTEM
    language: Language = Language.EN

    sync_enabled: bool = False
    sync_subscription_tier: SubscriptionTier = SubscriptionTier.NONE
    sync_last_sync_at: datetime | None = None
    sync_device_id: str | None = None

    sync_version: int = 0
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def stamp(self, version: int, *, at: datetime) -> None:
        self.sync_version = version
        self.updated_at = at

    def snapshot(self) -> dict[str, object]:
        return {
            "user_id": self.user_id,
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
            "sync_version": self.sync_version,
            "updated_at": self.updated_at,
        }
