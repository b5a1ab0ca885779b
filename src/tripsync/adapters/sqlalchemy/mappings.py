"""SQLAlchemy mapping metadata for the tripsync domain model."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from functools import cache
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Dialect,
    Enum,
    Index,
    Integer,
    String,
    Table,
    TypeDecorator,
    orm,
)
from sqlalchemy.orm import configure_mappers

from tripsync.domain.model import Language, SubscriptionTier, Theme, Trip, UserSettings

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

trip_table = Table(
    "trip",
    mapper_registry.metadata,
    Column("user_id", String(255), primary_key=True),
    Column("id", String(255), primary_key=True),
    Column("departure_date", Date, nullable=False),
    Column("return_date", Date, nullable=False),
    Column("location", String, nullable=True),
    Column("is_simulated", Boolean, nullable=False, default=False),
    Column("device_id", String(255), nullable=True),
    Column("sync_version", Integer, nullable=False, default=0),
    Column("deleted_at", UTCDateTime(), nullable=True),
    Column("created_at", UTCDateTime(), nullable=False),
    Column("updated_at", UTCDateTime(), nullable=False),
    Index("ix_trip_user_id_sync_version", "user_id", "sync_version"),
)

user_settings_table = Table(
    "user_settings",
    mapper_registry.metadata,
    Column("id", String(64), primary_key=True),
    Column("user_id", String(255), nullable=False, unique=True),
    Column("notification_milestones", Boolean, nullable=False, default=True),
    Column("notification_warnings", Boolean, nullable=False, default=True),
    Column("notification_reminders", Boolean, nullable=False, default=True),
    Column("biometric_auth_enabled", Boolean, nullable=False, default=False),
    Column("theme", Enum(Theme, native_enum=False), nullable=False),
    Column("language", Enum(Language, native_enum=False), nullable=False),
    Column("sync_enabled", Boolean, nullable=False, default=False),
    Column(
        "sync_subscription_tier",
        Enum(SubscriptionTier, native_enum=False),
        nullable=False,
    ),
    Column("sync_last_sync_at", UTCDateTime(), nullable=True),
    Column("sync_device_id", String(255), nullable=True),
    Column("sync_version", Integer, nullable=False, default=0),
    Column("created_at", UTCDateTime(), nullable=False),
    Column("updated_at", UTCDateTime(), nullable=False),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(Trip, trip_table)
    mapper_registry.map_imperatively(UserSettings, user_settings_table)

    configure_mappers()
    return mapper_registry


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the mapped metadata."""

    log.info("Creating all tables")
    mapper_registry.metadata.create_all(engine)
