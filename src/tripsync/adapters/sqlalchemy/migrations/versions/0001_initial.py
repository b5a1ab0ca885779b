"""Create trip and user_settings tables.

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-17 00:00:00
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

from tripsync.adapters.sqlalchemy.mappings import UTCDateTime

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "trip",
        sa.Column("user_id", sa.String(length=255), nullable=False),
        sa.Column("id", sa.String(length=255), nullable=False),
        sa.Column("departure_date", sa.Date(), nullable=False),
        sa.Column("return_date", sa.Date(), nullable=False),
        sa.Column("location", sa.String(), nullable=True),
        sa.Column("is_simulated", sa.Boolean(), nullable=False),
        sa.Column("device_id", sa.String(length=255), nullable=True),
        sa.Column("sync_version", sa.Integer(), nullable=False),
        sa.Column("deleted_at", UTCDateTime(), nullable=True),
        sa.Column("created_at", UTCDateTime(), nullable=False),
        sa.Column("updated_at", UTCDateTime(), nullable=False),
        sa.PrimaryKeyConstraint("user_id", "id", name=op.f("pk_trip")),
    )
    op.create_index(
        "ix_trip_user_id_sync_version",
        "trip",
        ["user_id", "sync_version"],
        unique=False,
    )

    op.create_table(
        "user_settings",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("user_id", sa.String(length=255), nullable=False),
        sa.Column("notification_milestones", sa.Boolean(), nullable=False),
        sa.Column("notification_warnings", sa.Boolean(), nullable=False),
        sa.Column("notification_reminders", sa.Boolean(), nullable=False),
        sa.Column("biometric_auth_enabled", sa.Boolean(), nullable=False),
        sa.Column(
            "theme",
            sa.Enum("LIGHT", "DARK", "SYSTEM", name="theme", native_enum=False),
            nullable=False,
        ),
        sa.Column(
            "language",
            sa.Enum("EN", "ES", name="language", native_enum=False),
            nullable=False,
        ),
        sa.Column("sync_enabled", sa.Boolean(), nullable=False),
        sa.Column(
            "sync_subscription_tier",
            sa.Enum("NONE", "BASIC", "PREMIUM", name="subscriptiontier", native_enum=False),
            nullable=False,
        ),
        sa.Column("sync_last_sync_at", UTCDateTime(), nullable=True),
        sa.Column("sync_device_id", sa.String(length=255), nullable=True),
        sa.Column("sync_version", sa.Integer(), nullable=False),
        sa.Column("created_at", UTCDateTime(), nullable=False),
        sa.Column("updated_at", UTCDateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_user_settings")),
        sa.UniqueConstraint("user_id", name=op.f("uq_user_settings_user_id")),
    )


def downgrade() -> None:
    op.drop_table("user_settings")
    op.drop_index("ix_trip_user_id_sync_version", table_name="trip")
    op.drop_table("trip")
