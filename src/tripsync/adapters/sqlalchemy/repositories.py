"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select

from tripsync.adapters.sqlalchemy.mappings import trip_table, user_settings_table
from tripsync.domain.model import Trip, UserSettings

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy.orm import Session


class SqlAlchemyTripRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Trip) -> None:
        self.session.add(entity)

    def get(self, *, user_id: str, trip_id: str) -> Trip | None:
        stmt = (
            select(Trip)
            .where(trip_table.c.user_id == user_id)
            .where(trip_table.c.id == trip_id)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def changed_since(
        self,
        *,
        user_id: str,
        version: int | None,
        limit: int,
    ) -> Sequence[Trip]:
        stmt = select(Trip).where(trip_table.c.user_id == user_id)
        if version is not None:
            stmt = stmt.where(trip_table.c.sync_version > version)
        stmt = stmt.order_by(trip_table.c.sync_version, trip_table.c.id).limit(limit)
        return self.session.execute(stmt).scalars().all()


class SqlAlchemyUserSettingsRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: UserSettings) -> None:
        self.session.add(entity)

    def get(self, *, user_id: str) -> UserSettings | None:
        stmt = select(UserSettings).where(user_settings_table.c.user_id == user_id)
        return self.session.execute(stmt).scalar_one_or_none()
