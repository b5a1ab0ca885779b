from __future__ import annotations

from datetime import UTC, datetime

from tests.helpers.trips import make_trip
from tripsync.domain.model import TRIP_SYNC_FIELDS, UserSettings


def test_tombstone_sets_deleted_at_and_stamps() -> None:
    trip = make_trip(version=1)
    moment = datetime(2025, 6, 1, tzinfo=UTC)

    trip.tombstone(7, at=moment)

    assert trip.is_deleted
    assert trip.deleted_at == moment
    assert trip.updated_at == moment
    assert trip.sync_version == 7


def test_snapshot_covers_compared_fields() -> None:
    snapshot = make_trip().snapshot()

    assert set(TRIP_SYNC_FIELDS) <= snapshot.keys()
    assert snapshot["user_id"] == "user-1"


def test_settings_ids_are_unique_per_instance() -> None:
    assert UserSettings(user_id="a").id != UserSettings(user_id="a").id
