from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from tests.helpers.trips import FIXED_NOW, OTHER_USER_ID, USER_ID, make_settings, make_trip
from tripsync.domain.model import EntityKind
from tripsync.domain.sync import (
    BatchPolicy,
    PullRequest,
    PullService,
    SyncPersistenceError,
    UnauthenticatedError,
)

if TYPE_CHECKING:
    from tests.support.sync_store import FakeSyncUnitOfWork, InMemorySyncDatabase


def _service(database: InMemorySyncDatabase, *, page_size: int = 100) -> PullService:
    return PullService(database.unit_of_work, BatchPolicy(max_page_size=page_size))


def test_full_pull_returns_everything_including_tombstones(
    memory_database: InMemorySyncDatabase,
) -> None:
    memory_database.seed_trip(make_trip("a", version=2))
    memory_database.seed_trip(make_trip("b", version=4, deleted_at=FIXED_NOW))
    memory_database.seed_settings(make_settings(version=3))

    result = _service(memory_database).pull(USER_ID)

    assert [trip.id for trip in result.trips] == ["a", "b"]
    assert result.trips[1].is_deleted
    assert result.user_settings is not None
    assert result.sync_version == 4
    assert result.has_more is False


def test_pull_is_scoped_to_the_user(memory_database: InMemorySyncDatabase) -> None:
    memory_database.seed_trip(make_trip("mine", version=1))
    memory_database.seed_trip(make_trip("theirs", user_id=OTHER_USER_ID, version=9))

    result = _service(memory_database).pull(USER_ID)

    assert [trip.id for trip in result.trips] == ["mine"]
    assert result.sync_version == 1


def test_pull_is_idempotent(memory_database: InMemorySyncDatabase) -> None:
    for index, version in enumerate((1, 3, 5)):
        memory_database.seed_trip(make_trip(f"t{index}", version=version))
    request = PullRequest(last_sync_version=2)
    service = _service(memory_database)

    first = service.pull(USER_ID, request)
    second = service.pull(USER_ID, request)

    assert [trip.id for trip in first.trips] == [trip.id for trip in second.trips] == ["t1", "t2"]
    assert first.sync_version == second.sync_version == 5
    assert memory_database.commits == 0


def test_empty_pull_keeps_the_watermark(memory_database: InMemorySyncDatabase) -> None:
    memory_database.seed_trip(make_trip("a", version=2))

    result = _service(memory_database).pull(USER_ID, PullRequest(last_sync_version=10))

    assert result.trips == ()
    assert result.sync_version == 10


def test_entity_filter_limits_the_feed(memory_database: InMemorySyncDatabase) -> None:
    memory_database.seed_trip(make_trip("a", version=2))
    memory_database.seed_settings(make_settings(version=6))

    trips_only = _service(memory_database).pull(
        USER_ID, PullRequest(entity_types=frozenset({EntityKind.TRIPS}))
    )
    settings_only = _service(memory_database).pull(
        USER_ID, PullRequest(entity_types=frozenset({EntityKind.USER_SETTINGS}))
    )

    assert trips_only.user_settings is None
    assert trips_only.sync_version == 2
    assert settings_only.trips == ()
    assert settings_only.sync_version == 6


def test_settings_are_withheld_until_they_change(memory_database: InMemorySyncDatabase) -> None:
    memory_database.seed_settings(make_settings(version=3))

    result = _service(memory_database).pull(USER_ID, PullRequest(last_sync_version=3))

    assert result.user_settings is None


def test_settings_are_withheld_while_trips_overflow(memory_database: InMemorySyncDatabase) -> None:
    for index in range(3):
        memory_database.seed_trip(make_trip(f"t{index}", version=index + 1))
    memory_database.seed_settings(make_settings(version=1))

    result = _service(memory_database, page_size=2).pull(USER_ID)

    assert result.has_more is True
    assert result.user_settings is None
    assert result.sync_version == 2


def test_chained_pulls_terminate_and_see_every_trip(
    memory_database: InMemorySyncDatabase,
) -> None:
    versions = [1, 2, 2, 2, 3, 4, 4, 5]
    for index, version in enumerate(versions):
        memory_database.seed_trip(make_trip(f"t{index:02d}", version=version))
    memory_database.seed_settings(make_settings(version=4))
    service = _service(memory_database, page_size=3)

    seen: list[str] = []
    watermark: int | None = None
    settings_seen = False
    for _ in range(10):
        result = service.pull(USER_ID, PullRequest(last_sync_version=watermark))
        assert watermark is None or result.sync_version >= watermark
        seen.extend(trip.id for trip in result.trips)
        settings_seen = settings_seen or result.user_settings is not None
        watermark = result.sync_version
        if not result.has_more:
            break
    else:
        pytest.fail("pull chain did not terminate")

    assert sorted(seen) == sorted(f"t{index:02d}" for index in range(len(versions)))
    assert len(seen) == len(set(seen))
    assert watermark == 5
    assert settings_seen


def test_tied_tail_is_held_back(memory_database: InMemorySyncDatabase) -> None:
    for index, version in enumerate([1, 2, 2, 2]):
        memory_database.seed_trip(make_trip(f"t{index}", version=version))

    result = _service(memory_database, page_size=3).pull(USER_ID)

    assert [trip.id for trip in result.trips] == ["t0"]
    assert result.sync_version == 1
    assert result.has_more is True


def test_page_of_one_version_is_returned_whole(
    memory_database: InMemorySyncDatabase,
    caplog: pytest.LogCaptureFixture,
) -> None:
    for index in range(4):
        memory_database.seed_trip(make_trip(f"t{index}", version=7))

    with caplog.at_level("WARNING"):
        result = _service(memory_database, page_size=3).pull(USER_ID)

    assert len(result.trips) == 3
    assert result.has_more is True
    assert "share sync version 7" in caplog.text


def test_pull_requires_a_user(memory_database: InMemorySyncDatabase) -> None:
    with pytest.raises(UnauthenticatedError):
        _service(memory_database).pull(None)


def test_overflowing_page_stops_below_withheld_settings(
    memory_database: InMemorySyncDatabase,
) -> None:
    for index, version in enumerate([1, 2, 3, 4]):
        memory_database.seed_trip(make_trip(f"t{index}", version=version))
    memory_database.seed_settings(make_settings(version=2))

    first = _service(memory_database, page_size=3).pull(USER_ID)
    second = _service(memory_database, page_size=3).pull(
        USER_ID, PullRequest(last_sync_version=first.sync_version)
    )

    assert [trip.id for trip in first.trips] == ["t0"]
    assert first.user_settings is None
    assert first.has_more is True
    assert second.user_settings is not None
    assert second.sync_version == 4


def test_store_failure_surfaces_as_persistence_error(
    memory_database: InMemorySyncDatabase,
    caplog: pytest.LogCaptureFixture,
) -> None:
    def broken_unit_of_work() -> FakeSyncUnitOfWork:
        raise OSError("database is locked")

    with pytest.raises(SyncPersistenceError) as exc:
        PullService(broken_unit_of_work).pull(USER_ID, PullRequest(last_sync_version=3))

    assert exc.value.code == "SYNC_ERROR"
    assert isinstance(exc.value.__cause__, OSError)
    assert "Pull for user" in caplog.text
    assert memory_database.commits == 0
