from __future__ import annotations

import io
import json
from typing import TYPE_CHECKING

import pytest

from tests.helpers.trips import USER_ID, fixed_clock, make_trip
from tripsync.domain.sync import BatchPolicy, PullService, PushOrchestrator
from tripsync.ui import cli

if TYPE_CHECKING:
    from pathlib import Path

    from tests.support.sync_store import InMemorySyncDatabase


@pytest.fixture(autouse=True)
def _wire_memory_database(
    monkeypatch: pytest.MonkeyPatch,
    memory_database: InMemorySyncDatabase,
) -> None:
    orchestrator = PushOrchestrator(memory_database.unit_of_work, BatchPolicy(), clock=fixed_clock)
    service = PullService(memory_database.unit_of_work, BatchPolicy())
    monkeypatch.setattr(cli, "push_changes", orchestrator.push)
    monkeypatch.setattr(cli, "pull_changes", service.pull)


def test_pull_prints_feed(
    memory_database: InMemorySyncDatabase,
    capsys: pytest.CaptureFixture[str],
) -> None:
    memory_database.seed_trip(make_trip("a", version=4))

    cli.main(["pull", "--user-id", USER_ID, "--since", "1", "--entity-type", "trips"])

    body = json.loads(capsys.readouterr().out)
    assert body["syncVersion"] == 4
    assert [trip["id"] for trip in body["trips"]] == ["a"]


def test_push_reads_file(
    tmp_path: Path,
    memory_database: InMemorySyncDatabase,
    capsys: pytest.CaptureFixture[str],
) -> None:
    batch = tmp_path / "batch.json"
    batch.write_text(
        json.dumps(
            {
                "syncVersion": 3,
                "trips": [{"id": "a", "departureDate": "2025-01-01", "returnDate": "2025-01-05"}],
            }
        ),
        encoding="utf-8",
    )

    cli.main(["push", "--user-id", USER_ID, "--file", str(batch)])

    body = json.loads(capsys.readouterr().out)
    assert body["syncedEntities"]["trips"] == 1
    assert memory_database.trip(USER_ID, "a") is not None


def test_push_conflict_exits_with_one(
    monkeypatch: pytest.MonkeyPatch,
    memory_database: InMemorySyncDatabase,
    capsys: pytest.CaptureFixture[str],
) -> None:
    memory_database.seed_trip(make_trip("a", version=9))
    payload = {
        "syncVersion": 3,
        "trips": [{"id": "a", "departureDate": "2025-01-01", "returnDate": "2025-01-05"}],
    }
    monkeypatch.setattr("sys.stdin", io.StringIO(json.dumps(payload)))

    with pytest.raises(SystemExit) as exc:
        cli.main(["push", "--user-id", USER_ID])

    assert exc.value.code == 1
    assert json.loads(capsys.readouterr().out)["error"]["code"] == "SYNC_CONFLICT"


def test_push_validation_error_exits_with_two(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO(json.dumps({"trips": []})))

    with pytest.raises(SystemExit) as exc:
        cli.main(["push", "--user-id", USER_ID])

    assert exc.value.code == 2
    assert json.loads(capsys.readouterr().out)["error"]["code"] == "INVALID_SYNC_VERSION"


def test_invalid_json_exits_with_two(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO("{not json"))

    with pytest.raises(SystemExit) as exc:
        cli.main(["push", "--user-id", USER_ID])

    assert exc.value.code == 2


def test_migrate_delegates(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    def fake_migrate(**kwargs: object) -> None:
        captured.update(kwargs)

    monkeypatch.setattr(cli, "migrate", fake_migrate)

    cli.main(["migrate", "--database-uri", "sqlite+pysqlite:///:memory:"])

    assert captured == {"database_uri": "sqlite+pysqlite:///:memory:"}
