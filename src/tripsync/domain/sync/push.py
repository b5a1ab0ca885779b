"""Apply a device's batch of changes."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Literal

from tripsync.domain.model import utcnow
from tripsync.domain.sync.conflicts import ConflictDetector
from tripsync.domain.sync.contracts import ChangeSet, SyncedEntities
from tripsync.domain.sync.errors import SyncError, SyncPersistenceError
from tripsync.domain.sync.policy import BatchPolicy, require_user_id
from tripsync.domain.sync.store import VersionStampedStore

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime

    from tripsync.domain.ports import SyncUnitOfWork
    from tripsync.domain.sync.conflicts import SyncConflict
    from tripsync.domain.sync.contracts import PushRequest

log = logging.getLogger(__name__)


class PushOutcome(StrEnum):
    SUCCESS = "success"
    CONFLICT = "conflict"
    PARTIAL_CONFLICT = "partial_conflict"


@dataclass(frozen=True, slots=True, kw_only=True)
class PushSucceeded:
    """Whole batch committed."""

    sync_version: int
    synced: SyncedEntities
    status: Literal[PushOutcome.SUCCESS] = PushOutcome.SUCCESS


@dataclass(frozen=True, slots=True, kw_only=True)
class PushConflicted:
    """Nothing committed; the device must resolve the conflicts first."""

    sync_version: int
    conflicts: tuple[SyncConflict, ...]
    status: Literal[PushOutcome.CONFLICT] = PushOutcome.CONFLICT

    def __post_init__(self) -> None:
        if not self.conflicts:
            raise ValueError("Conflicted push must carry at least one conflict")


@dataclass(frozen=True, slots=True, kw_only=True)
class PushPartiallyApplied:
    """The non-conflicting part of the batch was committed."""

    sync_version: int
    conflicts: tuple[SyncConflict, ...]
    synced: SyncedEntities
    status: Literal[PushOutcome.PARTIAL_CONFLICT] = PushOutcome.PARTIAL_CONFLICT

    def __post_init__(self) -> None:
        if not self.conflicts:
            raise ValueError("Partially applied push must carry at least one conflict")


type PushResult = PushSucceeded | PushConflicted | PushPartiallyApplied


class PushOrchestrator:
    def __init__(
        self,
        unit_of_work_factory: Callable[[], SyncUnitOfWork],
        policy: BatchPolicy | None = None,
        *,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._unit_of_work_factory = unit_of_work_factory
        self._policy = policy or BatchPolicy()
        self._clock = clock

    def push(self, user_id: str | None, request: PushRequest) -> PushResult:
        """Validate, detect conflicts and commit a batch in one transaction.

        Validation errors are raised before the store is touched. Any other
        failure rolls the transaction back and surfaces as
        ``SyncPersistenceError``.
        """

        user_id = require_user_id(user_id)
        self._policy.check_push(user_id, request)
        version = self._policy.stamp_version(request)

        try:
            with self._unit_of_work_factory() as uow:
                store = VersionStampedStore(uow.repositories, clock=self._clock)
                conflicts: tuple[SyncConflict, ...] = ()

                if request.force_overwrite:
                    changes = ChangeSet.from_request(request)
                    changes.deleted_trip_ids = list(dict.fromkeys(changes.deleted_trip_ids))
                else:
                    report = ConflictDetector(store).classify(
                        user_id,
                        request.base_version,
                        trips=request.trips,
                        user_settings=request.user_settings,
                        deleted_trip_ids=request.deleted_trip_ids,
                        device_id=request.device_id,
                    )
                    conflicts = tuple(report.conflicts)
                    if conflicts and not request.apply_non_conflicting:
                        log.info(
                            "Push for user %s at version %d aborted: %d conflict(s)",
                            user_id,
                            version,
                            len(conflicts),
                        )
                        return PushConflicted(sync_version=version, conflicts=conflicts)
                    changes = ChangeSet(
                        trips=report.trips,
                        user_settings=report.user_settings,
                        deleted_trip_ids=report.deleted_trip_ids,
                    )

                synced = _apply(store, user_id, changes, version)
                uow.commit()
        except SyncError:
            raise
        except Exception as exc:  # noqa: BLE001
            log.exception("Push for user %s at version %d failed; rolled back", user_id, version)
            raise SyncPersistenceError("Failed to apply sync changes") from exc

        log.info(
            "Push for user %s at version %d applied: trips=%d, settings=%s, deleted=%d, "
            "conflicts=%d",
            user_id,
            version,
            synced.trips,
            synced.user_settings,
            synced.deleted_trips,
            len(conflicts),
        )
        if conflicts:
            return PushPartiallyApplied(sync_version=version, conflicts=conflicts, synced=synced)
        return PushSucceeded(sync_version=version, synced=synced)


def _apply(
    store: VersionStampedStore,
    user_id: str,
    changes: ChangeSet,
    version: int,
) -> SyncedEntities:
    for change in changes.trips:
        store.upsert_trip(user_id, change, version)

    settings_written = False
    if changes.user_settings is not None:
        store.upsert_settings(user_id, changes.user_settings, version)
        settings_written = True

    deleted = sum(
        1
        for trip_id in changes.deleted_trip_ids
        if store.soft_delete_trip(user_id, trip_id, version)
    )
    return SyncedEntities(
        trips=len(changes.trips),
        user_settings=settings_written,
        deleted_trips=deleted,
    )
