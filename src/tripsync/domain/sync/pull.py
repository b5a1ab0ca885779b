"""Incremental, paginated change feed."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from tripsync.domain.model import EntityKind
from tripsync.domain.sync.contracts import PullRequest, PullResult
from tripsync.domain.sync.errors import SyncPersistenceError
from tripsync.domain.sync.policy import BatchPolicy, require_user_id
from tripsync.domain.sync.store import VersionStampedStore

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from tripsync.domain.model import Trip
    from tripsync.domain.ports import SyncUnitOfWork

log = logging.getLogger(__name__)


class PullService:
    """Serve everything a device has not seen since its watermark.

    Pages are ordered by ``(sync_version, id)``. A page never ends in the middle
    of a group of trips sharing one version, so the returned watermark can be
    fed straight back without skipping rows.
    """

    def __init__(
        self,
        unit_of_work_factory: Callable[[], SyncUnitOfWork],
        policy: BatchPolicy | None = None,
    ) -> None:
        self._unit_of_work_factory = unit_of_work_factory
        self._policy = policy or BatchPolicy()

    def pull(self, user_id: str | None, request: PullRequest | None = None) -> PullResult:
        user_id = require_user_id(user_id)
        request = request or PullRequest()
        self._policy.check_pull(request)
        since = request.last_sync_version

        trips: Sequence[Trip] = ()
        has_more = False
        settings = None

        try:
            with self._unit_of_work_factory() as uow:
                store = VersionStampedStore(uow.repositories)

                if request.wants(EntityKind.TRIPS):
                    rows = store.trips_since(user_id, since, limit=self._policy.page_limit())
                    trips, has_more = self._page(rows)

                if request.wants(EntityKind.USER_SETTINGS):
                    pending = store.settings_since(user_id, since)
                    if not has_more:
                        settings = pending
                    elif pending is not None:
                        trips = self._stop_below(trips, pending.sync_version)
        except Exception as exc:  # noqa: BLE001
            log.exception("Pull for user %s since %s failed", user_id, since)
            raise SyncPersistenceError("Failed to read sync changes") from exc

        watermark = max(
            since or 0,
            max((trip.sync_version for trip in trips), default=0),
            settings.sync_version if settings is not None else 0,
        )
        log.info(
            "Pulled %d trip(s) for user %s since %s: watermark=%d, settings=%s, has_more=%s",
            len(trips),
            user_id,
            since,
            watermark,
            settings is not None,
            has_more,
        )
        return PullResult(
            sync_version=watermark,
            trips=tuple(trips),
            user_settings=settings,
            has_more=has_more,
        )

    def _page(self, rows: Sequence[Trip]) -> tuple[Sequence[Trip], bool]:
        size = self._policy.max_page_size
        if len(rows) <= size:
            return rows, False

        page = rows[:size]
        boundary = rows[size].sync_version
        if page[-1].sync_version != boundary:
            return page, True

        cut = len(page)
        while cut > 0 and page[cut - 1].sync_version == boundary:
            cut -= 1
        if cut == 0:
            log.warning(
                "More than %d trips share sync version %d; page cannot be split cleanly",
                size,
                boundary,
            )
            return page, True
        return page[:cut], True

    def _stop_below(self, page: Sequence[Trip], version: int) -> Sequence[Trip]:
        """End an overflowing page before withheld settings so the watermark stays below them."""

        if not page or page[-1].sync_version < version:
            return page
        kept = [trip for trip in page if trip.sync_version < version]
        if not kept:
            log.warning(
                "Withheld settings at version %d precede the whole trip page; "
                "the page watermark passes them",
                version,
            )
            return page
        return kept
