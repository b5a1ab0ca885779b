"""Numeric guardrails and version rules shared by pull and push."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from tripsync.domain.sync.errors import (
    BatchTooLargeError,
    InvalidSyncVersionError,
    InvalidTripDataError,
    SyncValidationError,
    TripOwnershipError,
    UnauthenticatedError,
)

if TYPE_CHECKING:
    from tripsync.domain.sync.contracts import PullRequest, PushRequest

DEFAULT_MAX_BATCH_SIZE: Final[int] = 100
DEFAULT_MAX_PAGE_SIZE: Final[int] = 100
# Versions are stored in 32-bit signed integer columns.
MAX_SYNC_VERSION: Final[int] = 2_147_483_647


def require_user_id(user_id: str | None) -> str:
    """Return the caller's user id or raise if none was resolved."""

    if user_id is None or not str(user_id).strip():
        raise UnauthenticatedError("User not authenticated")
    return user_id


def _is_version(value: object) -> bool:
    return (
        isinstance(value, int)
        and not isinstance(value, bool)
        and 0 <= value <= MAX_SYNC_VERSION
    )


@dataclass(frozen=True, slots=True)
class BatchPolicy:
    """Batch-size and page-size limits plus the sync-version contract.

    The server never mints a version: a push must carry one, and it is used
    verbatim as the stamp for every record the push writes.
    """

    max_batch_size: int = DEFAULT_MAX_BATCH_SIZE
    max_page_size: int = DEFAULT_MAX_PAGE_SIZE

    def __post_init__(self) -> None:
        if self.max_batch_size < 1:
            raise ValueError("max_batch_size must be positive")
        if self.max_page_size < 1:
            raise ValueError("max_page_size must be positive")

    def check_pull(self, request: PullRequest) -> None:
        version = request.last_sync_version
        if version is not None and not _is_version(version):
            raise InvalidSyncVersionError("lastSyncVersion must be a non-negative 32-bit integer")

    def check_push(self, user_id: str, request: PushRequest) -> None:
        """Validate a push before any store access."""

        if not _is_version(request.sync_version):
            raise InvalidSyncVersionError("Invalid sync version")

        if request.batch_size > self.max_batch_size:
            raise BatchTooLargeError(
                max_batch_size=self.max_batch_size,
                provided_size=request.batch_size,
            )

        seen: set[str] = set()
        for trip in request.trips:
            if not trip.id:
                raise SyncValidationError("Trip id is required")
            if trip.id in seen:
                raise SyncValidationError(f"Duplicate trip id in batch: {trip.id}")
            seen.add(trip.id)
            if trip.user_id is not None and trip.user_id != user_id:
                raise TripOwnershipError("Cannot modify other users data")
            if trip.return_date < trip.departure_date:
                raise InvalidTripDataError(
                    f"Return date cannot be before departure date (trip {trip.id})"
                )

        if any(not trip_id for trip_id in request.deleted_trip_ids):
            raise SyncValidationError("Deleted trip ids must be non-empty")

    def stamp_version(self, request: PushRequest) -> int:
        return request.sync_version

    def page_limit(self) -> int:
        """Rows to fetch for one pull page: one extra to detect truncation."""

        return self.max_page_size + 1
