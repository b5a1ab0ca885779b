"""Error taxonomy of the sync engine.

Conflicts are not errors: they come back as push results. Everything here is
raised, and everything except ``SyncPersistenceError`` is raised before the
store is touched.
"""

from __future__ import annotations

from typing import ClassVar


class SyncError(Exception):
    """Base class for sync failures surfaced to the caller."""

    code: ClassVar[str] = "SYNC_ERROR"

    def __init__(self, message: str, *, details: dict[str, object] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class SyncValidationError(SyncError):
    """Raised when a request is malformed."""

    code: ClassVar[str] = "INVALID_REQUEST"


class InvalidSyncVersionError(SyncValidationError):
    """Raised when a push does not carry a usable sync version."""

    code: ClassVar[str] = "INVALID_SYNC_VERSION"


class BatchTooLargeError(SyncValidationError):
    """Raised when trips plus deletions exceed the configured batch size."""

    code: ClassVar[str] = "BATCH_TOO_LARGE"

    def __init__(self, *, max_batch_size: int, provided_size: int) -> None:
        super().__init__(
            "Batch size exceeds maximum allowed limit",
            details={"maxBatchSize": max_batch_size, "providedSize": provided_size},
        )
        self.max_batch_size = max_batch_size
        self.provided_size = provided_size


class InvalidTripDataError(SyncValidationError):
    """Raised when an incoming trip is internally inconsistent."""

    code: ClassVar[str] = "INVALID_TRIP_DATA"


class UnauthenticatedError(SyncError):
    """Raised when no user id could be resolved for the request."""

    code: ClassVar[str] = "UNAUTHORIZED"


class TripOwnershipError(SyncError):
    """Raised when a pushed trip names an owner other than the caller."""

    code: ClassVar[str] = "FORBIDDEN"


class SyncPersistenceError(SyncError):
    """Raised when the apply transaction fails; the transaction was rolled back."""

    code: ClassVar[str] = "SYNC_ERROR"


class SyncDisabledError(SyncError):
    """Raised when sync has been switched off for this deployment."""

    code: ClassVar[str] = "SYNC_DISABLED"

    def __init__(self) -> None:
        super().__init__("Sync functionality is currently disabled")
