"""Trip and settings synchronisation between devices and the central store."""

from __future__ import annotations

from .conflicts import (
    ConflictDetector,
    ConflictEntity,
    ConflictKind,
    ConflictReport,
    ConflictSide,
    SyncConflict,
)
from .contracts import (
    CLEARABLE_SETTINGS_FIELDS,
    ChangeSet,
    PullRequest,
    PullResult,
    PushRequest,
    SettingsChange,
    SyncedEntities,
    TripChange,
)
from .errors import (
    BatchTooLargeError,
    InvalidSyncVersionError,
    InvalidTripDataError,
    SyncDisabledError,
    SyncError,
    SyncPersistenceError,
    SyncValidationError,
    TripOwnershipError,
    UnauthenticatedError,
)
from .policy import MAX_SYNC_VERSION, BatchPolicy, require_user_id
from .pull import PullService
from .push import (
    PushConflicted,
    PushOrchestrator,
    PushOutcome,
    PushPartiallyApplied,
    PushResult,
    PushSucceeded,
)
from .store import VersionStampedStore

__all__ = [
    "CLEARABLE_SETTINGS_FIELDS",
    "MAX_SYNC_VERSION",
    "BatchPolicy",
    "BatchTooLargeError",
    "ChangeSet",
    "ConflictDetector",
    "ConflictEntity",
    "ConflictKind",
    "ConflictReport",
    "ConflictSide",
    "InvalidSyncVersionError",
    "InvalidTripDataError",
    "PullRequest",
    "PullResult",
    "PullService",
    "PushConflicted",
    "PushOrchestrator",
    "PushOutcome",
    "PushPartiallyApplied",
    "PushRequest",
    "PushResult",
    "PushSucceeded",
    "SettingsChange",
    "SyncConflict",
    "SyncDisabledError",
    "SyncError",
    "SyncPersistenceError",
    "SyncValidationError",
    "SyncedEntities",
    "TripChange",
    "TripOwnershipError",
    "UnauthenticatedError",
    "VersionStampedStore",
    "require_user_id",
]
