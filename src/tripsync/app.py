"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from tripsync.adapters.sqlalchemy.migrations import upgrade_head
from tripsync.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemySyncUnitOfWork,
    is_started,
    startup,
)
from tripsync.config import get_sync_config
from tripsync.domain.ports.unit_of_work import SyncUnitOfWork
from tripsync.domain.sync import (
    PullService,
    PushOrchestrator,
    SyncDisabledError,
    require_user_id,
)
from tripsync.locking import KeyedLock

if TYPE_CHECKING:
    from tripsync.config import SyncConfig
    from tripsync.domain.sync import PullRequest, PullResult, PushRequest, PushResult

UnitOfWorkFactory = Callable[[], SyncUnitOfWork]


log = getLogger(__name__)

_PUSH_LOCKS = KeyedLock()


def _enabled_config(config: SyncConfig | None) -> SyncConfig:
    effective_config = config or get_sync_config()
    if not effective_config.enabled:
        log.info("Rejecting sync request: sync is disabled")
        raise SyncDisabledError
    return effective_config


def _resolve_unit_of_work(factory: UnitOfWorkFactory | None) -> UnitOfWorkFactory:
    if factory is not None:
        return factory
    if not is_started():
        startup()
    return SqlAlchemySyncUnitOfWork


def pull_changes(
    user_id: str | None,
    request: PullRequest | None = None,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    config: SyncConfig | None = None,
) -> PullResult:
    """Serve one page of the user's change feed using the configured adapters."""

    effective_config = _enabled_config(config)
    service = PullService(_resolve_unit_of_work(unit_of_work_factory), effective_config.policy())
    return service.pull(user_id, request)


def push_changes(
    user_id: str | None,
    request: PushRequest,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    config: SyncConfig | None = None,
) -> PushResult:
    """Apply a device's batch, serialised against other pushes of the same user."""

    effective_config = _enabled_config(config)
    user_id = require_user_id(user_id)
    orchestrator = PushOrchestrator(
        _resolve_unit_of_work(unit_of_work_factory),
        effective_config.policy(),
    )
    with _PUSH_LOCKS.hold(user_id):
        result = orchestrator.push(user_id, request)
    log.info("Push for user %s finished with status %s", user_id, result.status)
    return result


def migrate(*, database_uri: str | None = None) -> None:
    """Upgrade the configured database to the latest schema revision."""

    log.info("Upgrading database schema")
    upgrade_head(database_uri=database_uri)
