"""Guardrails for pull and push."""

from __future__ import annotations

from dataclasses import dataclass

from tripsync.domain.sync.policy import DEFAULT_MAX_BATCH_SIZE, DEFAULT_MAX_PAGE_SIZE, BatchPolicy

from .env import bool_from_env, positive_int_from_env


@dataclass(frozen=True, slots=True)
class SyncConfig:
    max_batch_size: int = DEFAULT_MAX_BATCH_SIZE
    max_page_size: int = DEFAULT_MAX_PAGE_SIZE
    enabled: bool = True

    def policy(self) -> BatchPolicy:
        return BatchPolicy(max_batch_size=self.max_batch_size, max_page_size=self.max_page_size)


def get_sync_config() -> SyncConfig:
    return SyncConfig(
        max_batch_size=positive_int_from_env("TRIPSYNC_MAX_BATCH_SIZE", DEFAULT_MAX_BATCH_SIZE),
        max_page_size=positive_int_from_env("TRIPSYNC_MAX_PAGE_SIZE", DEFAULT_MAX_PAGE_SIZE),
        enabled=bool_from_env("TRIPSYNC_SYNC_ENABLED", True),
    )
