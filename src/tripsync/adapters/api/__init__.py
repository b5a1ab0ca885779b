"""Wire-format adapter: pydantic payloads and transport-neutral handlers."""

from __future__ import annotations

from .handlers import ApiResponse, handle_pull, handle_push, status_for
from .schema import (
    PullRequestPayload,
    PullResponsePayload,
    PushConflictPayload,
    PushRequestPayload,
    PushSuccessPayload,
)

__all__ = [
    "ApiResponse",
    "PullRequestPayload",
    "PullResponsePayload",
    "PushConflictPayload",
    "PushRequestPayload",
    "PushSuccessPayload",
    "handle_pull",
    "handle_push",
    "status_for",
]
