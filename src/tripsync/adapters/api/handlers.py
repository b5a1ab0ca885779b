"""Transport-neutral request handlers for pull and push.

A web framework (or the CLI) hands in the authenticated user id and the parsed
JSON body and gets back a status code plus a JSON-ready body.
"""

from __future__ import annotations

from dataclasses import dataclass
from http import HTTPStatus
from logging import getLogger
from typing import TYPE_CHECKING, Any, Final

from pydantic import ValidationError

from tripsync.domain.sync import (
    InvalidSyncVersionError,
    PushSucceeded,
    SyncDisabledError,
    SyncError,
    SyncPersistenceError,
    SyncValidationError,
    TripOwnershipError,
    UnauthenticatedError,
)

from .schema import ErrorDetailPayload, ErrorPayload, PullRequestPayload, PushRequestPayload
from .translator import (
    pull_request_from_payload,
    pull_result_to_payload,
    push_request_from_payload,
    push_result_to_payload,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from tripsync.domain.sync import PullRequest, PullResult, PushRequest, PushResult

    type PullCallable = Callable[[str | None, PullRequest], PullResult]
    type PushCallable = Callable[[str | None, PushRequest], PushResult]

log = getLogger(__name__)

_PUSH_VERSION_FIELDS: Final[frozenset[str]] = frozenset({"syncVersion", "sync_version"})
_PULL_VERSION_FIELDS: Final[frozenset[str]] = frozenset({"lastSyncVersion", "last_sync_version"})


@dataclass(frozen=True, slots=True)
class ApiResponse:
    status: int
    body: dict[str, Any]


def handle_pull(
    user_id: str | None,
    body: Mapping[str, Any] | None,
    pull: PullCallable,
) -> ApiResponse:
    try:
        payload = PullRequestPayload.model_validate(dict(body or {}))
        result = pull(user_id, pull_request_from_payload(payload))
    except ValidationError as exc:
        return _error_response(_validation_error(exc, version_fields=_PULL_VERSION_FIELDS))
    except SyncError as exc:
        return _error_response(exc)
    return ApiResponse(HTTPStatus.OK, pull_result_to_payload(result).to_wire())


def handle_push(
    user_id: str | None,
    body: Mapping[str, Any] | None,
    push: PushCallable,
) -> ApiResponse:
    try:
        payload = PushRequestPayload.model_validate(dict(body or {}))
        result = push(user_id, push_request_from_payload(payload))
    except ValidationError as exc:
        return _error_response(_validation_error(exc, version_fields=_PUSH_VERSION_FIELDS))
    except SyncError as exc:
        return _error_response(exc)

    status = HTTPStatus.OK if isinstance(result, PushSucceeded) else HTTPStatus.CONFLICT
    return ApiResponse(status, push_result_to_payload(result).to_wire(exclude_none=True))


def status_for(error: SyncError) -> HTTPStatus:
    match error:
        case UnauthenticatedError():
            return HTTPStatus.UNAUTHORIZED
        case TripOwnershipError():
            return HTTPStatus.FORBIDDEN
        case SyncValidationError():
            return HTTPStatus.BAD_REQUEST
        case SyncDisabledError():
            return HTTPStatus.SERVICE_UNAVAILABLE
        case _:
            return HTTPStatus.INTERNAL_SERVER_ERROR


def _validation_error(exc: ValidationError, *, version_fields: frozenset[str]) -> SyncError:
    errors = exc.errors(include_url=False)
    if any(error["loc"] and error["loc"][0] in version_fields for error in errors):
        return InvalidSyncVersionError("Invalid sync version")
    first = errors[0] if errors else None
    if first is None:
        return SyncValidationError("Invalid request")
    location = ".".join(str(part) for part in first["loc"])
    message = f"{location}: {first['msg']}" if location else first["msg"]
    return SyncValidationError(message, details={"errors": len(errors)})


def _error_response(error: SyncError) -> ApiResponse:
    status = status_for(error)
    message = "Failed to sync data" if isinstance(error, SyncPersistenceError) else error.message
    log.info("Sync request rejected with %s (%s): %s", int(status), error.code, error.message)
    payload = ErrorPayload(
        error=ErrorDetailPayload(message=message, code=error.code, details=error.details),
    )
    return ApiResponse(status, payload.to_wire(exclude_none=True))
