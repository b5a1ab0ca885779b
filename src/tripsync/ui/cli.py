from __future__ import annotations

import argparse
import json
import logging
import sys
from http import HTTPStatus
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING, Any

from dotenv import load_dotenv

from tripsync.adapters.api import handle_pull, handle_push
from tripsync.app import migrate, pull_changes, push_changes
from tripsync.config import ConfigurationError, configure_logging

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from tripsync.adapters.api import ApiResponse

log = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_CONFLICT = 1
EXIT_FAILURE = 1
EXIT_USAGE = 2


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Synchronise trips and settings")
    subparsers = parser.add_subparsers(dest="command", required=True)

    pull = subparsers.add_parser("pull", help="Print the change feed for a user")
    pull.add_argument("--user-id", type=str, required=True, help="Authenticated user id")
    pull.add_argument(
        "--since",
        type=int,
        default=None,
        help="Last sync version seen by the device (omit for a full pull)",
    )
    pull.add_argument(
        "--entity-type",
        action="append",
        dest="entity_types",
        choices=("trips", "user_settings", "settings"),
        help="Restrict the pull to an entity type (repeatable)",
    )

    push = subparsers.add_parser("push", help="Apply a batch of changes for a user")
    push.add_argument("--user-id", type=str, required=True, help="Authenticated user id")
    push.add_argument(
        "--file",
        type=str,
        default="-",
        help="Path to the push request JSON (default: read stdin)",
    )

    migrate_cmd = subparsers.add_parser("migrate", help="Upgrade the database schema")
    migrate_cmd.add_argument(
        "--database-uri",
        type=str,
        default=None,
        help="Database to upgrade (defaults to DATABASE_URI or the data dir)",
    )

    return parser.parse_args(list(argv))


def _read_json(source: str) -> dict[str, Any]:
    raw = sys.stdin.read() if source == "-" else Path(source).read_text(encoding="utf-8")
    try:
        document = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {source}: {exc.msg}") from exc
    if not isinstance(document, dict):
        raise ValueError(f"Expected a JSON object in {source}")
    return document


def _emit(response: ApiResponse) -> int:
    print(json.dumps(response.body, indent=2))  # noqa: T201
    if response.status == HTTPStatus.OK:
        return EXIT_OK
    if response.status == HTTPStatus.CONFLICT:
        return EXIT_CONFLICT
    if response.status >= HTTPStatus.INTERNAL_SERVER_ERROR:
        return EXIT_FAILURE
    return EXIT_USAGE


def _run(args: argparse.Namespace) -> int:
    if args.command == "pull":
        body: dict[str, Any] = {}
        if args.since is not None:
            body["lastSyncVersion"] = args.since
        if args.entity_types:
            body["entityTypes"] = args.entity_types
        return _emit(handle_pull(args.user_id, body, pull_changes))

    if args.command == "push":
        return _emit(handle_push(args.user_id, _read_json(args.file), push_changes))

    if args.command == "migrate":
        migrate(database_uri=args.database_uri)
        log.info("Database schema is up to date")
        return EXIT_OK

    raise ValueError(f"Unsupported command: {args.command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    try:
        configure_logging()
    except ConfigurationError as exc:
        sys.stderr.write(f"{exc}\n")
        sys.exit(EXIT_USAGE)
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)

    try:
        code = _run(parsed_args)
    except (OSError, ValueError):
        log.exception("CLI input error")
        sys.exit(EXIT_USAGE)
    except Exception:
        log.exception("Fatal error during sync")
        sys.exit(EXIT_FAILURE)

    if code != EXIT_OK:
        sys.exit(code)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console-script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
