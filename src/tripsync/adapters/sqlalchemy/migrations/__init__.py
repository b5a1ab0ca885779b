"""Alembic entry points for the tripsync schema.

The revisions ship inside the package, so the script location is always this
directory, for an editable checkout and an installed wheel alike.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Final

from alembic import command
from alembic.config import Config

from tripsync.config.storage import get_database_uri

MIGRATIONS_PATH: Final[Path] = Path(__file__).resolve().parent
HEAD_REVISION: Final[str] = "head"

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine


def alembic_config(database_uri: str | None = None) -> Config:
    config = Config()
    config.set_main_option("script_location", str(MIGRATIONS_PATH))
    if database_uri is not None:
        config.set_main_option("sqlalchemy.url", database_uri)
    return config


def upgrade_head(*, engine: Engine | None = None, database_uri: str | None = None) -> None:
    """Upgrade the database schema to the latest revision.

    With ``engine`` the upgrade runs on one of its connections, which keeps
    in-memory SQLite databases intact; otherwise ``database_uri`` or the
    configured URI is used.
    """

    if engine is None:
        command.upgrade(alembic_config(database_uri or get_database_uri()), HEAD_REVISION)
        return
    config = alembic_config()
    with engine.begin() as connection:
        config.attributes["connection"] = connection
        command.upgrade(config, HEAD_REVISION)
