"""Schema migration runner.

Wraps Alembic so that pending revisions are applied in order, once, at
startup. Applied revisions are tracked in the ``alembic_version`` table, so
running again is a no-op.
"""

from pathlib import Path
from typing import Final

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from sqlalchemy import Connection

from ...domain.exceptions import StartupError
from ...logging_config import get_logger

logger = get_logger(__name__)

MIGRATIONS_DIR: Final = Path(__file__).parent / "migrations"


def alembic_config(connection: Connection | None = None) -> Config:
    """Programmatic Alembic configuration pointing at the bundled scripts."""
    config = Config()
    config.set_main_option("script_location", str(MIGRATIONS_DIR))
    if connection is not None:
        config.attributes["connection"] = connection
    return config


def head_revision() -> str | None:
    """Newest revision shipped with the application."""
    return ScriptDirectory.from_config(alembic_config()).get_current_head()


def current_revision(connection: Connection) -> str | None:
    """Revision recorded in the database, None for an unmigrated schema."""
    return MigrationContext.configure(connection).get_current_revision()


def run_pending(connection: Connection) -> str | None:
    """Apply every pending migration on the given connection.

    Args:
        connection: An open connection, typically inside ``engine.begin()``

    Returns:
        The revision the database is at afterwards

    Raises:
        StartupError: If any migration script fails
    """
    before = current_revision(connection)
    try:
        command.upgrade(alembic_config(connection), "head")
    except Exception as e:
        logger.error(
            "Migration failed",
            from_revision=before,
            error_type=type(e).__name__,
            error_message=str(e),
        )
        raise StartupError(f"Migration failed: {e}") from e

    after = current_revision(connection)
    if before == after:
        logger.info("Database schema is up to date", revision=after)
    else:
        logger.info("Migrations applied", from_revision=before, to_revision=after)
    return after
