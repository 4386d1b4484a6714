from pathlib import Path

import pytest
from sqlalchemy import inspect, text

from newsdesk.domain.exceptions import StartupError
from newsdesk.infrastructure.database.database import ConnectionPool
from newsdesk.infrastructure.database.migration_runner import (
    current_revision,
    head_revision,
    run_pending,
)


@pytest.fixture
def fresh_pool(tmp_path: Path):
    pool = ConnectionPool.from_url(f"sqlite:///{tmp_path / 'migrations.db'}")
    yield pool
    pool.dispose()


def test_head_is_latest_shipped_revision():
    assert head_revision() == "0002"


def test_fresh_database_has_no_revision(fresh_pool: ConnectionPool):
    with fresh_pool.connect() as connection:
        assert current_revision(connection) is None


def test_run_pending_creates_schema(fresh_pool: ConnectionPool):
    with fresh_pool.connect() as connection:
        assert run_pending(connection) == head_revision()

    tables = set(inspect(fresh_pool.engine).get_table_names())
    assert {"articles", "events", "alembic_version"} <= tables

    columns = {c["name"] for c in inspect(fresh_pool.engine).get_columns("articles")}
    assert columns == {
        "id",
        "title",
        "content",
        "published_at",
        "is_published",
        "is_deleted",
        "deleted_at",
    }


def test_run_pending_is_idempotent(fresh_pool: ConnectionPool):
    with fresh_pool.connect() as connection:
        first = run_pending(connection)
    with fresh_pool.connect() as connection:
        second = run_pending(connection)

    assert first == second == head_revision()
    with fresh_pool.connect() as connection:
        versions = connection.execute(text("SELECT COUNT(*) FROM alembic_version"))
        assert versions.scalar() == 1


def test_failing_migration_is_a_startup_error(fresh_pool: ConnectionPool):
    # A table the first revision wants to create already exists
    with fresh_pool.connect() as connection:
        connection.execute(text("CREATE TABLE articles (id INTEGER PRIMARY KEY)"))

    with pytest.raises(StartupError, match="Migration failed"):
        with fresh_pool.connect() as connection:
            run_pending(connection)
