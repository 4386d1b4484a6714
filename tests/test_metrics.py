"""Connection pool gauge wiring."""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from newsdesk import metrics
from newsdesk.config import Settings
from newsdesk.infrastructure.database.database import ConnectionPool
from newsdesk.main import create_app


@pytest.fixture
def file_pool(tmp_path: Path):
    pool = ConnectionPool.from_url(
        f"sqlite:///{tmp_path / 'metrics.db'}", pool_size=2, max_overflow=0
    )
    yield pool
    metrics.observe_pool(None)
    pool.dispose()


def test_gauge_reports_borrowed_connections(file_pool: ConnectionPool):
    metrics.observe_pool(file_pool.engine)

    with file_pool.acquire():
        observations = list(metrics._pool_checked_out(None))

    assert len(observations) == 1
    assert observations[0].value == 1
    assert observations[0].attributes == {"database": "sqlite"}


def test_gauge_is_silent_without_a_pool():
    metrics.observe_pool(None)
    assert list(metrics._pool_checked_out(None)) == []


def test_restarting_the_app_reuses_one_gauge(app_settings: Settings):
    gauge = metrics.pool_connections_checked_out

    for _ in range(3):
        app = create_app(app_settings)
        with TestClient(app):
            assert metrics._observed_engine is app.state.pool.engine
            assert metrics.pool_connections_checked_out is gauge
        assert metrics._observed_engine is None
