from pathlib import Path

import pytest
from typer.testing import CliRunner

from newsdesk.cli import app

runner = CliRunner()


@pytest.fixture
def database_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    database_path = tmp_path / "cli.db"
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("DEBUG", "true")
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{database_path}")
    return database_path


def test_version():
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert "0.1.0" in result.stdout


def test_migrate_applies_then_reports_up_to_date(database_env: Path):
    result = runner.invoke(app, ["migrate"])
    assert result.exit_code == 0, result.stdout
    assert "Migrated from None to 0002" in result.stdout
    assert database_env.exists()

    result = runner.invoke(app, ["migrate"])
    assert result.exit_code == 0
    assert "already at revision 0002" in result.stdout


def test_migrate_with_bad_url_exits_nonzero(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("DEBUG", "true")
    monkeypatch.setenv("DATABASE_URL", "nosuchdialect://user@host/db")

    result = runner.invoke(app, ["migrate"])
    assert result.exit_code == 1
    assert "Startup failed" in result.stdout
