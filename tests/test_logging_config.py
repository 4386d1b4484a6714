import logging
from pathlib import Path

import pytest

from newsdesk.config import Settings
from newsdesk.logging_config import get_logger, setup_logging


@pytest.fixture
def restore_root_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def _log_file_text() -> str:
    for handler in logging.getLogger().handlers:
        handler.flush()
    return (Path("logs") / "newsdesk.log").read_text(encoding="utf-8")


def test_application_events_reach_the_log_file(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, restore_root_logging
):
    monkeypatch.chdir(tmp_path)
    setup_logging(app_settings=Settings(debug=False, log_level="INFO"))

    get_logger("newsdesk.tests.file").info("Article created", article_id="a-1")

    text = _log_file_text()
    assert "Article created" in text
    assert "a-1" in text
    assert "newsdesk.tests.file" in text


def test_log_file_respects_level(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, restore_root_logging
):
    monkeypatch.chdir(tmp_path)
    setup_logging(app_settings=Settings(debug=False, log_level="WARNING"))

    logger = get_logger("newsdesk.tests.level")
    logger.info("quiet detail")
    logger.warning("Pool nearly exhausted")

    text = _log_file_text()
    assert "Pool nearly exhausted" in text
    assert "quiet detail" not in text


def test_debug_mode_writes_no_log_file(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, restore_root_logging
):
    monkeypatch.chdir(tmp_path)
    setup_logging(app_settings=Settings(debug=True, log_to_file=False))

    get_logger("newsdesk.tests.console").info("console only")

    assert not (tmp_path / "logs").exists()
