"""Loguru sink setup."""

import pytest
from loguru import logger

from compat_editor.logger import LOG_FILENAME, LOG_LEVEL_ENV, setup_logger


@pytest.fixture(autouse=True)
def _reset_loguru():
    yield
    logger.remove()


def test_file_sink_created(tmp_path):
    log_dir = tmp_path / "logs"
    log_file = setup_logger(log_dir)
    assert log_file == log_dir / LOG_FILENAME
    logger.info("hello from the editor")
    logger.remove()
    assert "hello from the editor" in log_file.read_text(encoding="utf-8")


def test_console_only_without_dir():
    assert setup_logger(None) is None


def test_unusable_dir_falls_back_to_console(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    assert setup_logger(blocker / "logs") is None


def test_console_level_from_environment(monkeypatch, capsys):
    monkeypatch.setenv(LOG_LEVEL_ENV, "warning")
    setup_logger(None)
    logger.info("quiet")
    logger.warning("loud")
    err = capsys.readouterr().err
    assert "loud" in err
    assert "quiet" not in err
