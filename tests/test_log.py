"""Tests for the loguru setup."""

import pytest
from loguru import logger

from app.config import settings
from app.log import setup_logger


@pytest.fixture(autouse=True)
def restore_logger():
    yield
    setup_logger()


class TestSetupLogger:
    def test_console_only_without_file(self, monkeypatch):
        monkeypatch.setattr(settings, "log_file", None)
        assert setup_logger(level="debug") is None

    def test_file_sink_created_under_missing_directory(self, tmp_path):
        target = tmp_path / "logs" / "tracker.log"
        path = setup_logger(level="INFO", log_file=str(target))
        assert path == target

        logger.info("workout saved")
        logger.debug("not at this level")
        logger.remove()

        text = target.read_text()
        assert "workout saved" in text
        assert "not at this level" not in text

    def test_file_from_settings(self, tmp_path, monkeypatch):
        target = tmp_path / "tracker.log"
        monkeypatch.setattr(settings, "log_file", str(target))
        assert setup_logger() == target
