"""
Tests for observability: log level resolution and logging setup.
"""

import logging
from pathlib import Path

import pytest

from jlink_wrapper.core.observability.logging_config import (
    ENV_LOG_LEVEL,
    resolve_level,
    setup_logging,
)


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestResolveLevel:
    @pytest.mark.parametrize(
        "flags, expected",
        [
            ({"debug": True, "verbose": True}, "DEBUG"),
            ({"verbose": True, "quiet": True}, "INFO"),
            ({"quiet": True}, "ERROR"),
        ],
    )
    def test_flags(self, flags, expected):
        assert resolve_level(**flags) == expected

    def test_env_fallback(self, monkeypatch):
        monkeypatch.setenv(ENV_LOG_LEVEL, "INFO")
        assert resolve_level() == "INFO"

    def test_default(self):
        assert resolve_level() == "WARNING"


class TestSetupLogging:
    def test_console_level(self, restore_root_logger):
        setup_logging("INFO")
        assert restore_root_logger.level == logging.INFO
        assert len(restore_root_logger.handlers) == 1

    @pytest.mark.parametrize(
        "level, expected",
        [("WARNING", "%(message)s"), ("INFO", "[%(levelname)s] %(message)s")],
    )
    def test_console_format(self, restore_root_logger, level, expected):
        setup_logging(level)
        assert restore_root_logger.handlers[0].formatter._fmt == expected

    def test_unknown_level_falls_back(self, restore_root_logger):
        setup_logging("LOUD")
        assert restore_root_logger.level == logging.WARNING

    def test_file_handler(self, tmp_path: Path, restore_root_logger):
        log_file = tmp_path / "jlink.log"
        setup_logging("ERROR", log_file=str(log_file), log_file_level="DEBUG")
        assert restore_root_logger.level == logging.DEBUG

        logging.getLogger("jlink_wrapper.test").debug("cache folder ready")
        for handler in restore_root_logger.handlers:
            handler.flush()
        assert "cache folder ready" in log_file.read_text()
