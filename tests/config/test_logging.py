"""Tests for the logging configuration."""

import logging

import pytest
import structlog

from screenwright.config import get_logger, reset_logging, set_settings
from screenwright.config.logging import configure_logging
from screenwright.config.settings import ScreenwrightSettings


@pytest.fixture(autouse=True)
def reset_logging_state():
    """Restore the root logger after each test."""
    root_logger = logging.getLogger()
    original_level = root_logger.level
    original_handlers = root_logger.handlers.copy()

    yield

    root_logger.setLevel(original_level)
    for handler in root_logger.handlers.copy():
        root_logger.removeHandler(handler)
    for handler in original_handlers:
        root_logger.addHandler(handler)
    structlog.reset_defaults()


class TestConfigureLogging:
    """Test configure_logging."""

    def test_default_level(self):
        """Test the default warning level."""
        configure_logging(ScreenwrightSettings())
        assert logging.getLogger().level == logging.WARNING

    @pytest.mark.parametrize(
        ("level", "expected"),
        [("DEBUG", logging.DEBUG), ("INFO", logging.INFO), ("ERROR", logging.ERROR)],
    )
    def test_levels(self, level, expected):
        """Test each configured level reaches the root logger."""
        configure_logging(ScreenwrightSettings(log_level=level))
        assert logging.getLogger().level == expected

    def test_httpx_quiet_below_warning(self):
        """Test httpx request logs stay at warning in debug mode."""
        configure_logging(ScreenwrightSettings(log_level="DEBUG"))
        assert logging.getLogger("httpx").level == logging.WARNING

    def test_log_file(self, tmp_path):
        """Test a rotating file handler is added for log_file."""
        log_file = tmp_path / "logs" / "screenwright.log"
        configure_logging(ScreenwrightSettings(log_level="INFO", log_file=log_file))

        structlog.get_logger("test.file").info("Written to file", agent="dialogue")
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert log_file.exists()
        assert "Written to file" in log_file.read_text()

    @pytest.mark.parametrize("log_format", ["console", "json", "structured"])
    def test_formats(self, log_format, capsys):
        """Test every output format can log."""
        configure_logging(ScreenwrightSettings(log_level="INFO", log_format=log_format))
        structlog.get_logger("test.format").info("Formatted", value=1)
        assert "Formatted" in capsys.readouterr().err

    def test_debug_adds_callsite(self):
        """Test debug mode configures without errors."""
        configure_logging(ScreenwrightSettings(debug=True, log_level="DEBUG"))
        structlog.get_logger("test.debug").debug("Callsite")


class TestLazyLogger:
    """Test the package-level logger cache."""

    def test_cached(self):
        """Test the same logger object is returned per name."""
        assert get_logger("screenwright.same") is get_logger("screenwright.same")

    def test_reset_reconfigures(self):
        """Test reset_logging drops cached loggers and settings."""
        first = get_logger("screenwright.reset")
        reset_logging()
        set_settings(ScreenwrightSettings(log_level="ERROR"))
        second = get_logger("screenwright.reset")
        assert first is not second
        assert logging.getLogger().level == logging.ERROR
