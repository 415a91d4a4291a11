"""Tests for core logging module."""

import logging
from io import StringIO

import pytest

from .lib import get_logger, parse_level, setup_logging


class TestLogging:
    """Test core logging API."""

    @pytest.mark.unit
    def test_get_logger(self) -> None:
        """Verify logger instance creation."""
        logger = get_logger("test")
        assert logger.name == "test"
        assert isinstance(logger, logging.Logger)

    @pytest.mark.unit
    def test_get_logger_default_name(self) -> None:
        """Verify default logger name."""
        assert get_logger().name == "aidesigner"

    @pytest.mark.unit
    def test_setup_logging(self) -> None:
        """setup_logging leaves per-logger levels untouched."""
        setup_logging(level=logging.DEBUG, stream=StringIO())
        logger = get_logger("test_setup")
        logger.debug("test message")
        assert logger.level == logging.NOTSET


class TestParseLevel:
    """Tests for level name parsing."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("debug", logging.DEBUG),
            ("WARNING", logging.WARNING),
            (" error ", logging.ERROR),
            (logging.CRITICAL, logging.CRITICAL),
            (None, logging.INFO),
            ("chatty", logging.INFO),
        ],
    )
    def test_levels(self, value, expected) -> None:
        """Names, ints and unknown values resolve to a logging level."""
        assert parse_level(value) == expected
