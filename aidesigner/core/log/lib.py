"""Core logging implementation for aidesigner."""

import logging
import sys
from typing import Optional


def setup_logging(level: int = logging.INFO, stream=sys.stderr) -> None:
    """Configure basic logging.

    Args:
        level: Logging level.
        stream: Output stream.
    """
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=stream,
    )


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger instance.

    Args:
        name: Name of the logger. Defaults to the package logger.

    Returns:
        Logger instance.
    """
    return logging.getLogger(name or "aidesigner")


def parse_level(value: str | int | None, default: int = logging.INFO) -> int:
    """Translate a level name such as "debug" into a logging constant.

    Unknown names fall back to ``default``.
    """
    if value is None:
        return default
    if isinstance(value, int):
        return value
    level = logging.getLevelName(value.strip().upper())
    return level if isinstance(level, int) else default


__all__ = ["get_logger", "parse_level", "setup_logging"]
