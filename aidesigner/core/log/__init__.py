"""Logging micro API for aidesigner."""

from .lib import get_logger, parse_level, setup_logging

__all__ = ["get_logger", "parse_level", "setup_logging"]
