"""Logging setup for the command-line tool."""

from __future__ import annotations

import logging
import os
from typing import Optional, TextIO

LOGGER_NAME = "stdcheck"
LOG_LEVEL_ENV = "STDCHECK_LOG_LEVEL"
DEFAULT_LEVEL = logging.WARNING
LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"

_LEVELS = {
    "CRITICAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
}


def resolve_level(level: Optional[str | int] = None) -> int:
    """Explicit ``level`` wins over ``STDCHECK_LOG_LEVEL``, then WARNING."""

    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV)
    if level is None:
        return DEFAULT_LEVEL
    if isinstance(level, int):
        return level
    text = level.strip().upper()
    if text.isdigit():
        return int(text)
    return _LEVELS.get(text, DEFAULT_LEVEL)


def setup_logging(level: Optional[str | int] = None, stream: Optional[TextIO] = None) -> logging.Logger:
    """Configure the ``stdcheck`` logger once; later calls only adjust the level.

    Messages go to stderr by default so stdout stays machine readable.
    """

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(resolve_level(level))
    handler = next((h for h in logger.handlers if getattr(h, "_stdcheck", False)), None)
    if handler is None or stream is not None:
        if handler is not None:
            logger.removeHandler(handler)
        handler = logging.StreamHandler(stream)
        handler._stdcheck = True  # type: ignore[attr-defined]
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    return logger
