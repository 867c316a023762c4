"""Logging setup for the ``fika`` logger hierarchy.

The terminal is in raw mode while reading, so log records never go to the
screen: debug output is written to a file, otherwise it is discarded.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from . import config

LOGGER_NAME = "fika"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def debug_requested_by_env() -> bool:
    return os.environ.get("FIKA_DEBUG", "").strip().lower() in {"1", "true", "yes", "on"}


def configure_logging(debug: bool = False, log_path: Path | None = None) -> logging.Logger:
    """Attach a handler to the package logger and return it.

    With ``debug`` a ``FileHandler`` at DEBUG level writes to ``log_path``
    (default ``config.LOG_PATH``); without it a ``NullHandler`` is installed.
    Calling again replaces the previous handlers.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = False

    if not debug:
        logger.addHandler(logging.NullHandler())
        logger.setLevel(logging.WARNING)
        return logger

    target = log_path if log_path is not None else config.LOG_PATH
    target.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(target, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    return logger
