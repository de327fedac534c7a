# webservice/logging_utils.py
"""
Logging helpers.

Every module logs through `logging.getLogger(__name__)`, so all records end up
under the "webservice" logger. `get_debug_logger()` attaches a rotating file
handler to that logger at DEBUG level; nothing is attached otherwise and the
host application's logging config decides what is shown.
"""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler

PACKAGE_LOGGER = "webservice"
DEFAULT_LOG_PATH = os.path.join("logs", "webservice_debug.log")

_LOGGER: logging.Logger | None = None


def get_debug_logger(log_path: str | None = None) -> logging.Logger:
    """Create/reuse the package logger with a rotating file handler."""
    global _LOGGER
    if _LOGGER is not None:
        return _LOGGER

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(logging.DEBUG)

    # Avoid duplicate handlers if reloaded in REPL/tests
    if not any(isinstance(h, RotatingFileHandler) for h in logger.handlers):
        path = log_path or os.getenv("WEBSERVICE_LOG_PATH") or DEFAULT_LOG_PATH
        try:
            os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
            handler = RotatingFileHandler(path, maxBytes=1_000_000, backupCount=3, encoding="utf-8")
        except OSError as e:
            logger.warning("debug log file unavailable (%s): %s", path, e)
        else:
            handler.setFormatter(
                logging.Formatter(
                    fmt="%(asctime)s %(levelname)s %(name)s %(threadName)s %(message)s",
                    datefmt="(%Y-%m-%d %H:%M:%S)",
                )
            )
            logger.addHandler(handler)

    _LOGGER = logger
    return logger


def reset_debug_logger() -> None:
    """Detach handlers added by `get_debug_logger` (tests, REPL reloads)."""
    global _LOGGER
    logger = logging.getLogger(PACKAGE_LOGGER)
    for h in list(logger.handlers):
        if isinstance(h, RotatingFileHandler):
            logger.removeHandler(h)
            h.close()
    logger.setLevel(logging.NOTSET)
    _LOGGER = None


__all__ = ["PACKAGE_LOGGER", "get_debug_logger", "reset_debug_logger"]
