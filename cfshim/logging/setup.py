"""Logging configuration for the shim."""

import logging
import os
import sys
from typing import Optional, Union

LOGGER_NAME = "cfshim"
LOG_LEVEL_ENV = "CFSHIM_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _resolve_level(level: Union[int, str, None]) -> int:
    if level is None:
        level = os.getenv(LOG_LEVEL_ENV, "INFO")
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(level: Optional[Union[int, str]] = None) -> logging.Logger:
    """Send ``cfshim`` records to stdout.

    The level comes from ``level``, then CFSHIM_LOG_LEVEL, then INFO.
    Calling this again replaces the handler rather than adding a second one.
    """
    resolved = _resolve_level(level)
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(resolved)
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(resolved)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    logger.addHandler(handler)

    # Records also reach root handlers
    logger.propagate = True

    # Request lines are already logged per route
    logging.getLogger("uvicorn.access").setLevel(max(resolved, logging.WARNING))
    return logger


# Global logger instance
logger = setup_logging()
