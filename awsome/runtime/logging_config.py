"""Logging setup for the browser.

The terminal is owned by the TUI while it runs, so records go to a rotating
file under the platform log directory instead of stderr.
"""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

from platformdirs import user_log_dir

from .config import APP_NAME, LOG_LEVELS, load_log_level

LOG_LEVEL_ENV = "AWSOME_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_PATH = Path(user_log_dir(APP_NAME, appauthor=False)) / f"{APP_NAME}.log"
MAX_LOG_BYTES = 1_000_000
LOG_BACKUPS = 3


def resolve_log_level(level: str | None = None) -> str:
    """Pick the level: explicit argument, then environment, then config, then INFO."""
    for candidate in (level, os.environ.get(LOG_LEVEL_ENV), load_log_level()):
        if isinstance(candidate, str) and candidate.strip().upper() in LOG_LEVELS:
            return candidate.strip().upper()
    return "INFO"


def setup_logging(level: str | None = None, log_path: Path | None = None) -> Path | None:
    """Attach a rotating file handler to the ``awsome`` logger.

    Returns the log file path, or ``None`` when the log directory cannot be
    created (logging then stays silent). Calling it twice replaces the
    previous handler.
    """
    logger = logging.getLogger(APP_NAME)
    logger.setLevel(resolve_log_level(level))
    logger.propagate = False
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    path = log_path if log_path is not None else LOG_PATH
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(path, maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUPS, encoding="utf-8")
    except OSError:
        logger.addHandler(logging.NullHandler())
        return None
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    # botocore logs full request bodies at DEBUG.
    logging.getLogger("botocore").setLevel(logging.WARNING)
    return path


__all__ = ["LOG_LEVEL_ENV", "LOG_PATH", "resolve_log_level", "setup_logging"]
