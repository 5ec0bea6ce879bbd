# carit/utils/logger.py
"""
Centralised logging configuration for the entire application.
Logs to console and to a rotating file (logs/carit.log by default).
"""

import logging
import os
from logging.handlers import RotatingFileHandler

from carit.config import settings

LOG_LEVEL = settings.LOG_LEVEL.upper()
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DIR = settings.LOG_DIR or os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(__file__))), "logs")

# Chatty third-party loggers held at WARNING unless LOG_LEVEL is stricter
QUIET_LOGGERS = ("sqlalchemy.engine", "urllib3", "httpx")

_configured = False


def _build_handlers():
    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    console = logging.StreamHandler()
    console.setFormatter(fmt)
    handlers = [console]

    if settings.LOG_TO_FILE:
        os.makedirs(LOG_DIR, exist_ok=True)
        # Keeps last 10 × 5MB log files
        file_handler = RotatingFileHandler(
            filename=os.path.join(LOG_DIR, "carit.log"),
            maxBytes=5 * 1024 * 1024,
            backupCount=10,
            encoding="utf-8",
        )
        file_handler.setFormatter(fmt)
        handlers.append(file_handler)

    for handler in handlers:
        handler.setLevel(LOG_LEVEL)
    return handlers


def _configure_root_logger():
    global _configured
    if _configured:
        return
    _configured = True

    root = logging.getLogger()
    root.setLevel(LOG_LEVEL)
    for handler in _build_handlers():
        root.addHandler(handler)

    quiet_level = max(logging.WARNING, logging.getLevelName(LOG_LEVEL))
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(quiet_level)


def get_logger(name: str) -> logging.Logger:
    """Get a named logger. Call this at the top of every module."""
    _configure_root_logger()
    return logging.getLogger(name)
