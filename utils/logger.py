"""
utils/logger.py
---------------
Log setup for the Shareholders Registry.

Every module logs through `get_logger(__name__)`. Records from the app
and from uvicorn (started with log_config=None) all reach one stdout
handler on the root logger, filtered at LOG_LEVEL.
"""

import logging
import sys

from config import LOG_LEVEL

_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_initialized = False


def _init_logging() -> None:
    """Install the stdout handler and LOG_LEVEL on the root logger, once per process."""
    global _initialized
    if _initialized:
        return
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT, _DATE_FORMAT))
    root = logging.getLogger()
    # Unknown level names fall back to INFO
    root.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))
    root.addHandler(handler)
    _initialized = True


def get_logger(name: str) -> logging.Logger:
    """
    Return the registry logger for a module.

    Args:
        name: Dotted module path, normally ``__name__`` (e.g. "db.connection").
    """
    _init_logging()
    return logging.getLogger(name)
