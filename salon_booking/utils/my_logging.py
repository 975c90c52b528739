# salon_booking/utils/my_logging.py
"""Logging configuration for the API process and the Celery worker"""
import logging
import sys
from typing import Dict

from salon_booking.config.settings import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Library loggers and the level they run at when the app is at INFO
LIBRARY_LEVELS: Dict[str, int] = {
    "sqlalchemy.engine": logging.WARNING,
    "sqlalchemy.pool": logging.WARNING,
    "alembic": logging.INFO,
    "googleapiclient.discovery": logging.WARNING,
    "googleapiclient.discovery_cache": logging.ERROR,
    "urllib3": logging.WARNING,
    "celery.worker.strategy": logging.WARNING,
    "uvicorn.access": logging.WARNING,
}


def resolve_level(name: str) -> int:
    """LOG_LEVEL name to a logging level; unknown names fall back to INFO"""
    level = logging.getLevelName((name or "").upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logging(verbose: bool = True) -> int:
    """
    Configure the root logger from LOG_LEVEL and cap library loggers.

    With verbose=False only warnings are shown and every library logger is
    raised to ERROR. Returns the root level in effect.
    """
    settings = get_settings()
    level = resolve_level(settings.LOG_LEVEL) if verbose else logging.WARNING

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)]
    )

    for name, library_level in LIBRARY_LEVELS.items():
        logging.getLogger(name).setLevel(max(library_level, level) if verbose else logging.ERROR)

    # Booking and sync decisions stay visible when the root is at WARNING
    if level > logging.INFO and verbose:
        for name in ("salon_booking.services.appointment", "salon_booking.services.sync"):
            logging.getLogger(name).setLevel(logging.INFO)

    return level
