"""
Logging configuration for the service.

Every module logs through logging.getLogger(__name__); this module only
sets the root handler and format once at startup.
Never logs sensitive data (request bodies, cookies, secrets).
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

NOISY_LOGGERS = ("uvicorn.access", "uvicorn.error", "sqlalchemy.engine", "slowapi")


def configure_logging(level: str = "INFO") -> None:
    """Configure the root logger.

    Args:
        level: The log level string (DEBUG, INFO, WARNING, ERROR).
            Unknown values fall back to INFO.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        stream=sys.stdout,
        force=True,
    )

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
