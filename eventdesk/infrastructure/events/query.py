"""
Helpers shared by the SQL repository adapters.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Optional, TypeVar

from sqlalchemy.exc import SQLAlchemyError

from eventdesk.domain.events.constants import DEFAULT_ERROR_MESSAGE
from eventdesk.domain.events.entities import QueryResult

logger = logging.getLogger(__name__)

T = TypeVar("T")


def run_query(operation: Callable[[], T], description: str) -> QueryResult[T]:
    """Run a storage operation, converting any failure to a QueryResult.

    Non-SQLAlchemy errors from the driver, such as OverflowError on
    parameter conversion, are caught as well.

    Args:
        operation: Zero-argument callable performing the queries.
        description: Short label used in the error log.

    Returns:
        QueryResult with the operation's return value, or with
        DEFAULT_ERROR_MESSAGE when the operation raised.
    """
    try:
        return QueryResult(data=operation())
    except SQLAlchemyError:
        logger.exception("Storage operation failed: %s", description)
        return QueryResult(data=None, error=DEFAULT_ERROR_MESSAGE)
    except Exception:
        logger.exception("Unexpected error in storage operation: %s", description)
        return QueryResult(data=None, error=DEFAULT_ERROR_MESSAGE)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive datetimes returned by backends without tz support."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
