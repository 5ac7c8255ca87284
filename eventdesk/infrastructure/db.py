"""
Database engine factory.

The engine is created lazily on first use and shared by every adapter.
Each repository call checks a connection out of the pool and returns it
before the call completes.
"""

import logging
from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

from eventdesk.core.config import settings

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    """Build the process-wide SQLAlchemy engine from application settings."""
    url = settings.get_database_url()
    kwargs = {"pool_pre_ping": True}
    if not url.startswith("sqlite"):
        kwargs["pool_size"] = settings.db_pool_size
        kwargs["max_overflow"] = settings.db_max_overflow
    logger.info("Creating database engine (pool_size=%d)", settings.db_pool_size)
    return create_engine(url, **kwargs)
