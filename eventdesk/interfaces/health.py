"""
Health check router.

Liveness/readiness probe. Reports the version and whether the
database answers a trivial query; a failing database degrades the
status but never fails the probe itself.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from eventdesk.core.config import settings
from eventdesk.infrastructure.db import get_engine
from eventdesk.interfaces.events.schemas import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


def _database_reachable(engine: Engine) -> bool:
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError:
        logger.warning("Health check: database unreachable", exc_info=True)
        return False


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Returns application health status, version and database reachability.",
)
def health_check(engine: Engine = Depends(get_engine)) -> HealthResponse:
    """Return current application health status."""
    database_ok = _database_reachable(engine)
    return HealthResponse(
        status="ok" if database_ok else "degraded",
        version=settings.version,
        database="ok" if database_ok else "unavailable",
    )
