"""
Application entry point.

Creates the FastAPI application and wires together:
- Routers (public events API, admin API, affiliate links, health)
- Error handlers (centralized domain-to-HTTP mapping)
- Security middleware (headers, rate limiting)
- Logging configuration

No business logic belongs here.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from eventdesk.core.config import settings
from eventdesk.infrastructure.db import get_engine
from eventdesk.infrastructure.tables import metadata
from eventdesk.interfaces.admin.router import router as admin_router
from eventdesk.interfaces.events.affiliate import router as affiliate_router
from eventdesk.interfaces.events.router import router as events_router
from eventdesk.interfaces.health import router as health_router
from eventdesk.shared.errors.handlers import register_error_handlers
from eventdesk.shared.logging import configure_logging
from eventdesk.shared.security.headers import SecurityHeadersMiddleware
from eventdesk.shared.security.rate_limiting import limiter, rate_limit_exceeded_handler

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: optionally create the schema on startup."""
    if settings.auto_create_schema:
        logger.info("Creating database schema if missing")
        metadata.create_all(get_engine())
    yield


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Registers routers, error handlers, and security middleware.
    This is the composition root of the application.

    Returns:
        A fully configured FastAPI application instance.
    """
    configure_logging(level=settings.log_level)

    app = FastAPI(
        title=settings.project_name,
        version=settings.version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    # --- Rate Limiting ---
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    # --- Security Middleware ---
    app.add_middleware(SecurityHeadersMiddleware, enable_hsts=settings.is_production)

    # --- Error Handlers ---
    register_error_handlers(app)

    # --- Routers ---
    app.include_router(health_router, prefix=settings.api_prefix)
    app.include_router(events_router, prefix=settings.api_prefix)
    app.include_router(admin_router, prefix=settings.api_prefix)
    app.include_router(affiliate_router)

    return app


app = create_app()
