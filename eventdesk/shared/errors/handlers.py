"""
Centralized error handlers for FastAPI.

Maps events domain errors to HTTP responses with a JSON body of the form
{"error": ..., "detail"?: ...}. No stack traces or internal details are
exposed to clients.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from eventdesk.domain.events.constants import DEFAULT_ERROR_MESSAGE
from eventdesk.domain.events.errors import (
    EventNotFoundError,
    EventsDomainError,
    InvalidStatusFilterError,
    StorageError,
)

logger = logging.getLogger(__name__)

HTTP_400 = 400
HTTP_404 = 404
HTTP_422 = 422
HTTP_500 = 500


def _error_response(status_code: int, error: str, detail: str | None = None) -> JSONResponse:
    """Build a consistent JSON error response."""
    body: dict[str, str | None] = {"error": error}
    if detail:
        body["detail"] = detail
    return JSONResponse(status_code=status_code, content=body)


def register_error_handlers(app: FastAPI) -> None:
    """Register all domain error handlers on the FastAPI application.

    Args:
        app: The FastAPI application instance.
    """

    @app.exception_handler(InvalidStatusFilterError)
    async def handle_invalid_status(
        _request: Request, exc: InvalidStatusFilterError
    ) -> JSONResponse:
        """Handle listing requests with an unsupported status."""
        logger.warning("Invalid status filter: %r", exc.status)
        return _error_response(HTTP_400, exc.message)

    @app.exception_handler(EventNotFoundError)
    async def handle_event_not_found(
        _request: Request, exc: EventNotFoundError
    ) -> JSONResponse:
        logger.warning("Event not found: %s", exc.slug)
        return _error_response(HTTP_404, "Event not found")

    @app.exception_handler(StorageError)
    async def handle_storage(_request: Request, exc: StorageError) -> JSONResponse:
        """Repository failures were already logged with their stack trace."""
        logger.error("Storage error surfaced to client: %s", exc.reason)
        return _error_response(HTTP_500, DEFAULT_ERROR_MESSAGE)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        errors = exc.errors()
        detail = errors[0].get("msg") if errors else None
        logger.warning("Request validation failed: %d error(s)", len(errors))
        return _error_response(HTTP_422, "Invalid request", detail)

    @app.exception_handler(EventsDomainError)
    async def handle_events_domain(
        _request: Request, exc: EventsDomainError
    ) -> JSONResponse:
        """Catch-all for unhandled events domain errors."""
        logger.error("Unhandled events domain error: %s", exc.message)
        return _error_response(HTTP_500, "Internal server error")

    @app.exception_handler(Exception)
    async def handle_unexpected(
        _request: Request, exc: Exception
    ) -> JSONResponse:
        """Catch-all for unexpected errors. Never exposes internals."""
        logger.exception("Unexpected error: %s", type(exc).__name__)
        return _error_response(HTTP_500, "Internal server error")
