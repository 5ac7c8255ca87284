"""
Rate limiting configuration and setup.

Uses slowapi. Every route gets the default limit; market search, which
is called on each keystroke, has its own tighter limit.
"""

from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.requests import Request
from starlette.responses import JSONResponse

from eventdesk.core.config import settings

DEFAULT_RATE_LIMIT = settings.rate_limit_default
SEARCH_RATE_LIMIT = settings.rate_limit_search

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[DEFAULT_RATE_LIMIT],
    enabled=settings.rate_limit_enabled,
)


async def rate_limit_exceeded_handler(
    _request: Request, exc: RateLimitExceeded
) -> JSONResponse:
    """Handle rate limit exceeded errors with a clean JSON response.

    Args:
        _request: The incoming HTTP request.
        exc: The rate limit exceeded exception.

    Returns:
        A 429 JSON response with a clear error message.
    """
    return JSONResponse(
        status_code=429,
        content={"error": "Too many requests.", "detail": str(exc.detail)},
    )
