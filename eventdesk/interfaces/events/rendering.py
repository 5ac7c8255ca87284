"""
Cache-tagged rendering of JSON responses.

Read routes render their payload once, label it with cache tags and
serve it from the tag cache until a mutation invalidates one of them.
Only successful renders are cached; errors propagate uncached.
"""

import json
import logging
from typing import Any, Callable, Iterable, Optional

from eventdesk.core.config import settings
from eventdesk.domain.events.ports import TagCache

logger = logging.getLogger(__name__)


def cache_key(namespace: str, **params: Any) -> str:
    """Stable cache key from a namespace and request parameters."""
    return f"{namespace}:{json.dumps(params, sort_keys=True, default=str)}"


def render_cached(
    cache: TagCache,
    key: str,
    tags: Iterable[str],
    build: Callable[[], Any],
    ttl: Optional[int] = None,
) -> Any:
    """Return the cached payload for ``key``, building and storing it on a miss.

    Args:
        cache: Tag cache backend.
        key: Cache key, see cache_key.
        tags: Invalidation tags for the payload.
        build: Produces the JSON-ready payload.
        ttl: Lifetime in seconds; defaults to the configured TTL.
    """
    cached = cache.get(key)
    if cached is not None:
        logger.debug("Cache hit: %s", key)
        return cached

    payload = build()
    cache.set(key, payload, list(tags), ttl or settings.cache_ttl_seconds)
    return payload
