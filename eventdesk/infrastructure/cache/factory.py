"""
Tag cache backend selection.
"""

import logging

from eventdesk.domain.events.ports import TagCache
from eventdesk.infrastructure.cache.memory import DEFAULT_MAX_ENTRIES, InMemoryTagCache
from eventdesk.infrastructure.cache.redis_cache import RedisTagCache

logger = logging.getLogger(__name__)

CACHE_BACKENDS = ("memory", "redis")


def build_tag_cache(
    backend: str, redis_url: str, default_ttl: int, max_entries: int = DEFAULT_MAX_ENTRIES
) -> TagCache:
    """Build the configured cache backend.

    Args:
        backend: "memory" or "redis".
        redis_url: Connection URL, used by the redis backend only.
        default_ttl: Entry lifetime in seconds when a caller gives none.
        max_entries: Entry cap, used by the memory backend only.

    Raises:
        ValueError: On an unknown backend name.
    """
    backend = backend.strip().lower()
    if backend == "redis":
        return RedisTagCache.from_url(redis_url, default_ttl=default_ttl)
    if backend == "memory":
        logger.info("Using in-process cache (ttl=%ds, max_entries=%d)", default_ttl, max_entries)
        return InMemoryTagCache(default_ttl=default_ttl, max_entries=max_entries)
    raise ValueError(f"Unknown cache backend: {backend!r} (expected one of {CACHE_BACKENDS})")
