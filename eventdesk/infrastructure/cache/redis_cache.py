"""
Redis-backed tag-aware cache.

Key layout:
- cache:{key}      JSON-encoded value, with TTL
- cache-tag:{tag}  set of keys labelled with the tag

Redis failures degrade to cache misses; they are logged, never raised
to the request.
"""

import json
import logging
from typing import Any, Iterable, Optional

import redis

from eventdesk.domain.events.ports import TagCache

logger = logging.getLogger(__name__)

VALUE_PREFIX = "cache:"
TAG_PREFIX = "cache-tag:"


class RedisTagCache(TagCache):
    """TagCache storing values and tag indexes in Redis."""

    def __init__(self, client: "redis.Redis", default_ttl: int = 300) -> None:
        self._redis = client
        self._default_ttl = default_ttl

    @classmethod
    def from_url(cls, redis_url: str, default_ttl: int = 300) -> "RedisTagCache":
        client = redis.from_url(redis_url, decode_responses=True, socket_timeout=5)
        logger.info("Using Redis cache at %s", redis_url)
        return cls(client, default_ttl=default_ttl)

    def get(self, key: str) -> Optional[Any]:
        try:
            raw = self._redis.get(VALUE_PREFIX + key)
        except redis.RedisError:
            logger.warning("Redis GET failed for key %s", key)
            return None
        if raw is None:
            return None
        return json.loads(raw)

    def set(self, key: str, value: Any, tags: Iterable[str], ttl: Optional[int] = None) -> None:
        ttl = ttl or self._default_ttl
        serialized = json.dumps(value, default=str)
        try:
            pipe = self._redis.pipeline()
            pipe.setex(VALUE_PREFIX + key, ttl, serialized)
            for tag in set(tags):
                pipe.sadd(TAG_PREFIX + tag, key)
                pipe.expire(TAG_PREFIX + tag, ttl)
            pipe.execute()
        except redis.RedisError:
            logger.warning("Redis SET failed for key %s", key)

    def invalidate(self, *tags: str) -> int:
        if not tags:
            return 0
        tag_keys = [TAG_PREFIX + tag for tag in tags]

        def drop_tagged(pipe: "redis.client.Pipeline") -> set[str]:
            # Runs under WATCH on the tag sets; a concurrent SADD makes
            # EXEC fail and redis-py retries the whole read and delete.
            keys = pipe.sunion(tag_keys)
            pipe.multi()
            if keys:
                pipe.delete(*(VALUE_PREFIX + key for key in keys))
            pipe.delete(*tag_keys)
            return keys

        try:
            keys = self._redis.transaction(drop_tagged, *tag_keys, value_from_callable=True)
        except redis.RedisError:
            logger.warning("Redis invalidation failed for tags %s", tags)
            return 0
        if keys:
            logger.debug("Invalidated %d cache entries for tags %s", len(keys), tags)
        return len(keys)
