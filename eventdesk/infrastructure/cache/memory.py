"""
In-process tag-aware cache.

Default backend for single-process deployments and tests. Entries live
in an ordered dict guarded by a lock, with a reverse index from tag to
keys. Expired entries are swept on every write through a min-heap of
expiry times, and the least recently used entry is evicted once the
entry cap is reached.
"""

import heapq
import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from eventdesk.domain.events.ports import TagCache

logger = logging.getLogger(__name__)

DEFAULT_MAX_ENTRIES = 2048


@dataclass
class _Entry:
    value: Any
    tags: frozenset[str]
    expires_at: Optional[float]


class InMemoryTagCache(TagCache):
    """Thread-safe dict-backed TagCache with per-entry expiry and an LRU cap."""

    def __init__(
        self,
        default_ttl: Optional[int] = None,
        clock=time.monotonic,
        max_entries: int = DEFAULT_MAX_ENTRIES,
    ) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self._default_ttl = default_ttl
        self._clock = clock
        self._max_entries = max_entries
        self._entries: "OrderedDict[str, _Entry]" = OrderedDict()
        self._keys_by_tag: dict[str, set[str]] = {}
        self._expiry_heap: list[tuple[float, str]] = []
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.expires_at is not None and entry.expires_at <= self._clock():
                self._drop(key)
                return None
            self._entries.move_to_end(key)
            return entry.value

    def set(self, key: str, value: Any, tags: Iterable[str], ttl: Optional[int] = None) -> None:
        ttl = ttl if ttl is not None else self._default_ttl
        with self._lock:
            now = self._clock()
            self._purge_expired(now)
            self._drop(key)
            expires_at = now + ttl if ttl else None
            entry = _Entry(value=value, tags=frozenset(tags), expires_at=expires_at)
            self._entries[key] = entry
            for tag in entry.tags:
                self._keys_by_tag.setdefault(tag, set()).add(key)
            if expires_at is not None:
                heapq.heappush(self._expiry_heap, (expires_at, key))
                if len(self._expiry_heap) > 2 * self._max_entries:
                    self._rebuild_expiry_heap()
            while len(self._entries) > self._max_entries:
                oldest = next(iter(self._entries))
                self._drop(oldest)
                logger.debug("Evicted least recently used cache entry %s", oldest)

    def invalidate(self, *tags: str) -> int:
        with self._lock:
            keys = set()
            for tag in tags:
                keys |= self._keys_by_tag.pop(tag, set())
            for key in keys:
                self._drop(key)
        if keys:
            logger.debug("Invalidated %d cache entries for tags %s", len(keys), tags)
        return len(keys)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._keys_by_tag.clear()
            self._expiry_heap.clear()

    def _purge_expired(self, now: float) -> None:
        # Caller holds the lock. Heap items left behind by overwritten or
        # invalidated keys no longer match their entry and are skipped.
        heap = self._expiry_heap
        while heap and heap[0][0] <= now:
            expires_at, key = heapq.heappop(heap)
            entry = self._entries.get(key)
            if entry is not None and entry.expires_at == expires_at:
                self._drop(key)

    def _rebuild_expiry_heap(self) -> None:
        # Caller holds the lock.
        self._expiry_heap = [
            (entry.expires_at, key)
            for key, entry in self._entries.items()
            if entry.expires_at is not None
        ]
        heapq.heapify(self._expiry_heap)

    def _drop(self, key: str) -> None:
        # Caller holds the lock.
        entry = self._entries.pop(key, None)
        if entry is None:
            return
        for tag in entry.tags:
            keys = self._keys_by_tag.get(tag)
            if keys is not None:
                keys.discard(key)
                if not keys:
                    del self._keys_by_tag[tag]
