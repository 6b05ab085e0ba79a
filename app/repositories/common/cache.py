"""Cache repository - process-local TTL cache with stale fallback."""

import json
import time
from collections.abc import Callable
from typing import Any

from loguru import logger

from app.models.common import CachedEntry


def cache_key(resource_id: str, filters: dict[str, Any] | None = None) -> str:
    """Composite key: resource id + serialized filter set."""
    return f"{resource_id}-{json.dumps(filters or {}, sort_keys=True, separators=(',', ':'))}"


class CacheRepository:
    """Unbounded in-memory cache; entries are only replaced, never evicted.

    `get` honours the TTL; `peek` ignores it so callers can serve stale data
    when an upstream refresh fails.
    """

    def __init__(self, ttl_seconds: float, name: str = "cache", clock: Callable[[], float] = time.time):
        self._ttl_ms = int(ttl_seconds * 1000)
        self._name = name
        self._clock = clock
        self._entries: dict[str, CachedEntry] = {}

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def get(self, key: str) -> CachedEntry | None:
        """Fresh entry or None (miss or expired)."""
        entry = self._entries.get(key)
        if entry is None:
            logger.debug("{} miss: {}", self._name, key)
            return None
        if not entry.is_fresh(self._now_ms()):
            logger.debug("{} expired: {}", self._name, key)
            return None
        logger.debug("{} hit: {}", self._name, key)
        return entry

    def peek(self, key: str) -> CachedEntry | None:
        """Entry regardless of age."""
        return self._entries.get(key)

    def set(self, key: str, data: Any, ttl_seconds: float | None = None) -> CachedEntry:
        """Store with the current timestamp."""
        ttl_ms = self._ttl_ms if ttl_seconds is None else int(ttl_seconds * 1000)
        entry = CachedEntry(data=data, timestamp=self._now_ms(), expires_in_ms=ttl_ms)
        self._entries[key] = entry
        return entry

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        """Clear all entries."""
        self._entries.clear()
        logger.debug("{} cleared", self._name)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries
