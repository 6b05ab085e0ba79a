"""In-memory cache entry - shared across all domains."""

from dataclasses import dataclass
from typing import Any

from app.models.common.base import BaseEntity


@dataclass
class CachedEntry(BaseEntity):
    """Cached value with the epoch-ms time it was stored and its TTL."""

    data: Any
    timestamp: int
    expires_in_ms: int

    def age_ms(self, now_ms: int) -> int:
        return now_ms - self.timestamp

    def is_fresh(self, now_ms: int) -> bool:
        """Stale entries are kept around for stale-on-error fallback."""
        return self.age_ms(now_ms) < self.expires_in_ms
