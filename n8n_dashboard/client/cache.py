"""
Query cache for the dashboard client, keyed by (endpoint, params).
"""
import time
from typing import Any, Dict, Hashable, Mapping, Optional, Tuple

CacheKey = Tuple[str, Tuple[Tuple[str, Hashable], ...]]


def make_key(endpoint: str, params: Optional[Mapping[str, Any]] = None) -> CacheKey:
    """Build a cache key. Parameters set to None are dropped, so {} and {"instance": None} match."""
    items = tuple(sorted((k, v) for k, v in (params or {}).items() if v is not None))
    return endpoint, items


class QueryCache:
    """Cached API responses with explicit invalidation."""

    def __init__(self, clock=time.monotonic):
        self._clock = clock
        self._entries: Dict[CacheKey, Tuple[Any, float]] = {}

    def get(self, endpoint: str, params: Optional[Mapping[str, Any]] = None, max_age: Optional[float] = None):
        """Return the cached value, or None when missing or older than max_age seconds."""
        entry = self._entries.get(make_key(endpoint, params))
        if entry is None:
            return None
        value, stored_at = entry
        if max_age is not None and self._clock() - stored_at > max_age:
            return None
        return value

    def set(self, endpoint: str, params: Optional[Mapping[str, Any]], value: Any) -> None:
        self._entries[make_key(endpoint, params)] = (value, self._clock())

    def invalidate(self, endpoint: str, params: Optional[Mapping[str, Any]] = None) -> None:
        self._entries.pop(make_key(endpoint, params), None)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: CacheKey) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
