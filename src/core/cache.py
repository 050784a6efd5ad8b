#!/usr/bin/env python3
"""
In-Memory Caching System

Lightweight per-process TTL cache. Used for regulations API responses, which
change slowly and are subject to tight upstream rate limits.
"""

import logging
import threading
import time
from typing import Any, Dict, Optional, Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    """A single cache entry with metadata."""
    key: str
    value: Any
    created_at: float
    ttl_seconds: int
    last_accessed: float = 0.0

    def is_expired(self, now: Optional[float] = None) -> bool:
        return (now or time.time()) > (self.created_at + self.ttl_seconds)


class InMemoryCache:
    """
    Thread-safe in-memory cache with TTL expiration and LRU eviction.
    """

    def __init__(self, default_ttl: int = 900, max_entries: int = 500):
        """
        Initialize in-memory cache.

        Args:
            default_ttl: Default TTL in seconds
            max_entries: Maximum number of entries before LRU eviction
        """
        self.default_ttl = default_ttl
        self.max_entries = max_entries

        self._cache: Dict[str, CacheEntry] = {}
        self._lock = threading.RLock()
        self._stats = {'hits': 0, 'misses': 0, 'sets': 0, 'evictions': 0}

    def get(self, key: str, default: Any = None) -> Any:
        """Get a live value, or default when missing or expired."""
        with self._lock:
            entry = self._cache.get(key)

            if entry is None or entry.is_expired():
                if entry is not None:
                    del self._cache[key]
                    logger.debug(f"Cache key expired: {key}")
                self._stats['misses'] += 1
                return default

            self._stats['hits'] += 1
            entry.last_accessed = time.time()
            return entry.value

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        """Store a value; a TTL of zero disables caching for that value."""
        if ttl is None:
            ttl = self.default_ttl
        if ttl <= 0:
            return

        with self._lock:
            self._cache[key] = CacheEntry(key=key, value=value, created_at=time.time(), ttl_seconds=ttl)
            self._stats['sets'] += 1

            if len(self._cache) > self.max_entries:
                self._evict_lru()

    def get_or_set(self, key: str, factory: Callable[[], Any], ttl: Optional[int] = None) -> Any:
        """
        Get value from cache or compute it with factory.

        Exceptions raised by factory propagate and nothing is cached.
        """
        value = self.get(key)
        if value is not None:
            return value

        value = factory()
        self.set(key, value, ttl)
        return value

    def clear(self) -> None:
        with self._lock:
            count = len(self._cache)
            self._cache.clear()
            logger.debug(f"Cleared {count} cache entries")

    def _evict_lru(self) -> None:
        entries_by_access = sorted(
            self._cache.values(),
            key=lambda e: e.last_accessed or e.created_at
        )
        evict_count = len(self._cache) - self.max_entries
        for entry in entries_by_access[:evict_count]:
            del self._cache[entry.key]
            self._stats['evictions'] += 1

    def get_stats(self) -> Dict[str, Any]:
        with self._lock:
            total_requests = self._stats['hits'] + self._stats['misses']
            hit_rate = (self._stats['hits'] / total_requests * 100) if total_requests > 0 else 0

            return {
                'entries': len(self._cache),
                'hit_rate': hit_rate,
                'max_entries': self.max_entries,
                'default_ttl': self.default_ttl,
                **self._stats,
            }


_regulations_cache: Optional[InMemoryCache] = None


def get_regulations_cache(default_ttl: int = 900) -> InMemoryCache:
    """Get the process-wide regulations response cache."""
    global _regulations_cache
    if _regulations_cache is None:
        _regulations_cache = InMemoryCache(default_ttl=default_ttl, max_entries=500)
    return _regulations_cache


def get_cache_stats() -> Dict[str, Dict[str, Any]]:
    stats = {}
    if _regulations_cache:
        stats['regulations'] = _regulations_cache.get_stats()
    return stats
