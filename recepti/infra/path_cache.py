"""Caches for image-path normalization results.

A normalization result maps a requested CDN path to the path that actually
exists on disk. Both backends bound staleness with a TTL; the in-memory one
also bounds size.
"""

import logging
import threading
import time
from collections import OrderedDict
from typing import Optional

from .redis_client import get_sync_redis
from ..settings import settings

logger = logging.getLogger("recepti.path_cache")


class PathCache:
    """Interface: get/set/clear on string keys and values."""

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError


class MemoryPathCache(PathCache):
    """In-process LRU with per-entry expiry."""

    def __init__(self, max_entries: int = 2048, ttl_seconds: float = 300, clock=time.monotonic):
        if max_entries < 1:
            raise ValueError("max_entries must be >= 1")
        self.max_entries = max_entries
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: "OrderedDict[str, tuple[str, float]]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                return None
            self._entries.move_to_end(key)
            return value

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._entries[key] = (value, self._clock() + self.ttl_seconds)
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


class RedisPathCache(PathCache):
    """Shared cache for multi-worker deployments."""

    def __init__(self, ttl_seconds: int = 300, prefix: str = "recepti:cdnpath:", client=None):
        self.ttl_seconds = ttl_seconds
        self.prefix = prefix
        self._client = client

    @property
    def client(self):
        return self._client or get_sync_redis()

    def get(self, key: str) -> Optional[str]:
        return self.client.get(self.prefix + key)

    def set(self, key: str, value: str) -> None:
        self.client.set(self.prefix + key, value, ex=self.ttl_seconds)

    def clear(self) -> None:
        keys = list(self.client.scan_iter(match=self.prefix + "*"))
        if keys:
            self.client.delete(*keys)


def build_path_cache() -> PathCache:
    """Cache backend selected by settings."""
    backend = settings.cdn_path_cache_backend.lower()
    if backend == "redis":
        logger.info("Using Redis cache for CDN path normalization")
        return RedisPathCache(ttl_seconds=settings.cdn_path_cache_ttl_seconds)
    if backend != "memory":
        raise ValueError(f"Unknown cdn_path_cache_backend: {settings.cdn_path_cache_backend}")
    return MemoryPathCache(
        max_entries=settings.cdn_path_cache_max_entries,
        ttl_seconds=settings.cdn_path_cache_ttl_seconds,
    )
