"""TTL cache for objects read from the Kubernetes API."""

from __future__ import annotations

import threading
import time
from typing import Any, Callable, Optional


def make_cache_key(kind: str, namespace: str, name: str) -> str:
    """Create a cache key for a Kubernetes resource.

    Args:
        kind: Resource kind (e.g., "Channel", "Topic")
        namespace: Resource namespace
        name: Resource name

    Returns:
        Cache key string
    """
    return f"{kind}:{namespace}:{name}"


class ObjectCache:
    """Thread-safe object cache with per-entry expiry.

    Many reconcile workers read from the same cache concurrently, so every
    access goes through a lock.
    """

    def __init__(self, ttl: float = 30.0, clock: Callable[[], float] = time.monotonic):
        self.ttl = ttl
        self._clock = clock
        self._entries: dict[str, tuple[Any, float]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        """Get an object from cache if it hasn't expired.

        Args:
            key: Cache key (typically "kind:namespace:name")

        Returns:
            Cached object or None if not found or expired
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None

            obj, timestamp = entry
            if self._clock() - timestamp > self.ttl:
                del self._entries[key]
                return None

            return obj

    def set(self, key: str, obj: Any) -> None:
        """Store an object in cache with current timestamp."""
        with self._lock:
            self._entries[key] = (obj, self._clock())

    def invalidate(self, pattern: Optional[str] = None) -> None:
        """Invalidate cache entries.

        Args:
            pattern: Optional substring to match keys (if None, clears all)
        """
        with self._lock:
            if pattern is None:
                self._entries.clear()
                return
            for key in [key for key in self._entries if pattern in key]:
                del self._entries[key]

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
