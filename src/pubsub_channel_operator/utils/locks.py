"""Per-key mutual exclusion for reconcile passes."""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator


class KeyedLock:
    """One lock per key, created on first use and dropped once unused.

    Holders of distinct keys never block each other.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}
        self._holders: dict[str, int] = {}

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        """Block until ``key`` is free, then hold it for the ``with`` body."""
        with self._lock:
            lock = self._locks.setdefault(key, threading.Lock())
            self._holders[key] = self._holders.get(key, 0) + 1
        try:
            with lock:
                yield
        finally:
            with self._lock:
                self._holders[key] -= 1
                if not self._holders[key]:
                    del self._holders[key]
                    del self._locks[key]

    def __len__(self) -> int:
        with self._lock:
            return len(self._locks)
