"""Rate limiting utilities for API calls."""

from __future__ import annotations

import threading
import time
from functools import wraps
from typing import Any, Callable, TypeVar

_F = TypeVar("_F", bound=Callable[..., Any])


class RateLimiter:
    """Minimum-interval rate limiter shared by all callers of one API.

    Calls made faster than ``rate_per_second`` are delayed so consecutive
    calls are at least ``1 / rate_per_second`` apart.
    """

    def __init__(
        self,
        rate_per_second: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if rate_per_second <= 0:
            raise ValueError("rate_per_second must be positive")
        self.min_interval = 1.0 / rate_per_second
        self._clock = clock
        self._sleep = sleep
        self._last_call_time: float | None = None
        self._lock = threading.Lock()

    def acquire(self) -> None:
        """Block until the next call is allowed."""
        with self._lock:
            now = self._clock()
            if self._last_call_time is not None:
                elapsed = now - self._last_call_time
                if elapsed < self.min_interval:
                    self._sleep(self.min_interval - elapsed)
                    now = self._clock()
            self._last_call_time = now

    def __call__(self, func: _F) -> _F:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            self.acquire()
            return func(*args, **kwargs)

        return wrapper  # type: ignore
