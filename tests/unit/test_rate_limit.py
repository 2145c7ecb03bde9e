"""Tests for rate limiting utilities."""

from __future__ import annotations

import pytest

from pubsub_channel_operator.utils.rate_limit import RateLimiter


class FakeTime:
    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def clock(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


class TestRateLimiter:
    """Test cases for RateLimiter."""

    def test_first_call_does_not_sleep(self):
        """Test the first call goes through immediately."""
        fake = FakeTime()
        limiter = RateLimiter(10, clock=fake.clock, sleep=fake.sleep)

        limiter.acquire()

        assert fake.sleeps == []

    def test_fast_calls_are_spaced(self):
        """Test back-to-back calls sleep for the remaining interval."""
        fake = FakeTime()
        limiter = RateLimiter(10, clock=fake.clock, sleep=fake.sleep)

        limiter.acquire()
        fake.now += 0.04
        limiter.acquire()

        assert fake.sleeps == [pytest.approx(0.06)]

    def test_slow_calls_do_not_sleep(self):
        """Test calls already far enough apart are not delayed."""
        fake = FakeTime()
        limiter = RateLimiter(10, clock=fake.clock, sleep=fake.sleep)

        limiter.acquire()
        fake.now += 1.0
        limiter.acquire()

        assert fake.sleeps == []

    def test_decorator(self):
        """Test the limiter wraps functions and passes arguments through."""
        fake = FakeTime()
        limiter = RateLimiter(100, clock=fake.clock, sleep=fake.sleep)

        @limiter
        def call(a, b, c=None):
            return f"{a}-{b}-{c}"

        assert call("x", "y", c="z") == "x-y-z"
        assert call.__name__ == "call"

    @pytest.mark.parametrize("rate", [0, -1])
    def test_invalid_rate(self, rate):
        """Test non-positive rates are rejected."""
        with pytest.raises(ValueError):
            RateLimiter(rate)
