"""Tests for per-key locking."""

from __future__ import annotations

import threading

import pytest

from pubsub_channel_operator.utils.locks import KeyedLock


class TestKeyedLock:
    """Test cases for KeyedLock."""

    def test_same_key_is_exclusive(self):
        """Test a second holder of a key waits for the first to release it."""
        locks = KeyedLock()
        entered = threading.Event()

        def enter():
            with locks.hold("default/a"):
                entered.set()

        with locks.hold("default/a"):
            waiter = threading.Thread(target=enter)
            waiter.start()
            assert not entered.wait(timeout=0.1)

        assert entered.wait(timeout=5)
        waiter.join(timeout=5)

    def test_distinct_keys_do_not_block(self):
        """Test different keys can be held at the same time."""
        locks = KeyedLock()

        with locks.hold("default/a"):
            with locks.hold("default/b"):
                assert len(locks) == 2

    def test_unused_locks_are_dropped(self):
        """Test a key's lock is discarded once nobody holds it."""
        locks = KeyedLock()

        with locks.hold("default/a"):
            assert len(locks) == 1

        assert len(locks) == 0

    def test_released_on_error(self):
        """Test the key is released when the body raises."""
        locks = KeyedLock()

        with pytest.raises(RuntimeError):
            with locks.hold("default/a"):
                raise RuntimeError("boom")

        assert len(locks) == 0
        with locks.hold("default/a"):
            pass
