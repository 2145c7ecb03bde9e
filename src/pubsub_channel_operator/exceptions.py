"""Exception hierarchy for the Pub/Sub Channel Operator.

Errors derived from :class:`StoreError` are transient: the Channel handler
hands them back to kopf as temporary errors, and the retry starts from a fresh
fetch. :class:`InvalidKeyError` is terminal for the delivery that carried the key.
"""

from __future__ import annotations


class OperatorError(Exception):
    """Base class for operator errors."""


class InvalidKeyError(OperatorError):
    """A reconcile key could not be split into namespace and name."""


class StoreError(OperatorError):
    """An object store call failed."""

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status


class NotFoundError(StoreError):
    """The requested object does not exist."""


class ConflictError(StoreError):
    """An optimistic-concurrency write was rejected as stale."""


class AlreadyExistsError(StoreError):
    """A create was rejected because an object with that name exists."""


class RateLimitedError(StoreError):
    """The store throttled the request."""
