"""Base object store interface."""

from __future__ import annotations

from typing import Any, Protocol


class ObjectStore(Protocol):
    """Protocol defining the object store operations the reconciler relies on.

    Implementations raise :class:`~pubsub_channel_operator.exceptions.NotFoundError`
    for missing objects, :class:`~pubsub_channel_operator.exceptions.AlreadyExistsError`
    when a create collides with an existing name and
    :class:`~pubsub_channel_operator.exceptions.ConflictError` when a status
    write carries a stale resourceVersion.
    """

    def get(self, kind: str, namespace: str, name: str) -> dict[str, Any]:
        """Get an object by identity."""
        ...

    def list(self, kind: str, namespace: str, label_selector: str | None = None) -> list[dict[str, Any]]:
        """List objects of a kind in a namespace, optionally filtered by labels."""
        ...

    def create(self, obj: dict[str, Any]) -> dict[str, Any]:
        """Create an object and return the stored version."""
        ...

    def update_status(self, obj: dict[str, Any]) -> dict[str, Any]:
        """Replace the status subresource of an object.

        The write is conditional on the object's metadata.resourceVersion.
        """
        ...
