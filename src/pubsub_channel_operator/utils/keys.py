"""Reconcile key helpers."""

from __future__ import annotations

from ..exceptions import InvalidKeyError


def make_key(namespace: str, name: str) -> str:
    """Build a ``namespace/name`` reconcile key (``name`` for cluster scope)."""
    if not namespace:
        return name
    return f"{namespace}/{name}"


def split_key(key: str) -> tuple[str, str]:
    """Split a reconcile key into namespace and name.

    Args:
        key: Key of the form ``namespace/name`` or ``name``

    Returns:
        Tuple of (namespace, name); namespace is empty for cluster-scoped keys

    Raises:
        InvalidKeyError: If the key has more than two parts or an empty name
    """
    parts = key.split("/")
    if len(parts) == 1:
        namespace, name = "", parts[0]
    elif len(parts) == 2:
        namespace, name = parts
    else:
        raise InvalidKeyError(f"unexpected key format: {key!r}")

    if not name:
        raise InvalidKeyError(f"unexpected key format: {key!r}")
    return namespace, name
