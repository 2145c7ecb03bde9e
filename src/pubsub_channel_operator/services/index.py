"""Cached identity lookups over the object store."""

from __future__ import annotations

import logging
from typing import Any

from .. import metrics
from ..utils.cache import ObjectCache, make_cache_key
from .store.base import ObjectStore

logger = logging.getLogger(__name__)


def is_controlled_by(child: dict[str, Any], parent_uid: str) -> bool:
    """Whether ``child`` has a controller owner reference to ``parent_uid``."""
    if not parent_uid:
        return False
    for ref in child.get("metadata", {}).get("ownerReferences") or []:
        if ref.get("controller") and ref.get("uid") == parent_uid:
            return True
    return False


class IdentityIndex:
    """Read-through cache of objects keyed by kind, namespace and name.

    Objects handed out may be shared between workers and must not be
    mutated; snapshot them first. Only the watch layer feeds the cache via
    :meth:`observe`.
    """

    def __init__(self, store: ObjectStore, cache: ObjectCache | None = None):
        self.store = store
        self.cache = cache if cache is not None else ObjectCache()

    def observe(self, obj: dict[str, Any]) -> None:
        """Record the latest version of an object delivered by a watch."""
        metadata = obj.get("metadata", {})
        key = make_cache_key(obj.get("kind", ""), metadata.get("namespace", ""), metadata.get("name", ""))
        self.cache.set(key, obj)

    def forget(self, kind: str, namespace: str, name: str) -> None:
        """Drop a cached object, e.g. after the watch reported its deletion."""
        self.cache.invalidate(make_cache_key(kind, namespace, name))

    def get(self, kind: str, namespace: str, name: str) -> dict[str, Any]:
        """Get an object, preferring the watch-fed cache.

        Raises:
            NotFoundError: If the object is neither cached nor in the store
        """
        cache_key = make_cache_key(kind, namespace, name)
        cached = self.cache.get(cache_key)
        if cached is not None:
            metrics.api_call_total.labels(api_type="k8s", operation=f"get_{kind.lower()}", result="cache_hit").inc()
            return cached

        return self.store.get(kind, namespace, name)

    def list_owned(
        self,
        kind: str,
        namespace: str,
        label_selector: str,
        owner_uid: str,
    ) -> list[dict[str, Any]]:
        """List objects of ``kind`` selected by labels and controlled by ``owner_uid``.

        This scans every labelled object of the kind in the namespace; owned
        child counts are small.
        """
        candidates = self.store.list(kind, namespace, label_selector)
        owned = [obj for obj in candidates if is_controlled_by(obj, owner_uid)]
        logger.debug(
            f"Found {len(owned)} of {len(candidates)} {kind} objects in {namespace} owned by {owner_uid}"
        )
        return owned
