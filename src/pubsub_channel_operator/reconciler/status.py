"""Optimistic-concurrency status persistence."""

from __future__ import annotations

import copy
import logging
from datetime import datetime, timezone
from typing import Any

from .. import metrics
from ..exceptions import ConflictError
from ..utils.conditions import is_ready
from .deps import ReconcilerDeps

logger = logging.getLogger(__name__)


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse a Kubernetes RFC 3339 timestamp such as ``2024-01-15T08:30:00Z``."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class StatusCommitter:
    """Writes a desired status onto the latest stored version of an object."""

    def __init__(self, deps: ReconcilerDeps):
        self.deps = deps

    def commit(self, desired: dict[str, Any]) -> dict[str, Any]:
        """Persist ``desired["status"]`` with a status-only update.

        The object is re-read from the store rather than the cache so the write
        carries the newest resourceVersion. Nothing is written when the stored
        status already equals the desired one.

        Args:
            desired: Object carrying the status to persist

        Returns:
            The stored object after the write (or the unchanged fresh read)

        Raises:
            ConflictError: If another writer updated the object first
            StoreError: If the read or the write failed
        """
        kind = desired["kind"]
        metadata = desired["metadata"]
        current = self.deps.store.get(kind, metadata["namespace"], metadata["name"])

        current_status = current.get("status") or {}
        desired_status = desired.get("status") or {}
        if current_status == desired_status:
            metrics.status_update_total.labels(kind=kind, result="unchanged").inc()
            return current

        becomes_ready = is_ready(desired_status.get("conditions") or []) and not is_ready(
            current_status.get("conditions") or []
        )

        existing = copy.deepcopy(current)
        existing["status"] = copy.deepcopy(desired_status)

        try:
            updated = self.deps.store.update_status(existing)
        except ConflictError:
            metrics.status_update_total.labels(kind=kind, result="conflict").inc()
            raise
        except Exception:
            metrics.status_update_total.labels(kind=kind, result="error").inc()
            raise
        metrics.status_update_total.labels(kind=kind, result="success").inc()

        if becomes_ready:
            self._report_ready(updated)
        return updated

    def _report_ready(self, obj: dict[str, Any]) -> None:
        metadata = obj.get("metadata", {})
        kind = obj.get("kind", "")
        namespace = metadata.get("namespace", "")
        name = metadata.get("name", "")

        created = parse_timestamp(metadata.get("creationTimestamp"))
        if created is None:
            logger.warning(f"{kind} {namespace}/{name} has no usable creationTimestamp, skipping ready latency")
            return

        duration = self.deps.clock() - created
        logger.info(f'{kind} "{name}" became ready after {duration}')
        try:
            self.deps.stats.report_ready(kind, namespace, name, duration)
        except Exception as e:
            logger.info(f"Failed to record ready for {kind}: {e}")
