"""Channel reconciliation handlers and the watches feeding them."""

from __future__ import annotations

import copy
import logging
import os
from typing import Any

import kopf

from .. import metrics
from ..constants import (
    API_GROUP_VERSION,
    CONTROLLER_AGENT_NAME,
    KIND_CHANNEL,
    KIND_TOPIC,
    LABEL_CONTROLLER,
    PUBSUB_API_GROUP_VERSION,
)
from ..exceptions import ConflictError, StoreError
from ..utils.errors import sanitize_exception
from ..utils.keys import make_key

logger = logging.getLogger(__name__)


def owner_channel_key(obj: dict[str, Any]) -> str | None:
    """Key of the Channel controlling ``obj``, or None if no Channel controls it."""
    metadata = obj.get("metadata", {})
    for ref in metadata.get("ownerReferences") or []:
        if ref.get("controller") and ref.get("kind") == KIND_CHANNEL and ref.get("apiVersion") == API_GROUP_VERSION:
            return make_key(metadata.get("namespace", ""), ref.get("name", ""))
    return None


def reconcile_channel(memo: kopf.Memo, key: str) -> None:
    """Run one reconcile pass for ``key``.

    kopf serializes change handlers per object, but the drift timer and the
    Topic watch run alongside them, so passes for one key also take the
    key's lock.
    """
    with memo.locks.hold(key):
        memo.reconciler.reconcile(key)


@kopf.on.event(API_GROUP_VERSION, KIND_CHANNEL)
def handle_channel_event(event: dict[str, Any], memo: kopf.Memo, **kwargs: Any) -> None:
    """Keep the identity index in step with the Channel watch."""
    obj = event.get("object") or {}
    metadata = obj.get("metadata", {})

    if event.get("type") == "DELETED":
        memo.index.forget(KIND_CHANNEL, metadata.get("namespace", ""), metadata.get("name", ""))
    else:
        memo.index.observe(copy.deepcopy(obj))


@kopf.on.create(API_GROUP_VERSION, KIND_CHANNEL)
@kopf.on.update(API_GROUP_VERSION, KIND_CHANNEL)
@kopf.on.resume(API_GROUP_VERSION, KIND_CHANNEL)
@kopf.timer(API_GROUP_VERSION, KIND_CHANNEL, interval=float(os.getenv("DRIFT_CHECK_INTERVAL_SECONDS", "60")))
def handle_channel(name: str, namespace: str, memo: kopf.Memo, **kwargs: Any) -> None:
    """Handle Channel resource reconciliation.

    Store failures are handed back to kopf as temporary errors: status
    conflicts retry after ``CONFLICT_RETRY_DELAY_SECONDS``, other store errors
    after ``RETRY_DELAY_SECONDS``. Any other failure is retried with kopf's
    handler backoff.
    """
    key = make_key(namespace, name)
    try:
        reconcile_channel(memo, key)
    except ConflictError as e:
        metrics.requeue_total.labels(kind=KIND_CHANNEL, reason="conflict").inc()
        raise kopf.TemporaryError(
            f"Channel {key} was modified concurrently: {e}",
            delay=memo.config.conflict_retry_delay_seconds,
        ) from e
    except StoreError as e:
        metrics.requeue_total.labels(kind=KIND_CHANNEL, reason="store_error").inc()
        raise kopf.TemporaryError(
            f"Reconcile of Channel {key} failed: {sanitize_exception(e)}",
            delay=memo.config.retry_delay_seconds,
        ) from e


@kopf.on.event(PUBSUB_API_GROUP_VERSION, KIND_TOPIC, labels={LABEL_CONTROLLER: CONTROLLER_AGENT_NAME})
def handle_topic_event(event: dict[str, Any], memo: kopf.Memo, **kwargs: Any) -> None:
    """Reconcile the owning Channel whenever one of its Topics changes.

    Watch events are not retried; a failed pass is logged and left to the
    Channel's drift timer.
    """
    key = owner_channel_key(event.get("object") or {})
    if key is None:
        return
    logger.debug(f"Topic {event.get('type')} triggers reconcile of Channel {key}")
    try:
        reconcile_channel(memo, key)
    except StoreError as e:
        metrics.requeue_total.labels(kind=KIND_CHANNEL, reason="topic_event_failed").inc()
        logger.warning(f"Reconcile of Channel {key} after a Topic change failed: {sanitize_exception(e)}")
