"""Reconciler for Channel resources."""

from __future__ import annotations

import copy
from typing import Any

from ..builders.topic import generate_topic_name
from ..constants import KIND_CHANNEL, REASON_FAILED_CREATE
from ..exceptions import InvalidKeyError, NotFoundError
from ..tracing import trace_span
from ..utils.conditions import initialize_channel_conditions, mark_no_topic
from ..utils.events import emit_channel_updated, emit_internal_error, emit_update_failed
from ..utils.keys import split_key
from .base import BaseReconciler
from .deps import ReconcilerDeps
from .status import StatusCommitter
from .subscribers import SubscriberSync
from .topic import TopicEnsurer


class ChannelReconciler(BaseReconciler):
    """Drives Channel resources toward their spec.

    A pass fetches the channel, works on a private copy, ensures its Topic,
    syncs its subscribers and writes back any status change, even when a
    step failed. Callers must not run two passes for the same key at once.
    """

    def __init__(self, deps: ReconcilerDeps):
        super().__init__(KIND_CHANNEL)
        self.deps = deps
        self.topics = TopicEnsurer(deps)
        self.subscribers = SubscriberSync(deps.subscriptions)
        self.committer = StatusCommitter(deps)

    def reconcile(self, key: str) -> None:
        """Reconcile the channel identified by ``key``.

        Malformed keys, channels that no longer exist and channels being
        deleted are dropped without error.

        Args:
            key: ``namespace/name`` of the channel

        Raises:
            Exception: Any convergence or status write error; the caller
                retries the key after a delay
        """
        try:
            namespace, name = split_key(key)
        except InvalidKeyError:
            self.logger.error(f"invalid resource key: {key}")
            return

        try:
            original = self.deps.index.get(KIND_CHANNEL, namespace, name)
        except NotFoundError:
            self.logger.info(f'Channel "{key}" no longer exists')
            return

        if original.get("metadata", {}).get("deletionTimestamp"):
            return

        with trace_span("reconcile_channel", kind=KIND_CHANNEL, attributes={"channel.key": key}):
            self.reconcile_with_metrics(lambda: self._reconcile_object(original))

    def _reconcile_object(self, original: dict[str, Any]) -> None:
        # The fetched object may be shared with other readers of the index
        channel = copy.deepcopy(original)
        if not channel.get("status"):
            channel["status"] = {}

        reconcile_error: Exception | None = None
        try:
            self._reconcile(channel)
        except Exception as e:
            reconcile_error = e

        if reconcile_error is None:
            channel["status"]["observedGeneration"] = channel["metadata"].get("generation")

        if (original.get("status") or {}) != channel["status"]:
            try:
                self.committer.commit(channel)
            except Exception as e:
                self.log_warning(
                    channel, "Failed to update Channel status", reason="UpdateFailed", error_type=type(e).__name__
                )
                emit_update_failed(self.deps.events, channel, e)
                raise
            if reconcile_error is None:
                emit_channel_updated(self.deps.events, channel)

        if reconcile_error is not None:
            self.log_error(channel, "Reconciliation failed", error=reconcile_error, reason="InternalError")
            emit_internal_error(self.deps.events, channel, reconcile_error)
            raise reconcile_error

    def _reconcile(self, channel: dict[str, Any]) -> None:
        metadata = channel["metadata"]
        status = channel["status"]
        now = self.deps.clock()

        status["conditions"] = initialize_channel_conditions(status.get("conditions") or [], now)

        if not status.get("topicId"):
            status["topicId"] = generate_topic_name(metadata["name"], metadata.get("uid", ""))

        try:
            self.topics.reconcile(channel, now)
        except Exception:
            status["conditions"] = mark_no_topic(
                status["conditions"], REASON_FAILED_CREATE, "Error when attempting to create Topic.", now
            )
            raise

        self.subscribers.sync(channel)
