"""Get-or-create of the Topic owned by a channel."""

from __future__ import annotations

import logging
from datetime import datetime
from functools import partial
from typing import Any

from ..builders.topic import TopicArgs, get_label_selector, get_labels, make_topic
from ..constants import COND_READY, CONTROLLER_AGENT_NAME, KIND_TOPIC, REASON_TOPIC_CREATED
from ..exceptions import AlreadyExistsError
from ..services.index import is_controlled_by
from ..tracing import trace_span
from ..utils.conditions import (
    get_condition,
    mark_no_topic,
    mark_topic_operating,
    mark_topic_ready,
    propagate_condition,
    set_address,
)
from ..utils.events import emit_topic_created
from .deps import ReconcilerDeps

logger = logging.getLogger(__name__)


class TopicEnsurer:
    """Ensures exactly one Topic exists for a channel and reflects its status."""

    def __init__(self, deps: ReconcilerDeps):
        self.deps = deps

    def get_topic(self, channel: dict[str, Any]) -> dict[str, Any] | None:
        """Return the Topic controlled by ``channel``, or None if there is none.

        Raises:
            StoreError: If listing topics failed
        """
        metadata = channel["metadata"]
        owned = self.deps.index.list_owned(
            KIND_TOPIC,
            metadata["namespace"],
            get_label_selector(CONTROLLER_AGENT_NAME, metadata["name"]),
            metadata.get("uid", ""),
        )
        if not owned:
            return None
        if len(owned) > 1:
            names = sorted(t.get("metadata", {}).get("name", "") for t in owned)
            logger.warning(f"Channel {metadata['namespace']}/{metadata['name']} owns {len(owned)} topics: {names}")
        return owned[0]

    def ensure(self, channel: dict[str, Any]) -> dict[str, Any]:
        """Return the channel's Topic, creating it if it does not exist.

        An existing Topic is reused as-is. A create that collides with a Topic
        this channel already controls adopts it.

        Args:
            channel: Private copy of the channel; ``status.topicId`` must be set

        Returns:
            The Topic resource

        Raises:
            StoreError: If a lookup or the create failed
        """
        return self._get_or_create(channel)[0]

    def _get_or_create(self, channel: dict[str, Any]) -> tuple[dict[str, Any], bool]:
        metadata = channel["metadata"]
        with trace_span("ensure_topic", kind=KIND_TOPIC, attributes={"channel.name": metadata["name"]}):
            topic = self.get_topic(channel)
            if topic is not None:
                logger.info(f"Reusing existing Topic {metadata['namespace']}/{topic['metadata']['name']}")
                return topic, False

            spec = channel.get("spec", {})
            manifest = make_topic(TopicArgs(
                owner=channel,
                project=spec.get("project"),
                secret=spec.get("secret"),
                topic=channel["status"]["topicId"],
                labels=get_labels(CONTROLLER_AGENT_NAME, metadata["name"]),
            ))

            try:
                topic = self.deps.store.create(manifest)
            except AlreadyExistsError:
                existing = self.deps.store.get(KIND_TOPIC, metadata["namespace"], manifest["metadata"]["name"])
                if not is_controlled_by(existing, metadata.get("uid", "")):
                    raise
                logger.info(f"Adopting existing Topic {metadata['namespace']}/{manifest['metadata']['name']}")
                return existing, False

            logger.info(f"Topic {metadata['namespace']}/{topic['metadata']['name']} created")
            emit_topic_created(self.deps.events, channel, topic["metadata"]["name"])
            return topic, True

    def reconcile(self, channel: dict[str, Any], now: datetime | None = None) -> dict[str, Any]:
        """Ensure the Topic and reflect its state on the channel status.

        A Topic created by this call has not reported readiness yet, so the
        channel's TopicReady condition is marked Unknown until it does.
        """
        topic, created = self._get_or_create(channel)
        if created and get_condition((topic.get("status") or {}).get("conditions") or [], COND_READY) is None:
            status = channel.setdefault("status", {})
            status["conditions"] = mark_topic_operating(
                status.setdefault("conditions", []),
                REASON_TOPIC_CREATED,
                "Topic created, waiting for it to become ready",
                now=now,
            )
        self.propagate_status(channel, topic, now)
        return topic

    def propagate_status(
        self,
        channel: dict[str, Any],
        topic: dict[str, Any],
        now: datetime | None = None,
    ) -> None:
        """Copy the Topic's readiness and address onto the channel status."""
        status = channel.setdefault("status", {})
        topic_status = topic.get("status") or {}

        status["conditions"] = propagate_condition(
            status.setdefault("conditions", []),
            get_condition(topic_status.get("conditions") or [], COND_READY),
            on_true=partial(mark_topic_ready, now=now),
            on_unknown=partial(mark_topic_operating, now=now),
            on_false=partial(mark_no_topic, now=now),
        )
        set_address(status, (topic_status.get("address") or {}).get("url"), now=now)
