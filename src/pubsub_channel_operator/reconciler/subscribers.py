"""Subscriber diffing and synchronization for channels."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable

from .. import metrics
from ..builders.subscription import SubscriptionArgs, generate_subscription_name, make_pull_subscription
from ..builders.topic import get_labels
from ..constants import CONTROLLER_AGENT_NAME
from ..tracing import trace_span
from .deps import SubscriptionActions

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubscriberDiff:
    """Disjoint create/update/delete partition of a channel's subscribers.

    ``create`` and ``update`` hold desired subscriber specs, ``delete`` holds
    subscriber status entries that are no longer desired.
    """

    create: tuple[dict[str, Any], ...] = ()
    update: tuple[dict[str, Any], ...] = ()
    delete: tuple[dict[str, Any], ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (self.create or self.update or self.delete)


def desired_subscribers(channel: dict[str, Any]) -> list[dict[str, Any]]:
    """Subscriber specs listed in the channel spec."""
    subscribable = channel.get("spec", {}).get("subscribable") or {}
    return list(subscribable.get("subscribers") or [])


def observed_subscribers(channel: dict[str, Any]) -> list[dict[str, Any]]:
    """Subscriber status entries recorded on the channel."""
    return list(channel.get("status", {}).get("subscribers") or [])


def _unique_by_uid(subscribers: Iterable[dict[str, Any]]) -> list[dict[str, Any]]:
    seen: set[str] = set()
    unique = []
    for sub in subscribers:
        uid = sub.get("uid")
        if not uid or uid in seen:
            continue
        seen.add(uid)
        unique.append(sub)
    return unique


def diff_subscribers(
    desired: Iterable[dict[str, Any]],
    observed: Iterable[dict[str, Any]],
) -> SubscriberDiff:
    """Partition subscribers into create, update and delete sets by UID.

    A desired subscriber missing from ``observed`` is created; one whose
    generation differs from the recorded ``observedGeneration`` is updated.
    Observed entries not claimed by any desired subscriber are deleted.
    Entries without a UID and repeated UIDs are ignored. Neither input is
    modified.

    Args:
        desired: Subscriber specs (``uid``, ``generation``)
        observed: Subscriber status entries (``uid``, ``observedGeneration``)

    Returns:
        SubscriberDiff with the three sets
    """
    exists = {sub["uid"]: sub for sub in _unique_by_uid(observed)}

    create = []
    update = []
    for want in _unique_by_uid(desired):
        got = exists.pop(want["uid"], None)
        if got is None:
            create.append(want)
        elif got.get("observedGeneration") != want.get("generation"):
            update.append(want)

    return SubscriberDiff(create=tuple(create), update=tuple(update), delete=tuple(exists.values()))


def subscriber_statuses(desired: Iterable[dict[str, Any]]) -> list[dict[str, Any]]:
    """Status entries recording the synced generation of each desired subscriber."""
    return [
        {"uid": sub["uid"], "observedGeneration": sub.get("generation")}
        for sub in _unique_by_uid(desired)
    ]


class LoggingSubscriptionActions:
    """Subscription actions that only log what would be done.

    ``create`` also previews the PullSubscription manifest it would submit,
    logged at debug level. Nothing is written to the cluster.
    """

    def _log(self, verb: str, channel: dict[str, Any], subscriber: dict[str, Any]) -> None:
        metadata = channel.get("metadata", {})
        name = generate_subscription_name(metadata.get("name", ""), subscriber["uid"])
        logger.info(f'Channel "{metadata.get("name")}" will {verb} subscription {name}')

    def create(self, channel: dict[str, Any], subscriber: dict[str, Any]) -> None:
        self._log("create", channel, subscriber)
        if not logger.isEnabledFor(logging.DEBUG):
            return

        metadata = channel.get("metadata", {})
        status = channel.get("status", {})
        spec = channel.get("spec", {})
        manifest = make_pull_subscription(SubscriptionArgs(
            owner=channel,
            name=generate_subscription_name(metadata.get("name", ""), subscriber["uid"]),
            topic=status.get("topicId", ""),
            project=spec.get("project"),
            secret=spec.get("secret"),
            subscriber_uri=subscriber.get("subscriberURI"),
            reply_uri=subscriber.get("replyURI"),
            labels=get_labels(CONTROLLER_AGENT_NAME, metadata.get("name", "")),
        ))
        logger.debug(f"PullSubscription manifest preview: {manifest}")

    def update(self, channel: dict[str, Any], subscriber: dict[str, Any]) -> None:
        self._log("update", channel, subscriber)

    def delete(self, channel: dict[str, Any], subscriber: dict[str, Any]) -> None:
        self._log("delete", channel, subscriber)


class SubscriberSync:
    """Drives a channel's subscriptions toward its subscriber list."""

    def __init__(self, actions: SubscriptionActions):
        self.actions = actions

    def sync(self, channel: dict[str, Any]) -> SubscriberDiff:
        """Apply the subscriber diff of ``channel`` and record the result in its status.

        ``channel`` must be a private copy; its ``status.subscribers`` is only
        rewritten after every action succeeded.

        Raises:
            Exception: Whatever a subscription action raised
        """
        desired = desired_subscribers(channel)
        diff = diff_subscribers(desired, observed_subscribers(channel))

        with trace_span("sync_subscribers", attributes={
            "subscribers.create": len(diff.create),
            "subscribers.update": len(diff.update),
            "subscribers.delete": len(diff.delete),
        }):
            for sub in diff.create:
                self.actions.create(channel, sub)
                metrics.subscriber_operations_total.labels(operation="create").inc()
            for sub in diff.update:
                self.actions.update(channel, sub)
                metrics.subscriber_operations_total.labels(operation="update").inc()
            for sub in diff.delete:
                self.actions.delete(channel, sub)
                metrics.subscriber_operations_total.labels(operation="delete").inc()

        channel.setdefault("status", {})["subscribers"] = subscriber_statuses(desired)
        return diff
