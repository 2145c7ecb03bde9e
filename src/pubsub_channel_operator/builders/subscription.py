"""Builder for PullSubscription resources owned by a Channel."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..constants import KIND_PULL_SUBSCRIPTION, PUBSUB_API_GROUP_VERSION
from .topic import make_owner_reference


def generate_subscription_name(channel_name: str, subscriber_uid: str) -> str:
    """Generate the PullSubscription name for one subscriber of a channel."""
    return f"cre-sub-{channel_name}-{subscriber_uid}"


@dataclass
class SubscriptionArgs:
    """Arguments needed to build a PullSubscription for a subscriber."""

    owner: dict[str, Any]
    name: str
    topic: str
    project: str | None = None
    secret: dict[str, Any] | None = None
    subscriber_uri: str | None = None
    reply_uri: str | None = None
    labels: dict[str, str] = field(default_factory=dict)


def make_pull_subscription(args: SubscriptionArgs) -> dict[str, Any]:
    """Generate (but do not create) a PullSubscription for a subscriber."""
    spec: dict[str, Any] = {"topic": args.topic}
    if args.project:
        spec["project"] = args.project
    if args.secret:
        spec["secret"] = dict(args.secret)
    if args.subscriber_uri:
        spec["sink"] = {"uri": args.subscriber_uri}
    if args.reply_uri:
        spec["transformer"] = {"uri": args.reply_uri}

    return {
        "apiVersion": PUBSUB_API_GROUP_VERSION,
        "kind": KIND_PULL_SUBSCRIPTION,
        "metadata": {
            "name": args.name,
            "namespace": args.owner.get("metadata", {}).get("namespace"),
            "labels": dict(args.labels),
            "ownerReferences": [make_owner_reference(args.owner)],
        },
        "spec": spec,
    }
