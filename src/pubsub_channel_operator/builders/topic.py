"""Builder for Topic resources owned by a Channel."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..constants import (
    API_GROUP_VERSION,
    KIND_CHANNEL,
    KIND_TOPIC,
    LABEL_CHANNEL,
    LABEL_CONTROLLER,
    PUBSUB_API_GROUP_VERSION,
)


def generate_topic_name(channel_name: str, channel_uid: str) -> str:
    """Generate the topic identifier for a channel.

    The result depends only on the channel's name and UID, so it is stable for
    the lifetime of the channel.
    """
    return f"cre-chan-{channel_name}-{channel_uid}"


def get_labels(controller_agent_name: str, channel_name: str) -> dict[str, str]:
    """Labels put on every child resource of a channel."""
    return {
        LABEL_CONTROLLER: controller_agent_name,
        LABEL_CHANNEL: channel_name,
    }


def get_label_selector(controller_agent_name: str, channel_name: str) -> str:
    """Label selector matching the children created for a channel."""
    labels = get_labels(controller_agent_name, channel_name)
    return ",".join(f"{key}={value}" for key, value in sorted(labels.items()))


def make_owner_reference(owner: dict[str, Any]) -> dict[str, Any]:
    """Controller owner reference pointing at a channel."""
    metadata = owner.get("metadata", {})
    return {
        "apiVersion": owner.get("apiVersion", API_GROUP_VERSION),
        "kind": owner.get("kind", KIND_CHANNEL),
        "name": metadata.get("name"),
        "uid": metadata.get("uid"),
        "controller": True,
        "blockOwnerDeletion": True,
    }


@dataclass
class TopicArgs:
    """Arguments needed to build a Topic for a channel."""

    owner: dict[str, Any]
    project: str | None
    topic: str
    secret: dict[str, Any] | None = None
    labels: dict[str, str] = field(default_factory=dict)


def make_topic(args: TopicArgs) -> dict[str, Any]:
    """Generate (but do not create) the Topic resource for a channel.

    Args:
        args: Topic arguments

    Returns:
        Topic resource body
    """
    spec: dict[str, Any] = {"topic": args.topic}
    if args.project:
        spec["project"] = args.project
    if args.secret:
        spec["secret"] = dict(args.secret)

    return {
        "apiVersion": PUBSUB_API_GROUP_VERSION,
        "kind": KIND_TOPIC,
        "metadata": {
            "name": args.topic,
            "namespace": args.owner.get("metadata", {}).get("namespace"),
            "labels": dict(args.labels),
            "ownerReferences": [make_owner_reference(args.owner)],
        },
        "spec": spec,
    }
