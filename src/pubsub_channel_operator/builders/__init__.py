"""Builders for the child resources owned by a Channel."""

from .subscription import SubscriptionArgs, generate_subscription_name, make_pull_subscription
from .topic import (
    TopicArgs,
    generate_topic_name,
    get_label_selector,
    get_labels,
    make_owner_reference,
    make_topic,
)

__all__ = [
    "SubscriptionArgs",
    "TopicArgs",
    "generate_subscription_name",
    "generate_topic_name",
    "get_label_selector",
    "get_labels",
    "make_owner_reference",
    "make_pull_subscription",
    "make_topic",
]
