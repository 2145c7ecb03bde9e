"""Reconciliation engine for Channel resources."""

from .channel import ChannelReconciler
from .deps import ReconcilerDeps
from .status import StatusCommitter
from .subscribers import LoggingSubscriptionActions, SubscriberDiff, SubscriberSync, diff_subscribers
from .topic import TopicEnsurer

__all__ = [
    "ChannelReconciler",
    "LoggingSubscriptionActions",
    "ReconcilerDeps",
    "StatusCommitter",
    "SubscriberDiff",
    "SubscriberSync",
    "TopicEnsurer",
    "diff_subscribers",
]
