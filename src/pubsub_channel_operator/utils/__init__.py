"""Utility functions for the Pub/Sub Channel Operator."""

from .cache import ObjectCache, make_cache_key
from .conditions import (
    ConditionStatus,
    get_condition,
    initialize_channel_conditions,
    is_ready,
    mark_no_topic,
    mark_topic_operating,
    mark_topic_ready,
    propagate_condition,
    set_address,
    update_condition,
)
from .errors import sanitize_dict, sanitize_error_message, sanitize_exception
from .events import KopfEventSink, emit_event
from .keys import make_key, split_key
from .locks import KeyedLock
from .rate_limit import RateLimiter

__all__ = [
    "ConditionStatus",
    "get_condition",
    "initialize_channel_conditions",
    "is_ready",
    "mark_no_topic",
    "mark_topic_operating",
    "mark_topic_ready",
    "propagate_condition",
    "set_address",
    "update_condition",
    "ObjectCache",
    "make_cache_key",
    "sanitize_dict",
    "sanitize_error_message",
    "sanitize_exception",
    "KopfEventSink",
    "emit_event",
    "make_key",
    "split_key",
    "KeyedLock",
    "RateLimiter",
]
