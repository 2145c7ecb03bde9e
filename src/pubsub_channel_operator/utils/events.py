"""Utilities for emitting Kubernetes events."""

from __future__ import annotations

import logging
from typing import Any

import kopf

from ..constants import (
    EVENT_REASON_INTERNAL_ERROR,
    EVENT_REASON_TOPIC_CREATED,
    EVENT_REASON_UPDATE_FAILED,
    EVENT_REASON_UPDATED,
    EVENT_TYPE_NORMAL,
    EVENT_TYPE_WARNING,
)
from .errors import sanitize_error_message

logger = logging.getLogger(__name__)


def emit_event(
    body: dict[str, Any],
    reason: str,
    message: str,
    type_: str = EVENT_TYPE_NORMAL,
) -> None:
    """Emit a Kubernetes event.

    Args:
        body: Resource body the event refers to
        reason: Event reason
        message: Event message
        type_: Event type (Normal or Warning)
    """
    kopf.event(
        body,
        reason=reason,
        message=sanitize_error_message(message),
        type=type_,
    )


class KopfEventSink:
    """Event sink posting through kopf; delivery is best-effort."""

    def record_event(self, obj: dict[str, Any], type_: str, reason: str, message: str) -> None:
        """Record an event, logging instead of raising on failure."""
        try:
            emit_event(obj, reason, message, type_=type_)
        except Exception as e:
            metadata = obj.get("metadata", {})
            logger.warning(
                f"Failed to emit {reason} event for {metadata.get('namespace')}/{metadata.get('name')}: {e}"
            )


def emit_topic_created(sink: Any, channel: dict[str, Any], topic_name: str) -> None:
    """Emit topic created event."""
    sink.record_event(channel, EVENT_TYPE_NORMAL, EVENT_REASON_TOPIC_CREATED, f'Created Topic "{topic_name}"')


def emit_channel_updated(sink: Any, channel: dict[str, Any]) -> None:
    """Emit channel status updated event."""
    name = channel.get("metadata", {}).get("name")
    sink.record_event(channel, EVENT_TYPE_NORMAL, EVENT_REASON_UPDATED, f'Updated Channel "{name}"')


def emit_update_failed(sink: Any, channel: dict[str, Any], error: Exception) -> None:
    """Emit status update failed event."""
    name = channel.get("metadata", {}).get("name")
    sink.record_event(
        channel,
        EVENT_TYPE_WARNING,
        EVENT_REASON_UPDATE_FAILED,
        f'Failed to update status for Channel "{name}": {error}',
    )


def emit_internal_error(sink: Any, channel: dict[str, Any], error: Exception) -> None:
    """Emit reconcile failure event."""
    sink.record_event(channel, EVENT_TYPE_WARNING, EVENT_REASON_INTERNAL_ERROR, str(error))
