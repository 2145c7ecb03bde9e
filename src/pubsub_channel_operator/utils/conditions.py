"""Utilities for managing Kubernetes conditions.

Channel status follows a living condition set: ``TopicReady`` and
``Addressable`` are dependents, and ``Ready`` is recomputed from them after
every change.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable

from ..constants import (
    COND_ADDRESSABLE,
    COND_READY,
    COND_TOPIC_READY,
    REASON_EMPTY_HOSTNAME,
)

CHANNEL_DEPENDENT_CONDITIONS = (COND_TOPIC_READY, COND_ADDRESSABLE)


class ConditionStatus(str, Enum):
    """Three-valued condition status."""

    TRUE = "True"
    FALSE = "False"
    UNKNOWN = "Unknown"


def _timestamp(now: datetime | None) -> str:
    return (now or datetime.now(timezone.utc)).isoformat()


def get_condition(conditions: list[dict[str, Any]], condition_type: str) -> dict[str, Any] | None:
    """Return the condition of the given type, or None if absent."""
    for cond in conditions:
        if cond.get("type") == condition_type:
            return cond
    return None


def condition_status(condition: dict[str, Any]) -> ConditionStatus:
    """Parse a condition's status; anything unrecognized counts as Unknown."""
    try:
        return ConditionStatus(condition.get("status"))
    except ValueError:
        return ConditionStatus.UNKNOWN


def update_condition(
    conditions: list[dict[str, Any]],
    condition_type: str,
    status: str,
    reason: str,
    message: str,
    observed_generation: int | None = None,
    now: datetime | None = None,
) -> list[dict[str, Any]]:
    """Update or add a condition to the conditions list.

    Args:
        conditions: List of existing conditions
        condition_type: Type of condition
        status: Status of condition ("True", "False", "Unknown")
        reason: Reason for the condition
        message: Human-readable message
        observed_generation: Generation when condition was observed
        now: Transition time to record (defaults to the current UTC time)

    Returns:
        Updated list of conditions
    """
    status = ConditionStatus(status).value
    timestamp = _timestamp(now)

    existing_idx = None
    for idx, cond in enumerate(conditions):
        if cond.get("type") == condition_type:
            existing_idx = idx
            break

    new_condition = {
        "type": condition_type,
        "status": status,
        "reason": reason,
        "message": message,
        "lastTransitionTime": timestamp,
    }

    if observed_generation is not None:
        new_condition["observedGeneration"] = observed_generation

    if existing_idx is not None:
        existing = conditions[existing_idx]
        # Only update lastTransitionTime if status changed
        if existing.get("status") == status:
            new_condition["lastTransitionTime"] = existing.get("lastTransitionTime", timestamp)
        conditions[existing_idx] = new_condition
    else:
        conditions.append(new_condition)

    return conditions


def recompute_ready(conditions: list[dict[str, Any]], now: datetime | None = None) -> list[dict[str, Any]]:
    """Derive the Ready condition from the channel's dependent conditions.

    The first False dependent makes Ready False, otherwise the first Unknown
    dependent makes it Unknown; Ready is True only when every dependent is.
    """
    unknown: dict[str, Any] | None = None
    for condition_type in CHANNEL_DEPENDENT_CONDITIONS:
        cond = get_condition(conditions, condition_type)
        if cond is None:
            status = ConditionStatus.UNKNOWN
            cond = {"reason": "Initializing", "message": ""}
        else:
            status = condition_status(cond)

        if status is ConditionStatus.FALSE:
            return update_condition(
                conditions, COND_READY, status.value, cond.get("reason", ""), cond.get("message", ""), now=now
            )
        if status is ConditionStatus.UNKNOWN and unknown is None:
            unknown = cond

    if unknown is not None:
        return update_condition(
            conditions,
            COND_READY,
            ConditionStatus.UNKNOWN.value,
            unknown.get("reason", ""),
            unknown.get("message", ""),
            now=now,
        )
    return update_condition(conditions, COND_READY, ConditionStatus.TRUE.value, "Ready", "Channel is ready", now=now)


def initialize_channel_conditions(
    conditions: list[dict[str, Any]],
    now: datetime | None = None,
) -> list[dict[str, Any]]:
    """Set every absent channel condition to Unknown; present ones are kept."""
    for condition_type in (*CHANNEL_DEPENDENT_CONDITIONS, COND_READY):
        if get_condition(conditions, condition_type) is None:
            update_condition(
                conditions,
                condition_type,
                ConditionStatus.UNKNOWN.value,
                "Initializing",
                "Waiting for reconciliation",
                now=now,
            )
    return conditions


def is_ready(conditions: list[dict[str, Any]]) -> bool:
    """Whether the Ready condition is True."""
    cond = get_condition(conditions, COND_READY)
    return cond is not None and condition_status(cond) is ConditionStatus.TRUE


def mark_topic_ready(conditions: list[dict[str, Any]], now: datetime | None = None) -> list[dict[str, Any]]:
    """Set TopicReady True."""
    update_condition(conditions, COND_TOPIC_READY, "True", "TopicReady", "Topic is ready", now=now)
    return recompute_ready(conditions, now)


def mark_topic_operating(
    conditions: list[dict[str, Any]],
    reason: str,
    message: str,
    now: datetime | None = None,
) -> list[dict[str, Any]]:
    """Set TopicReady Unknown while the topic is still converging."""
    update_condition(conditions, COND_TOPIC_READY, "Unknown", reason, message, now=now)
    return recompute_ready(conditions, now)


def mark_no_topic(
    conditions: list[dict[str, Any]],
    reason: str,
    message: str,
    now: datetime | None = None,
) -> list[dict[str, Any]]:
    """Set TopicReady False."""
    update_condition(conditions, COND_TOPIC_READY, "False", reason, message, now=now)
    return recompute_ready(conditions, now)


def set_address(status: dict[str, Any], url: str | None, now: datetime | None = None) -> dict[str, Any]:
    """Record the channel address and the matching Addressable condition.

    Args:
        status: Channel status block, mutated in place
        url: Address URL, or None to clear it
        now: Transition time to record

    Returns:
        The status block
    """
    conditions = status.setdefault("conditions", [])
    if url:
        status["address"] = {"url": url}
        update_condition(conditions, COND_ADDRESSABLE, "True", "AddressResolved", "", now=now)
    else:
        status.pop("address", None)
        update_condition(
            conditions,
            COND_ADDRESSABLE,
            "False",
            REASON_EMPTY_HOSTNAME,
            "hostname is the empty string",
            now=now,
        )
    recompute_ready(conditions, now)
    return status


def propagate_condition(
    parent_conditions: list[dict[str, Any]],
    child_condition: dict[str, Any] | None,
    on_true: Callable[[list[dict[str, Any]]], list[dict[str, Any]]],
    on_unknown: Callable[[list[dict[str, Any]], str, str], list[dict[str, Any]]],
    on_false: Callable[[list[dict[str, Any]], str, str], list[dict[str, Any]]],
) -> list[dict[str, Any]]:
    """Map an owned child's condition onto the parent's conditions.

    ``True`` calls ``on_true``; ``Unknown`` and ``False`` call their handler
    with the child's reason and message. An absent child condition leaves the
    parent conditions untouched.

    Args:
        parent_conditions: Parent condition list
        child_condition: The child's condition (e.g. its Ready condition)
        on_true: Mark applied when the child condition is True
        on_unknown: Mark applied when the child condition is Unknown
        on_false: Mark applied when the child condition is False

    Returns:
        Updated parent conditions
    """
    if child_condition is None:
        return parent_conditions

    status = condition_status(child_condition)
    reason = child_condition.get("reason", "")
    message = child_condition.get("message", "")

    if status is ConditionStatus.TRUE:
        return on_true(parent_conditions)
    if status is ConditionStatus.FALSE:
        return on_false(parent_conditions, reason, message)
    return on_unknown(parent_conditions, reason, message)
