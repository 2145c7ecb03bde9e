"""Collaborators handed to the reconciler."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Protocol

from ..services.index import IdentityIndex
from ..services.store.base import ObjectStore


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class EventSink(Protocol):
    """Records Kubernetes events; failures must not raise."""

    def record_event(self, obj: dict[str, Any], type_: str, reason: str, message: str) -> None:
        ...


class StatsReporter(Protocol):
    """Receives readiness latency measurements."""

    def report_ready(self, kind: str, namespace: str, name: str, duration: timedelta) -> None:
        ...


class SubscriptionActions(Protocol):
    """Child resource operations for channel subscribers."""

    def create(self, channel: dict[str, Any], subscriber: dict[str, Any]) -> None:
        ...

    def update(self, channel: dict[str, Any], subscriber: dict[str, Any]) -> None:
        ...

    def delete(self, channel: dict[str, Any], subscriber: dict[str, Any]) -> None:
        ...


@dataclass
class ReconcilerDeps:
    """Everything a reconcile pass talks to, built once at startup."""

    store: ObjectStore
    index: IdentityIndex
    events: EventSink
    stats: StatsReporter
    subscriptions: SubscriptionActions
    clock: Callable[[], datetime] = field(default=utc_now)
