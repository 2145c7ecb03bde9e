"""Shared fakes and fixtures for the unit tests."""

from __future__ import annotations

import copy
from datetime import datetime, timedelta, timezone
from typing import Any, Callable

import pytest

from pubsub_channel_operator.constants import API_GROUP_VERSION, KIND_CHANNEL
from pubsub_channel_operator.exceptions import AlreadyExistsError, ConflictError, NotFoundError
from pubsub_channel_operator.reconciler import ChannelReconciler, ReconcilerDeps
from pubsub_channel_operator.services.index import IdentityIndex

NOW = datetime(2024, 1, 15, 8, 0, 30, tzinfo=timezone.utc)


class FakeObjectStore:
    """In-memory object store with resourceVersion checks on status writes."""

    def __init__(self) -> None:
        self.objects: dict[tuple[str, str, str], dict[str, Any]] = {}
        self.created: list[dict[str, Any]] = []
        self.status_writes: list[dict[str, Any]] = []
        self.errors: dict[str, list[Exception]] = {}
        self.before_update_status: Callable[[], None] | None = None
        self._version = 0

    def _next_version(self) -> str:
        self._version += 1
        return str(self._version)

    def _raise_injected(self, method: str) -> None:
        pending = self.errors.get(method)
        if pending:
            raise pending.pop(0)

    def fail_next(self, method: str, error: Exception) -> None:
        self.errors.setdefault(method, []).append(error)

    def add(self, obj: dict[str, Any]) -> dict[str, Any]:
        stored = copy.deepcopy(obj)
        metadata = stored["metadata"]
        metadata.setdefault("resourceVersion", self._next_version())
        self.objects[(stored["kind"], metadata["namespace"], metadata["name"])] = stored
        return copy.deepcopy(stored)

    def get(self, kind: str, namespace: str, name: str) -> dict[str, Any]:
        self._raise_injected("get")
        try:
            return copy.deepcopy(self.objects[(kind, namespace, name)])
        except KeyError:
            raise NotFoundError(f"{kind} {namespace}/{name} not found", status=404) from None

    def list(self, kind: str, namespace: str, label_selector: str | None = None) -> list[dict[str, Any]]:
        self._raise_injected("list")
        wanted = dict(part.split("=", 1) for part in label_selector.split(",")) if label_selector else {}
        items = []
        for (obj_kind, obj_namespace, _), obj in self.objects.items():
            if obj_kind != kind or obj_namespace != namespace:
                continue
            labels = obj["metadata"].get("labels") or {}
            if all(labels.get(key) == value for key, value in wanted.items()):
                items.append(copy.deepcopy(obj))
        return items

    def create(self, obj: dict[str, Any]) -> dict[str, Any]:
        self._raise_injected("create")
        metadata = obj["metadata"]
        if (obj["kind"], metadata["namespace"], metadata["name"]) in self.objects:
            raise AlreadyExistsError(f"{obj['kind']} {metadata['name']} already exists", status=409)
        self.created.append(copy.deepcopy(obj))
        return self.add(obj)

    def update_status(self, obj: dict[str, Any]) -> dict[str, Any]:
        if self.before_update_status is not None:
            self.before_update_status()
        self._raise_injected("update_status")
        metadata = obj["metadata"]
        key = (obj["kind"], metadata["namespace"], metadata["name"])
        if key not in self.objects:
            raise NotFoundError(f"{obj['kind']} {metadata['name']} not found", status=404)
        stored = self.objects[key]
        if stored["metadata"].get("resourceVersion") != metadata.get("resourceVersion"):
            raise ConflictError("the object has been modified", status=409)

        stored["status"] = copy.deepcopy(obj.get("status"))
        stored["metadata"]["resourceVersion"] = self._next_version()
        self.status_writes.append(copy.deepcopy(stored))
        return copy.deepcopy(stored)

    def bump(self, kind: str, namespace: str, name: str) -> None:
        """Simulate another writer updating the stored object."""
        self.objects[(kind, namespace, name)]["metadata"]["resourceVersion"] = self._next_version()


class RecordingEventSink:
    def __init__(self) -> None:
        self.events: list[tuple[str, str, str]] = []

    def record_event(self, obj: dict[str, Any], type_: str, reason: str, message: str) -> None:
        self.events.append((type_, reason, message))

    @property
    def reasons(self) -> list[str]:
        return [reason for _, reason, _ in self.events]


class RecordingStatsReporter:
    def __init__(self, error: Exception | None = None) -> None:
        self.reports: list[tuple[str, str, str, timedelta]] = []
        self.error = error

    def report_ready(self, kind: str, namespace: str, name: str, duration: timedelta) -> None:
        if self.error is not None:
            raise self.error
        self.reports.append((kind, namespace, name, duration))


class RecordingSubscriptionActions:
    def __init__(self) -> None:
        self.calls: list[tuple[str, str]] = []
        self.fail_on: dict[str, Exception] = {}

    def _record(self, verb: str, subscriber: dict[str, Any]) -> None:
        if verb in self.fail_on:
            raise self.fail_on[verb]
        self.calls.append((verb, subscriber["uid"]))

    def create(self, channel: dict[str, Any], subscriber: dict[str, Any]) -> None:
        self._record("create", subscriber)

    def update(self, channel: dict[str, Any], subscriber: dict[str, Any]) -> None:
        self._record("update", subscriber)

    def delete(self, channel: dict[str, Any], subscriber: dict[str, Any]) -> None:
        self._record("delete", subscriber)


def make_channel(
    name: str = "my-channel",
    namespace: str = "default",
    uid: str = "uid-1",
    generation: int = 1,
    subscribers: list[dict[str, Any]] | None = None,
    status: dict[str, Any] | None = None,
    **metadata: Any,
) -> dict[str, Any]:
    channel: dict[str, Any] = {
        "apiVersion": API_GROUP_VERSION,
        "kind": KIND_CHANNEL,
        "metadata": {
            "name": name,
            "namespace": namespace,
            "uid": uid,
            "generation": generation,
            "creationTimestamp": "2024-01-15T08:00:00Z",
            **metadata,
        },
        "spec": {
            "project": "my-project",
            "subscribable": {"subscribers": list(subscribers or [])},
        },
    }
    if status is not None:
        channel["status"] = status
    return channel


@pytest.fixture
def store() -> FakeObjectStore:
    return FakeObjectStore()


@pytest.fixture
def events() -> RecordingEventSink:
    return RecordingEventSink()


@pytest.fixture
def stats() -> RecordingStatsReporter:
    return RecordingStatsReporter()


@pytest.fixture
def actions() -> RecordingSubscriptionActions:
    return RecordingSubscriptionActions()


@pytest.fixture
def deps(store, events, stats, actions) -> ReconcilerDeps:
    return ReconcilerDeps(
        store=store,
        index=IdentityIndex(store),
        events=events,
        stats=stats,
        subscriptions=actions,
        clock=lambda: NOW,
    )


@pytest.fixture
def reconciler(deps) -> ChannelReconciler:
    return ChannelReconciler(deps)
