"""Object store implementation on the Kubernetes custom objects API."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable

from kubernetes import client
from kubernetes.client.exceptions import ApiException

from ... import metrics
from ...constants import (
    API_GROUP,
    API_VERSION,
    KIND_CHANNEL,
    KIND_PULL_SUBSCRIPTION,
    KIND_TOPIC,
    PLURAL_CHANNELS,
    PLURAL_PULL_SUBSCRIPTIONS,
    PLURAL_TOPICS,
    PUBSUB_API_GROUP,
)
from ...exceptions import (
    AlreadyExistsError,
    ConflictError,
    NotFoundError,
    RateLimitedError,
    StoreError,
)
from ...utils.rate_limit import RateLimiter

logger = logging.getLogger(__name__)

# kind -> (group, version, plural)
RESOURCES: dict[str, tuple[str, str, str]] = {
    KIND_CHANNEL: (API_GROUP, API_VERSION, PLURAL_CHANNELS),
    KIND_TOPIC: (PUBSUB_API_GROUP, API_VERSION, PLURAL_TOPICS),
    KIND_PULL_SUBSCRIPTION: (PUBSUB_API_GROUP, API_VERSION, PLURAL_PULL_SUBSCRIPTIONS),
}


def get_k8s_client() -> client.CustomObjectsApi:
    """Get Kubernetes CustomObjectsApi client.

    Returns:
        CustomObjectsApi instance
    """
    from kubernetes import config

    try:
        config.load_incluster_config()
    except config.ConfigException:
        config.load_kube_config()

    return client.CustomObjectsApi()


def translate_api_exception(e: ApiException, operation: str) -> StoreError:
    """Map an ApiException onto the operator's store errors.

    Args:
        e: Exception raised by the kubernetes client
        operation: Operation that failed ("get", "list", "create", "update_status")

    Returns:
        The matching StoreError subclass instance
    """
    message = f"{operation} failed: {e.status} {e.reason}"
    if e.status == 404:
        return NotFoundError(message, status=e.status)
    if e.status == 409:
        if operation == "create":
            return AlreadyExistsError(message, status=e.status)
        return ConflictError(message, status=e.status)
    if e.status == 429:
        return RateLimitedError(message, status=e.status)
    return StoreError(message, status=e.status)


class KubernetesObjectStore:
    """Object store on top of ``CustomObjectsApi``."""

    def __init__(
        self,
        api: Any,
        rate_limiter: RateLimiter | None = None,
        request_timeout: float | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            api: Kubernetes CustomObjectsApi instance
            rate_limiter: Limiter shared by all calls made through this store
            request_timeout: Per-request timeout in seconds passed to the client
        """
        self.api = api
        self.rate_limiter = rate_limiter
        self.request_timeout = request_timeout

    def _call(self, verb: str, plural: str, func: Callable[..., Any], /, **kwargs: Any) -> Any:
        operation = f"{verb}_{plural}"
        if self.rate_limiter is not None:
            func = self.rate_limiter(func)
        if self.request_timeout is not None:
            kwargs["_request_timeout"] = self.request_timeout

        start_time = time.time()
        try:
            result = func(**kwargs)
            metrics.api_call_total.labels(api_type="k8s", operation=operation, result="success").inc()
            return result
        except ApiException as e:
            metrics.api_call_total.labels(api_type="k8s", operation=operation, result="error").inc()
            if e.status == 429:
                metrics.rate_limit_hits_total.labels(api_type="k8s").inc()
            raise translate_api_exception(e, verb) from e
        finally:
            duration = time.time() - start_time
            metrics.api_call_duration_seconds.labels(api_type="k8s", operation=operation).observe(duration)

    @staticmethod
    def _resource(kind: str) -> tuple[str, str, str]:
        try:
            return RESOURCES[kind]
        except KeyError:
            raise ValueError(f"unsupported kind: {kind}") from None

    def get(self, kind: str, namespace: str, name: str) -> dict[str, Any]:
        """Get an object by identity."""
        group, version, plural = self._resource(kind)
        return self._call(
            "get",
            plural,
            self.api.get_namespaced_custom_object,
            group=group,
            version=version,
            namespace=namespace,
            plural=plural,
            name=name,
        )

    def list(self, kind: str, namespace: str, label_selector: str | None = None) -> list[dict[str, Any]]:
        """List objects of a kind in a namespace."""
        group, version, plural = self._resource(kind)
        kwargs: dict[str, Any] = {}
        if label_selector:
            kwargs["label_selector"] = label_selector
        response = self._call(
            "list",
            plural,
            self.api.list_namespaced_custom_object,
            group=group,
            version=version,
            namespace=namespace,
            plural=plural,
            **kwargs,
        )
        return list(response.get("items", []))

    def create(self, obj: dict[str, Any]) -> dict[str, Any]:
        """Create an object and return the stored version."""
        group, version, plural = self._resource(obj["kind"])
        return self._call(
            "create",
            plural,
            self.api.create_namespaced_custom_object,
            group=group,
            version=version,
            namespace=obj["metadata"]["namespace"],
            plural=plural,
            body=obj,
        )

    def update_status(self, obj: dict[str, Any]) -> dict[str, Any]:
        """Replace the status subresource; stale resourceVersions raise ConflictError."""
        group, version, plural = self._resource(obj["kind"])
        metadata = obj["metadata"]
        return self._call(
            "update_status",
            plural,
            self.api.replace_namespaced_custom_object_status,
            group=group,
            version=version,
            namespace=metadata["namespace"],
            plural=plural,
            name=metadata["name"],
            body=obj,
        )
