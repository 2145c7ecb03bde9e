"""Tests for the Kubernetes-backed object store."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
from kubernetes.client.exceptions import ApiException

from conftest import make_channel
from pubsub_channel_operator.constants import KIND_CHANNEL, KIND_TOPIC
from pubsub_channel_operator.exceptions import (
    AlreadyExistsError,
    ConflictError,
    NotFoundError,
    RateLimitedError,
    StoreError,
)
from pubsub_channel_operator.services.k8s.client import KubernetesObjectStore, get_k8s_client, translate_api_exception


class TestTranslateApiException:
    """Test mapping of ApiException status codes."""

    @pytest.mark.parametrize(
        "status,operation,expected",
        [
            (404, "get", NotFoundError),
            (409, "create", AlreadyExistsError),
            (409, "update_status", ConflictError),
            (429, "list", RateLimitedError),
            (500, "get", StoreError),
        ],
    )
    def test_mapping(self, status, operation, expected):
        """Test each status maps onto its store error."""
        error = translate_api_exception(ApiException(status=status, reason="Reason"), operation)

        assert type(error) is expected
        assert error.status == status


class TestKubernetesObjectStore:
    """Test cases for KubernetesObjectStore."""

    def test_get_channel(self):
        """Test get addresses the Channel custom resource."""
        api = MagicMock()
        api.get_namespaced_custom_object.return_value = make_channel()
        store = KubernetesObjectStore(api, request_timeout=5)

        result = store.get(KIND_CHANNEL, "default", "my-channel")

        assert result["metadata"]["name"] == "my-channel"
        api.get_namespaced_custom_object.assert_called_once_with(
            group="events.cloud.run",
            version="v1alpha1",
            namespace="default",
            plural="channels",
            name="my-channel",
            _request_timeout=5,
        )

    def test_list_topics_with_selector(self):
        """Test list passes the label selector and returns the items."""
        api = MagicMock()
        api.list_namespaced_custom_object.return_value = {"items": [{"metadata": {"name": "t"}}]}
        store = KubernetesObjectStore(api)

        items = store.list(KIND_TOPIC, "default", "a=b")

        assert items == [{"metadata": {"name": "t"}}]
        kwargs = api.list_namespaced_custom_object.call_args.kwargs
        assert kwargs["group"] == "pubsub.cloud.run"
        assert kwargs["plural"] == "topics"
        assert kwargs["label_selector"] == "a=b"

    def test_create_conflict_is_already_exists(self):
        """Test a 409 on create raises AlreadyExistsError."""
        api = MagicMock()
        api.create_namespaced_custom_object.side_effect = ApiException(status=409, reason="Conflict")
        store = KubernetesObjectStore(api)

        with pytest.raises(AlreadyExistsError) as exc_info:
            store.create({"kind": KIND_TOPIC, "metadata": {"name": "t", "namespace": "default"}})
        assert isinstance(exc_info.value.__cause__, ApiException)

    def test_update_status_conflict(self):
        """Test a 409 on a status write raises ConflictError."""
        api = MagicMock()
        api.replace_namespaced_custom_object_status.side_effect = ApiException(status=409, reason="Conflict")
        store = KubernetesObjectStore(api)

        with pytest.raises(ConflictError):
            store.update_status(make_channel(status={}))

    def test_update_status_body(self):
        """Test update_status replaces the status subresource of the named object."""
        api = MagicMock()
        channel = make_channel(status={"topicId": "t"})
        api.replace_namespaced_custom_object_status.return_value = channel
        store = KubernetesObjectStore(api)

        store.update_status(channel)

        kwargs = api.replace_namespaced_custom_object_status.call_args.kwargs
        assert kwargs["name"] == "my-channel"
        assert kwargs["body"] is channel

    def test_rate_limiter_is_used(self):
        """Test calls acquire the shared rate limiter."""
        api = MagicMock()
        api.get_namespaced_custom_object.return_value = {}
        limiter = MagicMock(side_effect=lambda func: func)
        store = KubernetesObjectStore(api, rate_limiter=limiter)

        store.get(KIND_CHANNEL, "default", "my-channel")

        limiter.assert_called_once()

    def test_unsupported_kind(self):
        """Test unknown kinds are rejected."""
        with pytest.raises(ValueError):
            KubernetesObjectStore(MagicMock()).get("Broker", "default", "b")


class TestGetK8sClient:
    """Test client construction."""

    @patch("kubernetes.config.load_kube_config")
    @patch("kubernetes.config.load_incluster_config")
    def test_falls_back_to_kube_config(self, mock_incluster, mock_kube_config):
        """Test kube config is loaded outside a cluster."""
        from kubernetes import config

        mock_incluster.side_effect = config.ConfigException("not in cluster")

        get_k8s_client()

        mock_kube_config.assert_called_once()
