"""Kubernetes-backed object store."""

from .client import KubernetesObjectStore, get_k8s_client

__all__ = ["KubernetesObjectStore", "get_k8s_client"]
