"""Kubernetes operator reconciling Pub/Sub backed Channels."""

__version__ = "0.1.0"
