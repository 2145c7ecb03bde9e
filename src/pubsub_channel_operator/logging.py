"""Structured logging for the operator and its reconcile workers."""

from __future__ import annotations

import json
import logging
import sys
from typing import Any

NOISY_LOGGERS = ("urllib3", "kubernetes.client.rest")


def setup_structured_logging(level: int = logging.INFO) -> None:
    """Send log records to stdout, one message per line.

    Resource events are already JSON encoded by :func:`log_resource_event`;
    the worker thread name is prefixed so interleaved reconciles of different
    channels can be told apart.
    """
    logging.basicConfig(
        level=level,
        format="%(threadName)s %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def log_resource_event(
    logger: logging.Logger,
    controller: str,
    resource_kind: str,
    resource_name: str,
    namespace: str,
    uid: str,
    event: str,
    reason: str,
    message: str,
    level: int = logging.INFO,
    **kwargs: Any,
) -> None:
    """Log a JSON line describing something that happened to a resource.

    Args:
        logger: Logger to write to
        controller: Name of the reconciler emitting the line
        resource_kind: Kind of the resource (e.g. "Channel")
        resource_name: Name of the resource
        namespace: Namespace of the resource
        uid: UID of the resource
        event: Short event name (e.g. "reconcile_started")
        reason: Machine readable reason
        message: Human readable message
        level: Log level
        **kwargs: Extra fields merged into the line
    """
    log_data = {
        "controller": controller,
        "resource": resource_kind,
        "name": resource_name,
        "namespace": namespace,
        "uid": uid,
        "event": event,
        "reason": reason,
        "message": message,
    }
    log_data.update(kwargs)
    logger.log(level, json.dumps(log_data, default=str))
