"""Base reconciler class with common functionality."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, TypeVar

from .. import metrics
from ..constants import CONTROLLER_AGENT_NAME
from ..logging import log_resource_event
from ..utils.errors import sanitize_exception

_T = TypeVar("_T")


class BaseReconciler:
    """Base class for reconcilers with structured logging and metrics."""

    def __init__(self, kind: str):
        """Initialize base reconciler.

        Args:
            kind: The Kubernetes resource kind (e.g., "Channel")
        """
        self.kind = kind
        self.logger = logging.getLogger(__name__)

    def _get_resource_context(self, obj: dict[str, Any]) -> dict[str, Any]:
        """Extract common resource context from an object's metadata.

        Args:
            obj: Kubernetes resource body

        Returns:
            Dictionary with resource context fields
        """
        meta = obj.get("metadata", {})
        return {
            "name": meta.get("name", "unknown"),
            "namespace": meta.get("namespace", "default"),
            "uid": meta.get("uid", "unknown"),
        }

    def _log(self, level: int, obj: dict[str, Any], message: str, event: str, reason: str, **kwargs: Any) -> None:
        ctx = self._get_resource_context(obj)
        log_resource_event(
            self.logger,
            controller=CONTROLLER_AGENT_NAME,
            resource_kind=self.kind,
            resource_name=ctx["name"],
            namespace=ctx["namespace"],
            uid=ctx["uid"],
            event=event,
            reason=reason,
            message=message,
            level=level,
            **kwargs,
        )

    def log_info(
        self,
        obj: dict[str, Any],
        message: str,
        event: str = "info",
        reason: str = "Info",
        **kwargs: Any,
    ) -> None:
        """Log an info-level structured log message.

        Args:
            obj: Kubernetes resource body
            message: Log message
            event: Event type (default: "info")
            reason: Reason for the event (default: "Info")
            **kwargs: Additional fields to include in the log
        """
        self._log(logging.INFO, obj, message, event, reason, **kwargs)

    def log_warning(
        self,
        obj: dict[str, Any],
        message: str,
        event: str = "warning",
        reason: str = "Warning",
        **kwargs: Any,
    ) -> None:
        """Log a warning-level structured log message."""
        self._log(logging.WARNING, obj, message, event, reason, **kwargs)

    def log_error(
        self,
        obj: dict[str, Any],
        message: str,
        error: Exception | None = None,
        event: str = "error",
        reason: str = "Error",
        **kwargs: Any,
    ) -> None:
        """Log an error-level structured log message.

        Args:
            obj: Kubernetes resource body
            message: Log message
            error: Optional exception to include sanitized error details
            event: Event type (default: "error")
            reason: Reason for the event (default: "Error")
            **kwargs: Additional fields to include in the log
        """
        log_data = kwargs.copy()

        if error is not None:
            log_data["error"] = sanitize_exception(error)
            log_data["error_type"] = type(error).__name__

        self._log(logging.ERROR, obj, message, event, reason, **log_data)

    def reconcile_with_metrics(self, reconcile_fn: Callable[[], _T]) -> _T:
        """Execute reconciliation with metrics.

        Args:
            reconcile_fn: Function to execute for reconciliation

        Returns:
            Whatever ``reconcile_fn`` returns
        """
        metrics.reconcile_total.labels(kind=self.kind, result="started").inc()

        start_time = time.time()
        try:
            result = reconcile_fn()
            metrics.reconcile_total.labels(kind=self.kind, result="success").inc()
            return result
        except Exception as e:
            metrics.error_total.labels(kind=self.kind, error_type=type(e).__name__).inc()
            metrics.reconcile_total.labels(kind=self.kind, result="error").inc()
            raise
        finally:
            duration = time.time() - start_time
            metrics.reconcile_duration_seconds.labels(kind=self.kind).observe(duration)
