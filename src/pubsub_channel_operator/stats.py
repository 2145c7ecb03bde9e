"""Readiness latency reporting."""

from __future__ import annotations

import logging
from datetime import timedelta

from . import metrics

logger = logging.getLogger(__name__)


class PrometheusStatsReporter:
    """Report how long resources took to become ready."""

    def report_ready(self, kind: str, namespace: str, name: str, duration: timedelta) -> None:
        """Record the time between creation and first readiness of a resource."""
        seconds = duration.total_seconds()
        if seconds < 0:
            raise ValueError(f"negative readiness latency for {kind} {namespace}/{name}: {seconds}s")
        metrics.ready_latency_seconds.labels(kind=kind).observe(seconds)
