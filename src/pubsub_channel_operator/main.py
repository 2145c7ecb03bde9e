"""Main entry point for the Pub/Sub Channel Operator."""

from __future__ import annotations

import logging
import threading
from typing import Any

import kopf
from werkzeug.serving import make_server

from . import handlers  # noqa: F401
from . import health
from . import logging as structured_logging
from .config import OperatorConfig
from .reconciler import ChannelReconciler, LoggingSubscriptionActions, ReconcilerDeps
from .services.index import IdentityIndex
from .services.k8s import KubernetesObjectStore, get_k8s_client
from .stats import PrometheusStatsReporter
from .tracing import initialize_tracing
from .utils.cache import ObjectCache
from .utils.events import KopfEventSink
from .utils.locks import KeyedLock
from .utils.rate_limit import RateLimiter

logger = logging.getLogger(__name__)


def build_reconciler(config: OperatorConfig, api: Any) -> ChannelReconciler:
    """Wire the Channel reconciler and its collaborators.

    Args:
        config: Operator configuration
        api: Kubernetes CustomObjectsApi instance

    Returns:
        ChannelReconciler whose identity index is ``reconciler.deps.index``
    """
    store = KubernetesObjectStore(
        api,
        rate_limiter=RateLimiter(config.k8s_rate_limit_per_second),
        request_timeout=config.request_timeout_seconds,
    )
    deps = ReconcilerDeps(
        store=store,
        index=IdentityIndex(store, ObjectCache(ttl=config.cache_ttl_seconds)),
        events=KopfEventSink(),
        stats=PrometheusStatsReporter(),
        subscriptions=LoggingSubscriptionActions(),
    )
    return ChannelReconciler(deps)


@kopf.on.startup()
def configure(settings: kopf.OperatorSettings, memo: kopf.Memo, **_: Any) -> None:
    """Configure the operator."""
    config = OperatorConfig.from_env()

    structured_logging.setup_structured_logging()

    settings.posting.level = logging.WARNING
    settings.networking.request_timeout = config.request_timeout_seconds
    settings.execution.max_workers = config.max_workers

    # Metrics and health endpoints share one port
    server = make_server("", config.metrics_port, health.create_combined_wsgi_app(), threaded=True)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    memo.metrics_server = server

    if config.tracing_enabled:
        initialize_tracing()

    reconciler = build_reconciler(config, get_k8s_client())
    memo.config = config
    memo.reconciler = reconciler
    memo.index = reconciler.deps.index
    memo.locks = KeyedLock()


@kopf.on.cleanup()
def shutdown(memo: kopf.Memo, **_: Any) -> None:
    """Stop the metrics server."""
    server = getattr(memo, "metrics_server", None)
    if server is not None:
        server.shutdown()
