"""Prometheus metrics for the Pub/Sub Channel Operator."""

from prometheus_client import Counter, Histogram

# Reconciliation metrics
reconcile_total = Counter(
    "pubsub_channel_operator_reconcile_total",
    "Total number of reconciliations",
    ["kind", "result"],
)

reconcile_duration_seconds = Histogram(
    "pubsub_channel_operator_reconcile_duration_seconds",
    "Duration of reconciliations in seconds",
    ["kind"],
    buckets=[0.1, 0.5, 1.0, 2.5, 5.0, 10.0],
)

error_total = Counter(
    "pubsub_channel_operator_error_total",
    "Total number of reconciliation errors",
    ["kind", "error_type"],
)

# Status persistence metrics
status_update_total = Counter(
    "pubsub_channel_operator_status_update_total",
    "Total number of status update attempts",
    ["kind", "result"],
)

# Subscriber sync metrics
subscriber_operations_total = Counter(
    "pubsub_channel_operator_subscriber_operations_total",
    "Total number of subscriber sync operations",
    ["operation"],
)

# Readiness metrics
ready_latency_seconds = Histogram(
    "pubsub_channel_operator_ready_latency_seconds",
    "Time from resource creation to its first transition to ready",
    ["kind"],
    buckets=[1.0, 5.0, 15.0, 30.0, 60.0, 120.0, 300.0, 600.0],
)

# API call metrics
api_call_total = Counter(
    "pubsub_channel_operator_api_call_total",
    "Total number of API calls",
    ["api_type", "operation", "result"],
)

api_call_duration_seconds = Histogram(
    "pubsub_channel_operator_api_call_duration_seconds",
    "Duration of API calls in seconds",
    ["api_type", "operation"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0],
)

rate_limit_hits_total = Counter(
    "pubsub_channel_operator_rate_limit_hits_total",
    "Total number of rate limit hits",
    ["api_type"],
)

# Retry metrics
requeue_total = Counter(
    "pubsub_channel_operator_requeue_total",
    "Total number of failed reconciles handed back for retry",
    ["kind", "reason"],
)
