"""Operator configuration loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping


def _float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def _int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


@dataclass(frozen=True)
class OperatorConfig:
    """Runtime settings, read once at startup.

    Environment Variables:
        METRICS_PORT: Port of the metrics and health server (default: 8080)
        K8S_CACHE_TTL_SECONDS: Identity index cache TTL (default: 30)
        K8S_RATE_LIMIT_PER_SECOND: Kubernetes API call rate (default: 10)
        MAX_WORKERS: kopf executor threads running synchronous handlers (default: 4)
        REQUEST_TIMEOUT_SECONDS: Kubernetes API request timeout (default: 30)
        CONFLICT_RETRY_DELAY_SECONDS: Retry delay after a status conflict (default: 1)
        RETRY_DELAY_SECONDS: Retry delay after any other store failure (default: 10)
        OTEL_TRACES_ENABLED: Enable OpenTelemetry tracing (default: false)
    """

    metrics_port: int = 8080
    cache_ttl_seconds: float = 30.0
    k8s_rate_limit_per_second: float = 10.0
    max_workers: int = 4
    request_timeout_seconds: float = 30.0
    conflict_retry_delay_seconds: float = 1.0
    retry_delay_seconds: float = 10.0
    tracing_enabled: bool = False

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> OperatorConfig:
        """Build the configuration from the process environment.

        Raises:
            ValueError: If a numeric variable cannot be parsed or is not positive
        """
        env = os.environ if env is None else env
        config = cls(
            metrics_port=_int(env, "METRICS_PORT", cls.metrics_port),
            cache_ttl_seconds=_float(env, "K8S_CACHE_TTL_SECONDS", cls.cache_ttl_seconds),
            k8s_rate_limit_per_second=_float(env, "K8S_RATE_LIMIT_PER_SECOND", cls.k8s_rate_limit_per_second),
            max_workers=_int(env, "MAX_WORKERS", cls.max_workers),
            request_timeout_seconds=_float(env, "REQUEST_TIMEOUT_SECONDS", cls.request_timeout_seconds),
            conflict_retry_delay_seconds=_float(
                env, "CONFLICT_RETRY_DELAY_SECONDS", cls.conflict_retry_delay_seconds
            ),
            retry_delay_seconds=_float(env, "RETRY_DELAY_SECONDS", cls.retry_delay_seconds),
            tracing_enabled=env.get("OTEL_TRACES_ENABLED", "false").lower() == "true",
        )
        if config.max_workers < 1:
            raise ValueError("MAX_WORKERS must be at least 1")
        if config.k8s_rate_limit_per_second <= 0:
            raise ValueError("K8S_RATE_LIMIT_PER_SECOND must be positive")
        if config.conflict_retry_delay_seconds < 0 or config.retry_delay_seconds < 0:
            raise ValueError("Retry delays must not be negative")
        return config
