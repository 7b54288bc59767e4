"""Prometheus metrics for the peer verification engine."""

from peer_verification.infrastructure.monitoring.metrics import (
    METRICS_CONTENT_TYPE,
    SweepMetricsCollector,
    generate_metrics,
    get_metrics_collector,
    reset_metrics_collector,
)

__all__ = [
    "METRICS_CONTENT_TYPE",
    "SweepMetricsCollector",
    "generate_metrics",
    "get_metrics_collector",
    "reset_metrics_collector",
]
