"""Prometheus metrics for scheduled sweeps.

Labels: service, environment on every series, plus the sweep or tier
where it applies. Durations use histogram buckets suited to batch jobs
(50ms to 60s).
"""

import os
import threading

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

# Content type for Prometheus metrics endpoint
METRICS_CONTENT_TYPE = "text/plain; version=0.0.4; charset=utf-8"

# Thread lock for singleton initialization
_collector_lock = threading.Lock()

SWEEP_DURATION_BUCKETS = (0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0)


class SweepMetricsCollector:
    """Collects operational metrics for the assignment lifecycle sweeps.

    Attributes:
        assignments_expired_total: Assignments expired by the Deadline Monitor.
        assignments_reassigned_total: Replacement assignments created.
        assignments_topped_up_total: Assignments created by shortfall top-up.
        reviewer_shortfalls_total: Allocations that found too few reviewers.
        notifications_sent_total: Reminders dispatched, by tier.
        sweep_errors_total: Per-item failures, by sweep.
        integrity_violations_total: Data-integrity violations, by sweep.
        sweep_duration_seconds: Job duration, by sweep.
        last_sweep_timestamp_seconds: Unix time of the last completed job.
    """

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        """Initialize the collector.

        Args:
            registry: Optional custom registry for testing isolation.
        """
        self._registry = registry or CollectorRegistry()
        self._environment = os.environ.get("ENVIRONMENT", "development")
        self._service_name = os.environ.get("SERVICE_NAME", "peer-verification-engine")

        base_labels = ["service", "environment"]

        self.assignments_expired_total = Counter(
            name="peer_assignments_expired_total",
            documentation="Peer assignments expired past their deadline",
            labelnames=base_labels,
            registry=self._registry,
        )
        self.assignments_reassigned_total = Counter(
            name="peer_assignments_reassigned_total",
            documentation="Replacement assignments created for expired ones",
            labelnames=base_labels,
            registry=self._registry,
        )
        self.assignments_topped_up_total = Counter(
            name="peer_assignments_topped_up_total",
            documentation="Assignments created to fill an earlier shortfall",
            labelnames=base_labels,
            registry=self._registry,
        )
        self.reviewer_shortfalls_total = Counter(
            name="peer_reviewer_shortfalls_total",
            documentation="Allocations that found fewer eligible reviewers than needed",
            labelnames=base_labels,
            registry=self._registry,
        )
        self.notifications_sent_total = Counter(
            name="peer_notifications_sent_total",
            documentation="Deadline reminders dispatched",
            labelnames=[*base_labels, "tier"],
            registry=self._registry,
        )
        self.sweep_errors_total = Counter(
            name="peer_sweep_errors_total",
            documentation="Per-item failures collected during sweeps",
            labelnames=[*base_labels, "sweep"],
            registry=self._registry,
        )
        self.integrity_violations_total = Counter(
            name="peer_integrity_violations_total",
            documentation="Data-integrity violations detected during sweeps",
            labelnames=[*base_labels, "sweep"],
            registry=self._registry,
        )
        self.sweep_duration_seconds = Histogram(
            name="peer_sweep_duration_seconds",
            documentation="Scheduled sweep duration in seconds",
            labelnames=[*base_labels, "sweep"],
            buckets=SWEEP_DURATION_BUCKETS,
            registry=self._registry,
        )
        self.last_sweep_timestamp_seconds = Gauge(
            name="peer_last_sweep_timestamp_seconds",
            documentation="Unix time the sweep last completed",
            labelnames=[*base_labels, "sweep"],
            registry=self._registry,
        )

    def _labels(self) -> dict[str, str]:
        return {"service": self._service_name, "environment": self._environment}

    def record_expired(self, count: int) -> None:
        if count:
            self.assignments_expired_total.labels(**self._labels()).inc(count)

    def record_reassigned(self, count: int) -> None:
        if count:
            self.assignments_reassigned_total.labels(**self._labels()).inc(count)

    def record_topped_up(self, count: int) -> None:
        if count:
            self.assignments_topped_up_total.labels(**self._labels()).inc(count)

    def record_shortfalls(self, count: int) -> None:
        if count:
            self.reviewer_shortfalls_total.labels(**self._labels()).inc(count)

    def record_notifications_sent(self, tier: str, count: int) -> None:
        """Increment reminders sent for a tier.

        Args:
            tier: NotificationTier value.
            count: Notifications dispatched in this sweep.
        """
        if count:
            self.notifications_sent_total.labels(**self._labels(), tier=tier).inc(count)

    def record_sweep_errors(self, sweep: str, count: int) -> None:
        if count:
            self.sweep_errors_total.labels(**self._labels(), sweep=sweep).inc(count)

    def record_integrity_violations(self, sweep: str, count: int) -> None:
        if count:
            self.integrity_violations_total.labels(**self._labels(), sweep=sweep).inc(count)

    def observe_sweep(self, sweep: str, duration_seconds: float, finished_at: float) -> None:
        """Record a completed sweep's duration and completion time.

        Args:
            sweep: Sweep name ("deadline_check" or "send_warnings").
            duration_seconds: Elapsed monotonic time.
            finished_at: Unix timestamp of completion.
        """
        self.sweep_duration_seconds.labels(**self._labels(), sweep=sweep).observe(
            duration_seconds
        )
        self.last_sweep_timestamp_seconds.labels(**self._labels(), sweep=sweep).set(
            finished_at
        )

    def get_registry(self) -> CollectorRegistry:
        """Get the collector registry."""
        return self._registry


# Singleton instance
_metrics_collector: SweepMetricsCollector | None = None


def get_metrics_collector() -> SweepMetricsCollector:
    """Get the singleton SweepMetricsCollector instance (thread-safe).

    Uses double-checked locking for lazy initialization.
    """
    global _metrics_collector
    if _metrics_collector is None:
        with _collector_lock:
            # Double-check inside lock
            if _metrics_collector is None:
                _metrics_collector = SweepMetricsCollector()
    return _metrics_collector


def generate_metrics() -> bytes:
    """Generate Prometheus metrics in exposition format.

    Returns:
        Metrics in Prometheus text format as bytes.
    """
    return generate_latest(get_metrics_collector().get_registry())


def reset_metrics_collector() -> None:
    """Reset the singleton collector (for testing only)."""
    global _metrics_collector
    with _collector_lock:
        _metrics_collector = None
