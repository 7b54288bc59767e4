"""Scheduled job orchestration.

Two jobs run on an external schedule:
- deadline check (hourly): expire overdue assignments, replace expired
  ones, then top up submissions still short of reviewers
- warning dispatch (every six hours): deadline warnings, then final
  reminders

Each job returns a report with counts and collected per-item errors and
feeds the same numbers into Prometheus. A step that raises is logged,
recorded in the report as failed with an empty result, and the steps
after it still run.
"""

from __future__ import annotations

import time
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, TypeVar

from peer_verification.application.dtos.cron import (
    DeadlineCheckReport,
    WarningDispatchReport,
)
from peer_verification.application.dtos.sweep import (
    ExpirySweepResult,
    NotificationSweepResult,
    ReassignmentSweepResult,
    ShortfallSweepResult,
)
from peer_verification.domain.models.assignment import NotificationTier
from peer_verification.infrastructure.observability.correlation import ensure_run
from peer_verification.infrastructure.observability.logging import get_component_logger

if TYPE_CHECKING:
    from peer_verification.application.ports.time_authority import (
        TimeAuthorityProtocol,
    )
    from peer_verification.application.services.assignment_allocator import (
        AssignmentAllocator,
    )
    from peer_verification.application.services.deadline_monitor import (
        DeadlineMonitor,
    )
    from peer_verification.application.services.notification_trigger import (
        NotificationTrigger,
    )
    from peer_verification.application.services.reassignment_coordinator import (
        ReassignmentCoordinator,
    )
    from peer_verification.infrastructure.monitoring.metrics import (
        SweepMetricsCollector,
    )

DEADLINE_CHECK_SWEEP = "deadline_check"
SEND_WARNINGS_SWEEP = "send_warnings"

T = TypeVar("T")


class CronSweepService:
    """Runs the scheduled sweeps in order and reports on them."""

    def __init__(
        self,
        deadline_monitor: DeadlineMonitor,
        reassignment_coordinator: ReassignmentCoordinator,
        allocator: AssignmentAllocator,
        notification_trigger: NotificationTrigger,
        time_authority: TimeAuthorityProtocol,
        metrics: SweepMetricsCollector | None = None,
    ) -> None:
        self._deadline_monitor = deadline_monitor
        self._reassignment_coordinator = reassignment_coordinator
        self._allocator = allocator
        self._notification_trigger = notification_trigger
        self._time = time_authority
        self._metrics = metrics
        self._log = get_component_logger("CronSweepService")

    async def run_deadline_check(self) -> DeadlineCheckReport:
        """Expire, reassign, then top up.

        All three steps share one sweep instant, so an assignment expired
        in step one is visible to step two of the same run.
        """
        ensure_run(trigger="check-deadlines")
        log = self._log.bind(sweep=DEADLINE_CHECK_SWEEP)
        started_at = self._time.now()
        start = self._time.monotonic()
        log.info("cron_sweep_started", timestamp=started_at.isoformat())

        failed: list[str] = []
        expiry = await self._run_step(
            log,
            failed,
            "expiry",
            lambda: self._deadline_monitor.sweep_expired(started_at),
            lambda message: ExpirySweepResult(errors=(message,)),
        )
        reassignment = await self._run_step(
            log,
            failed,
            "reassignment",
            lambda: self._reassignment_coordinator.reassign_expired(started_at),
            lambda message: ReassignmentSweepResult(errors=(message,)),
        )
        top_up = await self._run_step(
            log,
            failed,
            "top_up",
            self._allocator.allocate_shortfalls,
            lambda message: ShortfallSweepResult(errors=(message,)),
        )

        duration = self._time.monotonic() - start
        report = DeadlineCheckReport(
            started_at=started_at,
            duration_ms=int(duration * 1000),
            expiry=expiry,
            reassignment=reassignment,
            top_up=top_up,
            failed_steps=tuple(failed),
        )

        if self._metrics is not None:
            self._metrics.record_expired(expiry.expired_count)
            self._metrics.record_reassigned(reassignment.reassigned_count)
            self._metrics.record_topped_up(top_up.allocated_count)
            self._metrics.record_shortfalls(
                len(reassignment.shortfalls) + len(top_up.shortfalls)
            )
            self._metrics.record_sweep_errors(DEADLINE_CHECK_SWEEP, len(report.errors))
            self._metrics.record_integrity_violations(
                DEADLINE_CHECK_SWEEP, len(report.integrity_violations)
            )
            self._metrics.observe_sweep(DEADLINE_CHECK_SWEEP, duration, time.time())

        if report.integrity_violations:
            log.error(
                "cron_sweep_integrity_violations",
                violations=report.integrity_violations,
            )
        log.info(
            "cron_sweep_completed",
            duration_ms=report.duration_ms,
            expired_count=expiry.expired_count,
            reassigned_count=reassignment.reassigned_count,
            topped_up_count=top_up.allocated_count,
            error_count=len(report.errors),
            failed_steps=failed,
        )
        return report

    async def run_warning_dispatch(self) -> WarningDispatchReport:
        """Send deadline warnings, then final reminders."""
        ensure_run(trigger="send-warnings")
        log = self._log.bind(sweep=SEND_WARNINGS_SWEEP)
        started_at = self._time.now()
        start = self._time.monotonic()
        log.info("cron_sweep_started", timestamp=started_at.isoformat())

        failed: list[str] = []
        warnings = await self._run_step(
            log,
            failed,
            "warnings",
            lambda: self._notification_trigger.sweep_warnings(started_at),
            lambda message: NotificationSweepResult(
                tier=NotificationTier.WARNING, errors=(message,)
            ),
        )
        final_reminders = await self._run_step(
            log,
            failed,
            "final_reminders",
            lambda: self._notification_trigger.sweep_final_reminders(started_at),
            lambda message: NotificationSweepResult(
                tier=NotificationTier.FINAL_REMINDER, errors=(message,)
            ),
        )

        duration = self._time.monotonic() - start
        report = WarningDispatchReport(
            started_at=started_at,
            duration_ms=int(duration * 1000),
            warnings=warnings,
            final_reminders=final_reminders,
            failed_steps=tuple(failed),
        )

        if self._metrics is not None:
            self._metrics.record_notifications_sent(warnings.tier.value, warnings.sent_count)
            self._metrics.record_notifications_sent(
                final_reminders.tier.value, final_reminders.sent_count
            )
            self._metrics.record_sweep_errors(SEND_WARNINGS_SWEEP, len(report.errors))
            self._metrics.observe_sweep(SEND_WARNINGS_SWEEP, duration, time.time())

        log.info(
            "cron_sweep_completed",
            duration_ms=report.duration_ms,
            warnings_sent=warnings.sent_count,
            reminders_sent=final_reminders.sent_count,
            error_count=len(report.errors),
            failed_steps=failed,
        )
        return report

    async def _run_step(
        self,
        log: Any,
        failed: list[str],
        step: str,
        run: Callable[[], Awaitable[T]],
        on_failure: Callable[[str], T],
    ) -> T:
        """Run one sweep step; a raised error becomes an empty result."""
        try:
            return await run()
        except Exception as e:
            log.error("cron_step_failed", step=step, error=str(e), exc_info=True)
            failed.append(step)
            return on_failure(f"Step {step} failed: {e}")
