"""Reports returned by the scheduled sweep orchestrator."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from peer_verification.application.dtos.sweep import (
    ExpirySweepResult,
    NotificationSweepResult,
    ReassignmentSweepResult,
    ShortfallSweepResult,
)


@dataclass(frozen=True)
class DeadlineCheckReport:
    """Combined result of the hourly deadline job.

    Attributes:
        started_at: When the job started (UTC).
        duration_ms: Wall-clock duration from the monotonic clock.
        expiry: Deadline Monitor result.
        reassignment: Reassignment Coordinator result.
        top_up: Shortfall top-up result.
        failed_steps: Steps that raised and were replaced by an empty result.
    """

    started_at: datetime
    duration_ms: int
    expiry: ExpirySweepResult
    reassignment: ReassignmentSweepResult
    top_up: ShortfallSweepResult
    failed_steps: tuple[str, ...] = ()

    @property
    def errors(self) -> list[str]:
        return [*self.expiry.errors, *self.reassignment.errors, *self.top_up.errors]

    @property
    def integrity_violations(self) -> list[str]:
        return [
            *self.expiry.integrity_violations,
            *self.reassignment.integrity_violations,
            *self.top_up.integrity_violations,
        ]

    @property
    def success(self) -> bool:
        return not self.integrity_violations and not self.failed_steps

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "timestamp": self.started_at.isoformat(),
            "duration_ms": self.duration_ms,
            "expired_count": self.expiry.expired_count,
            "reassigned_count": self.reassignment.reassigned_count,
            "topped_up_count": self.top_up.allocated_count,
            "shortfalls": [
                s.to_dict()
                for s in (*self.reassignment.shortfalls, *self.top_up.shortfalls)
            ],
            "errors": self.errors,
            "integrity_violations": self.integrity_violations,
            "failed_steps": list(self.failed_steps),
        }


@dataclass(frozen=True)
class WarningDispatchReport:
    """Combined result of the six-hourly reminder job."""

    started_at: datetime
    duration_ms: int
    warnings: NotificationSweepResult
    final_reminders: NotificationSweepResult
    failed_steps: tuple[str, ...] = ()

    @property
    def errors(self) -> list[str]:
        return [*self.warnings.errors, *self.final_reminders.errors]

    @property
    def success(self) -> bool:
        return not self.failed_steps

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "timestamp": self.started_at.isoformat(),
            "duration_ms": self.duration_ms,
            "warnings_sent": self.warnings.sent_count,
            "reminders_sent": self.final_reminders.sent_count,
            "errors": self.errors,
            "failed_steps": list(self.failed_steps),
        }
