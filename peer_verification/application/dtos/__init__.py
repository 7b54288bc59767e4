"""Result objects returned by engine operations."""

from peer_verification.application.dtos.cron import (
    DeadlineCheckReport,
    WarningDispatchReport,
)
from peer_verification.application.dtos.sweep import (
    AllocationResult,
    ExpirySweepResult,
    NotificationSweepResult,
    ReassignmentSweepResult,
    ShortfallEntry,
    ShortfallSweepResult,
    ShortlistResult,
)

__all__ = [
    "AllocationResult",
    "DeadlineCheckReport",
    "ExpirySweepResult",
    "NotificationSweepResult",
    "ReassignmentSweepResult",
    "ShortfallEntry",
    "ShortfallSweepResult",
    "ShortlistResult",
    "WarningDispatchReport",
]
