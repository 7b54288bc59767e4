"""Cron trigger response models."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class ShortfallModel(BaseModel):
    """A submission left with fewer reviewers than requested."""

    submission_id: UUID
    requested: int = Field(..., ge=0)
    allocated: int = Field(..., ge=0)
    missing: int = Field(..., ge=0)
    replaces_assignment_id: UUID | None = None


class DeadlineCheckResponse(BaseModel):
    """Result of the hourly deadline job.

    Attributes:
        success: False when a data-integrity violation was detected or a
            step failed outright.
        timestamp: When the job started.
        duration_ms: Job duration in milliseconds.
        expired_count: Assignments moved pending -> expired.
        reassigned_count: Replacement assignments created.
        topped_up_count: Assignments created by the shortfall top-up.
        shortfalls: Submissions left short of reviewers.
        errors: Per-item failures, one message each.
        integrity_violations: Data-integrity violations, one message each.
        failed_steps: Steps that raised; their counts read as zero.
    """

    success: bool
    timestamp: datetime
    duration_ms: int = Field(..., ge=0)
    expired_count: int = Field(..., ge=0)
    reassigned_count: int = Field(..., ge=0)
    topped_up_count: int = Field(..., ge=0)
    shortfalls: list[ShortfallModel] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    integrity_violations: list[str] = Field(default_factory=list)
    failed_steps: list[str] = Field(default_factory=list)


class WarningDispatchResponse(BaseModel):
    """Result of the six-hourly reminder job."""

    success: bool
    timestamp: datetime
    duration_ms: int = Field(..., ge=0)
    warnings_sent: int = Field(..., ge=0)
    reminders_sent: int = Field(..., ge=0)
    errors: list[str] = Field(default_factory=list)
    failed_steps: list[str] = Field(default_factory=list)
