"""Result DTOs for allocation and sweep operations.

Sweeps never raise for per-item failures. Each result carries:
- errors: persistence or dispatch failures, one message per item
- integrity_violations: data-integrity errors, reported separately so the
  trigger layer can flag the run as unsuccessful
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any
from uuid import UUID

from peer_verification.domain.models.assignment import NotificationTier, PeerAssignment


@dataclass(frozen=True)
class ShortfallEntry:
    """Eligible pool was smaller than the number of reviewers needed.

    Attributes:
        submission_id: Submission left short.
        requested: Reviewers wanted by this call.
        allocated: Reviewers actually assigned.
        replaces_assignment_id: Expired assignment being replaced, if any.
    """

    submission_id: UUID
    requested: int
    allocated: int
    replaces_assignment_id: UUID | None = None

    @property
    def missing(self) -> int:
        return self.requested - self.allocated

    def to_dict(self) -> dict[str, Any]:
        return {
            "submission_id": str(self.submission_id),
            "requested": self.requested,
            "allocated": self.allocated,
            "missing": self.missing,
            "replaces_assignment_id": (
                str(self.replaces_assignment_id) if self.replaces_assignment_id else None
            ),
        }


@dataclass(frozen=True)
class AllocationResult:
    """Outcome of one allocation call for one submission.

    Attributes:
        submission_id: Submission allocated for.
        requested: Units asked for.
        assignments: Newly created assignments.
    """

    submission_id: UUID
    requested: int
    assignments: tuple[PeerAssignment, ...] = field(default=())
    replaces_assignment_id: UUID | None = None

    @property
    def allocated(self) -> int:
        return len(self.assignments)

    @property
    def shortfall(self) -> int:
        return max(self.requested - self.allocated, 0)

    @property
    def is_complete(self) -> bool:
        return self.shortfall == 0

    def shortfall_entry(self) -> ShortfallEntry | None:
        """Return a ShortfallEntry if the call came up short, else None."""
        if self.is_complete:
            return None
        return ShortfallEntry(
            submission_id=self.submission_id,
            requested=self.requested,
            allocated=self.allocated,
            replaces_assignment_id=self.replaces_assignment_id,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "submission_id": str(self.submission_id),
            "requested": self.requested,
            "allocated": self.allocated,
            "shortfall": self.shortfall,
            "assignment_ids": [str(a.id) for a in self.assignments],
        }


@dataclass(frozen=True)
class ExpirySweepResult:
    """Result of a Deadline Monitor sweep."""

    expired_count: int = 0
    expired_assignment_ids: tuple[UUID, ...] = field(default=())
    errors: tuple[str, ...] = field(default=())
    integrity_violations: tuple[str, ...] = field(default=())

    def to_dict(self) -> dict[str, Any]:
        return {
            "expired_count": self.expired_count,
            "expired_assignment_ids": [str(i) for i in self.expired_assignment_ids],
            "errors": list(self.errors),
            "integrity_violations": list(self.integrity_violations),
        }


@dataclass(frozen=True)
class ReassignmentSweepResult:
    """Result of a Reassignment Coordinator sweep.

    Attributes:
        reassigned_count: Replacement assignments created.
        skipped_count: Expired assignments needing no replacement this run.
        shortfalls: Replacements that found no eligible reviewer.
    """

    reassigned_count: int = 0
    skipped_count: int = 0
    shortfalls: tuple[ShortfallEntry, ...] = field(default=())
    errors: tuple[str, ...] = field(default=())
    integrity_violations: tuple[str, ...] = field(default=())

    def to_dict(self) -> dict[str, Any]:
        return {
            "reassigned_count": self.reassigned_count,
            "skipped_count": self.skipped_count,
            "shortfalls": [s.to_dict() for s in self.shortfalls],
            "errors": list(self.errors),
            "integrity_violations": list(self.integrity_violations),
        }


@dataclass(frozen=True)
class ShortfallSweepResult:
    """Result of topping up submissions left short by earlier allocations."""

    allocated_count: int = 0
    shortfalls: tuple[ShortfallEntry, ...] = field(default=())
    errors: tuple[str, ...] = field(default=())
    integrity_violations: tuple[str, ...] = field(default=())

    def to_dict(self) -> dict[str, Any]:
        return {
            "allocated_count": self.allocated_count,
            "shortfalls": [s.to_dict() for s in self.shortfalls],
            "errors": list(self.errors),
            "integrity_violations": list(self.integrity_violations),
        }


@dataclass(frozen=True)
class NotificationSweepResult:
    """Result of one notification tier sweep.

    Attributes:
        tier: Tier swept.
        sent_count: Notifications dispatched successfully.
        already_claimed_count: Assignments whose tier was claimed earlier.
    """

    tier: NotificationTier
    sent_count: int = 0
    already_claimed_count: int = 0
    errors: tuple[str, ...] = field(default=())

    def to_dict(self) -> dict[str, Any]:
        return {
            "tier": self.tier.value,
            "sent_count": self.sent_count,
            "already_claimed_count": self.already_claimed_count,
            "errors": list(self.errors),
        }


@dataclass(frozen=True)
class ShortlistResult:
    """Finalists selected for a contest, best first."""

    contest_id: UUID
    finalist_ids: tuple[UUID, ...] = field(default=())
    ranked_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "contest_id": str(self.contest_id),
            "finalist_ids": [str(i) for i in self.finalist_ids],
            "ranked_count": self.ranked_count,
        }
