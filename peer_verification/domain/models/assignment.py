"""Peer assignment domain model.

This module defines the unit of review work handed to one reviewer:
- AssignmentStatus: Monotonic lifecycle (pending -> done | expired)
- NotificationTier: Reminder tiers that may be sent while pending
- PeerAssignment: Frozen record with deadline and lineage tracking

Invariants:
- At most one pending assignment per (submission, reviewer) pair.
- Status transitions never reverse.
- A done or expired record is only ever touched again to add an
  audit annotation; its status, deadline and reviewer are fixed.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from uuid import UUID


class AssignmentStatus(str, Enum):
    """Lifecycle states of a peer assignment.

    State Transition Matrix:
    - PENDING -> DONE, EXPIRED
    - DONE -> (terminal)
    - EXPIRED -> (terminal)
    """

    PENDING = "pending"
    """Awaiting the reviewer's review."""

    DONE = "done"
    """Review submitted before the deadline."""

    EXPIRED = "expired"
    """Deadline passed with no review."""

    def is_terminal(self) -> bool:
        """Check if this is a terminal state.

        Returns:
            True if DONE or EXPIRED, False otherwise.
        """
        return self in (AssignmentStatus.DONE, AssignmentStatus.EXPIRED)

    def can_transition_to(self, target: AssignmentStatus) -> bool:
        """Check if transition to target state is valid.

        Args:
            target: The target status to transition to.

        Returns:
            True if the transition is valid, False otherwise.
        """
        valid_transitions: dict[AssignmentStatus, set[AssignmentStatus]] = {
            AssignmentStatus.PENDING: {AssignmentStatus.DONE, AssignmentStatus.EXPIRED},
            AssignmentStatus.DONE: set(),  # Terminal
            AssignmentStatus.EXPIRED: set(),  # Terminal
        }
        return target in valid_transitions.get(self, set())


class NotificationTier(str, Enum):
    """Deadline reminder tiers.

    Each tier is delivered at most once per assignment.
    """

    WARNING = "warning"
    """Deadline is within the warning lookahead (24h by default)."""

    FINAL_REMINDER = "final_reminder"
    """Deadline is within the final reminder lookahead (2h by default)."""


@dataclass(frozen=True, eq=True)
class PeerAssignment:
    """A single reviewer's obligation to review one submission.

    Attributes:
        id: Unique identifier (UUIDv7).
        submission_id: Submission under review.
        reviewer_id: Reviewer holding the assignment.
        created_at: When the assignment was created (UTC).
        deadline: Instant after which the assignment may be expired (UTC).
        status: Current lifecycle state.
        completed_at: When the review was submitted (DONE only).
        expired_at: When the Deadline Monitor expired it (EXPIRED only).
        replaces_assignment_id: Expired assignment this one replaces, if any.
        warning_sent_at: When the WARNING tier was claimed.
        final_reminder_sent_at: When the FINAL_REMINDER tier was claimed.
        audit_note: Free-form administrative annotation.
        reassignment_settled_at: When an expired assignment was closed out
            without a replacement (its submission was decided or full).
    """

    id: UUID
    submission_id: UUID
    reviewer_id: UUID
    created_at: datetime
    deadline: datetime
    status: AssignmentStatus = field(default=AssignmentStatus.PENDING)
    completed_at: datetime | None = field(default=None)
    expired_at: datetime | None = field(default=None)
    replaces_assignment_id: UUID | None = field(default=None)
    warning_sent_at: datetime | None = field(default=None)
    final_reminder_sent_at: datetime | None = field(default=None)
    audit_note: str | None = field(default=None)
    reassignment_settled_at: datetime | None = field(default=None)

    def __post_init__(self) -> None:
        """Validate assignment fields after initialization.

        Raises:
            ValueError: If any field validation fails.
        """
        for name in (
            "created_at",
            "deadline",
            "completed_at",
            "expired_at",
            "warning_sent_at",
            "final_reminder_sent_at",
            "reassignment_settled_at",
        ):
            value = getattr(self, name)
            if value is not None and value.tzinfo is None:
                raise ValueError(f"{name} must be timezone-aware (UTC)")

        if self.deadline <= self.created_at:
            raise ValueError("deadline must be after created_at")

        if self.status == AssignmentStatus.DONE and self.completed_at is None:
            raise ValueError("DONE assignment requires completed_at")

        if self.status != AssignmentStatus.DONE and self.completed_at is not None:
            raise ValueError("completed_at can only be set when status is DONE")

        if self.status == AssignmentStatus.EXPIRED and self.expired_at is None:
            raise ValueError("EXPIRED assignment requires expired_at")

        if self.reassignment_settled_at is not None and self.status != AssignmentStatus.EXPIRED:
            raise ValueError("only an EXPIRED assignment can be settled without replacement")

        if self.replaces_assignment_id == self.id:
            raise ValueError("assignment cannot replace itself")

    @property
    def is_pending(self) -> bool:
        """True while the assignment still counts as outstanding work."""
        return self.status == AssignmentStatus.PENDING

    @property
    def is_live(self) -> bool:
        """True for assignments that count toward the submission's target.

        Pending and done assignments are live; expired ones are not.
        """
        return self.status != AssignmentStatus.EXPIRED

    def is_overdue(self, now: datetime) -> bool:
        """Check whether a pending assignment has passed its deadline.

        Args:
            now: Current time (UTC).

        Returns:
            True if pending and the deadline is strictly before now.
        """
        return self.is_pending and self.deadline < now

    def tier_sent_at(self, tier: NotificationTier) -> datetime | None:
        """Return when a notification tier was claimed, if ever."""
        if tier == NotificationTier.WARNING:
            return self.warning_sent_at
        return self.final_reminder_sent_at

    def _require_transition(self, target: AssignmentStatus) -> None:
        if not self.status.can_transition_to(target):
            raise ValueError(
                f"Cannot transition assignment {self.id} "
                f"from {self.status.value} to {target.value}"
            )

    def with_completed(self, completed_at: datetime) -> PeerAssignment:
        """Create a copy transitioned to DONE.

        Args:
            completed_at: When the review was submitted.

        Returns:
            New PeerAssignment with DONE status.

        Raises:
            ValueError: If the assignment is not pending.
        """
        self._require_transition(AssignmentStatus.DONE)
        return replace(self, status=AssignmentStatus.DONE, completed_at=completed_at)

    def with_expired(self, expired_at: datetime) -> PeerAssignment:
        """Create a copy transitioned to EXPIRED.

        Args:
            expired_at: When the expiry was recorded.

        Returns:
            New PeerAssignment with EXPIRED status.

        Raises:
            ValueError: If the assignment is not pending.
        """
        self._require_transition(AssignmentStatus.EXPIRED)
        return replace(self, status=AssignmentStatus.EXPIRED, expired_at=expired_at)

    def with_tier_sent(self, tier: NotificationTier, sent_at: datetime) -> PeerAssignment:
        """Create a copy with a notification tier marked as claimed."""
        if tier == NotificationTier.WARNING:
            return replace(self, warning_sent_at=sent_at)
        return replace(self, final_reminder_sent_at=sent_at)

    def with_reassignment_settled(self, settled_at: datetime, note: str) -> PeerAssignment:
        """Create a copy closed out without a replacement.

        Raises:
            ValueError: If the assignment is not expired.
        """
        if self.status != AssignmentStatus.EXPIRED:
            raise ValueError(f"Cannot settle assignment {self.id} in status {self.status.value}")
        return replace(self, reassignment_settled_at=settled_at).with_annotation(note)

    def with_annotation(self, note: str) -> PeerAssignment:
        """Create a copy with an audit annotation appended.

        Annotations are the only change allowed on a terminal assignment.
        """
        combined = f"{self.audit_note}\n{note}" if self.audit_note else note
        return replace(self, audit_note=combined)
