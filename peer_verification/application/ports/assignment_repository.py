"""Assignment repository port.

The repository is the shared mutable state between overlapping sweeps and
review submissions. Every status change goes through a conditional
``*_if_pending`` method that only writes if the row is still pending at
write time, which makes all sweeps safe to re-run and to overlap.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Protocol
from uuid import UUID

from peer_verification.domain.models.assignment import NotificationTier, PeerAssignment


class AssignmentRepositoryProtocol(Protocol):
    """Persistence contract for peer assignments."""

    async def add(self, assignment: PeerAssignment) -> None:
        """Insert a new pending assignment.

        Args:
            assignment: The assignment to insert.

        Raises:
            DuplicateLiveAssignmentError: If the reviewer already holds a
                pending assignment for the same submission.
        """
        ...

    async def get_by_id(self, assignment_id: UUID) -> PeerAssignment | None:
        """Retrieve an assignment by ID, or None."""
        ...

    async def list_by_submission(self, submission_id: UUID) -> list[PeerAssignment]:
        """List every assignment for a submission, oldest first."""
        ...

    async def list_overdue_pending(self, now: datetime) -> list[PeerAssignment]:
        """List pending assignments whose deadline is strictly before now."""
        ...

    async def list_pending_due_between(
        self,
        after: datetime,
        until: datetime,
    ) -> list[PeerAssignment]:
        """List pending assignments with ``after < deadline <= until``."""
        ...

    async def list_unreplaced_expired(self) -> list[PeerAssignment]:
        """List expired assignments still awaiting a replacement.

        Excludes assignments another assignment replaces and those whose
        reassignment was settled without a replacement.
        """
        ...

    async def expire_if_pending(
        self,
        assignment_id: UUID,
        expired_at: datetime,
    ) -> PeerAssignment | None:
        """Transition pending -> expired.

        Returns:
            The expired assignment, or None if it was no longer pending.
        """
        ...

    async def complete_if_pending(
        self,
        assignment_id: UUID,
        completed_at: datetime,
    ) -> PeerAssignment | None:
        """Transition pending -> done.

        Returns:
            The completed assignment, or None if it was no longer pending.
        """
        ...

    async def mark_tier_notified(
        self,
        assignment_id: UUID,
        tier: NotificationTier,
        sent_at: datetime,
    ) -> bool:
        """Claim a notification tier for a pending assignment.

        Returns:
            True if this call claimed the tier, False if it was already
            claimed or the assignment is no longer pending.
        """
        ...

    async def count_expired_by_reviewer(
        self,
        reviewer_ids: Iterable[UUID],
    ) -> dict[UUID, int]:
        """Count expired assignments per reviewer across all contests."""
        ...

    async def annotate(self, assignment_id: UUID, note: str) -> None:
        """Append an audit annotation without changing status."""
        ...

    async def settle_without_replacement(
        self,
        assignment_id: UUID,
        settled_at: datetime,
        note: str,
    ) -> bool:
        """Record that an expired assignment needs no replacement.

        Returns:
            True if this call settled it; False if it was not expired or
            was already settled.
        """
        ...
