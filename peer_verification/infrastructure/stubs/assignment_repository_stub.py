"""In-memory stub implementation of AssignmentRepositoryProtocol.

Each conditional method checks and writes without yielding to the event
loop, so overlapping coroutines see the same atomicity a database row
lock would give. Not intended for production use.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable
from uuid import UUID

from peer_verification.domain.errors.assignment import AssignmentNotFoundError
from peer_verification.domain.errors.integrity import DuplicateLiveAssignmentError
from peer_verification.domain.models.assignment import (
    AssignmentStatus,
    NotificationTier,
    PeerAssignment,
)


class AssignmentRepositoryStub:
    """In-memory implementation of AssignmentRepositoryProtocol.

    Example:
        >>> stub = AssignmentRepositoryStub()
        >>> await stub.add(assignment)
        >>> await stub.expire_if_pending(assignment.id, now)
    """

    def __init__(self) -> None:
        """Initialize the stub with empty storage."""
        self._assignments: dict[UUID, PeerAssignment] = {}

    async def add(self, assignment: PeerAssignment) -> None:
        """Insert a new assignment.

        Raises:
            DuplicateLiveAssignmentError: Pending pair already exists.
            ValueError: Assignment ID already stored.
        """
        if assignment.id in self._assignments:
            raise ValueError(f"Assignment {assignment.id} already stored")
        if assignment.is_pending:
            for existing in self._assignments.values():
                if (
                    existing.is_pending
                    and existing.submission_id == assignment.submission_id
                    and existing.reviewer_id == assignment.reviewer_id
                ):
                    raise DuplicateLiveAssignmentError(
                        assignment.submission_id, assignment.reviewer_id
                    )
        self._assignments[assignment.id] = assignment

    async def get_by_id(self, assignment_id: UUID) -> PeerAssignment | None:
        return self._assignments.get(assignment_id)

    async def list_by_submission(self, submission_id: UUID) -> list[PeerAssignment]:
        found = [a for a in self._assignments.values() if a.submission_id == submission_id]
        found.sort(key=lambda a: (a.created_at, str(a.id)))
        return found

    async def list_overdue_pending(self, now: datetime) -> list[PeerAssignment]:
        overdue = [a for a in self._assignments.values() if a.is_overdue(now)]
        overdue.sort(key=lambda a: a.deadline)
        return overdue

    async def list_pending_due_between(
        self,
        after: datetime,
        until: datetime,
    ) -> list[PeerAssignment]:
        due = [
            a
            for a in self._assignments.values()
            if a.is_pending and after < a.deadline <= until
        ]
        due.sort(key=lambda a: a.deadline)
        return due

    async def list_unreplaced_expired(self) -> list[PeerAssignment]:
        replaced = {
            a.replaces_assignment_id
            for a in self._assignments.values()
            if a.replaces_assignment_id is not None
        }
        expired = [
            a
            for a in self._assignments.values()
            if a.status == AssignmentStatus.EXPIRED
            and a.reassignment_settled_at is None
            and a.id not in replaced
        ]
        expired.sort(key=lambda a: (a.deadline, str(a.id)))
        return expired

    async def expire_if_pending(
        self,
        assignment_id: UUID,
        expired_at: datetime,
    ) -> PeerAssignment | None:
        current = self._assignments.get(assignment_id)
        if current is None:
            raise AssignmentNotFoundError(assignment_id)
        if not current.is_pending:
            return None
        expired = current.with_expired(expired_at)
        self._assignments[assignment_id] = expired
        return expired

    async def complete_if_pending(
        self,
        assignment_id: UUID,
        completed_at: datetime,
    ) -> PeerAssignment | None:
        current = self._assignments.get(assignment_id)
        if current is None:
            raise AssignmentNotFoundError(assignment_id)
        if not current.is_pending:
            return None
        completed = current.with_completed(completed_at)
        self._assignments[assignment_id] = completed
        return completed

    async def mark_tier_notified(
        self,
        assignment_id: UUID,
        tier: NotificationTier,
        sent_at: datetime,
    ) -> bool:
        current = self._assignments.get(assignment_id)
        if current is None:
            raise AssignmentNotFoundError(assignment_id)
        if not current.is_pending or current.tier_sent_at(tier) is not None:
            return False
        self._assignments[assignment_id] = current.with_tier_sent(tier, sent_at)
        return True

    async def count_expired_by_reviewer(
        self,
        reviewer_ids: Iterable[UUID],
    ) -> dict[UUID, int]:
        wanted = set(reviewer_ids)
        counts: dict[UUID, int] = {reviewer_id: 0 for reviewer_id in wanted}
        for assignment in self._assignments.values():
            if assignment.status == AssignmentStatus.EXPIRED and assignment.reviewer_id in wanted:
                counts[assignment.reviewer_id] += 1
        return counts

    async def annotate(self, assignment_id: UUID, note: str) -> None:
        current = self._assignments.get(assignment_id)
        if current is None:
            raise AssignmentNotFoundError(assignment_id)
        self._assignments[assignment_id] = current.with_annotation(note)

    async def settle_without_replacement(
        self,
        assignment_id: UUID,
        settled_at: datetime,
        note: str,
    ) -> bool:
        current = self._assignments.get(assignment_id)
        if current is None:
            raise AssignmentNotFoundError(assignment_id)
        if current.status != AssignmentStatus.EXPIRED:
            return False
        if current.reassignment_settled_at is not None:
            return False
        self._assignments[assignment_id] = current.with_reassignment_settled(settled_at, note)
        return True

    def put(self, assignment: PeerAssignment) -> None:
        """Store an assignment as-is, bypassing checks. For testing only."""
        self._assignments[assignment.id] = assignment

    def all(self) -> list[PeerAssignment]:
        """Return every stored assignment. For testing only."""
        return list(self._assignments.values())

    def clear(self) -> None:
        """Clear all stored assignments. For testing only."""
        self._assignments.clear()

    def count(self) -> int:
        """Return number of stored assignments. For testing only."""
        return len(self._assignments)
