"""In-memory stub implementation of SubmissionRepositoryProtocol."""

from __future__ import annotations

from dataclasses import replace
from uuid import UUID

from peer_verification.domain.models.submission import Submission, SubmissionStatus


class SubmissionRepositoryStub:
    """In-memory implementation of SubmissionRepositoryProtocol."""

    def __init__(self) -> None:
        self._submissions: dict[UUID, Submission] = {}

    async def get_by_id(self, submission_id: UUID) -> Submission | None:
        return self._submissions.get(submission_id)

    async def save(self, submission: Submission) -> None:
        self._submissions[submission.id] = submission

    async def transition_status_if(
        self,
        submission_id: UUID,
        expected: SubmissionStatus,
        target: SubmissionStatus,
    ) -> bool:
        current = self._submissions.get(submission_id)
        if current is None or current.status != expected:
            return False
        if not expected.can_transition_to(target):
            raise ValueError(
                f"Cannot transition submission from {expected.value} to {target.value}"
            )
        self._submissions[submission_id] = replace(current, status=target)
        return True

    async def list_by_status(self, status: SubmissionStatus) -> list[Submission]:
        return [s for s in self._submissions.values() if s.status == status]

    async def list_by_contest(self, contest_id: UUID) -> list[Submission]:
        return [s for s in self._submissions.values() if s.contest_id == contest_id]

    def put(self, submission: Submission) -> None:
        """Store a submission synchronously. For testing only."""
        self._submissions[submission.id] = submission

    def clear(self) -> None:
        """Clear all stored submissions. For testing only."""
        self._submissions.clear()

    def count(self) -> int:
        """Return number of stored submissions. For testing only."""
        return len(self._submissions)
