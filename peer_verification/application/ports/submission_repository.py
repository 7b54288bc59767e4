"""Submission repository port."""

from __future__ import annotations

from typing import Protocol
from uuid import UUID

from peer_verification.domain.models.submission import Submission, SubmissionStatus


class SubmissionRepositoryProtocol(Protocol):
    """Persistence contract for submissions under peer verification."""

    async def get_by_id(self, submission_id: UUID) -> Submission | None:
        """Retrieve a submission by ID, or None."""
        ...

    async def save(self, submission: Submission) -> None:
        """Insert or replace a submission record."""
        ...

    async def transition_status_if(
        self,
        submission_id: UUID,
        expected: SubmissionStatus,
        target: SubmissionStatus,
    ) -> bool:
        """Conditionally move a submission between states.

        Returns:
            True if the submission was in ``expected`` and is now in ``target``.
        """
        ...

    async def list_by_status(self, status: SubmissionStatus) -> list[Submission]:
        """List submissions in a given status."""
        ...

    async def list_by_contest(self, contest_id: UUID) -> list[Submission]:
        """List all submissions of a contest."""
        ...
