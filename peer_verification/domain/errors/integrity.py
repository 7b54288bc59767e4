"""Data-integrity violations.

These indicate a bug or a corrupted store rather than a user mistake.
They are never self-healed: sweeps report them in a dedicated list and
every other entry point lets them propagate.
"""

from __future__ import annotations

from uuid import UUID

from peer_verification.domain.exceptions import PeerVerificationError


class DataIntegrityError(PeerVerificationError):
    """Base exception for data-integrity violations."""

    pass


class DuplicateLiveAssignmentError(DataIntegrityError):
    """Raised when a second pending assignment would exist for one reviewer/submission pair."""

    def __init__(self, submission_id: UUID, reviewer_id: UUID) -> None:
        self.submission_id = submission_id
        self.reviewer_id = reviewer_id
        super().__init__(
            f"Reviewer {reviewer_id} already holds a pending assignment "
            f"for submission {submission_id}"
        )


class ReviewWithoutAssignmentError(DataIntegrityError):
    """Raised when a review references a missing or non-done assignment."""

    def __init__(self, review_id: UUID, assignment_id: UUID, reason: str) -> None:
        self.review_id = review_id
        self.assignment_id = assignment_id
        self.reason = reason
        super().__init__(
            f"Review {review_id} references assignment {assignment_id}: {reason}"
        )


class SelfReviewAssignmentError(DataIntegrityError):
    """Raised when an author is found assigned to their own submission."""

    def __init__(self, submission_id: UUID, reviewer_id: UUID) -> None:
        self.submission_id = submission_id
        self.reviewer_id = reviewer_id
        super().__init__(
            f"Author {reviewer_id} is assigned to review own submission {submission_id}"
        )
