"""Submission domain errors."""

from __future__ import annotations

from uuid import UUID

from peer_verification.domain.exceptions import PeerVerificationError


class SubmissionError(PeerVerificationError):
    """Base exception for submission-related errors."""

    pass


class SubmissionNotFoundError(SubmissionError):
    """Raised when a submission does not exist."""

    def __init__(self, submission_id: UUID) -> None:
        self.submission_id = submission_id
        super().__init__(f"Submission {submission_id} not found")


class InvalidSubmissionStateError(SubmissionError):
    """Raised when a submission lifecycle transition is not allowed.

    Attributes:
        submission_id: The submission UUID.
        current_status: Status the submission is in.
        target_status: Status the caller attempted to move to.
    """

    def __init__(
        self,
        submission_id: UUID,
        current_status: str,
        target_status: str,
    ) -> None:
        self.submission_id = submission_id
        self.current_status = current_status
        self.target_status = target_status
        super().__init__(
            f"Submission {submission_id} cannot transition "
            f"from {current_status} to {target_status}"
        )
