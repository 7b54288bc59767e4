"""Review domain errors."""

from __future__ import annotations

from uuid import UUID

from peer_verification.domain.exceptions import PeerVerificationError


class ReviewError(PeerVerificationError):
    """Base exception for review-related errors."""

    pass


class InvalidSubScoreError(ReviewError):
    """Raised when a sub-score falls outside the inclusive [1, 5] range."""

    def __init__(self, criterion: str, value: object) -> None:
        """Initialize the error.

        Args:
            criterion: Name of the offending criterion.
            value: The rejected value.
        """
        self.criterion = criterion
        self.value = value
        super().__init__(f"Sub-score {criterion} must be an integer in 1..5, got {value!r}")


class ReviewAlreadyExistsError(ReviewError):
    """Raised when a second review is submitted for the same assignment."""

    def __init__(self, assignment_id: UUID, existing_review_id: UUID | None = None) -> None:
        self.assignment_id = assignment_id
        self.existing_review_id = existing_review_id
        msg = f"Review already exists for assignment {assignment_id}"
        if existing_review_id:
            msg += f" (review_id={existing_review_id})"
        super().__init__(msg)


class ReviewNotFoundError(ReviewError):
    """Raised when a review does not exist."""

    def __init__(self, review_id: UUID) -> None:
        self.review_id = review_id
        super().__init__(f"Review {review_id} not found")


class JustificationRequiredError(ReviewError):
    """Raised when a review or score override has an empty justification."""

    def __init__(self, action: str) -> None:
        self.action = action
        super().__init__(f"{action} requires a non-empty justification")


class EmptyOverrideError(ReviewError):
    """Raised when an override names no sub-score to change."""

    def __init__(self, review_id: UUID) -> None:
        self.review_id = review_id
        super().__init__(f"Override for review {review_id} changes no sub-score")
