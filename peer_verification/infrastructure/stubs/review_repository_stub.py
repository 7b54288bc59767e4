"""In-memory stub implementation of ReviewRepositoryProtocol."""

from __future__ import annotations

from uuid import UUID

from peer_verification.domain.errors.review import (
    ReviewAlreadyExistsError,
    ReviewNotFoundError,
)
from peer_verification.domain.models.review import PeerReview


class ReviewRepositoryStub:
    """In-memory implementation of ReviewRepositoryProtocol."""

    def __init__(self) -> None:
        self._reviews: dict[UUID, PeerReview] = {}
        self._by_assignment: dict[UUID, UUID] = {}  # assignment_id -> review_id

    async def add(self, review: PeerReview) -> None:
        """Insert a review.

        Raises:
            ReviewAlreadyExistsError: Assignment already has a review.
        """
        existing_id = self._by_assignment.get(review.assignment_id)
        if existing_id is not None:
            raise ReviewAlreadyExistsError(review.assignment_id, existing_id)
        self._reviews[review.id] = review
        self._by_assignment[review.assignment_id] = review.id

    async def update(self, review: PeerReview) -> None:
        if review.id not in self._reviews:
            raise ReviewNotFoundError(review.id)
        self._reviews[review.id] = review

    async def get_by_id(self, review_id: UUID) -> PeerReview | None:
        return self._reviews.get(review_id)

    async def get_by_assignment(self, assignment_id: UUID) -> PeerReview | None:
        review_id = self._by_assignment.get(assignment_id)
        if review_id is None:
            return None
        return self._reviews.get(review_id)

    async def list_by_submission(self, submission_id: UUID) -> list[PeerReview]:
        found = [r for r in self._reviews.values() if r.submission_id == submission_id]
        found.sort(key=lambda r: r.submitted_at)
        return found

    def put(self, review: PeerReview) -> None:
        """Store a review bypassing checks. For testing only."""
        self._reviews[review.id] = review
        self._by_assignment[review.assignment_id] = review.id

    def clear(self) -> None:
        """Clear all stored reviews. For testing only."""
        self._reviews.clear()
        self._by_assignment.clear()
