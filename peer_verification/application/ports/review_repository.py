"""Review repository port."""

from __future__ import annotations

from typing import Protocol
from uuid import UUID

from peer_verification.domain.models.review import PeerReview


class ReviewRepositoryProtocol(Protocol):
    """Persistence contract for peer reviews."""

    async def add(self, review: PeerReview) -> None:
        """Insert a review.

        Raises:
            ReviewAlreadyExistsError: If the assignment already has a review.
        """
        ...

    async def update(self, review: PeerReview) -> None:
        """Replace an existing review (administrative override only).

        Raises:
            ReviewNotFoundError: If the review does not exist.
        """
        ...

    async def get_by_id(self, review_id: UUID) -> PeerReview | None:
        ...

    async def get_by_assignment(self, assignment_id: UUID) -> PeerReview | None:
        ...

    async def list_by_submission(self, submission_id: UUID) -> list[PeerReview]:
        ...
