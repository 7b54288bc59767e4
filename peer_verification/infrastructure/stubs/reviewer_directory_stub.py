"""In-memory stub implementation of ReviewerDirectoryProtocol."""

from __future__ import annotations

from collections import defaultdict
from uuid import UUID

from peer_verification.domain.models.reviewer import Reviewer


class ReviewerDirectoryStub:
    """Reviewer directory backed by dictionaries.

    Example:
        >>> directory = ReviewerDirectoryStub()
        >>> directory.add_reviewer(reviewer, contest_id)
    """

    def __init__(self) -> None:
        self._reviewers: dict[UUID, Reviewer] = {}
        self._contest_members: defaultdict[UUID, list[UUID]] = defaultdict(list)

    def add_reviewer(self, reviewer: Reviewer, contest_id: UUID) -> None:
        """Register a reviewer as a candidate for a contest."""
        self._reviewers[reviewer.id] = reviewer
        if reviewer.id not in self._contest_members[contest_id]:
            self._contest_members[contest_id].append(reviewer.id)

    def ban(self, reviewer_id: UUID) -> None:
        """Mark a reviewer as banned."""
        reviewer = self._reviewers[reviewer_id]
        self._reviewers[reviewer_id] = Reviewer(
            id=reviewer.id,
            display_name=reviewer.display_name,
            email=reviewer.email,
            is_banned=True,
        )

    async def list_candidates(self, contest_id: UUID) -> list[Reviewer]:
        return [self._reviewers[i] for i in self._contest_members.get(contest_id, [])]

    async def get_reviewer(self, reviewer_id: UUID) -> Reviewer | None:
        return self._reviewers.get(reviewer_id)
