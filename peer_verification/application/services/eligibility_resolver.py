"""Eligibility Resolver: which reviewers may take a submission.

A candidate from the reviewer directory is eligible for a submission iff:
- they are not the submission's author
- they are not banned
- they hold no live (pending or done) assignment on the submission
- they are not the explicitly excluded reviewer
- their system-wide expired-assignment count is below the strike threshold

An empty result is a normal outcome that callers report as a shortfall.
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

from structlog import get_logger

if TYPE_CHECKING:
    from peer_verification.application.ports.assignment_repository import (
        AssignmentRepositoryProtocol,
    )
    from peer_verification.application.ports.reviewer_directory import (
        ReviewerDirectoryProtocol,
    )
    from peer_verification.domain.models.submission import Submission

logger = get_logger(__name__)

DEFAULT_STRIKE_THRESHOLD: int = 2
"""Expired assignments at which a reviewer is no longer selected."""


class EligibilityResolver:
    """Computes the eligible reviewer set for a submission.

    Pure with respect to its inputs: it reads the directory and the
    assignment repository and never writes.

    Example:
        >>> resolver = EligibilityResolver(directory, assignment_repo)
        >>> eligible = await resolver.resolve_eligible(submission)
    """

    def __init__(
        self,
        reviewer_directory: ReviewerDirectoryProtocol,
        assignment_repo: AssignmentRepositoryProtocol,
        strike_threshold: int = DEFAULT_STRIKE_THRESHOLD,
    ) -> None:
        """Initialize the resolver.

        Args:
            reviewer_directory: Source of candidate reviewers.
            assignment_repo: Used for existing assignments and strike counts.
            strike_threshold: Expired-assignment count that disqualifies.
        """
        if strike_threshold < 1:
            raise ValueError(f"strike_threshold must be positive, got {strike_threshold}")
        self._reviewer_directory = reviewer_directory
        self._assignment_repo = assignment_repo
        self._strike_threshold = strike_threshold

    @property
    def strike_threshold(self) -> int:
        return self._strike_threshold

    async def resolve_eligible(
        self,
        submission: Submission,
        exclude_reviewer: UUID | None = None,
    ) -> frozenset[UUID]:
        """Return the IDs of reviewers currently eligible for a submission.

        Args:
            submission: Submission needing reviewers.
            exclude_reviewer: Additional reviewer to exclude (the original
                holder of an expired assignment being replaced).

        Returns:
            Possibly empty frozenset of eligible reviewer IDs.
        """
        log = logger.bind(
            submission_id=str(submission.id),
            contest_id=str(submission.contest_id),
        )

        candidates = await self._reviewer_directory.list_candidates(submission.contest_id)
        existing = await self._assignment_repo.list_by_submission(submission.id)
        already_assigned = {a.reviewer_id for a in existing if a.is_live}

        excluded = {submission.author_id, *already_assigned}
        if exclude_reviewer is not None:
            excluded.add(exclude_reviewer)

        remaining = [
            reviewer.id
            for reviewer in candidates
            if not reviewer.is_banned and reviewer.id not in excluded
        ]
        if not remaining:
            log.debug("no_candidates_after_exclusions", candidate_count=len(candidates))
            return frozenset()

        strikes = await self._assignment_repo.count_expired_by_reviewer(remaining)
        eligible = frozenset(
            reviewer_id
            for reviewer_id in remaining
            if strikes.get(reviewer_id, 0) < self._strike_threshold
        )

        log.debug(
            "eligibility_resolved",
            candidate_count=len(candidates),
            struck_out=len(remaining) - len(eligible),
            eligible_count=len(eligible),
        )
        return eligible
