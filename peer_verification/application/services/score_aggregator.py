"""Score Aggregator: turns completed reviews into a submission score.

Uses a simple arithmetic mean per criterion, with no trimming or
weighting. Every review must belong to a done assignment of the same
submission; anything else is a data-integrity violation and aborts the
recomputation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

from structlog import get_logger

from peer_verification.application.services.result_decider import DecisionTrigger
from peer_verification.domain.errors.integrity import ReviewWithoutAssignmentError
from peer_verification.domain.errors.submission import SubmissionNotFoundError
from peer_verification.domain.models.assignment import AssignmentStatus
from peer_verification.domain.models.score import PeerScore

if TYPE_CHECKING:
    from peer_verification.application.ports.assignment_repository import (
        AssignmentRepositoryProtocol,
    )
    from peer_verification.application.ports.contest_policy import (
        ContestPolicyProviderProtocol,
    )
    from peer_verification.application.ports.review_repository import (
        ReviewRepositoryProtocol,
    )
    from peer_verification.application.ports.submission_repository import (
        SubmissionRepositoryProtocol,
    )
    from peer_verification.application.ports.time_authority import (
        TimeAuthorityProtocol,
    )
    from peer_verification.application.services.result_decider import ResultDecider

logger = get_logger(__name__)


class ScoreAggregator:
    """Recomputes and persists a submission's peer score.

    When a ResultDecider is wired in, each recomputation is followed by a
    decision check with the caller's trigger.
    """

    def __init__(
        self,
        submission_repo: SubmissionRepositoryProtocol,
        assignment_repo: AssignmentRepositoryProtocol,
        review_repo: ReviewRepositoryProtocol,
        policy_provider: ContestPolicyProviderProtocol,
        time_authority: TimeAuthorityProtocol,
        result_decider: ResultDecider | None = None,
    ) -> None:
        self._submission_repo = submission_repo
        self._assignment_repo = assignment_repo
        self._review_repo = review_repo
        self._policy_provider = policy_provider
        self._time = time_authority
        self._result_decider = result_decider

    async def recompute_score(
        self,
        submission_id: UUID,
        trigger: DecisionTrigger = DecisionTrigger.REVIEW_COMPLETED,
    ) -> PeerScore:
        """Recompute the score from all reviews on done assignments.

        Args:
            submission_id: Submission to aggregate.
            trigger: Passed to the decider after the score is saved.

        Returns:
            The freshly computed PeerScore.

        Raises:
            SubmissionNotFoundError: Unknown submission.
            ReviewWithoutAssignmentError: A review's assignment is missing
                or not done.
        """
        log = logger.bind(submission_id=str(submission_id), trigger=trigger.value)

        submission = await self._submission_repo.get_by_id(submission_id)
        if submission is None:
            raise SubmissionNotFoundError(submission_id)

        assignments = {
            a.id: a for a in await self._assignment_repo.list_by_submission(submission_id)
        }
        reviews = await self._review_repo.list_by_submission(submission_id)

        for review in reviews:
            assignment = assignments.get(review.assignment_id)
            if assignment is None:
                raise ReviewWithoutAssignmentError(
                    review.id, review.assignment_id, "assignment not found on submission"
                )
            if assignment.status != AssignmentStatus.DONE:
                raise ReviewWithoutAssignmentError(
                    review.id,
                    review.assignment_id,
                    f"assignment status is {assignment.status.value}",
                )

        score = PeerScore.from_reviews(reviews, computed_at=self._time.now())
        await self._submission_repo.save(submission.with_score(score))

        log.info(
            "peer_score_recomputed",
            review_count=score.review_count,
            overall=score.overall,
        )

        if self._result_decider is not None:
            await self._result_decider.decide(submission_id, trigger)

        return score

    async def visible_score_for_author(
        self,
        submission_id: UUID,
        results_phase_open: bool = False,
    ) -> PeerScore | None:
        """Return the score an author may see, or None while hidden.

        Scores stay hidden from authors until the contest enters its
        results phase, unless the policy makes them visible early.
        """
        submission = await self._submission_repo.get_by_id(submission_id)
        if submission is None:
            raise SubmissionNotFoundError(submission_id)

        policy = await self._policy_provider.get_policy(submission.contest_id)
        if not (policy.results_visible or results_phase_open):
            return None
        return submission.peer_score
