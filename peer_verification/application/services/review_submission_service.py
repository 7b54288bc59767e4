"""Review submission and administrative score override.

Submitting a review completes the reviewer's assignment with a
conditional pending -> done write, stores the review, then re-aggregates
the submission's score (which in turn asks the decider to decide).

An override rewrites only the sub-scores it names and re-aggregates
synchronously before returning, so a failed recomputation surfaces to
the administrator instead of leaving a stale score behind.
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

from structlog import get_logger
from uuid6 import uuid7

from peer_verification.application.services.result_decider import DecisionTrigger
from peer_verification.application.services.side_effects import record_audit
from peer_verification.domain.errors.assignment import (
    AssignmentDeadlinePassedError,
    AssignmentNotFoundError,
    AssignmentNotPendingError,
    NotAssignmentOwnerError,
)
from peer_verification.domain.errors.integrity import (
    ReviewWithoutAssignmentError,
    SelfReviewAssignmentError,
)
from peer_verification.domain.errors.review import (
    EmptyOverrideError,
    JustificationRequiredError,
    ReviewAlreadyExistsError,
    ReviewNotFoundError,
)
from peer_verification.domain.errors.submission import SubmissionNotFoundError
from peer_verification.domain.models.assignment import AssignmentStatus
from peer_verification.domain.models.audit import AuditAction, AuditEntry
from peer_verification.domain.models.review import PeerReview, ReviewCriterion

if TYPE_CHECKING:
    from peer_verification.application.ports.assignment_repository import (
        AssignmentRepositoryProtocol,
    )
    from peer_verification.application.ports.audit_log import AuditLogProtocol
    from peer_verification.application.ports.review_repository import (
        ReviewRepositoryProtocol,
    )
    from peer_verification.application.ports.submission_repository import (
        SubmissionRepositoryProtocol,
    )
    from peer_verification.application.ports.time_authority import (
        TimeAuthorityProtocol,
    )
    from peer_verification.application.services.score_aggregator import (
        ScoreAggregator,
    )
    from peer_verification.domain.models.score import PeerScore

logger = get_logger(__name__)


class ReviewSubmissionService:
    """Accepts reviewer submissions and administrative overrides.

    Example:
        >>> review = await service.submit_review(
        ...     assignment_id=assignment.id,
        ...     reviewer_id=assignment.reviewer_id,
        ...     clarity=4, argument=3, style=5, moral_depth=4,
        ...     justification="Well argued, uneven pacing.",
        ... )
    """

    def __init__(
        self,
        assignment_repo: AssignmentRepositoryProtocol,
        review_repo: ReviewRepositoryProtocol,
        submission_repo: SubmissionRepositoryProtocol,
        score_aggregator: ScoreAggregator,
        time_authority: TimeAuthorityProtocol,
        audit_log: AuditLogProtocol | None = None,
    ) -> None:
        self._assignment_repo = assignment_repo
        self._review_repo = review_repo
        self._submission_repo = submission_repo
        self._score_aggregator = score_aggregator
        self._time = time_authority
        self._audit_log = audit_log

    async def submit_review(
        self,
        assignment_id: UUID,
        reviewer_id: UUID,
        *,
        clarity: int,
        argument: int,
        style: int,
        moral_depth: int,
        justification: str,
    ) -> PeerReview:
        """Record a reviewer's review and complete the assignment.

        Args:
            assignment_id: Assignment being completed.
            reviewer_id: Reviewer submitting; must hold the assignment.
            clarity: Sub-score in 1..5.
            argument: Sub-score in 1..5.
            style: Sub-score in 1..5.
            moral_depth: Sub-score in 1..5.
            justification: Non-empty written rationale.

        Returns:
            The stored PeerReview.

        Raises:
            AssignmentNotFoundError: Unknown assignment.
            NotAssignmentOwnerError: Reviewer does not hold the assignment.
            AssignmentNotPendingError: Assignment already done or expired.
            AssignmentDeadlinePassedError: Deadline passed, not yet swept.
            ReviewAlreadyExistsError: Assignment already has a review.
            InvalidSubScoreError: A sub-score is out of range.
            JustificationRequiredError: Empty justification.
            SelfReviewAssignmentError: Reviewer is the submission's author.
        """
        log = logger.bind(assignment_id=str(assignment_id), reviewer_id=str(reviewer_id))
        now = self._time.now()

        assignment = await self._assignment_repo.get_by_id(assignment_id)
        if assignment is None:
            raise AssignmentNotFoundError(assignment_id)
        if assignment.reviewer_id != reviewer_id:
            raise NotAssignmentOwnerError(assignment_id, reviewer_id)
        if assignment.status != AssignmentStatus.PENDING:
            raise AssignmentNotPendingError(assignment_id, assignment.status.value)
        if assignment.deadline < now:
            raise AssignmentDeadlinePassedError(assignment_id, assignment.deadline)

        existing = await self._review_repo.get_by_assignment(assignment_id)
        if existing is not None:
            raise ReviewAlreadyExistsError(assignment_id, existing.id)

        submission = await self._submission_repo.get_by_id(assignment.submission_id)
        if submission is None:
            raise SubmissionNotFoundError(assignment.submission_id)
        if submission.author_id == reviewer_id:
            raise SelfReviewAssignmentError(submission.id, reviewer_id)

        text = (justification or "").strip()
        if not text:
            raise JustificationRequiredError("Review")

        # Validate scores before touching assignment state
        review = PeerReview(
            id=uuid7(),
            assignment_id=assignment_id,
            submission_id=assignment.submission_id,
            clarity=clarity,
            argument=argument,
            style=style,
            moral_depth=moral_depth,
            justification=text,
            submitted_at=now,
        )

        completed = await self._assignment_repo.complete_if_pending(assignment_id, now)
        if completed is None:
            current = await self._assignment_repo.get_by_id(assignment_id)
            status = current.status.value if current else "missing"
            log.warning("review_lost_race_with_sweep", current_status=status)
            raise AssignmentNotPendingError(assignment_id, status)

        await self._review_repo.add(review)
        log.info("peer_review_submitted", review_id=str(review.id))

        await record_audit(
            self._audit_log,
            AuditEntry(
                action=AuditAction.REVIEW_SUBMITTED,
                entity_id=review.id,
                occurred_at=now,
                actor_id=reviewer_id,
                details={
                    "assignment_id": str(assignment_id),
                    "submission_id": str(review.submission_id),
                },
            ),
            log,
        )

        await self._score_aggregator.recompute_score(
            review.submission_id, DecisionTrigger.REVIEW_COMPLETED
        )
        return review

    async def override_scores(
        self,
        review_id: UUID,
        admin_id: UUID,
        justification: str,
        overrides: dict[ReviewCriterion, int],
    ) -> PeerScore:
        """Overwrite selected sub-scores of a review and re-aggregate.

        Args:
            review_id: Review to change.
            admin_id: Administrator performing the override.
            justification: Mandatory reason, stored on the review and audited.
            overrides: Criteria to change and their new scores.

        Returns:
            The recomputed PeerScore of the review's submission.

        Raises:
            JustificationRequiredError: Empty justification.
            EmptyOverrideError: No criteria given.
            ReviewNotFoundError: Unknown review.
            ReviewWithoutAssignmentError: The review's assignment is missing
                or not done.
            InvalidSubScoreError: A new score is out of range.
        """
        text = (justification or "").strip()
        if not text:
            raise JustificationRequiredError("Score override")
        if not overrides:
            raise EmptyOverrideError(review_id)

        log = logger.bind(review_id=str(review_id), admin_id=str(admin_id))

        review = await self._review_repo.get_by_id(review_id)
        if review is None:
            raise ReviewNotFoundError(review_id)

        assignment = await self._assignment_repo.get_by_id(review.assignment_id)
        if assignment is None:
            raise ReviewWithoutAssignmentError(
                review.id, review.assignment_id, "assignment not found"
            )
        if assignment.status != AssignmentStatus.DONE:
            raise ReviewWithoutAssignmentError(
                review.id,
                review.assignment_id,
                f"assignment status is {assignment.status.value}",
            )

        now = self._time.now()
        updated = review.with_overridden_scores(
            overrides, admin_id=admin_id, justification=text, overridden_at=now
        )
        await self._review_repo.update(updated)

        changes = {
            criterion.value: {
                "old": review.score_for(criterion),
                "new": updated.score_for(criterion),
            }
            for criterion in overrides
        }
        log.info("peer_review_scores_overridden", changes=changes)

        await record_audit(
            self._audit_log,
            AuditEntry(
                action=AuditAction.REVIEW_SCORE_OVERRIDDEN,
                entity_id=review.id,
                occurred_at=now,
                actor_id=admin_id,
                details={
                    "submission_id": str(review.submission_id),
                    "changes": changes,
                    "justification": text,
                },
            ),
            log,
        )

        return await self._score_aggregator.recompute_score(
            review.submission_id, DecisionTrigger.OVERRIDE
        )
