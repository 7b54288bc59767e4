"""Result Decider: eliminate or reinstate, and shortlist selection.

The decision for a submission is made once, when its done count first
reaches the contest quorum. Later review completions update the score
but not the decision. An administrative score override re-decides from
the recomputed score, which may flip the outcome in either direction.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any
from uuid import UUID

from structlog import get_logger

from peer_verification.application.dtos.sweep import ShortlistResult
from peer_verification.application.services.side_effects import (
    dispatch_notification,
    record_audit,
)
from peer_verification.domain.errors.submission import SubmissionNotFoundError
from peer_verification.domain.models.assignment import AssignmentStatus
from peer_verification.domain.models.audit import AuditAction, AuditEntry
from peer_verification.domain.models.notification import (
    NotificationKind,
    PeerNotification,
)
from peer_verification.domain.models.submission import (
    PeerVerificationOutcome,
    Submission,
    SubmissionStatus,
)

if TYPE_CHECKING:
    from peer_verification.application.ports.assignment_repository import (
        AssignmentRepositoryProtocol,
    )
    from peer_verification.application.ports.audit_log import AuditLogProtocol
    from peer_verification.application.ports.contest_policy import (
        ContestPolicyProviderProtocol,
    )
    from peer_verification.application.ports.notification_dispatcher import (
        NotificationDispatcherProtocol,
    )
    from peer_verification.application.ports.submission_repository import (
        SubmissionRepositoryProtocol,
    )
    from peer_verification.application.ports.time_authority import (
        TimeAuthorityProtocol,
    )

logger = get_logger(__name__)


class DecisionTrigger(str, Enum):
    """Why the decider is being asked to decide."""

    REVIEW_COMPLETED = "review_completed"
    """A reviewer finished an assignment."""

    OVERRIDE = "override"
    """An administrator changed a sub-score after the fact."""


class ResultDecider:
    """Turns aggregated scores into peer verification outcomes."""

    def __init__(
        self,
        submission_repo: SubmissionRepositoryProtocol,
        assignment_repo: AssignmentRepositoryProtocol,
        policy_provider: ContestPolicyProviderProtocol,
        time_authority: TimeAuthorityProtocol,
        notification_dispatcher: NotificationDispatcherProtocol | None = None,
        audit_log: AuditLogProtocol | None = None,
    ) -> None:
        self._submission_repo = submission_repo
        self._assignment_repo = assignment_repo
        self._policy_provider = policy_provider
        self._time = time_authority
        self._notification_dispatcher = notification_dispatcher
        self._audit_log = audit_log

    async def decide(
        self,
        submission_id: UUID,
        trigger: DecisionTrigger = DecisionTrigger.REVIEW_COMPLETED,
    ) -> PeerVerificationOutcome:
        """Decide the submission's outcome if it is due.

        Args:
            submission_id: Submission to decide.
            trigger: What caused this call.

        Returns:
            The submission's outcome after this call; NONE while below quorum.

        Raises:
            SubmissionNotFoundError: Unknown submission.
        """
        log = logger.bind(submission_id=str(submission_id), trigger=trigger.value)

        submission = await self._submission_repo.get_by_id(submission_id)
        if submission is None:
            raise SubmissionNotFoundError(submission_id)

        if submission.status == SubmissionStatus.SUBMITTED:
            log.debug("decision_skipped_not_in_peer_verification")
            return submission.outcome

        if submission.status.is_decided() and trigger == DecisionTrigger.REVIEW_COMPLETED:
            return submission.outcome

        policy = await self._policy_provider.get_policy(submission.contest_id)
        assignments = await self._assignment_repo.list_by_submission(submission_id)
        done_count = sum(1 for a in assignments if a.status == AssignmentStatus.DONE)

        if done_count < policy.quorum and not submission.has_reached_quorum:
            log.debug("quorum_not_reached", done_count=done_count, quorum=policy.quorum)
            return submission.outcome

        overall = submission.peer_score.overall if submission.peer_score else 0.0
        outcome = (
            PeerVerificationOutcome.REINSTATED
            if overall >= policy.reinstatement_threshold
            else PeerVerificationOutcome.ELIMINATED
        )

        if outcome == submission.outcome and submission.status.is_decided():
            log.info("decision_unchanged", outcome=outcome.value, overall=overall)
            return outcome

        now = self._time.now()
        decided = submission.with_decision(outcome, quorum_reached_at=now)
        await self._submission_repo.save(decided)

        log.info(
            "peer_verification_decided",
            outcome=outcome.value,
            previous_outcome=submission.outcome.value,
            overall=overall,
            threshold=policy.reinstatement_threshold,
            done_count=done_count,
        )
        await self._announce(submission, decided, trigger, overall, log)
        return outcome

    async def select_shortlist(self, contest_id: UUID) -> ShortlistResult:
        """Mark the top-ranked quorum-reached submissions as finalists.

        Ranking is by overall score descending; ties go to the submission
        that reached quorum first, then by ID. Submissions that drop out of
        the top ``shortlist_size`` have their finalist flag cleared, so the
        call can be repeated after late overrides.

        Args:
            contest_id: Contest to shortlist.

        Returns:
            ShortlistResult with finalists in rank order.
        """
        log = logger.bind(contest_id=str(contest_id))
        policy = await self._policy_provider.get_policy(contest_id)
        submissions = await self._submission_repo.list_by_contest(contest_id)

        ranked = sorted(
            (
                s
                for s in submissions
                if s.has_reached_quorum and s.peer_score is not None
            ),
            key=_shortlist_rank_key,
        )
        finalists = ranked[: policy.shortlist_size]
        finalist_ids = {s.id for s in finalists}

        changed = 0
        for submission in submissions:
            should_be_finalist = submission.id in finalist_ids
            if submission.is_finalist != should_be_finalist:
                await self._submission_repo.save(submission.with_finalist(should_be_finalist))
                changed += 1

        result = ShortlistResult(
            contest_id=contest_id,
            finalist_ids=tuple(s.id for s in finalists),
            ranked_count=len(ranked),
        )
        log.info(
            "shortlist_selected",
            ranked_count=len(ranked),
            finalist_count=len(finalists),
            flags_changed=changed,
        )
        await record_audit(
            self._audit_log,
            AuditEntry(
                action=AuditAction.SHORTLIST_SELECTED,
                entity_id=contest_id,
                occurred_at=self._time.now(),
                details=result.to_dict(),
            ),
            log,
        )
        return result

    async def _announce(
        self,
        before: Submission,
        after: Submission,
        trigger: DecisionTrigger,
        overall: float,
        log: Any,
    ) -> None:
        now = self._time.now()
        await record_audit(
            self._audit_log,
            AuditEntry(
                action=AuditAction.OUTCOME_DECIDED,
                entity_id=after.id,
                occurred_at=now,
                details={
                    "outcome": after.outcome.value,
                    "previous_outcome": before.outcome.value,
                    "overall": overall,
                    "trigger": trigger.value,
                },
            ),
            log,
        )
        await dispatch_notification(
            self._notification_dispatcher,
            PeerNotification(
                kind=NotificationKind.OUTCOME_DECIDED,
                recipient_id=after.author_id,
                submission_id=after.id,
                created_at=now,
                details={"outcome": after.outcome.value},
            ),
            log,
        )


def _shortlist_rank_key(submission: Submission) -> tuple[float, object, str]:
    assert submission.peer_score is not None
    assert submission.quorum_reached_at is not None
    return (-submission.peer_score.overall, submission.quorum_reached_at, str(submission.id))
