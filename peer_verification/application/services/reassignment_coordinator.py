"""Reassignment Coordinator: replaces expired assignments.

An expired assignment is "handled" once another assignment points back at
it through ``replaces_assignment_id``, or once it is settled without a
replacement because its submission was decided or already had its full
review set. The sweep never changes an expired record's status or
reviewer, and a repeated sweep finds nothing left to do.

Replacements exclude the original reviewer and every reviewer holding a
pending or done assignment on the submission. A replacement that finds no
eligible reviewer is logged as a shortfall and retried on the next sweep.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any
from uuid import UUID

from structlog import get_logger

from peer_verification.application.dtos.sweep import (
    AllocationResult,
    ReassignmentSweepResult,
    ShortfallEntry,
)
from peer_verification.application.services.side_effects import record_audit
from peer_verification.domain.errors.assignment import (
    AssignmentAlreadyReplacedError,
    AssignmentNotFoundError,
    AssignmentNotPendingError,
    ReassignmentJustificationError,
)
from peer_verification.domain.errors.integrity import DataIntegrityError
from peer_verification.domain.errors.submission import SubmissionNotFoundError
from peer_verification.domain.models.assignment import AssignmentStatus, PeerAssignment
from peer_verification.domain.models.audit import AuditAction, AuditEntry
from peer_verification.domain.models.submission import SubmissionStatus

if TYPE_CHECKING:
    from peer_verification.application.ports.assignment_repository import (
        AssignmentRepositoryProtocol,
    )
    from peer_verification.application.ports.audit_log import AuditLogProtocol
    from peer_verification.application.ports.contest_policy import (
        ContestPolicyProviderProtocol,
    )
    from peer_verification.application.ports.submission_repository import (
        SubmissionRepositoryProtocol,
    )
    from peer_verification.application.ports.time_authority import (
        TimeAuthorityProtocol,
    )
    from peer_verification.application.services.assignment_allocator import (
        AssignmentAllocator,
    )
    from peer_verification.domain.models.policy import ContestReviewPolicy

logger = get_logger(__name__)

DEFAULT_MIN_JUSTIFICATION_LENGTH: int = 10
"""Minimum characters in an administrator's manual reassignment reason."""


class ReassignmentCoordinator:
    """Creates replacement assignments for expired ones.

    Example:
        >>> coordinator = ReassignmentCoordinator(
        ...     assignment_repo=assignment_repo,
        ...     submission_repo=submission_repo,
        ...     policy_provider=policy_provider,
        ...     allocator=allocator,
        ...     time_authority=clock,
        ... )
        >>> result = await coordinator.reassign_expired()
    """

    def __init__(
        self,
        assignment_repo: AssignmentRepositoryProtocol,
        submission_repo: SubmissionRepositoryProtocol,
        policy_provider: ContestPolicyProviderProtocol,
        allocator: AssignmentAllocator,
        time_authority: TimeAuthorityProtocol,
        audit_log: AuditLogProtocol | None = None,
        min_justification_length: int = DEFAULT_MIN_JUSTIFICATION_LENGTH,
    ) -> None:
        self._assignment_repo = assignment_repo
        self._submission_repo = submission_repo
        self._policy_provider = policy_provider
        self._allocator = allocator
        self._time = time_authority
        self._audit_log = audit_log
        self._min_justification_length = min_justification_length

    async def reassign_expired(self, now: datetime | None = None) -> ReassignmentSweepResult:
        """Create one replacement per unreplaced expired assignment.

        Expired assignments are skipped and settled without a replacement
        when the submission is no longer awaiting peer verification or
        already has its full live set, so later sweeps do not revisit them.

        Args:
            now: Creation time for replacements; defaults to the time authority.

        Returns:
            ReassignmentSweepResult. A failure on one assignment never
            aborts the batch.
        """
        now = now or self._time.now()
        log = logger.bind(sweep="reassignment", now=now.isoformat())

        expired = await self._assignment_repo.list_unreplaced_expired()
        log.info("reassignment_sweep_started", candidates=len(expired))

        policies: dict[UUID, ContestReviewPolicy] = {}
        reassigned = 0
        skipped = 0
        shortfalls: list[ShortfallEntry] = []
        errors: list[str] = []
        violations: list[str] = []

        for assignment in expired:
            item_log = log.bind(
                assignment_id=str(assignment.id),
                submission_id=str(assignment.submission_id),
            )
            try:
                submission = await self._submission_repo.get_by_id(assignment.submission_id)
                if submission is None:
                    raise SubmissionNotFoundError(assignment.submission_id)

                if submission.status != SubmissionStatus.PEER_VERIFICATION_PENDING:
                    item_log.debug(
                        "reassignment_not_needed",
                        submission_status=submission.status.value,
                    )
                    await self._settle(
                        assignment,
                        f"submission is {submission.status.value}",
                        now,
                        item_log,
                    )
                    skipped += 1
                    continue

                policy = policies.get(submission.contest_id)
                if policy is None:
                    policy = await self._policy_provider.get_policy(submission.contest_id)
                    policies[submission.contest_id] = policy

                result = await self._allocator.allocate(
                    submission,
                    1,
                    policy,
                    exclude_reviewer=assignment.reviewer_id,
                    replaces_assignment_id=assignment.id,
                    now=now,
                )
                if result.requested == 0:
                    await self._settle(
                        assignment, "submission already has its full review set", now, item_log
                    )
                    skipped += 1
                    continue
            except DataIntegrityError as e:
                item_log.error("integrity_violation", error=str(e))
                violations.append(f"Assignment {assignment.id}: {e}")
                continue
            except Exception as e:
                item_log.error("reassignment_failed", error=str(e))
                errors.append(f"Failed to reassign {assignment.id}: {e}")
                continue

            entry = result.shortfall_entry()
            if entry is not None:
                item_log.warning(
                    "reassignment_shortfall",
                    original_reviewer_id=str(assignment.reviewer_id),
                )
                shortfalls.append(entry)
                continue

            reassigned += result.allocated
            await self._audit_reassignment(assignment, result, now, item_log)

        log.info(
            "reassignment_sweep_completed",
            reassigned_count=reassigned,
            skipped=skipped,
            shortfalls=len(shortfalls),
            errors=len(errors),
        )
        return ReassignmentSweepResult(
            reassigned_count=reassigned,
            skipped_count=skipped,
            shortfalls=tuple(shortfalls),
            errors=tuple(errors),
            integrity_violations=tuple(violations),
        )

    async def reassign_assignment(
        self,
        assignment_id: UUID,
        admin_id: UUID,
        justification: str,
    ) -> AllocationResult:
        """Administratively move an assignment to a different reviewer.

        A pending assignment is expired first (conditionally). An expired
        one that has not been replaced yet is replaced directly.

        Args:
            assignment_id: Assignment to move.
            admin_id: Administrator performing the action.
            justification: Mandatory reason, at least the configured length.

        Returns:
            AllocationResult for the replacement; may carry a shortfall.

        Raises:
            ReassignmentJustificationError: Justification too short.
            AssignmentNotFoundError: Unknown assignment.
            AssignmentNotPendingError: Assignment already done.
            AssignmentAlreadyReplacedError: Expired assignment already replaced.
            SubmissionNotFoundError: Assignment references a missing submission.
        """
        reason = (justification or "").strip()
        if len(reason) < self._min_justification_length:
            raise ReassignmentJustificationError(self._min_justification_length)

        log = logger.bind(assignment_id=str(assignment_id), admin_id=str(admin_id))
        now = self._time.now()

        assignment = await self._assignment_repo.get_by_id(assignment_id)
        if assignment is None:
            raise AssignmentNotFoundError(assignment_id)

        if assignment.status == AssignmentStatus.PENDING:
            expired = await self._assignment_repo.expire_if_pending(assignment_id, now)
            if expired is None:
                current = await self._assignment_repo.get_by_id(assignment_id)
                status = current.status.value if current else "missing"
                raise AssignmentNotPendingError(assignment_id, status)
            assignment = expired
            log.info("assignment_expired_for_manual_reassignment")
        elif assignment.status == AssignmentStatus.DONE:
            raise AssignmentNotPendingError(assignment_id, assignment.status.value)

        siblings = await self._assignment_repo.list_by_submission(assignment.submission_id)
        for sibling in siblings:
            if sibling.replaces_assignment_id == assignment.id:
                raise AssignmentAlreadyReplacedError(assignment.id, sibling.id)

        submission = await self._submission_repo.get_by_id(assignment.submission_id)
        if submission is None:
            raise SubmissionNotFoundError(assignment.submission_id)

        policy = await self._policy_provider.get_policy(submission.contest_id)
        result = await self._allocator.allocate(
            submission,
            1,
            policy,
            exclude_reviewer=assignment.reviewer_id,
            replaces_assignment_id=assignment.id,
            now=now,
        )

        await self._assignment_repo.annotate(
            assignment.id,
            f"manually reassigned by {admin_id} at {now.isoformat()}: {reason}",
        )
        await record_audit(
            self._audit_log,
            AuditEntry(
                action=AuditAction.ASSIGNMENT_MANUALLY_REASSIGNED,
                entity_id=assignment.id,
                occurred_at=now,
                actor_id=admin_id,
                details={
                    "submission_id": str(assignment.submission_id),
                    "original_reviewer_id": str(assignment.reviewer_id),
                    "replacement_ids": [str(a.id) for a in result.assignments],
                    "justification": reason,
                },
            ),
            log,
        )

        if result.shortfall:
            log.warning("manual_reassignment_shortfall")
        else:
            log.info("manual_reassignment_completed", allocated=result.allocated)
        return result

    async def _settle(
        self,
        assignment: PeerAssignment,
        reason: str,
        now: datetime,
        log: Any,
    ) -> None:
        settled = await self._assignment_repo.settle_without_replacement(
            assignment.id,
            now,
            f"reassignment not required at {now.isoformat()}: {reason}",
        )
        if settled:
            log.info("reassignment_settled_without_replacement", reason=reason)

    async def _audit_reassignment(
        self,
        original: PeerAssignment,
        result: AllocationResult,
        now: datetime,
        log: Any,
    ) -> None:
        for replacement in result.assignments:
            await record_audit(
                self._audit_log,
                AuditEntry(
                    action=AuditAction.ASSIGNMENT_REASSIGNED,
                    entity_id=replacement.id,
                    occurred_at=now,
                    details={
                        "submission_id": str(original.submission_id),
                        "replaces_assignment_id": str(original.id),
                        "original_reviewer_id": str(original.reviewer_id),
                        "new_reviewer_id": str(replacement.reviewer_id),
                    },
                ),
                log,
            )
