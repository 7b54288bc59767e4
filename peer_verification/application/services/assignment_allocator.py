"""Assignment Allocator: creates peer assignments for a submission.

Selection draws one reviewer at a time, uniformly at random from the
current eligible set, recomputing eligibility before every draw so a
reviewer picked in this batch can never be picked twice. The eligible
set is sorted before drawing so a seeded random source reproduces the
same selection.

Allocation for a single submission is serialized with a per-submission
lock and capped so the live count (pending + done) never exceeds the
policy's target. The lock lives in this process and is dropped once no
caller holds or awaits it; across processes only the repository's
pending-pair uniqueness holds, so two workers may each top up the same
submission past its target.
"""

from __future__ import annotations

import asyncio
from collections import defaultdict
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime
from typing import TYPE_CHECKING, Any
from uuid import UUID

from structlog import get_logger
from uuid6 import uuid7

from peer_verification.application.dtos.sweep import (
    AllocationResult,
    ShortfallEntry,
    ShortfallSweepResult,
)
from peer_verification.application.services.side_effects import (
    dispatch_notification,
    record_audit,
)
from peer_verification.domain.errors.integrity import (
    DataIntegrityError,
    SelfReviewAssignmentError,
)
from peer_verification.domain.models.assignment import PeerAssignment
from peer_verification.domain.models.audit import AuditAction, AuditEntry
from peer_verification.domain.models.notification import (
    NotificationKind,
    PeerNotification,
)
from peer_verification.domain.models.submission import SubmissionStatus

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
    from peer_verification.application.ports.random_source import RandomSourceProtocol
    from peer_verification.application.ports.submission_repository import (
        SubmissionRepositoryProtocol,
    )
    from peer_verification.application.ports.time_authority import (
        TimeAuthorityProtocol,
    )
    from peer_verification.application.services.eligibility_resolver import (
        EligibilityResolver,
    )
    from peer_verification.domain.models.policy import ContestReviewPolicy
    from peer_verification.domain.models.submission import Submission

logger = get_logger(__name__)


class AssignmentAllocator:
    """Allocates reviewers to submissions.

    Shortfall (fewer eligible reviewers than needed) is reported in the
    returned AllocationResult and never raised.

    Example:
        >>> allocator = AssignmentAllocator(
        ...     assignment_repo=assignment_repo,
        ...     submission_repo=submission_repo,
        ...     policy_provider=policy_provider,
        ...     eligibility_resolver=resolver,
        ...     random_source=SeededRandomSource(42),
        ...     time_authority=clock,
        ... )
        >>> result = await allocator.ensure_assignments(submission, policy)
        >>> result.shortfall
        0
    """

    def __init__(
        self,
        assignment_repo: AssignmentRepositoryProtocol,
        submission_repo: SubmissionRepositoryProtocol,
        policy_provider: ContestPolicyProviderProtocol,
        eligibility_resolver: EligibilityResolver,
        random_source: RandomSourceProtocol,
        time_authority: TimeAuthorityProtocol,
        notification_dispatcher: NotificationDispatcherProtocol | None = None,
        audit_log: AuditLogProtocol | None = None,
    ) -> None:
        self._assignment_repo = assignment_repo
        self._submission_repo = submission_repo
        self._policy_provider = policy_provider
        self._eligibility_resolver = eligibility_resolver
        self._random = random_source
        self._time = time_authority
        self._notification_dispatcher = notification_dispatcher
        self._audit_log = audit_log
        self._locks: dict[UUID, asyncio.Lock] = {}
        self._lock_users: defaultdict[UUID, int] = defaultdict(int)

    async def allocate(
        self,
        submission: Submission,
        count_needed: int,
        policy: ContestReviewPolicy,
        *,
        exclude_reviewer: UUID | None = None,
        replaces_assignment_id: UUID | None = None,
        now: datetime | None = None,
    ) -> AllocationResult:
        """Create up to ``count_needed`` pending assignments.

        Args:
            submission: Submission to allocate for.
            count_needed: Units requested by the caller.
            policy: Contest policy (target and deadline offset).
            exclude_reviewer: Reviewer never to select in this call.
            replaces_assignment_id: Lineage pointer written on each new
                assignment when replacing an expired one.
            now: Creation time; defaults to the time authority.

        Returns:
            AllocationResult with the created assignments. ``requested`` is
            the count after capping at the policy target.

        Raises:
            SelfReviewAssignmentError: If the author is already assigned.
            DuplicateLiveAssignmentError: If the repository rejects a
                duplicate pending pair.
        """
        if count_needed < 0:
            raise ValueError(f"count_needed must be non-negative, got {count_needed}")

        log = logger.bind(
            submission_id=str(submission.id),
            contest_id=str(submission.contest_id),
            count_needed=count_needed,
        )
        created_at = now or self._time.now()

        async with self._submission_lock(submission.id):
            existing = await self._assignment_repo.list_by_submission(submission.id)
            for assignment in existing:
                if assignment.reviewer_id == submission.author_id:
                    raise SelfReviewAssignmentError(submission.id, assignment.reviewer_id)

            live_count = sum(1 for a in existing if a.is_live)
            room = max(policy.target_reviewers - live_count, 0)
            requested = min(count_needed, room)
            if requested < count_needed:
                log.info(
                    "allocation_capped_at_target",
                    live_count=live_count,
                    target=policy.target_reviewers,
                    requested=requested,
                )

            created: list[PeerAssignment] = []
            for _ in range(requested):
                eligible = await self._eligibility_resolver.resolve_eligible(
                    submission, exclude_reviewer=exclude_reviewer
                )
                if not eligible:
                    break
                reviewer_id = self._random.choice(sorted(eligible, key=str))
                assignment = PeerAssignment(
                    id=uuid7(),
                    submission_id=submission.id,
                    reviewer_id=reviewer_id,
                    created_at=created_at,
                    deadline=created_at + policy.deadline_offset,
                    replaces_assignment_id=replaces_assignment_id,
                )
                await self._assignment_repo.add(assignment)
                created.append(assignment)

        result = AllocationResult(
            submission_id=submission.id,
            requested=requested,
            assignments=tuple(created),
            replaces_assignment_id=replaces_assignment_id,
        )

        if result.shortfall:
            log.warning(
                "reviewer_pool_shortfall",
                requested=requested,
                allocated=result.allocated,
                shortfall=result.shortfall,
            )
        elif created:
            log.info("assignments_allocated", allocated=result.allocated)

        for assignment in created:
            await self._announce(assignment, log)

        return result

    @asynccontextmanager
    async def _submission_lock(self, submission_id: UUID) -> AsyncIterator[None]:
        lock = self._locks.setdefault(submission_id, asyncio.Lock())
        self._lock_users[submission_id] += 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[submission_id] -= 1
            if self._lock_users[submission_id] == 0:
                del self._lock_users[submission_id]
                del self._locks[submission_id]

    async def ensure_assignments(
        self,
        submission: Submission,
        policy: ContestReviewPolicy,
    ) -> AllocationResult:
        """Top the submission up to the policy target.

        Idempotent: a submission that already has ``target_reviewers`` live
        assignments gets nothing new.
        """
        existing = await self._assignment_repo.list_by_submission(submission.id)
        live_count = sum(1 for a in existing if a.is_live)
        needed = max(policy.target_reviewers - live_count, 0)
        if needed == 0:
            return AllocationResult(submission_id=submission.id, requested=0)
        return await self.allocate(submission, needed, policy)

    async def allocate_shortfalls(self) -> ShortfallSweepResult:
        """Retry allocation for every submission still below target.

        Runs after the reassignment sweep so expired assignments get their
        lineage-tracked replacement first.

        Returns:
            ShortfallSweepResult with per-item errors collected.
        """
        log = logger.bind(sweep="shortfall_top_up")
        submissions = await self._submission_repo.list_by_status(
            SubmissionStatus.PEER_VERIFICATION_PENDING
        )

        policies: dict[UUID, ContestReviewPolicy] = {}
        allocated = 0
        shortfalls: list[ShortfallEntry] = []
        errors: list[str] = []
        violations: list[str] = []

        for submission in submissions:
            try:
                policy = policies.get(submission.contest_id)
                if policy is None:
                    policy = await self._policy_provider.get_policy(submission.contest_id)
                    policies[submission.contest_id] = policy
                result = await self.ensure_assignments(submission, policy)
            except DataIntegrityError as e:
                log.error(
                    "integrity_violation",
                    submission_id=str(submission.id),
                    error=str(e),
                )
                violations.append(f"Submission {submission.id}: {e}")
                continue
            except Exception as e:
                log.error(
                    "shortfall_top_up_failed",
                    submission_id=str(submission.id),
                    error=str(e),
                )
                errors.append(f"Failed to top up submission {submission.id}: {e}")
                continue

            allocated += result.allocated
            entry = result.shortfall_entry()
            if entry is not None:
                shortfalls.append(entry)

        log.info(
            "shortfall_top_up_completed",
            scanned=len(submissions),
            allocated=allocated,
            shortfalls=len(shortfalls),
            errors=len(errors),
        )
        return ShortfallSweepResult(
            allocated_count=allocated,
            shortfalls=tuple(shortfalls),
            errors=tuple(errors),
            integrity_violations=tuple(violations),
        )

    async def _announce(self, assignment: PeerAssignment, log: Any) -> None:
        await record_audit(
            self._audit_log,
            AuditEntry(
                action=AuditAction.ASSIGNMENT_CREATED,
                entity_id=assignment.id,
                occurred_at=assignment.created_at,
                details={
                    "submission_id": str(assignment.submission_id),
                    "reviewer_id": str(assignment.reviewer_id),
                    "deadline": assignment.deadline.isoformat(),
                    "replaces_assignment_id": (
                        str(assignment.replaces_assignment_id)
                        if assignment.replaces_assignment_id
                        else None
                    ),
                },
            ),
            log,
        )
        await dispatch_notification(
            self._notification_dispatcher,
            PeerNotification(
                kind=NotificationKind.ASSIGNMENT_CREATED,
                recipient_id=assignment.reviewer_id,
                submission_id=assignment.submission_id,
                assignment_id=assignment.id,
                deadline=assignment.deadline,
                created_at=assignment.created_at,
            ),
            log,
        )
