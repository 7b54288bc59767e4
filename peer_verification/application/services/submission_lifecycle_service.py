"""Submission lifecycle: entering peer verification."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

from structlog import get_logger

from peer_verification.domain.errors.submission import (
    InvalidSubmissionStateError,
    SubmissionNotFoundError,
)
from peer_verification.domain.models.submission import SubmissionStatus

if TYPE_CHECKING:
    from peer_verification.application.dtos.sweep import AllocationResult
    from peer_verification.application.ports.contest_policy import (
        ContestPolicyProviderProtocol,
    )
    from peer_verification.application.ports.submission_repository import (
        SubmissionRepositoryProtocol,
    )
    from peer_verification.application.services.assignment_allocator import (
        AssignmentAllocator,
    )

logger = get_logger(__name__)


class SubmissionLifecycleService:
    """Moves submissions into peer verification and allocates reviewers."""

    def __init__(
        self,
        submission_repo: SubmissionRepositoryProtocol,
        policy_provider: ContestPolicyProviderProtocol,
        allocator: AssignmentAllocator,
    ) -> None:
        self._submission_repo = submission_repo
        self._policy_provider = policy_provider
        self._allocator = allocator

    async def enter_peer_verification(self, submission_id: UUID) -> AllocationResult:
        """Transition a submission to peer_verification_pending and allocate.

        Re-entrant: calling again for a submission already awaiting peer
        verification only tops up missing assignments, and does nothing
        when the live set is complete.

        Args:
            submission_id: Submission entering review.

        Returns:
            AllocationResult of this call.

        Raises:
            SubmissionNotFoundError: Unknown submission.
            InvalidSubmissionStateError: Submission already decided.
        """
        log = logger.bind(submission_id=str(submission_id))

        submission = await self._submission_repo.get_by_id(submission_id)
        if submission is None:
            raise SubmissionNotFoundError(submission_id)

        if submission.status == SubmissionStatus.SUBMITTED:
            moved = await self._submission_repo.transition_status_if(
                submission_id,
                SubmissionStatus.SUBMITTED,
                SubmissionStatus.PEER_VERIFICATION_PENDING,
            )
            if moved:
                log.info("submission_entered_peer_verification")
            submission = await self._submission_repo.get_by_id(submission_id)
            if submission is None:
                raise SubmissionNotFoundError(submission_id)

        if submission.status != SubmissionStatus.PEER_VERIFICATION_PENDING:
            raise InvalidSubmissionStateError(
                submission_id,
                submission.status.value,
                SubmissionStatus.PEER_VERIFICATION_PENDING.value,
            )

        policy = await self._policy_provider.get_policy(submission.contest_id)
        result = await self._allocator.ensure_assignments(submission, policy)

        log.info(
            "peer_verification_allocation",
            requested=result.requested,
            allocated=result.allocated,
            shortfall=result.shortfall,
        )
        return result
