"""Submission domain model for the peer verification phase.

- SubmissionStatus: Lifecycle state machine
- PeerVerificationOutcome: Decision recorded once quorum is reached
- Submission: Frozen aggregate root referenced by assignments
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from uuid import UUID

from peer_verification.domain.models.score import PeerScore


class SubmissionStatus(str, Enum):
    """Peer verification lifecycle of a submission.

    State Transition Matrix:
    - SUBMITTED -> PEER_VERIFICATION_PENDING
    - PEER_VERIFICATION_PENDING -> ELIMINATED, REINSTATED
    - ELIMINATED -> REINSTATED (score override recomputation)
    - REINSTATED -> ELIMINATED (score override recomputation)
    """

    SUBMITTED = "submitted"
    """Entered the contest, not yet under peer review."""

    PEER_VERIFICATION_PENDING = "peer_verification_pending"
    """Assignments allocated, waiting for quorum."""

    ELIMINATED = "eliminated"
    """Quorum reached and score below the reinstatement threshold."""

    REINSTATED = "reinstated"
    """Quorum reached and score at or above the reinstatement threshold."""

    def is_decided(self) -> bool:
        """True once a peer verification outcome has been recorded."""
        return self in (SubmissionStatus.ELIMINATED, SubmissionStatus.REINSTATED)

    def can_transition_to(self, target: SubmissionStatus) -> bool:
        """Check if transition to target state is valid.

        Args:
            target: The target status.

        Returns:
            True if the transition is valid, False otherwise.
        """
        valid_transitions: dict[SubmissionStatus, set[SubmissionStatus]] = {
            SubmissionStatus.SUBMITTED: {SubmissionStatus.PEER_VERIFICATION_PENDING},
            SubmissionStatus.PEER_VERIFICATION_PENDING: {
                SubmissionStatus.ELIMINATED,
                SubmissionStatus.REINSTATED,
            },
            SubmissionStatus.ELIMINATED: {SubmissionStatus.REINSTATED},
            SubmissionStatus.REINSTATED: {SubmissionStatus.ELIMINATED},
        }
        return target in valid_transitions.get(self, set())


class PeerVerificationOutcome(str, Enum):
    """Decision produced by the Result Decider."""

    NONE = "none"
    REINSTATED = "reinstated"
    ELIMINATED = "eliminated"

    def to_status(self) -> SubmissionStatus:
        """Map a decided outcome onto the submission status it implies.

        Raises:
            ValueError: For NONE, which has no corresponding decided status.
        """
        if self == PeerVerificationOutcome.REINSTATED:
            return SubmissionStatus.REINSTATED
        if self == PeerVerificationOutcome.ELIMINATED:
            return SubmissionStatus.ELIMINATED
        raise ValueError("NONE outcome has no decided status")


@dataclass(frozen=True, eq=True)
class Submission:
    """A contest entry undergoing peer verification.

    Attributes:
        id: Unique identifier.
        contest_id: Contest the submission belongs to.
        author_id: The submitting user; never assignable as a reviewer.
        status: Current lifecycle state.
        outcome: Last recorded decision.
        peer_score: Latest aggregated score, if any reviews exist.
        quorum_reached_at: First time the done count reached quorum.
        is_finalist: Whether the submission is on the shortlist.
    """

    id: UUID
    contest_id: UUID
    author_id: UUID
    status: SubmissionStatus = field(default=SubmissionStatus.SUBMITTED)
    outcome: PeerVerificationOutcome = field(default=PeerVerificationOutcome.NONE)
    peer_score: PeerScore | None = field(default=None)
    quorum_reached_at: datetime | None = field(default=None)
    is_finalist: bool = field(default=False)

    def __post_init__(self) -> None:
        if self.quorum_reached_at is not None and self.quorum_reached_at.tzinfo is None:
            raise ValueError("quorum_reached_at must be timezone-aware (UTC)")

        if self.status.is_decided() and self.outcome == PeerVerificationOutcome.NONE:
            raise ValueError("decided submission requires an outcome")

    @property
    def has_reached_quorum(self) -> bool:
        return self.quorum_reached_at is not None

    def with_status(self, status: SubmissionStatus) -> Submission:
        """Create a copy in a new lifecycle state.

        Raises:
            ValueError: If the transition is not allowed.
        """
        if not self.status.can_transition_to(status):
            raise ValueError(
                f"Cannot transition submission {self.id} "
                f"from {self.status.value} to {status.value}"
            )
        return replace(self, status=status)

    def with_score(self, score: PeerScore) -> Submission:
        return replace(self, peer_score=score)

    def with_decision(
        self,
        outcome: PeerVerificationOutcome,
        quorum_reached_at: datetime,
    ) -> Submission:
        """Create a copy carrying a decided outcome.

        ``quorum_reached_at`` is kept from the first decision; later calls
        only change the outcome and status.
        """
        target = outcome.to_status()
        status = self.status
        if status != target:
            status = self.with_status(target).status
        return replace(
            self,
            status=status,
            outcome=outcome,
            quorum_reached_at=self.quorum_reached_at or quorum_reached_at,
        )

    def with_finalist(self, is_finalist: bool) -> Submission:
        return replace(self, is_finalist=is_finalist)
