"""Assignment domain errors.

Raised by the review submission path and the administrative reassignment
path when a caller addresses an assignment that cannot accept the action.
Sweeps never raise these; they skip and count instead.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from peer_verification.domain.exceptions import PeerVerificationError


class AssignmentError(PeerVerificationError):
    """Base exception for assignment-related errors."""

    pass


class AssignmentNotFoundError(AssignmentError):
    """Raised when an assignment does not exist."""

    def __init__(self, assignment_id: UUID) -> None:
        """Initialize the error.

        Args:
            assignment_id: The assignment UUID that was not found.
        """
        self.assignment_id = assignment_id
        super().__init__(f"Assignment {assignment_id} not found")


class AssignmentNotPendingError(AssignmentError):
    """Raised when an action requires a pending assignment.

    Covers the race where the Deadline Monitor expired the assignment
    between the caller's read and its conditional write.
    """

    def __init__(self, assignment_id: UUID, current_status: str) -> None:
        """Initialize the error.

        Args:
            assignment_id: The assignment UUID.
            current_status: The status the assignment is actually in.
        """
        self.assignment_id = assignment_id
        self.current_status = current_status
        super().__init__(
            f"Assignment {assignment_id} is not pending (status={current_status})"
        )


class AssignmentDeadlinePassedError(AssignmentError):
    """Raised when a review arrives after the assignment deadline."""

    def __init__(self, assignment_id: UUID, deadline: datetime) -> None:
        """Initialize the error.

        Args:
            assignment_id: The assignment UUID.
            deadline: The deadline that has passed.
        """
        self.assignment_id = assignment_id
        self.deadline = deadline
        super().__init__(
            f"Assignment {assignment_id} deadline passed at {deadline.isoformat()}"
        )


class NotAssignmentOwnerError(AssignmentError):
    """Raised when a reviewer acts on an assignment that is not theirs."""

    def __init__(self, assignment_id: UUID, reviewer_id: UUID) -> None:
        self.assignment_id = assignment_id
        self.reviewer_id = reviewer_id
        super().__init__(
            f"Reviewer {reviewer_id} is not assigned to assignment {assignment_id}"
        )


class ReassignmentJustificationError(AssignmentError):
    """Raised when an administrative reassignment lacks a usable justification."""

    def __init__(self, min_length: int) -> None:
        self.min_length = min_length
        super().__init__(
            f"Reassignment justification must be at least {min_length} characters"
        )


class AssignmentAlreadyReplacedError(AssignmentError):
    """Raised when an expired assignment already has a replacement."""

    def __init__(self, assignment_id: UUID, replacement_id: UUID) -> None:
        self.assignment_id = assignment_id
        self.replacement_id = replacement_id
        super().__init__(
            f"Assignment {assignment_id} was already replaced by {replacement_id}"
        )
