"""Domain errors for the peer verification engine."""

from peer_verification.domain.errors.assignment import (
    AssignmentAlreadyReplacedError,
    AssignmentDeadlinePassedError,
    AssignmentError,
    AssignmentNotFoundError,
    AssignmentNotPendingError,
    NotAssignmentOwnerError,
    ReassignmentJustificationError,
)
from peer_verification.domain.errors.configuration import (
    ConfigurationAbsentError,
    PolicyNotFoundError,
)
from peer_verification.domain.errors.integrity import (
    DataIntegrityError,
    DuplicateLiveAssignmentError,
    ReviewWithoutAssignmentError,
    SelfReviewAssignmentError,
)
from peer_verification.domain.errors.review import (
    EmptyOverrideError,
    InvalidSubScoreError,
    JustificationRequiredError,
    ReviewAlreadyExistsError,
    ReviewError,
    ReviewNotFoundError,
)
from peer_verification.domain.errors.submission import (
    InvalidSubmissionStateError,
    SubmissionError,
    SubmissionNotFoundError,
)

__all__ = [
    "AssignmentAlreadyReplacedError",
    "AssignmentDeadlinePassedError",
    "AssignmentError",
    "AssignmentNotFoundError",
    "AssignmentNotPendingError",
    "ConfigurationAbsentError",
    "DataIntegrityError",
    "DuplicateLiveAssignmentError",
    "EmptyOverrideError",
    "InvalidSubScoreError",
    "InvalidSubmissionStateError",
    "JustificationRequiredError",
    "NotAssignmentOwnerError",
    "PolicyNotFoundError",
    "ReassignmentJustificationError",
    "ReviewAlreadyExistsError",
    "ReviewError",
    "ReviewNotFoundError",
    "ReviewWithoutAssignmentError",
    "SelfReviewAssignmentError",
    "SubmissionError",
    "SubmissionNotFoundError",
]
