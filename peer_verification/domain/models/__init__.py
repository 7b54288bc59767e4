"""Domain models for the peer verification engine."""

from peer_verification.domain.models.assignment import (
    AssignmentStatus,
    NotificationTier,
    PeerAssignment,
)
from peer_verification.domain.models.audit import AuditAction, AuditEntry
from peer_verification.domain.models.notification import (
    NotificationKind,
    PeerNotification,
)
from peer_verification.domain.models.policy import ContestReviewPolicy
from peer_verification.domain.models.review import PeerReview, ReviewCriterion
from peer_verification.domain.models.reviewer import Reviewer
from peer_verification.domain.models.score import PeerScore
from peer_verification.domain.models.submission import (
    PeerVerificationOutcome,
    Submission,
    SubmissionStatus,
)

__all__ = [
    "AssignmentStatus",
    "AuditAction",
    "AuditEntry",
    "ContestReviewPolicy",
    "NotificationKind",
    "NotificationTier",
    "PeerAssignment",
    "PeerNotification",
    "PeerReview",
    "PeerScore",
    "PeerVerificationOutcome",
    "Reviewer",
    "ReviewCriterion",
    "Submission",
    "SubmissionStatus",
]
