"""Ports (interfaces) consumed by the peer verification services."""

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
from peer_verification.application.ports.review_repository import (
    ReviewRepositoryProtocol,
)
from peer_verification.application.ports.reviewer_directory import (
    ReviewerDirectoryProtocol,
)
from peer_verification.application.ports.submission_repository import (
    SubmissionRepositoryProtocol,
)
from peer_verification.application.ports.time_authority import TimeAuthorityProtocol

__all__ = [
    "AssignmentRepositoryProtocol",
    "AuditLogProtocol",
    "ContestPolicyProviderProtocol",
    "NotificationDispatcherProtocol",
    "RandomSourceProtocol",
    "ReviewRepositoryProtocol",
    "ReviewerDirectoryProtocol",
    "SubmissionRepositoryProtocol",
    "TimeAuthorityProtocol",
]
