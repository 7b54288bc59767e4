"""In-memory port implementations for development and tests."""

from peer_verification.infrastructure.stubs.assignment_repository_stub import (
    AssignmentRepositoryStub,
)
from peer_verification.infrastructure.stubs.audit_log_stub import AuditLogStub
from peer_verification.infrastructure.stubs.contest_policy_stub import (
    ContestPolicyProviderStub,
)
from peer_verification.infrastructure.stubs.notification_dispatcher_stub import (
    NotificationDispatcherStub,
)
from peer_verification.infrastructure.stubs.review_repository_stub import (
    ReviewRepositoryStub,
)
from peer_verification.infrastructure.stubs.reviewer_directory_stub import (
    ReviewerDirectoryStub,
)
from peer_verification.infrastructure.stubs.submission_repository_stub import (
    SubmissionRepositoryStub,
)

__all__ = [
    "AssignmentRepositoryStub",
    "AuditLogStub",
    "ContestPolicyProviderStub",
    "NotificationDispatcherStub",
    "ReviewRepositoryStub",
    "ReviewerDirectoryStub",
    "SubmissionRepositoryStub",
]
