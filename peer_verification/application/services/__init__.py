"""Application services for peer assignment and deadline lifecycle."""

from peer_verification.application.services.assignment_allocator import (
    AssignmentAllocator,
)
from peer_verification.application.services.cron_sweep_service import CronSweepService
from peer_verification.application.services.deadline_monitor import DeadlineMonitor
from peer_verification.application.services.eligibility_resolver import (
    EligibilityResolver,
)
from peer_verification.application.services.notification_trigger import (
    NotificationTrigger,
)
from peer_verification.application.services.reassignment_coordinator import (
    ReassignmentCoordinator,
)
from peer_verification.application.services.result_decider import (
    DecisionTrigger,
    ResultDecider,
)
from peer_verification.application.services.review_submission_service import (
    ReviewSubmissionService,
)
from peer_verification.application.services.score_aggregator import ScoreAggregator
from peer_verification.application.services.submission_lifecycle_service import (
    SubmissionLifecycleService,
)
from peer_verification.application.services.time_authority_service import (
    SystemTimeAuthority,
)

__all__ = [
    "AssignmentAllocator",
    "CronSweepService",
    "DeadlineMonitor",
    "DecisionTrigger",
    "EligibilityResolver",
    "NotificationTrigger",
    "ReassignmentCoordinator",
    "ResultDecider",
    "ReviewSubmissionService",
    "ScoreAggregator",
    "SubmissionLifecycleService",
    "SystemTimeAuthority",
]
