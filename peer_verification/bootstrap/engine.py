"""Engine composition.

``build_engine`` wires every service against a set of ports. Ports not
passed in default to the in-memory stubs; the assignment repository
switches to PostgreSQL when DATABASE_URL is configured and
``use_database`` is left on.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import TYPE_CHECKING

from structlog import get_logger

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
from peer_verification.application.services.result_decider import ResultDecider
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
from peer_verification.bootstrap.database import get_session_factory, is_database_configured
from peer_verification.config.engine_config import EngineConfig
from peer_verification.infrastructure.adapters.persistence.assignment_repository import (
    PostgresAssignmentRepository,
)
from peer_verification.infrastructure.adapters.random_source import SystemRandomSource
from peer_verification.infrastructure.monitoring.metrics import get_metrics_collector
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
    from peer_verification.application.ports.review_repository import (
        ReviewRepositoryProtocol,
    )
    from peer_verification.application.ports.reviewer_directory import (
        ReviewerDirectoryProtocol,
    )
    from peer_verification.application.ports.submission_repository import (
        SubmissionRepositoryProtocol,
    )
    from peer_verification.application.ports.time_authority import (
        TimeAuthorityProtocol,
    )
    from peer_verification.infrastructure.monitoring.metrics import (
        SweepMetricsCollector,
    )

logger = get_logger(__name__)


@dataclass(frozen=True)
class PeerVerificationEngine:
    """All wired services, plus the ports they share."""

    config: EngineConfig
    assignment_repo: AssignmentRepositoryProtocol
    submission_repo: SubmissionRepositoryProtocol
    review_repo: ReviewRepositoryProtocol
    reviewer_directory: ReviewerDirectoryProtocol
    policy_provider: ContestPolicyProviderProtocol
    time_authority: TimeAuthorityProtocol
    notification_dispatcher: NotificationDispatcherProtocol
    audit_log: AuditLogProtocol
    eligibility_resolver: EligibilityResolver
    allocator: AssignmentAllocator
    deadline_monitor: DeadlineMonitor
    reassignment_coordinator: ReassignmentCoordinator
    notification_trigger: NotificationTrigger
    result_decider: ResultDecider
    score_aggregator: ScoreAggregator
    review_service: ReviewSubmissionService
    lifecycle_service: SubmissionLifecycleService
    cron_service: CronSweepService


def build_engine(
    config: EngineConfig | None = None,
    *,
    assignment_repo: AssignmentRepositoryProtocol | None = None,
    submission_repo: SubmissionRepositoryProtocol | None = None,
    review_repo: ReviewRepositoryProtocol | None = None,
    reviewer_directory: ReviewerDirectoryProtocol | None = None,
    policy_provider: ContestPolicyProviderProtocol | None = None,
    notification_dispatcher: NotificationDispatcherProtocol | None = None,
    audit_log: AuditLogProtocol | None = None,
    random_source: RandomSourceProtocol | None = None,
    time_authority: TimeAuthorityProtocol | None = None,
    metrics: SweepMetricsCollector | None = None,
    use_database: bool = True,
) -> PeerVerificationEngine:
    """Wire the engine.

    Args:
        config: Engine configuration; read from the environment if omitted.
        use_database: Use PostgreSQL for assignments when DATABASE_URL is set.
        **ports: Explicit port implementations override the defaults.

    Returns:
        A fully wired PeerVerificationEngine.
    """
    config = config or EngineConfig.from_environment()
    clock = time_authority or SystemTimeAuthority()
    dispatcher = notification_dispatcher or NotificationDispatcherStub()
    audit = audit_log or AuditLogStub()

    if assignment_repo is None:
        if use_database and is_database_configured():
            assignment_repo = PostgresAssignmentRepository(get_session_factory())
            logger.info("assignment_repository_selected", backend="postgresql")
        else:
            assignment_repo = AssignmentRepositoryStub()
            logger.info("assignment_repository_selected", backend="memory")

    submissions = submission_repo or SubmissionRepositoryStub()
    reviews = review_repo or ReviewRepositoryStub()
    directory = reviewer_directory or ReviewerDirectoryStub()
    policies = policy_provider or ContestPolicyProviderStub(fallback=config)

    resolver = EligibilityResolver(
        reviewer_directory=directory,
        assignment_repo=assignment_repo,
        strike_threshold=config.strike_threshold,
    )
    allocator = AssignmentAllocator(
        assignment_repo=assignment_repo,
        submission_repo=submissions,
        policy_provider=policies,
        eligibility_resolver=resolver,
        random_source=random_source or SystemRandomSource(),
        time_authority=clock,
        notification_dispatcher=dispatcher,
        audit_log=audit,
    )
    monitor = DeadlineMonitor(assignment_repo, clock, audit_log=audit)
    coordinator = ReassignmentCoordinator(
        assignment_repo=assignment_repo,
        submission_repo=submissions,
        policy_provider=policies,
        allocator=allocator,
        time_authority=clock,
        audit_log=audit,
        min_justification_length=config.reassign_min_justification,
    )
    trigger = NotificationTrigger(
        assignment_repo=assignment_repo,
        notification_dispatcher=dispatcher,
        time_authority=clock,
        warning_lookahead=timedelta(hours=config.warning_lookahead_hours),
        final_reminder_lookahead=timedelta(hours=config.final_reminder_lookahead_hours),
    )
    decider = ResultDecider(
        submission_repo=submissions,
        assignment_repo=assignment_repo,
        policy_provider=policies,
        time_authority=clock,
        notification_dispatcher=dispatcher,
        audit_log=audit,
    )
    aggregator = ScoreAggregator(
        submission_repo=submissions,
        assignment_repo=assignment_repo,
        review_repo=reviews,
        policy_provider=policies,
        time_authority=clock,
        result_decider=decider,
    )
    review_service = ReviewSubmissionService(
        assignment_repo=assignment_repo,
        review_repo=reviews,
        submission_repo=submissions,
        score_aggregator=aggregator,
        time_authority=clock,
        audit_log=audit,
    )
    lifecycle = SubmissionLifecycleService(
        submission_repo=submissions,
        policy_provider=policies,
        allocator=allocator,
    )
    cron = CronSweepService(
        deadline_monitor=monitor,
        reassignment_coordinator=coordinator,
        allocator=allocator,
        notification_trigger=trigger,
        time_authority=clock,
        metrics=metrics or get_metrics_collector(),
    )

    return PeerVerificationEngine(
        config=config,
        assignment_repo=assignment_repo,
        submission_repo=submissions,
        review_repo=reviews,
        reviewer_directory=directory,
        policy_provider=policies,
        time_authority=clock,
        notification_dispatcher=dispatcher,
        audit_log=audit,
        eligibility_resolver=resolver,
        allocator=allocator,
        deadline_monitor=monitor,
        reassignment_coordinator=coordinator,
        notification_trigger=trigger,
        result_decider=decider,
        score_aggregator=aggregator,
        review_service=review_service,
        lifecycle_service=lifecycle,
        cron_service=cron,
    )
