"""Factories for domain objects and a stub-wired engine."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from uuid import UUID, uuid4

from prometheus_client import CollectorRegistry

from peer_verification.bootstrap.engine import PeerVerificationEngine, build_engine
from peer_verification.config.engine_config import TEST_ENGINE_CONFIG, EngineConfig
from peer_verification.domain.models.assignment import AssignmentStatus, PeerAssignment
from peer_verification.domain.models.review import PeerReview
from peer_verification.domain.models.reviewer import Reviewer
from peer_verification.domain.models.submission import Submission, SubmissionStatus
from peer_verification.infrastructure.adapters.random_source import SeededRandomSource
from peer_verification.infrastructure.monitoring.metrics import SweepMetricsCollector
from peer_verification.infrastructure.stubs.reviewer_directory_stub import (
    ReviewerDirectoryStub,
)
from tests.helpers.fake_time_authority import FakeTimeAuthority

T0 = datetime(2026, 1, 1, 0, 0, 0, tzinfo=timezone.utc)


def make_submission(
    *,
    contest_id: UUID | None = None,
    author_id: UUID | None = None,
    status: SubmissionStatus = SubmissionStatus.PEER_VERIFICATION_PENDING,
    **kwargs: object,
) -> Submission:
    return Submission(
        id=kwargs.pop("id", None) or uuid4(),  # type: ignore[arg-type]
        contest_id=contest_id or uuid4(),
        author_id=author_id or uuid4(),
        status=status,
        **kwargs,  # type: ignore[arg-type]
    )


def make_assignment(
    *,
    submission_id: UUID | None = None,
    reviewer_id: UUID | None = None,
    created_at: datetime = T0,
    deadline_days: int = 7,
    status: AssignmentStatus = AssignmentStatus.PENDING,
    **kwargs: object,
) -> PeerAssignment:
    """Build an assignment; terminal statuses get a matching timestamp."""
    if status == AssignmentStatus.DONE:
        kwargs.setdefault("completed_at", created_at + timedelta(days=1))
    if status == AssignmentStatus.EXPIRED:
        kwargs.setdefault("expired_at", created_at + timedelta(days=deadline_days, hours=1))
    return PeerAssignment(
        id=kwargs.pop("id", None) or uuid4(),  # type: ignore[arg-type]
        submission_id=submission_id or uuid4(),
        reviewer_id=reviewer_id or uuid4(),
        created_at=created_at,
        deadline=created_at + timedelta(days=deadline_days),
        status=status,
        **kwargs,  # type: ignore[arg-type]
    )


def make_review(
    assignment: PeerAssignment,
    scores: tuple[int, int, int, int] = (3, 3, 3, 3),
    *,
    submitted_at: datetime = T0,
    justification: str = "Solid work overall.",
) -> PeerReview:
    clarity, argument, style, moral_depth = scores
    return PeerReview(
        id=uuid4(),
        assignment_id=assignment.id,
        submission_id=assignment.submission_id,
        clarity=clarity,
        argument=argument,
        style=style,
        moral_depth=moral_depth,
        justification=justification,
        submitted_at=submitted_at,
    )


def add_reviewers(
    directory: ReviewerDirectoryStub,
    contest_id: UUID,
    count: int,
    *,
    prefix: str = "reviewer",
) -> list[UUID]:
    """Register ``count`` fresh reviewers for a contest and return their IDs."""
    ids: list[UUID] = []
    for n in range(count):
        reviewer = Reviewer(id=uuid4(), display_name=f"{prefix}-{n}")
        directory.add_reviewer(reviewer, contest_id)
        ids.append(reviewer.id)
    return ids


def build_test_engine(
    clock: FakeTimeAuthority | None = None,
    *,
    seed: int = 42,
    config: EngineConfig = TEST_ENGINE_CONFIG,
) -> PeerVerificationEngine:
    """Wire every service against in-memory stubs with a seeded random source."""
    return build_engine(
        config,
        time_authority=clock or FakeTimeAuthority(frozen_at=T0),
        random_source=SeededRandomSource(seed),
        metrics=SweepMetricsCollector(registry=CollectorRegistry()),
        use_database=False,
    )
