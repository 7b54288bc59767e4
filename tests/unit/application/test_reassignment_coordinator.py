"""Unit tests for ReassignmentCoordinator."""

from datetime import timedelta
from uuid import uuid4

import pytest

from peer_verification.domain.errors.assignment import (
    AssignmentAlreadyReplacedError,
    AssignmentNotFoundError,
    AssignmentNotPendingError,
    ReassignmentJustificationError,
)
from peer_verification.domain.models.assignment import AssignmentStatus
from peer_verification.domain.models.audit import AuditAction
from peer_verification.domain.models.submission import (
    PeerVerificationOutcome,
    SubmissionStatus,
)
from tests.helpers.builders import (
    T0,
    add_reviewers,
    build_test_engine,
    make_assignment,
    make_submission,
)

ADMIN_ID = uuid4()
REASON = "Reviewer declared a conflict of interest"


@pytest.fixture
def engine():
    return build_test_engine()


async def seed(engine, *, pool: int = 6, **submission_fields):
    """Store a submission with three pending assignments, the test target."""
    submission = make_submission(**submission_fields)
    await engine.submission_repo.save(submission)
    reviewers = add_reviewers(engine.reviewer_directory, submission.contest_id, pool)
    assignments = [
        make_assignment(submission_id=submission.id, reviewer_id=r) for r in reviewers[:3]
    ]
    for assignment in assignments:
        engine.assignment_repo.put(assignment)
    return submission, reviewers, assignments


class TestReassignExpired:
    """Tests for the sweep."""

    @pytest.mark.asyncio
    async def test_replaces_expired_with_new_reviewer(self, engine) -> None:
        submission, _, assignments = await seed(engine)
        now = T0 + timedelta(days=8)
        await engine.deadline_monitor.sweep_expired(now=now)

        result = await engine.reassignment_coordinator.reassign_expired(now=now)

        assert result.reassigned_count == 3
        assert result.shortfalls == ()
        live = [
            a
            for a in await engine.assignment_repo.list_by_submission(submission.id)
            if a.is_pending
        ]
        original_reviewer = {a.id: a.reviewer_id for a in assignments}
        assert {a.replaces_assignment_id for a in live} == set(original_reviewer)
        for a in live:
            assert a.reviewer_id != original_reviewer[a.replaces_assignment_id]
            assert a.deadline == now + timedelta(days=7)

    @pytest.mark.asyncio
    async def test_original_assignments_stay_untouched(self, engine) -> None:
        _, _, assignments = await seed(engine)
        now = T0 + timedelta(days=8)
        await engine.deadline_monitor.sweep_expired(now=now)
        before = {a.id: await engine.assignment_repo.get_by_id(a.id) for a in assignments}

        await engine.reassignment_coordinator.reassign_expired(now=now)

        for assignment_id, snapshot in before.items():
            assert await engine.assignment_repo.get_by_id(assignment_id) == snapshot

    @pytest.mark.asyncio
    async def test_second_sweep_finds_nothing(self, engine) -> None:
        await seed(engine)
        now = T0 + timedelta(days=8)
        await engine.deadline_monitor.sweep_expired(now=now)

        await engine.reassignment_coordinator.reassign_expired(now=now)
        again = await engine.reassignment_coordinator.reassign_expired(now=now)

        assert again.reassigned_count == 0
        assert again.skipped_count == 0

    @pytest.mark.asyncio
    async def test_small_pool_refills_from_lapsed_siblings(self, engine) -> None:
        submission, _, assignments = await seed(engine, pool=4)
        now = T0 + timedelta(days=8)
        await engine.deadline_monitor.sweep_expired(now=now)

        result = await engine.reassignment_coordinator.reassign_expired(now=now)

        assert result.reassigned_count == 3
        assert result.shortfalls == ()
        original_reviewer = {a.id: a.reviewer_id for a in assignments}
        pending = [
            a
            for a in await engine.assignment_repo.list_by_submission(submission.id)
            if a.is_pending
        ]
        assert len(pending) == 3
        assert len({a.reviewer_id for a in pending}) == 3
        for a in pending:
            assert a.reviewer_id != original_reviewer[a.replaces_assignment_id]

    @pytest.mark.asyncio
    async def test_shortfall_when_pool_exhausted(self, engine) -> None:
        submission, reviewers, _ = await seed(engine, pool=4)
        for reviewer_id in reviewers:
            engine.reviewer_directory.ban(reviewer_id)
        now = T0 + timedelta(days=8)
        await engine.deadline_monitor.sweep_expired(now=now)

        result = await engine.reassignment_coordinator.reassign_expired(now=now)

        assert result.reassigned_count == 0
        assert len(result.shortfalls) == 3
        assert all(s.submission_id == submission.id for s in result.shortfalls)
        assert result.errors == ()

    @pytest.mark.asyncio
    async def test_skips_decided_submission(self, engine) -> None:
        await seed(
            engine,
            status=SubmissionStatus.ELIMINATED,
            outcome=PeerVerificationOutcome.ELIMINATED,
        )
        now = T0 + timedelta(days=8)
        await engine.deadline_monitor.sweep_expired(now=now)

        result = await engine.reassignment_coordinator.reassign_expired(now=now)

        assert result.reassigned_count == 0
        assert result.skipped_count == 3

    @pytest.mark.asyncio
    async def test_decided_submission_is_settled_once(self, engine) -> None:
        submission, _, assignments = await seed(
            engine,
            status=SubmissionStatus.ELIMINATED,
            outcome=PeerVerificationOutcome.ELIMINATED,
        )
        now = T0 + timedelta(days=8)
        await engine.deadline_monitor.sweep_expired(now=now)

        await engine.reassignment_coordinator.reassign_expired(now=now)
        again = await engine.reassignment_coordinator.reassign_expired(now=now)

        assert again.skipped_count == 0
        assert await engine.assignment_repo.list_unreplaced_expired() == []
        for original in assignments:
            stored = await engine.assignment_repo.get_by_id(original.id)
            assert stored.status == AssignmentStatus.EXPIRED
            assert stored.reviewer_id == original.reviewer_id
            assert stored.reassignment_settled_at == now
            assert "eliminated" in stored.audit_note

    @pytest.mark.asyncio
    async def test_missing_submission_is_collected_as_error(self, engine) -> None:
        orphan = make_assignment(status=AssignmentStatus.EXPIRED)
        engine.assignment_repo.put(orphan)

        result = await engine.reassignment_coordinator.reassign_expired()

        assert len(result.errors) == 1
        assert str(orphan.id) in result.errors[0]

    @pytest.mark.asyncio
    async def test_full_live_set_skips_replacement(self, engine) -> None:
        submission, reviewers, _ = await seed(engine)
        stale = make_assignment(
            submission_id=submission.id,
            reviewer_id=reviewers[5],
            status=AssignmentStatus.EXPIRED,
        )
        engine.assignment_repo.put(stale)

        result = await engine.reassignment_coordinator.reassign_expired()

        assert result.reassigned_count == 0
        assert result.skipped_count == 1

        again = await engine.reassignment_coordinator.reassign_expired()
        assert again.skipped_count == 0
        settled = await engine.assignment_repo.get_by_id(stale.id)
        assert settled.reassignment_settled_at is not None


class TestReassignAssignment:
    """Tests for manual reassignment."""

    @pytest.mark.asyncio
    async def test_expires_pending_and_replaces(self, engine) -> None:
        _, reviewers, assignments = await seed(engine)
        target = assignments[0]

        result = await engine.reassignment_coordinator.reassign_assignment(
            target.id, ADMIN_ID, REASON
        )

        assert result.allocated == 1
        (replacement,) = result.assignments
        assert replacement.replaces_assignment_id == target.id
        assert replacement.reviewer_id not in reviewers[:3]
        original = await engine.assignment_repo.get_by_id(target.id)
        assert original.status == AssignmentStatus.EXPIRED
        assert str(ADMIN_ID) in original.audit_note
        assert REASON in original.audit_note

    @pytest.mark.asyncio
    async def test_records_admin_in_audit(self, engine) -> None:
        _, _, assignments = await seed(engine)
        audit = engine.audit_log

        await engine.reassignment_coordinator.reassign_assignment(
            assignments[0].id, ADMIN_ID, REASON
        )

        (entry,) = audit.entries(AuditAction.ASSIGNMENT_MANUALLY_REASSIGNED)
        assert entry.actor_id == ADMIN_ID
        assert entry.details["justification"] == REASON

    @pytest.mark.asyncio
    async def test_short_justification_rejected(self, engine) -> None:
        _, _, assignments = await seed(engine)

        with pytest.raises(ReassignmentJustificationError):
            await engine.reassignment_coordinator.reassign_assignment(
                assignments[0].id, ADMIN_ID, "   nope   "
            )
        assert (await engine.assignment_repo.get_by_id(assignments[0].id)).is_pending

    @pytest.mark.asyncio
    async def test_unknown_assignment(self, engine) -> None:
        with pytest.raises(AssignmentNotFoundError):
            await engine.reassignment_coordinator.reassign_assignment(
                uuid4(), ADMIN_ID, REASON
            )

    @pytest.mark.asyncio
    async def test_done_assignment_rejected(self, engine) -> None:
        submission, reviewers, _ = await seed(engine)
        done = make_assignment(
            submission_id=submission.id,
            reviewer_id=reviewers[4],
            status=AssignmentStatus.DONE,
        )
        engine.assignment_repo.put(done)

        with pytest.raises(AssignmentNotPendingError):
            await engine.reassignment_coordinator.reassign_assignment(
                done.id, ADMIN_ID, REASON
            )

    @pytest.mark.asyncio
    async def test_already_replaced_rejected(self, engine) -> None:
        _, _, assignments = await seed(engine)
        coordinator = engine.reassignment_coordinator
        await coordinator.reassign_assignment(assignments[0].id, ADMIN_ID, REASON)

        with pytest.raises(AssignmentAlreadyReplacedError):
            await coordinator.reassign_assignment(assignments[0].id, ADMIN_ID, REASON)
