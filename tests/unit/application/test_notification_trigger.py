"""Unit tests for NotificationTrigger."""

from datetime import timedelta

import pytest

from peer_verification.application.services.notification_trigger import (
    NotificationTrigger,
)
from peer_verification.domain.models.assignment import AssignmentStatus, NotificationTier
from peer_verification.domain.models.notification import NotificationKind
from peer_verification.infrastructure.stubs import (
    AssignmentRepositoryStub,
    NotificationDispatcherStub,
)
from tests.helpers.builders import T0, make_assignment
from tests.helpers.fake_time_authority import FakeTimeAuthority

DEADLINE = T0 + timedelta(days=7)


@pytest.fixture
def repo() -> AssignmentRepositoryStub:
    return AssignmentRepositoryStub()


@pytest.fixture
def dispatcher() -> NotificationDispatcherStub:
    return NotificationDispatcherStub()


@pytest.fixture
def trigger(
    repo: AssignmentRepositoryStub, dispatcher: NotificationDispatcherStub
) -> NotificationTrigger:
    return NotificationTrigger(repo, dispatcher, FakeTimeAuthority(frozen_at=T0))


class TestWarningWindow:
    """Which deadlines fall inside the warning window."""

    @pytest.mark.parametrize(
        ("hours_before_deadline", "expected"),
        [
            (23, 1),
            (24, 1),
            (25, 0),
            (1, 1),
            (0, 0),
        ],
    )
    @pytest.mark.asyncio
    async def test_window_boundaries(
        self,
        trigger: NotificationTrigger,
        repo: AssignmentRepositoryStub,
        hours_before_deadline: int,
        expected: int,
    ) -> None:
        repo.put(make_assignment())

        result = await trigger.sweep_warnings(
            now=DEADLINE - timedelta(hours=hours_before_deadline)
        )

        assert result.sent_count == expected

    @pytest.mark.asyncio
    async def test_finished_assignments_are_ignored(
        self,
        trigger: NotificationTrigger,
        repo: AssignmentRepositoryStub,
        dispatcher: NotificationDispatcherStub,
    ) -> None:
        repo.put(make_assignment(status=AssignmentStatus.DONE))

        result = await trigger.sweep_warnings(now=DEADLINE - timedelta(hours=5))

        assert result.sent_count == 0
        assert dispatcher.sent() == []


class TestAtMostOnce:
    """Each tier reaches a reviewer once per assignment."""

    @pytest.mark.asyncio
    async def test_warning_sent_once(
        self,
        trigger: NotificationTrigger,
        repo: AssignmentRepositoryStub,
        dispatcher: NotificationDispatcherStub,
    ) -> None:
        assignment = make_assignment()
        repo.put(assignment)

        first = await trigger.sweep_warnings(now=DEADLINE - timedelta(hours=20))
        second = await trigger.sweep_warnings(now=DEADLINE - timedelta(hours=14))

        assert first.sent_count == 1
        assert second.sent_count == 0
        assert second.already_claimed_count == 1
        (notification,) = dispatcher.sent(NotificationKind.DEADLINE_WARNING)
        assert notification.recipient_id == assignment.reviewer_id
        assert notification.assignment_id == assignment.id
        assert notification.details["hours_remaining"] == 20.0

    @pytest.mark.asyncio
    async def test_tiers_are_independent(
        self,
        trigger: NotificationTrigger,
        repo: AssignmentRepositoryStub,
        dispatcher: NotificationDispatcherStub,
    ) -> None:
        repo.put(make_assignment())
        now = DEADLINE - timedelta(hours=1)

        warning = await trigger.sweep_warnings(now=now)
        final = await trigger.sweep_final_reminders(now=now)

        assert warning.sent_count == 1
        assert final.sent_count == 1
        assert len(dispatcher.sent(NotificationKind.DEADLINE_WARNING)) == 1
        assert len(dispatcher.sent(NotificationKind.FINAL_REMINDER)) == 1

    @pytest.mark.asyncio
    async def test_final_reminder_window_is_two_hours(
        self, trigger: NotificationTrigger, repo: AssignmentRepositoryStub
    ) -> None:
        repo.put(make_assignment())

        result = await trigger.sweep_final_reminders(now=DEADLINE - timedelta(hours=3))

        assert result.tier == NotificationTier.FINAL_REMINDER
        assert result.sent_count == 0

    @pytest.mark.asyncio
    async def test_failed_dispatch_is_not_retried(
        self,
        trigger: NotificationTrigger,
        repo: AssignmentRepositoryStub,
        dispatcher: NotificationDispatcherStub,
    ) -> None:
        assignment = make_assignment()
        repo.put(assignment)
        dispatcher.fail_for(assignment.reviewer_id)

        first = await trigger.sweep_warnings(now=DEADLINE - timedelta(hours=10))
        second = await trigger.sweep_warnings(now=DEADLINE - timedelta(hours=9))

        assert first.sent_count == 0
        assert len(first.errors) == 1
        assert second.sent_count == 0
        assert second.errors == ()
        stored = await repo.get_by_id(assignment.id)
        assert stored.warning_sent_at == DEADLINE - timedelta(hours=10)


class TestCustomLookahead:
    @pytest.mark.asyncio
    async def test_configured_windows_are_used(
        self, repo: AssignmentRepositoryStub, dispatcher: NotificationDispatcherStub
    ) -> None:
        trigger = NotificationTrigger(
            repo,
            dispatcher,
            FakeTimeAuthority(frozen_at=T0),
            warning_lookahead=timedelta(hours=48),
        )
        repo.put(make_assignment())

        result = await trigger.sweep_warnings(now=DEADLINE - timedelta(hours=40))

        assert result.sent_count == 1
