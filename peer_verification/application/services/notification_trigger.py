"""Notification Trigger: deadline reminders in two tiers.

For each pending assignment whose deadline falls inside a tier's
lookahead window, the tier is claimed on the assignment record before the
notification is dispatched. A claimed tier is never sent again, so each
tier reaches a reviewer at most once per assignment. A dispatch failure
after the claim is logged and not retried.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from structlog import get_logger

from peer_verification.application.dtos.sweep import NotificationSweepResult
from peer_verification.domain.models.assignment import NotificationTier, PeerAssignment
from peer_verification.domain.models.notification import (
    NotificationKind,
    PeerNotification,
)

if TYPE_CHECKING:
    from peer_verification.application.ports.assignment_repository import (
        AssignmentRepositoryProtocol,
    )
    from peer_verification.application.ports.notification_dispatcher import (
        NotificationDispatcherProtocol,
    )
    from peer_verification.application.ports.time_authority import (
        TimeAuthorityProtocol,
    )

logger = get_logger(__name__)

DEFAULT_WARNING_LOOKAHEAD = timedelta(hours=24)
DEFAULT_FINAL_REMINDER_LOOKAHEAD = timedelta(hours=2)

_TIER_KIND: dict[NotificationTier, NotificationKind] = {
    NotificationTier.WARNING: NotificationKind.DEADLINE_WARNING,
    NotificationTier.FINAL_REMINDER: NotificationKind.FINAL_REMINDER,
}


class NotificationTrigger:
    """Sends deadline warnings and final reminders to reviewers."""

    def __init__(
        self,
        assignment_repo: AssignmentRepositoryProtocol,
        notification_dispatcher: NotificationDispatcherProtocol,
        time_authority: TimeAuthorityProtocol,
        warning_lookahead: timedelta = DEFAULT_WARNING_LOOKAHEAD,
        final_reminder_lookahead: timedelta = DEFAULT_FINAL_REMINDER_LOOKAHEAD,
    ) -> None:
        """Initialize the trigger.

        Args:
            assignment_repo: Source of pending assignments and tier claims.
            notification_dispatcher: Outbound channel.
            time_authority: Clock for sweep instants.
            warning_lookahead: Window for the WARNING tier.
            final_reminder_lookahead: Window for the FINAL_REMINDER tier.
        """
        self._assignment_repo = assignment_repo
        self._dispatcher = notification_dispatcher
        self._time = time_authority
        self._lookaheads = {
            NotificationTier.WARNING: warning_lookahead,
            NotificationTier.FINAL_REMINDER: final_reminder_lookahead,
        }

    async def sweep_warnings(self, now: datetime | None = None) -> NotificationSweepResult:
        """Send the WARNING tier for assignments due within the warning window."""
        return await self._sweep_tier(NotificationTier.WARNING, now or self._time.now())

    async def sweep_final_reminders(
        self, now: datetime | None = None
    ) -> NotificationSweepResult:
        """Send the FINAL_REMINDER tier for assignments due within the final window."""
        return await self._sweep_tier(
            NotificationTier.FINAL_REMINDER, now or self._time.now()
        )

    async def _sweep_tier(
        self,
        tier: NotificationTier,
        now: datetime,
    ) -> NotificationSweepResult:
        log = logger.bind(sweep="notification", tier=tier.value, now=now.isoformat())
        due = await self._assignment_repo.list_pending_due_between(
            now, now + self._lookaheads[tier]
        )

        sent = 0
        already_claimed = 0
        errors: list[str] = []

        for assignment in due:
            if assignment.tier_sent_at(tier) is not None:
                already_claimed += 1
                continue

            try:
                claimed = await self._assignment_repo.mark_tier_notified(
                    assignment.id, tier, now
                )
            except Exception as e:
                log.error(
                    "notification_claim_failed",
                    assignment_id=str(assignment.id),
                    error=str(e),
                )
                errors.append(f"Failed to claim {tier.value} for {assignment.id}: {e}")
                continue

            if not claimed:
                already_claimed += 1
                continue

            try:
                await self._dispatcher.send(self._build_notification(assignment, tier, now))
            except Exception as e:
                log.warning(
                    "notification_dispatch_failed",
                    assignment_id=str(assignment.id),
                    reviewer_id=str(assignment.reviewer_id),
                    error=str(e),
                )
                errors.append(f"Failed to send {tier.value} for {assignment.id}: {e}")
                continue

            sent += 1

        log.info(
            "notification_sweep_completed",
            due_count=len(due),
            sent_count=sent,
            already_claimed=already_claimed,
            errors=len(errors),
        )
        return NotificationSweepResult(
            tier=tier,
            sent_count=sent,
            already_claimed_count=already_claimed,
            errors=tuple(errors),
        )

    @staticmethod
    def _build_notification(
        assignment: PeerAssignment,
        tier: NotificationTier,
        now: datetime,
    ) -> PeerNotification:
        hours_left = max((assignment.deadline - now).total_seconds() / 3600, 0.0)
        return PeerNotification(
            kind=_TIER_KIND[tier],
            recipient_id=assignment.reviewer_id,
            submission_id=assignment.submission_id,
            assignment_id=assignment.id,
            deadline=assignment.deadline,
            created_at=now,
            details={"hours_remaining": round(hours_left, 1)},
        )
