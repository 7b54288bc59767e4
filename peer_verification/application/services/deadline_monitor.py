"""Deadline Monitor: expires pending assignments past their deadline.

Every transition is a conditional ``expire_if_pending`` write, so running
the sweep twice, or two sweeps at once, expires each assignment exactly
once. Assignments completed between the scan and the write are left as
done.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID

from structlog import get_logger

from peer_verification.application.dtos.sweep import ExpirySweepResult
from peer_verification.application.services.side_effects import record_audit
from peer_verification.domain.errors.integrity import DataIntegrityError
from peer_verification.domain.models.audit import AuditAction, AuditEntry

if TYPE_CHECKING:
    from peer_verification.application.ports.assignment_repository import (
        AssignmentRepositoryProtocol,
    )
    from peer_verification.application.ports.audit_log import AuditLogProtocol
    from peer_verification.application.ports.time_authority import (
        TimeAuthorityProtocol,
    )

logger = get_logger(__name__)


class DeadlineMonitor:
    """Scans for overdue pending assignments and expires them.

    Example:
        >>> monitor = DeadlineMonitor(assignment_repo, time_authority)
        >>> result = await monitor.sweep_expired()
        >>> result.expired_count
        3
    """

    def __init__(
        self,
        assignment_repo: AssignmentRepositoryProtocol,
        time_authority: TimeAuthorityProtocol,
        audit_log: AuditLogProtocol | None = None,
    ) -> None:
        self._assignment_repo = assignment_repo
        self._time = time_authority
        self._audit_log = audit_log

    async def sweep_expired(self, now: datetime | None = None) -> ExpirySweepResult:
        """Expire every pending assignment whose deadline is before ``now``.

        Args:
            now: Sweep instant; defaults to the time authority.

        Returns:
            ExpirySweepResult with the count of assignments this call expired.
            Failures on individual assignments are collected, not raised.
        """
        now = now or self._time.now()
        log = logger.bind(sweep="deadline_monitor", now=now.isoformat())

        overdue = await self._assignment_repo.list_overdue_pending(now)
        log.info("deadline_sweep_started", overdue_count=len(overdue))

        expired_ids: list[UUID] = []
        already_settled = 0
        errors: list[str] = []
        violations: list[str] = []

        for assignment in overdue:
            item_log = log.bind(
                assignment_id=str(assignment.id),
                submission_id=str(assignment.submission_id),
            )
            try:
                expired = await self._assignment_repo.expire_if_pending(assignment.id, now)
            except DataIntegrityError as e:
                item_log.error("integrity_violation", error=str(e))
                violations.append(f"Assignment {assignment.id}: {e}")
                continue
            except Exception as e:
                item_log.error("assignment_expiry_failed", error=str(e))
                errors.append(f"Failed to expire assignment {assignment.id}: {e}")
                continue

            if expired is None:
                # Completed or expired by someone else since the scan
                already_settled += 1
                continue

            expired_ids.append(expired.id)
            item_log.info(
                "assignment_expired",
                reviewer_id=str(expired.reviewer_id),
                deadline=expired.deadline.isoformat(),
            )
            await record_audit(
                self._audit_log,
                AuditEntry(
                    action=AuditAction.ASSIGNMENT_EXPIRED,
                    entity_id=expired.id,
                    occurred_at=now,
                    details={
                        "submission_id": str(expired.submission_id),
                        "reviewer_id": str(expired.reviewer_id),
                        "deadline": expired.deadline.isoformat(),
                    },
                ),
                item_log,
            )

        log.info(
            "deadline_sweep_completed",
            expired_count=len(expired_ids),
            already_settled=already_settled,
            errors=len(errors),
        )
        return ExpirySweepResult(
            expired_count=len(expired_ids),
            expired_assignment_ids=tuple(expired_ids),
            errors=tuple(errors),
            integrity_violations=tuple(violations),
        )
