"""PostgreSQL implementation of AssignmentRepositoryProtocol.

Status changes are single conditional UPDATE statements
(``... WHERE id = :id AND status = 'pending' RETURNING *``), so the row
lock taken by PostgreSQL serializes overlapping sweeps and review
submissions. The pending-pair invariant is enforced by a partial unique
index and surfaced as DuplicateLiveAssignmentError.

Usage:
    from peer_verification.bootstrap.database import get_session_factory

    repo = PostgresAssignmentRepository(get_session_factory())
    await repo.create_schema()
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Iterable, Mapping
from uuid import UUID

from sqlalchemy import bindparam, text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from structlog import get_logger

from peer_verification.domain.errors.integrity import DuplicateLiveAssignmentError
from peer_verification.domain.models.assignment import (
    AssignmentStatus,
    NotificationTier,
    PeerAssignment,
)

logger = get_logger(__name__)

PENDING_PAIR_INDEX = "uq_peer_assignments_pending_pair"

SCHEMA_STATEMENTS: tuple[str, ...] = (
    """
    CREATE TABLE IF NOT EXISTS peer_assignments (
        id UUID PRIMARY KEY,
        submission_id UUID NOT NULL,
        reviewer_id UUID NOT NULL,
        status TEXT NOT NULL CHECK (status IN ('pending', 'done', 'expired')),
        created_at TIMESTAMPTZ NOT NULL,
        deadline TIMESTAMPTZ NOT NULL,
        completed_at TIMESTAMPTZ,
        expired_at TIMESTAMPTZ,
        replaces_assignment_id UUID REFERENCES peer_assignments (id),
        warning_sent_at TIMESTAMPTZ,
        final_reminder_sent_at TIMESTAMPTZ,
        audit_note TEXT,
        reassignment_settled_at TIMESTAMPTZ
    )
    """,
    f"""
    CREATE UNIQUE INDEX IF NOT EXISTS {PENDING_PAIR_INDEX}
        ON peer_assignments (submission_id, reviewer_id)
        WHERE status = 'pending'
    """,
    """
    CREATE INDEX IF NOT EXISTS ix_peer_assignments_pending_deadline
        ON peer_assignments (deadline)
        WHERE status = 'pending'
    """,
    """
    CREATE INDEX IF NOT EXISTS ix_peer_assignments_replaces
        ON peer_assignments (replaces_assignment_id)
    """,
    """
    ALTER TABLE peer_assignments
        ADD COLUMN IF NOT EXISTS reassignment_settled_at TIMESTAMPTZ
    """,
)

_TIER_COLUMNS: dict[NotificationTier, str] = {
    NotificationTier.WARNING: "warning_sent_at",
    NotificationTier.FINAL_REMINDER: "final_reminder_sent_at",
}


def _row_to_assignment(row: Mapping[str, Any]) -> PeerAssignment:
    return PeerAssignment(
        id=row["id"],
        submission_id=row["submission_id"],
        reviewer_id=row["reviewer_id"],
        status=AssignmentStatus(row["status"]),
        created_at=row["created_at"],
        deadline=row["deadline"],
        completed_at=row["completed_at"],
        expired_at=row["expired_at"],
        replaces_assignment_id=row["replaces_assignment_id"],
        warning_sent_at=row["warning_sent_at"],
        final_reminder_sent_at=row["final_reminder_sent_at"],
        audit_note=row["audit_note"],
        reassignment_settled_at=row["reassignment_settled_at"],
    )


class PostgresAssignmentRepository:
    """Assignment repository over SQLAlchemy async sessions.

    Attributes:
        _session_factory: SQLAlchemy async session factory for DB access.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def create_schema(self) -> None:
        """Create the table and indexes if they do not exist."""
        async with self._session_factory() as session:
            for statement in SCHEMA_STATEMENTS:
                await session.execute(text(statement))
            await session.commit()
        logger.info("peer_assignment_schema_ensured")

    async def add(self, assignment: PeerAssignment) -> None:
        """Insert a new assignment.

        Raises:
            DuplicateLiveAssignmentError: Pending pair already exists.
        """
        async with self._session_factory() as session:
            try:
                await session.execute(
                    text("""
                        INSERT INTO peer_assignments (
                            id, submission_id, reviewer_id, status, created_at,
                            deadline, completed_at, expired_at, replaces_assignment_id,
                            warning_sent_at, final_reminder_sent_at, audit_note,
                            reassignment_settled_at
                        ) VALUES (
                            :id, :submission_id, :reviewer_id, :status, :created_at,
                            :deadline, :completed_at, :expired_at, :replaces_assignment_id,
                            :warning_sent_at, :final_reminder_sent_at, :audit_note,
                            :reassignment_settled_at
                        )
                    """),
                    {
                        "id": assignment.id,
                        "submission_id": assignment.submission_id,
                        "reviewer_id": assignment.reviewer_id,
                        "status": assignment.status.value,
                        "created_at": assignment.created_at,
                        "deadline": assignment.deadline,
                        "completed_at": assignment.completed_at,
                        "expired_at": assignment.expired_at,
                        "replaces_assignment_id": assignment.replaces_assignment_id,
                        "warning_sent_at": assignment.warning_sent_at,
                        "final_reminder_sent_at": assignment.final_reminder_sent_at,
                        "audit_note": assignment.audit_note,
                        "reassignment_settled_at": assignment.reassignment_settled_at,
                    },
                )
                await session.commit()
            except IntegrityError as e:
                await session.rollback()
                if PENDING_PAIR_INDEX in str(e.orig):
                    raise DuplicateLiveAssignmentError(
                        assignment.submission_id, assignment.reviewer_id
                    ) from e
                raise

    async def get_by_id(self, assignment_id: UUID) -> PeerAssignment | None:
        async with self._session_factory() as session:
            result = await session.execute(
                text("SELECT * FROM peer_assignments WHERE id = :id"),
                {"id": assignment_id},
            )
            row = result.mappings().first()
        return _row_to_assignment(row) if row else None

    async def list_by_submission(self, submission_id: UUID) -> list[PeerAssignment]:
        return await self._fetch_all(
            """
            SELECT * FROM peer_assignments
            WHERE submission_id = :submission_id
            ORDER BY created_at, id
            """,
            {"submission_id": submission_id},
        )

    async def list_overdue_pending(self, now: datetime) -> list[PeerAssignment]:
        return await self._fetch_all(
            """
            SELECT * FROM peer_assignments
            WHERE status = 'pending' AND deadline < :now
            ORDER BY deadline
            """,
            {"now": now},
        )

    async def list_pending_due_between(
        self,
        after: datetime,
        until: datetime,
    ) -> list[PeerAssignment]:
        return await self._fetch_all(
            """
            SELECT * FROM peer_assignments
            WHERE status = 'pending' AND deadline > :after AND deadline <= :until
            ORDER BY deadline
            """,
            {"after": after, "until": until},
        )

    async def list_unreplaced_expired(self) -> list[PeerAssignment]:
        return await self._fetch_all(
            """
            SELECT a.* FROM peer_assignments a
            WHERE a.status = 'expired'
              AND a.reassignment_settled_at IS NULL
              AND NOT EXISTS (
                  SELECT 1 FROM peer_assignments r
                  WHERE r.replaces_assignment_id = a.id
              )
            ORDER BY a.deadline, a.id
            """,
            {},
        )

    async def expire_if_pending(
        self,
        assignment_id: UUID,
        expired_at: datetime,
    ) -> PeerAssignment | None:
        return await self._update_returning(
            """
            UPDATE peer_assignments
            SET status = 'expired', expired_at = :at
            WHERE id = :id AND status = 'pending'
            RETURNING *
            """,
            {"id": assignment_id, "at": expired_at},
        )

    async def complete_if_pending(
        self,
        assignment_id: UUID,
        completed_at: datetime,
    ) -> PeerAssignment | None:
        return await self._update_returning(
            """
            UPDATE peer_assignments
            SET status = 'done', completed_at = :at
            WHERE id = :id AND status = 'pending'
            RETURNING *
            """,
            {"id": assignment_id, "at": completed_at},
        )

    async def mark_tier_notified(
        self,
        assignment_id: UUID,
        tier: NotificationTier,
        sent_at: datetime,
    ) -> bool:
        column = _TIER_COLUMNS[tier]
        claimed = await self._update_returning(
            f"""
            UPDATE peer_assignments
            SET {column} = :at
            WHERE id = :id AND status = 'pending' AND {column} IS NULL
            RETURNING *
            """,
            {"id": assignment_id, "at": sent_at},
        )
        return claimed is not None

    async def count_expired_by_reviewer(
        self,
        reviewer_ids: Iterable[UUID],
    ) -> dict[UUID, int]:
        ids = list(reviewer_ids)
        counts: dict[UUID, int] = {reviewer_id: 0 for reviewer_id in ids}
        if not ids:
            return counts

        statement = text("""
            SELECT reviewer_id, COUNT(*) AS expired_count
            FROM peer_assignments
            WHERE status = 'expired' AND reviewer_id IN :ids
            GROUP BY reviewer_id
        """).bindparams(bindparam("ids", expanding=True))

        async with self._session_factory() as session:
            result = await session.execute(statement, {"ids": ids})
            for row in result.mappings().all():
                counts[row["reviewer_id"]] = int(row["expired_count"])
        return counts

    async def annotate(self, assignment_id: UUID, note: str) -> None:
        async with self._session_factory() as session:
            await session.execute(
                text("""
                    UPDATE peer_assignments
                    SET audit_note = CASE
                        WHEN audit_note IS NULL THEN :note
                        ELSE audit_note || E'\\n' || :note
                    END
                    WHERE id = :id
                """),
                {"id": assignment_id, "note": note},
            )
            await session.commit()

    async def settle_without_replacement(
        self,
        assignment_id: UUID,
        settled_at: datetime,
        note: str,
    ) -> bool:
        settled = await self._update_returning(
            """
            UPDATE peer_assignments
            SET reassignment_settled_at = :at,
                audit_note = CASE
                    WHEN audit_note IS NULL THEN :note
                    ELSE audit_note || E'\\n' || :note
                END
            WHERE id = :id
              AND status = 'expired'
              AND reassignment_settled_at IS NULL
            RETURNING *
            """,
            {"id": assignment_id, "at": settled_at, "note": note},
        )
        return settled is not None

    async def _fetch_all(
        self,
        sql: str,
        params: dict[str, Any],
    ) -> list[PeerAssignment]:
        async with self._session_factory() as session:
            result = await session.execute(text(sql), params)
            rows = result.mappings().all()
        return [_row_to_assignment(row) for row in rows]

    async def _update_returning(
        self,
        sql: str,
        params: dict[str, Any],
    ) -> PeerAssignment | None:
        async with self._session_factory() as session:
            result = await session.execute(text(sql), params)
            row = result.mappings().first()
            await session.commit()
        return _row_to_assignment(row) if row else None
