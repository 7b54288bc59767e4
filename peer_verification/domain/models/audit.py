"""Audit log entry for engine actions."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID


class AuditAction(str, Enum):
    """Auditable engine actions."""

    ASSIGNMENT_CREATED = "peer_assignment.created"
    ASSIGNMENT_EXPIRED = "peer_assignment.expired"
    ASSIGNMENT_REASSIGNED = "peer_assignment.reassigned"
    ASSIGNMENT_MANUALLY_REASSIGNED = "peer_assignment.manually_reassigned"
    REVIEW_SUBMITTED = "peer_review.submitted"
    REVIEW_SCORE_OVERRIDDEN = "peer_review.score_overridden"
    OUTCOME_DECIDED = "submission.peer_outcome_decided"
    SHORTLIST_SELECTED = "contest.shortlist_selected"


@dataclass(frozen=True)
class AuditEntry:
    """One immutable audit record.

    ``actor_id`` is None for actions taken by a scheduled sweep.
    """

    action: AuditAction
    entity_id: UUID
    occurred_at: datetime
    actor_id: UUID | None = None
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "action": self.action.value,
            "entity_id": str(self.entity_id),
            "occurred_at": self.occurred_at.isoformat(),
            "actor_id": str(self.actor_id) if self.actor_id else None,
            "details": dict(self.details),
        }
