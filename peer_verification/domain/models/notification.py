"""Outbound notification payloads handed to the dispatcher."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID


class NotificationKind(str, Enum):
    """What a notification is about."""

    ASSIGNMENT_CREATED = "assignment_created"
    DEADLINE_WARNING = "deadline_warning"
    FINAL_REMINDER = "final_reminder"
    OUTCOME_DECIDED = "outcome_decided"


@dataclass(frozen=True)
class PeerNotification:
    """A single message for one recipient.

    Attributes:
        kind: Notification category.
        recipient_id: User the message is for.
        submission_id: Submission the message concerns.
        assignment_id: Assignment the message concerns, if any.
        deadline: Assignment deadline, for reviewer-facing kinds.
        created_at: When the notification was produced (UTC).
        details: Extra template values.
    """

    kind: NotificationKind
    recipient_id: UUID
    submission_id: UUID
    created_at: datetime
    assignment_id: UUID | None = None
    deadline: datetime | None = None
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "recipient_id": str(self.recipient_id),
            "submission_id": str(self.submission_id),
            "assignment_id": str(self.assignment_id) if self.assignment_id else None,
            "deadline": self.deadline.isoformat() if self.deadline else None,
            "created_at": self.created_at.isoformat(),
            "details": dict(self.details),
        }
