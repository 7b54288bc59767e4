"""Reviewer view supplied by the identity store."""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class Reviewer:
    """A user who may be asked to review submissions.

    Attributes:
        id: User identifier.
        display_name: Name used in notifications.
        email: Delivery address for notifications, if known.
        is_banned: Banned users are never eligible.
    """

    id: UUID
    display_name: str
    email: str | None = None
    is_banned: bool = False
