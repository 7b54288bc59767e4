"""Reviewer directory port (identity/roles store)."""

from __future__ import annotations

from typing import Protocol
from uuid import UUID

from peer_verification.domain.models.reviewer import Reviewer


class ReviewerDirectoryProtocol(Protocol):
    """Read-only view over the platform's users."""

    async def list_candidates(self, contest_id: UUID) -> list[Reviewer]:
        """List users who may review submissions in a contest.

        Candidates are users with their own entry in the same contest.
        Banned users may be included; eligibility filtering is the
        engine's job.
        """
        ...

    async def get_reviewer(self, reviewer_id: UUID) -> Reviewer | None:
        ...
