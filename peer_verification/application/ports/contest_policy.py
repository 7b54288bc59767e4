"""Contest policy provider port."""

from __future__ import annotations

from typing import Protocol
from uuid import UUID

from peer_verification.domain.models.policy import ContestReviewPolicy


class ContestPolicyProviderProtocol(Protocol):
    """Source of per-contest review policy."""

    async def get_policy(self, contest_id: UUID) -> ContestReviewPolicy:
        """Return the review policy for a contest.

        Raises:
            PolicyNotFoundError: If the contest has no policy.
        """
        ...
