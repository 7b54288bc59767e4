"""In-memory stub implementation of ContestPolicyProviderProtocol."""

from __future__ import annotations

from uuid import UUID

from peer_verification.config.engine_config import EngineConfig
from peer_verification.domain.errors.configuration import PolicyNotFoundError
from peer_verification.domain.models.policy import ContestReviewPolicy


class ContestPolicyProviderStub:
    """Per-contest policies with an optional configured fallback.

    When built with an EngineConfig, contests without an explicit policy
    get ``config.default_policy``; otherwise they raise PolicyNotFoundError.
    """

    def __init__(self, fallback: EngineConfig | None = None) -> None:
        self._policies: dict[UUID, ContestReviewPolicy] = {}
        self._fallback = fallback
        self.lookups = 0

    def set_policy(self, policy: ContestReviewPolicy) -> None:
        self._policies[policy.contest_id] = policy

    async def get_policy(self, contest_id: UUID) -> ContestReviewPolicy:
        self.lookups += 1
        policy = self._policies.get(contest_id)
        if policy is not None:
            return policy
        if self._fallback is not None:
            return self._fallback.default_policy(contest_id)
        raise PolicyNotFoundError(contest_id)
