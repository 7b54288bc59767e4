"""Unit tests for ContestReviewPolicy validation."""

from datetime import timedelta
from uuid import uuid4

import pytest

from peer_verification.domain.models.policy import (
    DEFAULT_QUORUM,
    DEFAULT_TARGET_REVIEWERS,
    ContestReviewPolicy,
)


class TestContestReviewPolicy:
    def test_defaults(self) -> None:
        policy = ContestReviewPolicy(contest_id=uuid4())

        assert policy.target_reviewers == DEFAULT_TARGET_REVIEWERS == 10
        assert policy.quorum == DEFAULT_QUORUM == 8
        assert policy.deadline_offset == timedelta(days=7)
        assert policy.shortlist_size == 100
        assert policy.reinstatement_threshold == 3.0
        assert policy.results_visible is False

    def test_quorum_cannot_exceed_target(self) -> None:
        with pytest.raises(ValueError, match="quorum"):
            ContestReviewPolicy(contest_id=uuid4(), target_reviewers=3, quorum=4)

    def test_quorum_must_be_positive(self) -> None:
        with pytest.raises(ValueError, match="quorum"):
            ContestReviewPolicy(contest_id=uuid4(), target_reviewers=3, quorum=0)

    @pytest.mark.parametrize("threshold", [0.5, 5.5])
    def test_threshold_within_score_range(self, threshold: float) -> None:
        with pytest.raises(ValueError, match="reinstatement_threshold"):
            ContestReviewPolicy(contest_id=uuid4(), reinstatement_threshold=threshold)

    def test_deadline_offset_must_be_positive(self) -> None:
        with pytest.raises(ValueError, match="deadline_offset_days"):
            ContestReviewPolicy(contest_id=uuid4(), deadline_offset_days=0)
