"""Unit tests for PeerReview and sub-score validation."""

from datetime import timedelta
from uuid import uuid4

import pytest

from peer_verification.domain.errors.review import InvalidSubScoreError
from peer_verification.domain.models.review import (
    MAX_SUB_SCORE,
    MIN_SUB_SCORE,
    ReviewCriterion,
    validate_sub_score,
)
from tests.helpers.builders import T0, make_assignment, make_review


class TestValidateSubScore:
    @pytest.mark.parametrize("value", [MIN_SUB_SCORE, 3, MAX_SUB_SCORE])
    def test_accepts_range(self, value: int) -> None:
        assert validate_sub_score(ReviewCriterion.CLARITY, value) == value

    @pytest.mark.parametrize("value", [0, 6, -1, 3.5, "4", None, True])
    def test_rejects_out_of_range_and_non_int(self, value: object) -> None:
        with pytest.raises(InvalidSubScoreError) as exc_info:
            validate_sub_score(ReviewCriterion.STYLE, value)
        assert exc_info.value.criterion == "style"


class TestPeerReview:
    def test_construction_validates_every_criterion(self) -> None:
        with pytest.raises(InvalidSubScoreError):
            make_review(make_assignment(), (3, 3, 3, 9))

    def test_sub_scores_keyed_by_criterion(self) -> None:
        review = make_review(make_assignment(), (1, 2, 3, 4))

        assert review.sub_scores() == {
            ReviewCriterion.CLARITY: 1,
            ReviewCriterion.ARGUMENT: 2,
            ReviewCriterion.STYLE: 3,
            ReviewCriterion.MORAL_DEPTH: 4,
        }

    def test_override_changes_only_named_criteria(self) -> None:
        review = make_review(make_assignment(), (3, 4, 5, 2))
        admin_id = uuid4()
        at = T0 + timedelta(days=3)

        updated = review.with_overridden_scores(
            {ReviewCriterion.MORAL_DEPTH: 5},
            admin_id=admin_id,
            justification="Misread the rubric",
            overridden_at=at,
        )

        assert updated.moral_depth == 5
        assert (updated.clarity, updated.argument, updated.style) == (3, 4, 5)
        assert updated.overridden_by == admin_id
        assert updated.overridden_at == at
        assert updated.override_justification == "Misread the rubric"
        assert review.moral_depth == 2

    def test_override_rejects_out_of_range(self) -> None:
        review = make_review(make_assignment())
        with pytest.raises(InvalidSubScoreError):
            review.with_overridden_scores(
                {ReviewCriterion.CLARITY: 0},
                admin_id=uuid4(),
                justification="x",
                overridden_at=T0,
            )
