"""Unit tests for the Submission aggregate and outcome mapping."""

from datetime import timedelta

import pytest

from peer_verification.domain.models.submission import (
    PeerVerificationOutcome,
    Submission,
    SubmissionStatus,
)
from tests.helpers.builders import T0, make_submission


class TestSubmissionStatus:
    def test_forward_path(self) -> None:
        assert SubmissionStatus.SUBMITTED.can_transition_to(
            SubmissionStatus.PEER_VERIFICATION_PENDING
        )
        assert SubmissionStatus.PEER_VERIFICATION_PENDING.can_transition_to(
            SubmissionStatus.ELIMINATED
        )
        assert SubmissionStatus.PEER_VERIFICATION_PENDING.can_transition_to(
            SubmissionStatus.REINSTATED
        )

    def test_decided_states_flip_only_between_each_other(self) -> None:
        assert SubmissionStatus.ELIMINATED.can_transition_to(SubmissionStatus.REINSTATED)
        assert SubmissionStatus.REINSTATED.can_transition_to(SubmissionStatus.ELIMINATED)
        assert not SubmissionStatus.ELIMINATED.can_transition_to(
            SubmissionStatus.PEER_VERIFICATION_PENDING
        )

    def test_submitted_cannot_skip_peer_verification(self) -> None:
        assert not SubmissionStatus.SUBMITTED.can_transition_to(SubmissionStatus.REINSTATED)


class TestPeerVerificationOutcome:
    def test_maps_to_status(self) -> None:
        assert PeerVerificationOutcome.REINSTATED.to_status() == SubmissionStatus.REINSTATED
        assert PeerVerificationOutcome.ELIMINATED.to_status() == SubmissionStatus.ELIMINATED

    def test_none_has_no_status(self) -> None:
        with pytest.raises(ValueError):
            PeerVerificationOutcome.NONE.to_status()


class TestSubmission:
    def test_decided_status_requires_outcome(self) -> None:
        with pytest.raises(ValueError, match="requires an outcome"):
            make_submission(status=SubmissionStatus.ELIMINATED)

    def test_with_status_rejects_invalid_transition(self) -> None:
        submission = make_submission(status=SubmissionStatus.SUBMITTED)
        with pytest.raises(ValueError, match="Cannot transition"):
            submission.with_status(SubmissionStatus.ELIMINATED)

    def test_with_decision_sets_status_and_quorum_time(self) -> None:
        submission = make_submission()

        decided = submission.with_decision(PeerVerificationOutcome.REINSTATED, T0)

        assert decided.status == SubmissionStatus.REINSTATED
        assert decided.outcome == PeerVerificationOutcome.REINSTATED
        assert decided.has_reached_quorum
        assert decided.quorum_reached_at == T0

    def test_redecision_keeps_first_quorum_time(self) -> None:
        decided = make_submission().with_decision(PeerVerificationOutcome.REINSTATED, T0)

        flipped = decided.with_decision(
            PeerVerificationOutcome.ELIMINATED, T0 + timedelta(days=2)
        )

        assert flipped.status == SubmissionStatus.ELIMINATED
        assert flipped.quorum_reached_at == T0

    def test_finalist_flag(self) -> None:
        submission: Submission = make_submission()
        assert submission.with_finalist(True).is_finalist
