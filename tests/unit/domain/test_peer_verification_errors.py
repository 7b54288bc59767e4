"""Unit tests for the domain error hierarchy."""

from datetime import datetime, timezone
from uuid import uuid4

import pytest

from peer_verification.domain.errors import (
    AssignmentDeadlinePassedError,
    AssignmentError,
    AssignmentNotPendingError,
    ConfigurationAbsentError,
    DataIntegrityError,
    DuplicateLiveAssignmentError,
    JustificationRequiredError,
    ReviewError,
    ReviewWithoutAssignmentError,
    SelfReviewAssignmentError,
    SubmissionError,
    SubmissionNotFoundError,
)
from peer_verification.domain.exceptions import PeerVerificationError


class TestErrorHierarchy:
    @pytest.mark.parametrize(
        "error",
        [
            AssignmentNotPendingError(uuid4(), "done"),
            SubmissionNotFoundError(uuid4()),
            ConfigurationAbsentError("CRON_SECRET"),
            DuplicateLiveAssignmentError(uuid4(), uuid4()),
            JustificationRequiredError("Review"),
        ],
    )
    def test_all_errors_share_base(self, error: Exception) -> None:
        assert isinstance(error, PeerVerificationError)

    def test_integrity_family(self) -> None:
        for error in (
            DuplicateLiveAssignmentError(uuid4(), uuid4()),
            ReviewWithoutAssignmentError(uuid4(), uuid4(), "assignment not found"),
            SelfReviewAssignmentError(uuid4(), uuid4()),
        ):
            assert isinstance(error, DataIntegrityError)
            assert not isinstance(error, (AssignmentError, ReviewError, SubmissionError))


class TestErrorMessages:
    def test_not_pending_carries_status(self) -> None:
        assignment_id = uuid4()
        error = AssignmentNotPendingError(assignment_id, "expired")

        assert error.current_status == "expired"
        assert str(assignment_id) in str(error)
        assert "status=expired" in str(error)

    def test_deadline_passed_message(self) -> None:
        deadline = datetime(2026, 1, 8, tzinfo=timezone.utc)
        error = AssignmentDeadlinePassedError(uuid4(), deadline)

        assert deadline.isoformat() in str(error)

    def test_configuration_absent_names_setting(self) -> None:
        error = ConfigurationAbsentError("CRON_SECRET")

        assert error.setting == "CRON_SECRET"
        assert "CRON_SECRET" in str(error)

    def test_justification_required_names_action(self) -> None:
        assert str(JustificationRequiredError("Score override")) == (
            "Score override requires a non-empty justification"
        )
