"""Unit tests for the cron trigger, metrics and middleware wiring."""

from datetime import timedelta
from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from peer_verification.api.main import create_app
from peer_verification.config.engine_config import CronConfig
from peer_verification.domain.models.notification import NotificationKind
from tests.helpers.builders import (
    T0,
    add_reviewers,
    build_test_engine,
    make_assignment,
    make_submission,
)

SECRET = "s3cret-cron-token"
AUTH = {"Authorization": f"Bearer {SECRET}"}


@pytest.fixture
def engine():
    return build_test_engine()


@pytest.fixture
def client(engine) -> TestClient:
    return TestClient(create_app(engine=engine, cron_config=CronConfig(cron_secret=SECRET)))


class TestCronAuthentication:
    """Bearer secret checks shared by both cron endpoints."""

    @pytest.mark.parametrize(
        "path",
        ["/api/cron/peer-verification/check-deadlines", "/api/cron/peer-verification/send-warnings"],
    )
    def test_missing_header_is_401(self, client: TestClient, path: str) -> None:
        response = client.get(path)

        assert response.status_code == 401
        assert response.json()["detail"] == "Bearer token required"

    def test_wrong_scheme_is_401(self, client: TestClient) -> None:
        response = client.get(
            "/api/cron/peer-verification/check-deadlines",
            headers={"Authorization": SECRET},
        )

        assert response.status_code == 401

    def test_wrong_secret_is_401(self, client: TestClient) -> None:
        response = client.get(
            "/api/cron/peer-verification/check-deadlines",
            headers={"Authorization": "Bearer nope"},
        )

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid cron secret"

    def test_unconfigured_secret_is_500(self, engine) -> None:
        """No secret configured means nobody can be authenticated."""
        client = TestClient(create_app(engine=engine, cron_config=CronConfig()))

        response = client.get("/api/cron/peer-verification/check-deadlines", headers=AUTH)

        assert response.status_code == 500
        assert response.json()["detail"] == {
            "error": "configuration_absent",
            "setting": "CRON_SECRET",
        }


class TestCheckDeadlines:
    def test_empty_run(self, client: TestClient) -> None:
        response = client.get("/api/cron/peer-verification/check-deadlines", headers=AUTH)

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["expired_count"] == 0
        assert body["reassigned_count"] == 0
        assert body["errors"] == []
        assert body["integrity_violations"] == []

    def test_expires_and_reassigns(self, client: TestClient, engine) -> None:
        submission = make_submission()
        engine.submission_repo.put(submission)
        reviewers = add_reviewers(engine.reviewer_directory, submission.contest_id, 4)
        engine.assignment_repo.put(
            make_assignment(
                submission_id=submission.id,
                reviewer_id=reviewers[0],
                created_at=T0 - timedelta(days=8),
            )
        )

        response = client.get("/api/cron/peer-verification/check-deadlines", headers=AUTH)

        body = response.json()
        assert body["expired_count"] == 1
        assert body["reassigned_count"] == 1
        assert body["topped_up_count"] == 2
        assert body["shortfalls"] == []

    def test_shortfall_is_reported(self, client: TestClient, engine) -> None:
        submission = make_submission()
        engine.submission_repo.put(submission)
        add_reviewers(engine.reviewer_directory, submission.contest_id, 1)

        body = client.get(
            "/api/cron/peer-verification/check-deadlines", headers=AUTH
        ).json()

        assert body["topped_up_count"] == 1
        (shortfall,) = body["shortfalls"]
        assert shortfall["submission_id"] == str(submission.id)
        assert shortfall["missing"] == 2

    def test_failed_expiry_still_tops_up(self, client: TestClient, engine) -> None:
        submission = make_submission()
        engine.submission_repo.put(submission)
        add_reviewers(engine.reviewer_directory, submission.contest_id, 4)

        with patch.object(
            engine.assignment_repo,
            "list_overdue_pending",
            AsyncMock(side_effect=RuntimeError("db timeout")),
        ):
            response = client.get(
                "/api/cron/peer-verification/check-deadlines", headers=AUTH
            )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is False
        assert body["failed_steps"] == ["expiry"]
        assert body["expired_count"] == 0
        assert body["topped_up_count"] == 3
        assert any("db timeout" in e for e in body["errors"])


class TestSendWarnings:
    def test_sends_warning_for_assignment_due_soon(self, client: TestClient, engine) -> None:
        engine.assignment_repo.put(make_assignment(created_at=T0 - timedelta(days=6, hours=12)))

        response = client.get("/api/cron/peer-verification/send-warnings", headers=AUTH)

        assert response.status_code == 200
        body = response.json()
        assert body["warnings_sent"] == 1
        assert body["reminders_sent"] == 0
        assert len(engine.notification_dispatcher.sent(NotificationKind.DEADLINE_WARNING)) == 1


class TestMetricsEndpoint:
    def test_exposes_prometheus_text(self, client: TestClient) -> None:
        response = client.get("/metrics")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert "peer_assignments_expired_total" in response.text


class TestCorrelationHeader:
    def test_incoming_id_is_echoed(self, client: TestClient) -> None:
        response = client.get("/metrics", headers={"X-Correlation-ID": "run-42"})

        assert response.headers["X-Correlation-ID"] == "run-42"

    def test_id_generated_when_absent(self, client: TestClient) -> None:
        response = client.get("/metrics")

        assert len(response.headers["X-Correlation-ID"]) == 36
