"""Unit tests for engine composition."""

import os
from unittest.mock import patch

from prometheus_client import CollectorRegistry

from peer_verification.bootstrap.database import reset_database_bootstrap
from peer_verification.bootstrap.engine import build_engine
from peer_verification.config.engine_config import TEST_ENGINE_CONFIG
from peer_verification.infrastructure.adapters.persistence.assignment_repository import (
    PostgresAssignmentRepository,
)
from peer_verification.infrastructure.monitoring.metrics import SweepMetricsCollector
from peer_verification.infrastructure.stubs import (
    AssignmentRepositoryStub,
    ContestPolicyProviderStub,
)


def _metrics() -> SweepMetricsCollector:
    return SweepMetricsCollector(registry=CollectorRegistry())


class TestBuildEngine:
    def test_defaults_to_memory_without_database(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            engine = build_engine(TEST_ENGINE_CONFIG, metrics=_metrics())

        assert isinstance(engine.assignment_repo, AssignmentRepositoryStub)
        assert isinstance(engine.policy_provider, ContestPolicyProviderStub)

    def test_selects_postgres_when_configured(self) -> None:
        reset_database_bootstrap()
        try:
            with patch.dict(os.environ, {"DATABASE_URL": "postgresql://u:p@localhost/pv"}):
                engine = build_engine(TEST_ENGINE_CONFIG, metrics=_metrics())
        finally:
            reset_database_bootstrap()

        assert isinstance(engine.assignment_repo, PostgresAssignmentRepository)

    def test_use_database_false_keeps_memory(self) -> None:
        with patch.dict(os.environ, {"DATABASE_URL": "postgresql://u:p@localhost/pv"}):
            engine = build_engine(TEST_ENGINE_CONFIG, metrics=_metrics(), use_database=False)

        assert isinstance(engine.assignment_repo, AssignmentRepositoryStub)

    def test_services_share_ports(self) -> None:
        repo = AssignmentRepositoryStub()

        engine = build_engine(
            TEST_ENGINE_CONFIG, assignment_repo=repo, metrics=_metrics(), use_database=False
        )

        assert engine.assignment_repo is repo
        assert engine.allocator._assignment_repo is repo
        assert engine.deadline_monitor._assignment_repo is repo
        assert engine.eligibility_resolver.strike_threshold == TEST_ENGINE_CONFIG.strike_threshold

    def test_config_is_read_from_environment_when_omitted(self) -> None:
        with patch.dict(os.environ, {"PEER_STRIKE_THRESHOLD": "4"}, clear=True):
            engine = build_engine(metrics=_metrics(), use_database=False)

        assert engine.config.strike_threshold == 4
