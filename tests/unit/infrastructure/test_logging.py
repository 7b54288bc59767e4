"""Unit tests for structured logging configuration."""

import logging
import os
from unittest.mock import patch

import pytest
import structlog

from peer_verification.bootstrap.logging import configure_logging
from peer_verification.infrastructure.observability.correlation import (
    run_context_processor,
)
from peer_verification.infrastructure.observability.logging import (
    SERVICE_NAME,
    add_service_name,
    configure_structlog,
    get_component_logger,
    resolve_log_level,
)


def _processors() -> list:
    return structlog.get_config().get("processors", [])


class TestConfigureStructlog:
    def teardown_method(self) -> None:
        structlog.reset_defaults()

    def test_production_renders_json(self) -> None:
        configure_structlog(environment="production")

        assert isinstance(_processors()[-1], structlog.processors.JSONRenderer)

    def test_development_renders_console(self) -> None:
        configure_structlog(environment="development")

        assert isinstance(_processors()[-1], structlog.dev.ConsoleRenderer)

    def test_run_context_and_service_installed(self) -> None:
        configure_structlog()

        assert run_context_processor in _processors()
        assert add_service_name in _processors()


class TestResolveLogLevel:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [("debug", logging.DEBUG), ("WARNING", logging.WARNING), ("chatty", logging.INFO)],
    )
    def test_explicit_names(self, name: str, expected: int) -> None:
        assert resolve_log_level(name) == expected

    def test_reads_environment(self) -> None:
        with patch.dict(os.environ, {"LOG_LEVEL": "error"}):
            assert resolve_log_level() == logging.ERROR

    def test_defaults_to_info(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            assert resolve_log_level() == logging.INFO


class TestConfigureLogging:
    def teardown_method(self) -> None:
        structlog.reset_defaults()

    def test_reads_environment_variable(self) -> None:
        with patch.dict(os.environ, {"ENVIRONMENT": "production"}):
            environment = configure_logging()

        assert environment == "production"
        assert isinstance(_processors()[-1], structlog.processors.JSONRenderer)

    def test_defaults_to_development(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            assert configure_logging() == "development"

    def test_explicit_environment_wins(self) -> None:
        with patch.dict(os.environ, {"ENVIRONMENT": "production"}):
            assert configure_logging("staging") == "staging"


def test_service_name_added_once() -> None:
    assert add_service_name(None, "info", {})["service"] == SERVICE_NAME
    assert add_service_name(None, "info", {"service": "x"})["service"] == "x"


def test_component_logger_binds_component() -> None:
    log = get_component_logger("CronSweepService")

    assert structlog.get_context(log)["component"] == "CronSweepService"
