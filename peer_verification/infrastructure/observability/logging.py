"""structlog setup for the peer verification engine.

Production renders one JSON object per line; any other environment gets
the coloured console renderer. LOG_LEVEL sets the threshold and unknown
names fall back to INFO.

A deadline-check line in production looks like::

    {"event": "cron_sweep_completed", "level": "info",
     "timestamp": "2026-01-01T01:00:00.000000Z",
     "service": "peer-verification-engine", "component": "CronSweepService",
     "correlation_id": "6f1c...", "trigger": "check-deadlines",
     "sweep": "deadline_check", "expired_count": 3, "duration_ms": 41}
"""

from __future__ import annotations

import logging
import os
from typing import Any, cast

import structlog
from structlog.typing import Processor

from peer_verification.infrastructure.observability.correlation import (
    run_context_processor,
)

SERVICE_NAME = "peer-verification-engine"
LOG_LEVEL_ENV = "LOG_LEVEL"


def resolve_log_level(name: str | None = None) -> int:
    """Map a level name (or LOG_LEVEL) to a ``logging`` constant."""
    level_name = (name or os.getenv(LOG_LEVEL_ENV) or "INFO").upper()
    level = logging.getLevelName(level_name)
    return level if isinstance(level, int) else logging.INFO


def add_service_name(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def build_processors(environment: str) -> list[Processor]:
    renderer: Processor
    if environment == "production":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        cast(Processor, add_service_name),
        cast(Processor, run_context_processor),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        renderer,
    ]


def configure_structlog(environment: str = "production", level: str | None = None) -> None:
    """Configure structlog once at process start.

    Args:
        environment: "production" for JSON, anything else for console output.
        level: Level name overriding LOG_LEVEL.
    """
    structlog.configure(
        processors=build_processors(environment),
        wrapper_class=structlog.make_filtering_bound_logger(resolve_log_level(level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_component_logger(component: str) -> Any:
    """Return a logger with ``component`` bound, for long-lived services."""
    return structlog.get_logger().bind(component=component)
