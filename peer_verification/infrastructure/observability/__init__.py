"""Structured logging and run correlation."""

from peer_verification.infrastructure.observability.correlation import (
    RunContext,
    begin_run,
    current_run,
    end_run,
    ensure_run,
    new_correlation_id,
    run_context_processor,
)
from peer_verification.infrastructure.observability.logging import (
    configure_structlog,
    get_component_logger,
)

__all__ = [
    "RunContext",
    "begin_run",
    "configure_structlog",
    "current_run",
    "end_run",
    "ensure_run",
    "get_component_logger",
    "new_correlation_id",
    "run_context_processor",
]
