"""Run context for log correlation.

A run is one trigger invocation: an hourly deadline check, a warning
dispatch or a single admin action. Every log line emitted while the run
is active carries its ``correlation_id`` and, when known, the ``trigger``
that started it, so the expiry, reassignment and top-up entries of one
run can be pulled out of the aggregate log together.

The context lives in a ContextVar, so concurrent requests never see each
other's IDs.
"""

from __future__ import annotations

from contextvars import ContextVar
from dataclasses import dataclass
from typing import Any
from uuid import uuid4


@dataclass(frozen=True)
class RunContext:
    correlation_id: str
    trigger: str | None = None


_run_context: ContextVar[RunContext | None] = ContextVar("peer_run_context", default=None)


def new_correlation_id() -> str:
    return str(uuid4())


def current_run() -> RunContext | None:
    """Return the active run, or None outside any trigger."""
    return _run_context.get()


def begin_run(correlation_id: str | None = None, trigger: str | None = None) -> RunContext:
    """Make a run active for the current context.

    Args:
        correlation_id: Caller-supplied ID (e.g. from a request header);
            a fresh one is generated when missing or blank.
        trigger: Name of what started the run, such as "check-deadlines".

    Returns:
        The RunContext now in effect.
    """
    run = RunContext(
        correlation_id=(correlation_id or "").strip() or new_correlation_id(),
        trigger=trigger,
    )
    _run_context.set(run)
    return run


def ensure_run(trigger: str) -> RunContext:
    """Return the active run, starting one for ``trigger`` if none is active.

    Cron jobs invoked outside HTTP (a worker calling the service directly)
    still get a correlation ID this way.
    """
    run = _run_context.get()
    if run is None:
        return begin_run(trigger=trigger)
    if run.trigger is None:
        return begin_run(run.correlation_id, trigger)
    return run


def end_run() -> None:
    _run_context.set(None)


def run_context_processor(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """structlog processor adding ``correlation_id`` and ``trigger``.

    Values already bound on the logger win over the run context.
    """
    run = _run_context.get()
    if run is not None:
        event_dict.setdefault("correlation_id", run.correlation_id)
        if run.trigger is not None:
            event_dict.setdefault("trigger", run.trigger)
    return event_dict
