"""Unit tests for run context correlation."""

import asyncio

import pytest

from peer_verification.infrastructure.observability.correlation import (
    begin_run,
    current_run,
    end_run,
    ensure_run,
    new_correlation_id,
    run_context_processor,
)


@pytest.fixture(autouse=True)
def no_active_run():
    end_run()
    yield
    end_run()


class TestBeginRun:
    def test_uses_supplied_id(self) -> None:
        run = begin_run("sched-2026-01-01T01", trigger="check-deadlines")

        assert current_run() == run
        assert run.correlation_id == "sched-2026-01-01T01"
        assert run.trigger == "check-deadlines"

    @pytest.mark.parametrize("supplied", [None, "", "   "])
    def test_generates_id_when_blank(self, supplied) -> None:
        run = begin_run(supplied)

        assert len(run.correlation_id) == 36

    def test_generated_ids_are_unique(self) -> None:
        assert len({new_correlation_id() for _ in range(50)}) == 50


class TestEnsureRun:
    def test_starts_run_outside_http(self) -> None:
        run = ensure_run("send-warnings")

        assert run.trigger == "send-warnings"
        assert current_run() == run

    def test_keeps_request_id_and_adds_trigger(self) -> None:
        begin_run("req-1")

        run = ensure_run("check-deadlines")

        assert (run.correlation_id, run.trigger) == ("req-1", "check-deadlines")

    def test_existing_trigger_is_kept(self) -> None:
        begin_run("req-1", trigger="check-deadlines")

        assert ensure_run("other").trigger == "check-deadlines"

    @pytest.mark.asyncio
    async def test_concurrent_runs_are_isolated(self) -> None:
        """Two cron calls in flight keep their own IDs."""
        seen: dict[str, str] = {}

        async def run(trigger: str, correlation_id: str) -> None:
            begin_run(correlation_id, trigger=trigger)
            await asyncio.sleep(0.01)
            seen[trigger] = current_run().correlation_id

        await asyncio.gather(
            run("check-deadlines", "id-1"),
            run("send-warnings", "id-2"),
        )

        assert seen == {"check-deadlines": "id-1", "send-warnings": "id-2"}


class TestRunContextProcessor:
    def test_adds_run_fields(self) -> None:
        begin_run("abc", trigger="reassign")

        event = run_context_processor(None, "info", {"event": "x"})

        assert event["correlation_id"] == "abc"
        assert event["trigger"] == "reassign"

    def test_bound_values_win(self) -> None:
        begin_run("abc", trigger="reassign")

        event = run_context_processor(None, "info", {"event": "x", "trigger": "manual"})

        assert event["trigger"] == "manual"

    def test_no_run_adds_nothing(self) -> None:
        event = run_context_processor(None, "info", {"event": "x"})

        assert event == {"event": "x"}
