"""Controllable clock for sweep and deadline tests.

Deadlines, sweep instants and job durations all come from the time
authority, so a test freezes the clock, builds assignments, then jumps
past the seven-day deadline:

    >>> clock = FakeTimeAuthority(frozen_at=datetime(2026, 1, 1, tzinfo=timezone.utc))
    >>> clock.advance(delta=timedelta(days=8))

The monotonic reading moves with ``advance`` only, so a cron report's
``duration_ms`` is exactly what the test advanced inside the job.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from peer_verification.application.ports.time_authority import TimeAuthorityProtocol

DEFAULT_FROZEN_AT = datetime(2026, 1, 1, 0, 0, 0, tzinfo=timezone.utc)


def _as_utc(dt: datetime) -> datetime:
    return dt if dt.tzinfo is not None else dt.replace(tzinfo=timezone.utc)


class FakeTimeAuthority(TimeAuthorityProtocol):
    """Wall clock that only moves when told to, plus a matching monotonic clock."""

    def __init__(
        self,
        frozen_at: datetime | None = None,
        *,
        start_monotonic: float = 0.0,
    ) -> None:
        self._now = _as_utc(frozen_at or DEFAULT_FROZEN_AT)
        self._start_monotonic = start_monotonic
        self._elapsed = 0.0

    def now(self) -> datetime:
        return self._now

    def utcnow(self) -> datetime:
        return self._now

    def monotonic(self) -> float:
        return self._start_monotonic + self._elapsed

    def advance(
        self,
        seconds: float | int | None = None,
        delta: timedelta | None = None,
    ) -> None:
        """Move both clocks forward; ``delta`` wins over ``seconds``.

        Raises:
            ValueError: No amount given, or a negative one.
        """
        if delta is None and seconds is None:
            raise ValueError("Must provide either 'seconds' or 'delta' argument")
        step = delta.total_seconds() if delta is not None else float(seconds)
        if step < 0:
            raise ValueError(
                f"Cannot advance time backwards by {-step}s; use set_time() instead"
            )
        self._now += timedelta(seconds=step)
        self._elapsed += step

    def set_time(self, dt: datetime) -> None:
        """Jump the wall clock; the monotonic clock is unaffected."""
        self._now = _as_utc(dt)

    @property
    def elapsed_monotonic(self) -> float:
        return self._elapsed

    def __repr__(self) -> str:
        return f"FakeTimeAuthority(now={self._now.isoformat()}, monotonic={self.monotonic():.3f})"
