"""Test helpers for the peer verification engine.

Helpers:
    FakeTimeAuthority: Controllable time authority for deterministic tests
    builders: Factories for submissions, assignments and reviews
    build_test_engine: Engine wired against in-memory stubs

Usage:
    from tests.helpers import FakeTimeAuthority, build_test_engine
"""

from tests.helpers.builders import (
    T0,
    add_reviewers,
    build_test_engine,
    make_assignment,
    make_review,
    make_submission,
)
from tests.helpers.fake_time_authority import FakeTimeAuthority

__all__ = [
    "T0",
    "FakeTimeAuthority",
    "add_reviewers",
    "build_test_engine",
    "make_assignment",
    "make_review",
    "make_submission",
]
