"""
Pytest configuration and shared fixtures for peer verification tests.

Testing Standards:
- All async tests use pytest.mark.asyncio (auto mode enabled in pyproject.toml)
- Use AsyncMock for async port mocking
- Unit tests go in tests/unit/
- Integration tests go in tests/integration/
- Time-dependent tests use FakeTimeAuthority
"""

import pytest

from tests.helpers.builders import T0
from tests.helpers.fake_time_authority import FakeTimeAuthority


@pytest.fixture
def anyio_backend() -> str:
    """Use asyncio as the async backend."""
    return "asyncio"


@pytest.fixture
def project_version() -> str:
    """Provide the current project version for tests."""
    from peer_verification import __version__

    return __version__


@pytest.fixture
def fake_time_authority() -> FakeTimeAuthority:
    """Provide a time authority frozen at T0 (2026-01-01T00:00:00Z)."""
    return FakeTimeAuthority(frozen_at=T0)
