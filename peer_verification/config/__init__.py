"""Configuration for the peer verification engine."""

from peer_verification.config.engine_config import (
    DEFAULT_ENGINE_CONFIG,
    TEST_ENGINE_CONFIG,
    CronConfig,
    EngineConfig,
)

__all__ = [
    "DEFAULT_ENGINE_CONFIG",
    "TEST_ENGINE_CONFIG",
    "CronConfig",
    "EngineConfig",
]
