"""PostgreSQL persistence adapters (SQLAlchemy async)."""

from peer_verification.infrastructure.adapters.persistence.assignment_repository import (
    PostgresAssignmentRepository,
)

__all__ = ["PostgresAssignmentRepository"]
