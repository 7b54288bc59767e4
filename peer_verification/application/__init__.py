"""Application layer: ports, services and result DTOs."""
