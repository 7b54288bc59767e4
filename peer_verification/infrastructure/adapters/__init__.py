"""Production adapters for engine ports."""
