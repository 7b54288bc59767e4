"""Domain layer: models, errors and pure rules with no I/O."""
