"""Random source adapters.

SystemRandomSource draws from the OS entropy pool for production use.
SeededRandomSource is reproducible and meant for tests and replays.
"""

from __future__ import annotations

import random
from typing import Sequence, TypeVar

T = TypeVar("T")


class SystemRandomSource:
    """Unpredictable uniform selection backed by ``random.SystemRandom``."""

    def __init__(self) -> None:
        self._rng = random.SystemRandom()

    def choice(self, population: Sequence[T]) -> T:
        return self._rng.choice(population)


class SeededRandomSource:
    """Deterministic uniform selection for a given seed.

    Example:
        >>> a, b = SeededRandomSource(7), SeededRandomSource(7)
        >>> a.choice([1, 2, 3]) == b.choice([1, 2, 3])
        True
    """

    def __init__(self, seed: int) -> None:
        self._seed = seed
        self._rng = random.Random(seed)

    @property
    def seed(self) -> int:
        return self._seed

    def choice(self, population: Sequence[T]) -> T:
        return self._rng.choice(population)
