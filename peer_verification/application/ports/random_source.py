"""Random source port.

Reviewer selection draws through this port so tests can seed it and
reproduce a selection exactly.
"""

from __future__ import annotations

from typing import Protocol, Sequence, TypeVar

T = TypeVar("T")


class RandomSourceProtocol(Protocol):
    """Uniform selection over a non-empty sequence."""

    def choice(self, population: Sequence[T]) -> T:
        """Return one element chosen uniformly at random.

        Args:
            population: Non-empty sequence to draw from.

        Returns:
            The selected element.

        Raises:
            IndexError: If population is empty.
        """
        ...
