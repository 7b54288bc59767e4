"""Unit tests for the random source adapters."""

from peer_verification.infrastructure.adapters.random_source import (
    SeededRandomSource,
    SystemRandomSource,
)


class TestSeededRandomSource:
    def test_same_seed_same_sequence(self) -> None:
        population = list(range(50))
        a = SeededRandomSource(1234)
        b = SeededRandomSource(1234)

        assert [a.choice(population) for _ in range(20)] == [
            b.choice(population) for _ in range(20)
        ]

    def test_exposes_seed(self) -> None:
        assert SeededRandomSource(9).seed == 9

    def test_choice_is_member(self) -> None:
        source = SeededRandomSource(0)
        assert source.choice(["a", "b", "c"]) in {"a", "b", "c"}


class TestSystemRandomSource:
    def test_choice_is_member(self) -> None:
        source = SystemRandomSource()
        for _ in range(20):
            assert source.choice([1, 2, 3]) in {1, 2, 3}

    def test_reaches_every_member(self) -> None:
        """Uniform selection eventually draws each candidate."""
        source = SystemRandomSource()
        seen = {source.choice([1, 2]) for _ in range(200)}
        assert seen == {1, 2}
