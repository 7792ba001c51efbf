# Area: Battle
"""
math_battle._battle.random_source — Injectable randomness
=========================================================

Every shuffle in the package goes through a RandomSource so tests can
pin sequences. Nothing here touches the module-level ``random`` state.
"""

import random
from typing import List, Optional, Protocol, Sequence, TypeVar

T = TypeVar("T")


class RandomSource(Protocol):
    """Anything with ``next() -> float`` in [0, 1)."""

    def next(self) -> float:
        ...


class SeededRandomSource:
    """RandomSource backed by a private ``random.Random`` instance."""

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self._random = random.Random(seed)

    def next(self) -> float:
        return self._random.random()


class SequenceRandomSource:
    """
    RandomSource replaying a fixed list of values, cycling when exhausted.

    Useful for tests that need an exact permutation.
    """

    def __init__(self, values: Sequence[float]):
        if not values:
            raise ValueError("SequenceRandomSource needs at least one value")
        for value in values:
            if not 0.0 <= value < 1.0:
                raise ValueError(f"Random value {value} outside [0, 1)")
        self._values = list(values)
        self._position = 0

    def next(self) -> float:
        value = self._values[self._position % len(self._values)]
        self._position += 1
        return value


def rand_below(rng: RandomSource, n: int) -> int:
    """Uniform integer in [0, n)."""
    return min(int(rng.next() * n), n - 1)


def shuffle(items: Sequence[T], rng: RandomSource) -> List[T]:
    """Return a Fisher-Yates shuffled copy of ``items``."""
    result = list(items)
    for i in range(len(result) - 1, 0, -1):
        j = rand_below(rng, i + 1)
        result[i], result[j] = result[j], result[i]
    return result


def sample(items: Sequence[T], k: int, rng: RandomSource) -> List[T]:
    """Draw up to ``k`` items without replacement."""
    return shuffle(items, rng)[:max(k, 0)]
