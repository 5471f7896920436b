"""Random source abstraction for the turn engine.

Every probabilistic decision (armed-actor draw, blank resolution, opponent
branching) goes through a ``RandomSource`` passed in by the caller. Any
``random.Random`` instance qualifies, so a seeded generator gives a replayable
session; ``ScriptedRandom`` feeds an exact sequence for tests.
"""

from __future__ import annotations

from typing import Iterable, Protocol, Sequence, TypeVar

from revolver.engine.errors import InvalidState

T = TypeVar("T")


class RandomSource(Protocol):
    """Anything with ``random() -> float`` in [0.0, 1.0)."""

    def random(self) -> float: ...


class ScriptedRandom:
    """Replays a fixed sequence of floats.

    Example:
        >>> rng = ScriptedRandom([0.9, 0.1])
        >>> rng.random()
        0.9
    """

    def __init__(self, values: Iterable[float]):
        self._values = list(values)
        self._index = 0

    def random(self) -> float:
        if self._index >= len(self._values):
            raise InvalidState(f"Scripted random source exhausted after {self._index} draws")
        value = self._values[self._index]
        self._index += 1
        return value

    @property
    def remaining(self) -> int:
        return len(self._values) - self._index


def pick_index(rng: RandomSource, count: int) -> int:
    """Uniform index in [0, count) from a single draw."""
    if count <= 0:
        raise InvalidState("Cannot pick from an empty collection")
    return min(int(rng.random() * count), count - 1)


def pick(rng: RandomSource, items: Sequence[T]) -> T:
    """Uniform choice from ``items`` using a single draw."""
    return items[pick_index(rng, len(items))]


def chance(rng: RandomSource, probability: float) -> bool:
    """True with the given probability, using a single draw."""
    return rng.random() < probability
