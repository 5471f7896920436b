"""Base opponent interface for Revolver.

An opponent decides whom an armed autonomous actor shoots at. Decisions are
synchronous and return immediately; any "thinking" pause belongs to the
presentation layer.
"""

from abc import ABC, abstractmethod

from revolver.engine.errors import InvalidActor
from revolver.engine.randomness import RandomSource
from revolver.models.state import Actor, GameState


class Opponent(ABC):
    """Abstract base class for target-selection policies."""

    def __init__(self, name: str = "Opponent"):
        """Initialize opponent.

        Args:
            name: Display name for the policy
        """
        self.name = name

    @abstractmethod
    def choose_target(self, state: GameState, actor_id: str, rng: RandomSource) -> str:
        """Choose whom ``actor_id`` shoots this turn.

        Args:
            state: Current game state
            actor_id: The armed autonomous actor
            rng: Random source for any probabilistic branch

        Returns:
            Id of a living actor other than ``actor_id``
        """
        pass

    @staticmethod
    def living_others(state: GameState, actor_id: str) -> list[Actor]:
        """Living actors other than ``actor_id``, in seating order."""
        return [a for a in state.actors if a.is_alive and a.id != actor_id]

    @staticmethod
    def require_actor(state: GameState, actor_id: str) -> Actor:
        actor = state.get_actor(actor_id)
        if actor is None:
            raise InvalidActor(f"Unknown actor: {actor_id}")
        return actor
