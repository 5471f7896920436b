"""Grudge-holding opponent for Revolver.

The policy is a priority cascade. Each probabilistic step consumes exactly one
draw when it is reached, plus one more when it picks among several actors:

1. Retaliation: living actors who fired a blank at us -> 80% shoot one of them
2. Human: the human is alive -> 60% shoot them
3. Weakest peer: lowest-health living autonomous actor (first in seat order on ties)
4. Fallback: uniform among every other living actor

Memory update: a blank fired at an autonomous actor records the shooter in
that actor's grudge set, whoever the shooter is.
"""

from __future__ import annotations

import logging

from revolver.engine.errors import InvalidState
from revolver.engine.randomness import RandomSource, chance, pick
from revolver.models.state import Actor, GameState, GrudgeMemory
from revolver.opponents.base import Opponent
from revolver.parameters import GRUDGE_RETALIATION_CHANCE, TARGET_HUMAN_CHANCE

logger = logging.getLogger(__name__)


class GrudgeOpponent(Opponent):
    """Retaliates against prior attackers, then hunts the human, then the weak."""

    def __init__(
        self,
        name: str = "Grudge Holder",
        retaliation_chance: float = GRUDGE_RETALIATION_CHANCE,
        human_chance: float = TARGET_HUMAN_CHANCE,
    ):
        super().__init__(name=name)
        self.retaliation_chance = retaliation_chance
        self.human_chance = human_chance

    def choose_target(self, state: GameState, actor_id: str, rng: RandomSource) -> str:
        """Walk the cascade and return a target id.

        Raises:
            InvalidActor: If ``actor_id`` is unknown
            InvalidState: If nobody else is alive
        """
        self.require_actor(state, actor_id)
        others = self.living_others(state, actor_id)
        if not others:
            raise InvalidState(f"No living target available for {actor_id}")

        grudge_targets = self._grudge_targets(state.grudges, actor_id, others)
        if grudge_targets and chance(rng, self.retaliation_chance):
            target = pick(rng, grudge_targets)
            logger.debug(f"{actor_id} retaliates against {target.id}")
            return target.id

        human = next((a for a in others if a.is_human), None)
        if human is not None and chance(rng, self.human_chance):
            logger.debug(f"{actor_id} targets the human {human.id}")
            return human.id

        weakest = self._weakest_peer(others)
        if weakest is not None:
            logger.debug(f"{actor_id} targets weakest peer {weakest.id}")
            return weakest.id

        target = pick(rng, others)
        logger.debug(f"{actor_id} falls back to {target.id}")
        return target.id

    @staticmethod
    def _grudge_targets(memory: GrudgeMemory, actor_id: str, others: list[Actor]) -> list[Actor]:
        held = memory.against(actor_id)
        return [a for a in others if a.id in held]

    @staticmethod
    def _weakest_peer(others: list[Actor]) -> Actor | None:
        weakest = None
        for actor in others:
            if not actor.is_autonomous:
                continue
            # Strict comparison keeps the first seat on ties
            if weakest is None or actor.health < weakest.health:
                weakest = actor
        return weakest


def update_grudges(
    memory: GrudgeMemory,
    shooter_id: str,
    target: Actor,
    was_blank: bool,
) -> GrudgeMemory:
    """Record a grudge when an autonomous target survives a blank.

    Idempotent; never removes entries. ``resolve_turn`` applies the same rule
    through ``GrudgeMemory.after_shot``.
    """
    updated = memory.after_shot(shooter_id, target, was_blank)
    if updated is not memory:
        logger.debug(f"{target.id} now holds a grudge against {shooter_id}")
    return updated
