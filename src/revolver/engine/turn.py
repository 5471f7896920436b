"""Pure turn transitions for Revolver.

Every function here takes an explicit state value and returns a new one; none
of them mutate their input, sleep, or read ambient randomness. A rejected
command raises a typed ``EngineError`` and the input state is untouched.

Turn Sequence:
1. start_spin     SETUP -> SPINNING
2. finish_spin    SPINNING -> CHOOSING_TARGET (draws the armed actor)
3. select_target  CHOOSING_TARGET, records the chosen target
4. begin_shot     CHOOSING_TARGET -> SHOOTING
5. resolve_turn   SHOOTING -> SETUP | GAME_OVER (one draw, one damage, one record)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from revolver.engine.errors import InvalidActor, InvalidPhase, InvalidState
from revolver.engine.randomness import RandomSource, pick
from revolver.models.config import GameConfig
from revolver.models.state import (
    Actor,
    ActorKind,
    GamePhase,
    GameState,
    TurnRecord,
)
from revolver.parameters import (
    ACTOR_TOKENS,
    AUTONOMOUS_ID_PREFIX,
    HUMAN_ID,
    HUMAN_NAME,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ShotResult:
    """Outcome of a single trigger pull."""

    is_blank: bool


@dataclass(frozen=True)
class Outcome:
    """Win detection result.

    Attributes:
        over: Whether the session has ended
        winner_id: Sole survivor, or None (game continues or nobody survived)
    """

    over: bool
    winner_id: Optional[str] = None


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# Setup
# =============================================================================


def initialize_game(config: GameConfig, now: Optional[datetime] = None) -> GameState:
    """Seat the human at position 0 and autonomous actors at 1..N-1."""
    now = now or utc_now()
    actors = [
        Actor(
            id=HUMAN_ID,
            name=HUMAN_NAME,
            kind=ActorKind.HUMAN,
            health=config.starting_health,
            position=0,
            token=ACTOR_TOKENS[0],
        )
    ]
    for seat in range(1, config.actor_count):
        if seat <= len(config.autonomous_names):
            name = config.autonomous_names[seat - 1]
        else:
            name = f"Bot {seat}"
        actors.append(
            Actor(
                id=f"{AUTONOMOUS_ID_PREFIX}{seat}",
                name=name,
                kind=ActorKind.AUTONOMOUS,
                health=config.starting_health,
                position=seat,
                token=ACTOR_TOKENS[seat % len(ACTOR_TOKENS)],
            )
        )
    return GameState(actors=tuple(actors), started_at=now, last_saved_at=now)


# =============================================================================
# Core operations
# =============================================================================


def draw_armed_actor(state: GameState, rng: RandomSource) -> str:
    """Uniformly select one living actor to hold the revolver.

    The advisory shoot-chance biases in GameConfig are deliberately not read.

    Raises:
        InvalidState: If nobody is alive
    """
    alive = state.alive_actors
    if not alive:
        raise InvalidState("Cannot draw an armed actor: no actors are alive")
    return pick(rng, alive).id


def resolve_shot(rng: RandomSource, blank_probability: float) -> ShotResult:
    """Pull the trigger once: blank with ``blank_probability``, otherwise a hit."""
    return ShotResult(is_blank=rng.random() < blank_probability)


def apply_damage(actor: Actor) -> Actor:
    """Take exactly one point of health from a living actor.

    Raises:
        InvalidActor: If the actor is already dead
    """
    if not actor.is_alive:
        raise InvalidActor(f"{actor.id} is already eliminated")
    return actor.model_copy(update={"health": actor.health - 1})


def evaluate_outcome(actors: tuple[Actor, ...] | list[Actor]) -> Outcome:
    """Over with a winner at one survivor, over without one at zero."""
    alive = [actor for actor in actors if actor.is_alive]
    if len(alive) == 1:
        return Outcome(over=True, winner_id=alive[0].id)
    if not alive:
        return Outcome(over=True, winner_id=None)
    return Outcome(over=False)


def record_turn(
    state: GameState,
    shooter_id: str,
    target_id: str,
    was_blank: bool,
    killed: bool,
    now: Optional[datetime] = None,
) -> GameState:
    """Append one TurnRecord; earlier records are carried over untouched."""
    record = TurnRecord(
        timestamp=now or utc_now(),
        shooter_id=shooter_id,
        target_id=target_id,
        was_blank=was_blank,
        killed=killed,
    )
    return state.model_copy(update={"history": state.history + (record,)})


# =============================================================================
# Phase transitions
# =============================================================================


def _require_phase(state: GameState, expected: GamePhase, command: str) -> None:
    if state.phase != expected:
        raise InvalidPhase(
            f"'{command}' requires phase {expected.value}, current phase is {state.phase.value}"
        )


def start_spin(state: GameState) -> GameState:
    """SETUP -> SPINNING."""
    _require_phase(state, GamePhase.SETUP, "spin")
    return state.model_copy(update={"phase": GamePhase.SPINNING})


def finish_spin(state: GameState, rng: RandomSource) -> GameState:
    """SPINNING -> CHOOSING_TARGET with the armed actor drawn."""
    _require_phase(state, GamePhase.SPINNING, "spin")
    armed_id = draw_armed_actor(state, rng)
    logger.debug(f"Revolver stopped on {armed_id}")
    return state.model_copy(
        update={
            "phase": GamePhase.CHOOSING_TARGET,
            "armed_actor_id": armed_id,
            "selected_target_id": None,
        }
    )


def _validate_target(state: GameState, target_id: Optional[str]) -> Actor:
    armed = state.armed_actor
    if armed is None:
        raise InvalidState("No armed actor in CHOOSING_TARGET phase")
    if not armed.is_alive:
        raise InvalidActor(f"Armed actor {armed.id} is eliminated")
    if target_id is None:
        raise InvalidActor("No target selected")
    target = state.get_actor(target_id)
    if target is None:
        raise InvalidActor(f"Unknown actor: {target_id}")
    if not target.is_alive:
        raise InvalidActor(f"Target {target_id} is eliminated")
    if target.id == armed.id:
        raise InvalidActor(f"{armed.id} cannot target themselves")
    return target


def select_target(state: GameState, target_id: str) -> GameState:
    """Record the target for this turn; a later selection replaces it."""
    _require_phase(state, GamePhase.CHOOSING_TARGET, "select-target")
    _validate_target(state, target_id)
    return state.model_copy(update={"selected_target_id": target_id})


def begin_shot(state: GameState) -> GameState:
    """CHOOSING_TARGET -> SHOOTING once a valid target is selected."""
    _require_phase(state, GamePhase.CHOOSING_TARGET, "shoot")
    _validate_target(state, state.selected_target_id)
    return state.model_copy(update={"phase": GamePhase.SHOOTING})


def resolve_turn(
    state: GameState,
    rng: RandomSource,
    config: GameConfig,
    now: Optional[datetime] = None,
) -> tuple[GameState, TurnRecord, Outcome]:
    """SHOOTING -> SETUP | GAME_OVER.

    Uses exactly one random draw, damages the target at most once, appends one
    TurnRecord and records a grudge when the shot was a blank at an
    autonomous target.

    Returns:
        Tuple of (new state, the appended record, win detection result)
    """
    _require_phase(state, GamePhase.SHOOTING, "resolve")
    target = _validate_target(state, state.selected_target_id)
    shooter_id = state.armed_actor_id

    shot = resolve_shot(rng, config.blank_probability)
    killed = False
    if not shot.is_blank:
        damaged = apply_damage(target)
        killed = not damaged.is_alive
        state = state.replace_actor(damaged)

    grudges = state.grudges.after_shot(shooter_id, target, shot.is_blank)
    if grudges is not state.grudges:
        logger.debug(f"{target.id} now holds a grudge against {shooter_id}")
        state = state.model_copy(update={"grudges": grudges})

    state = record_turn(state, shooter_id, target.id, shot.is_blank, killed, now=now)
    record = state.history[-1]
    outcome = evaluate_outcome(state.actors)

    if killed:
        logger.info(f"{target.id} eliminated by {shooter_id}")

    if outcome.over:
        logger.info(f"Game over after {state.turn_count} turns, winner={outcome.winner_id}")
        state = state.model_copy(update={"phase": GamePhase.GAME_OVER})
    else:
        state = state.model_copy(
            update={
                "phase": GamePhase.SETUP,
                "armed_actor_id": None,
                "selected_target_id": None,
            }
        )
    return state, record, outcome
