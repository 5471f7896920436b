"""Turn engine for Revolver.

This module contains the core game logic including:
- errors: Typed rejections (InvalidPhase, InvalidActor, InvalidState)
- randomness: Injectable random source and uniform-pick helpers
- turn: Pure phase transitions, shot resolution, damage and win detection
- game_engine: Session orchestrator returning TurnResult values

GameEngine is imported from its own module so that opponent policies can use
the randomness helpers without an import cycle:

    from revolver.engine.game_engine import GameEngine
"""

from revolver.engine.errors import (
    EngineError,
    InvalidActor,
    InvalidPhase,
    InvalidState,
)
from revolver.engine.randomness import RandomSource, ScriptedRandom, chance, pick, pick_index
from revolver.engine.turn import (
    Outcome,
    ShotResult,
    apply_damage,
    begin_shot,
    draw_armed_actor,
    evaluate_outcome,
    finish_spin,
    initialize_game,
    record_turn,
    resolve_shot,
    resolve_turn,
    select_target,
    start_spin,
)

__all__ = [
    # Errors
    "EngineError",
    "InvalidActor",
    "InvalidPhase",
    "InvalidState",
    # Randomness
    "RandomSource",
    "ScriptedRandom",
    "chance",
    "pick",
    "pick_index",
    # Results
    "Outcome",
    "ShotResult",
    # Operations
    "initialize_game",
    "draw_armed_actor",
    "resolve_shot",
    "apply_damage",
    "evaluate_outcome",
    "record_turn",
    # Transitions
    "start_spin",
    "finish_spin",
    "select_target",
    "begin_shot",
    "resolve_turn",
]
