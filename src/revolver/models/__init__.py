"""Revolver game models.

This module exports the core data structures for the game.
"""

from .config import GameConfig, env_overrides, load_config_from_env
from .saved import SavedGame
from .state import (
    Actor,
    ActorKind,
    GamePhase,
    GameState,
    GrudgeMemory,
    TurnRecord,
)

__all__ = [
    # Enums
    "ActorKind",
    "GamePhase",
    # State Models
    "Actor",
    "GrudgeMemory",
    "TurnRecord",
    "GameState",
    # Configuration
    "GameConfig",
    "load_config_from_env",
    "env_overrides",
    # Persistence
    "SavedGame",
]
