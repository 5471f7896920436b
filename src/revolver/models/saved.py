"""Persisted session snapshot."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from revolver.models.config import GameConfig
from revolver.models.state import GameState


class SavedGame(BaseModel):
    """Everything needed to resume a session.

    Attributes:
        id: Session identifier, stable across saves of the same session
        state: Game state at save time
        config: Session configuration
        last_played: When the snapshot was taken
    """

    model_config = ConfigDict(frozen=True)

    id: str
    state: GameState
    config: GameConfig
    last_played: datetime

    def to_json(self) -> str:
        """Serialize to a JSON document."""
        return self.model_dump_json(indent=2)

    @classmethod
    def from_json(cls, json_str: str) -> SavedGame:
        """Deserialize from a JSON document produced by ``to_json``."""
        return cls.model_validate_json(json_str)

    def summary(self) -> dict:
        """Listing metadata for save pickers."""
        alive = self.state.alive_actors
        return {
            "id": self.id,
            "phase": self.state.phase.value,
            "turns": self.state.turn_count,
            "alive": len(alive),
            "last_played": self.last_played.isoformat(),
        }
