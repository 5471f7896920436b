"""File-based repository implementation using JSON files.

Each session is stored as ``<games_path>/<id>.json``; the resume slot lives
in ``<games_path>/current.json``.
"""

import logging
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from revolver.models.saved import SavedGame

from .repository import GameRecordRepository

logger = logging.getLogger(__name__)

CURRENT_GAME_FILE = "current.json"


def _read_saved_game(path: Path) -> SavedGame:
    try:
        return SavedGame.from_json(path.read_text(encoding="utf-8"))
    except ValidationError as e:
        raise ValueError(f"Corrupt saved game {path}: {e}") from e


class FileGameRecordRepository(GameRecordRepository):
    """JSON file-based saved-session repository."""

    def __init__(self, games_path: str | Path = "games"):
        """Initialize repository.

        Args:
            games_path: Path to games directory
        """
        self.games_path = Path(games_path)
        self.games_path.mkdir(parents=True, exist_ok=True)

    def _get_game_path(self, game_id: str) -> Path:
        """Get path to game file."""
        return self.games_path / f"{game_id}.json"

    @property
    def _current_path(self) -> Path:
        return self.games_path / CURRENT_GAME_FILE

    def save_game(self, game: SavedGame) -> None:
        """Persist a session snapshot."""
        path = self._get_game_path(game.id)
        path.write_text(game.to_json(), encoding="utf-8")
        logger.debug(f"Saved game {game.id} to {path}")

    def load_game(self, game_id: str) -> Optional[SavedGame]:
        """Load a session snapshot by ID."""
        path = self._get_game_path(game_id)
        if not path.exists():
            return None
        return _read_saved_game(path)

    def list_games(self) -> list[dict]:
        """List saved sessions, newest first."""
        games = []
        for path in self.games_path.glob("*.json"):
            if path.name == CURRENT_GAME_FILE:
                continue
            try:
                games.append(_read_saved_game(path).summary())
            except ValueError as e:
                logger.warning(f"Skipping unreadable saved game: {e}")
        return sorted(games, key=lambda x: x["last_played"], reverse=True)

    def delete_game(self, game_id: str) -> bool:
        """Delete a saved session."""
        path = self._get_game_path(game_id)
        if path.exists():
            path.unlink()
            return True
        return False

    def save_current(self, game: SavedGame) -> None:
        self._current_path.write_text(game.to_json(), encoding="utf-8")

    def load_current(self) -> Optional[SavedGame]:
        if not self._current_path.exists():
            return None
        return _read_saved_game(self._current_path)

    def clear_current(self) -> bool:
        if self._current_path.exists():
            self._current_path.unlink()
            return True
        return False
