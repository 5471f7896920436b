"""Abstract repository interface for Revolver storage.

Both file-based (JSON) and SQLite backends implement this interface, so the
CLI and the headless runner can persist sessions without knowing which
backend is active.
"""

from abc import ABC, abstractmethod
from typing import Optional

from revolver.models.saved import SavedGame


class GameRecordRepository(ABC):
    """Abstract base class for saved-session storage."""

    @abstractmethod
    def save_game(self, game: SavedGame) -> None:
        """Persist a session snapshot, replacing any earlier one with the same id.

        Args:
            game: Snapshot to store
        """
        pass

    @abstractmethod
    def load_game(self, game_id: str) -> Optional[SavedGame]:
        """Load a session snapshot by ID.

        Args:
            game_id: ID of session to load

        Returns:
            SavedGame, or None if not found

        Raises:
            ValueError: If the stored document is corrupt
        """
        pass

    @abstractmethod
    def list_games(self) -> list[dict]:
        """List saved sessions, most recently played first.

        Returns:
            List of metadata dicts: {id, phase, turns, alive, last_played}
        """
        pass

    @abstractmethod
    def delete_game(self, game_id: str) -> bool:
        """Delete a saved session.

        Returns:
            True if deleted, False if not found
        """
        pass

    @abstractmethod
    def save_current(self, game: SavedGame) -> None:
        """Store the snapshot offered for resume on next launch."""
        pass

    @abstractmethod
    def load_current(self) -> Optional[SavedGame]:
        """Load the resume snapshot, or None."""
        pass

    @abstractmethod
    def clear_current(self) -> bool:
        """Forget the resume snapshot.

        Returns:
            True if one was cleared, False if there was none
        """
        pass
