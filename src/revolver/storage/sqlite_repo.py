"""SQLite-based repository implementation.

Sessions are stored as JSON documents in a ``games`` table with the listing
columns broken out; the resume slot is a row in a ``settings`` table.
"""

import logging
import sqlite3
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from revolver.models.saved import SavedGame

from .repository import GameRecordRepository

logger = logging.getLogger(__name__)

CURRENT_GAME_KEY = "current_game"


def dict_factory(cursor: sqlite3.Cursor, row: tuple) -> dict:
    """Convert sqlite3 row to dict."""
    return {col[0]: row[idx] for idx, col in enumerate(cursor.description)}


def _parse(data: str, source: str) -> SavedGame:
    try:
        return SavedGame.from_json(data)
    except ValidationError as e:
        raise ValueError(f"Corrupt saved game {source}: {e}") from e


class SQLiteGameRecordRepository(GameRecordRepository):
    """SQLite-based saved-session repository."""

    def __init__(self, database_uri: str = "instance/revolver.db"):
        """Initialize repository.

        Args:
            database_uri: Path to SQLite database file
        """
        self.database_path = Path(database_uri)
        self.database_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _get_connection(self) -> sqlite3.Connection:
        """Get database connection."""
        conn = sqlite3.connect(self.database_path)
        conn.row_factory = dict_factory
        return conn

    def _init_db(self) -> None:
        """Initialize database schema."""
        conn = self._get_connection()
        cursor = conn.cursor()
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS games (
                id TEXT PRIMARY KEY,
                phase TEXT NOT NULL,
                turns INTEGER NOT NULL,
                alive INTEGER NOT NULL,
                data TEXT NOT NULL,
                last_played TEXT NOT NULL
            )
        """)
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_games_last_played ON games(last_played)")
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS settings (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL
            )
        """)
        conn.commit()
        conn.close()

    def save_game(self, game: SavedGame) -> None:
        """Persist a session snapshot."""
        summary = game.summary()
        conn = self._get_connection()
        cursor = conn.cursor()
        cursor.execute(
            """
            INSERT OR REPLACE INTO games (id, phase, turns, alive, data, last_played)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (
                game.id,
                summary["phase"],
                summary["turns"],
                summary["alive"],
                game.to_json(),
                summary["last_played"],
            ),
        )
        conn.commit()
        conn.close()
        logger.debug(f"Saved game {game.id} to {self.database_path}")

    def load_game(self, game_id: str) -> Optional[SavedGame]:
        """Load a session snapshot by ID."""
        conn = self._get_connection()
        cursor = conn.cursor()
        cursor.execute("SELECT data FROM games WHERE id = ?", (game_id,))
        row = cursor.fetchone()
        conn.close()

        if row is None:
            return None
        return _parse(row["data"], game_id)

    def list_games(self) -> list[dict]:
        """List saved sessions, newest first."""
        conn = self._get_connection()
        cursor = conn.cursor()
        cursor.execute(
            "SELECT id, phase, turns, alive, last_played FROM games ORDER BY last_played DESC"
        )
        rows = cursor.fetchall()
        conn.close()
        return rows

    def delete_game(self, game_id: str) -> bool:
        """Delete a saved session."""
        conn = self._get_connection()
        cursor = conn.cursor()
        cursor.execute("DELETE FROM games WHERE id = ?", (game_id,))
        deleted = cursor.rowcount > 0
        conn.commit()
        conn.close()
        return deleted

    def save_current(self, game: SavedGame) -> None:
        conn = self._get_connection()
        cursor = conn.cursor()
        cursor.execute(
            "INSERT OR REPLACE INTO settings (key, value) VALUES (?, ?)",
            (CURRENT_GAME_KEY, game.to_json()),
        )
        conn.commit()
        conn.close()

    def load_current(self) -> Optional[SavedGame]:
        conn = self._get_connection()
        cursor = conn.cursor()
        cursor.execute("SELECT value FROM settings WHERE key = ?", (CURRENT_GAME_KEY,))
        row = cursor.fetchone()
        conn.close()

        if row is None:
            return None
        return _parse(row["value"], CURRENT_GAME_KEY)

    def clear_current(self) -> bool:
        conn = self._get_connection()
        cursor = conn.cursor()
        cursor.execute("DELETE FROM settings WHERE key = ?", (CURRENT_GAME_KEY,))
        cleared = cursor.rowcount > 0
        conn.commit()
        conn.close()
        return cleared
