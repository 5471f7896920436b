"""Storage module for Revolver.

This module provides the repository interface and implementations for
persisting session snapshots.

Usage:
    from revolver.storage import get_game_repository

    # Get repository using configured backend (from environment)
    games = get_game_repository()

    # Or specify backend explicitly
    from revolver.storage import StorageBackend
    games = get_game_repository(StorageBackend.SQLITE)

Configuration via environment variables:
    REVOLVER_STORAGE_BACKEND: "file" or "sqlite" (default: "file")
    REVOLVER_GAMES_PATH: Path to games directory (default: "games")
    REVOLVER_DATABASE_URI: SQLite database path (default: "instance/revolver.db")
"""

from .autosave import AutosavePolicy
from .config import (
    StorageBackend,
    StorageConfig,
    get_game_repository,
    get_storage_backend,
    load_storage_config_from_env,
)
from .file_repo import FileGameRecordRepository
from .repository import GameRecordRepository
from .sqlite_repo import SQLiteGameRecordRepository

__all__ = [
    # Abstract interface
    "GameRecordRepository",
    # Implementations
    "FileGameRecordRepository",
    "SQLiteGameRecordRepository",
    # Autosave
    "AutosavePolicy",
    # Configuration
    "StorageBackend",
    "StorageConfig",
    "load_storage_config_from_env",
    "get_storage_backend",
    # Factory functions
    "get_game_repository",
]
