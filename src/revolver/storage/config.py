"""Where saved sessions live.

Storage settings are read from the environment the same way session settings
are (see ``revolver.models.config``): set variables override the model
defaults and pydantic validates the result.

    REVOLVER_STORAGE_BACKEND: "file" or "sqlite" (default: "file")
    REVOLVER_GAMES_PATH: Directory for the file backend (default: "games")
    REVOLVER_DATABASE_URI: Database file for the sqlite backend (default: "instance/revolver.db")
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from revolver.models.config import env_overrides

from .file_repo import FileGameRecordRepository
from .repository import GameRecordRepository
from .sqlite_repo import SQLiteGameRecordRepository

logger = logging.getLogger(__name__)


class StorageBackend(Enum):
    FILE = "file"
    SQLITE = "sqlite"


STORAGE_ENV_VARS = {
    "REVOLVER_STORAGE_BACKEND": "backend",
    "REVOLVER_GAMES_PATH": "games_path",
    "REVOLVER_DATABASE_URI": "database_uri",
}


class StorageConfig(BaseModel):
    """Backend choice plus the location each backend writes to."""

    model_config = ConfigDict(frozen=True)

    backend: StorageBackend = StorageBackend.FILE
    games_path: str = "games"
    database_uri: str = "instance/revolver.db"

    @field_validator("backend", mode="before")
    @classmethod
    def normalize_backend(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value


def load_storage_config_from_env() -> StorageConfig:
    """Build a StorageConfig from any REVOLVER_* storage variables.

    Raises:
        pydantic.ValidationError: If REVOLVER_STORAGE_BACKEND names no known backend
    """
    return StorageConfig.model_validate(env_overrides(STORAGE_ENV_VARS))


def get_storage_backend() -> StorageBackend:
    return load_storage_config_from_env().backend


def get_game_repository(
    backend: Optional[StorageBackend] = None,
    config: Optional[StorageConfig] = None,
) -> GameRecordRepository:
    """Open the saved-session repository.

    Args:
        backend: Overrides the configured backend
        config: Storage settings (default: read from the environment)
    """
    config = config or load_storage_config_from_env()
    backend = backend or config.backend
    logger.debug(f"Opening {backend.value} game repository")
    if backend == StorageBackend.SQLITE:
        return SQLiteGameRecordRepository(config.database_uri)
    return FileGameRecordRepository(config.games_path)
