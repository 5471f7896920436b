"""Autosave policy.

Snapshots a session periodically while a turn is in progress (any phase other
than SETUP and GAME_OVER), plus on demand. The caller decides when to poll;
the Textual app does so from a ``set_interval`` timer.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Callable, Optional

from revolver.parameters import AUTOSAVE_INTERVAL_SECONDS

from .repository import GameRecordRepository

if TYPE_CHECKING:
    from revolver.engine.game_engine import GameEngine

logger = logging.getLogger(__name__)


class AutosavePolicy:
    """Decides when to persist a running session and does the save."""

    def __init__(
        self,
        repo: GameRecordRepository,
        interval: float = AUTOSAVE_INTERVAL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.repo = repo
        self.interval = interval
        self._clock = clock
        self._last_save: Optional[float] = None

    def due(self, game: GameEngine) -> bool:
        """True when the session is active and the interval has elapsed."""
        if not game.is_active():
            return False
        if self._last_save is None:
            return True
        return self._clock() - self._last_save >= self.interval

    def maybe_save(self, game: GameEngine) -> bool:
        """Save if due. Returns whether a save happened."""
        if not self.due(game):
            return False
        self.save_now(game)
        return True

    def save_now(self, game: GameEngine) -> None:
        """Save unconditionally, both as a record and as the resume slot."""
        game.mark_saved()
        saved = game.snapshot()
        self.repo.save_game(saved)
        self.repo.save_current(saved)
        self._last_save = self._clock()
        logger.info(
            f"Saved session {saved.id} (phase={saved.state.phase.value}, "
            f"turns={saved.state.turn_count})"
        )
