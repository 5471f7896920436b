"""Session orchestrator for Revolver.

GameEngine owns the single mutable reference to the current GameState for one
session and drives it through the pure transitions in ``revolver.engine.turn``.
Rejected commands never raise out of the public API: they come back as a
TurnResult with ``success=False`` and the state left exactly as it was.

Usage:
    from revolver.engine.game_engine import GameEngine

    game = GameEngine(random_seed=7)
    game.spin()
    if game.armed_is_autonomous():
        game.choose_target_for_armed()
    else:
        game.select_target("ai-2")
    result = game.shoot()
    if game.is_game_over():
        print(game.get_winner())
"""

from __future__ import annotations

import logging
import random
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from revolver.engine import turn
from revolver.engine.errors import EngineError, InvalidActor, InvalidPhase
from revolver.engine.randomness import RandomSource
from revolver.engine.turn import Outcome
from revolver.models.config import GameConfig
from revolver.models.saved import SavedGame
from revolver.models.state import Actor, GamePhase, GameState, TurnRecord
from revolver.opponents.base import Opponent
from revolver.opponents.grudge import GrudgeOpponent

logger = logging.getLogger(__name__)


@dataclass
class TurnResult:
    """Result of issuing a command to the engine.

    Attributes:
        success: Whether the command was accepted
        state: State after the command (unchanged on rejection)
        target_id: Target chosen, for target-selection commands
        record: TurnRecord appended, for shoot commands
        outcome: Win detection result, for shoot commands
        error: The rejection, when success=False
    """

    success: bool
    state: GameState
    target_id: Optional[str] = None
    record: Optional[TurnRecord] = None
    outcome: Optional[Outcome] = None
    error: Optional[EngineError] = None

    @property
    def error_message(self) -> Optional[str]:
        return self.error.message if self.error else None


class GameEngine:
    """Drives one session of Revolver.

    Attributes:
        session_id: Identifier used when the session is persisted
        config: Session configuration
        state: Current game state (immutable snapshot, replaced on every transition)
        opponent: Policy used for autonomous actors
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rng: Optional[RandomSource] = None,
        random_seed: Optional[int] = None,
        opponent: Optional[Opponent] = None,
        clock: Optional[Callable[[], datetime]] = None,
        session_id: Optional[str] = None,
        state: Optional[GameState] = None,
    ) -> None:
        """Initialize a session.

        Args:
            config: Session parameters (defaults to GameConfig())
            rng: Random source; takes precedence over random_seed
            random_seed: Seed for a fresh random.Random when rng is not given
            opponent: Target policy for autonomous actors (default GrudgeOpponent)
            clock: Wall-clock provider for timestamps (default: UTC now)
            session_id: Persistence id (default: new UUID)
            state: Existing state to resume instead of a fresh table
        """
        self.config = config or GameConfig()
        self._rng: RandomSource = rng if rng is not None else random.Random(random_seed)
        self.opponent = opponent or GrudgeOpponent()
        self._clock = clock or turn.utc_now
        self.session_id = session_id or str(uuid.uuid4())
        self.state = state or turn.initialize_game(self.config, now=self._clock())
        logger.debug(
            f"Session {self.session_id}: {len(self.state.actors)} actors, "
            f"phase={self.state.phase.value}"
        )

    @classmethod
    def from_saved(
        cls,
        saved: SavedGame,
        rng: Optional[RandomSource] = None,
        random_seed: Optional[int] = None,
        opponent: Optional[Opponent] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> GameEngine:
        """Resume a persisted session."""
        return cls(
            config=saved.config,
            rng=rng,
            random_seed=random_seed,
            opponent=opponent,
            clock=clock,
            session_id=saved.id,
            state=saved.state,
        )

    # =========================================================================
    # Commands
    # =========================================================================

    def _apply(self, command: str, transition: Callable[[GameState], GameState]) -> TurnResult:
        try:
            new_state = transition(self.state)
        except EngineError as e:
            logger.warning(f"Rejected '{command}' in phase {self.state.phase.value}: {e.message}")
            return TurnResult(success=False, state=self.state, error=e)
        self.state = new_state
        logger.debug(f"Accepted '{command}', phase={new_state.phase.value}")
        return TurnResult(success=True, state=new_state)

    def start_spin(self) -> TurnResult:
        """SETUP -> SPINNING. The presentation layer may animate before finish_spin."""
        return self._apply("start_spin", turn.start_spin)

    def finish_spin(self) -> TurnResult:
        """SPINNING -> CHOOSING_TARGET, drawing the armed actor."""
        return self._apply("finish_spin", lambda s: turn.finish_spin(s, self._rng))

    def spin(self) -> TurnResult:
        """Full spin in one step: SETUP -> CHOOSING_TARGET.

        Either both halves apply or neither does.
        """
        before = self.state
        result = self.start_spin()
        if not result.success:
            return result
        result = self.finish_spin()
        if not result.success:
            self.state = before
            result.state = before
        return result

    def select_target(self, target_id: str) -> TurnResult:
        """Choose whom the armed actor shoots."""
        result = self._apply("select_target", lambda s: turn.select_target(s, target_id))
        if result.success:
            result.target_id = target_id
        return result

    def choose_target_for_armed(self) -> TurnResult:
        """Ask the opponent policy to pick a target for an armed autonomous actor."""
        try:
            if self.state.phase != GamePhase.CHOOSING_TARGET:
                raise InvalidPhase(
                    f"'choose_target' requires phase {GamePhase.CHOOSING_TARGET.value}, "
                    f"current phase is {self.state.phase.value}"
                )
            armed = self.state.armed_actor
            if armed is None or not armed.is_autonomous:
                raise InvalidActor("Armed actor is not autonomous")
            target_id = self.opponent.choose_target(self.state, armed.id, self._rng)
        except EngineError as e:
            logger.warning(f"Rejected 'choose_target': {e.message}")
            return TurnResult(success=False, state=self.state, error=e)
        return self.select_target(target_id)

    def shoot(self) -> TurnResult:
        """Fire at the selected target and resolve the turn atomically.

        On success the state has passed through SHOOTING and ends in SETUP or
        GAME_OVER, with one TurnRecord appended and grudges updated.
        """
        try:
            shooting = turn.begin_shot(self.state)
            resolved, record, outcome = turn.resolve_turn(
                shooting, self._rng, self.config, now=self._clock()
            )
        except EngineError as e:
            logger.warning(f"Rejected 'shoot' in phase {self.state.phase.value}: {e.message}")
            return TurnResult(success=False, state=self.state, error=e)

        self.state = resolved
        return TurnResult(success=True, state=resolved, record=record, outcome=outcome)

    # =========================================================================
    # Queries
    # =========================================================================

    def get_current_state(self) -> GameState:
        """Current state; frozen, so safe to hand to a renderer."""
        return self.state

    def is_game_over(self) -> bool:
        return self.state.phase == GamePhase.GAME_OVER

    def get_outcome(self) -> Outcome:
        return turn.evaluate_outcome(self.state.actors)

    def get_winner(self) -> Optional[Actor]:
        """Sole survivor once the game is over, else None."""
        if not self.is_game_over():
            return None
        return self.state.get_actor(self.get_outcome().winner_id)

    def armed_is_autonomous(self) -> bool:
        armed = self.state.armed_actor
        return armed is not None and armed.is_autonomous

    def is_active(self) -> bool:
        """A turn is in progress (worth autosaving)."""
        return self.state.phase not in (GamePhase.SETUP, GamePhase.GAME_OVER)

    # =========================================================================
    # Persistence hooks
    # =========================================================================

    def snapshot(self) -> SavedGame:
        """Serializable snapshot of the session."""
        return SavedGame(
            id=self.session_id,
            state=self.state,
            config=self.config,
            last_played=self._clock(),
        )

    def mark_saved(self, when: Optional[datetime] = None) -> None:
        """Stamp the state with the time of the last successful save."""
        self.state = self.state.model_copy(update={"last_saved_at": when or self._clock()})
