"""Revolver CLI Application.

A Textual-based terminal interface for playing Revolver:
- Main menu (new game, resume saved game)
- Table with one pane per actor
- Spin / target / shoot controls for the human
- Paced autonomous turns
- Turn log, outcome flash and periodic autosave

All pacing lives here. The engine answers every command immediately; the
timers below only decide when the next command is issued.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Callable, Optional

from textual import on
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal, Vertical, VerticalScroll
from textual.screen import Screen
from textual.widgets import Button, Footer, Header, OptionList, Rule, Static
from textual.widgets.option_list import Option

from revolver.engine.game_engine import GameEngine, TurnResult
from revolver.models.config import load_config_from_env
from revolver.models.state import Actor, GamePhase, GameState, TurnRecord
from revolver.parameters import (
    SHOT_DURATION,
    SPIN_DURATION,
    THINKING_MAX,
    THINKING_MIN,
)
from revolver.storage import AutosavePolicy, GameRecordRepository, get_game_repository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Pacing:
    """Display delays in seconds. Never influences outcomes."""

    spin: float = SPIN_DURATION
    shot: float = SHOT_DURATION
    thinking_min: float = THINKING_MIN
    thinking_max: float = THINKING_MAX

    @classmethod
    def instant(cls) -> Pacing:
        return cls(spin=0.0, shot=0.0, thinking_min=0.0, thinking_max=0.0)


PHASE_LABELS = {
    GamePhase.SETUP: "Waiting for spin",
    GamePhase.SPINNING: "Spinning...",
    GamePhase.CHOOSING_TARGET: "Choosing target",
    GamePhase.SHOOTING: "Shooting",
    GamePhase.GAME_OVER: "Game over",
}


def format_health(actor: Actor, starting_health: int) -> str:
    """Health bar such as '♥♥·'."""
    return "♥" * actor.health + "·" * max(starting_health - actor.health, 0)


def format_record(record: TurnRecord, state: GameState) -> str:
    """One line of the turn log."""
    shooter = state.get_actor(record.shooter_id)
    target = state.get_actor(record.target_id)
    shooter_name = shooter.name if shooter else record.shooter_id
    target_name = target.name if target else record.target_id
    if record.was_blank:
        result = "*click* blank"
    elif record.killed:
        result = "BANG! eliminated"
    else:
        result = "BANG! hit"
    return f"{shooter_name} → {target_name}: {result}"


# =============================================================================
# Theme and Styles
# =============================================================================

CSS = """
Screen {
    background: $surface;
}

#main-menu {
    align: center middle;
    width: 100%;
    height: 100%;
}

.menu-container {
    width: 50;
    height: auto;
    border: solid red;
    padding: 1 2;
}

.menu-title {
    text-align: center;
    text-style: bold;
    color: $error;
    margin-bottom: 1;
}

.menu-button {
    width: 100%;
    margin: 1 0;
}

#status-bar {
    height: 1;
    background: $primary-background;
    padding: 0 1;
}

#table {
    height: 7;
}

.actor-pane {
    width: 1fr;
    height: 100%;
    border: solid $primary;
    padding: 0 1;
    content-align: center middle;
    text-align: center;
}

.actor-pane.armed {
    border: heavy $warning;
}

.actor-pane.targeted {
    border: heavy $error;
}

.actor-pane.dead {
    color: $text-disabled;
    border: dashed $panel;
}

#bottom-row {
    height: 1fr;
}

#controls {
    width: 40;
    padding: 0 1;
}

#controls Button {
    width: 100%;
    margin-bottom: 1;
}

#target-list {
    height: 1fr;
}

#log-panel {
    width: 1fr;
    border: solid $secondary;
    padding: 0 1;
}
"""


# =============================================================================
# Screens
# =============================================================================


class MainMenuScreen(Screen):
    """Main menu screen with game options."""

    BINDINGS = [
        Binding("q", "quit", "Quit"),
    ]

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Container(id="main-menu"):
            with Vertical(classes="menu-container"):
                yield Static("REVOLVER", classes="menu-title")
                yield Static("One chamber. Five players. Long memories.", classes="menu-title")
                yield Rule()
                yield Button("New Game", id="new-game", classes="menu-button", variant="success")
                yield Button("Resume", id="resume", classes="menu-button", variant="primary")
                yield Button("Quit", id="quit", classes="menu-button", variant="error")
        yield Footer()

    @on(Button.Pressed, "#new-game")
    def start_new_game(self) -> None:
        self.app.push_screen(GameScreen(GameEngine(config=load_config_from_env())))

    @on(Button.Pressed, "#resume")
    def resume_game(self) -> None:
        repo = self.app.repo
        saved = repo.load_current() if repo else None
        if saved is None:
            self.notify("No saved game to resume", severity="warning")
            return
        engine = GameEngine.from_saved(saved)
        self.app.push_screen(GameScreen(engine))

    @on(Button.Pressed, "#quit")
    def quit_app(self) -> None:
        self.app.exit()


class GameScreen(Screen):
    """The table, the controls and the turn log."""

    BINDINGS = [
        Binding("escape", "leave", "Leave Game"),
        Binding("space", "spin", "Spin"),
        Binding("enter", "shoot", "Shoot", show=False),
    ]

    def __init__(self, game: GameEngine) -> None:
        super().__init__()
        self.game = game
        # Pacing jitter only; the engine's random stream is never touched here
        self._pace_rng = random.Random()
        self._busy = False

    @property
    def pacing(self) -> Pacing:
        return self.app.pacing

    def compose(self) -> ComposeResult:
        yield Header()
        yield Static("", id="status-bar")
        with Horizontal(id="table"):
            for actor in self.game.state.actors:
                yield Static("", id=f"pane-{actor.id}", classes="actor-pane")
        with Horizontal(id="bottom-row"):
            with Vertical(id="controls"):
                yield Button("Spin", id="spin", variant="warning")
                yield Button("Shoot", id="shoot", variant="error", disabled=True)
                yield Static("TARGETS", classes="panel-title")
                yield OptionList(id="target-list")
            with VerticalScroll(id="log-panel"):
                yield Static("TURN LOG", classes="panel-title")
                yield Static("No shots fired yet.", id="turn-log")
        yield Footer()

    def on_mount(self) -> None:
        self.update_display()
        if self.app.autosave is not None:
            self.set_interval(1.0, self._autosave_tick)
        self._resume_turn()

    # =========================================================================
    # Rendering
    # =========================================================================

    def update_display(self) -> None:
        """Render the current engine snapshot."""
        state = self.game.get_current_state()
        starting = self.game.config.starting_health

        armed = state.armed_actor
        status = f"Turn {state.turn_count + 1} | {PHASE_LABELS[state.phase]}"
        if armed is not None and state.phase != GamePhase.GAME_OVER:
            status += f" | {armed.token} {armed.name} holds the revolver"
        self.query_one("#status-bar", Static).update(status)

        for actor in state.actors:
            pane = self.query_one(f"#pane-{actor.id}", Static)
            label = "ELIMINATED" if not actor.is_alive else format_health(actor, starting)
            pane.update(f"{actor.token} {actor.name}\n{label}")
            pane.set_class(not actor.is_alive, "dead")
            pane.set_class(actor.id == state.armed_actor_id, "armed")
            pane.set_class(actor.id == state.selected_target_id, "targeted")

        human_turn = (
            state.phase == GamePhase.CHOOSING_TARGET
            and armed is not None
            and armed.is_human
        )
        self.query_one("#spin", Button).disabled = state.phase != GamePhase.SETUP or self._busy
        self.query_one("#shoot", Button).disabled = not (human_turn and state.selected_target_id)

        targets = self.query_one("#target-list", OptionList)
        targets.clear_options()
        if human_turn:
            for actor in state.alive_actors:
                if actor.id != armed.id:
                    targets.add_option(Option(f"{actor.token} {actor.name}", id=actor.id))

        log = [format_record(record, state) for record in reversed(state.history)]
        self.query_one("#turn-log", Static).update("\n".join(log) or "No shots fired yet.")

    def _report(self, result: TurnResult) -> bool:
        if not result.success:
            self.notify(result.error_message or "Command rejected", severity="error")
        return result.success

    # =========================================================================
    # Turn flow
    # =========================================================================

    def _schedule(self, delay: float, callback: Callable[[], None]) -> None:
        # Textual timers need a positive delay
        if delay > 0:
            self.set_timer(delay, callback)
        else:
            self.call_later(callback)

    def _schedule_autonomous_turn(self) -> None:
        self._busy = True
        delay = self._pace_rng.uniform(self.pacing.thinking_min, self.pacing.thinking_max)
        self._schedule(delay, self._autonomous_turn)

    def _resume_turn(self) -> None:
        """Pick up a session saved mid-turn where it left off."""
        phase = self.game.state.phase
        if phase == GamePhase.SPINNING:
            logger.info(f"Resuming session {self.game.session_id} mid-spin")
            self._busy = True
            self.update_display()
            self._schedule(self.pacing.spin, self._finish_spin)
        elif phase == GamePhase.CHOOSING_TARGET and self.game.armed_is_autonomous():
            logger.info(f"Resuming session {self.game.session_id} on {self.game.state.armed_actor_id}'s turn")
            self._schedule_autonomous_turn()

    @on(Button.Pressed, "#spin")
    def action_spin(self) -> None:
        if self._busy:
            return
        if not self._report(self.game.start_spin()):
            return
        self._busy = True
        self.update_display()
        self._schedule(self.pacing.spin, self._finish_spin)

    def _finish_spin(self) -> None:
        result = self.game.finish_spin()
        self._busy = False
        self._report(result)
        self.update_display()
        if result.success and self.game.armed_is_autonomous():
            self._schedule_autonomous_turn()
        elif result.success:
            self.notify("You hold the revolver. Pick a target.")

    def _autonomous_turn(self) -> None:
        if not self._report(self.game.choose_target_for_armed()):
            self._busy = False
            return
        self.update_display()
        self._fire()

    @on(OptionList.OptionSelected, "#target-list")
    def target_selected(self, event: OptionList.OptionSelected) -> None:
        if event.option.id is None:
            return
        self._report(self.game.select_target(event.option.id))
        self.update_display()

    @on(Button.Pressed, "#shoot")
    def action_shoot(self) -> None:
        if self._busy or self.game.armed_is_autonomous():
            return
        self._fire()

    def _fire(self) -> None:
        result = self.game.shoot()
        if not self._report(result):
            self._busy = False
            return
        self._busy = True
        self._flash(result)
        self.update_display()
        self._schedule(self.pacing.shot, self._after_shot)

    def _flash(self, result: TurnResult) -> None:
        record = result.record
        if record is None:
            return
        message = format_record(record, result.state)
        if record.was_blank:
            self.notify(message, title="Blank")
        else:
            self.notify(message, title="Hit", severity="warning")

    def _after_shot(self) -> None:
        self._busy = False
        self.update_display()
        if self.game.is_game_over():
            self._game_over()

    def _game_over(self) -> None:
        winner = self.game.get_winner()
        if winner is None:
            message = "Nobody walks away."
        elif winner.is_human:
            message = "You are the last one standing!"
        else:
            message = f"{winner.name} is the last one standing."
        self.notify(message, title="Game Over", severity="information", timeout=10)
        if self.app.repo is not None:
            self.game.mark_saved()
            self.app.repo.save_game(self.game.snapshot())
            self.app.repo.clear_current()

    # =========================================================================
    # Persistence
    # =========================================================================

    def _autosave_tick(self) -> None:
        try:
            self.app.autosave.maybe_save(self.game)
        except OSError as e:
            logger.warning(f"Autosave failed: {e}")
            self.notify(f"Autosave failed: {e}", severity="warning")

    def action_leave(self) -> None:
        if self.app.autosave is not None and not self.game.is_game_over():
            self.app.autosave.save_now(self.game)
        self.app.pop_screen()


class RevolverApp(App):
    """Main Revolver CLI application."""

    TITLE = "Revolver"
    SUB_TITLE = "Last One Standing"
    CSS = CSS

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit", show=True, priority=True),
    ]

    def __init__(
        self,
        game: Optional[GameEngine] = None,
        repo: Optional[GameRecordRepository] = None,
        pacing: Optional[Pacing] = None,
        autosave: Optional[AutosavePolicy] = None,
    ) -> None:
        """Initialize the app.

        Args:
            game: Start directly at the table with this session
            repo: Saved-session repository (autosave uses it when given)
            pacing: Display delays (default: full-length animations)
            autosave: Autosave policy (default: built from ``repo``)
        """
        super().__init__()
        self._initial_game = game
        self.repo = repo
        self.pacing = pacing or Pacing()
        if autosave is None and repo is not None:
            autosave = AutosavePolicy(repo)
        self.autosave = autosave

    def on_mount(self) -> None:
        """Show the table directly when given a game, else the main menu."""
        self.push_screen(MainMenuScreen())
        if self._initial_game is not None:
            self.push_screen(GameScreen(self._initial_game))


def main() -> None:
    """Entry point for the CLI application.

    Set REVOLVER_LOG_LEVEL (e.g. DEBUG) to log engine activity to revolver.log.
    """
    import os

    level = os.environ.get("REVOLVER_LOG_LEVEL")
    if level:
        logging.basicConfig(filename="revolver.log", level=level.upper())

    app = RevolverApp(repo=get_game_repository())
    app.run()


if __name__ == "__main__":
    main()
