"""Game state models for Revolver.

This module defines the core state models used throughout the turn engine.
All models are frozen: a transition never edits a state in place, it builds a
new one with ``model_copy(update=...)``. That lets the presentation layer hold
on to any snapshot it was handed without seeing the engine's in-progress work.

Phase machine:
    SETUP -> SPINNING -> CHOOSING_TARGET -> SHOOTING -> (SETUP | GAME_OVER)
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ActorKind(Enum):
    """Who controls an actor."""

    HUMAN = "human"
    AUTONOMOUS = "autonomous"


class GamePhase(Enum):
    """Current phase of the turn state machine."""

    SETUP = "setup"
    SPINNING = "spinning"
    CHOOSING_TARGET = "choosing_target"
    SHOOTING = "shooting"
    GAME_OVER = "game_over"


class Actor(BaseModel):
    """One participant seated at the table.

    Attributes:
        id: Stable identifier, never reassigned
        name: Display name
        kind: Human or autonomous
        health: Remaining hits (never below 0)
        position: Fixed seat, 0..N-1
        token: Display token (emoji)
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    kind: ActorKind
    health: int = Field(ge=0)
    position: int = Field(ge=0)
    token: str = ""

    @property
    def is_alive(self) -> bool:
        """Alive is derived from health."""
        return self.health > 0

    @property
    def is_human(self) -> bool:
        return self.kind == ActorKind.HUMAN

    @property
    def is_autonomous(self) -> bool:
        return self.kind == ActorKind.AUTONOMOUS


class GrudgeMemory(BaseModel):
    """Who has fired a blank at whom.

    Keyed by victim (the autonomous actor who was shot at); each value lists the
    shooters in the order the grudge was first recorded. Entries are only ever
    added, and adding an existing shooter is a no-op.
    """

    model_config = ConfigDict(frozen=True)

    grudges: dict[str, tuple[str, ...]] = Field(default_factory=dict)

    def against(self, victim_id: str) -> tuple[str, ...]:
        """Shooters the victim holds a grudge against."""
        return self.grudges.get(victim_id, ())

    def holds_grudge(self, victim_id: str, shooter_id: str) -> bool:
        return shooter_id in self.against(victim_id)

    def with_grudge(self, victim_id: str, shooter_id: str) -> GrudgeMemory:
        """Return memory with ``shooter_id`` recorded against ``victim_id``.

        Returns ``self`` unchanged when the grudge already exists.
        """
        if self.holds_grudge(victim_id, shooter_id):
            return self
        grudges = dict(self.grudges)
        grudges[victim_id] = self.against(victim_id) + (shooter_id,)
        return GrudgeMemory(grudges=grudges)

    def after_shot(self, shooter_id: str, target: Actor, was_blank: bool) -> GrudgeMemory:
        """Memory after one resolved shot.

        Only a blank fired at an autonomous target is remembered, whoever the
        shooter is. Returns ``self`` when nothing changes.
        """
        if not was_blank or not target.is_autonomous:
            return self
        return self.with_grudge(target.id, shooter_id)

    def __len__(self) -> int:
        return sum(len(shooters) for shooters in self.grudges.values())


class TurnRecord(BaseModel):
    """Immutable log entry for one resolved shot."""

    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    shooter_id: str
    target_id: str
    was_blank: bool
    killed: bool


class GameState(BaseModel):
    """Complete state of one session.

    Attributes:
        actors: Seating-ordered roster, fixed size for the session
        armed_actor_id: Actor holding the revolver this turn (None outside a turn)
        selected_target_id: Target chosen for this turn (None until chosen)
        phase: Current phase of the turn state machine
        grudges: Grudge memory of the autonomous actors
        history: Ordered log of resolved shots
        started_at: Session start time
        last_saved_at: Last time a snapshot was persisted
    """

    model_config = ConfigDict(frozen=True)

    actors: tuple[Actor, ...]
    armed_actor_id: Optional[str] = None
    selected_target_id: Optional[str] = None
    phase: GamePhase = GamePhase.SETUP
    grudges: GrudgeMemory = Field(default_factory=GrudgeMemory)
    history: tuple[TurnRecord, ...] = ()
    started_at: datetime
    last_saved_at: datetime

    @model_validator(mode="after")
    def check_unique_ids(self) -> GameState:
        """Exactly one actor per identifier."""
        ids = [actor.id for actor in self.actors]
        if len(ids) != len(set(ids)):
            raise ValueError(f"Duplicate actor ids: {ids}")
        return self

    def get_actor(self, actor_id: Optional[str]) -> Optional[Actor]:
        """Look up an actor by id, None if unknown."""
        if actor_id is None:
            return None
        for actor in self.actors:
            if actor.id == actor_id:
                return actor
        return None

    @property
    def alive_actors(self) -> list[Actor]:
        return [actor for actor in self.actors if actor.is_alive]

    @property
    def armed_actor(self) -> Optional[Actor]:
        return self.get_actor(self.armed_actor_id)

    @property
    def selected_target(self) -> Optional[Actor]:
        return self.get_actor(self.selected_target_id)

    @property
    def human(self) -> Optional[Actor]:
        for actor in self.actors:
            if actor.is_human:
                return actor
        return None

    @property
    def turn_count(self) -> int:
        return len(self.history)

    def replace_actor(self, updated: Actor) -> GameState:
        """Return a state with the actor of the same id swapped for ``updated``."""
        actors = tuple(updated if actor.id == updated.id else actor for actor in self.actors)
        return self.model_copy(update={"actors": actors})
