"""Session configuration for Revolver.

Defaults come from ``revolver.parameters``; a handful can be overridden from
the environment:

    REVOLVER_ACTOR_COUNT: Number of seats (default: 5)
    REVOLVER_STARTING_HEALTH: Starting health per actor (default: 3)
    REVOLVER_BLANK_PROBABILITY: Chance a shot is a blank (default: 0.5)
"""

from __future__ import annotations

import os

from pydantic import BaseModel, ConfigDict, Field

from revolver.parameters import (
    AUTONOMOUS_NAMES,
    DEFAULT_ACTOR_COUNT,
    DEFAULT_AUTONOMOUS_SHOOT_CHANCE,
    DEFAULT_BLANK_PROBABILITY,
    DEFAULT_HUMAN_SHOOT_CHANCE,
    DEFAULT_STARTING_HEALTH,
    MAX_ACTOR_COUNT,
    MIN_ACTOR_COUNT,
)


class GameConfig(BaseModel):
    """Parameters of one session.

    Attributes:
        actor_count: Seats at the table, the human included
        starting_health: Health every actor starts with
        blank_probability: Chance a pulled trigger fires a blank
        human_shoot_chance: Advisory bias toward arming the human (unused by the draw)
        autonomous_shoot_chance: Advisory bias toward arming an autonomous actor (unused by the draw)
        autonomous_names: Name pool for autonomous actors, in seat order
    """

    model_config = ConfigDict(frozen=True)

    actor_count: int = Field(default=DEFAULT_ACTOR_COUNT, ge=MIN_ACTOR_COUNT, le=MAX_ACTOR_COUNT)
    starting_health: int = Field(default=DEFAULT_STARTING_HEALTH, ge=1)
    blank_probability: float = Field(default=DEFAULT_BLANK_PROBABILITY, ge=0.0, le=1.0)
    human_shoot_chance: float = Field(default=DEFAULT_HUMAN_SHOOT_CHANCE, ge=0.0, le=1.0)
    autonomous_shoot_chance: float = Field(default=DEFAULT_AUTONOMOUS_SHOOT_CHANCE, ge=0.0, le=1.0)
    autonomous_names: tuple[str, ...] = Field(default_factory=lambda: tuple(AUTONOMOUS_NAMES))


GAME_ENV_VARS = {
    "REVOLVER_ACTOR_COUNT": "actor_count",
    "REVOLVER_STARTING_HEALTH": "starting_health",
    "REVOLVER_BLANK_PROBABILITY": "blank_probability",
}


def env_overrides(variables: dict[str, str]) -> dict[str, str]:
    """Map set environment variables onto model field names.

    Values stay strings; pydantic coerces and range-checks them on validation.
    """
    return {field: os.environ[var] for var, field in variables.items() if var in os.environ}


def load_config_from_env() -> GameConfig:
    """Build a GameConfig, applying any REVOLVER_* overrides from the environment.

    Raises:
        pydantic.ValidationError: If an override is not a number or is out of range
    """
    return GameConfig.model_validate(env_overrides(GAME_ENV_VARS))
