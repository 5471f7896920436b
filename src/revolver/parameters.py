"""Game parameters for Revolver.

This module is the SINGLE SOURCE OF TRUTH for all tunable game constants.

Parameter Categories:
- Session: Roster size, health, chamber odds
- Opponent Policy: Retaliation and human-targeting probabilities
- Persistence: Autosave cadence
- Presentation: Names, tokens and pacing (display only, never consulted by the engine)

Usage:
    from revolver.parameters import DEFAULT_STARTING_HEALTH, GRUDGE_RETALIATION_CHANCE
"""

# =============================================================================
# SESSION PARAMETERS
# =============================================================================

DEFAULT_ACTOR_COUNT = 5
"""Actors seated around the table: 1 human + 4 autonomous."""

MIN_ACTOR_COUNT = 2
MAX_ACTOR_COUNT = 8

DEFAULT_STARTING_HEALTH = 3
"""Hits an actor can absorb. Health 0 means eliminated."""

DEFAULT_BLANK_PROBABILITY = 0.5
"""Chance that a pulled trigger fires a blank (no damage).

At 0.5 a 3-health actor survives on average six shots aimed at them.
"""

DEFAULT_HUMAN_SHOOT_CHANCE = 0.4
"""Advisory bias for the human becoming the armed actor.

Exposed and persisted but NOT used by the armed-actor draw, which is
uniform among living actors.
"""

DEFAULT_AUTONOMOUS_SHOOT_CHANCE = 0.6
"""Advisory bias for an autonomous actor becoming the armed actor. Unused by the draw."""


# =============================================================================
# OPPONENT POLICY PARAMETERS
# =============================================================================

GRUDGE_RETALIATION_CHANCE = 0.8
"""Chance an armed autonomous actor fires back at someone who shot a blank at them.

Only rolled when at least one such grudge target is still alive.
"""

TARGET_HUMAN_CHANCE = 0.6
"""Chance an autonomous actor aims at the (living) human when no grudge fires."""


# =============================================================================
# PERSISTENCE PARAMETERS
# =============================================================================

AUTOSAVE_INTERVAL_SECONDS = 10.0
"""Seconds between periodic snapshots while a session is active."""


# =============================================================================
# ROSTER
# =============================================================================

HUMAN_ID = "player-0"
HUMAN_NAME = "You"
AUTONOMOUS_ID_PREFIX = "ai-"

AUTONOMOUS_NAMES = ["Viktor", "Natasha", "Boris", "Svetlana"]

ACTOR_TOKENS = ["🎯", "🤖", "🎲", "🎰", "🎪"]


# =============================================================================
# PRESENTATION PACING (seconds)
# =============================================================================

SPIN_DURATION = 3.0
SHOT_DURATION = 1.5
THINKING_MIN = 1.0
THINKING_MAX = 2.0
