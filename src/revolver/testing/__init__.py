"""Headless session runner for Revolver.

Plays complete games through the real engine for determinism checks and
batch statistics.
"""

from revolver.testing.game_runner import (
    BatchResults,
    GameRunner,
    SessionResult,
    random_human_strategy,
    run_batch,
    stepping_clock,
)

__all__ = [
    "BatchResults",
    "GameRunner",
    "SessionResult",
    "random_human_strategy",
    "run_batch",
    "stepping_clock",
]
