"""Shared pytest fixtures and markers for all tests."""

from datetime import datetime, timezone

import pytest


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


FIXED_TIME = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def fixed_clock():
    """Clock that always returns the same instant."""
    return lambda: FIXED_TIME


@pytest.fixture
def default_config():
    """1 human + 4 autonomous, 3 health, 50% blanks."""
    from revolver.models.config import GameConfig
    return GameConfig()


@pytest.fixture
def fresh_state(default_config):
    """A freshly seated table in SETUP."""
    from revolver.engine.turn import initialize_game
    return initialize_game(default_config, now=FIXED_TIME)


@pytest.fixture
def make_state(fresh_state):
    """Build a state from the fresh table with per-actor health overrides."""

    def _make(health=None, **updates):
        state = fresh_state
        for actor_id, hp in (health or {}).items():
            state = state.replace_actor(state.get_actor(actor_id).model_copy(update={"health": hp}))
        if updates:
            state = state.model_copy(update=updates)
        return state

    return _make
