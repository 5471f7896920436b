"""Typed errors raised by the turn engine.

All of these are recoverable: the state a rejected command was applied to is
left untouched and the session can continue.
"""


class EngineError(Exception):
    """Base class for rejected engine commands."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidPhase(EngineError):
    """Command issued outside the phase that accepts it."""


class InvalidActor(EngineError):
    """Reference to an unknown or dead actor, or a self-target."""


class InvalidState(EngineError):
    """Structural invariant violated, e.g. a draw with nobody alive."""
