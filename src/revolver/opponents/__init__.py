"""Opponent implementations for Revolver.

All opponents implement the Opponent base class interface:
given the current state, an armed autonomous actor and a random source,
return the id of the actor to shoot.
"""

from revolver.opponents.base import Opponent
from revolver.opponents.grudge import GrudgeOpponent, update_grudges

__all__ = [
    "Opponent",
    "GrudgeOpponent",
    "update_grudges",
]
