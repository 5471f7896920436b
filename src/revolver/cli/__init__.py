"""Revolver CLI module.

Provides a Textual-based terminal interface for playing Revolver.

Usage:
    revolver

Or directly:
    python -m revolver.cli.app
"""

from revolver.cli.app import RevolverApp, main

__all__ = ["RevolverApp", "main"]
