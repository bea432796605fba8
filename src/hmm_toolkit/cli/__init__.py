"""
Command-line interface module.

Typer application exposing the distribution, evaluate, decode and learn modes.
"""

from .main import app, cli_main

__all__ = [
    "app",
    "cli_main"
]
