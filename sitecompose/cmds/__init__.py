"""Command modules for the sitecompose CLI.

This module exports all command groups (Typer apps) that can be registered
with the main application.
"""

from .themes import app as themes_app
from .config import app as config_app

__all__ = [
    "themes_app",
    "config_app",
]
