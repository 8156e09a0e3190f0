"""
Games module - Game modes and new-game setup.
"""

from .modes import GameMode, ModeConfig, UnknownModeError
from .setup import GameSetup, setup_game

__all__ = [
    "GameMode",
    "ModeConfig",
    "UnknownModeError",
    "GameSetup",
    "setup_game",
]
