"""
Persistence module - Plain-text save files.

Provides:
- codec: GameState <-> text blob
- save_file: Sectioned save files (engine, game state, log)
- SaveFormatError: Raised for any malformed save
"""

from .codec import SaveFormatError, encode_game_state, decode_game_state, player_name_problem
from .save_file import (
    SavedGame,
    save_game,
    load_game,
    save_to_bytes,
    load_from_bytes,
    ENGINE_SECTION,
    GAME_STATE_SECTION,
    LOG_SECTION,
)

__all__ = [
    "SaveFormatError",
    "encode_game_state",
    "decode_game_state",
    "player_name_problem",
    "SavedGame",
    "save_game",
    "load_game",
    "save_to_bytes",
    "load_from_bytes",
    "ENGINE_SECTION",
    "GAME_STATE_SECTION",
    "LOG_SECTION",
]
