"""
Session Module - Explicit handles on running games.

A session represents one play-through of a game:
- Created for a game mode (or filled from a save file)
- Holds the canonical game state and the game log
- Routes every command through the reducer
- Notifies observers after each committed change
"""

from .manager import SessionManager, Session, SessionState, Observer

__all__ = [
    "SessionManager",
    "Session",
    "SessionState",
    "Observer",
]
