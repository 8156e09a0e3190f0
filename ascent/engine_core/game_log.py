"""
Game Log - Human-readable record of what happened in one game.

Each session owns its own log. Lines are also forwarded to the
``ascent.game`` logger so they show up in normal application logs.
"""

from __future__ import annotations
import logging

logger = logging.getLogger("ascent.game")


class GameLog:
    """Ordered list of log lines, saved alongside the game."""

    def __init__(self, entries: list[str] | None = None):
        self.entries: list[str] = list(entries or [])

    def log(self, message: str):
        self.entries.append(message)
        logger.info(message)

    def extend(self, messages: list[str]):
        for message in messages:
            self.log(message)

    def clear(self):
        self.entries.clear()

    def tail(self, count: int = 10) -> list[str]:
        return self.entries[-count:] if count > 0 else []

    def save(self) -> str:
        return "\n".join(self.entries)

    @classmethod
    def load(cls, text: str) -> GameLog:
        return cls([line for line in text.splitlines() if line.strip()])

    def __len__(self) -> int:
        return len(self.entries)
