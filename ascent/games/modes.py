"""
Game modes - Fixed configurations a new game can be created from.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum


class UnknownModeError(ValueError):
    """Raised when a mode name matches no GameMode."""


@dataclass(frozen=True)
class ModeConfig:
    """Board size, seats and the modifier a mode plays with."""
    board_width: int
    board_height: int
    num_players: int
    num_workers: int
    starting_player_index: int
    modifier_name: str
    description: str = ""


class GameMode(Enum):
    """Available game modes."""
    STANDARD = ModeConfig(
        board_width=5,
        board_height=5,
        num_players=2,
        num_workers=2,
        starting_player_index=0,
        modifier_name="standard",
        description="The base game.",
    )
    CHAOS = ModeConfig(
        board_width=5,
        board_height=5,
        num_players=2,
        num_workers=2,
        starting_player_index=0,
        modifier_name="chaos",
        description="Towers rise, crumble and vanish in fog between turns.",
    )

    @property
    def config(self) -> ModeConfig:
        return self.value

    @classmethod
    def from_name(cls, name: str) -> GameMode:
        """Look a mode up by case-insensitive name."""
        try:
            return cls[name.strip().upper()]
        except KeyError:
            valid = ", ".join(m.name.lower() for m in cls)
            raise UnknownModeError(f"Unknown game mode '{name}'. Valid modes: {valid}") from None

    @classmethod
    def for_modifier(cls, modifier_name: str) -> GameMode | None:
        """The mode that plays with the named modifier, if any."""
        for mode in cls:
            if mode.config.modifier_name == modifier_name:
                return mode
        return None
