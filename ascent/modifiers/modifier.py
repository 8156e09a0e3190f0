"""
Modifier - Board mutations that happen between turns.

A game mode binds exactly one modifier. The turn machine calls it once
each time a turn ends, independent of what the players did.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..engine_core.board import Board


class Modifier(ABC):
    """Abstract base class for board modifiers."""

    name: str = ""

    @abstractmethod
    def execute(self, board: Board, turn_number: int) -> list[str]:
        """
        Mutate the board after a turn ends.

        Args:
            board: The live board
            turn_number: Turn counter after it was incremented

        Returns:
            Human-readable descriptions of what changed (may be empty)
        """

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class StandardModifier(Modifier):
    """The base game: the board only changes through player actions."""

    name = "standard"

    def execute(self, board: Board, turn_number: int) -> list[str]:
        return []
