"""
Power - Interface for per-player special abilities.

A Power is consulted after every successful move or build of its
player. Its only permitted effect is granting one more action for the
current phase through GameState.grant_extra_move / grant_extra_build.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..engine_core.state import GameState
    from ..engine_core.action import Action


class Power(ABC):
    """
    Abstract base class for powers.

    Subclasses set a stable ``name`` (used in save files) and a short
    ``description`` for display.
    """

    name: str = ""
    description: str = ""

    # Budgets a player with this power can reach in one turn
    number_of_moves: int = 1
    number_of_builds: int = 1

    @abstractmethod
    def execute(self, state: GameState, action: Action) -> bool:
        """
        React to the action that was just applied.

        Args:
            state: Current game state (phase and budgets not yet updated)
            action: The move or build that was just executed

        Returns:
            True if the power triggered
        """

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"
