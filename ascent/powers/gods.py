"""
Built-in powers.
"""

from __future__ import annotations
from typing import TYPE_CHECKING

from ..engine_core.state import GamePhase
from ..engine_core.action import ActionType
from .power import Power

if TYPE_CHECKING:
    from ..engine_core.state import GameState
    from ..engine_core.action import Action


class Artemis(Power):
    """Your worker may move one additional time, but not back to where it started."""

    name = "Artemis"
    description = "Move Twice."
    number_of_moves = 2

    def execute(self, state: GameState, action: Action) -> bool:
        if action.action_type != ActionType.MOVE or state.phase != GamePhase.MOVE:
            return False
        return state.grant_extra_move()


class Demeter(Power):
    """Your worker may build one additional time, but not on the same space."""

    name = "Demeter"
    description = "Build Twice."
    number_of_builds = 2

    def execute(self, state: GameState, action: Action) -> bool:
        if action.action_type != ActionType.BUILD or state.phase != GamePhase.BUILD:
            return False
        return state.grant_extra_build()


class Triton(Power):
    """Moving into a perimeter space earns one more move."""

    name = "Triton"
    description = "Move Again at Perimeter."
    number_of_moves = 2

    def execute(self, state: GameState, action: Action) -> bool:
        if action.action_type != ActionType.MOVE or state.phase != GamePhase.MOVE:
            return False
        if action.target is None or not state.board.is_perimeter(action.target):
            return False
        return state.grant_extra_move()
