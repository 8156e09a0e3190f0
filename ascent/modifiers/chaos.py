"""
Chaos - Randomised board events for the chaos game mode.

ChaosModifier runs several independent effects. Every effect has its
own countdown drawn from a closed interval; when the countdown runs out
the effect fires and a new countdown is drawn.

The number of cells an effect touches grows with the turn number:
    N = min(ceil((turn - 1) / 4) + 1, MAXIMUM_AFFECTED)
"""

from __future__ import annotations
from abc import ABC, abstractmethod
import logging
import math
import random
from typing import TYPE_CHECKING

from ..engine_core.state import Position
from .modifier import Modifier

if TYPE_CHECKING:
    from ..engine_core.board import Board

logger = logging.getLogger(__name__)


class ChaosEffect(ABC):
    """One countdown-driven board event."""

    minimum_interval: int = 1
    maximum_interval: int = 1

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng or random.Random()
        self.countdown = 0
        self.reset_countdown()

    def reset_countdown(self):
        self.countdown = self.rng.randint(self.minimum_interval, self.maximum_interval)

    def tick(self, board: Board, affected_towers: int) -> list[str]:
        """Count down once; fire and re-arm when the countdown reaches zero."""
        self.countdown -= 1
        if self.countdown > 0:
            return []
        changes = self.apply(board, affected_towers)
        self.reset_countdown()
        return changes

    @abstractmethod
    def apply(self, board: Board, affected_towers: int) -> list[str]:
        """Perform the effect on up to `affected_towers` cells."""


class BuildChaos(ChaosEffect):
    """Random floors appear on empty cells."""

    minimum_interval = 1
    maximum_interval = 3

    def apply(self, board: Board, affected_towers: int) -> list[str]:
        built = []
        for _ in range(affected_towers):
            candidates = [
                p for p in board.positions()
                if not board.is_occupied(p) and not board.tower_at(p).is_complete
            ]
            if not candidates:
                break
            position = self.rng.choice(candidates)
            board.tower_at(position).build_floor()
            built.append(position)
        if not built:
            return []
        return [f"BOARD CHAOS - Towers have been built at {_join(built)}!"]


class DestroyChaos(ChaosEffect):
    """Random towers lose their top floor."""

    minimum_interval = 2
    maximum_interval = 4

    def apply(self, board: Board, affected_towers: int) -> list[str]:
        destroyed = []
        for _ in range(affected_towers):
            candidates = [p for p in board.positions() if board.tower_at(p).is_destroyable]
            if not candidates:
                break
            position = self.rng.choice(candidates)
            board.tower_at(position).destroy_floor()
            destroyed.append(position)
        if not destroyed:
            return []
        return [f"BOARD CHAOS - Towers have been destroyed at {_join(destroyed)}!"]


class FogChaos(ChaosEffect):
    """
    Random empty cells are hidden for a few turns.

    Fogged towers keep their real height; only how they are shown changes.
    Fogging an already fogged cell extends its remaining duration.
    """

    minimum_interval = 1
    maximum_interval = 1
    FOG_DURATION = 3

    def __init__(self, rng: random.Random | None = None):
        super().__init__(rng)
        self.fogged_positions: dict[Position, int] = {}

    def tick(self, board: Board, affected_towers: int) -> list[str]:
        for position in list(self.fogged_positions):
            remaining = self.fogged_positions[position] - 1
            if remaining <= 0:
                board.tower_at(position).fogged = False
                del self.fogged_positions[position]
            else:
                self.fogged_positions[position] = remaining
        return super().tick(board, affected_towers)

    def apply(self, board: Board, affected_towers: int) -> list[str]:
        covered = []
        for _ in range(affected_towers):
            candidates = [p for p in board.positions() if not board.is_occupied(p)]
            if not candidates:
                break
            position = self.rng.choice(candidates)
            if position in self.fogged_positions:
                self.fogged_positions[position] += self.FOG_DURATION
            else:
                board.tower_at(position).fogged = True
                self.fogged_positions[position] = self.FOG_DURATION
            covered.append(position)
        if not covered:
            return []
        return ["FOG CHAOS - Random positions have been covered by fog!"]


class ChaosModifier(Modifier):
    """Composite modifier running build, destroy and fog chaos."""

    name = "chaos"
    MAXIMUM_AFFECTED = 3

    def __init__(self, rng: random.Random | None = None, effects: list[ChaosEffect] | None = None):
        self.rng = rng or random.Random()
        if effects is None:
            effects = [
                BuildChaos(self.rng),
                DestroyChaos(self.rng),
                FogChaos(self.rng),
            ]
        self.effects = effects

    @classmethod
    def affected_towers(cls, turn_number: int) -> int:
        return min(math.ceil((turn_number - 1) / 4) + 1, cls.MAXIMUM_AFFECTED)

    def execute(self, board: Board, turn_number: int) -> list[str]:
        affected = self.affected_towers(turn_number)
        changes = []
        for effect in self.effects:
            changes.extend(effect.tick(board, affected))
        if changes:
            logger.debug("Turn %d chaos: %s", turn_number, changes)
        return changes


def _join(positions: list[Position]) -> str:
    return ", ".join(str(p) for p in positions)
