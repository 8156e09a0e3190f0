"""
Legality - Adjacency, climb and build rules over a board.

Pure queries: a MovementValidator only reads the board it was given.
"""

from __future__ import annotations
from dataclasses import dataclass

from .board import Board
from .state import Position, Tower


@dataclass
class MovementValidator:
    """Answers where a worker standing on a cell may move or build."""
    board: Board

    def tower_at(self, position: Position) -> Tower:
        return self.board.tower_at(position)

    def adjacent_positions(self, position: Position) -> list[Position]:
        """In-bounds Moore neighbours that no worker stands on."""
        adjacent = []
        for dx in (-1, 0, 1):
            for dy in (-1, 0, 1):
                if dx == 0 and dy == 0:
                    continue
                candidate = Position(position.x + dx, position.y + dy)
                if not self.board.is_valid_position(candidate):
                    continue
                if not self.board.is_occupied(candidate):
                    adjacent.append(candidate)
        return adjacent

    def moveable_positions(self, position: Position) -> list[Position]:
        """
        Neighbours a worker on `position` may step onto.

        Climbing is limited to one level up; stepping down any number of
        levels is allowed. Domes are never enterable.
        """
        current = self.tower_at(position)
        moveable = []
        for candidate in self.adjacent_positions(position):
            target = self.tower_at(candidate)
            if not target.can_climb or target.is_complete:
                continue
            if target.height - current.height <= 1:
                moveable.append(candidate)
        return moveable

    def buildable_positions(self, position: Position) -> list[Position]:
        """Neighbours of `position` that can take another floor."""
        return [
            candidate
            for candidate in self.adjacent_positions(position)
            if not self.tower_at(candidate).is_complete
        ]

    def can_move(self, position: Position | None) -> bool:
        if position is None:
            return False
        return bool(self.moveable_positions(position))
