"""
Game State - Positions, towers, workers, players and the aggregate root.

Design principles:
- Mutable aggregate: the Reducer is the only writer of a GameState
- Spatial truth lives on the Board, never on workers or players
- Serializable: every field here can be written by the persistence codec
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, NamedTuple

if TYPE_CHECKING:
    from .board import Board
    from ..powers import Power


class GamePhase(Enum):
    """Sub-steps of a player's turn."""
    MOVE = "move"
    BUILD = "build"


class Position(NamedTuple):
    """A cell on the board."""
    x: int
    y: int

    def __str__(self) -> str:
        return f"({self.x},{self.y})"


class FloorType(Enum):
    """Tower levels, bottom to top. A dome caps the tower."""
    EMPTY = (0, True)
    LEVEL_ONE = (1, True)
    LEVEL_TWO = (2, True)
    LEVEL_THREE = (3, True)
    DOME = (4, False)

    def __init__(self, level: int, climbable: bool):
        self.level = level
        self.climbable = climbable

    def next_floor_type(self) -> FloorType | None:
        """Floor that goes on top of this one, or None for a dome."""
        if self is FloorType.DOME:
            return None
        return _FLOORS_BY_LEVEL[self.level + 1]


_FLOORS_BY_LEVEL = {floor.level: floor for floor in FloorType}


class Tower:
    """
    A stack of floors on one cell.

    Height is the level of the top floor (0-4). The fogged flag only
    affects how the tower is shown, never its height.
    """

    MAXIMUM_HEIGHT = 4

    def __init__(self):
        self.floors: list[FloorType] = [FloorType.EMPTY]
        self.fogged = False

    @property
    def height(self) -> int:
        return self.floors[-1].level

    @property
    def is_complete(self) -> bool:
        return self.height == self.MAXIMUM_HEIGHT

    @property
    def is_destroyable(self) -> bool:
        return self.height > 0

    @property
    def can_build_dome(self) -> bool:
        return self.height == self.MAXIMUM_HEIGHT - 1

    @property
    def can_climb(self) -> bool:
        return self.floors[-1].climbable

    def build_floor(self) -> bool:
        """Push the next floor. Returns False (no-op) on a dome."""
        if self.is_complete:
            return False
        self.floors.append(self.floors[-1].next_floor_type())
        return True

    def destroy_floor(self) -> bool:
        """Pop the top floor. Returns False (no-op) at ground level."""
        if not self.is_destroyable:
            return False
        self.floors.pop()
        return True

    def __repr__(self) -> str:
        return f"Tower(height={self.height}, fogged={self.fogged})"


@dataclass(eq=False)
class Worker:
    """
    A player-owned piece.

    worker_id doubles as the worker's slot in the board's occupancy arena,
    so it must be unique within a game. Workers compare by identity.
    """
    worker_id: int
    label: str = ""

    def __str__(self) -> str:
        return self.label or f"Worker {self.worker_id}"


@dataclass(eq=False)
class Player:
    """A participant: name, workers and an optional power."""
    name: str
    workers: list[Worker] = field(default_factory=list)
    power: Power | None = None
    can_select_worker: bool = True

    def add_worker(self, worker: Worker):
        self.workers.append(worker)

    def owns(self, worker: Worker) -> bool:
        return any(w is worker for w in self.workers)

    def reset_turn(self):
        """Allow the player to pick a worker again."""
        self.can_select_worker = True

    @property
    def power_name(self) -> str:
        return self.power.name if self.power else ""

    def __str__(self) -> str:
        return self.name


@dataclass(eq=False)
class GameState:
    """
    Complete game state at a point in time.

    This is the canonical state that the engine operates on.
    All state changes go through the reducer.
    """
    board: Board
    players: list[Player]
    current_player_index: int = 0
    turn_number: int = 0

    # Turn budget
    phase: GamePhase = GamePhase.MOVE
    moves_remaining: int = 1
    builds_remaining: int = 1
    has_moved: bool = False
    has_built: bool = False

    # Markers that forbid trivial reversal within a turn
    original_worker_position: Position | None = None
    last_move_position: Position | None = None
    last_build_position: Position | None = None

    selected_worker: Worker | None = None
    winner_index: int | None = None

    @property
    def current_player(self) -> Player:
        return self.players[self.current_player_index]

    @property
    def num_players(self) -> int:
        return len(self.players)

    @property
    def winner(self) -> Player | None:
        if self.winner_index is None:
            return None
        return self.players[self.winner_index]

    @property
    def is_over(self) -> bool:
        return self.winner_index is not None

    @property
    def workers(self) -> list[Worker]:
        """All workers in player order."""
        return [w for p in self.players for w in p.workers]

    def get_worker(self, worker_id: int) -> Worker | None:
        for worker in self.workers:
            if worker.worker_id == worker_id:
                return worker
        return None

    def owner_of(self, worker: Worker) -> Player | None:
        for player in self.players:
            if player.owns(worker):
                return player
        return None

    def index_of(self, player: Player) -> int:
        for i, p in enumerate(self.players):
            if p is player:
                return i
        raise ValueError(f"{player} is not in this game")

    # Budget bookkeeping

    def decrease_moves_remaining(self):
        self.moves_remaining -= 1
        self.has_moved = True

    def decrease_builds_remaining(self):
        self.builds_remaining -= 1
        self.has_built = True

    def grant_extra_move(self) -> bool:
        """
        Give the current player one more move.

        Only granted before the first move of the phase has been counted,
        so a power can never chain grants off its own extra move.
        """
        if self.phase != GamePhase.MOVE or self.has_moved:
            return False
        self.moves_remaining += 1
        return True

    def grant_extra_build(self) -> bool:
        """Give the current player one more build (same single-grant rule)."""
        if self.phase != GamePhase.BUILD or self.has_built:
            return False
        self.builds_remaining += 1
        return True

    def reset_moves_and_builds(self):
        self.phase = GamePhase.MOVE
        self.has_moved = False
        self.has_built = False
        self.moves_remaining = 1
        self.builds_remaining = 1

    def reset_previous_positions(self):
        self.original_worker_position = None
        self.last_move_position = None
        self.last_build_position = None

    # Turn order

    def advance_turn(self):
        self.current_player_index = (self.current_player_index + 1) % self.num_players

    def increase_turn_number(self):
        self.turn_number += 1

    @property
    def has_turn_number_looped(self) -> bool:
        """True when every player has had the same number of turns."""
        return self.turn_number % self.num_players == 0

    @property
    def round_number(self) -> int:
        return self.turn_number // self.num_players
