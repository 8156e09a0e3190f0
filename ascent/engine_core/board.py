"""
Board - The grid of towers and who stands where.

The board is the single source of truth for spatial state. Worker
occupancy is kept in one dense arena: each cell stores an optional
worker id, each worker id stores an optional cell index. Both sides are
always updated together, so they cannot drift apart.
"""

from __future__ import annotations
from typing import Iterator

from .state import Position, Tower, Worker


class OccupancyError(ValueError):
    """Raised by the arena when a placement would break occupancy rules."""


class WorkerArena:
    """
    Two-way worker <-> cell index.

    This is the lowest model layer and it refuses invalid placements
    loudly. Board checks first, so callers going through Board never see
    these errors.
    """

    def __init__(self, cell_count: int):
        self._cells: list[int | None] = [None] * cell_count
        self._workers: list[int | None] = []

    def _ensure_slot(self, worker_id: int):
        if worker_id < 0:
            raise OccupancyError(f"Invalid worker id: {worker_id}")
        if worker_id >= len(self._workers):
            self._workers.extend([None] * (worker_id + 1 - len(self._workers)))

    def occupied(self, cell: int) -> bool:
        return self._cells[cell] is not None

    def contains(self, worker_id: int) -> bool:
        return worker_id < len(self._workers) and self._workers[worker_id] is not None

    def worker_at(self, cell: int) -> int | None:
        return self._cells[cell]

    def cell_of(self, worker_id: int) -> int | None:
        if worker_id >= len(self._workers):
            return None
        return self._workers[worker_id]

    def add(self, cell: int, worker_id: int):
        self._ensure_slot(worker_id)
        if self._cells[cell] is not None:
            raise OccupancyError(f"Cell {cell} is already occupied")
        if self._workers[worker_id] is not None:
            raise OccupancyError(f"Worker {worker_id} is already on the board")
        self._cells[cell] = worker_id
        self._workers[worker_id] = cell

    def move(self, cell: int, worker_id: int):
        if self._cells[cell] is not None:
            raise OccupancyError(f"Cell {cell} is already occupied")
        old_cell = self.cell_of(worker_id)
        if old_cell is None:
            raise OccupancyError(f"Worker {worker_id} is not on the board")
        self._cells[old_cell] = None
        self._cells[cell] = worker_id
        self._workers[worker_id] = cell

    def remove(self, worker_id: int):
        cell = self.cell_of(worker_id)
        if cell is None:
            return
        self._cells[cell] = None
        self._workers[worker_id] = None


class Board:
    """
    Fixed width x height grid owning one Tower per cell.

    Placement operations are silent no-ops on out-of-bounds or occupied
    targets; callers are expected to consult the MovementValidator first.
    """

    def __init__(self, width: int, height: int):
        if width <= 0 or height <= 0:
            raise ValueError(f"Board dimensions must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self._towers = [Tower() for _ in range(width * height)]
        self._arena = WorkerArena(width * height)
        self._workers: dict[int, Worker] = {}

    def _index(self, position: Position) -> int:
        return position.y * self.width + position.x

    def _position(self, cell: int) -> Position:
        return Position(cell % self.width, cell // self.width)

    def positions(self) -> Iterator[Position]:
        """Every cell, row by row."""
        for y in range(self.height):
            for x in range(self.width):
                yield Position(x, y)

    # Queries

    def tower_at(self, position: Position) -> Tower:
        if not self.is_valid_position(position):
            raise IndexError(f"{position} is outside the {self.width}x{self.height} board")
        return self._towers[self._index(position)]

    def is_valid_position(self, position: Position) -> bool:
        return 0 <= position.x < self.width and 0 <= position.y < self.height

    def is_perimeter(self, position: Position) -> bool:
        return (
            position.x == 0
            or position.y == 0
            or position.x == self.width - 1
            or position.y == self.height - 1
        )

    def is_occupied(self, position: Position) -> bool:
        if not self.is_valid_position(position):
            return False
        return self._arena.occupied(self._index(position))

    def worker_at(self, position: Position) -> Worker | None:
        if not self.is_valid_position(position):
            return None
        worker_id = self._arena.worker_at(self._index(position))
        if worker_id is None:
            return None
        return self._workers[worker_id]

    def position_of(self, worker: Worker) -> Position | None:
        cell = self._arena.cell_of(worker.worker_id)
        if cell is None:
            return None
        return self._position(cell)

    def height_of(self, worker: Worker) -> int:
        position = self.position_of(worker)
        if position is None:
            raise ValueError(f"{worker} is not on the board")
        return self.tower_at(position).height

    def placed_workers(self) -> list[Worker]:
        return [w for w in self._workers.values() if self._arena.contains(w.worker_id)]

    # Actions

    def add_worker(self, position: Position, worker: Worker):
        if not self.is_valid_position(position) or self.is_occupied(position):
            return
        if self._arena.contains(worker.worker_id):
            return
        self._arena.add(self._index(position), worker.worker_id)
        self._workers[worker.worker_id] = worker

    def move_worker(self, new_position: Position, worker: Worker):
        if not self.is_valid_position(new_position) or self.is_occupied(new_position):
            return
        if not self._arena.contains(worker.worker_id):
            return
        self._arena.move(self._index(new_position), worker.worker_id)

    def remove_worker(self, worker: Worker):
        self._arena.remove(worker.worker_id)
        self._workers.pop(worker.worker_id, None)
