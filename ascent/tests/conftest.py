"""
Pytest fixtures for Ascent tests.
"""

import pytest

from ..engine_core.board import Board
from ..engine_core.state import GameState, Player, Position, Worker
from ..engine_core.reducer import Reducer


def build_state(
    worker_positions: list[list[tuple[int, int]]],
    powers: list | None = None,
    heights: dict[tuple[int, int], int] | None = None,
    width: int = 5,
    height: int = 5,
) -> GameState:
    """
    Build a game with workers on fixed cells.

    worker_positions holds one list of cells per player; worker ids are
    handed out in seat order starting at 0.
    """
    board = Board(width, height)
    for (x, y), level in (heights or {}).items():
        for _ in range(level):
            board.tower_at(Position(x, y)).build_floor()

    players = []
    worker_id = 0
    for i, positions in enumerate(worker_positions):
        player = Player(name=f"Player {i + 1}", power=powers[i] if powers else None)
        for j, (x, y) in enumerate(positions):
            worker = Worker(worker_id=worker_id, label=f"P{i + 1}W{j + 1}")
            worker_id += 1
            player.add_worker(worker)
            board.add_worker(Position(x, y), worker)
        players.append(player)

    return GameState(board=board, players=players)


@pytest.fixture
def two_player_state() -> GameState:
    """
    Two players, two workers each, flat 5x5 board.

    Player 1: worker 0 at (1,1), worker 1 at (3,3)
    Player 2: worker 2 at (2,1), worker 3 at (3,4)
    """
    return build_state([[(1, 1), (3, 3)], [(2, 1), (3, 4)]])


@pytest.fixture
def reducer() -> Reducer:
    return Reducer()
