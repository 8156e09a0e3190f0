"""
Game Setup - Creates the initial state for a game mode.

This module handles:
- Creating the board and players
- Drawing a distinct power for every player
- Placing workers on random free cells
- Creating the mode's board modifier

Everything random goes through one seeded random.Random, so the same
seed always produces the same opening position.
"""

from __future__ import annotations
from dataclasses import dataclass
import logging
import random

from ..engine_core.board import Board
from ..engine_core.state import GameState, Player, Worker
from ..modifiers import Modifier, parse_modifier
from ..persistence import player_name_problem
from ..powers import draw_powers
from .modes import GameMode

logger = logging.getLogger(__name__)


@dataclass
class GameSetup:
    """A ready-to-play game: its state and the modifier to run it with."""
    state: GameState
    modifier: Modifier | None


def setup_game(
    mode: GameMode = GameMode.STANDARD,
    player_names: list[str] | None = None,
    random_seed: int | None = None,
) -> GameSetup:
    """
    Set up a new game.

    Args:
        mode: Game mode to configure board, seats and modifier
        player_names: Names for the players (defaults to Player 1, Player 2, ...)
        random_seed: Seed for deterministic powers, placement and chaos

    Returns:
        GameSetup with the initial GameState and the mode's modifier
    """
    config = mode.config
    rng = random.Random(random_seed)

    players = _create_players(config.num_players, config.num_workers, player_names)

    for player, power in zip(players, draw_powers(len(players), rng)):
        player.power = power

    board = Board(config.board_width, config.board_height)
    _place_workers(board, players, rng)

    state = GameState(
        board=board,
        players=players,
        current_player_index=config.starting_player_index,
    )
    modifier = parse_modifier(config.modifier_name, rng=rng)

    logger.info(
        "New %s game: %s",
        mode.name.lower(),
        ", ".join(f"{p.name} ({p.power_name})" for p in players),
    )
    return GameSetup(state=state, modifier=modifier)


def _create_players(
    num_players: int,
    num_workers: int,
    player_names: list[str] | None,
) -> list[Player]:
    """Create players with their workers; worker ids run 0..n-1 in seat order."""
    names = list(player_names or [])
    if len(names) > num_players:
        raise ValueError(f"Got {len(names)} player names for {num_players} seats")
    for name in names:
        problem = player_name_problem(name)
        if problem:
            raise ValueError(problem)
    names.extend(f"Player {i + 1}" for i in range(len(names), num_players))

    players = []
    worker_id = 0
    for i, name in enumerate(names):
        player = Player(name=name)
        for j in range(num_workers):
            player.add_worker(Worker(worker_id=worker_id, label=f"P{i + 1}W{j + 1}"))
            worker_id += 1
        players.append(player)
    return players


def _place_workers(board: Board, players: list[Player], rng: random.Random):
    """Put every worker on a distinct random cell."""
    workers = [w for p in players for w in p.workers]
    cells = list(board.positions())
    if len(workers) > len(cells):
        raise ValueError(f"Cannot place {len(workers)} workers on {len(cells)} cells")

    for worker, position in zip(workers, rng.sample(cells, len(workers))):
        board.add_worker(position, worker)
