"""
Engine Core - Board model, legality rules and the turn state machine.

The engine is the runtime that:
1. Holds the GameState (board, players, turn counters)
2. Answers legality queries (where can this worker move or build)
3. Applies actions via the reducer
4. Ends turns, runs the board modifier and decides the winner
"""

from .state import GameState, GamePhase, Player, Worker, Position, Tower, FloorType
from .board import Board, OccupancyError
from .legality import MovementValidator
from .action import Action, ActionType, ActionPayload, ActionResult, ErrorCode
from .game_log import GameLog
from .reducer import Reducer, apply_action
from .action_generator import ActionGenerator, legal_actions, is_legal

__all__ = [
    "GameState",
    "GamePhase",
    "Player",
    "Worker",
    "Position",
    "Tower",
    "FloorType",
    "Board",
    "OccupancyError",
    "MovementValidator",
    "Action",
    "ActionType",
    "ActionPayload",
    "ActionResult",
    "ErrorCode",
    "GameLog",
    "Reducer",
    "apply_action",
    "ActionGenerator",
    "legal_actions",
    "is_legal",
]
