"""
API Module - HTTP interface for game front ends.

Exposes sessions via a REST API. A front end:
1. Creates a session for a game mode
2. Selects a worker, moves, builds
3. Polls the game state (fogged towers hide their height)
4. Downloads or uploads save files

All state is session-scoped and in memory.
"""

from .schemas import (
    # Requests
    CreateSessionRequest,
    PositionRequest,
    # Responses
    ActionResponse,
    ErrorResponse,
    GameStateResponse,
    LegalTargetsResponse,
    ModeListResponse,
    # Shared
    Coordinate,
    ModeInfo,
    PlayerInfo,
    TowerInfo,
    WorkerInfo,
    # Enums
    ErrorCode,
    SessionStatus,
)
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "CreateSessionRequest",
    "PositionRequest",
    # Responses
    "ActionResponse",
    "ErrorResponse",
    "GameStateResponse",
    "LegalTargetsResponse",
    "ModeListResponse",
    # Shared
    "Coordinate",
    "ModeInfo",
    "PlayerInfo",
    "TowerInfo",
    "WorkerInfo",
    # Enums
    "ErrorCode",
    "SessionStatus",
    # Service
    "APIService",
    "create_app",
]
