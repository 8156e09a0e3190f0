"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the contract between a front end and the engine.
All responses include explicit types for OpenAPI schema generation.

Error Codes:
- SESSION_NOT_FOUND: Session does not exist or has been ended
- INVALID_MODE: Requested game mode does not exist
- ILLEGAL_ACTION: Move, build or selection not allowed right now
- GAME_OVER: The game already has a winner
- WRONG_PHASE: Action does not match the current turn phase
- NO_WORKER_SELECTED: Move or build before selecting a worker
- SAVE_MALFORMED: Uploaded save file could not be parsed
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class SessionStatus(str, Enum):
    """Session status values."""
    ACTIVE = "active"
    GAME_OVER = "game_over"


class ErrorCode(str, Enum):
    """Structured error codes."""
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    INVALID_MODE = "INVALID_MODE"
    ILLEGAL_ACTION = "ILLEGAL_ACTION"
    GAME_OVER = "GAME_OVER"
    WRONG_PHASE = "WRONG_PHASE"
    NO_WORKER_SELECTED = "NO_WORKER_SELECTED"
    SAVE_MALFORMED = "SAVE_MALFORMED"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class Coordinate(BaseModel):
    """A board cell."""
    x: int = Field(..., ge=0)
    y: int = Field(..., ge=0)


class TowerInfo(BaseModel):
    """One cell of the board as a player sees it."""
    x: int
    y: int
    visible_height: Optional[int] = Field(
        None, description="Tower height, or null while the cell is hidden by fog"
    )
    fogged: bool = False
    worker_id: Optional[int] = None
    owner_index: Optional[int] = Field(None, description="Seat index of the worker's owner")


class WorkerInfo(BaseModel):
    """A worker and where it stands."""
    worker_id: int
    label: str
    position: Optional[Coordinate] = None


class PlayerInfo(BaseModel):
    """Player information for display."""
    index: int
    name: str
    power: Optional[str] = None
    power_description: Optional[str] = None
    can_select_worker: bool = True
    is_current_turn: bool = False
    workers: list[WorkerInfo] = Field(default_factory=list)


class ModeInfo(BaseModel):
    """A game mode a session can be created with."""
    name: str
    description: str = ""
    board_width: int
    board_height: int
    num_players: int
    num_workers: int
    modifier: str


# =============================================================================
# Request Models
# =============================================================================

class CreateSessionRequest(BaseModel):
    """Request to create a new game session."""
    mode: str = Field("standard", description="Game mode: standard or chaos")
    player_names: Optional[list[str]] = Field(
        None, description="Display names in seat order (defaults to Player 1, Player 2, ...)"
    )
    random_seed: Optional[int] = Field(None, description="Seed for reproducible games")


class PositionRequest(BaseModel):
    """Request naming one board cell (select, move and build)."""
    x: int = Field(..., ge=0)
    y: int = Field(..., ge=0)


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")
    api_version: str = Field("v1", description="API version")


class GameStateResponse(BaseModel):
    """Complete game state for display."""
    session_id: str
    mode: str
    status: SessionStatus
    turn_number: int
    round_number: int
    phase: str
    moves_remaining: int
    builds_remaining: int
    current_player_index: int
    selected_worker_id: Optional[int] = None
    board_width: int
    board_height: int
    towers: list[TowerInfo] = Field(default_factory=list)
    players: list[PlayerInfo] = Field(default_factory=list)
    winner: Optional[PlayerInfo] = None
    recent_log: list[str] = Field(default_factory=list)
    api_version: str = "v1"


class ActionResponse(BaseModel):
    """Response after a successful select, move, build or end-phase."""
    session_id: str
    success: bool = True
    changes: list[str] = Field(default_factory=list)
    power_triggered: bool = False
    turn_ended: bool = False
    game_state: Optional[GameStateResponse] = None
    api_version: str = "v1"


class LegalTargetsResponse(BaseModel):
    """Where the worker on a cell may move or build."""
    session_id: str
    position: Coordinate
    moves: list[Coordinate] = Field(default_factory=list)
    builds: list[Coordinate] = Field(default_factory=list)
    api_version: str = "v1"


class ModeListResponse(BaseModel):
    """Response listing game modes."""
    modes: list[ModeInfo]


class SessionListResponse(BaseModel):
    """Response listing sessions."""
    sessions: list[str]
    count: int


class EndSessionResponse(BaseModel):
    """Response after ending a session."""
    success: bool
    session_id: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
