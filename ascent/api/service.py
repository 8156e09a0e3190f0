"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to session commands
2. Manages sessions
3. Formats engine state for display (fog hides tower heights)
4. Turns engine rejections into ErrorResponse objects

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging

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
from ..engine_core.action import ActionResult
from ..engine_core.state import GameState, Player, Position
from ..games import GameMode
from ..persistence import SaveFormatError
from ..session import Session, SessionManager, SessionState

logger = logging.getLogger(__name__)

RECENT_LOG_LINES = 10


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService()

        # Create session
        state = service.create_session(CreateSessionRequest(mode="chaos"))

        # Play
        service.select_worker(state.session_id, PositionRequest(x=1, y=1))
        service.move(state.session_id, PositionRequest(x=2, y=2))
    """
    session_manager: SessionManager = field(default_factory=SessionManager)

    # =========================================================================
    # Modes and sessions
    # =========================================================================

    def list_modes(self) -> ModeListResponse:
        return ModeListResponse(modes=[
            ModeInfo(
                name=mode.name.lower(),
                description=mode.config.description,
                board_width=mode.config.board_width,
                board_height=mode.config.board_height,
                num_players=mode.config.num_players,
                num_workers=mode.config.num_workers,
                modifier=mode.config.modifier_name,
            )
            for mode in GameMode
        ])

    def create_session(self, request: CreateSessionRequest) -> GameStateResponse:
        """
        Create a new game session.

        Raises:
            ValueError: for an unknown mode or too many player names
        """
        mode = GameMode.from_name(request.mode)
        session = self.session_manager.create_session(
            mode=mode,
            player_names=request.player_names,
            random_seed=request.random_seed,
        )
        return self._build_game_state(session)

    def get_game_state(self, session_id: str) -> GameStateResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._session_not_found(session_id)
        return self._build_game_state(session)

    def end_session(self, session_id: str) -> bool:
        return self.session_manager.end_session(session_id)

    def list_sessions(self) -> list[str]:
        return self.session_manager.list_sessions()

    # =========================================================================
    # Queries
    # =========================================================================

    def legal_targets(self, session_id: str, x: int, y: int) -> LegalTargetsResponse | ErrorResponse:
        """Move and build targets for the worker standing on (x, y)."""
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._session_not_found(session_id)
        position = Position(x, y)
        return LegalTargetsResponse(
            session_id=session_id,
            position=Coordinate(x=x, y=y),
            moves=[Coordinate(x=p.x, y=p.y) for p in session.legal_moves(position)],
            builds=[Coordinate(x=p.x, y=p.y) for p in session.legal_builds(position)],
        )

    # =========================================================================
    # Commands
    # =========================================================================

    def select_worker(self, session_id: str, request: PositionRequest) -> ActionResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._session_not_found(session_id)
        result = session.select_worker(Position(request.x, request.y))
        return self._action_to_response(session, result)

    def move(self, session_id: str, request: PositionRequest) -> ActionResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._session_not_found(session_id)
        result = session.move(Position(request.x, request.y))
        return self._action_to_response(session, result)

    def build(self, session_id: str, request: PositionRequest) -> ActionResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._session_not_found(session_id)
        result = session.build(Position(request.x, request.y))
        return self._action_to_response(session, result)

    def end_phase(self, session_id: str) -> ActionResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._session_not_found(session_id)
        return self._action_to_response(session, session.force_end_phase())

    # =========================================================================
    # Persistence
    # =========================================================================

    def save_game(self, session_id: str) -> bytes | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._session_not_found(session_id)
        try:
            return session.save_to_bytes()
        except SaveFormatError as e:
            logger.error("Could not save session %s: %s", session_id, e)
            return ErrorResponse(
                error=str(e),
                error_code=ErrorCode.SAVE_MALFORMED,
                details={"session_id": session_id},
            )

    def load_game(self, session_id: str, data: bytes) -> GameStateResponse | ErrorResponse:
        """Replace a session's game with an uploaded save."""
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._session_not_found(session_id)
        try:
            session.load_from_bytes(data)
        except SaveFormatError as e:
            logger.warning("Rejected save for session %s: %s", session_id, e)
            return ErrorResponse(
                error=str(e),
                error_code=ErrorCode.SAVE_MALFORMED,
                details={"session_id": session_id},
            )
        return self._build_game_state(session)

    # =========================================================================
    # Conversion helpers
    # =========================================================================

    def _session_not_found(self, session_id: str) -> ErrorResponse:
        return ErrorResponse(
            error="Session not found",
            error_code=ErrorCode.SESSION_NOT_FOUND,
            details={"session_id": session_id},
        )

    def _action_to_response(self, session: Session, result: ActionResult) -> ActionResponse | ErrorResponse:
        if not result.success:
            try:
                error_code = ErrorCode(result.error_code)
            except ValueError:
                error_code = ErrorCode.ILLEGAL_ACTION
            return ErrorResponse(
                error=result.error or "Action rejected",
                error_code=error_code,
                details={"session_id": session.session_id},
            )
        return ActionResponse(
            session_id=session.session_id,
            changes=result.state_changes,
            power_triggered=result.power_triggered,
            turn_ended=result.turn_ended,
            game_state=self._build_game_state(session),
        )

    def _build_game_state(self, session: Session) -> GameStateResponse:
        state = session.game_state
        winner = state.winner
        return GameStateResponse(
            session_id=session.session_id,
            mode=session.mode.name.lower(),
            status=self._session_status(session),
            turn_number=state.turn_number,
            round_number=state.round_number,
            phase=state.phase.value,
            moves_remaining=state.moves_remaining,
            builds_remaining=state.builds_remaining,
            current_player_index=state.current_player_index,
            selected_worker_id=state.selected_worker.worker_id if state.selected_worker else None,
            board_width=state.board.width,
            board_height=state.board.height,
            towers=self._build_towers(state),
            players=[self._build_player(state, p) for p in state.players],
            winner=self._build_player(state, winner) if winner else None,
            recent_log=session.game_log.tail(RECENT_LOG_LINES),
        )

    def _session_status(self, session: Session) -> SessionStatus:
        if session.state == SessionState.GAME_OVER or session.game_state.is_over:
            return SessionStatus.GAME_OVER
        return SessionStatus.ACTIVE

    def _build_towers(self, state: GameState) -> list[TowerInfo]:
        towers = []
        board = state.board
        for position in board.positions():
            tower = board.tower_at(position)
            worker = board.worker_at(position)
            owner = state.owner_of(worker) if worker else None
            # A standing worker reveals the height of its cell
            hidden = tower.fogged and worker is None
            towers.append(TowerInfo(
                x=position.x,
                y=position.y,
                visible_height=None if hidden else tower.height,
                fogged=tower.fogged,
                worker_id=worker.worker_id if worker else None,
                owner_index=state.index_of(owner) if owner else None,
            ))
        return towers

    def _build_player(self, state: GameState, player: Player) -> PlayerInfo:
        index = state.index_of(player)
        workers = []
        for worker in player.workers:
            position = state.board.position_of(worker)
            workers.append(WorkerInfo(
                worker_id=worker.worker_id,
                label=str(worker),
                position=Coordinate(x=position.x, y=position.y) if position else None,
            ))
        return PlayerInfo(
            index=index,
            name=player.name,
            power=player.power.name if player.power else None,
            power_description=player.power.description if player.power else None,
            can_select_worker=player.can_select_worker,
            is_current_turn=index == state.current_player_index,
            workers=workers,
        )
