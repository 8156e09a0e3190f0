"""
Session Manager - Creates and manages game sessions.

A Session is the explicit handle on one running game. It owns:
- The canonical GameState
- The Reducer (with the mode's modifier and the game log)
- The observers notified after every committed change

Every command goes through the session so that it stays the sole writer
of its GameState. Rejected actions change nothing and notify nobody.

Sessions are in-memory only; a game outlives its session only through
save_to_bytes / load_from_bytes.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable
import logging
import random
import time
import uuid

from ..engine_core.state import GameState, Player, Position, Tower, Worker
from ..engine_core.action import Action, ActionResult, ErrorCode
from ..engine_core.game_log import GameLog
from ..engine_core.legality import MovementValidator
from ..engine_core.reducer import Reducer
from ..games import GameMode, setup_game
from ..modifiers import Modifier
from ..persistence import save_to_bytes, load_from_bytes

logger = logging.getLogger(__name__)

Observer = Callable[[GameState], None]


class SessionState(Enum):
    """State of a game session."""
    ACTIVE = "active"  # Game in progress
    GAME_OVER = "game_over"  # A winner has been decided
    ENDED = "ended"  # Removed from the manager


@dataclass
class Session:
    """
    One game being played.

    Queries read the board directly; commands build an Action, hand it to
    the reducer and notify observers when it succeeds.
    """
    session_id: str
    mode: GameMode
    game_state: GameState
    created_at: float = field(default_factory=time.time)
    modifier: Modifier | None = None
    game_log: GameLog = field(default_factory=GameLog)
    state: SessionState = SessionState.ACTIVE

    reducer: Reducer = field(init=False)
    _observers: list[Observer] = field(default_factory=list, init=False, repr=False)

    def __post_init__(self):
        self.reducer = Reducer(modifier=self.modifier, game_log=self.game_log)
        self._sync_state()

    def is_active(self) -> bool:
        return self.state == SessionState.ACTIVE

    # =========================================================================
    # Observers
    # =========================================================================

    def subscribe(self, observer: Observer):
        """Register an observer; observers run in registration order."""
        self._observers.append(observer)

    def unsubscribe(self, observer: Observer):
        if observer in self._observers:
            self._observers.remove(observer)

    def _notify(self):
        for observer in list(self._observers):
            observer(self.game_state)

    # =========================================================================
    # Queries
    # =========================================================================

    @property
    def board_width(self) -> int:
        return self.game_state.board.width

    @property
    def board_height(self) -> int:
        return self.game_state.board.height

    @property
    def current_player(self) -> Player:
        return self.game_state.current_player

    @property
    def winner(self) -> Player | None:
        return self.game_state.winner

    def tower_at(self, position: Position) -> Tower:
        return self.game_state.board.tower_at(position)

    def is_occupied(self, position: Position) -> bool:
        return self.game_state.board.is_occupied(position)

    def worker_at(self, position: Position) -> Worker | None:
        return self.game_state.board.worker_at(position)

    def legal_moves(self, position: Position) -> list[Position]:
        """
        Cells the worker at `position` could move to.

        For the selected worker this also applies this turn's no-reversal
        rule; for any other worker it is the plain board answer.
        """
        worker = self.worker_at(position)
        if worker is None:
            return []
        if worker is self.game_state.selected_worker:
            return self.reducer.legal_move_targets(self.game_state, worker)
        return MovementValidator(self.game_state.board).moveable_positions(position)

    def legal_builds(self, position: Position) -> list[Position]:
        """Cells the worker at `position` could build on (same rules as legal_moves)."""
        worker = self.worker_at(position)
        if worker is None:
            return []
        if worker is self.game_state.selected_worker:
            return self.reducer.legal_build_targets(self.game_state, worker)
        return MovementValidator(self.game_state.board).buildable_positions(position)

    # =========================================================================
    # Commands
    # =========================================================================

    def apply(self, action: Action | None) -> ActionResult:
        """Run one action through the reducer and notify on success."""
        result = self.reducer.apply(self.game_state, action)
        if result.success:
            self._sync_state()
            self._notify()
        else:
            logger.debug("Session %s rejected %s: %s", self.session_id, action, result.error)
        return result

    def select_worker(self, position: Position) -> ActionResult:
        """Select the current player's worker standing at `position`."""
        worker = self.worker_at(position)
        if worker is None:
            return ActionResult.failure(f"No worker at {position}", ErrorCode.ILLEGAL_ACTION)
        return self.apply(Action.select_worker(worker.worker_id))

    def move(self, target: Position) -> ActionResult:
        return self.apply(Action.move(self._selected_worker_id(), target))

    def build(self, target: Position) -> ActionResult:
        return self.apply(Action.build(self._selected_worker_id(), target))

    def force_end_phase(self) -> ActionResult:
        return self.apply(Action.end_phase())

    def check_winner(self) -> ActionResult:
        return self.apply(None)

    def _selected_worker_id(self) -> int | None:
        worker = self.game_state.selected_worker
        return worker.worker_id if worker is not None else None

    def _sync_state(self):
        if self.state == SessionState.ACTIVE and self.game_state.is_over:
            self.state = SessionState.GAME_OVER

    # =========================================================================
    # Persistence
    # =========================================================================

    def save_to_bytes(self) -> bytes:
        return save_to_bytes(self.game_state, self.modifier, self.game_log)

    def load_from_bytes(self, data: bytes, rng: random.Random | None = None):
        """
        Replace the running game with a saved one.

        The save is parsed completely before anything is replaced, so a
        SaveFormatError leaves the current game untouched.
        """
        saved = load_from_bytes(data, rng=rng)

        # The save does not name its mode; the modifier identifies it
        mode = GameMode.for_modifier(saved.modifier.name) if saved.modifier else None
        if mode is None:
            logger.warning("Saved game has no known mode, session %s stays %s", self.session_id, self.mode.name)
        else:
            self.mode = mode
        self.game_state = saved.state
        self.modifier = saved.modifier
        self.game_log = saved.game_log
        self.reducer = Reducer(modifier=self.modifier, game_log=self.game_log)
        self.state = SessionState.ACTIVE
        self._sync_state()

        logger.info("Session %s loaded a saved game at turn %d", self.session_id, self.game_state.turn_number)
        self._notify()


class SessionManager:
    """
    Manages game sessions.

    Responsibilities:
    - Create sessions for a game mode or from a save
    - Track active sessions
    - Clean up ended sessions

    No persistence - sessions are in-memory only.
    """

    def __init__(self):
        self._sessions: dict[str, Session] = {}

    def create_session(
        self,
        mode: GameMode = GameMode.STANDARD,
        player_names: list[str] | None = None,
        random_seed: int | None = None,
    ) -> Session:
        """
        Create a new game session.

        Args:
            mode: Game mode to play
            player_names: Optional player names
            random_seed: Seed for deterministic setup and chaos

        Returns:
            New Session ready to play
        """
        setup = setup_game(mode, player_names=player_names, random_seed=random_seed)
        session = Session(
            session_id=str(uuid.uuid4()),
            mode=mode,
            game_state=setup.state,
            modifier=setup.modifier,
        )
        self._sessions[session.session_id] = session
        logger.info("Created session %s (%s)", session.session_id, mode.name.lower())
        return session

    def get_session(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def end_session(self, session_id: str) -> bool:
        """Remove a session. Returns False if it did not exist."""
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        session.state = SessionState.ENDED
        session._observers.clear()
        logger.info("Ended session %s", session_id)
        return True

    def list_sessions(self) -> list[str]:
        """List IDs of all known sessions."""
        return list(self._sessions)

    def list_active_sessions(self) -> list[str]:
        """List IDs of sessions whose game is still running."""
        return [
            sid for sid, session in self._sessions.items()
            if session.is_active()
        ]

    def cleanup_stale_sessions(self, max_age_seconds: int = 3600) -> int:
        """
        Remove finished sessions older than max_age.

        Returns the number removed.
        """
        current_time = time.time()
        to_remove = [
            sid for sid, session in self._sessions.items()
            if current_time - session.created_at > max_age_seconds and not session.is_active()
        ]
        for session_id in to_remove:
            self.end_session(session_id)
        return len(to_remove)
