"""
Action System - Actions, payloads, and results.

Actions represent:
1. Worker actions (move, build)
2. Turn control (select worker, force end phase)
3. Passive checks (re-run win determination without acting)

All state changes flow through actions.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .state import Position


class ActionType(Enum):
    """Types of actions in the system."""
    SELECT_WORKER = "select_worker"
    MOVE = "move"
    BUILD = "build"
    END_PHASE = "end_phase"
    CHECK = "check"


class ErrorCode:
    """Machine-readable rejection reasons."""
    ILLEGAL_ACTION = "ILLEGAL_ACTION"
    GAME_OVER = "GAME_OVER"
    WRONG_PHASE = "WRONG_PHASE"
    NO_WORKER_SELECTED = "NO_WORKER_SELECTED"
    NO_HANDLER = "NO_HANDLER"


@dataclass
class ActionPayload:
    """
    Payload for an action - contains the action parameters.

    Different action types use different fields; validation happens in
    the reducer.
    """
    worker_id: int | None = None
    target: Position | None = None
    params: dict[str, Any] = field(default_factory=dict)


@dataclass
class Action:
    """A complete action to be applied to the game state."""
    action_type: ActionType
    payload: ActionPayload = field(default_factory=ActionPayload)

    @property
    def target(self) -> Position | None:
        return self.payload.target

    @property
    def worker_id(self) -> int | None:
        return self.payload.worker_id

    @classmethod
    def select_worker(cls, worker_id: int) -> Action:
        return cls(
            action_type=ActionType.SELECT_WORKER,
            payload=ActionPayload(worker_id=worker_id),
        )

    @classmethod
    def move(cls, worker_id: int, target: Position) -> Action:
        return cls(
            action_type=ActionType.MOVE,
            payload=ActionPayload(worker_id=worker_id, target=Position(*target)),
        )

    @classmethod
    def build(cls, worker_id: int, target: Position) -> Action:
        return cls(
            action_type=ActionType.BUILD,
            payload=ActionPayload(worker_id=worker_id, target=Position(*target)),
        )

    @classmethod
    def end_phase(cls) -> Action:
        return cls(action_type=ActionType.END_PHASE)

    @classmethod
    def check(cls) -> Action:
        """A null action: only re-evaluates the winner."""
        return cls(action_type=ActionType.CHECK)

    def __str__(self) -> str:
        if self.payload.target is not None:
            return f"{self.action_type.value} {self.payload.target}"
        return self.action_type.value


@dataclass
class ActionResult:
    """
    Result of applying an action.

    Contains:
    - Whether action succeeded
    - The state (mutated in place on success, untouched on failure)
    - Errors (if failed)
    - Human-readable changes (for the game log / UI)
    """
    success: bool
    new_state: Any | None = None  # GameState
    error: str | None = None
    error_code: str | None = None

    state_changes: list[str] = field(default_factory=list)
    power_triggered: bool = False
    turn_ended: bool = False

    @classmethod
    def failure(cls, error: str, error_code: str | None = None) -> ActionResult:
        """Create a failure result."""
        return cls(success=False, error=error, error_code=error_code)

    @classmethod
    def success_with_state(
        cls,
        state: Any,
        changes: list[str] | None = None,
    ) -> ActionResult:
        """Create a success result with the updated state."""
        return cls(
            success=True,
            new_state=state,
            state_changes=changes or [],
        )
