"""
Reducer - Applies actions to game state.

The reducer is the single point of state mutation.
All state changes must go through Reducer.apply().

One submitted action runs, in order:
1. Validate against the legality rules for the current phase
2. Apply the board change (move a worker / build a floor)
3. Let the acting player's power react
4. Spend one action from the phase budget
5. Advance MOVE -> BUILD, or end the turn when both budgets are spent
6. On turn end: pick the next player who can move, reset budgets,
   run the board modifier
7. Re-evaluate the winner

A rejected action leaves the state exactly as it was.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging
from typing import TYPE_CHECKING

from .state import GameState, GamePhase, Player, Position, Worker
from .action import Action, ActionType, ActionResult, ErrorCode
from .legality import MovementValidator
from .game_log import GameLog

if TYPE_CHECKING:
    from ..modifiers import Modifier

logger = logging.getLogger(__name__)


@dataclass
class Reducer:
    """
    Reducer applies actions to game state.

    Holds no game state of its own; the modifier and log are the
    collaborators a turn end needs.
    """
    modifier: Modifier | None = None
    game_log: GameLog = field(default_factory=GameLog)

    def apply(self, state: GameState, action: Action | None) -> ActionResult:
        """
        Apply an action to the game state.

        A None action behaves like Action.check().
        """
        if action is None:
            action = Action.check()

        handler = self._get_handler(action.action_type)
        if not handler:
            return ActionResult.failure(
                f"No handler for action type: {action.action_type}",
                error_code=ErrorCode.NO_HANDLER,
            )
        return handler(state, action)

    def _get_handler(self, action_type: ActionType):
        """Get the handler function for an action type."""
        handlers = {
            ActionType.SELECT_WORKER: self._handle_select_worker,
            ActionType.MOVE: self._handle_move,
            ActionType.BUILD: self._handle_build,
            ActionType.END_PHASE: self._handle_end_phase,
            ActionType.CHECK: self._handle_check,
        }
        return handlers.get(action_type)

    # =========================================================================
    # Validation
    # =========================================================================

    def _validate_worker_action(
        self, state: GameState, action: Action, phase: GamePhase
    ) -> ActionResult | None:
        """
        Check a move or build before anything is touched.

        Returns a failure result if invalid, None if valid.
        """
        if state.is_over:
            return ActionResult.failure("Game is over - no actions allowed", ErrorCode.GAME_OVER)

        if state.phase != phase:
            return ActionResult.failure(
                f"Cannot {action.action_type.value} during the {state.phase.value} phase",
                ErrorCode.WRONG_PHASE,
            )

        remaining = state.moves_remaining if phase == GamePhase.MOVE else state.builds_remaining
        if remaining <= 0:
            return ActionResult.failure(
                f"No {phase.value}s remaining this turn", ErrorCode.WRONG_PHASE
            )

        worker = state.selected_worker
        if worker is None:
            return ActionResult.failure("No worker selected", ErrorCode.NO_WORKER_SELECTED)
        if action.worker_id is not None and action.worker_id != worker.worker_id:
            return ActionResult.failure(
                f"Worker {action.worker_id} is not the selected worker",
                ErrorCode.ILLEGAL_ACTION,
            )

        if action.target is None:
            return ActionResult.failure("No target given", ErrorCode.ILLEGAL_ACTION)

        if phase == GamePhase.MOVE:
            legal = self.legal_move_targets(state, worker)
        else:
            legal = self.legal_build_targets(state, worker)
        if action.target not in legal:
            return ActionResult.failure(
                f"Cannot {action.action_type.value} to {action.target}",
                ErrorCode.ILLEGAL_ACTION,
            )
        return None

    def legal_move_targets(self, state: GameState, worker: Worker) -> list[Position]:
        """Moveable cells for `worker`, minus the cell it just came from."""
        position = state.board.position_of(worker)
        if position is None:
            return []
        targets = MovementValidator(state.board).moveable_positions(position)
        return [p for p in targets if p != state.original_worker_position]

    def legal_build_targets(self, state: GameState, worker: Worker) -> list[Position]:
        """Buildable cells for `worker`, minus the cell of this turn's last build."""
        position = state.board.position_of(worker)
        if position is None:
            return []
        targets = MovementValidator(state.board).buildable_positions(position)
        return [p for p in targets if p != state.last_build_position]

    # =========================================================================
    # Handlers
    # =========================================================================

    def _handle_select_worker(self, state: GameState, action: Action) -> ActionResult:
        """Handle choosing the worker that acts this turn."""
        if state.is_over:
            return ActionResult.failure("Game is over - no actions allowed", ErrorCode.GAME_OVER)

        player = state.current_player
        if not player.can_select_worker or state.has_moved:
            return ActionResult.failure(
                f"{player} cannot select a worker now", ErrorCode.ILLEGAL_ACTION
            )

        worker = state.get_worker(action.worker_id) if action.worker_id is not None else None
        if worker is None or not player.owns(worker):
            return ActionResult.failure(
                f"Worker {action.worker_id} does not belong to {player}",
                ErrorCode.ILLEGAL_ACTION,
            )

        state.selected_worker = worker
        player.can_select_worker = False
        changes = [f"{player} selected worker at {state.board.position_of(worker)}"]

        self._update_winner(state, changes)
        return self._commit(state, changes)

    def _handle_move(self, state: GameState, action: Action) -> ActionResult:
        """Handle moving the selected worker one step."""
        failure = self._validate_worker_action(state, action, GamePhase.MOVE)
        if failure:
            return failure

        player = state.current_player
        worker = state.selected_worker
        origin = state.board.position_of(worker)

        state.board.move_worker(action.target, worker)
        state.original_worker_position = origin
        state.last_move_position = action.target
        changes = [
            f"{player}'s worker at ({origin.x}, {origin.y}) moved to "
            f"({action.target.x}, {action.target.y})"
        ]

        return self._finish_action(state, player, action, changes)

    def _handle_build(self, state: GameState, action: Action) -> ActionResult:
        """Handle building one floor next to the selected worker."""
        failure = self._validate_worker_action(state, action, GamePhase.BUILD)
        if failure:
            return failure

        player = state.current_player
        worker = state.selected_worker
        current = state.board.position_of(worker)

        state.board.tower_at(action.target).build_floor()
        state.last_build_position = action.target
        changes = [
            f"{player}'s worker at ({current.x}, {current.y}) built at "
            f"({action.target.x}, {action.target.y})"
        ]

        return self._finish_action(state, player, action, changes)

    def _handle_end_phase(self, state: GameState, action: Action) -> ActionResult:
        """
        Handle a voluntary end of the current phase.

        The phase budget is zeroed outright, so any action a power granted
        but the player did not use is forfeited.
        """
        if state.is_over:
            return ActionResult.failure("Game is over - no actions allowed", ErrorCode.GAME_OVER)

        changes = []
        if state.phase == GamePhase.MOVE:
            state.moves_remaining = 0
            changes.append("Force End Move Phase.")
        else:
            state.builds_remaining = 0
            changes.append("Force End Build Phase. Ending Turn.")

        turn_ended = self._advance_phase(state, changes)
        self._update_winner(state, changes)
        result = self._commit(state, changes)
        result.turn_ended = turn_ended
        return result

    def _handle_check(self, state: GameState, action: Action) -> ActionResult:
        """Handle a passive check: nothing moves, the winner is re-evaluated."""
        changes = []
        self._update_winner(state, changes)
        return self._commit(state, changes)

    # =========================================================================
    # Turn flow
    # =========================================================================

    def _finish_action(
        self,
        state: GameState,
        player: Player,
        action: Action,
        changes: list[str],
    ) -> ActionResult:
        """Steps 3-7 shared by move and build."""
        triggered = False
        if player.power is not None:
            triggered = player.power.execute(state, action)
            if triggered:
                changes.append(f"{player.power.name} power activated")

        if state.phase == GamePhase.MOVE:
            state.decrease_moves_remaining()
            changes.append(f"Moves Remaining: {state.moves_remaining}")
        else:
            state.decrease_builds_remaining()
            changes.append(f"Builds Remaining: {state.builds_remaining}")

        turn_ended = self._advance_phase(state, changes)
        self._update_winner(state, changes)

        result = self._commit(state, changes)
        result.power_triggered = triggered
        result.turn_ended = turn_ended
        return result

    def _advance_phase(self, state: GameState, changes: list[str]) -> bool:
        """Move to BUILD or end the turn based on the budgets. Returns True on turn end."""
        if state.moves_remaining <= 0 and state.builds_remaining > 0:
            if state.phase != GamePhase.BUILD:
                state.phase = GamePhase.BUILD
                changes.append("Build Phase Now")
            return False

        if state.moves_remaining <= 0 and state.builds_remaining <= 0:
            self._end_turn(state, changes)
            return True
        return False

    def _end_turn(self, state: GameState, changes: list[str]):
        """
        Hand the turn to the next player who still has a legal move.

        Players with no legal move are skipped, which eliminates them
        without removing them from the game. If nobody can move, the turn
        comes back round to the player who just acted.
        """
        for _ in range(state.num_players):
            state.advance_turn()
            if self.player_can_move(state, state.current_player):
                break
        else:
            logger.info("No player can move after turn %d", state.turn_number)

        state.reset_moves_and_builds()
        state.reset_previous_positions()
        state.selected_worker = None
        state.current_player.reset_turn()
        state.increase_turn_number()

        if state.has_turn_number_looped:
            changes.append(f"Turn {state.round_number + 1}")
        changes.append(f"{state.current_player}'s Turn")

        if self.modifier is not None:
            changes.extend(self.modifier.execute(state.board, state.turn_number))

    def _commit(self, state: GameState, changes: list[str]) -> ActionResult:
        """Record a successful action in the game log."""
        self.game_log.extend(changes)
        return ActionResult.success_with_state(state, changes=changes)

    # =========================================================================
    # Win conditions
    # =========================================================================

    def _update_winner(self, state: GameState, changes: list[str]):
        if state.is_over:
            return
        winner = self.determine_winner(state)
        if winner is not None:
            state.winner_index = state.index_of(winner)
            changes.append(f"{winner} wins!")
            logger.info("Winner decided on turn %d: %s", state.turn_number, winner)

    def determine_winner(self, state: GameState) -> Player | None:
        """
        Evaluate win conditions, first match wins.

        1. A player with a worker standing on a level-3 tower
        2. The only player who can still move
        3. The selected worker is stuck in a two-player game: the other player
        4. Nobody can move: the current player, since everyone after them is stuck first
        """
        for player in state.players:
            if self.player_reached_top(state, player):
                return player

        moveable_players = [p for p in state.players if self.player_can_move(state, p)]
        if len(moveable_players) == 1:
            return moveable_players[0]

        selected = state.selected_worker
        if selected is not None and not self.worker_can_move(state, selected):
            others = [p for p in state.players if p is not state.current_player]
            if len(others) == 1:
                return others[0]

        if not moveable_players:
            return state.current_player

        return None

    def player_reached_top(self, state: GameState, player: Player) -> bool:
        board = state.board
        return any(
            board.position_of(w) is not None and board.height_of(w) == 3
            for w in player.workers
        )

    def player_can_move(self, state: GameState, player: Player) -> bool:
        return any(self.worker_can_move(state, w) for w in player.workers)

    def worker_can_move(self, state: GameState, worker: Worker) -> bool:
        validator = MovementValidator(state.board)
        return validator.can_move(state.board.position_of(worker))


def apply_action(
    state: GameState,
    action: Action | None,
    modifier: Modifier | None = None,
) -> ActionResult:
    """
    Convenience function to apply an action.

    Creates a Reducer and applies the action.
    """
    reducer = Reducer(modifier=modifier)
    return reducer.apply(state, action)
