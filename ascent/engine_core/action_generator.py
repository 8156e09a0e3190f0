"""
Action Generator - Generates all legal actions from a game state.

The action generator is used by:
1. Front ends to highlight what can be clicked
2. Tests and scripted games to enumerate possible moves
3. Validation (is this action in legal_actions?)

Design: Generates Action objects, not just action types.
This ensures all generated actions are fully specified.
"""

from __future__ import annotations
from dataclasses import dataclass, field

from .state import GameState, GamePhase
from .action import Action, ActionType
from .reducer import Reducer


@dataclass
class ActionGenerator:
    """
    Generates legal actions for the current game state.

    Uses the Reducer's turn-aware target rules so that everything
    generated here would be accepted by Reducer.apply().
    """
    reducer: Reducer = field(default_factory=Reducer)

    def generate(self, state: GameState) -> list[Action]:
        """Generate all legal actions for the current player."""
        if state.is_over:
            return []

        player = state.current_player
        actions: list[Action] = []

        if player.can_select_worker and not state.has_moved:
            actions.extend(Action.select_worker(w.worker_id) for w in player.workers)

        worker = state.selected_worker
        if worker is not None:
            if state.phase == GamePhase.MOVE and state.moves_remaining > 0:
                actions.extend(
                    Action.move(worker.worker_id, target)
                    for target in self.reducer.legal_move_targets(state, worker)
                )
            elif state.phase == GamePhase.BUILD and state.builds_remaining > 0:
                actions.extend(
                    Action.build(worker.worker_id, target)
                    for target in self.reducer.legal_build_targets(state, worker)
                )

        # Forfeiting the rest of a phase only makes sense once it has been used
        if (state.phase == GamePhase.MOVE and state.has_moved) or (
            state.phase == GamePhase.BUILD and state.has_built
        ):
            actions.append(Action.end_phase())

        return actions


def legal_actions(state: GameState) -> list[Action]:
    """
    Convenience function to get legal actions.

    Creates an ActionGenerator and generates actions.
    """
    generator = ActionGenerator()
    return generator.generate(state)


def is_legal(state: GameState, action: Action) -> bool:
    """Check if a specific action is legal."""
    if action.action_type in (ActionType.CHECK, ActionType.END_PHASE):
        return not state.is_over
    for a in legal_actions(state):
        if (
            a.action_type == action.action_type
            and a.worker_id == action.worker_id
            and a.target == action.target
        ):
            return True
    return False
