"""
Tests for the reducer (turn state machine).

Tests:
- Worker selection, move and build flow
- Validation and rejection without side effects
- Turn hand-over and skipping immobile players
- Win conditions
"""

import pytest

from ..engine_core.action import Action, ErrorCode
from ..engine_core.reducer import Reducer, apply_action
from ..engine_core.state import GamePhase, Position
from ..engine_core.game_log import GameLog
from ..modifiers import Modifier
from .conftest import build_state


def snapshot(state):
    """Comparable summary of everything a rejected action must not touch."""
    board = state.board
    return (
        [(p, board.tower_at(p).height) for p in board.positions()],
        [board.position_of(w) for w in state.workers],
        state.current_player_index,
        state.turn_number,
        state.phase,
        state.moves_remaining,
        state.builds_remaining,
        state.selected_worker,
        [p.can_select_worker for p in state.players],
        state.winner_index,
    )


class RecordingModifier(Modifier):
    """Remembers every turn number it was called with."""

    name = "recording"

    def __init__(self):
        self.calls = []

    def execute(self, board, turn_number):
        self.calls.append(turn_number)
        return [f"modifier ran on turn {turn_number}"]


class TestSelectWorker:
    """Tests for choosing the acting worker."""

    def test_select_own_worker(self, two_player_state, reducer):
        state = two_player_state
        result = reducer.apply(state, Action.select_worker(0))

        assert result.success
        assert state.selected_worker is state.get_worker(0)
        assert not state.current_player.can_select_worker

    def test_select_opponent_worker_fails(self, two_player_state, reducer):
        result = reducer.apply(two_player_state, Action.select_worker(2))

        assert not result.success
        assert result.error_code == ErrorCode.ILLEGAL_ACTION
        assert two_player_state.selected_worker is None

    def test_select_twice_fails(self, two_player_state, reducer):
        reducer.apply(two_player_state, Action.select_worker(0))
        result = reducer.apply(two_player_state, Action.select_worker(1))

        assert not result.success
        assert two_player_state.selected_worker is two_player_state.get_worker(0)

    def test_select_unknown_worker_fails(self, two_player_state, reducer):
        result = reducer.apply(two_player_state, Action.select_worker(99))
        assert not result.success


class TestMoveAndBuild:
    """Tests for a standard turn."""

    def test_full_turn(self, two_player_state, reducer):
        """Select, move and build hand the turn to the next player."""
        state = two_player_state

        assert reducer.apply(state, Action.select_worker(0)).success

        move = reducer.apply(state, Action.move(0, Position(2, 2)))
        assert move.success
        assert state.board.position_of(state.get_worker(0)) == Position(2, 2)
        assert state.phase == GamePhase.BUILD
        assert state.moves_remaining == 0
        assert state.original_worker_position == Position(1, 1)

        build = reducer.apply(state, Action.build(0, Position(1, 1)))
        assert build.success
        assert build.turn_ended
        assert state.board.tower_at(Position(1, 1)).height == 1

        assert state.current_player_index == 1
        assert state.turn_number == 1
        assert state.phase == GamePhase.MOVE
        assert (state.moves_remaining, state.builds_remaining) == (1, 1)
        assert state.selected_worker is None
        assert state.last_build_position is None
        assert state.current_player.can_select_worker
        assert state.winner is None

    def test_move_logged(self, two_player_state):
        log = GameLog()
        reducer = Reducer(game_log=log)
        reducer.apply(two_player_state, Action.select_worker(0))
        reducer.apply(two_player_state, Action.move(0, Position(2, 2)))

        assert "Player 1's worker at (1, 1) moved to (2, 2)" in log.entries
        assert "Build Phase Now" in log.entries

    def test_turn_change_logged(self, two_player_state, reducer):
        state = two_player_state
        reducer.apply(state, Action.select_worker(0))
        reducer.apply(state, Action.move(0, Position(2, 2)))
        result = reducer.apply(state, Action.build(0, Position(1, 1)))

        assert "Player 2's Turn" in result.state_changes

    def test_move_without_selection_fails(self, two_player_state, reducer):
        result = reducer.apply(two_player_state, Action.move(0, Position(2, 2)))

        assert not result.success
        assert result.error_code == ErrorCode.NO_WORKER_SELECTED

    def test_build_in_move_phase_fails(self, two_player_state, reducer):
        reducer.apply(two_player_state, Action.select_worker(0))
        result = reducer.apply(two_player_state, Action.build(0, Position(2, 2)))

        assert not result.success
        assert result.error_code == ErrorCode.WRONG_PHASE

    def test_move_other_worker_fails(self, two_player_state, reducer):
        reducer.apply(two_player_state, Action.select_worker(0))
        result = reducer.apply(two_player_state, Action.move(1, Position(2, 3)))

        assert not result.success
        assert result.error_code == ErrorCode.ILLEGAL_ACTION

    @pytest.mark.parametrize("target", [
        Position(3, 1),  # not adjacent
        Position(2, 1),  # occupied by an opponent
        Position(1, 1),  # its own cell
        Position(-1, 0),  # off the board
    ])
    def test_illegal_move_leaves_state_unchanged(self, two_player_state, reducer, target):
        state = two_player_state
        reducer.apply(state, Action.select_worker(0))
        before = snapshot(state)

        result = reducer.apply(state, Action.move(0, target))

        assert not result.success
        assert result.error_code == ErrorCode.ILLEGAL_ACTION
        assert snapshot(state) == before

    def test_cannot_climb_two_levels(self, reducer):
        state = build_state([[(1, 1)], [(4, 4)]], heights={(2, 2): 2})
        reducer.apply(state, Action.select_worker(0))

        result = reducer.apply(state, Action.move(0, Position(2, 2)))

        assert not result.success
        assert state.board.position_of(state.get_worker(0)) == Position(1, 1)

    def test_cannot_move_onto_dome(self, reducer):
        state = build_state([[(1, 1)], [(4, 4)]], heights={(1, 1): 2, (2, 2): 4})
        reducer.apply(state, Action.select_worker(0))

        result = reducer.apply(state, Action.move(0, Position(2, 2)))
        assert not result.success

    def test_build_dome(self, reducer):
        state = build_state([[(1, 1)], [(4, 4)]], heights={(0, 0): 3})
        reducer.apply(state, Action.select_worker(0))
        reducer.apply(state, Action.move(0, Position(1, 0)))

        result = reducer.apply(state, Action.build(0, Position(0, 0)))

        assert result.success
        assert state.board.tower_at(Position(0, 0)).is_complete

    def test_apply_action_helper(self, two_player_state):
        result = apply_action(two_player_state, Action.select_worker(0))
        assert result.success


class TestEndPhase:
    """Tests for forcing a phase to end."""

    def test_end_move_phase(self, two_player_state, reducer):
        result = reducer.apply(two_player_state, Action.end_phase())

        assert result.success
        assert two_player_state.phase == GamePhase.BUILD
        assert two_player_state.moves_remaining == 0
        assert "Force End Move Phase." in result.state_changes

    def test_end_build_phase_ends_turn(self, two_player_state, reducer):
        state = two_player_state
        reducer.apply(state, Action.select_worker(0))
        reducer.apply(state, Action.move(0, Position(2, 2)))

        result = reducer.apply(state, Action.end_phase())

        assert result.success
        assert result.turn_ended
        assert state.current_player_index == 1
        assert state.board.tower_at(Position(1, 1)).height == 0


class TestTurnOrder:
    """Tests for handing the turn over."""

    def test_immobile_player_is_skipped(self, reducer):
        """A player with no legal move loses their turn."""
        state = build_state(
            [[(4, 4)], [(0, 0)], [(4, 0)]],
            heights={(1, 0): 4, (0, 1): 4, (1, 1): 4},
        )
        reducer.apply(state, Action.select_worker(0))
        reducer.apply(state, Action.move(0, Position(3, 3)))
        reducer.apply(state, Action.build(0, Position(4, 4)))

        assert state.current_player_index == 2
        assert state.turn_number == 1
        assert state.winner is None

    def test_modifier_runs_once_per_turn(self, two_player_state):
        modifier = RecordingModifier()
        reducer = Reducer(modifier=modifier)
        state = two_player_state

        reducer.apply(state, Action.select_worker(0))
        reducer.apply(state, Action.move(0, Position(2, 2)))
        assert modifier.calls == []

        result = reducer.apply(state, Action.build(0, Position(1, 1)))

        assert modifier.calls == [1]
        assert "modifier ran on turn 1" in result.state_changes

    def test_round_marker_logged(self, two_player_state, reducer):
        state = two_player_state
        reducer.apply(state, Action.select_worker(0))
        reducer.apply(state, Action.move(0, Position(2, 2)))
        reducer.apply(state, Action.build(0, Position(1, 1)))

        reducer.apply(state, Action.select_worker(2))
        reducer.apply(state, Action.move(2, Position(2, 0)))
        result = reducer.apply(state, Action.build(2, Position(1, 0)))

        assert state.turn_number == 2
        assert "Turn 2" in result.state_changes


class TestWinConditions:
    """Tests for winner determination."""

    def test_climbing_to_level_three_wins(self, reducer):
        state = build_state([[(1, 1)], [(4, 4)]], heights={(1, 1): 2, (2, 2): 3})
        reducer.apply(state, Action.select_worker(0))

        result = reducer.apply(state, Action.move(0, Position(2, 2)))

        assert result.success
        assert state.winner is state.players[0]
        assert "Player 1 wins!" in result.state_changes

    def test_no_actions_after_win(self, reducer):
        state = build_state([[(1, 1)], [(4, 4)]], heights={(1, 1): 2, (2, 2): 3})
        reducer.apply(state, Action.select_worker(0))
        reducer.apply(state, Action.move(0, Position(2, 2)))

        result = reducer.apply(state, Action.build(0, Position(1, 1)))

        assert not result.success
        assert result.error_code == ErrorCode.GAME_OVER
        assert state.board.tower_at(Position(1, 1)).height == 2

    def test_only_mobile_player_wins(self, reducer):
        state = build_state(
            [[(2, 2)], [(0, 0)]],
            heights={(1, 0): 4, (0, 1): 4, (1, 1): 4},
        )
        assert state.winner is None

        result = reducer.apply(state, Action.check())

        assert result.success
        assert state.winner is state.players[0]

    def test_none_action_checks_winner(self, reducer):
        state = build_state(
            [[(2, 2)], [(0, 0)]],
            heights={(1, 0): 4, (0, 1): 4, (1, 1): 4},
        )
        reducer.apply(state, None)
        assert state.winner is state.players[0]

    def test_selecting_stuck_worker_loses(self, reducer):
        """In a two-player game, picking a worker that cannot move hands the win over."""
        state = build_state(
            [[(0, 0), (4, 4)], [(2, 4)]],
            heights={(1, 0): 4, (0, 1): 4, (1, 1): 4},
        )

        result = reducer.apply(state, Action.select_worker(0))

        assert result.success
        assert state.winner is state.players[1]

    def test_no_winner_in_open_position(self, two_player_state, reducer):
        reducer.apply(two_player_state, Action.check())
        assert two_player_state.winner is None

    def test_winner_on_level_three_beats_mobility(self, reducer):
        """A worker already standing on level 3 wins before mobility is considered."""
        state = build_state([[(2, 2)], [(4, 4)]], heights={(4, 4): 3})
        reducer.apply(state, Action.check())
        assert state.winner is state.players[1]

    def test_nobody_can_move_after_turn(self, reducer):
        """Blocking the last free cell for everyone hands the win to the player who did it."""
        state = build_state(
            [[(0, 0)], [(1, 1)]],
            heights={(0, 0): 1, (0, 1): 4},
            width=2,
            height=2,
        )
        reducer.apply(state, Action.select_worker(0))
        reducer.apply(state, Action.move(0, Position(1, 0)))
        assert state.winner is None

        result = reducer.apply(state, Action.build(0, Position(0, 0)))

        assert result.success
        assert result.turn_ended
        assert state.current_player_index == 0
        assert state.winner is state.players[0]
        assert "Player 1 wins!" in result.state_changes
