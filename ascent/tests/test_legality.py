"""
Tests for the legality engine.

Tests:
- Adjacency and occupancy
- Climb rule and domes
- Build targets
- Action generation
"""

from ..engine_core.board import Board
from ..engine_core.legality import MovementValidator
from ..engine_core.state import Position, Worker
from ..engine_core.action import Action, ActionType
from ..engine_core.action_generator import ActionGenerator, legal_actions, is_legal


def raise_tower(board: Board, x: int, y: int, levels: int):
    for _ in range(levels):
        board.tower_at(Position(x, y)).build_floor()


class TestAdjacency:
    """Tests for neighbour discovery."""

    def test_centre_has_eight_neighbours(self):
        validator = MovementValidator(Board(5, 5))
        assert len(validator.adjacent_positions(Position(2, 2))) == 8

    def test_corner_has_three_neighbours(self):
        validator = MovementValidator(Board(5, 5))
        assert set(validator.adjacent_positions(Position(0, 0))) == {
            Position(1, 0), Position(0, 1), Position(1, 1),
        }

    def test_occupied_cells_excluded(self):
        board = Board(5, 5)
        board.add_worker(Position(1, 1), Worker(worker_id=0))
        validator = MovementValidator(board)

        adjacent = validator.adjacent_positions(Position(0, 0))
        assert Position(1, 1) not in adjacent
        assert len(adjacent) == 2

    def test_order_is_deterministic(self):
        validator = MovementValidator(Board(3, 3))
        assert validator.adjacent_positions(Position(1, 1))[:3] == [
            Position(0, 0), Position(0, 1), Position(0, 2),
        ]


class TestMoveablePositions:
    """Tests for the climb rule."""

    def test_climb_one_level(self):
        board = Board(5, 5)
        raise_tower(board, 2, 1, 1)
        validator = MovementValidator(board)
        assert Position(2, 1) in validator.moveable_positions(Position(2, 2))

    def test_cannot_climb_two_levels(self):
        board = Board(5, 5)
        raise_tower(board, 2, 1, 2)
        validator = MovementValidator(board)
        assert Position(2, 1) not in validator.moveable_positions(Position(2, 2))

    def test_can_drop_any_number_of_levels(self):
        board = Board(5, 5)
        raise_tower(board, 2, 2, 3)
        validator = MovementValidator(board)
        assert Position(1, 1) in validator.moveable_positions(Position(2, 2))

    def test_dome_never_moveable(self):
        board = Board(5, 5)
        raise_tower(board, 2, 2, 3)
        raise_tower(board, 2, 1, 4)
        validator = MovementValidator(board)
        assert Position(2, 1) not in validator.moveable_positions(Position(2, 2))

    def test_moveable_targets_respect_climb_rule(self):
        """No moveable target is domed or more than one level up."""
        board = Board(5, 5)
        for i, (x, y) in enumerate([(1, 1), (2, 1), (3, 1), (1, 2), (3, 2)]):
            raise_tower(board, x, y, i)
        raise_tower(board, 2, 2, 1)
        validator = MovementValidator(board)
        current = board.tower_at(Position(2, 2)).height

        for target in validator.moveable_positions(Position(2, 2)):
            tower = board.tower_at(target)
            assert not tower.is_complete
            assert tower.height - current <= 1

    def test_can_move(self):
        board = Board(2, 1)
        raise_tower(board, 1, 0, 4)
        validator = MovementValidator(board)
        assert not validator.can_move(Position(0, 0))
        assert not validator.can_move(None)


class TestBuildablePositions:
    """Tests for build targets."""

    def test_build_on_any_height_below_dome(self):
        board = Board(5, 5)
        raise_tower(board, 1, 1, 3)
        validator = MovementValidator(board)
        assert Position(1, 1) in validator.buildable_positions(Position(2, 2))

    def test_cannot_build_on_dome(self):
        board = Board(5, 5)
        raise_tower(board, 1, 1, 4)
        validator = MovementValidator(board)
        assert Position(1, 1) not in validator.buildable_positions(Position(2, 2))

    def test_cannot_build_under_worker(self):
        board = Board(5, 5)
        board.add_worker(Position(1, 1), Worker(worker_id=0))
        validator = MovementValidator(board)
        assert Position(1, 1) not in validator.buildable_positions(Position(2, 2))


class TestActionGenerator:
    """Tests for legal action enumeration."""

    def test_turn_starts_with_selection(self, two_player_state):
        actions = legal_actions(two_player_state)

        assert all(a.action_type == ActionType.SELECT_WORKER for a in actions)
        assert sorted(a.worker_id for a in actions) == [0, 1]

    def test_moves_follow_selection(self, two_player_state, reducer):
        state = two_player_state
        reducer.apply(state, Action.select_worker(0))

        moves = [a for a in ActionGenerator(reducer).generate(state) if a.action_type == ActionType.MOVE]
        expected = reducer.legal_move_targets(state, state.get_worker(0))
        assert [a.target for a in moves] == expected
        assert all(a.worker_id == 0 for a in moves)

    def test_builds_after_move(self, two_player_state, reducer):
        state = two_player_state
        reducer.apply(state, Action.select_worker(0))
        reducer.apply(state, Action.move(0, Position(2, 2)))

        actions = ActionGenerator(reducer).generate(state)
        assert actions
        assert all(a.action_type == ActionType.BUILD for a in actions)

    def test_opponent_worker_not_legal(self, two_player_state):
        assert not is_legal(two_player_state, Action.select_worker(2))

    def test_generated_actions_are_accepted(self, two_player_state, reducer):
        """Every generated move is accepted by the reducer."""
        state = two_player_state
        reducer.apply(state, Action.select_worker(0))

        for action in legal_actions(state):
            if action.action_type == ActionType.MOVE:
                assert is_legal(state, action)

    def test_no_actions_when_game_over(self, two_player_state):
        two_player_state.winner_index = 0
        assert legal_actions(two_player_state) == []
