"""
Tests for board modifiers.

Tests:
- Standard mode leaves the board alone
- Chaos affected-tower schedule
- Countdown behaviour of individual effects
- Build, destroy and fog effects
"""

import logging
import random

import pytest

from ..engine_core.board import Board
from ..engine_core.state import Position, Worker
from ..modifiers import (
    StandardModifier,
    ChaosModifier,
    ChaosEffect,
    BuildChaos,
    DestroyChaos,
    FogChaos,
    MODIFIERS,
    parse_modifier,
)


def total_height(board: Board) -> int:
    return sum(board.tower_at(p).height for p in board.positions())


class CountingEffect(ChaosEffect):
    """Fires every second tick and records how many towers it was given."""

    minimum_interval = 2
    maximum_interval = 2

    def __init__(self, rng=None):
        super().__init__(rng)
        self.applied = []

    def apply(self, board, affected_towers):
        self.applied.append(affected_towers)
        return [f"counted {affected_towers}"]


class TestStandardModifier:

    def test_does_nothing(self):
        board = Board(5, 5)
        assert StandardModifier().execute(board, 3) == []
        assert total_height(board) == 0


class TestChaosSchedule:
    """The number of affected towers grows with the turn number."""

    @pytest.mark.parametrize("turn, expected", [
        (1, 1),
        (2, 2),
        (5, 2),
        (6, 3),
        (9, 3),
        (40, 3),
    ])
    def test_affected_towers(self, turn, expected):
        assert ChaosModifier.affected_towers(turn) == expected

    def test_effects_receive_affected_count(self):
        effect = CountingEffect(random.Random(0))
        modifier = ChaosModifier(effects=[effect])
        board = Board(5, 5)

        assert modifier.execute(board, 1) == []
        assert modifier.execute(board, 6) == ["counted 3"]
        assert effect.applied == [3]

    def test_default_effects(self):
        modifier = ChaosModifier(rng=random.Random(3))
        assert [type(e) for e in modifier.effects] == [BuildChaos, DestroyChaos, FogChaos]


class TestChaosEffectCountdown:

    def test_countdown_drawn_from_interval(self):
        rng = random.Random(5)
        for _ in range(20):
            assert 1 <= BuildChaos(rng).countdown <= 3
            assert 2 <= DestroyChaos(rng).countdown <= 4
            assert FogChaos(rng).countdown == 1

    def test_fires_then_rearms(self):
        effect = CountingEffect()
        board = Board(3, 3)

        assert effect.tick(board, 1) == []
        assert effect.tick(board, 1) == ["counted 1"]
        assert effect.countdown == 2
        assert effect.tick(board, 1) == []


class TestBuildChaos:

    def test_builds_on_free_cells(self):
        board = Board(5, 5)
        worker = Worker(worker_id=0)
        board.add_worker(Position(2, 2), worker)
        effect = BuildChaos(random.Random(7))
        effect.countdown = 1

        changes = effect.tick(board, 2)

        assert total_height(board) == 2
        assert board.tower_at(Position(2, 2)).height == 0
        assert changes and changes[0].startswith("BOARD CHAOS - Towers have been built at")

    def test_skips_when_board_is_full(self):
        board = Board(1, 1)
        for _ in range(4):
            board.tower_at(Position(0, 0)).build_floor()
        effect = BuildChaos(random.Random(1))
        effect.countdown = 1

        assert effect.tick(board, 3) == []


class TestDestroyChaos:

    def test_destroys_existing_floors(self):
        board = Board(3, 3)
        for _ in range(2):
            board.tower_at(Position(1, 1)).build_floor()
        effect = DestroyChaos(random.Random(2))
        effect.countdown = 1

        changes = effect.tick(board, 1)

        assert board.tower_at(Position(1, 1)).height == 1
        assert changes == ["BOARD CHAOS - Towers have been destroyed at (1,1)!"]

    def test_skips_on_flat_board(self):
        effect = DestroyChaos(random.Random(2))
        effect.countdown = 1

        assert effect.tick(Board(3, 3), 2) == []
        assert 2 <= effect.countdown <= 4


class TestFogChaos:

    def test_fogs_free_cells_without_changing_height(self):
        board = Board(3, 3)
        board.tower_at(Position(0, 0)).build_floor()
        heights = [board.tower_at(p).height for p in board.positions()]
        effect = FogChaos(random.Random(9))

        changes = effect.tick(board, 2)

        fogged = [p for p in board.positions() if board.tower_at(p).fogged]
        assert 1 <= len(fogged) <= 2
        assert set(fogged) == set(effect.fogged_positions)
        assert [board.tower_at(p).height for p in board.positions()] == heights
        assert changes == ["FOG CHAOS - Random positions have been covered by fog!"]

    def test_never_fogs_occupied_cells(self):
        board = Board(2, 1)
        board.add_worker(Position(0, 0), Worker(worker_id=0))
        effect = FogChaos(random.Random(4))

        effect.tick(board, 3)

        assert not board.tower_at(Position(0, 0)).fogged
        assert board.tower_at(Position(1, 0)).fogged

    def test_fog_lifts_after_duration(self):
        board = Board(1, 1)
        effect = FogChaos(random.Random(0))
        effect.tick(board, 1)
        assert board.tower_at(Position(0, 0)).fogged

        # Stop new fog so only the expiry is observed
        effect.countdown = 100
        for _ in range(FogChaos.FOG_DURATION - 1):
            effect.tick(board, 1)
            assert board.tower_at(Position(0, 0)).fogged

        effect.tick(board, 1)
        assert not board.tower_at(Position(0, 0)).fogged
        assert effect.fogged_positions == {}

    def test_refog_extends_duration(self):
        board = Board(1, 1)
        effect = FogChaos(random.Random(0))
        effect.tick(board, 1)
        effect.tick(board, 1)

        assert effect.fogged_positions[Position(0, 0)] == 2 * FogChaos.FOG_DURATION - 1


class TestModifierRegistry:

    def test_registry_names(self):
        assert set(MODIFIERS) == {"standard", "chaos"}

    def test_parse_modifier(self):
        assert isinstance(parse_modifier("standard"), StandardModifier)
        assert isinstance(parse_modifier("chaos", rng=random.Random(1)), ChaosModifier)

    def test_parse_unknown_modifier_warns(self, caplog):
        with caplog.at_level(logging.WARNING):
            assert parse_modifier("earthquake") is None
        assert "earthquake" in caplog.text
