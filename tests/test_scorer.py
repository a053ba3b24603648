"""Tests for the move evaluator."""

import pytest

from bingo.game import CellState, apply_move, board_hash
from bingo.scorer import (
    ENHANCED_WEIGHTS,
    INVALID_MOVE_VALUE,
    STANDARD_WEIGHTS,
    MoveScorer,
    Variant,
    score_breakdown,
    weights_for,
)
from bingo.symmetries import get_all_symmetries, transform_position


class FakeClock:
    def __init__(self, ticks):
        self.ticks = list(ticks)

    def __call__(self):
        return self.ticks.pop(0)


class TestWeights:
    def test_lookup_by_name(self):
        assert weights_for("standard") is STANDARD_WEIGHTS
        assert weights_for(Variant.ENHANCED) is ENHANCED_WEIGHTS

    def test_unknown_variant(self):
        with pytest.raises(ValueError):
            weights_for("aggressive")

    def test_standard_has_no_position_bonuses(self):
        assert STANDARD_WEIGHTS.intersection_bonus == 0
        assert STANDARD_WEIGHTS.strategic_position == 0

    def test_scorer_accepts_variant_name(self):
        assert MoveScorer("enhanced").variant == Variant.ENHANCED


class TestEmptyBoardValues:
    @pytest.mark.parametrize("r,c,expected", [
        (2, 2, 85), (0, 0, 60), (1, 1, 60), (0, 1, 40), (0, 2, 40),
    ])
    def test_standard(self, standard_scorer, empty_board, r, c, expected):
        assert standard_scorer.value(empty_board, r, c) == expected

    @pytest.mark.parametrize("r,c,expected", [
        (2, 2, 148), (0, 0, 122), (1, 1, 110), (0, 2, 72), (0, 1, 60),
    ])
    def test_enhanced(self, enhanced_scorer, empty_board, r, c, expected):
        assert enhanced_scorer.value(empty_board, r, c) == expected


class TestCompletion:
    def test_completing_move_standard(self, standard_scorer, near_row_board):
        """Completion 100, cooperative 50 x 2, and two open lines at 20 each."""
        assert standard_scorer.value(near_row_board, 0, 4) == 240

    def test_completing_move_enhanced(self, enhanced_scorer, near_row_board):
        assert enhanced_scorer.value(near_row_board, 0, 4) == 352

    def test_breakdown_components(self, standard_scorer, near_row_board):
        b = standard_scorer.breakdown(near_row_board, 0, 4)
        assert b.completion == 100
        assert b.cooperative == 100
        assert b.potential == 40
        assert b.center == 0
        assert b.total == 240
        assert b.to_dict()["total"] == 240

    def test_completion_is_additive(self, standard_scorer):
        """Filling (4, 4) on an otherwise full board completes three lines."""
        board = [[1, 2, 1, 2, 1] for _ in range(5)]
        board[4][4] = 0
        assert standard_scorer.value(board, 4, 4) == 600

    def test_mixed_marks_count_as_filled(self, standard_scorer, empty_board):
        board = empty_board
        for c, state in enumerate([CellState.PLAYER, CellState.COMPUTER,
                                   CellState.PLAYER, CellState.COMPUTER]):
            board = apply_move(board, 0, c, state)
        assert standard_scorer.value(board, 0, 4) == 240

    def test_cooperative_factors(self, empty_board):
        """One filled cell in the row is worth half the cooperative weight."""
        board = apply_move(empty_board, 0, 0, CellState.PLAYER)
        b = score_breakdown(board, 0, 1, STANDARD_WEIGHTS)
        assert b.cooperative == 25
        assert b.potential == 30 + 20


class TestInvalidMoves:
    def test_occupied_cell(self, standard_scorer, near_row_board):
        assert standard_scorer.value(near_row_board, 0, 0) == INVALID_MOVE_VALUE

    @pytest.mark.parametrize("r,c", [(-1, 0), (0, 5), (5, 5)])
    def test_off_board(self, standard_scorer, empty_board, r, c):
        assert standard_scorer.value(empty_board, r, c) == -1

    def test_invalid_is_not_cached(self, standard_scorer, near_row_board):
        standard_scorer.value(near_row_board, 0, 0)
        assert standard_scorer.cache_size == 0
        assert standard_scorer.metrics.lookups == 0

    def test_breakdown_none_for_illegal(self, standard_scorer, near_row_board):
        assert standard_scorer.breakdown(near_row_board, 0, 0) is None

    def test_values_never_negative(self, enhanced_scorer, near_row_board):
        for r in range(5):
            for c in range(5):
                v = enhanced_scorer.value(near_row_board, r, c)
                assert v == -1 or v >= 0


class TestMemoization:
    def test_second_lookup_is_a_hit(self, standard_scorer, empty_board):
        first = standard_scorer.value(empty_board, 2, 2)
        second = standard_scorer.value(empty_board, 2, 2)
        assert first == second
        perf = standard_scorer.performance()
        assert perf.cache_hits == 1
        assert perf.cache_misses == 1
        assert perf.hit_rate == 50.0
        assert perf.cache_size == 1

    def test_cache_is_bounded(self, empty_board):
        scorer = MoveScorer(STANDARD_WEIGHTS, cache_size=2)
        scorer.value(empty_board, 0, 0)
        scorer.value(empty_board, 0, 1)
        scorer.value(empty_board, 0, 2)
        assert scorer.cache_size == 2
        scorer.value(empty_board, 0, 0)
        assert scorer.performance().cache_misses == 4

    def test_key_includes_board(self, standard_scorer, empty_board, near_row_board):
        standard_scorer.value(empty_board, 0, 4)
        assert standard_scorer.value(near_row_board, 0, 4) == 240
        assert standard_scorer.performance().cache_hits == 0

    def test_caches_are_private(self, empty_board):
        a = MoveScorer(STANDARD_WEIGHTS)
        b = MoveScorer(STANDARD_WEIGHTS)
        a.value(empty_board, 2, 2)
        assert b.cache_size == 0

    def test_clear_cache(self, standard_scorer, empty_board):
        standard_scorer.value(empty_board, 2, 2)
        standard_scorer.clear_cache()
        assert standard_scorer.cache_size == 0
        standard_scorer.value(empty_board, 2, 2)
        assert standard_scorer.performance().cache_misses == 2

    def test_timing_uses_clock(self, empty_board):
        clock = FakeClock([1.0, 1.004, 2.0, 2.002])
        scorer = MoveScorer(STANDARD_WEIGHTS, clock=clock)
        scorer.value(empty_board, 0, 0)
        scorer.value(empty_board, 0, 1)
        scorer.value(empty_board, 0, 0)  # hit, not timed
        assert scorer.performance().average_time_ms == pytest.approx(3.0)
        assert scorer.performance().to_dict()["averageCalculationTime"] == "3.00ms"

    def test_reset_metrics_keeps_cache(self, standard_scorer, empty_board):
        standard_scorer.value(empty_board, 2, 2)
        standard_scorer.reset_metrics()
        assert standard_scorer.performance().cache_misses == 0
        assert standard_scorer.cache_size == 1


@pytest.mark.parametrize("weights", [STANDARD_WEIGHTS, ENHANCED_WEIGHTS])
def test_values_invariant_under_symmetry(weights):
    board = [
        [1, 2, 0, 0, 1],
        [0, 1, 0, 2, 0],
        [0, 0, 0, 0, 0],
        [2, 0, 1, 0, 0],
        [0, 0, 0, 2, 0],
    ]
    for k, sym in enumerate(get_all_symmetries(board)):
        for r in range(5):
            for c in range(5):
                if board[r][c] != 0:
                    continue
                tr, tc = transform_position(r, c, k)
                assert sym[tr][tc] == 0
                assert (score_breakdown(sym, tr, tc, weights).total
                        == score_breakdown(board, r, c, weights).total)


def test_board_hash_is_cache_key(standard_scorer, empty_board):
    standard_scorer.value(empty_board, 1, 1)
    assert (board_hash(empty_board), 1, 1) in standard_scorer._cache
