"""Tests for the eight-round game engine."""

import numpy as np
import pytest

from bingo.engine import EngineConfig, EventType, GameEngine, GamePhase, grade_outcome
from bingo.errors import (
    CellOccupied,
    ErrorKind,
    GameOver,
    InvalidPhase,
    InvalidPosition,
    MoveError,
)
from bingo.game import empty_cells, is_empty
from bingo.lines import LineType
from bingo.movelog import Actor
from bingo.scorer import Variant

from conftest import FULL_GAME, play_moves


class Recorder:
    """Collects (type, round) for every event the engine emits."""

    def __init__(self, engine):
        self.events = []
        for t in EventType:
            engine.subscribe(t, self.events.append)

    @property
    def kinds(self):
        return [(e.type, e.round) for e in self.events]


class TestLifecycle:
    def test_new_engine_is_waiting(self, engine):
        assert engine.phase == GamePhase.WAITING
        assert not engine.can_player_move
        assert not engine.can_input_computer_move

    def test_start(self, engine):
        stats = engine.start()
        assert engine.phase == GamePhase.PLAYER_TURN
        assert stats.current_round == 1
        assert stats.total_rounds == 8
        assert len(stats.remaining_moves) == 25
        assert engine.can_player_move

    def test_start_computes_suggestion(self, started_engine):
        s = started_engine.last_suggestion
        assert (s.row, s.col) == (2, 2)

    def test_no_auto_suggest(self):
        engine = GameEngine(config=EngineConfig(auto_suggest=False))
        engine.start()
        assert engine.last_suggestion is None
        assert engine.suggest() is not None

    def test_turns_alternate(self, started_engine):
        started_engine.apply_player_move(2, 2)
        assert started_engine.phase == GamePhase.COMPUTER_TURN
        assert started_engine.last_suggestion is None
        started_engine.apply_computer_move(0, 0)
        assert started_engine.phase == GamePhase.PLAYER_TURN
        assert started_engine.current_round == 2
        assert started_engine.last_suggestion is not None

    def test_restart_mid_game(self, started_engine):
        started_engine.apply_player_move(0, 0)
        started_engine.start()
        assert started_engine.board[0][0] == 0
        assert len(started_engine.move_log) == 0
        assert started_engine.phase == GamePhase.PLAYER_TURN

    def test_reset_clears_game_and_cache(self, started_engine):
        started_engine.apply_player_move(0, 0)
        assert started_engine.scorer.cache_size > 0
        stats = started_engine.reset()
        assert stats.phase == GamePhase.WAITING
        assert started_engine.scorer.cache_size == 0
        assert started_engine.board == [[0] * 5 for _ in range(5)]
        assert started_engine.last_suggestion is None


class TestFullGame:
    def test_reaches_game_over(self, started_engine):
        play_moves(started_engine, FULL_GAME)
        stats = started_engine.stats()
        assert stats.phase == GamePhase.GAME_OVER
        assert stats.is_complete
        assert stats.current_round == 8
        assert len(stats.player_moves) == 8
        assert len(stats.computer_moves) == 8

    def test_completed_lines(self, started_engine):
        play_moves(started_engine, FULL_GAME)
        lines = started_engine.stats().completed_lines
        assert [(l.type, l.index) for l in lines] == [
            (LineType.HORIZONTAL, 0),
            (LineType.HORIZONTAL, 1),
            (LineType.VERTICAL, 0),
            (LineType.DIAGONAL_ANTI, None),
        ]

    def test_stats_dict(self, started_engine):
        play_moves(started_engine, FULL_GAME)
        d = started_engine.stats().to_dict()
        assert d["gamePhase"] == "game-over"
        assert d["totalLines"] == 4
        assert d["linesByType"] == {
            "horizontal": 2, "vertical": 1, "diagonal-main": 0, "diagonal-anti": 1,
        }
        assert d["remainingMoves"] == 9
        assert d["isGameComplete"] is True
        assert d["outcome"] == "good"
        assert d["playerMoves"][0] == [0, 0]

    def test_moves_after_game_over_fail(self, started_engine):
        play_moves(started_engine, FULL_GAME)
        with pytest.raises(GameOver):
            started_engine.apply_player_move(4, 4)
        with pytest.raises(GameOver):
            started_engine.apply_computer_move(4, 4)

    def test_game_over_checked_before_position(self, started_engine):
        play_moves(started_engine, FULL_GAME)
        with pytest.raises(GameOver) as exc:
            started_engine.apply_player_move(9, 9)
        assert exc.value.kind == ErrorKind.GAME_OVER
        assert not exc.value.retryable

    def test_round_numbers_in_log(self, started_engine):
        play_moves(started_engine, FULL_GAME)
        rounds = [r.round for r in started_engine.move_log]
        assert rounds == [n for n in range(1, 9) for _ in range(2)]
        assert [r.actor for r in started_engine.move_log][:2] == [Actor.PLAYER, Actor.COMPUTER]

    def test_progress(self, started_engine):
        assert started_engine.progress == 0
        play_moves(started_engine, FULL_GAME[:4])
        assert started_engine.progress == 25
        play_moves(started_engine, FULL_GAME[4:])
        assert started_engine.progress == 100

    def test_short_game(self):
        engine = GameEngine(config=EngineConfig(max_rounds=2))
        engine.start()
        play_moves(engine, FULL_GAME[:4])
        assert engine.phase == GamePhase.GAME_OVER
        assert engine.stats().outcome == "poor"

    @pytest.mark.parametrize("rounds", [0, 13])
    def test_bad_round_count(self, rounds):
        with pytest.raises(ValueError):
            GameEngine(config=EngineConfig(max_rounds=rounds))


class TestIllegalMoves:
    def test_rejection_sequence(self, started_engine):
        started_engine.apply_player_move(0, 0)
        before = started_engine.stats().to_dict()
        board = started_engine.board

        with pytest.raises(InvalidPhase):
            started_engine.apply_player_move(1, 1)
        with pytest.raises(CellOccupied):
            started_engine.apply_computer_move(0, 0)
        with pytest.raises(InvalidPosition):
            started_engine.apply_computer_move(5, 0)

        assert started_engine.board == board
        assert started_engine.stats().to_dict() == before
        assert len(started_engine.move_log) == 1

    def test_moves_before_start(self, engine):
        with pytest.raises(InvalidPhase):
            engine.apply_player_move(0, 0)
        with pytest.raises(InvalidPhase):
            engine.apply_computer_move(0, 0)

    def test_phase_checked_before_position(self, started_engine):
        with pytest.raises(InvalidPhase):
            started_engine.apply_computer_move(-1, 0)

    def test_errors_are_move_errors(self, started_engine):
        with pytest.raises(MoveError) as exc:
            started_engine.apply_player_move(0, 7)
        assert exc.value.kind == ErrorKind.INVALID_POSITION
        assert exc.value.retryable
        assert exc.value.to_dict()["kind"] == "invalid-position"

    def test_failed_move_emits_nothing(self, started_engine):
        rec = Recorder(started_engine)
        with pytest.raises(InvalidPosition):
            started_engine.apply_player_move(5, 5)
        assert rec.events == []


class TestEvents:
    def test_start_emits_state_change(self, engine):
        rec = Recorder(engine)
        engine.start()
        assert rec.kinds == [(EventType.STATE_CHANGE, None)]

    def test_round_events(self, started_engine):
        rec = Recorder(started_engine)
        started_engine.apply_player_move(2, 2)
        started_engine.apply_computer_move(0, 0)
        assert rec.kinds == [
            (EventType.MOVE_APPLIED, 1),
            (EventType.STATE_CHANGE, None),
            (EventType.ROUND_COMPLETE, 1),
            (EventType.STATE_CHANGE, None),
        ]
        move = rec.events[0].move
        assert (move.actor, move.row, move.col) == (Actor.PLAYER, 2, 2)

    def test_final_round_events(self, started_engine):
        play_moves(started_engine, FULL_GAME[:-1])
        rec = Recorder(started_engine)
        started_engine.apply_computer_move(2, 2)
        assert rec.kinds == [
            (EventType.ROUND_COMPLETE, 8),
            (EventType.GAME_COMPLETE, 8),
            (EventType.STATE_CHANGE, None),
        ]
        assert rec.events[1].stats.outcome == "good"

    def test_callbacks_see_updated_state(self, started_engine):
        seen = []
        started_engine.subscribe(
            EventType.MOVE_APPLIED,
            lambda e: seen.append((e.stats.phase, started_engine.board[1][1])),
        )
        started_engine.apply_player_move(1, 1)
        assert seen == [(GamePhase.COMPUTER_TURN, 1)]

    def test_registration_order(self, started_engine):
        order = []
        started_engine.subscribe("state-change", lambda e: order.append("a"))
        started_engine.subscribe(EventType.STATE_CHANGE, lambda e: order.append("b"))
        started_engine.apply_player_move(0, 0)
        assert order == ["a", "b"]

    def test_unsubscribe(self, started_engine):
        calls = []
        cb = calls.append
        started_engine.subscribe(EventType.STATE_CHANGE, cb)
        started_engine.unsubscribe(EventType.STATE_CHANGE, cb)
        started_engine.apply_player_move(0, 0)
        assert calls == []
        with pytest.raises(ValueError):
            started_engine.unsubscribe(EventType.STATE_CHANGE, cb)


def check_invariants(engine, previous_lines):
    """Assert per-move game invariants; returns the current completed lines."""
    stats = engine.stats()
    r = stats.current_round
    players, computers = len(stats.player_moves), len(stats.computer_moves)
    if stats.phase == GamePhase.PLAYER_TURN:
        assert (players, computers) == (r - 1, r - 1)
    elif stats.phase == GamePhase.COMPUTER_TURN:
        assert (players, computers) == (r, r - 1)
    else:
        assert (players, computers) == (r, r)

    assert set(previous_lines) <= set(stats.completed_lines)

    board = engine.board
    s = engine.suggest()
    if s is not None:
        for move in (s,) + s.alternatives:
            assert is_empty(board, move.row, move.col)
    return stats.completed_lines


class TestInvariantsDuringPlay:
    def test_full_game_move_by_move(self, started_engine):
        lines = check_invariants(started_engine, ())
        for move in FULL_GAME:
            play_moves(started_engine, [move])
            lines = check_invariants(started_engine, lines)
        assert started_engine.phase == GamePhase.GAME_OVER

    @pytest.mark.parametrize("seed", [0, 1, 2, 3])
    def test_random_games(self, seed):
        rng = np.random.default_rng(seed)
        engine = GameEngine()
        engine.start()
        lines = check_invariants(engine, ())
        while engine.phase != GamePhase.GAME_OVER:
            cells = empty_cells(engine.board)
            r, c = cells[int(rng.integers(0, len(cells)))]
            if engine.phase == GamePhase.PLAYER_TURN:
                engine.apply_player_move(r, c)
            else:
                engine.apply_computer_move(r, c)
            lines = check_invariants(engine, lines)
        assert len(engine.move_log) == 16


class TestQueries:
    def test_board_is_a_copy(self, started_engine):
        board = started_engine.board
        board[0][0] = 2
        assert started_engine.board[0][0] == 0

    def test_move_log_is_a_copy(self, started_engine):
        started_engine.apply_player_move(0, 0)
        log = started_engine.move_log
        log.records.clear()
        assert len(started_engine.move_log) == 1

    def test_simulate_move(self, started_engine):
        play_moves(started_engine, [("P", 0, 0), ("C", 0, 1), ("P", 0, 2), ("C", 0, 3)])
        board = started_engine.board
        sim = started_engine.simulate_move(0, 4)
        assert sim.new_lines == 1
        assert sim.total_lines == 1
        assert sim.board[0][4] == 1
        assert started_engine.board == board
        assert started_engine.simulate_move(0, 4, "computer").board[0][4] == 2

    def test_simulate_illegal_move(self, started_engine):
        started_engine.apply_player_move(0, 0)
        assert started_engine.simulate_move(0, 0) is None
        assert started_engine.simulate_move(5, 0) is None


class TestVariants:
    def test_default_is_standard(self, engine):
        assert engine.variant == Variant.STANDARD

    def test_set_variant_refreshes_suggestion(self, started_engine):
        assert started_engine.last_suggestion.value == 85
        started_engine.set_variant("enhanced")
        assert started_engine.variant == Variant.ENHANCED
        assert started_engine.config.variant == "enhanced"
        assert started_engine.last_suggestion.value == 148

    def test_set_variant_replaces_cache(self, started_engine):
        old = started_engine.scorer
        started_engine.set_variant(Variant.ENHANCED)
        assert started_engine.scorer is not old
        assert started_engine.scorer.performance().cache_hits == 0

    def test_set_variant_during_computer_turn(self, started_engine):
        started_engine.apply_player_move(2, 2)
        started_engine.set_variant("enhanced")
        assert started_engine.last_suggestion is None

    def test_engines_do_not_share_config(self):
        """Two engines built from one config keep separate variants."""
        config = EngineConfig()
        a = GameEngine(config=config)
        b = GameEngine(config=config)
        a.set_variant("enhanced")
        assert a.config.variant == "enhanced"
        assert b.config.variant == "standard"
        assert b.variant == Variant.STANDARD
        assert config.variant == "standard"

    def test_unknown_variant(self, engine):
        with pytest.raises(ValueError):
            engine.set_variant("greedy")


@pytest.mark.parametrize("lines,grade", [
    (0, "poor"), (1, "poor"), (2, "average"), (3, "average"),
    (4, "good"), (5, "good"), (6, "excellent"), (12, "excellent"),
])
def test_grade_outcome(lines, grade):
    assert grade_outcome(lines) == grade
