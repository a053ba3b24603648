"""
Game engine: eight-round turn sequencing for the cooperative bingo game.

States: waiting -> player-turn <-> computer-turn -> game-over

The engine is the only owner and mutator of the canonical board. Everything it
hands out (board, stats, suggestions) is a copy or an immutable snapshot.
Rejected operations raise a MoveError subclass and leave state untouched.
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from types import MappingProxyType
from typing import Callable, Dict, List, Mapping, Optional, Tuple, Union

from .errors import CellOccupied, GameOver, InvalidPhase, InvalidPosition
from .game import (
    BOARD_SIZE,
    MAX_ROUNDS,
    Board,
    CellState,
    Position,
    apply_move,
    copy_board,
    create_empty_board,
    empty_cells,
    is_empty,
    is_valid_position,
)
from .lines import Line, LineDetector, count_lines_by_type
from .movelog import Actor, MoveLog, MoveRecord
from .scorer import MoveScorer, Variant, weights_for
from .suggest import Suggestion, suggest as suggest_move

logger = logging.getLogger(__name__)


class GamePhase(str, Enum):
    WAITING = "waiting"
    PLAYER_TURN = "player-turn"
    COMPUTER_TURN = "computer-turn"
    GAME_OVER = "game-over"


class EventType(str, Enum):
    MOVE_APPLIED = "move-applied"
    ROUND_COMPLETE = "round-complete"
    GAME_COMPLETE = "game-complete"
    STATE_CHANGE = "state-change"


# (minimum completed lines, grade), best first
OUTCOME_GRADES = ((6, "excellent"), (4, "good"), (2, "average"))


def grade_outcome(total_lines: int) -> str:
    for minimum, grade in OUTCOME_GRADES:
        if total_lines >= minimum:
            return grade
    return "poor"


@dataclass
class EngineConfig:
    """Engine configuration."""

    # Scorer
    variant: str = Variant.STANDARD.value
    cache_size: int = 200
    metrics_window: int = 100

    # Game length
    max_rounds: int = MAX_ROUNDS

    # Compute a suggestion whenever a player turn begins
    auto_suggest: bool = True


@dataclass(frozen=True)
class GameStats:
    """Read-only snapshot of the engine's statistics."""
    current_round: int
    total_rounds: int
    phase: GamePhase
    player_moves: Tuple[Position, ...]
    computer_moves: Tuple[Position, ...]
    completed_lines: Tuple[Line, ...]
    lines_by_type: Mapping[str, int]
    remaining_moves: Tuple[Position, ...]
    outcome: Optional[str] = None

    @property
    def total_lines(self) -> int:
        return len(self.completed_lines)

    @property
    def is_complete(self) -> bool:
        return self.phase == GamePhase.GAME_OVER

    def to_dict(self) -> dict:
        return {
            "currentRound": self.current_round,
            "totalRounds": self.total_rounds,
            "gamePhase": self.phase.value,
            "playerMoves": [list(p) for p in self.player_moves],
            "computerMoves": [list(p) for p in self.computer_moves],
            "completedLines": [line.to_dict() for line in self.completed_lines],
            "totalLines": self.total_lines,
            "linesByType": dict(self.lines_by_type),
            "remainingMoves": len(self.remaining_moves),
            "isGameComplete": self.is_complete,
            "outcome": self.outcome,
        }


@dataclass(frozen=True)
class Event:
    """Payload handed to observers. `move` is set for move-applied only."""
    type: EventType
    stats: GameStats
    move: Optional[MoveRecord] = None
    round: Optional[int] = None


@dataclass(frozen=True)
class SimulatedMove:
    """Result of a hypothetical move; the engine's own board is not touched."""
    board: Board
    completed_lines: Tuple[Line, ...]
    new_lines: int

    @property
    def total_lines(self) -> int:
        return len(self.completed_lines)


Observer = Callable[[Event], None]


class GameEngine:
    """
    Owns one board, one move log and one scorer.

    Observers registered with `subscribe` are called synchronously, in
    registration order, after the engine state has been updated.
    """

    def __init__(
        self,
        scorer: Optional[MoveScorer] = None,
        detector: Optional[LineDetector] = None,
        config: Optional[EngineConfig] = None,
    ):
        self.config = replace(config) if config is not None else EngineConfig()
        if not 1 <= self.config.max_rounds <= (BOARD_SIZE * BOARD_SIZE) // 2:
            raise ValueError(f"max_rounds out of range: {self.config.max_rounds}")

        if scorer is None:
            scorer = self._make_scorer(self.config.variant)
        self.scorer = scorer
        self.detector = detector or LineDetector()

        self._observers: Dict[EventType, List[Observer]] = {t: [] for t in EventType}
        self._clear_game(GamePhase.WAITING)

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def subscribe(self, event_type: Union[EventType, str], callback: Observer) -> None:
        self._observers[EventType(event_type)].append(callback)

    def unsubscribe(self, event_type: Union[EventType, str], callback: Observer) -> None:
        """Remove a callback. Raises ValueError if it was never subscribed."""
        self._observers[EventType(event_type)].remove(callback)

    def _emit(self, event_type: EventType, stats: GameStats,
              move: Optional[MoveRecord] = None, round: Optional[int] = None) -> None:
        event = Event(type=event_type, stats=stats, move=move, round=round)
        for callback in list(self._observers[event_type]):
            callback(event)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def start(self) -> GameStats:
        """Begin a new game at the player turn of round 1."""
        self._clear_game(GamePhase.PLAYER_TURN)
        self._refresh_suggestion()
        logger.info("Game started (%s variant)", self.scorer.weights.name)

        stats = self.stats()
        self._emit(EventType.STATE_CHANGE, stats)
        return stats

    def reset(self) -> GameStats:
        """Return to the waiting state from anywhere and clear the scorer cache."""
        self._clear_game(GamePhase.WAITING)
        self.scorer.clear_cache()
        logger.info("Game reset")

        stats = self.stats()
        self._emit(EventType.STATE_CHANGE, stats)
        return stats

    def apply_player_move(self, row: int, col: int) -> GameStats:
        """
        Mark (row, col) for the player and hand the turn to the computer.

        Raises:
            GameOver, InvalidPhase, InvalidPosition, CellOccupied
        """
        self._check_move(GamePhase.PLAYER_TURN, Actor.PLAYER, row, col)

        record = self._place(Actor.PLAYER, row, col)
        self._phase = GamePhase.COMPUTER_TURN
        self._last_suggestion = None

        stats = self.stats()
        self._emit(EventType.MOVE_APPLIED, stats, move=record, round=record.round)
        self._emit(EventType.STATE_CHANGE, stats)
        return stats

    def apply_computer_move(self, row: int, col: int) -> GameStats:
        """
        Mark (row, col) for the computer and close the round.

        After the final round the engine moves to game-over; otherwise the next
        round starts with the player turn.

        Raises:
            GameOver, InvalidPhase, InvalidPosition, CellOccupied
        """
        self._check_move(GamePhase.COMPUTER_TURN, Actor.COMPUTER, row, col)

        record = self._place(Actor.COMPUTER, row, col)
        finished_round = self._round
        if finished_round >= self.config.max_rounds:
            self._phase = GamePhase.GAME_OVER
        else:
            self._round += 1
            self._phase = GamePhase.PLAYER_TURN
            self._refresh_suggestion()

        stats = self.stats()
        self._emit(EventType.ROUND_COMPLETE, stats, round=finished_round)
        if self._phase == GamePhase.GAME_OVER:
            logger.info("Game over: %d lines completed (%s)", stats.total_lines, stats.outcome)
            self._emit(EventType.GAME_COMPLETE, stats, round=finished_round)
        self._emit(EventType.STATE_CHANGE, stats)
        return stats

    def _check_move(self, expected: GamePhase, actor: Actor, row: int, col: int) -> None:
        if self._phase == GamePhase.GAME_OVER:
            raise GameOver(f"game finished after round {self.config.max_rounds}")
        if self._phase != expected:
            raise InvalidPhase(f"{actor.value} move not allowed during {self._phase.value}")
        if not is_valid_position(row, col):
            raise InvalidPosition(f"position ({row}, {col}) is off the board")
        if self._board[row][col] != CellState.EMPTY:
            raise CellOccupied(f"cell ({row}, {col}) is already marked")

    def _place(self, actor: Actor, row: int, col: int) -> MoveRecord:
        row, col = int(row), int(col)
        state = CellState.PLAYER if actor == Actor.PLAYER else CellState.COMPUTER
        self._board[row][col] = state.value
        record = MoveRecord(round=self._round, actor=actor, row=row, col=col)
        self._log.append(record)
        logger.debug("Round %d: %s marked (%d, %d)", record.round, actor.value, row, col)

        previous = len(self._completed)
        self._completed = tuple(self.detector.all_completed_lines(self._board))
        if len(self._completed) > previous:
            logger.info("Completed %d new line(s), %d total",
                        len(self._completed) - previous, len(self._completed))
        return record

    def _clear_game(self, phase: GamePhase) -> None:
        self._board = create_empty_board()
        self._phase = phase
        self._round = 1
        self._log = MoveLog()
        self._completed: Tuple[Line, ...] = ()
        self._last_suggestion: Optional[Suggestion] = None

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def board(self) -> Board:
        """Defensive copy of the board."""
        return copy_board(self._board)

    @property
    def phase(self) -> GamePhase:
        return self._phase

    @property
    def current_round(self) -> int:
        return self._round

    @property
    def move_log(self) -> MoveLog:
        return self._log.copy()

    @property
    def last_suggestion(self) -> Optional[Suggestion]:
        """Suggestion computed when the current player turn began."""
        return self._last_suggestion

    @property
    def can_player_move(self) -> bool:
        return self._phase == GamePhase.PLAYER_TURN

    @property
    def can_input_computer_move(self) -> bool:
        return self._phase == GamePhase.COMPUTER_TURN

    @property
    def progress(self) -> int:
        """Percentage of rounds finished, 0..100."""
        done = len(self._log.positions(Actor.COMPUTER))
        return round(done / self.config.max_rounds * 100)

    def stats(self) -> GameStats:
        over = self._phase == GamePhase.GAME_OVER
        return GameStats(
            current_round=self._round,
            total_rounds=self.config.max_rounds,
            phase=self._phase,
            player_moves=tuple(self._log.positions(Actor.PLAYER)),
            computer_moves=tuple(self._log.positions(Actor.COMPUTER)),
            completed_lines=self._completed,
            lines_by_type=MappingProxyType(count_lines_by_type(self._completed)),
            remaining_moves=tuple(empty_cells(self._board)),
            outcome=grade_outcome(len(self._completed)) if over else None,
        )

    def suggest(self) -> Optional[Suggestion]:
        """Rank the current board's empty cells; None when the board is full."""
        return suggest_move(self._board, self.scorer)

    def simulate_move(self, row: int, col: int,
                      actor: Union[Actor, str] = Actor.PLAYER) -> Optional[SimulatedMove]:
        """Lines that marking (row, col) would produce, or None for an illegal cell."""
        if not is_empty(self._board, row, col):
            return None
        state = CellState.PLAYER if Actor(actor) == Actor.PLAYER else CellState.COMPUTER
        test_board = apply_move(self._board, row, col, state)
        lines = tuple(self.detector.all_completed_lines(test_board))
        return SimulatedMove(board=test_board, completed_lines=lines,
                             new_lines=len(lines) - len(self._completed))

    # ------------------------------------------------------------------
    # Variants
    # ------------------------------------------------------------------

    @property
    def variant(self) -> Optional[Variant]:
        return self.scorer.variant

    def set_variant(self, variant: Union[Variant, str]) -> None:
        """Swap in a fresh scorer for `variant`; its cache starts empty."""
        variant = Variant(variant)
        self.config.variant = variant.value
        self.scorer = self._make_scorer(variant, clock=self.scorer.clock)
        self._refresh_suggestion()
        logger.info("Scoring variant set to %s", variant.value)

    def _make_scorer(self, variant, clock=None) -> MoveScorer:
        kwargs = {"clock": clock} if clock is not None else {}
        return MoveScorer(
            weights_for(variant),
            cache_size=self.config.cache_size,
            metrics_window=self.config.metrics_window,
            **kwargs,
        )

    def _refresh_suggestion(self) -> None:
        if self._phase == GamePhase.PLAYER_TURN and self.config.auto_suggest:
            self._last_suggestion = self.suggest()
        else:
            self._last_suggestion = None
