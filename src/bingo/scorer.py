"""
Move evaluator: maps (board, row, col) to a non-negative heuristic value.

The score of marking (row, col) is the sum of:
  1. completion:  COMPLETE_LINE for every incident line the move completes
  2. cooperative: per incident line on the pre-move board with f filled and at
                  least one empty cell, COOPERATIVE_LINE x 2 (f == 4),
                  x 1 (f in 2..3) or x 0.5 (f == 1)
  3. potential:   per incident line still open after the move,
                  (f + 1) x POTENTIAL_LINE with f counted post-move
  4. centre:      CENTER_BONUS at (2, 2)
  5. enhanced:    INTERSECTION_BONUS on either diagonal, STRATEGIC_POSITION on
                  the four corners and the four axis midpoints

Variants are plain weight records; the Standard set has zero intersection and
strategic weights, so one code path serves both.
"""

import time
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Callable, Dict, Optional, Tuple, Union

from .cache import LRUCache
from .game import BOARD_SIZE, Board, CellState, apply_move, board_hash, is_center, is_empty
from .lines import count_filled, is_line_complete, lines_through_cell
from .metrics import MetricsSnapshot, ScorerMetrics

INVALID_MOVE_VALUE = -1.0

STRATEGIC_POSITIONS = frozenset({
    (0, 0), (0, 4), (4, 0), (4, 4),  # corners
    (0, 2), (2, 0), (2, 4), (4, 2),  # axis midpoints
})


class Variant(str, Enum):
    STANDARD = "standard"
    ENHANCED = "enhanced"


@dataclass(frozen=True)
class Weights:
    """Named weight set driving the scorer."""

    name: str

    # Line weights
    complete_line: float
    cooperative_line: float
    potential_line: float

    # Position bonuses
    center_bonus: float
    intersection_bonus: float = 0.0
    strategic_position: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


STANDARD_WEIGHTS = Weights(
    name=Variant.STANDARD.value,
    complete_line=100,
    cooperative_line=50,
    potential_line=10,
    center_bonus=5,
)

ENHANCED_WEIGHTS = Weights(
    name=Variant.ENHANCED.value,
    complete_line=120,
    cooperative_line=70,
    potential_line=15,
    center_bonus=8,
    intersection_bonus=20,
    strategic_position=12,
)

VARIANT_WEIGHTS: Dict[Variant, Weights] = {
    Variant.STANDARD: STANDARD_WEIGHTS,
    Variant.ENHANCED: ENHANCED_WEIGHTS,
}


def weights_for(variant: Union[Variant, str]) -> Weights:
    """Look up a weight set by Variant or by its name ("standard"/"enhanced")."""
    return VARIANT_WEIGHTS[Variant(variant)]


def on_diagonal(row: int, col: int) -> bool:
    return row == col or row + col == BOARD_SIZE - 1


@dataclass(frozen=True)
class ScoreBreakdown:
    completion: float = 0.0
    cooperative: float = 0.0
    potential: float = 0.0
    center: float = 0.0
    intersection: float = 0.0
    strategic: float = 0.0

    @property
    def total(self) -> float:
        return (self.completion + self.cooperative + self.potential
                + self.center + self.intersection + self.strategic)

    def to_dict(self) -> Dict[str, float]:
        d = asdict(self)
        d["total"] = self.total
        return d


def _cooperative_factor(filled: int) -> float:
    if filled == 4:
        return 2.0
    if filled >= 2:
        return 1.0
    return 0.5


def score_breakdown(board: Board, row: int, col: int, weights: Weights) -> ScoreBreakdown:
    """
    Per-component score of marking (row, col) as the player.

    Assumes (row, col) is a legal empty cell; callers check legality.
    """
    test_board = apply_move(board, row, col, CellState.PLAYER)
    incident = lines_through_cell(row, col)

    completion = cooperative = potential = 0.0
    for line in incident:
        if is_line_complete(test_board, line):
            completion += weights.complete_line

        before = count_filled(board, line)
        if 0 < before < BOARD_SIZE:
            cooperative += weights.cooperative_line * _cooperative_factor(before)

        after = count_filled(test_board, line)
        if after < BOARD_SIZE:
            potential += (after + 1) * weights.potential_line

    return ScoreBreakdown(
        completion=completion,
        cooperative=cooperative,
        potential=potential,
        center=weights.center_bonus if is_center(row, col) else 0.0,
        intersection=weights.intersection_bonus if on_diagonal(row, col) else 0.0,
        strategic=weights.strategic_position if (row, col) in STRATEGIC_POSITIONS else 0.0,
    )


class MoveScorer:
    """
    Memoized evaluator for one weight set.

    Values are cached by (board_hash, row, col) in a bounded LRU cache that is
    private to this instance.
    """

    def __init__(
        self,
        weights: Union[Weights, Variant, str] = STANDARD_WEIGHTS,
        cache_size: int = 200,
        metrics_window: int = 100,
        clock: Callable[[], float] = time.perf_counter,
    ):
        if not isinstance(weights, Weights):
            weights = weights_for(weights)
        self.weights = weights
        self.clock = clock
        self._cache = LRUCache(cache_size)
        self.metrics = ScorerMetrics(window=metrics_window)

    @property
    def variant(self) -> Optional[Variant]:
        try:
            return Variant(self.weights.name)
        except ValueError:
            return None

    @property
    def cache_size(self) -> int:
        return len(self._cache)

    def value(self, board: Board, row: int, col: int) -> float:
        """
        Value of marking (row, col) on `board`.

        Returns:
            Non-negative score for a legal empty cell, -1 otherwise.
        """
        if not is_empty(board, row, col):
            return INVALID_MOVE_VALUE

        key: Tuple[str, int, int] = (board_hash(board), row, col)
        cached = self._cache.get(key)
        if cached is not None:
            self.metrics.record_hit()
            return cached

        self.metrics.record_miss()
        t0 = self.clock()
        v = score_breakdown(board, row, col, self.weights).total
        self.metrics.record_duration((self.clock() - t0) * 1000.0)

        self._cache.put(key, v)
        return v

    def breakdown(self, board: Board, row: int, col: int) -> Optional[ScoreBreakdown]:
        """Uncached per-component explanation; None for illegal cells."""
        if not is_empty(board, row, col):
            return None
        return score_breakdown(board, row, col, self.weights)

    def clear_cache(self) -> None:
        self._cache.clear()

    def performance(self) -> MetricsSnapshot:
        return self.metrics.snapshot(cache_size=len(self._cache))

    def reset_metrics(self) -> None:
        self.metrics.reset()
