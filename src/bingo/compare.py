"""
Variant comparison.

Runs the Standard and Enhanced scorers side by side on the same boards and
measures how often they agree, how long each takes, and which top move leads
to the better simulated position. Results are reported only; nothing here
feeds back into either scorer.
"""

import time
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
from tqdm.auto import tqdm

from .game import BOARD_SIZE, Board, CellState, apply_move, board_hash, create_empty_board
from .lines import CANONICAL_LINES, count_completed_lines, count_filled
from .scorer import ENHANCED_WEIGHTS, STANDARD_WEIGHTS, MoveScorer
from .suggest import Suggestion, suggest
from .symmetries import canonical_hash


@dataclass
class BenchmarkConfig:
    """Benchmark configuration."""

    # Random seed
    seed: int = 0

    # Random boards
    boards: int = 200
    min_filled: int = 0
    max_filled: int = 16

    # Skip boards that are rotations/reflections of one already drawn
    dedupe_symmetric: bool = True


@dataclass(frozen=True)
class MoveQuality:
    completed_lines: int
    potential_lines: int


@dataclass(frozen=True)
class VariantComparison:
    board_hash: str
    standard: Suggestion
    enhanced: Suggestion
    standard_ms: float
    enhanced_ms: float
    standard_quality: MoveQuality
    enhanced_quality: MoveQuality
    enhanced_rank_in_standard: int
    standard_rank_in_enhanced: int
    assessment: str

    @property
    def same_move(self) -> bool:
        return (self.standard.row, self.standard.col) == (self.enhanced.row, self.enhanced.col)

    @property
    def value_difference(self) -> float:
        return self.enhanced.value - self.standard.value


def generate_random_board(rng: np.random.Generator, filled: int = 8) -> Board:
    """
    Random legal board with `filled` marks.

    Marks alternate player/computer so the player count is equal to or one
    above the computer count.
    """
    if not 0 <= filled <= BOARD_SIZE * BOARD_SIZE:
        raise ValueError(f"filled must be in 0..25, got {filled}")
    board = create_empty_board()
    cells = rng.choice(BOARD_SIZE * BOARD_SIZE, size=filled, replace=False)
    for i, idx in enumerate(cells):
        r, c = divmod(int(idx), BOARD_SIZE)
        board[r][c] = CellState.PLAYER.value if i % 2 == 0 else CellState.COMPUTER.value
    return board


def default_test_cases(rng: np.random.Generator) -> List[Tuple[str, Board]]:
    """Named boards covering the empty, mid, late and near-complete stages."""
    near_complete = create_empty_board()
    for c in range(4):
        near_complete[0][c] = CellState.PLAYER.value
    for r in range(1, 4):
        near_complete[r][0] = CellState.COMPUTER.value

    return [
        ("empty", create_empty_board()),
        ("mid-game", generate_random_board(rng, 8)),
        ("late-game", generate_random_board(rng, 16)),
        ("near-complete", near_complete),
    ]


def random_boards(config: BenchmarkConfig) -> List[Board]:
    rng = np.random.default_rng(config.seed)
    boards: List[Board] = []
    seen = set()
    attempts = 0
    while len(boards) < config.boards and attempts < config.boards * 20:
        attempts += 1
        filled = int(rng.integers(config.min_filled, config.max_filled + 1))
        board = generate_random_board(rng, filled)
        key = canonical_hash(board) if config.dedupe_symmetric else board_hash(board)
        if key in seen:
            continue
        seen.add(key)
        boards.append(board)
    return boards


def count_potential_lines(board: Board) -> int:
    """Open lines with 3 or 4 marks; a 3-mark line scores 1, a 4-mark line 2."""
    total = 0
    for line in CANONICAL_LINES:
        f = count_filled(board, line)
        if 3 <= f < BOARD_SIZE:
            total += f - 2
    return total


def simulate_move_quality(board: Board, row: int, col: int) -> MoveQuality:
    test_board = apply_move(board, row, col, CellState.PLAYER)
    return MoveQuality(count_completed_lines(test_board), count_potential_lines(test_board))


def _rank_in_alternatives(suggestion: Suggestion, row: int, col: int) -> int:
    """0 if (row, col) is the suggestion itself, 1..3 for an alternative, -1 if absent."""
    if (suggestion.row, suggestion.col) == (row, col):
        return 0
    for i, alt in enumerate(suggestion.alternatives):
        if (alt.row, alt.col) == (row, col):
            return i + 1
    return -1


def _assess(standard: MoveQuality, enhanced: MoveQuality, same_move: bool) -> str:
    if same_move:
        return "same"
    a = (enhanced.completed_lines, enhanced.potential_lines)
    b = (standard.completed_lines, standard.potential_lines)
    if a > b:
        return "enhanced_better"
    if b > a:
        return "standard_better"
    return "equivalent"


def _timed_suggest(board: Board, scorer: MoveScorer) -> Tuple[Optional[Suggestion], float]:
    t0 = time.perf_counter()
    s = suggest(board, scorer)
    return s, (time.perf_counter() - t0) * 1000.0


def compare_variants(
    board: Board,
    standard: Optional[MoveScorer] = None,
    enhanced: Optional[MoveScorer] = None,
) -> Optional[VariantComparison]:
    """
    Compare both variants' suggestions on one board.

    Returns:
        VariantComparison, or None when the board has no empty cell
    """
    standard = standard or MoveScorer(STANDARD_WEIGHTS)
    enhanced = enhanced or MoveScorer(ENHANCED_WEIGHTS)

    s_sugg, s_ms = _timed_suggest(board, standard)
    e_sugg, e_ms = _timed_suggest(board, enhanced)
    if s_sugg is None or e_sugg is None:
        return None

    s_quality = simulate_move_quality(board, s_sugg.row, s_sugg.col)
    e_quality = simulate_move_quality(board, e_sugg.row, e_sugg.col)
    same = (s_sugg.row, s_sugg.col) == (e_sugg.row, e_sugg.col)

    return VariantComparison(
        board_hash=board_hash(board),
        standard=s_sugg,
        enhanced=e_sugg,
        standard_ms=s_ms,
        enhanced_ms=e_ms,
        standard_quality=s_quality,
        enhanced_quality=e_quality,
        enhanced_rank_in_standard=_rank_in_alternatives(s_sugg, e_sugg.row, e_sugg.col),
        standard_rank_in_enhanced=_rank_in_alternatives(e_sugg, s_sugg.row, s_sugg.col),
        assessment=_assess(s_quality, e_quality, same),
    )


def run_benchmark(
    boards: Sequence[Board],
    standard: Optional[MoveScorer] = None,
    enhanced: Optional[MoveScorer] = None,
    progress: bool = True,
) -> List[VariantComparison]:
    """Compare both variants over `boards`; full boards are skipped."""
    standard = standard or MoveScorer(STANDARD_WEIGHTS)
    enhanced = enhanced or MoveScorer(ENHANCED_WEIGHTS)

    results = []
    for board in tqdm(boards, desc="Comparing", disable=not progress):
        result = compare_variants(board, standard, enhanced)
        if result is not None:
            results.append(result)
    return results


def summarize_benchmark(results: Sequence[VariantComparison]) -> Dict[str, float]:
    """
    Aggregate comparison results.

    Returns:
        Dict with 'boards', timing means, agreement and assessment rates
        (fractions in [0, 1]) and the mean Enhanced - Standard value gap.
    """
    if not results:
        return {"boards": 0}

    s_ms = np.array([r.standard_ms for r in results])
    e_ms = np.array([r.enhanced_ms for r in results])
    assessments = np.array([r.assessment for r in results])
    n = len(results)

    return {
        "boards": n,
        "avg_standard_ms": float(s_ms.mean()),
        "avg_enhanced_ms": float(e_ms.mean()),
        "p95_standard_ms": float(np.percentile(s_ms, 95)),
        "p95_enhanced_ms": float(np.percentile(e_ms, 95)),
        "same_move_rate": float(np.mean([r.same_move for r in results])),
        "enhanced_better_rate": float((assessments == "enhanced_better").sum() / n),
        "standard_better_rate": float((assessments == "standard_better").sum() / n),
        "equivalent_rate": float((assessments == "equivalent").sum() / n),
        "avg_value_difference": float(np.mean([r.value_difference for r in results])),
    }
