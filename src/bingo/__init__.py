"""
Cooperative Bingo advisor - suggest the next cell on a shared 5x5 board.

A player and a computer alternately mark cells for eight rounds; both try to
complete as many rows, columns and main diagonals as possible. This package
detects completed lines, scores candidate moves with a memoized heuristic
(Standard or Enhanced weights), ranks suggestions, and runs the game.
"""

from .errors import (
    BingoError,
    ErrorKind,
    MoveError,
    InvalidPhase,
    InvalidPosition,
    CellOccupied,
    GameOver,
    MalformedBoard,
    MalformedMoveLog,
)
from .game import (
    BOARD_SIZE,
    MAX_ROUNDS,
    CellState,
    create_empty_board,
    is_valid_position,
    is_empty,
    is_center,
    copy_board,
    board_hash,
    empty_cells,
    dump_board,
    parse_board,
)
from .lines import (
    Line,
    LineType,
    LineDetector,
    CANONICAL_LINES,
    lines_through_cell,
    is_line_complete,
    count_filled,
    count_empty,
    all_completed_lines,
    count_completed_lines,
)
from .scorer import Variant, Weights, STANDARD_WEIGHTS, ENHANCED_WEIGHTS, MoveScorer, weights_for
from .metrics import ScorerMetrics, MetricsSnapshot
from .suggest import Confidence, MoveEvaluation, Suggestion, suggest, evaluate_moves
from .movelog import Actor, MoveRecord, MoveLog, replay
from .engine import EngineConfig, EventType, Event, GameEngine, GamePhase, GameStats
from .compare import BenchmarkConfig, compare_variants, run_benchmark, summarize_benchmark
from .simulate import SimulationConfig, play_game, run_simulation

__version__ = "0.1.0"
__all__ = [
    "BingoError",
    "ErrorKind",
    "MoveError",
    "InvalidPhase",
    "InvalidPosition",
    "CellOccupied",
    "GameOver",
    "MalformedBoard",
    "MalformedMoveLog",
    "BOARD_SIZE",
    "MAX_ROUNDS",
    "CellState",
    "create_empty_board",
    "is_valid_position",
    "is_empty",
    "is_center",
    "copy_board",
    "board_hash",
    "empty_cells",
    "dump_board",
    "parse_board",
    "Line",
    "LineType",
    "LineDetector",
    "CANONICAL_LINES",
    "lines_through_cell",
    "is_line_complete",
    "count_filled",
    "count_empty",
    "all_completed_lines",
    "count_completed_lines",
    "Variant",
    "Weights",
    "STANDARD_WEIGHTS",
    "ENHANCED_WEIGHTS",
    "MoveScorer",
    "weights_for",
    "ScorerMetrics",
    "MetricsSnapshot",
    "Confidence",
    "MoveEvaluation",
    "Suggestion",
    "suggest",
    "evaluate_moves",
    "Actor",
    "MoveRecord",
    "MoveLog",
    "replay",
    "EngineConfig",
    "EventType",
    "Event",
    "GameEngine",
    "GamePhase",
    "GameStats",
    "BenchmarkConfig",
    "compare_variants",
    "run_benchmark",
    "summarize_benchmark",
    "SimulationConfig",
    "play_game",
    "run_simulation",
]
