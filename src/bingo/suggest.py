"""
Move suggestion: rank every empty cell with a scorer and report the best one,
up to three alternatives, and a confidence level.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from .game import Board, empty_cells
from .scorer import MoveScorer, Weights

MAX_ALTERNATIVES = 3


class Confidence(str, Enum):
    VERY_HIGH = "very-high"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class MoveEvaluation:
    row: int
    col: int
    value: float

    @property
    def position(self) -> str:
        return f"({self.row}, {self.col})"

    def to_dict(self) -> dict:
        return {"row": self.row, "col": self.col, "value": self.value, "position": self.position}


@dataclass(frozen=True)
class Suggestion:
    row: int
    col: int
    value: float
    confidence: Confidence
    alternatives: Tuple[MoveEvaluation, ...] = field(default_factory=tuple)

    @property
    def position(self) -> str:
        return f"({self.row}, {self.col})"

    def to_dict(self) -> dict:
        return {
            "row": self.row,
            "col": self.col,
            "value": self.value,
            "position": self.position,
            "confidence": self.confidence.value,
            "alternatives": [m.to_dict() for m in self.alternatives],
        }


def evaluate_moves(board: Board, scorer: MoveScorer) -> List[MoveEvaluation]:
    """
    Score every empty cell.

    Returns:
        Evaluations sorted by value, descending. Ties keep row-major order.
    """
    moves = [MoveEvaluation(r, c, scorer.value(board, r, c)) for r, c in empty_cells(board)]
    moves.sort(key=lambda m: m.value, reverse=True)
    return moves


def confidence_for(moves: Sequence[MoveEvaluation], weights: Weights) -> Confidence:
    """
    Confidence from the gap between the best and second-best value.

    A lone candidate has no runner-up: it is VERY_HIGH when it completes a line
    on its own merit (value >= COMPLETE_LINE) and HIGH otherwise.
    """
    if not moves:
        return Confidence.LOW
    if len(moves) < 2:
        if moves[0].value >= weights.complete_line:
            return Confidence.VERY_HIGH
        return Confidence.HIGH

    gap = moves[0].value - moves[1].value
    if gap >= weights.complete_line:
        return Confidence.VERY_HIGH
    if gap >= weights.cooperative_line:
        return Confidence.HIGH
    if gap >= weights.potential_line:
        return Confidence.MEDIUM
    return Confidence.LOW


def suggest(board: Board, scorer: MoveScorer) -> Optional[Suggestion]:
    """Best move for `board`, or None when no empty cell remains."""
    moves = evaluate_moves(board, scorer)
    if not moves:
        return None

    best = moves[0]
    return Suggestion(
        row=best.row,
        col=best.col,
        value=best.value,
        confidence=confidence_for(moves, scorer.weights),
        alternatives=tuple(moves[1:1 + MAX_ALTERNATIVES]),
    )
