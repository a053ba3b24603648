"""
Line detection for the 5x5 board.

There are exactly 12 canonical lines, enumerated in a fixed order:
  1. horizontal rows 0..4, cells in column-ascending order
  2. vertical columns 0..4, cells in row-ascending order
  3. main diagonal (0,0) -> (4,4)
  4. anti diagonal (0,4) -> (4,0)

Every function here is a pure query over a well-formed board and never raises.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from .game import BOARD_SIZE, Board, CellState, Position, is_valid_position


class LineType(str, Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    DIAGONAL_MAIN = "diagonal-main"
    DIAGONAL_ANTI = "diagonal-anti"


@dataclass(frozen=True)
class Line:
    """A row, column or diagonal. `index` is None for diagonals."""
    type: LineType
    index: Optional[int]
    cells: Tuple[Position, ...]

    def __contains__(self, pos) -> bool:
        return tuple(pos) in self.cells

    @property
    def name(self) -> str:
        if self.index is None:
            return self.type.value
        return f"{self.type.value}-{self.index}"

    def to_dict(self) -> dict:
        return {
            "type": self.type.value,
            "index": self.index,
            "cells": [list(p) for p in self.cells],
        }


def _build_canonical_lines() -> Tuple[Line, ...]:
    lines = []
    for r in range(BOARD_SIZE):
        lines.append(Line(LineType.HORIZONTAL, r, tuple((r, c) for c in range(BOARD_SIZE))))
    for c in range(BOARD_SIZE):
        lines.append(Line(LineType.VERTICAL, c, tuple((r, c) for r in range(BOARD_SIZE))))
    lines.append(Line(LineType.DIAGONAL_MAIN, None, tuple((i, i) for i in range(BOARD_SIZE))))
    lines.append(Line(LineType.DIAGONAL_ANTI, None,
                      tuple((i, BOARD_SIZE - 1 - i) for i in range(BOARD_SIZE))))
    return tuple(lines)


CANONICAL_LINES = _build_canonical_lines()

# Pre-computed incidence: (row, col) -> lines containing it, canonical order
_LINES_BY_CELL: Dict[Position, Tuple[Line, ...]] = {
    (r, c): tuple(line for line in CANONICAL_LINES if (r, c) in line.cells)
    for r in range(BOARD_SIZE)
    for c in range(BOARD_SIZE)
}


def lines_through_cell(row: int, col: int) -> List[Line]:
    """
    Return the canonical lines that contain (row, col).

    Always the row and the column; plus the main diagonal when row == col and
    the anti diagonal when row + col == 4. Off-board positions yield [].
    """
    if not is_valid_position(row, col):
        return []
    return list(_LINES_BY_CELL[(row, col)])


def incident_line_count(row: int, col: int) -> int:
    """2, 3 or 4 for on-board cells (the centre has 4)."""
    return len(lines_through_cell(row, col))


def count_filled(board: Board, line: Line) -> int:
    return sum(1 for r, c in line.cells if board[r][c] != CellState.EMPTY)


def count_empty(board: Board, line: Line) -> int:
    return sum(1 for r, c in line.cells if board[r][c] == CellState.EMPTY)


def is_line_complete(board: Board, line: Line) -> bool:
    """True iff every cell of the line is marked (by either side)."""
    return all(board[r][c] != CellState.EMPTY for r, c in line.cells)


def all_completed_lines(board: Board) -> List[Line]:
    """Completed lines in canonical order."""
    return [line for line in CANONICAL_LINES if is_line_complete(board, line)]


def count_completed_lines(board: Board) -> int:
    return len(all_completed_lines(board))


def count_lines_by_type(lines: Sequence[Line]) -> Dict[str, int]:
    """Partition a set of lines by type. Every type is present, possibly 0."""
    counts = {t.value: 0 for t in LineType}
    for line in lines:
        counts[line.type.value] += 1
    return counts


class LineDetector:
    """Completed-line queries, injected into the engine."""

    lines = CANONICAL_LINES

    def lines_through_cell(self, row: int, col: int) -> List[Line]:
        return lines_through_cell(row, col)

    def all_completed_lines(self, board: Board) -> List[Line]:
        return all_completed_lines(board)

    def count_completed_lines(self, board: Board) -> int:
        return count_completed_lines(board)
