"""
Bingo board rules and board-state helpers.

Board representation: list[list[int]] of shape 5x5
  - 0: empty
  - 1: player mark
  - 2: computer mark

Positions are (row, col) with 0 <= row, col <= 4. Both sides cooperate:
a line counts as complete once all five of its cells are marked, no matter
who marked them.
"""

import json
import numbers
from enum import IntEnum
from typing import List, Sequence, Tuple

from .errors import MalformedBoard

BOARD_SIZE = 5
MAX_ROUNDS = 8
CENTER = BOARD_SIZE // 2

Board = List[List[int]]
Position = Tuple[int, int]


class CellState(IntEnum):
    EMPTY = 0
    PLAYER = 1
    COMPUTER = 2


_CELL_CODES = frozenset(int(s) for s in CellState)
_SYMBOLS = {CellState.EMPTY: ".", CellState.PLAYER: "P", CellState.COMPUTER: "C"}


def create_empty_board() -> Board:
    """Return a fresh 5x5 board of empty cells."""
    return [[CellState.EMPTY.value] * BOARD_SIZE for _ in range(BOARD_SIZE)]


def is_valid_position(row: int, col: int) -> bool:
    """True iff (row, col) lies on the board."""
    if not isinstance(row, numbers.Integral) or not isinstance(col, numbers.Integral):
        return False
    return 0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE


def is_empty(board: Board, row: int, col: int) -> bool:
    """True iff (row, col) is on the board and unmarked."""
    if not is_valid_position(row, col):
        return False
    return board[row][col] == CellState.EMPTY


def is_center(row: int, col: int) -> bool:
    return row == CENTER and col == CENTER


def copy_board(board: Board) -> Board:
    """Independent deep copy (rows are not shared)."""
    return [list(row) for row in board]


def board_hash(board: Board) -> str:
    """25-character row-major string of cell codes, used as a cache key."""
    return "".join(str(int(v)) for row in board for v in row)


def empty_cells(board: Board) -> List[Position]:
    """Return empty positions in row-major order."""
    return [
        (r, c)
        for r in range(BOARD_SIZE)
        for c in range(BOARD_SIZE)
        if board[r][c] == CellState.EMPTY
    ]


def apply_move(board: Board, row: int, col: int, state: int) -> Board:
    """Apply move and return new board."""
    new_board = copy_board(board)
    new_board[row][col] = int(state)
    return new_board


def count_marks(board: Board) -> Tuple[int, int]:
    """Return (player_count, computer_count)."""
    player = sum(1 for row in board for v in row if v == CellState.PLAYER)
    computer = sum(1 for row in board for v in row if v == CellState.COMPUTER)
    return player, computer


def _board_problem(board) -> str:
    """Describe why `board` is malformed, or return "" when it is well formed."""
    if not isinstance(board, (list, tuple)) or len(board) != BOARD_SIZE:
        return f"board must have {BOARD_SIZE} rows"
    for r, row in enumerate(board):
        if not isinstance(row, (list, tuple)) or len(row) != BOARD_SIZE:
            return f"row {r} must have {BOARD_SIZE} cells"
        for c, v in enumerate(row):
            if isinstance(v, bool) or v not in _CELL_CODES:
                return f"cell ({r}, {c}) has invalid code {v!r}"
    return ""


def is_valid_board(board) -> bool:
    """Check dimensions and cell codes."""
    return _board_problem(board) == ""


def is_legal_board(board) -> bool:
    """Check if board respects turn order (player moves first each round)."""
    if not is_valid_board(board):
        return False
    player, computer = count_marks(board)
    return player - computer in (0, 1)


def validate_board(board) -> None:
    """Raise MalformedBoard if `board` has the wrong shape or unknown codes."""
    problem = _board_problem(board)
    if problem:
        raise MalformedBoard(problem)


# ---------------------------------------------------------------------------
# Dump format: row-major arrays of integer cell codes
# ---------------------------------------------------------------------------

def dump_board(board: Board) -> List[List[int]]:
    """Emit the board as nested row-major ints."""
    return [[int(v) for v in row] for row in board]


def parse_board(data: Sequence) -> Board:
    """
    Parse a board dump.

    Accepts either a nested 5x5 sequence or a flat row-major sequence of 25
    codes.

    Raises:
        MalformedBoard: wrong dimensions or codes outside {0, 1, 2}
    """
    if not isinstance(data, (list, tuple)):
        raise MalformedBoard(f"board dump must be a list, got {type(data).__name__}")
    if len(data) == BOARD_SIZE * BOARD_SIZE and not any(isinstance(v, (list, tuple)) for v in data):
        data = [data[i * BOARD_SIZE:(i + 1) * BOARD_SIZE] for i in range(BOARD_SIZE)]
    validate_board(data)
    return [[int(v) for v in row] for row in data]


def dumps_board(board: Board) -> str:
    return json.dumps(dump_board(board))


def loads_board(text: str) -> Board:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MalformedBoard(f"board dump is not valid JSON: {exc.msg}") from exc
    return parse_board(data)


def format_board(board: Board) -> str:
    """Render the board as text, one row per line, with row/col headers."""
    lines = ["  " + " ".join(str(c) for c in range(BOARD_SIZE))]
    for r, row in enumerate(board):
        lines.append(f"{r} " + " ".join(_SYMBOLS[CellState(v)] for v in row))
    return "\n".join(lines)
