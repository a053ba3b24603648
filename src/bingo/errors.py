"""
Typed failures raised by the game engine and the board parser.

Hierarchy:
- BingoError (base, carries a machine-readable `kind`)
  - MoveError (rejected engine operation, no state change)
    - InvalidPhase
    - InvalidPosition
    - CellOccupied
    - GameOver
  - MalformedBoard (wrong dimensions or unknown cell codes)
  - MalformedMoveLog (move log dump missing fields or not JSON)
"""

from enum import Enum


class ErrorKind(str, Enum):
    INVALID_PHASE = "invalid-phase"
    INVALID_POSITION = "invalid-position"
    CELL_OCCUPIED = "cell-occupied"
    GAME_OVER = "game-over"
    MALFORMED_BOARD = "malformed-board"
    MALFORMED_MOVE_LOG = "malformed-move-log"
    ERROR = "error"


# =========================
# Base exception
# =========================

class BingoError(Exception):
    """Base exception for all bingo errors."""
    kind: ErrorKind = ErrorKind.ERROR
    retryable: bool = False

    def __init__(self, message: str = ""):
        super().__init__(message or self.kind.value)
        self.message = message or self.kind.value

    def to_dict(self) -> dict:
        return {"kind": self.kind.value, "message": self.message}


# =========================
# Engine move errors
# =========================

class MoveError(BingoError):
    """A move or transition the engine refused."""
    retryable = True


class InvalidPhase(MoveError):
    kind = ErrorKind.INVALID_PHASE


class InvalidPosition(MoveError):
    kind = ErrorKind.INVALID_POSITION


class CellOccupied(MoveError):
    kind = ErrorKind.CELL_OCCUPIED


class GameOver(MoveError):
    kind = ErrorKind.GAME_OVER
    retryable = False


# =========================
# Programmer errors
# =========================

class MalformedBoard(BingoError):
    kind = ErrorKind.MALFORMED_BOARD


class MalformedMoveLog(BingoError):
    kind = ErrorKind.MALFORMED_MOVE_LOG
