"""
The 8 rotations and reflections of the 5x5 board.

Lines map onto lines under every transform, so completed-line counts and both
weight sets give the same values on every board in an orbit. The comparison
harness uses this to skip boards that are mirror images of one already seen.
"""

from typing import Callable, List, Tuple

import numpy as np

from .game import BOARD_SIZE, Board, Position, board_hash

Transform = Callable[[np.ndarray], np.ndarray]

# Index k is the sym_id accepted below
TRANSFORMS: Tuple[Transform, ...] = (
    lambda a: a,                    # identity
    lambda a: np.rot90(a, -1),      # rotate 90 clockwise
    lambda a: np.rot90(a, 2),       # rotate 180
    lambda a: np.rot90(a, 1),       # rotate 270 clockwise
    np.fliplr,                      # mirror columns
    np.flipud,                      # mirror rows
    np.transpose,                   # main diagonal
    lambda a: np.rot90(a, 2).T,     # anti-diagonal
)


def _build_maps() -> Tuple[List[np.ndarray], List[np.ndarray]]:
    """Gather maps (target -> source) and their inverses (source -> target)."""
    grid = np.arange(BOARD_SIZE * BOARD_SIZE).reshape(BOARD_SIZE, BOARD_SIZE)
    gather = [np.ascontiguousarray(t(grid)).reshape(-1) for t in TRANSFORMS]
    scatter = [np.argsort(mp) for mp in gather]
    return gather, scatter


SYM_MAPS, _INVERSE_MAPS = _build_maps()


def apply_symmetry_board(board: Board, sym_id: int) -> Board:
    """
    Transform a board.

    Args:
        board: 5x5 board
        sym_id: index into TRANSFORMS (0-7)

    Returns:
        New 5x5 board; the mark at (r, c) ends up at transform_position(r, c, sym_id)
    """
    flat = np.asarray(board, dtype=np.int64).reshape(-1)
    return flat[SYM_MAPS[sym_id]].reshape(BOARD_SIZE, BOARD_SIZE).tolist()


def transform_position(row: int, col: int, sym_id: int) -> Position:
    target = int(_INVERSE_MAPS[sym_id][row * BOARD_SIZE + col])
    return divmod(target, BOARD_SIZE)


def get_all_symmetries(board: Board) -> List[Board]:
    return [apply_symmetry_board(board, k) for k in range(len(TRANSFORMS))]


def canonical_hash(board: Board) -> str:
    """Smallest board hash over the board's orbit."""
    return min(board_hash(b) for b in get_all_symmetries(board))


def get_random_symmetry(board: Board, rng: np.random.Generator) -> Board:
    return apply_symmetry_board(board, int(rng.integers(0, len(TRANSFORMS))))
