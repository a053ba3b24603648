"""Shared pytest fixtures."""

import pytest

from bingo import EngineConfig, GameEngine, MoveScorer, STANDARD_WEIGHTS, ENHANCED_WEIGHTS
from bingo.game import create_empty_board


# Eight rounds that complete row 0, row 1, column 0 and the anti diagonal: (actor, row, col)
FULL_GAME = [
    ("P", 0, 0), ("C", 0, 1),
    ("P", 1, 0), ("C", 1, 1),
    ("P", 2, 0), ("C", 2, 1),
    ("P", 3, 0), ("C", 3, 1),
    ("P", 4, 0), ("C", 0, 2),
    ("P", 0, 3), ("C", 0, 4),
    ("P", 1, 2), ("C", 1, 3),
    ("P", 1, 4), ("C", 2, 2),
]


def play_moves(engine, moves):
    for actor, r, c in moves:
        if actor == "P":
            engine.apply_player_move(r, c)
        else:
            engine.apply_computer_move(r, c)


@pytest.fixture
def empty_board():
    return create_empty_board()


@pytest.fixture
def near_row_board():
    """Row 0 has four player marks; (0, 4) completes it."""
    return [
        [1, 1, 1, 1, 0],
        [0, 0, 0, 0, 0],
        [0, 0, 0, 0, 0],
        [0, 0, 0, 0, 0],
        [0, 0, 0, 0, 0],
    ]


@pytest.fixture
def standard_scorer():
    return MoveScorer(STANDARD_WEIGHTS)


@pytest.fixture
def enhanced_scorer():
    return MoveScorer(ENHANCED_WEIGHTS)


@pytest.fixture
def engine():
    return GameEngine(config=EngineConfig())


@pytest.fixture
def started_engine(engine):
    engine.start()
    return engine
