"""
Self-play simulation: the player always follows the engine's suggestion and
the computer picks a cell by a fixed policy.
"""

import time
from dataclasses import dataclass
from typing import Dict, List, Optional

import numpy as np
from tqdm.auto import trange, tqdm

from .engine import EngineConfig, GameEngine, GamePhase, GameStats
from .game import empty_cells
from .lines import LineType
from .scorer import Variant

COMPUTER_POLICIES = ("random", "suggested")


@dataclass
class SimulationConfig:
    """Simulation configuration."""

    # Random seed
    seed: int = 0

    # Games to play
    games: int = 200

    # Scorer variant used for the player's suggestions
    variant: str = Variant.STANDARD.value

    # How the computer picks: "random" empty cell or the "suggested" cell
    computer_policy: str = "random"

    # Logging
    print_every: int = 50

    # Paths
    save_dir: str = "runs"


def pick_computer_move(engine: GameEngine, rng: np.random.Generator, policy: str = "random"):
    """Choose the computer's cell on the engine's current board."""
    if policy == "suggested":
        s = engine.suggest()
        return s.row, s.col
    if policy != "random":
        raise ValueError(f"unknown computer policy: {policy!r}")
    cells = empty_cells(engine.board)
    return cells[int(rng.integers(0, len(cells)))]


def play_game(
    engine: GameEngine,
    rng: np.random.Generator,
    computer_policy: str = "random",
) -> GameStats:
    """
    Play one full game on `engine`.

    Returns:
        Final stats (phase game-over)
    """
    engine.start()
    while engine.phase != GamePhase.GAME_OVER:
        suggestion = engine.last_suggestion or engine.suggest()
        engine.apply_player_move(suggestion.row, suggestion.col)

        row, col = pick_computer_move(engine, rng, computer_policy)
        engine.apply_computer_move(row, col)
    return engine.stats()


def game_row(game: int, stats: GameStats, duration_s: float, engine: GameEngine) -> Dict[str, object]:
    """Flatten one finished game into a history row."""
    perf = engine.scorer.performance()
    row: Dict[str, object] = {
        "game": game,
        "total_lines": stats.total_lines,
        "outcome": stats.outcome,
        "duration_s": duration_s,
        "cache_hit_rate": perf.hit_rate,
        "avg_calc_ms": perf.average_time_ms,
    }
    for t in LineType:
        row[f"lines_{t.value}"] = stats.lines_by_type[t.value]
    return row


def run_simulation(config: SimulationConfig, progress: bool = True,
                   engine: Optional[GameEngine] = None) -> List[Dict[str, object]]:
    """Play `config.games` games and return one history row per game."""
    if config.computer_policy not in COMPUTER_POLICIES:
        raise ValueError(f"unknown computer policy: {config.computer_policy!r}")

    rng = np.random.default_rng(config.seed)
    engine = engine or GameEngine(config=EngineConfig(variant=config.variant))

    history = []
    iterator = trange(1, config.games + 1, desc="Simulating", disable=not progress)
    for game in iterator:
        # Per-game cache figures; the cache itself carries over between games
        engine.scorer.reset_metrics()
        t0 = time.perf_counter()
        stats = play_game(engine, rng, config.computer_policy)
        history.append(game_row(game, stats, time.perf_counter() - t0, engine))

        if progress and config.print_every and game % config.print_every == 0:
            recent = np.array([h["total_lines"] for h in history[-config.print_every:]])
            tqdm.write(f"[{game:5d}] lines {recent.mean():.2f} avg | "
                       f"max {recent.max()} | hit rate {history[-1]['cache_hit_rate']:.2f}%")
    return history


def summarize_history(history: List[Dict[str, object]]) -> Dict[str, float]:
    """Mean/std/min/max of completed lines and the outcome distribution."""
    if not history:
        return {"games": 0}
    lines = np.array([h["total_lines"] for h in history], dtype=np.float64)
    summary: Dict[str, float] = {
        "games": len(history),
        "lines_mean": float(lines.mean()),
        "lines_std": float(lines.std()),
        "lines_min": float(lines.min()),
        "lines_max": float(lines.max()),
    }
    for grade in ("excellent", "good", "average", "poor"):
        summary[f"outcome_{grade}"] = sum(1 for h in history if h["outcome"] == grade) / len(history)
    return summary
