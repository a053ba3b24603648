#!/usr/bin/env python3
"""
Play with the Bingo advisor, or compare the two scoring variants.

Usage:
    python play.py                       # interactive game, standard weights
    python play.py --variant enhanced
    python play.py --compare --boards 500
"""

import sys
import argparse
from pathlib import Path

import numpy as np

# Add src to path
sys.path = [str(Path(__file__).parent / "src")] + sys.path

from bingo import (
    BingoError,
    GameEngine,
    EngineConfig,
    EventType,
    GamePhase,
    BenchmarkConfig,
    run_benchmark,
    summarize_benchmark,
)
from bingo.compare import default_test_cases, random_boards, compare_variants
from bingo.game import format_board


def read_move(prompt: str):
    """Read "row col" from stdin. Returns None on EOF/abort."""
    while True:
        try:
            text = input(prompt)
        except (EOFError, KeyboardInterrupt):
            return None
        parts = text.replace(",", " ").split()
        if len(parts) == 2 and all(p.lstrip("-").isdigit() for p in parts):
            return int(parts[0]), int(parts[1])
        print("Enter a move as: row col")


def play_interactive(engine: GameEngine):
    """Play one game; you enter your own moves and the computer's."""
    def on_round(event):
        print(f"Round {event.round} complete | lines: {event.stats.total_lines}")

    def on_complete(event):
        print(f"\nGame over! {event.stats.total_lines} lines completed ({event.stats.outcome})")

    engine.subscribe(EventType.ROUND_COMPLETE, on_round)
    engine.subscribe(EventType.GAME_COMPLETE, on_complete)

    print("\n=== Interactive Game ===")
    print("P = your marks, C = computer marks. Enter moves as: row col (0-4)")
    engine.start()

    while engine.phase != GamePhase.GAME_OVER:
        print()
        print(format_board(engine.board))
        print()

        if engine.phase == GamePhase.PLAYER_TURN:
            s = engine.last_suggestion
            if s is not None:
                alts = ", ".join(f"{a.position}={a.value:g}" for a in s.alternatives)
                print(f"Suggestion: {s.position} value {s.value:g} [{s.confidence.value}]"
                      f" | alternatives: {alts}")
            move = read_move(f"Round {engine.current_round} - your move: ")
        else:
            move = read_move(f"Round {engine.current_round} - computer's move: ")

        if move is None:
            print("\nGame aborted")
            return

        try:
            if engine.phase == GamePhase.PLAYER_TURN:
                engine.apply_player_move(*move)
            else:
                engine.apply_computer_move(*move)
        except BingoError as e:
            print(f"Invalid move ({e.kind.value}): {e.message}")

    print()
    print(format_board(engine.board))
    for line in engine.stats().completed_lines:
        print(f"  - {line.name}")


def run_compare(args):
    """Benchmark standard vs enhanced on fixed and random boards."""
    print("\n=== Test Cases ===")
    rng = np.random.default_rng(args.seed)
    for name, board in default_test_cases(rng):
        result = compare_variants(board)
        if result is None:
            continue
        print(f"{name:14s} standard {result.standard.position} {result.standard.value:g} | "
              f"enhanced {result.enhanced.position} {result.enhanced.value:g} | {result.assessment}")

    print(f"\n=== Random Boards ({args.boards}) ===")
    config = BenchmarkConfig(seed=args.seed, boards=args.boards)
    results = run_benchmark(random_boards(config))
    summary = summarize_benchmark(results)
    print(f"  Boards:           {summary['boards']}")
    print(f"  Same move:        {summary['same_move_rate']:.2%}")
    print(f"  Enhanced better:  {summary['enhanced_better_rate']:.2%}")
    print(f"  Standard better:  {summary['standard_better_rate']:.2%}")
    print(f"  Equivalent:       {summary['equivalent_rate']:.2%}")
    print(f"  Avg time (ms):    standard {summary['avg_standard_ms']:.3f} | "
          f"enhanced {summary['avg_enhanced_ms']:.3f}")
    print(f"  Avg value gap:    {summary['avg_value_difference']:.2f}")


def main():
    parser = argparse.ArgumentParser(description="Cooperative Bingo advisor")
    parser.add_argument("--variant", type=str, default="standard",
                        choices=["standard", "enhanced"], help="Scoring variant")
    parser.add_argument("--compare", action="store_true", help="Compare scoring variants")
    parser.add_argument("--boards", type=int, default=200, help="Random boards to compare")
    parser.add_argument("--seed", type=int, default=0, help="Random seed")

    args = parser.parse_args()

    if args.compare:
        run_compare(args)
        return

    engine = GameEngine(config=EngineConfig(variant=args.variant))
    play_interactive(engine)


if __name__ == "__main__":
    main()
