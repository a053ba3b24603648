#!/usr/bin/env python3
"""
Simulate cooperative Bingo games where the player follows the advisor.

Writes per-game history, a summary, plots and a markdown report.

Usage:
    python simulate.py                          # 200 games, standard weights
    python simulate.py --games 1000 --variant enhanced
    python simulate.py --computer-policy suggested --run-name coop
"""

import sys
import time
import json
import argparse
from dataclasses import asdict
from pathlib import Path

import pandas as pd
from tqdm.auto import tqdm

# Make the src/ package importable without installing
sys.path.insert(0, str(Path(__file__).parent / "src"))

from bingo import (
    GameEngine,
    EngineConfig,
    LineType,
    SimulationConfig,
    run_simulation,
)
from bingo.simulate import summarize_history

PLOTS = [
    ("plot_1_lines_hist.png", "Completed Lines per Game"),
    ("plot_2_line_types.png", "Average Lines by Type"),
    ("plot_3_lines_rolling.png", "Completed Lines (Rolling Avg)"),
    ("plot_4_cache.png", "Scorer Cache"),
]


def _finish(plt, path: Path, title: str, xlabel: str = "", ylabel: str = ""):
    plt.title(title, fontsize=14, fontweight='bold')
    if xlabel:
        plt.xlabel(xlabel, fontsize=12)
    if ylabel:
        plt.ylabel(ylabel, fontsize=12)
    plt.grid(True, alpha=0.3)
    plt.tight_layout()
    plt.savefig(path, dpi=150, bbox_inches='tight')
    plt.close()


def create_all_plots(df: pd.DataFrame, output_dir: Path):
    """Line histogram, per-type means, rolling average and scorer cache plots."""
    import matplotlib
    matplotlib.use('Agg')
    import matplotlib.pyplot as plt

    (hist_png, hist_title), (types_png, types_title), (roll_png, _), (cache_png, _) = PLOTS

    plt.figure(figsize=(10, 6))
    plt.hist(df['total_lines'], bins=range(0, int(df['total_lines'].max()) + 2),
             align='left', rwidth=0.8)
    _finish(plt, output_dir / hist_png, hist_title, 'Lines', 'Games')

    plt.figure(figsize=(10, 6))
    names = [t.value for t in LineType]
    plt.bar(names, [df[f"lines_{name}"].mean() for name in names])
    _finish(plt, output_dir / types_png, types_title, ylabel='Lines per game')

    window = max(1, len(df) // 20)
    plt.figure(figsize=(10, 6))
    plt.plot(df['game'], df['total_lines'].rolling(window, min_periods=1).mean(), linewidth=2)
    _finish(plt, output_dir / roll_png, f'Completed Lines (Rolling Avg, window={window})',
            'Game', 'Lines')

    fig, (left, right) = plt.subplots(1, 2, figsize=(14, 5))
    for ax, column, title, color in (
        (left, 'cache_hit_rate', 'Cache Hit Rate (%)', 'green'),
        (right, 'avg_calc_ms', 'Avg Calculation Time (ms)', 'red'),
    ):
        ax.plot(df['game'], df[column], linewidth=2, color=color)
        ax.set_title(title, fontsize=12, fontweight='bold')
        ax.grid(True, alpha=0.3)
    fig.tight_layout()
    fig.savefig(output_dir / cache_png, dpi=150, bbox_inches='tight')
    plt.close(fig)


def _table(header, rows):
    out = [f"| {header[0]} | {header[1]} |", "|---|---|"]
    out += [f"| {k} | {v} |" for k, v in rows]
    return out


def generate_markdown_report(df: pd.DataFrame, summary: dict, config: SimulationConfig, run_dir: Path):
    """Write REPORT.md next to the run's other outputs."""
    md = ["# Cooperative Bingo Simulation Report\n",
          f"**Generated:** {time.strftime('%Y-%m-%d %H:%M:%S')}\n",
          "\n## Configuration\n"]
    md += _table(("Parameter", "Value"), [
        ("Games", f"{config.games:,}"),
        ("Variant", config.variant),
        ("Computer policy", config.computer_policy),
        ("Seed", config.seed),
    ])

    md.append("\n## Results\n")
    rows = [
        ("**Mean lines**", f"{summary['lines_mean']:.2f}"),
        ("Std lines", f"{summary['lines_std']:.2f}"),
        ("Min / Max", f"{summary['lines_min']:.0f} / {summary['lines_max']:.0f}"),
    ]
    rows += [(f"{g.capitalize()} games", f"{summary[f'outcome_{g}']:.1%}")
             for g in ("excellent", "good", "average", "poor")]
    rows.append(("Last game cache hit rate", f"{df['cache_hit_rate'].iloc[-1]:.2f}%"))
    md += _table(("Metric", "Value"), rows)

    md.append("\n## Plots\n")
    for png, title in PLOTS:
        if (run_dir / "plots" / png).exists():
            md.append(f"\n### {title}\n\n![{title}](plots/{png})\n")

    md.append("\n## Output Files\n")
    for name, what in (("config.json", "Simulation configuration"),
                       ("history.csv", "One row per game"),
                       ("summary.json", "Aggregate results"),
                       ("plots/", "Visualization PNGs"),
                       ("REPORT.md", "This report")):
        md.append(f"- `{name}` - {what}")

    report_path = run_dir / "REPORT.md"
    report_path.write_text('\n'.join(md) + '\n')
    print(f"✓ Markdown report saved to {report_path}")


def main():
    parser = argparse.ArgumentParser(description="Simulate cooperative Bingo games")
    parser.add_argument("--games", type=int, default=200, help="Games to play")
    parser.add_argument("--variant", type=str, default="standard",
                        choices=["standard", "enhanced"], help="Scoring variant")
    parser.add_argument("--computer-policy", type=str, default="random",
                        choices=["random", "suggested"], help="How the computer picks cells")
    parser.add_argument("--print-every", type=int, default=50, help="Progress line every N games")
    parser.add_argument("--run-name", type=str, default="bingo_run", help="Subdirectory of --save-dir")
    parser.add_argument("--save-dir", type=str, default="runs", help="Output root")
    parser.add_argument("--seed", type=int, default=0, help="Random seed")
    args = parser.parse_args()

    config = SimulationConfig(
        seed=args.seed,
        games=args.games,
        variant=args.variant,
        computer_policy=args.computer_policy,
        print_every=args.print_every,
        save_dir=args.save_dir,
    )
    run_dir = Path(config.save_dir) / args.run_name
    (run_dir / "plots").mkdir(parents=True, exist_ok=True)
    (run_dir / "config.json").write_text(json.dumps(asdict(config), indent=2))

    engine = GameEngine(config=EngineConfig(variant=config.variant))

    print("\n=== Simulating ===")
    history = run_simulation(config, engine=engine)
    summary = summarize_history(history)
    tqdm.write(f"Played {summary['games']} games | mean lines {summary['lines_mean']:.2f}")

    print("\n=== Saving ===")
    df = pd.DataFrame(history)
    df.to_csv(run_dir / "history.csv", index=False)
    (run_dir / "summary.json").write_text(json.dumps(summary, indent=2))
    print(f"✓ History and summary saved to {run_dir}")

    print("\n=== Plotting ===")
    create_all_plots(df, run_dir / "plots")
    generate_markdown_report(df, summary, config, run_dir)

    print("\n=== Results ===")
    print(f"Mean lines: {summary['lines_mean']:.2f} ± {summary['lines_std']:.2f}")
    print(" | ".join(f"{g.capitalize()}: {summary[f'outcome_{g}']:.1%}"
                     for g in ("excellent", "good", "average", "poor")))
    perf = engine.scorer.performance().to_dict()
    print(f"Scorer (last game): hit rate {perf['cacheHitRate']} | avg {perf['averageCalculationTime']} | "
          f"cache {perf['cacheSize']}")
    print(f"\n✅ All outputs saved to: {run_dir}")


if __name__ == "__main__":
    main()
