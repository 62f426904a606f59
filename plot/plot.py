import argparse
import json
from pathlib import Path

import numpy as np
import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt


def _annotate_points(ax, xs, ys, *, fmt="{:.2f}", dx=0, dy=6, fontsize=8):
        """
        Annotate points (x, y) on ax with formatted y values.

        Args:
            ax: matplotlib Axes
            xs: list of x coordinates
            ys: list of y coordinates
            fmt: format string for y values
            dx: x offset in points
            dy: y offset in points
            fontsize: font size for annotations
        """

        for x, y in zip(xs, ys):
            if y is None or np.isnan(y):
                continue
            ax.annotate(
                fmt.format(y),
                (x, y),
                textcoords="offset points",
                xytext=(dx, dy),
                ha="center",
                va="center",
                fontsize=fontsize,
            )


def compute_run_stats(games: dict):
    """
    Returns a dict with:
      avg/min/max_guesses (float, np.nan if no won games), won games only
      avg_turn_times (list[float]) average time per turn index, all games
      avg_total_time (float)
      n_won, n_games (int)
      guess_counts (np.ndarray) guesses of each won game
    """
    won = np.array(games.get("won", []), dtype=bool)
    guesses = np.array(games.get("guesses", []), dtype=np.int32)
    total_time = np.array(games.get("total_time_s", []), dtype=np.float32)

    # Guard against length mismatches
    n = min(len(won), len(guesses), len(total_time))
    won = won[:n]
    guesses = guesses[:n]
    total_time = total_time[:n]

    won_guesses = guesses[won]
    if won_guesses.size > 0:
        avg_guesses = float(np.mean(won_guesses))
        min_guesses = float(np.min(won_guesses))
        max_guesses = float(np.max(won_guesses))
    else:
        avg_guesses = min_guesses = max_guesses = np.nan

    # average time per turn index; later turns only exist in longer games
    turn_rows = games.get("turn_time_s", [])[:n]
    max_turns = max((len(r) for r in turn_rows), default=0)
    avg_turn_times = []
    for t in range(max_turns):
        vals = [r[t] for r in turn_rows if t < len(r)]
        avg_turn_times.append(float(np.mean(vals)) if vals else np.nan)

    return {
        "avg_guesses": avg_guesses,
        "min_guesses": min_guesses,
        "max_guesses": max_guesses,
        "avg_turn_times": avg_turn_times,
        "avg_total_time": float(np.mean(total_time)) if n else np.nan,
        "n_won": int(won_guesses.size),
        "n_games": int(n),
        "guess_counts": won_guesses,
    }


def plot_theme(theme, agents_runs, outdir, max_attempts=10):
    """Write the charts for one theme, return the created paths."""
    agents = sorted(agents_runs)
    stats = {a: compute_run_stats(agents_runs[a].get("games", {})) for a in agents}
    outputs = []

    plt.rcParams["lines.solid_capstyle"] = "round"
    plt.rcParams["lines.solid_joinstyle"] = "round"
    plt.rcParams["lines.linewidth"] = 1.0

    # Plot 1: average guesses per agent with min/max markers
    x = np.arange(len(agents))
    avg = [stats[a]["avg_guesses"] for a in agents]
    mins = [stats[a]["min_guesses"] for a in agents]
    maxs = [stats[a]["max_guesses"] for a in agents]
    plt.figure(figsize=(10, 6))
    plt.bar(x, avg, alpha=0.6, label="Average guesses")
    plt.scatter(x, maxs, marker="^", s=20, label="Max guesses")
    plt.scatter(x, mins, marker="v", s=20, label="Min guesses")
    _annotate_points(plt.gca(), x, avg, fmt="{:.2f}", dy=8)
    plt.title(
        f"Guesses per won game ({theme})\n Games won: "
        + ", ".join(f"{a}: {stats[a]['n_won']}/{stats[a]['n_games']}" for a in agents)
    )
    plt.xticks(x, agents)
    plt.ylabel("Guesses [won games]")
    plt.grid(True, axis="y")
    plt.legend()
    out1 = outdir / f"{theme}_avg_guesses.png"
    plt.savefig(out1, dpi=200, bbox_inches="tight")
    plt.close()
    outputs.append(out1)

    # Plot 2: distribution of guesses needed
    plt.figure(figsize=(10, 6))
    bins = np.arange(1, max_attempts + 2) - 0.5
    for a in agents:
        counts = stats[a]["guess_counts"]
        if counts.size == 0:
            continue
        plt.hist(counts, bins=bins, alpha=0.5, label=a)
    plt.title(f"Guesses needed ({theme})")
    plt.xlabel("Guesses")
    plt.ylabel("Games")
    plt.xticks(np.arange(1, max_attempts + 1))
    plt.legend()
    out2 = outdir / f"{theme}_guess_distribution.png"
    plt.savefig(out2, dpi=200, bbox_inches="tight")
    plt.close()
    outputs.append(out2)

    # Plot 3: average turn time vs turn number
    max_turns = max((len(stats[a]["avg_turn_times"]) for a in agents), default=0)
    if max_turns == 0:
        print(f"[info] No turn-time data to plot for {theme}.")
        return outputs
    plt.figure(figsize=(12, 8))
    for a in agents:
        y = stats[a]["avg_turn_times"]
        if not y:
            continue
        xs = np.arange(1, len(y) + 1)
        plt.plot(xs, y, marker="o", label=a)
        _annotate_points(plt.gca(), xs, y, fmt="{:.3f}s", dy=8)
    plt.title(f"Average Turn Time ({theme})")
    plt.xlabel("Turn Number")
    plt.ylabel("Average Turn Time (s)")
    plt.xticks(np.arange(1, max_turns + 1))
    plt.legend(title="Agent")
    plt.grid(True)
    out3 = outdir / f"{theme}_avg_turn_time.png"
    plt.savefig(out3, dpi=200, bbox_inches="tight")
    plt.close()
    outputs.append(out3)
    return outputs


def main(argv=None):
    ap = argparse.ArgumentParser()
    ap.add_argument("--file", default="simulation.json", help="Path to simulation JSON")
    ap.add_argument("--themes", nargs="*", default=None,
                    help="Which themes to plot. Default: all found.")
    ap.add_argument("--max-attempts", type=int, default=10)
    ap.add_argument("--outdir", default="./results", help="Output directory for PNGs")
    args = ap.parse_args(argv)

    path = Path(args.file)
    outdir = Path(args.outdir)
    outdir.mkdir(parents=True, exist_ok=True)

    with path.open("r", encoding="utf-8") as f:
        runs = json.load(f).get("runs", {})

    if not runs:
        raise ValueError("No runs found in data['runs'].")

    themes = sorted(runs) if args.themes is None else args.themes
    for theme in themes:
        if theme not in runs:
            print(f"[skip] No runs for theme {theme}.")
            continue
        for out in plot_theme(theme, runs[theme], outdir, args.max_attempts):
            print(f"Wrote {out}")


if __name__ == "__main__":
    main()
