from __future__ import annotations

import argparse
import json
import logging
import random
import time

from game.board import Board
from game.ruleset import DEFAULT_RULES, THEMES, build_rules, load_rules
from solver.agent_factory import AGENT_KINDS, make_agent
from state.stats import StatsStore, format_stats
from state.user import local_user
from ui.cli import gameloop


def play_game(agent, rules, rng):
    """
    Let an agent play one round against a random code.
    Returns:
        dict: won, guesses, total_time_s, turn_time_s
    """
    board = Board(rules=rules)
    board.initialize_game(rng=rng)
    turn_times = []
    start = time.perf_counter()

    while not board.is_over:
        turn_start = time.perf_counter()
        guess = agent.next_guess(board.get_feedback_history(), rules)
        board.make_guess(guess, by_player=False)
        turn_times.append(time.perf_counter() - turn_start)

    return {
        "won": board.is_won,
        "guesses": board.current_attempt,
        "total_time_s": time.perf_counter() - start,
        "turn_time_s": turn_times,
        "code": board.reveal_code(),
    }


def simulate(args):
    rng = random.Random(args.seed)
    base = load_rules(args.rules) if args.rules else DEFAULT_RULES
    carried = {k: base[k] for k in ("code_length", "max_attempts", "allow_duplicates")}
    runs = {}

    for theme in args.themes:
        rules = build_rules(theme, **carried)
        runs[theme] = {}
        for kind in args.agents:
            agent = make_agent(kind, rng=rng, progress=args.verbose)
            games = {"won": [], "guesses": [], "total_time_s": [], "turn_time_s": []}

            for counter in range(1, args.games + 1):
                result = play_game(agent, rules, rng)
                for key in games:
                    games[key].append(result[key])
                if args.verbose:
                    print(
                        f"[{theme}/{kind}] game {counter}: "
                        f"{'won' if result['won'] else 'lost'} in {result['guesses']} "
                        f"(code {result['code']}, {result['total_time_s']:.2f}s)"
                    )

            runs[theme][kind] = {"games": games}
            print_summary(theme, kind, games)

    if args.out:
        with open(args.out, "w", encoding="utf-8") as f:
            json.dump(
                {"code_length": carried["code_length"], "runs": runs}, f, indent=2
            )
        print(f"\nResults written to {args.out}")


def print_summary(theme, kind, games):
    n = len(games["won"])
    wins = sum(games["won"])
    won_guesses = [g for g, w in zip(games["guesses"], games["won"]) if w]
    times = games["total_time_s"]
    print(f"\n=== {kind} on {theme}: {wins}/{n} games won ===")
    print(f"Average time over {n} games: {sum(times) / n:.2f} seconds.")
    print(f"Max time over {n} games: {max(times):.2f} seconds.")
    if won_guesses:
        avg = sum(won_guesses) / len(won_guesses)
        print(f"Average guesses in won games: {avg:.2f}.")
        print(f"Max guesses in won games: {max(won_guesses)}.")
        print(f"Min guesses in won games: {min(won_guesses)}.")


def play(args):
    rules = load_rules(args.rules) if args.rules else DEFAULT_RULES
    gameloop(
        rules=rules,
        agent=make_agent(args.agent),
        stats=StatsStore(args.stats_file),
    )


def show_stats(args):
    user = local_user(args.name)
    print(f"--- {user.name} ---")
    print(format_stats(StatsStore(args.stats_file).get(user.id)))


def positive_int(value):
    n = int(value)
    if n < 1:
        raise argparse.ArgumentTypeError(f"expected a positive number, got {value}")
    return n


def build_parser():
    ap = argparse.ArgumentParser(description="Bullseye Arena code-breaking game")
    ap.add_argument("--log-level", default="WARNING", help="Logging level")
    ap.add_argument("--rules", default=None, help="JSON file with rule overrides")
    ap.add_argument(
        "--stats-file", default="bullseye_stats.json", help="Where player stats live"
    )
    sub = ap.add_subparsers(dest="command")

    p_play = sub.add_parser("play", help="Play in the terminal")
    p_play.add_argument(
        "--agent", choices=AGENT_KINDS, default="minimax", help="Online opponent"
    )
    p_play.set_defaults(func=play)

    p_sim = sub.add_parser("simulate", help="Let computer guessers play")
    p_sim.add_argument("--agents", nargs="+", choices=AGENT_KINDS, default=["minimax"])
    p_sim.add_argument("--themes", nargs="+", choices=list(THEMES), default=["numbers"])
    p_sim.add_argument("--games", type=positive_int, default=10)
    p_sim.add_argument("--seed", type=int, default=None)
    p_sim.add_argument("--out", default="simulation.json", help="Results JSON path")
    p_sim.add_argument("-v", "--verbose", action="store_true")
    p_sim.set_defaults(func=simulate)

    p_stats = sub.add_parser("stats", help="Show a player's statistics")
    p_stats.add_argument("name")
    p_stats.set_defaults(func=show_stats)
    return ap


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s - %(levelname)s - %(message)s",
    )
    if args.command is None:
        args.func = play
        args.agent = "minimax"
    args.func(args)


if __name__ == "__main__":
    main()
