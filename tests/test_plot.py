import json
import math

from plot.plot import compute_run_stats, main


GAMES = {
    "won": [True, True, False],
    "guesses": [4, 6, 10],
    "total_time_s": [0.1, 0.3, 0.5],
    "turn_time_s": [[0.01] * 4, [0.02] * 6, [0.03] * 10],
}


def test_compute_run_stats():
    stats = compute_run_stats(GAMES)
    assert stats["n_won"] == 2
    assert stats["n_games"] == 3
    assert stats["avg_guesses"] == 5
    assert stats["min_guesses"] == 4
    assert stats["max_guesses"] == 6
    assert len(stats["avg_turn_times"]) == 10
    assert math.isclose(stats["avg_turn_times"][0], 0.02)
    assert math.isclose(stats["avg_turn_times"][9], 0.03)


def test_compute_run_stats_without_wins():
    stats = compute_run_stats({"won": [False], "guesses": [10], "total_time_s": [1.0]})
    assert stats["n_won"] == 0
    assert math.isnan(stats["avg_guesses"])
    assert stats["avg_turn_times"] == []


def test_main_writes_charts(tmp_path):
    data = {"runs": {"numbers": {"random": {"games": GAMES}, "minimax": {"games": GAMES}}}}
    path = tmp_path / "simulation.json"
    path.write_text(json.dumps(data))
    outdir = tmp_path / "results"
    main(["--file", str(path), "--outdir", str(outdir)])
    written = sorted(p.name for p in outdir.iterdir())
    assert written == [
        "numbers_avg_guesses.png",
        "numbers_avg_turn_time.png",
        "numbers_guess_distribution.png",
    ]
