# state/stats.py
from __future__ import annotations

import json
import logging
from pathlib import Path

DEFAULT_STATS_FILE = "bullseye_stats.json"


def default_stats() -> dict:
    return {
        "games_played": 0,
        "games_won": 0,
        "total_guesses_in_wins": 0,
        "best_game_guesses": None,
    }


class StatsStore:
    """
    Per-user game statistics kept in a single JSON file keyed by user id.

    Storage failures never interrupt a game: unreadable files are treated as
    empty and failed writes are logged.
    """

    def __init__(self, path: str | Path = DEFAULT_STATS_FILE):
        self.path = Path(path)

    def _load_all(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            # ValueError covers JSON and UTF-8 decode errors
            logging.error(f"Failed to read stats from {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            logging.error(f"Stats file {self.path} has unexpected content")
            return {}
        return data

    def _save_all(self, all_stats: dict) -> None:
        try:
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(all_stats, f, indent=2)
        except OSError as e:
            logging.error(f"Failed to save stats to {self.path}: {e}")

    def _user_stats(self, all_stats: dict, user_id: str) -> dict:
        stats = default_stats()
        entry = all_stats.get(user_id)
        if entry is None:
            return stats
        if not _is_valid_entry(entry):
            logging.error(
                f"Stats for {user_id} in {self.path} are malformed, starting over"
            )
            return stats
        stats.update({k: entry[k] for k in stats if k in entry})
        return stats

    def get(self, user_id: str) -> dict:
        return self._user_stats(self._load_all(), user_id)

    def update(self, user_id: str, won: bool, guesses: int) -> dict:
        """Record one finished game and return the user's new stats."""
        all_stats = self._load_all()
        stats = self._user_stats(all_stats, user_id)

        stats["games_played"] += 1
        if won:
            stats["games_won"] += 1
            stats["total_guesses_in_wins"] += guesses
            best = stats["best_game_guesses"]
            if best is None or guesses < best:
                stats["best_game_guesses"] = guesses

        all_stats[user_id] = stats
        self._save_all(all_stats)
        return stats


def _is_valid_entry(entry) -> bool:
    if not isinstance(entry, dict):
        return False
    for key in ("games_played", "games_won", "total_guesses_in_wins"):
        value = entry.get(key, 0)
        if not isinstance(value, int) or isinstance(value, bool) or value < 0:
            return False
    best = entry.get("best_game_guesses")
    return best is None or (isinstance(best, int) and not isinstance(best, bool))


def win_rate(stats: dict) -> float | None:
    """Share of games won, None before the first game."""
    if stats["games_played"] == 0:
        return None
    return stats["games_won"] / stats["games_played"]


def average_guesses(stats: dict) -> float | None:
    """Average number of guesses in won games, None without a win."""
    if stats["games_won"] == 0:
        return None
    return stats["total_guesses_in_wins"] / stats["games_won"]


def format_stats(stats: dict) -> str:
    rate = win_rate(stats)
    avg = average_guesses(stats)
    best = stats["best_game_guesses"]
    return "\n".join(
        [
            f"Games played : {stats['games_played']}",
            f"Games won    : {stats['games_won']}",
            f"Win rate     : {'N/A' if rate is None else f'{round(rate * 100)}%'}",
            f"Avg guesses  : {'N/A' if avg is None else f'{avg:.1f}'}",
            f"Best game    : {'N/A' if best is None else best}",
        ]
    )
