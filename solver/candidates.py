from __future__ import annotations

from itertools import permutations, product

from game.feedback import Feedback, score
from solver.agent_interface import History


def all_codes(rules: dict) -> list[tuple[str, ...]]:
    """Every code the rules allow, in a stable order."""
    symbols = rules["symbols"]
    length = rules["code_length"]
    if rules.get("allow_duplicates", False):
        return list(product(symbols, repeat=length))
    return list(permutations(symbols, length))


def is_consistent(
    code: tuple[str, ...], history: History
) -> bool:
    """True if code, as the secret, would have produced every recorded feedback."""
    for guess, feedback in history:
        if score(code, guess) != Feedback(*feedback):
            return False
    return True


def consistent_candidates(
    history: History, rules: dict, pool: list[tuple[str, ...]] | None = None
) -> list[tuple[str, ...]]:
    """Filter pool (default: all codes) down to codes matching the history."""
    pool = all_codes(rules) if pool is None else pool
    return [code for code in pool if is_consistent(code, history)]


def partition_sizes(
    probe: tuple[str, ...], candidates: list[tuple[str, ...]]
) -> dict[Feedback, int]:
    """How the candidates split by the feedback they would give to probe."""
    counts: dict[Feedback, int] = {}
    for code in candidates:
        fb = score(code, probe)
        counts[fb] = counts.get(fb, 0) + 1
    return counts
