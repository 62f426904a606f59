from __future__ import annotations

from typing import NamedTuple, Sequence


class Feedback(NamedTuple):
    """
    Result of scoring a guess against a secret code.
    Attributes:
        bulls (int): Correct symbol in the correct position.
        hits (int): Correct symbol in the wrong position.
    """

    bulls: int
    hits: int

    def is_solved(self, code_length: int) -> bool:
        return self.bulls == code_length

    def sound(self) -> str:
        """Name of the cue played for this feedback."""
        if self.bulls > 0:
            return "bull"
        if self.hits > 0:
            return "hit"
        return "miss"

    def to_dict(self) -> dict:
        return {"bulls": self.bulls, "hits": self.hits}


def score(secret: Sequence[str], guess: Sequence[str]) -> Feedback:
    """
    Compare a guess with the secret code.

    Args:
        secret: The hidden sequence.
        guess: The guessed sequence, same length as secret.
    Returns:
        Feedback: (bulls, hits)

    Notes:
        Positions counted as bulls are excluded from hit-counting, and each
        remaining secret symbol can satisfy at most one guess symbol.
    """
    if len(secret) != len(guess):
        raise ValueError(
            f"Cannot compare sequences of length {len(secret)} and {len(guess)}."
        )

    bulls = 0
    hits = 0

    remaining_code = list(secret)
    remaining_guess = list(guess)

    # Count symbol and position.
    for i in range(len(secret)):
        if secret[i] == guess[i]:
            bulls += 1
            remaining_guess[i] = None
            remaining_code[i] = None

    # Count symbol only, consuming matched secret positions.
    for symbol in remaining_guess:
        if symbol is not None and symbol in remaining_code:
            hits += 1
            remaining_code[remaining_code.index(symbol)] = None

    return Feedback(bulls, hits)
