from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from game.feedback import Feedback

History = Sequence[tuple[Sequence[str], Feedback]]


class GuessAgent(ABC):
    """A computer guesser: picks the next guess from the feedback so far."""

    name = "agent"

    @abstractmethod
    def next_guess(self, history: History, rules: dict) -> list[str]:
        """
        Args:
            history: (guess, feedback) pairs of the current round, oldest first.
            rules: The ruleset of the round.
        Returns:
            list[str]: The next guess.
        """
