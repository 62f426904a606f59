from __future__ import annotations

import random

from game.secret_code import random_sequence
from solver.agent_interface import GuessAgent, History


class RandomAgent(GuessAgent):
    """Ignores feedback and guesses a random valid code."""

    name = "random"

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng or random.Random()

    def next_guess(self, history: History, rules: dict) -> list[str]:
        return random_sequence(rules, self.rng)
