from __future__ import annotations

import random

from game.errors import AgentError
from solver.agent_interface import GuessAgent
from solver.llm_agent import LlmAgent
from solver.random_agent import RandomAgent
from solver.solver_manager import MinimaxConfig, MinimaxSolver

AGENT_KINDS = ("random", "minimax", "llm")


def make_agent(
    kind: str, *, rng: random.Random | None = None, progress: bool = False
) -> GuessAgent:
    """Build a computer guesser by name."""
    if kind == "random":
        return RandomAgent(rng=rng)
    if kind == "minimax":
        return MinimaxSolver(MinimaxConfig(), rng=rng, progress=progress)
    if kind == "llm":
        return LlmAgent(rng=rng)
    raise AgentError(
        f"Unknown agent '{kind}'.", details=f"choose one of {', '.join(AGENT_KINDS)}"
    )
