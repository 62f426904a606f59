from __future__ import annotations

import os
import random
import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass

from game.errors import AgentError
from game.feedback import Feedback
from solver.agent_interface import GuessAgent, History
from solver.candidates import all_codes, consistent_candidates, partition_sizes


# drop-in helper for progress and log line
def progress_print(msg: str) -> None:
    # overwrite same line, no newline
    print(f"\r\033[K{msg}", end="", flush=True)


def log_print(msg: str) -> None:
    # first terminate the progress line, then print normally
    print("\r\033[K", end="", flush=True)
    print(msg, flush=True)


@dataclass(frozen=True)
class MinimaxConfig:
    max_workers: int = max(1, (os.cpu_count() or 2) - 1)
    # below this many candidates, just guess one of them
    early_candidate_threshold: int = 2
    # above this many candidates, only candidates are probed
    large_set_threshold: int = 300
    # probes per worker task
    chunk_size: int = 64
    # first guess of a round is a random code instead of a full search
    random_opening: bool = True


class MinimaxSolver(GuessAgent):
    """
    Minimax guess selection over the codes still consistent with the feedback:
    - for each probe, the worst-case number of candidates left over all feedbacks
    - best guess = min over worst cases, ties prefer consistent candidates
    - early stop when only a few candidates remain

    Attributes:
        cfg: MinimaxConfig
        rng: random.Random
        progress: bool - print search progress to the terminal
    """

    name = "minimax"

    def __init__(
        self,
        config: MinimaxConfig | None = None,
        *,
        rng: random.Random | None = None,
        progress: bool = False,
    ):
        self.cfg = config or MinimaxConfig()
        self.rng = rng or random.Random()
        self.progress = progress
        self._codes_cache: dict[tuple, list[tuple[str, ...]]] = {}

    def _all_codes(self, rules: dict) -> list[tuple[str, ...]]:
        key = (
            tuple(rules["symbols"]),
            rules["code_length"],
            rules.get("allow_duplicates", False),
        )
        if key not in self._codes_cache:
            self._codes_cache[key] = all_codes(rules)
        return self._codes_cache[key]

    def _evaluate_chunk(
        self,
        probes: list[tuple[str, ...]],
        candidates: list[tuple[str, ...]],
        candidate_set: frozenset,
        stop_event: threading.Event,
    ) -> tuple[tuple[str, ...] | None, int, Feedback | None, bool]:
        """
        Best probe of a chunk.
        Returns:
            (probe, worst_case, worst_feedback, probe_is_candidate)
        """
        best = (None, float("inf"), None, False)
        for probe in probes:
            if stop_event.is_set():
                break
            sizes = partition_sizes(probe, candidates)
            worst_fb, worst = max(sizes.items(), key=lambda kv: kv[1])
            is_candidate = probe in candidate_set
            if worst < best[1] or (worst == best[1] and is_candidate and not best[3]):
                best = (probe, worst, worst_fb, is_candidate)
                # cannot do better than a consistent probe that splits perfectly
                if worst == 1 and is_candidate:
                    stop_event.set()
                    break
        return best

    def choose_guess(
        self, history: History, rules: dict
    ) -> tuple[tuple[str, ...], int, Feedback | None]:
        """
        Choose the best guess using the minimax strategy.
        Returns:
          best_guess, best_worst_case, best_worst_fb
        """
        codes = self._all_codes(rules)
        candidates = consistent_candidates(history, rules, pool=codes)
        if not candidates:
            raise AgentError(
                "No code is consistent with the feedback history.",
                details=f"{len(history)} guesses",
            )

        if len(candidates) <= self.cfg.early_candidate_threshold:
            return self.rng.choice(candidates), len(candidates), None

        if not history and self.cfg.random_opening:
            return self.rng.choice(candidates), len(candidates), None

        probes = candidates if len(candidates) > self.cfg.large_set_threshold else codes
        candidate_set = frozenset(candidates)
        stop_event = threading.Event()

        best_guess = None
        best_cnt = float("inf")
        best_fb = None
        best_is_candidate = False

        start = time.perf_counter()
        last_report = start
        done = 0
        chunks = [
            probes[i : i + self.cfg.chunk_size]
            for i in range(0, len(probes), self.cfg.chunk_size)
        ]

        with ThreadPoolExecutor(max_workers=self.cfg.max_workers) as pool:
            futures = [
                pool.submit(
                    self._evaluate_chunk, chunk, candidates, candidate_set, stop_event
                )
                for chunk in chunks
            ]
            for fut in as_completed(futures):
                probe, cnt, fb, is_candidate = fut.result()
                done += 1
                if probe is None:
                    continue

                better = cnt < best_cnt or (
                    cnt == best_cnt and is_candidate and not best_is_candidate
                )
                # order-independent tie break between equal probes
                tie = (
                    cnt == best_cnt
                    and is_candidate == best_is_candidate
                    and best_guess is not None
                    and probe < best_guess
                )
                if better or tie:
                    best_guess, best_cnt, best_fb = probe, cnt, fb
                    best_is_candidate = is_candidate

                now = time.perf_counter()
                if self.progress and now - last_report >= 2.0:
                    progress_print(
                        f"Progress: {done}/{len(chunks)} chunks "
                        f"({len(candidates)} candidates left)"
                    )
                    last_report = now

        if self.progress:
            log_print(
                f"Best guess : {best_guess}\n"
                f"with fb    : {best_fb}\n"
                f"min max    : {best_cnt}\n"
                f"took       : {time.perf_counter() - start:.2f}s"
            )
        return best_guess, int(best_cnt), best_fb

    def next_guess(self, history: History, rules: dict) -> list[str]:
        best_guess, _, _ = self.choose_guess(history, rules)
        return list(best_guess)
