from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from .board import Board
from .errors import InvalidCodeError, SessionStateError
from .feedback import Feedback
from .modes import GameMode, Phase, PlayerRole
from .ruleset import DEFAULT_RULES, build_rules
from .secret_code import random_sequence, validate_sequence
from solver.agent_interface import GuessAgent
from solver.random_agent import RandomAgent
from state.game_state import GameState
from state.stats import StatsStore
from state.user import User


class SoundEffect(str, Enum):
    CLICK = "click"
    BULL = "bull"
    HIT = "hit"
    MISS = "miss"
    WIN = "win"
    SELECT_PEG = "select_peg"
    SELECT_THEME = "select_theme"
    CLEAR = "clear"


@dataclass
class Settings:
    sound_enabled: bool = True


# Rules a base ruleset may carry over when a theme is chosen
CARRIED_RULES = (
    "code_length",
    "max_attempts",
    "allow_duplicates",
    "agent_delay_s",
    "lobby_delay_s",
)


class Session:
    """
    State machine for a single match.

    menu -> theme_select -> (searching ->) [code_set ->] playing -> won | lost

    restart() returns to the menu from any phase.

    Attributes:
        phase (Phase): Current phase.
        mode (GameMode | None): Chosen game mode.
        role (PlayerRole | None): Player role in an online match.
        rules (dict): Ruleset of the current match.
        board (Board | None): The round being played.
        user (User | None): Signed-in player; stats are recorded for them.
    """

    def __init__(
        self,
        rules: dict | None = None,
        user: User | None = None,
        stats: StatsStore | None = None,
        agent: GuessAgent | None = None,
        rng: random.Random | None = None,
        settings: Settings | None = None,
        on_sound: Callable[[SoundEffect], None] | None = None,
        on_game_end: Callable[[Session], None] | None = None,
    ):
        self.base_rules = rules or DEFAULT_RULES
        self.user = user
        self.stats = stats
        self.agent = agent or RandomAgent()
        self.rng = rng or random.Random()
        self.settings = settings or Settings()
        self.on_sound = on_sound
        self.on_game_end = on_game_end
        self._reset()

    def _reset(self) -> None:
        self.phase = Phase.MENU
        self.mode: GameMode | None = None
        self.role: PlayerRole | None = None
        self.theme: str | None = None
        self.rules = self.base_rules
        self.board: Board | None = None
        self.last_stats: dict | None = None

    # --- helpers ---

    def _require(self, *phases: Phase) -> None:
        if self.phase not in phases:
            expected = " or ".join(p.value for p in phases)
            raise SessionStateError(
                f"Action not allowed in phase '{self.phase.value}'.",
                details=f"expected {expected}",
                phase=self.phase.value,
            )

    def play_sound(self, effect: SoundEffect) -> None:
        if self.settings.sound_enabled and self.on_sound is not None:
            self.on_sound(SoundEffect(effect))

    def toggle_sound(self) -> bool:
        self.settings.sound_enabled = not self.settings.sound_enabled
        return self.settings.sound_enabled

    def _start_round(self, code=None) -> None:
        board = Board(rules=self.rules)
        board.initialize_game(code=code, rng=self.rng)
        self.board = board
        self.phase = Phase.PLAYING
        logging.info(
            f"Round started: mode={self.mode.value}, theme={self.theme}, "
            f"role={self.role.value if self.role else None}"
        )

    # --- transitions ---

    def select_mode(self, mode: GameMode | str) -> None:
        self._require(Phase.MENU)
        self.mode = GameMode(mode)
        self.phase = Phase.THEME_SELECT

    def select_theme(self, theme: str) -> None:
        self._require(Phase.THEME_SELECT)
        carried = {k: self.base_rules[k] for k in CARRIED_RULES if k in self.base_rules}
        self.rules = build_rules(theme, **carried)
        self.theme = theme
        self.play_sound(SoundEffect.SELECT_THEME)

        if self.mode is GameMode.PVC:
            # computer picks the code
            self._start_round()
        elif self.mode is GameMode.PVP_LOCAL:
            self.phase = Phase.CODE_SET
        else:
            self.phase = Phase.SEARCHING

    def match_found(self, role: PlayerRole | str | None = None) -> PlayerRole:
        """Assign a role (coin flip unless given) once an opponent is found."""
        self._require(Phase.SEARCHING)
        if role is None:
            role = PlayerRole.GUESSER if self.rng.random() < 0.5 else PlayerRole.SETTER
        self.role = PlayerRole(role)

        if self.role is PlayerRole.GUESSER:
            # opponent sets the code
            self._start_round()
        else:
            self.phase = Phase.CODE_SET
        return self.role

    def set_code(self, code) -> None:
        """Set the secret code chosen by a human setter."""
        self._require(Phase.CODE_SET)
        self._start_round(code=code)

    @property
    def is_players_turn_to_guess(self) -> bool:
        if self.phase is not Phase.PLAYING:
            return False
        return self.mode in (GameMode.PVC, GameMode.PVP_LOCAL) or (
            self.mode is GameMode.PVP_ONLINE and self.role is PlayerRole.GUESSER
        )

    @property
    def is_agents_turn_to_guess(self) -> bool:
        return (
            self.phase is Phase.PLAYING
            and self.mode is GameMode.PVP_ONLINE
            and self.role is PlayerRole.SETTER
        )

    def submit_guess(self, guess) -> Feedback:
        """Score a human guess. Raises InvalidCodeError for a bad guess."""
        self._require(Phase.PLAYING)
        if not self.is_players_turn_to_guess:
            raise SessionStateError(
                "It is not the player's turn to guess.", phase=self.phase.value
            )
        return self._add_turn(guess, by_player=True)

    def play_agent_turn(self) -> Feedback:
        """Let the computer opponent make its guess."""
        self._require(Phase.PLAYING)
        if not self.is_agents_turn_to_guess:
            raise SessionStateError(
                "It is not the opponent's turn to guess.", phase=self.phase.value
            )
        history = self.board.get_feedback_history()
        try:
            guess = self.agent.next_guess(history, self.rules)
            validate_sequence(guess, self.rules, strict=True)
        except InvalidCodeError as e:
            logging.error(f"Opponent produced an invalid guess, using a random one: {e}")
            guess = random_sequence(self.rules, self.rng)
        except Exception:
            logging.exception("Opponent failed to make a guess, using a random one")
            guess = random_sequence(self.rules, self.rng)
        return self._add_turn(guess, by_player=False)

    def _add_turn(self, guess, by_player: bool) -> Feedback:
        feedback = self.board.make_guess(guess, by_player=by_player)
        self.play_sound(SoundEffect(feedback.sound()))

        if self.board.is_won:
            self.play_sound(SoundEffect.WIN)
            self.phase = Phase.WON
        elif self.board.is_over:
            self.phase = Phase.LOST

        if self.board.is_over:
            logging.info(
                f"Round finished: {self.phase.value} after "
                f"{self.board.current_attempt} guesses"
            )
            if self.user is not None and self.stats is not None and by_player:
                self.last_stats = self.stats.update(
                    self.user.id,
                    won=self.board.is_won,
                    guesses=self.board.current_attempt,
                )
            if self.on_game_end is not None:
                self.on_game_end(self)
        return feedback

    def restart(self) -> None:
        self._reset()

    # --- persistence ---

    def snapshot(self) -> GameState:
        if self.board is None:
            raise SessionStateError(
                "No round to save.", phase=self.phase.value
            )
        return self.board.get_current_state(
            mode=self.mode.value,
            role=self.role.value if self.role else None,
            phase=self.phase.value,
        )

    @classmethod
    def restore(cls, state: GameState, **kwargs) -> Session:
        """Rebuild a session from a saved GameState."""
        session = cls(rules=state.rules, **kwargs)
        session.board = Board.from_state(state)
        session.rules = state.rules
        session.theme = state.theme
        session.mode = GameMode(state.mode or GameMode.PVC.value)
        session.role = PlayerRole(state.role) if state.role else None
        if state.phase:
            session.phase = Phase(state.phase)
        elif state.is_over:
            session.phase = Phase.WON if state.is_won else Phase.LOST
        else:
            session.phase = Phase.PLAYING
        return session
