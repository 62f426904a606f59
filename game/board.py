import logging

from .errors import GameOverError
from .guess import Guess
from .ruleset import DEFAULT_RULES, display_symbol
from .secret_code import Code
from state.game_state import GameState, guess_to_dict
from state.persistence import load_state, save_state


class Board:
    """Game board: holds the secret code and the guess history of one round."""

    def __init__(self, rules=None):
        """Initialize the board with a given ruleset."""
        self.rules = rules or DEFAULT_RULES
        self.secret_code = Code(rules=self.rules)
        self.guesses = []
        self.current_attempt = 0
        self.max_attempts = self.rules.get("max_attempts", 10)
        self.is_over = False
        self.is_won = False

    def initialize_game(self, code=None, rng=None):
        """Set up a new game with the given secret, or a random one."""
        if code is None:
            self.secret_code = Code(rules=self.rules)
            self.secret_code.generate_random(rng)
        else:
            self.secret_code = Code(code, rules=self.rules)
            self.secret_code.validate(strict=True)
        self.guesses = []
        self.current_attempt = 0
        self.is_over = False
        self.is_won = False

    def make_guess(self, guess_input, by_player=True):
        """
        Validate and score a guess, then update the win/loss state.

        Returns:
            Feedback: The bulls and hits for this guess.
        Raises:
            InvalidCodeError: The guess breaks the rules.
            GameOverError: The round is already finished.
        """
        if self.is_over:
            raise GameOverError("The game is already over.")

        new_guess = Guess(guess_input, rules=self.rules, by_player=by_player)
        new_guess.validate(strict=True)

        feedback = self.secret_code.compare_with(new_guess)
        new_guess.apply_feedback(feedback)

        self.guesses.append(new_guess)
        self.current_attempt += 1

        self.check_game_over()
        logging.debug(
            f"Guess {self.current_attempt}: {new_guess} -> {feedback.bulls} bulls, "
            f"{feedback.hits} hits"
        )
        return feedback

    def get_feedback_history(self):
        """Return the full history as (sequence, Feedback) pairs."""
        return [(list(g.get_guess()), g.get_feedback()) for g in self.guesses]

    def check_game_over(self):
        """Check if the game is finished (win or all attempts used)."""
        last_guess = self.guesses[-1]
        if last_guess.get_feedback().is_solved(self.rules["code_length"]):
            self.is_over = True
            self.is_won = True
            return

        if self.remaining_attempts() <= 0:
            self.is_over = True

    def reveal_code(self):
        """Return the secret code (used at the end of the game)."""
        return self.secret_code.as_string()

    def remaining_attempts(self):
        return max(0, self.max_attempts - self.current_attempt)

    def get_current_state(self, **session_fields):
        """Return a GameState snapshot for saving or analysis."""
        return GameState(
            rules=self.rules,
            guesses=list(self.guesses),
            current_attempts=self.current_attempt,
            is_over=self.is_over,
            is_won=self.is_won,
            code=list(self.secret_code.sequence),
            **session_fields,
        )

    def save(self, filename="game_state.json"):
        save_state(self.get_current_state(), filename)

    @classmethod
    def from_state(cls, state):
        board = cls(rules=state.rules)
        board.guesses = []
        for g in map(guess_to_dict, state.guesses):
            guess_obj = Guess(
                g["guess"], rules=board.rules, by_player=g["by_player"]
            )
            fb = g["feedback"]
            guess_obj.apply_feedback((fb["bulls"], fb["hits"]))
            board.guesses.append(guess_obj)
        board.current_attempt = state.current_attempts
        board.is_over = state.is_over
        board.is_won = state.is_won
        board.secret_code = Code(state.secret_code, rules=board.rules)
        return board

    @classmethod
    def from_file(cls, filename):
        return cls.from_state(load_state(filename))

    def render(self, width=None, out=print):
        """Render a text-based representation of the board (for CLI)."""
        display = self.rules["display"]
        length = self.rules["code_length"]
        width = width or length * 2 + 1
        line = "+----" * width + "+"

        out(line)
        out("| " + "Bullseye".center(len(line) - 4) + " |")
        out(line)
        for idx, guess in enumerate(self.guesses, start=1):
            attempt_line = f"| {idx:>2} "
            for s in guess.get_guess():
                attempt_line += "| " + display_symbol(s, self.rules) + " "
            bulls, hits = guess.get_feedback()
            pegs = (
                [display["bull"]] * bulls
                + [display["hit"]] * hits
                + [display["empty"]] * max(0, length - bulls - hits)
            )
            attempt_line += "| " + " ".join(pegs) + " "
            if not guess.by_player:
                attempt_line += "| 🤖 "
            out(attempt_line + "|")
        out(line)
