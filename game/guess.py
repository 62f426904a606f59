from .feedback import Feedback
from .ruleset import DEFAULT_RULES
from .secret_code import join_symbols, normalize_sequence, validate_sequence


class Guess:
    """
        Represents a single guess in the game.
    Attributes:
        sequence (list[str]): The guessed symbols.
        rules (dict): The ruleset for validation.
        feedback (Feedback | None): Bulls and hits once scored.
        by_player (bool): False when a computer agent made the guess.
        is_valid (bool): Whether the guess is valid according to the rules."""

    def __init__(
        self, sequence: list[str] | str | None, rules=None, by_player=True
    ):
        """
        Initialize a Guess instance.
        Args:
            sequence (list[str] | str | None): The guessed sequence.
            rules (dict, optional): The ruleset for validation. Defaults to DEFAULT_RULES.
            by_player (bool): Whether a human made the guess.
        """
        self.rules = rules or DEFAULT_RULES
        self.sequence = normalize_sequence(sequence, self.rules)
        self.feedback = None
        self.by_player = by_player
        self.is_valid = False

        if self.sequence:
            self.is_valid = self.validate(strict=False)

    def validate(self, strict: bool = True):
        """
        Check if the guess follows the rules
        (length, valid symbols, duplicates).

        Args:
            strict (bool): If True, raise InvalidCodeError on invalid guess.
        Returns:
            bool: True if valid, False otherwise.
        """
        return validate_sequence(self.sequence, self.rules, strict=strict)

    def apply_feedback(self, feedback):
        """
        Store feedback values after evaluation by the Board/Code.
        Args:
            feedback (tuple[int, int]): (bulls, hits)
        """
        self.feedback = Feedback(int(feedback[0]), int(feedback[1]))

    def get_feedback(self):
        return self.feedback

    def get_guess(self):
        return self.sequence

    def as_string(self):
        return join_symbols(self.sequence)

    def __str__(self):
        return self.as_string()
