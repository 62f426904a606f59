import random

from .errors import InvalidCodeError
from .feedback import Feedback, score
from .ruleset import DEFAULT_RULES, normalize_symbol, parse_symbols


def normalize_sequence(sequence, rules):
    """
    Turn user or agent input into a list of theme symbols.
    Args:
        sequence (list[str] | str | None): Raw input.
        rules (dict): The ruleset providing symbols and aliases.
    Returns:
        list[str]: The normalized sequence.
    """
    if isinstance(sequence, str):
        return parse_symbols(sequence, rules)
    if sequence is None:
        return []
    return [normalize_symbol(str(s), rules) for s in sequence]


def validate_sequence(sequence, rules, strict: bool = True) -> bool:
    """
    Check a sequence against the rules (length, symbols, duplicates).

    Args:
        sequence (list[str]): The symbols to check.
        rules (dict): The ruleset.
        strict (bool): If True, raise InvalidCodeError with an explanatory
        message when validation fails. If False, return False on failure.

    Returns:
        bool: True if the sequence is valid; False if invalid and strict
        is False.
    """

    def fail(msg: str) -> bool:
        if strict:
            raise InvalidCodeError(msg)
        return False

    if len(sequence) != rules["code_length"]:
        return fail(
            f"Code length must be {rules['code_length']}, "
            f"but got {len(sequence)}."
        )

    for symbol in sequence:
        if symbol not in rules["symbols"]:
            allowed = ", ".join(rules["symbols"])
            return fail(f"Invalid symbol '{symbol}'. Allowed: {allowed}.")

    if not rules.get("allow_duplicates", False) and len(set(sequence)) != len(
        sequence
    ):
        return fail("Duplicates are not allowed in this ruleset.")

    return True


def join_symbols(sequence):
    """Join symbols for printing; multi-character symbols get a space."""
    if not sequence:
        return "EMPTY"
    sep = "" if all(len(s) == 1 for s in sequence) else " "
    return sep.join(sequence)


def random_sequence(rules, rng=None):
    """Draw a random valid sequence for the rules."""
    rng = rng or random
    symbols = rules["symbols"]
    length = rules["code_length"]
    if rules["allow_duplicates"]:
        return rng.choices(symbols, k=length)
    return rng.sample(symbols, k=length)


class Code:
    """
        Represents the secret code for a game.
    Attributes:
        sequence (list[str]): The symbols making up the code.
        rules (dict): The ruleset for validation.
        is_valid (bool): Whether the code is valid according to the rules."""

    def __init__(self, sequence=None, rules=None):
        """
        Initialize a Code instance.

        Args:
            sequence (list, str or None): The symbols of the code.
            rules (dict or None): Reference to the ruleset (defines length,
            symbols, duplicates, etc.).
        """

        self.rules = rules or DEFAULT_RULES
        self.sequence = normalize_sequence(sequence, self.rules)

        self.is_valid = False
        if self.sequence:
            self.is_valid = self.validate(strict=False)

    def generate_random(self, rng=None):
        """
        Generate a random valid code according to the rules.
        """
        self.sequence = random_sequence(self.rules, rng)
        self.is_valid = self.validate()

    def validate(self, strict: bool = True) -> bool:
        return validate_sequence(self.sequence, self.rules, strict=strict)

    def compare_with(self, guess) -> Feedback:
        """
        Compare this secret code with a Guess (or a plain sequence).

        Returns:
            Feedback: (bulls, hits)
        """
        other = guess.sequence if hasattr(guess, "sequence") else guess
        return score(self.sequence, other)

    def as_string(self):
        """
        Return a string representation of the code (e.g. '1234').
        Returns:
            str: The code as a string.
        """
        return join_symbols(self.sequence)

    def __eq__(self, other):
        if isinstance(other, Code):
            return self.sequence == other.sequence
        if isinstance(other, list):
            return self.sequence == other
        return False

    def __str__(self):
        return self.as_string()
