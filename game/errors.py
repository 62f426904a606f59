# Exception hierarchy for the game engine


class BullseyeError(Exception):
    """Base class for all game errors."""

    def __init__(self, message: str, details: str = ""):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self):
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class InvalidCodeError(BullseyeError, ValueError):
    """A code or guess violates the ruleset (length, symbols, duplicates)."""


class GameOverError(BullseyeError):
    """A guess was made on a board that is already finished."""


class SessionStateError(BullseyeError):
    """An action is not allowed in the current session phase."""

    def __init__(self, message: str, details: str = "", phase: str = ""):
        super().__init__(message, details)
        self.phase = phase


class RulesetError(BullseyeError, ValueError):
    """Rules are inconsistent."""


class UnknownThemeError(RulesetError):
    def __init__(self, theme: str):
        super().__init__(f"Unknown theme '{theme}'.")
        self.theme = theme


class StateError(BullseyeError):
    """Saved game state could not be read."""


class AgentError(BullseyeError):
    """A computer guesser could not produce a guess."""
