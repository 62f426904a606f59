# state/game_state.py
from game.modes import GameMode, Phase, PlayerRole


class GameState:
    """Container for a game snapshot (board plus session fields)."""

    def __init__(
        self,
        rules,
        guesses,
        current_attempts,
        is_over,
        is_won,
        code=None,
        mode=None,
        role=None,
        phase=None,
    ):
        self.rules = rules
        # Guess objects while live, plain dicts after loading
        self.guesses = guesses
        self.current_attempts = current_attempts
        self.is_over = is_over
        self.is_won = is_won
        self.secret_code = code
        self.mode = mode
        self.role = role
        self.phase = phase

    @property
    def theme(self):
        return self.rules.get("theme")

    def to_dict(self, reveal_code=False):
        # Return the gamestate as dictionary for i.e. json
        return {
            "rules": self.rules,
            "guesses": [guess_to_dict(g) for g in self.guesses],
            "current_attempts": self.current_attempts,
            "is_over": self.is_over,
            "is_won": self.is_won,
            "secret_code": self.secret_code if reveal_code else None,
            "mode": self.mode,
            "role": self.role,
            "phase": self.phase,
        }

    @classmethod
    def from_dict(cls, data):
        # Load the gamestate from a dictionary
        return cls(
            rules=data["rules"],
            guesses=[guess_to_dict(g) for g in data["guesses"]],
            current_attempts=data["current_attempts"],
            is_over=data["is_over"],
            is_won=data["is_won"],
            code=data.get("secret_code"),
            mode=_enum_value(GameMode, data.get("mode")),
            role=_enum_value(PlayerRole, data.get("role")),
            phase=_enum_value(Phase, data.get("phase")),
        )


def _enum_value(enum_cls, value):
    # unknown values raise ValueError
    return None if value is None else enum_cls(value).value


def guess_to_dict(g):
    if isinstance(g, dict):
        fb = g["feedback"]
        if not isinstance(fb, dict):
            fb = {"bulls": fb[0], "hits": fb[1]}
        return {
            "guess": list(g["guess"]),
            "feedback": {"bulls": int(fb["bulls"]), "hits": int(fb["hits"])},
            "by_player": g.get("by_player", True),
        }
    bulls, hits = g.get_feedback()
    return {
        "guess": list(g.get_guess()),
        "feedback": {"bulls": bulls, "hits": hits},
        "by_player": g.by_player,
    }
