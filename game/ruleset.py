# Configuration: themes, code length, duplicates allowed, etc.
import copy
import json
import logging
from pathlib import Path

from .errors import RulesetError, UnknownThemeError

THEMES = {
    "numbers": {
        "name": "Numbers",
        "items": ["1", "2", "3", "4", "5", "6", "7", "8"],
        "aliases": {},
        "display": {},  # digits print as themselves
    },
    "colors": {
        "name": "Colors",
        "items": [
            "#ef4444",  # red
            "#f97316",  # orange
            "#eab308",  # yellow
            "#22c55e",  # green
            "#3b82f6",  # blue
            "#8b5cf6",  # violet
            "#ec4899",  # pink
            "#6b7280",  # gray
        ],
        # one letter per color for keyboard input
        "aliases": {
            "R": "#ef4444",
            "O": "#f97316",
            "Y": "#eab308",
            "G": "#22c55e",
            "B": "#3b82f6",
            "V": "#8b5cf6",
            "P": "#ec4899",
            "K": "#6b7280",
        },
        "display": {
            "#ef4444": "🔴",
            "#f97316": "🟠",
            "#eab308": "🟡",
            "#22c55e": "🟢",
            "#3b82f6": "🔵",
            "#8b5cf6": "🟣",
            "#ec4899": "🩷",
            "#6b7280": "⚫",
        },
    },
    "animals": {
        "name": "Animals",
        "items": ["🐶", "🐱", "🐭", "🐰", "🦊", "🐻", "🐼", "🐨"],
        "aliases": {
            "D": "🐶",
            "C": "🐱",
            "M": "🐭",
            "R": "🐰",
            "F": "🦊",
            "B": "🐻",
            "P": "🐼",
            "K": "🐨",
        },
        "display": {},
    },
}

DEFAULT_RULES = {
    "name": "classic",  # Identifier for this ruleset
    "theme": "numbers",  # Key into THEMES
    "code_length": 4,  # Number of pegs in the code
    "max_attempts": 10,  # Number of guesses per game
    "allow_duplicates": False,  # Codes are made of distinct symbols
    "symbols": list(THEMES["numbers"]["items"]),
    "num_symbols": len(THEMES["numbers"]["items"]),
    "aliases": {},
    "display": {
        "emoji_map": {},  # symbol -> glyph, missing symbols print as-is
        "bull": "🎯",
        "hit": "⚪",
        "empty": "·",
    },
    "agent_delay_s": 1.5,  # Pause before a computer guess is shown
    "lobby_delay_s": 3.0,  # Simulated matchmaking time
}


def build_rules(theme="numbers", **overrides):
    """
    Return a fresh ruleset for the given theme.

    Args:
        theme (str): Key into THEMES.
        **overrides: Top-level rule values to replace (e.g. max_attempts=8).
    Returns:
        dict: The ruleset.
    """
    if theme not in THEMES:
        raise UnknownThemeError(theme)

    rules = copy.deepcopy(DEFAULT_RULES)
    theme_def = THEMES[theme]
    rules["theme"] = theme
    rules["symbols"] = list(theme_def["items"])
    rules["num_symbols"] = len(theme_def["items"])
    rules["aliases"] = dict(theme_def["aliases"])
    rules["display"]["emoji_map"] = dict(theme_def["display"])

    for key, value in overrides.items():
        if key not in rules:
            raise RulesetError(f"Unknown rule '{key}'.")
        rules[key] = value
    if "symbols" in overrides:
        rules["num_symbols"] = len(rules["symbols"])

    check_rules(rules)
    return rules


def check_rules(rules):
    """Raise RulesetError when the ruleset cannot produce a valid code."""
    if rules["code_length"] < 1:
        raise RulesetError("Code length must be at least 1.")
    if rules["max_attempts"] < 1:
        raise RulesetError("At least one attempt is required.")
    if len(set(rules["symbols"])) != len(rules["symbols"]):
        raise RulesetError("Symbols must be unique.")
    if not rules["allow_duplicates"] and rules["code_length"] > len(
        rules["symbols"]
    ):
        raise RulesetError(
            "Code is longer than the symbol set and duplicates are not allowed.",
            details=f"code_length={rules['code_length']}, "
            f"symbols={len(rules['symbols'])}",
        )


def load_rules(path, theme=None):
    """
    Build rules from a JSON file of overrides.

    The file may contain a "theme" key plus any top-level rule. A missing file
    gives the defaults for the theme.
    """
    path = Path(path)
    if not path.exists():
        logging.warning(f"Rules file not found: {path}, using defaults")
        return build_rules(theme or "numbers")

    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    file_theme = data.pop("theme", None)
    logging.info(f"Rules loaded: {path}")
    return build_rules(theme or file_theme or "numbers", **data)


def normalize_symbol(token, rules):
    """Map a typed token to a theme symbol (exact match first, then alias)."""
    if token in rules["symbols"]:
        return token
    return rules.get("aliases", {}).get(token.upper(), token)


def parse_symbols(text, rules):
    """
    Split user input into symbols.

    Comma or whitespace separated input is split on the separators, anything
    else is read one character at a time (e.g. "1234", "RGBY", "🐶🐱🐭🐰").
    """
    text = text.strip()
    if "," in text or " " in text:
        tokens = [t for t in text.replace(",", " ").split() if t]
    else:
        tokens = list(text)
    return [normalize_symbol(t, rules) for t in tokens]


def display_symbol(symbol, rules):
    return rules["display"]["emoji_map"].get(symbol, symbol)
