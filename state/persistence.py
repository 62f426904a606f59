# state/persistence.py
import json
import logging
from pathlib import Path

from game.errors import StateError
from .game_state import GameState


def save_state(game_state: GameState, path: str):
    """
    Save the game state to disk as JSON.
    Args:
        game_state (GameState): The game state to save.
        path (str): The file path to save the game state to.
    """
    path = Path(path)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(
            game_state.to_dict(reveal_code=True), f, indent=2, ensure_ascii=False
        )
    logging.info(f"Game state saved: {path}")


def load_state(path: str) -> GameState:
    """
    Load the game state from disk.
    Args:
        path (str): The file path to load the game state from.
    Returns:
        GameState: The loaded game state.
    Raises:
        StateError: The file is missing, not JSON, or lacks required fields.
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return GameState.from_dict(data)
    except FileNotFoundError as e:
        raise StateError(f"No saved game at {path}.") from e
    except (ValueError, KeyError, TypeError) as e:
        # ValueError covers bad JSON, bad UTF-8 and unknown phases or modes
        raise StateError(f"Saved game at {path} is corrupted.", details=str(e)) from e
