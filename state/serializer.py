# Convert game states to readable formats (for logging, prompts or export)
import json


def to_json(data_dict: dict) -> str:
    """
    Convert a dictionary to a JSON string.
    Args:
        data_dict (dict): The dictionary to convert.
    Returns:
        str: The JSON string representation of the dictionary.
    """
    return json.dumps(data_dict, indent=2, ensure_ascii=False)


def from_json(json_string: str) -> dict:
    """
    Convert a JSON string back to a dictionary.
    Args:
        json_string (str): The JSON string to convert.
    Returns:
        dict: The resulting dictionary.
    """
    return json.loads(json_string)


def history_to_text(history) -> str:
    """
    List (sequence, feedback) pairs one per line.

    Example:
        - Guess: [1, 2, 3, 4], Feedback: {bulls: 1, hits: 2}
    """
    lines = []
    for sequence, feedback in history:
        bulls, hits = feedback
        lines.append(
            f"- Guess: [{', '.join(sequence)}], "
            f"Feedback: {{bulls: {bulls}, hits: {hits}}}"
        )
    return "\n".join(lines)
