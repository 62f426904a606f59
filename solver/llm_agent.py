from __future__ import annotations

import json
import logging
import os
import random

from google import genai
from google.genai import types

from game.errors import InvalidCodeError
from game.secret_code import random_sequence, validate_sequence
from solver.agent_interface import GuessAgent, History
from state.serializer import history_to_text

DEFAULT_MODEL = "gemini-2.5-flash"
API_KEY_VARS = ("GEMINI_API_KEY", "GOOGLE_API_KEY", "API_KEY")

GUESS_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "guess": types.Schema(
            type=types.Type.ARRAY, items=types.Schema(type=types.Type.STRING)
        )
    },
    required=["guess"],
)


def build_prompt(history: History, rules: dict) -> str:
    length = rules["code_length"]
    kind = "items" if rules.get("allow_duplicates", False) else "unique items"
    example = ", ".join(f'"item{i + 1}"' for i in range(length))
    return f"""You are an expert player of a code-breaking game like Mastermind, called Bullseye Arena.
Your goal is to guess a secret code of {length} {kind}.
After each guess, you get feedback:
- "bulls": The number of correct items in the correct position.
- "hits": The number of correct items in the wrong position.

The available items for the code are:
[{", ".join(rules["symbols"])}]

Here is the history of your previous guesses and the feedback you received:
{history_to_text(history) or "This is your first guess."}

Based on this history, what is your next logical guess? Your guess must be an array of {length} {kind} from the available items list.
Provide your answer in a JSON object with a single key "guess", which is an array of strings. For example: {{"guess": [{example}]}}.
Do not provide any other text or explanation."""


def parse_guess(text: str, rules: dict) -> list[str]:
    """
    Extract and validate the guess from a model answer.
    Raises:
        InvalidCodeError: The answer is not JSON or breaks the rules.
    """
    try:
        result = json.loads(text.strip())
    except json.JSONDecodeError as e:
        raise InvalidCodeError("Model answer is not JSON.", details=text[:200]) from e

    guess = result.get("guess") if isinstance(result, dict) else None
    if not isinstance(guess, list) or not all(isinstance(s, str) for s in guess):
        raise InvalidCodeError("Model answer has no list of strings under 'guess'.")
    validate_sequence(guess, rules, strict=True)
    return guess


class LlmAgent(GuessAgent):
    """
    Asks a Gemini model for the next guess.

    Without an API key, on API errors, and on answers that break the rules
    the agent logs the problem and guesses randomly instead.
    """

    name = "llm"

    def __init__(
        self,
        client=None,
        *,
        api_key: str | None = None,
        model: str = DEFAULT_MODEL,
        rng: random.Random | None = None,
    ):
        self.model = model
        self.rng = rng or random.Random()
        self.client = client
        if self.client is None:
            api_key = api_key or next(
                (os.environ[v] for v in API_KEY_VARS if os.environ.get(v)), None
            )
            if api_key:
                self.client = genai.Client(api_key=api_key)
            else:
                logging.warning("No Gemini API key set, AI opponent guesses randomly")

    def _ask(self, history: History, rules: dict) -> str:
        response = self.client.models.generate_content(
            model=self.model,
            contents=build_prompt(history, rules),
            config=types.GenerateContentConfig(
                response_mime_type="application/json",
                response_schema=GUESS_SCHEMA,
            ),
        )
        return response.text or ""

    def next_guess(self, history: History, rules: dict) -> list[str]:
        if self.client is None:
            return random_sequence(rules, self.rng)

        logging.debug("AI is thinking...")
        try:
            text = self._ask(history, rules)
        except Exception:
            logging.exception("AI request failed, falling back to random guess")
            return random_sequence(rules, self.rng)

        try:
            return parse_guess(text, rules)
        except InvalidCodeError as e:
            logging.error(f"Invalid AI response, falling back to random guess: {e}")
            return random_sequence(rules, self.rng)
