import base64
import json

import pytest

from game.board import Board
from game.errors import StateError
from game.feedback import Feedback
from game.ruleset import build_rules
from state.game_state import GameState
from state.persistence import load_state, save_state
from state.serializer import from_json, history_to_text, to_json
from state.stats import StatsStore, average_guesses, format_stats, win_rate
from state.user import decode_jwt_payload, local_user, user_from_id_token


def finished_board():
    board = Board(rules=build_rules("animals"))
    board.initialize_game(code="🐶🐱🐭🐰")
    board.make_guess("🐰🐭🐱🐶")
    return board


def test_game_state_hides_code_unless_revealed():
    state = finished_board().get_current_state(mode="pvc", phase="playing")
    assert state.to_dict()["secret_code"] is None
    data = state.to_dict(reveal_code=True)
    assert data["secret_code"] == ["🐶", "🐱", "🐭", "🐰"]
    assert data["guesses"][0]["feedback"] == {"bulls": 0, "hits": 4}
    assert data["mode"] == "pvc"


def test_game_state_round_trip_through_file(tmp_path):
    path = tmp_path / "save.json"
    save_state(finished_board().get_current_state(), path)
    state = load_state(path)
    assert isinstance(state, GameState)
    assert state.theme == "animals"
    assert state.current_attempts == 1
    assert state.guesses[0]["guess"] == ["🐰", "🐭", "🐱", "🐶"]


def test_load_state_errors(tmp_path):
    with pytest.raises(StateError):
        load_state(tmp_path / "missing.json")
    bad = tmp_path / "bad.json"
    bad.write_text("{not json")
    with pytest.raises(StateError, match="corrupted"):
        load_state(bad)
    partial = tmp_path / "partial.json"
    partial.write_text(json.dumps({"rules": {}}))
    with pytest.raises(StateError):
        load_state(partial)


def test_stats_update_and_derived_values(tmp_path):
    store = StatsStore(tmp_path / "stats.json")
    store.update("u1", won=True, guesses=6)
    store.update("u1", won=True, guesses=4)
    stats = store.update("u1", won=False, guesses=10)
    store.update("u2", won=False, guesses=10)

    assert stats == {
        "games_played": 3,
        "games_won": 2,
        "total_guesses_in_wins": 10,
        "best_game_guesses": 4,
    }
    assert store.get("u1") == stats
    assert win_rate(stats) == pytest.approx(2 / 3)
    assert average_guesses(stats) == 5
    assert "67%" in format_stats(stats)
    assert store.get("u2")["games_won"] == 0


def test_stats_defaults_for_new_user(tmp_path):
    stats = StatsStore(tmp_path / "stats.json").get("nobody")
    assert stats["games_played"] == 0
    assert win_rate(stats) is None
    assert average_guesses(stats) is None
    assert "N/A" in format_stats(stats)


def test_corrupted_stats_file_is_treated_as_empty(tmp_path):
    path = tmp_path / "stats.json"
    path.write_text("garbage")
    store = StatsStore(path)
    assert store.get("u1")["games_played"] == 0
    assert store.update("u1", won=True, guesses=3)["games_won"] == 1
    assert json.loads(path.read_text())["u1"]["games_won"] == 1


def make_token(payload):
    body = base64.urlsafe_b64encode(json.dumps(payload).encode()).decode().rstrip("=")
    return f"header.{body}.signature"


def test_user_from_id_token():
    token = make_token(
        {"sub": "42", "given_name": "Dana", "email": "d@example.com", "picture": "p"}
    )
    user = user_from_id_token(token)
    assert user.id == "42"
    assert user.name == "Dana"
    assert user.email == "d@example.com"


def test_malformed_tokens():
    assert decode_jwt_payload("no-dots") is None
    assert decode_jwt_payload("a.!!!.c") is None
    assert user_from_id_token(make_token({"name": "no subject"})) is None


def test_local_user_id_is_case_insensitive():
    assert local_user("Ana").id == local_user(" ana ").id


def test_serializer():
    text = history_to_text([(["1", "2", "3", "4"], Feedback(1, 2))])
    assert text == "- Guess: [1, 2, 3, 4], Feedback: {bulls: 1, hits: 2}"
    assert from_json(to_json({"a": "🐶"})) == {"a": "🐶"}


def test_load_state_rejects_undecodable_file(tmp_path):
    path = tmp_path / "save.json"
    path.write_bytes(b"\xff\xfe\x00garbage")
    with pytest.raises(StateError, match="corrupted"):
        load_state(path)


def test_load_state_rejects_unknown_session_fields(tmp_path):
    data = finished_board().get_current_state(mode="pvc", phase="playing").to_dict()
    for field, value in (("phase", "paused"), ("mode", "solo"), ("role", "judge")):
        path = tmp_path / f"{field}.json"
        path.write_text(json.dumps({**data, field: value}))
        with pytest.raises(StateError, match="corrupted"):
            load_state(path)


def test_undecodable_stats_file_is_treated_as_empty(tmp_path):
    path = tmp_path / "stats.json"
    path.write_bytes(b"\xff\xfe\x00garbage")
    store = StatsStore(path)
    assert store.get("u1")["games_played"] == 0
    assert store.update("u1", won=False, guesses=10)["games_played"] == 1


def test_malformed_stats_entries_are_replaced(tmp_path):
    path = tmp_path / "stats.json"
    path.write_text(
        json.dumps(
            {
                "u1": [1, 2],
                "u2": {"games_played": "many", "games_won": 0},
                "u3": {"games_played": 2, "games_won": 1, "best_game_guesses": "x"},
                "u4": {"games_played": 1, "games_won": 1,
                       "total_guesses_in_wins": 5, "best_game_guesses": 5},
            }
        )
    )
    store = StatsStore(path)
    for uid in ("u1", "u2", "u3"):
        assert store.get(uid)["games_played"] == 0
        stats = store.update(uid, won=True, guesses=4)
        assert stats["games_played"] == 1
        assert stats["best_game_guesses"] == 4
    assert store.get("u4")["best_game_guesses"] == 5
