import random

import pytest

from game.errors import InvalidCodeError, SessionStateError
from game.session import GameMode, Phase, PlayerRole, Session, SoundEffect
from solver.agent_interface import GuessAgent
from state.stats import StatsStore
from state.user import local_user


class ScriptedAgent(GuessAgent):
    def __init__(self, guesses):
        self.guesses = list(guesses)
        self.calls = 0

    def next_guess(self, history, rules):
        self.calls += 1
        return list(self.guesses[(self.calls - 1) % len(self.guesses)])


class BrokenAgent(GuessAgent):
    def next_guess(self, history, rules):
        raise RuntimeError("model unavailable")


def start_online(session, role):
    session.select_mode(GameMode.PVP_ONLINE)
    session.select_theme("numbers")
    assert session.phase is Phase.SEARCHING
    session.match_found(role)


def test_pvc_computer_sets_code_and_player_wins(tmp_path):
    stats = StatsStore(tmp_path / "stats.json")
    user = local_user("Ana")
    s = Session(user=user, stats=stats, rng=random.Random(3))
    s.select_mode("pvc")
    assert s.phase is Phase.THEME_SELECT
    s.select_theme("numbers")
    assert s.phase is Phase.PLAYING
    assert s.is_players_turn_to_guess

    secret = list(s.board.secret_code.sequence)
    s.submit_guess(secret)
    assert s.phase is Phase.WON
    assert stats.get(user.id)["games_won"] == 1
    assert s.last_stats["best_game_guesses"] == 1


def test_pvp_local_setter_then_guesser():
    s = Session()
    s.select_mode(GameMode.PVP_LOCAL)
    s.select_theme("animals")
    assert s.phase is Phase.CODE_SET

    with pytest.raises(InvalidCodeError):
        s.set_code("🐶🐶🐱🐭")
    assert s.phase is Phase.CODE_SET

    s.set_code("dcmr")
    assert s.phase is Phase.PLAYING
    fb = s.submit_guess("🐶🐱🐰🐭")
    assert fb == (2, 2)


def test_loss_is_recorded(tmp_path):
    stats = StatsStore(tmp_path / "stats.json")
    user = local_user("Ana")
    s = Session(rules={**Session().base_rules, "max_attempts": 2}, user=user, stats=stats)
    s.select_mode("pvp_local")
    s.select_theme("numbers")
    s.set_code("1234")
    s.submit_guess("5678")
    s.submit_guess("8765")
    assert s.phase is Phase.LOST
    recorded = stats.get(user.id)
    assert recorded["games_played"] == 1
    assert recorded["games_won"] == 0


def test_online_guesser_gets_opponent_code():
    s = Session()
    start_online(s, "guesser")
    assert s.role is PlayerRole.GUESSER
    assert s.phase is Phase.PLAYING
    assert s.is_players_turn_to_guess
    assert not s.is_agents_turn_to_guess


def test_online_role_is_drawn_when_not_given():
    roles = set()
    for seed in range(20):
        s = Session(rng=random.Random(seed))
        s.select_mode("pvp_online")
        s.select_theme("numbers")
        roles.add(s.match_found())
    assert roles == {PlayerRole.GUESSER, PlayerRole.SETTER}


def test_online_setter_agent_guesses_every_turn(tmp_path):
    stats = StatsStore(tmp_path / "stats.json")
    user = local_user("Ana")
    agent = ScriptedAgent(["5678", "8765", "1234"])
    s = Session(user=user, stats=stats, agent=agent)
    start_online(s, PlayerRole.SETTER)
    assert s.phase is Phase.CODE_SET
    s.set_code("1234")

    assert not s.is_players_turn_to_guess
    with pytest.raises(SessionStateError):
        s.submit_guess("1234")

    while s.phase is Phase.PLAYING:
        s.play_agent_turn()
    assert s.phase is Phase.WON
    assert agent.calls == 3
    # the computer's win is not the player's game
    assert stats.get(user.id)["games_played"] == 0


def test_failing_agent_falls_back_to_random_guess():
    s = Session(agent=BrokenAgent(), rng=random.Random(1))
    start_online(s, "setter")
    s.set_code("1234")
    s.play_agent_turn()
    assert s.board.current_attempt == 1
    assert s.board.guesses[0].is_valid
    assert not s.board.guesses[0].by_player


def test_invalid_agent_guess_falls_back_to_random_guess():
    s = Session(agent=ScriptedAgent(["9999"]), rng=random.Random(1))
    start_online(s, "setter")
    s.set_code("1234")
    s.play_agent_turn()
    assert s.board.guesses[0].is_valid


def test_illegal_transitions():
    s = Session()
    with pytest.raises(SessionStateError):
        s.select_theme("numbers")
    with pytest.raises(SessionStateError):
        s.submit_guess("1234")
    s.select_mode("pvc")
    with pytest.raises(SessionStateError):
        s.select_mode("pvc")
    with pytest.raises(SessionStateError):
        s.match_found()
    with pytest.raises(ValueError):
        Session().select_mode("solo")


def test_restart_clears_match():
    s = Session()
    s.select_mode("pvc")
    s.select_theme("colors")
    s.submit_guess(s.board.secret_code.sequence)
    s.restart()
    assert s.phase is Phase.MENU
    assert s.board is None
    assert s.mode is None and s.role is None and s.theme is None


def test_sounds_follow_feedback_and_setting():
    played = []
    s = Session(on_sound=played.append)
    s.select_mode("pvp_local")
    s.select_theme("numbers")
    s.set_code("1234")
    s.submit_guess("5678")
    s.submit_guess("4321")
    s.submit_guess("1243")
    assert played == [
        SoundEffect.SELECT_THEME,
        SoundEffect.MISS,
        SoundEffect.HIT,
        SoundEffect.BULL,
    ]

    assert s.toggle_sound() is False
    s.submit_guess("1234")
    assert played[-1] is SoundEffect.BULL
    assert len(played) == 4


def test_snapshot_and_restore():
    s = Session()
    start_online(s, "guesser")
    secret = list(s.board.secret_code.sequence)
    s.submit_guess(list(reversed(secret)))

    state = s.snapshot()
    assert state.to_dict()["secret_code"] is None

    restored = Session.restore(state)
    assert restored.mode is GameMode.PVP_ONLINE
    assert restored.role is PlayerRole.GUESSER
    assert restored.phase is Phase.PLAYING
    assert restored.theme == "numbers"
    restored.submit_guess(secret)
    assert restored.phase is Phase.WON


def test_restart_forgets_last_stats(tmp_path):
    s = Session(user=local_user("Ana"), stats=StatsStore(tmp_path / "stats.json"))
    s.select_mode("pvc")
    s.select_theme("numbers")
    s.submit_guess(s.board.secret_code.sequence)
    assert s.last_stats["games_won"] == 1

    s.restart()
    assert s.last_stats is None


def test_game_ends_with_undecodable_stats_file(tmp_path):
    path = tmp_path / "stats.json"
    path.write_bytes(b"\xff\xfe\x00garbage")
    s = Session(user=local_user("Ana"), stats=StatsStore(path))
    s.select_mode("pvc")
    s.select_theme("numbers")
    s.submit_guess(s.board.secret_code.sequence)
    assert s.phase is Phase.WON
    assert s.last_stats["games_played"] == 1
