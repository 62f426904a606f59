import random

from game.ruleset import DEFAULT_RULES
from game.session import Phase
from state.stats import StatsStore
from ui.cli import Cli


def scripted(answers):
    answers = iter(answers)
    return lambda prompt="": next(answers)


def test_local_two_player_game_records_stats(tmp_path, capsys):
    stats = StatsStore(tmp_path / "stats.json")
    cli = Cli(
        stats=stats,
        input_fn=scripted(["n", "Ana", "2", "1", "12", "5678", "1234", "p", "q"]),
        secret_fn=scripted(["1123", "1234"]),
        sleep=lambda s: None,
    )
    cli.run()

    out = capsys.readouterr().out
    assert "Invalid code" in out
    assert "Invalid input" in out
    assert "cracked the code in 2 guesses" in out
    assert cli.session.phase is Phase.MENU

    recorded = stats.get(cli.session.user.id)
    assert recorded["games_won"] == 1
    assert recorded["best_game_guesses"] == 2


def test_save_and_load_game(tmp_path, capsys):
    save_file = tmp_path / "game.json"
    cli = Cli(
        stats=StatsStore(tmp_path / "stats.json"),
        input_fn=scripted(["2", "1", "5678", "save", "exit", "q"]),
        secret_fn=scripted(["1234"]),
        sleep=lambda s: None,
        save_file=str(save_file),
    )
    cli.run()
    assert save_file.exists()

    cli = Cli(
        stats=StatsStore(tmp_path / "stats.json"),
        input_fn=scripted(["l", "", "1234", "q"]),
        save_file=str(save_file),
    )
    cli.run()
    out = capsys.readouterr().out
    assert "Game loaded." in out
    assert "cracked the code in 2 guesses" in out


class SetterRng(random.Random):
    # match_found draws the role with random(); >= 0.5 makes the player the setter
    def random(self):
        return 0.9


def test_online_setter_watches_the_agent(tmp_path, capsys):
    delays = []
    cli = Cli(
        rules={**DEFAULT_RULES, "lobby_delay_s": 0.01, "agent_delay_s": 0},
        stats=StatsStore(tmp_path / "stats.json"),
        input_fn=scripted(["3", "1", "q"]),
        secret_fn=scripted(["1234"]),
        sleep=delays.append,
        rng=SetterRng(),
    )
    cli.run()
    out = capsys.readouterr().out
    assert "You set the code" in out
    assert "The secret code was: 1 2 3 4" in out
    assert delays and all(d == 0 for d in delays)


def test_loading_a_corrupted_save_returns_to_menu(tmp_path, capsys):
    save_file = tmp_path / "game.json"
    save_file.write_bytes(b"\xff\xfe\x00garbage")
    cli = Cli(
        stats=StatsStore(tmp_path / "stats.json"),
        input_fn=scripted(["l", "", "q"]),
        save_file=str(save_file),
    )
    cli.run()
    out = capsys.readouterr().out
    assert "Error loading save" in out
    assert "Bye." in out
