# Command-line interface (text-based play)
import getpass
import logging
import time

from game.errors import InvalidCodeError, StateError
from game.lobby import OnlineLobby
from game.ruleset import DEFAULT_RULES, THEMES, display_symbol
from game.session import GameMode, Phase, PlayerRole, Session, SoundEffect
from state.persistence import load_state, save_state
from state.stats import StatsStore, format_stats
from state.user import local_user

MODES = {
    "1": GameMode.PVC,
    "2": GameMode.PVP_LOCAL,
    "3": GameMode.PVP_ONLINE,
}


def terminal_sound(effect):
    # the terminal bell is the only sound we have
    if effect in (SoundEffect.BULL, SoundEffect.WIN):
        print("\a", end="", flush=True)


class Cli:
    """Interactive terminal front end driving a Session."""

    def __init__(
        self,
        rules=None,
        agent=None,
        stats=None,
        input_fn=input,
        secret_fn=getpass.getpass,
        sleep=time.sleep,
        save_file="game_state.json",
        rng=None,
    ):
        self.input = input_fn
        self.secret_input = secret_fn
        self.sleep = sleep
        self.save_file = save_file
        self.session = Session(
            rules=rules or DEFAULT_RULES,
            stats=stats or StatsStore(),
            agent=agent,
            rng=rng,
            on_sound=terminal_sound,
        )

    def ask(self, prompt):
        return self.input(prompt).strip()

    # --- menu ---

    def run(self):
        print("=== Bullseye Arena ===")
        while True:
            s = self.session
            user = f" (signed in as {s.user.name})" if s.user else ""
            print(f"\nMain menu{user}")
            print("  1) Player vs Computer")
            print("  2) Two players, this terminal")
            print("  3) Online match")
            print("  s) Settings   p) Profile   n) Sign in/out   l) Load game   q) Quit")
            choice = self.ask("> ").lower()

            if choice == "q":
                print("Bye.")
                return
            if choice in MODES:
                self.play_match(MODES[choice])
            elif choice == "s":
                enabled = s.toggle_sound()
                print(f"Sound {'on' if enabled else 'off'}.")
            elif choice == "p":
                self.show_profile()
            elif choice == "n":
                self.sign_in_out()
            elif choice == "l":
                self.load_game()
            else:
                print("Unknown choice.")

    def show_profile(self):
        s = self.session
        if s.user is None:
            print("Sign in to keep statistics.")
            return
        print(f"\n--- {s.user.name} ---")
        print(format_stats(s.stats.get(s.user.id)))

    def sign_in_out(self):
        s = self.session
        if s.user is not None:
            print(f"Signed out {s.user.name}.")
            s.user = None
            return
        name = self.ask("Your name: ")
        if name:
            s.user = local_user(name)
            print(f"Welcome, {s.user.name}!")

    def load_game(self):
        path = self.ask(f"File [{self.save_file}]: ") or self.save_file
        try:
            state = load_state(path)
        except StateError as e:
            print(f"Error loading save: {e}")
            return
        old = self.session
        self.session = Session.restore(
            state,
            user=old.user,
            stats=old.stats,
            agent=old.agent,
            settings=old.settings,
            on_sound=old.on_sound,
        )
        print("Game loaded.")
        self.session.board.render()
        self.play_round()

    # --- match ---

    def choose_theme(self):
        keys = list(THEMES)
        for i, key in enumerate(keys, start=1):
            items = " ".join(
                THEMES[key]["display"].get(item, item) for item in THEMES[key]["items"]
            )
            print(f"  {i}) {THEMES[key]['name']}: {items}")
        while True:
            choice = self.ask("Theme: ")
            if choice.isdigit() and 1 <= int(choice) <= len(keys):
                return keys[int(choice) - 1]
            if choice in THEMES:
                return choice
            print("Unknown theme.")

    def play_match(self, mode):
        s = self.session
        s.select_mode(mode)
        s.select_theme(self.choose_theme())

        if s.phase is Phase.SEARCHING:
            lobby = OnlineLobby(s.rules["lobby_delay_s"], on_match_found=lambda: None)
            print("Searching for an opponent... (Ctrl+C to go back)")
            lobby.search()
            try:
                lobby.wait()
            except KeyboardInterrupt:
                lobby.cancel()
                s.restart()
                print("\nBack to the menu.")
                return
            role = s.match_found()
            if role is PlayerRole.GUESSER:
                print("Opponent found! They set the code, you guess.")
            else:
                print("Opponent found! You set the code, they guess.")

        if s.phase is Phase.CODE_SET:
            self.set_code()

        self.play_round()

    def set_code(self):
        s = self.session
        self.print_symbols()
        while True:
            code = self.secret_input("Secret code (hidden): ")
            try:
                s.set_code(code)
                break
            except InvalidCodeError as e:
                print(f"Invalid code: {e}")
        if s.mode is GameMode.PVP_LOCAL:
            print("The secret code is ready. Hide the screen and pass it to your friend!")
        else:
            print("Code set! Waiting for the opponent's first guess.")

    def print_symbols(self):
        rules = self.session.rules
        options = []
        for symbol in rules["symbols"]:
            glyph = rules["display"]["emoji_map"].get(symbol, symbol)
            keys = [k for k, v in rules["aliases"].items() if v == symbol]
            options.append(f"{glyph}={keys[0]}" if keys else glyph)
        print(f"Available: {'  '.join(options)}")

    def play_round(self):
        s = self.session
        print("Type 'exit' to leave, 'save' to store the game.")
        while s.phase is Phase.PLAYING:
            board = s.board
            print(f"\nGuesses left: {board.remaining_attempts()}")

            if s.is_agents_turn_to_guess:
                print("The AI is thinking about its next move...")
                self.sleep(s.rules["agent_delay_s"])
                s.play_agent_turn()
                board.render()
                continue

            self.print_symbols()
            user_input = self.ask("Your guess: ")
            command = user_input.upper()

            # handle special commands
            if command == "EXIT":
                print("Leaving the game.")
                s.restart()
                return
            if command == "SAVE":
                save_state(s.snapshot(), self.save_file)
                print("Game saved.")
                continue

            try:
                s.submit_guess(user_input)
            except InvalidCodeError as e:
                print(f"Invalid input: {e}")
                continue
            board.render()

        self.finish_round()

    def finish_round(self):
        s = self.session
        board = s.board
        if s.phase is Phase.WON:
            if s.mode is GameMode.PVP_ONLINE and s.role is PlayerRole.SETTER:
                print(f"\nThe opponent cracked your code in {board.current_attempt} guesses.")
            else:
                print(f"\nWell done! You cracked the code in {board.current_attempt} guesses.")
        elif s.phase is Phase.LOST:
            if s.mode is GameMode.PVP_ONLINE and s.role is PlayerRole.SETTER:
                print("\nYour code held! The opponent ran out of guesses.")
            else:
                print("\nNo more attempts left. Try again!")
        secret = " ".join(display_symbol(c, s.rules) for c in board.secret_code.sequence)
        print(f"The secret code was: {secret}")
        if s.last_stats is not None:
            print(format_stats(s.last_stats))
        logging.debug(f"Round ended in phase {s.phase.value}")
        s.restart()
        print("\n=== Game Over ===")


def gameloop(rules=None, agent=None, stats=None):
    Cli(rules=rules, agent=agent, stats=stats).run()
