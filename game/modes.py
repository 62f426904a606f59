from enum import Enum


class GameMode(str, Enum):
    PVC = "pvc"  # player guesses the computer's code
    PVP_LOCAL = "pvp_local"  # two players share one terminal
    PVP_ONLINE = "pvp_online"  # simulated online opponent


class PlayerRole(str, Enum):
    SETTER = "setter"
    GUESSER = "guesser"


class Phase(str, Enum):
    MENU = "menu"
    THEME_SELECT = "theme_select"
    SEARCHING = "searching"
    CODE_SET = "code_set"
    PLAYING = "playing"
    WON = "won"
    LOST = "lost"
