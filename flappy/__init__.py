from flappy.entities import Bird, Pipe, detect_collision, rects_overlap
from flappy.game import GameEnv, GameState, MenuPage, action_for_keys

__all__ = [
    "Bird",
    "GameEnv",
    "GameState",
    "MenuPage",
    "Pipe",
    "action_for_keys",
    "detect_collision",
    "rects_overlap",
]
