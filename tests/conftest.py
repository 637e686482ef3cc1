import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pytest

from flappy.game import GameEnv


@pytest.fixture
def env():
    env = GameEnv(sound=False)
    env.reset(seed=0)
    yield env
    env.close()
