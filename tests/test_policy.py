from __future__ import annotations

from flappy.game import GameEnv, GameState
from flappy.policy import policy


def test_autopilot_keeps_the_bird_airborne(env: GameEnv) -> None:
    for _ in range(200):
        _obs, _reward, terminated, _truncated, _info = env.step(policy(env))
        assert not terminated
        assert 0 <= env.bird.y <= env.HEIGHT - env.bird.height

    assert env.state is GameState.PLAYING


def test_autopilot_flaps_to_restart_after_game_over(env: GameEnv) -> None:
    while env.state is not GameState.GAME_OVER:
        env.step([0, 0, 0])

    assert policy(env) == [1, 0, 0]


def test_autopilot_idles_on_menus(env: GameEnv) -> None:
    env.go_to_menu()
    assert policy(env) == [0, 0, 0]

    env.reset()
    env.step([0, 1, 0])
    assert env.state is GameState.PAUSED
    assert policy(env) == [0, 0, 0]


def test_autopilot_aims_for_the_next_gap(env: GameEnv) -> None:
    # Gap floor well above the bird: it should flap while falling
    env.bird.velocity_y = 1.0
    env._place_pipes()
    top = env.pipes[0]
    top.y = -env.PIPE_HEIGHT * 3 / 4
    assert policy(env) == [1, 0, 0]

    # Gap floor far below the bird: it should glide
    top.y = -env.PIPE_HEIGHT / 4
    env.bird.y = 0
    assert policy(env) == [0, 0, 0]
