from flappy.game import GameState

TARGET_MARGIN = 30


def policy(env):
    # Strategy: Find the nearest pipe pair whose right edge is still ahead of the bird and aim
    # the bird's bottom edge a little above that pair's gap floor (board middle when no pipe is ahead).
    # Flap only while falling past the target, so each flap lifts the bird roughly 40px and
    # never carries it into the top pipe. Outside of play, keep pressing flap to restart.
    if env.state is GameState.GAME_OVER:
        return [1, 0, 0]
    if env.state is not GameState.PLAYING:
        return [0, 0, 0]

    bird = env.bird
    ahead = [p for p in env.pipes if p.is_top and p.right >= bird.x]
    if ahead:
        top = min(ahead, key=lambda p: p.x)
        gap_floor = top.y + top.height + env.opening_space
    else:
        gap_floor = env.HEIGHT / 2 + bird.height

    if bird.bottom >= gap_floor - TARGET_MARGIN and bird.velocity_y >= 0:
        return [1, 0, 0]  # Flap
    return [0, 0, 0]  # Glide
