from __future__ import annotations

import argparse
import logging
import os

import numpy as np
import pygame

from flappy.game import GameEnv, GameState, action_for_keys
from flappy.policy import policy
from flappy.ui import LoadingScreen

logger = logging.getLogger("flappy")

SMOKE_FRAMES = 300


def _positive_int(value: str) -> int:
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value!r}")
    return number


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="flappy", description="Flappy Bird clone")
    parser.add_argument("--level", choices=list(GameEnv.LEVELS), default=GameEnv.DEFAULT_LEVEL)
    parser.add_argument("--mute", action="store_true", help="Start with sound off.")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--fps", type=_positive_int, default=GameEnv.FPS)
    parser.add_argument("--autopilot", action="store_true", help="Let the scripted policy fly.")
    parser.add_argument("--no-splash", action="store_true", help="Skip the loading screen.")
    parser.add_argument(
        "--smoke",
        action="store_true",
        help="Run a short headless autopilot session and exit (for quick verification).",
    )
    parser.add_argument("--log-level", default="info", choices=["debug", "info", "warning", "error"])
    return parser.parse_args(argv)


def run_smoke(env: GameEnv, *, seed: int | None, frames: int = SMOKE_FRAMES) -> dict:
    obs, info = env.reset(seed=seed)
    for _ in range(frames):
        obs, reward, terminated, truncated, info = env.step(policy(env))
        if terminated:
            break
    return info


def run_human(env: GameEnv, *, seed: int | None, autopilot: bool, splash: bool) -> None:
    screen = pygame.display.set_mode((env.WIDTH, env.HEIGHT))
    pygame.display.set_caption("Flappy Bird")
    clock = pygame.time.Clock()

    if splash and not LoadingScreen((env.WIDTH, env.HEIGHT)).run(screen, clock):
        return

    obs, info = env.reset(seed=seed, options={"menu": not autopilot})
    was_over = False
    running = True
    while running:
        keys = []
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                keys.append(event.key)
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                env.click(*event.pos)

        action = action_for_keys(keys)
        if autopilot and env.state in (GameState.PLAYING, GameState.GAME_OVER):
            action = [max(a, b) for a, b in zip(action, policy(env))]

        obs, reward, terminated, truncated, info = env.step(action)

        if terminated and not was_over:
            print(f"Game Over! Final Score: {info['score']:g}, Steps: {info['steps']}")
        was_over = terminated

        # Render the observation to the display
        surf = pygame.surfarray.make_surface(np.transpose(obs, (1, 0, 2)))
        screen.blit(surf, (0, 0))
        pygame.display.flip()

        clock.tick(env.fps)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.smoke:
        os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
        os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

    env = GameEnv(level=args.level, sound=not args.mute and not args.smoke, fps=args.fps)
    try:
        if args.smoke:
            info = run_smoke(env, seed=args.seed)
            logger.info("Smoke run finished: %s", info)
        else:
            run_human(env, seed=args.seed, autopilot=args.autopilot, splash=not args.no_splash)
    finally:
        env.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
