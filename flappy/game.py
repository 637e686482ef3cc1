import enum
import logging

import gymnasium as gym
from gymnasium.spaces import MultiDiscrete
import numpy as np
import pygame

from flappy import ui
from flappy.audio import AudioManager
from flappy.entities import Bird, Pipe, detect_collision

logger = logging.getLogger(__name__)


class GameState(enum.Enum):
    MENU = "menu"
    PLAYING = "playing"
    PAUSED = "paused"
    GAME_OVER = "game_over"


class MenuPage(enum.Enum):
    MAIN = "main"
    SETTINGS = "settings"
    HELP = "help"


# Action slots
FLAP, PAUSE, BACK = 0, 1, 2

KEY_BINDINGS = {
    pygame.K_SPACE: FLAP,
    pygame.K_UP: FLAP,
    pygame.K_x: FLAP,
    pygame.K_p: PAUSE,
    pygame.K_ESCAPE: BACK,
    pygame.K_BACKSPACE: BACK,
}


def action_for_keys(keys):
    """Fold a batch of pressed keys into one action. Unbound keys are ignored."""
    action = [0, 0, 0]
    for key in keys:
        slot = KEY_BINDINGS.get(key)
        if slot is not None:
            action[slot] = 1
    return action


class GameEnv(gym.Env):
    metadata = {"render_modes": ["rgb_array"], "render_fps": 60}

    user_guide = (
        "Controls: Space, ↑ or X to flap. P to pause, Esc to go back. Click the menu buttons to navigate."
    )

    game_description = (
        "Guide a falling bird through the gaps between endless pipe pairs. Every pair you clear scores half a point."
    )

    auto_advance = True

    # --- Constants ---
    # Board
    WIDTH = 360
    HEIGHT = 640
    FPS = 60

    # Bird
    BIRD_WIDTH = 34
    BIRD_HEIGHT = 24

    # Pipes
    PIPE_WIDTH = 64
    PIPE_HEIGHT = 512
    PIPE_INTERVAL_MS = 1500
    COLLISION_SKIP_MARGIN = 10
    SCORE_PER_PAIR = 0.5

    # Flow
    RESTART_DELAY_MS = 500

    # Horizontal pipe speed in px/frame
    LEVELS = {
        "soft": 3.0,
        "normal": 2.0,
        "medium": 1.75,
        "hard": 1.55,
    }
    DEFAULT_LEVEL = "normal"

    # Rewards
    REWARD_SURVIVE = 0.01
    REWARD_PAIR = 1.0
    REWARD_CRASH = -1.0

    # Colors
    COLOR_SKY_TOP = (110, 190, 230)
    COLOR_SKY_BOTTOM = (200, 235, 250)
    COLOR_MENU_BG = (173, 216, 230)
    COLOR_TEXT = (255, 255, 255)
    COLOR_TEXT_DARK = (0, 0, 0)

    def __init__(self, render_mode="rgb_array", level=DEFAULT_LEVEL, sound=True, fps=FPS):
        super().__init__()
        if level not in self.LEVELS:
            raise ValueError(f"Unknown level {level!r}, expected one of {sorted(self.LEVELS)}")
        if fps <= 0:
            raise ValueError(f"fps must be positive, got {fps!r}")

        self.render_mode = render_mode
        self.fps = fps
        self.metadata = {**self.metadata, "render_fps": fps}
        self.pipe_interval_frames = max(1, round(self.PIPE_INTERVAL_MS * fps / 1000))
        self.restart_delay_frames = max(1, round(self.RESTART_DELAY_MS * fps / 1000))
        self.opening_space = self.HEIGHT / 4

        self.observation_space = gym.spaces.Box(
            low=0, high=255, shape=(self.HEIGHT, self.WIDTH, 3), dtype=np.uint8
        )
        self.action_space = MultiDiscrete([2, 2, 2])

        pygame.init()
        pygame.font.init()
        self.screen = pygame.Surface((self.WIDTH, self.HEIGHT))
        self.font_score = pygame.font.Font(None, 60)
        self.font_title = pygame.font.Font(None, 52)
        self.font_large = pygame.font.Font(None, 48)
        self.font_medium = pygame.font.Font(None, 36)
        self.font_small = pygame.font.Font(None, 24)

        self.audio = AudioManager(enabled=sound)

        self.level = level
        self.velocity_x = -self.LEVELS[level]

        self.state = GameState.MENU
        self.menu_page = MenuPage.MAIN
        self.buttons = []

        self.bird = None
        self.pipes = []
        self.score = 0.0
        self.steps = 0
        self.spawn_timer = 0
        self.restart_pending = False
        self.restart_timer = 0

        self.background_surface = pygame.Surface((self.WIDTH, self.HEIGHT))
        self._draw_background_gradient()

        self._reset_round()
        self._build_buttons()

    def reset(self, seed=None, options=None):
        super().reset(seed=seed)
        options = options or {}

        self.steps = 0
        self._reset_round()
        if options.get("menu"):
            self.go_to_menu()
        else:
            self.state = GameState.PLAYING
            self.buttons = []

        return self._get_observation(), self._get_info()

    def step(self, action):
        flap, pause, back = (int(a) for a in action)
        self.steps += 1
        reward = 0.0

        for button in self.buttons:
            button.update()

        # --- 1. Handle Input ---
        if back:
            self.go_back()
        elif pause:
            self.toggle_pause()
        if flap:
            self._handle_flap()

        # --- 2. Update Game Logic ---
        if self.state is GameState.PLAYING:
            reward += self._advance()
        elif self.state is GameState.GAME_OVER:
            self._tick_restart()

        terminated = self.state is GameState.GAME_OVER
        return (
            self._get_observation(),
            reward,
            terminated,
            False,
            self._get_info()
        )

    # --- Flow ---

    def start(self):
        self._reset_round()
        self.state = GameState.PLAYING
        self.buttons = []
        logger.info("Round started at level %s", self.level)

    def toggle_pause(self):
        if self.state is GameState.PLAYING:
            self.state = GameState.PAUSED
        elif self.state is GameState.PAUSED:
            self.state = GameState.PLAYING
        else:
            return
        logger.debug("Pause toggled: %s", self.state.value)

    def go_to_menu(self):
        self.state = GameState.MENU
        self.score = 0.0
        self.pipes = []
        self.restart_pending = False
        self.show_page(MenuPage.MAIN)

    def go_back(self):
        if self.state is GameState.MENU and self.menu_page is MenuPage.MAIN:
            return
        self.audio.play("back_button")
        self.go_to_menu()

    def show_page(self, page):
        self.menu_page = page
        self._build_buttons()

    def set_level(self, level):
        if level not in self.LEVELS:
            raise ValueError(f"Unknown level {level!r}, expected one of {sorted(self.LEVELS)}")
        self.level = level
        self.velocity_x = -self.LEVELS[level]
        logger.info("Level set to %s", level)
        if self.state is GameState.MENU and self.menu_page is MenuPage.SETTINGS:
            self._build_buttons()

    def toggle_sound(self):
        self.audio.toggle_sound()
        if self.state is GameState.MENU and self.menu_page is MenuPage.SETTINGS:
            self._build_buttons()

    def click(self, x, y):
        """Hit-test a pointer click. Returns True if something handled it."""
        on_main_menu = self.state is GameState.MENU and self.menu_page is MenuPage.MAIN
        if not on_main_menu and ui.back_button_hit(x, y, self.WIDTH):
            self.go_back()
            return True

        if self.state in (GameState.PLAYING, GameState.PAUSED) and ui.pause_button_hit(x, y, self.WIDTH):
            self.toggle_pause()
            return True

        for button in list(self.buttons):
            if button.contains(x, y):
                self.audio.play("button_click")
                button.press()
                return True

        logger.debug("Click at (%s, %s) hit nothing", x, y)
        return False

    def _handle_flap(self):
        if self.state is GameState.PLAYING:
            self.bird.flap()
            self.audio.play("flap")
        elif self.state is GameState.GAME_OVER and not self.restart_pending:
            self.restart_pending = True
            self.restart_timer = self.restart_delay_frames

    def _tick_restart(self):
        if not self.restart_pending:
            return
        self.restart_timer -= 1
        if self.restart_timer <= 0:
            self.start()

    def _reset_round(self):
        self.bird = Bird(self.WIDTH / 8, self.HEIGHT / 2, self.BIRD_WIDTH, self.BIRD_HEIGHT)
        self.pipes = []
        self.score = 0.0
        self.spawn_timer = 0
        self.restart_pending = False
        self.restart_timer = 0

    def _end_round(self):
        self.state = GameState.GAME_OVER
        logger.info("Game over with score %g after %d steps", self.score, self.steps)

    # --- Simulation ---

    def _advance(self):
        reward = self.REWARD_SURVIVE

        self.bird.move()
        if self.bird.y > self.HEIGHT:
            self._end_round()
            return reward + self.REWARD_CRASH

        for pipe in self.pipes:
            pipe.move(self.velocity_x)

            if not pipe.passed and self.bird.x > pipe.right:
                pipe.passed = True
                if pipe.is_top:
                    self.score += self.SCORE_PER_PAIR
                    reward += self.REWARD_PAIR

            if pipe.right < self.bird.x - self.COLLISION_SKIP_MARGIN:
                continue

            if detect_collision(self.bird, pipe):
                self.audio.play("collision")
                self._end_round()
                break

        if self.state is GameState.GAME_OVER:
            return reward + self.REWARD_CRASH

        self.pipes = [p for p in self.pipes if p.x > -self.PIPE_WIDTH]

        self.spawn_timer += 1
        if self.spawn_timer >= self.pipe_interval_frames:
            self.spawn_timer = 0
            self._place_pipes()

        return reward

    def _place_pipes(self):
        top_y = -self.PIPE_HEIGHT / 4 - self.np_random.random() * (self.PIPE_HEIGHT / 2)
        bottom_y = top_y + self.PIPE_HEIGHT + self.opening_space
        self.pipes.append(Pipe(self.WIDTH, top_y, self.PIPE_WIDTH, self.PIPE_HEIGHT, is_top=True))
        self.pipes.append(Pipe(self.WIDTH, bottom_y, self.PIPE_WIDTH, self.PIPE_HEIGHT, is_top=False))
        logger.debug("Placed pipe pair with gap at y=%.1f", top_y + self.PIPE_HEIGHT)

    # --- Menus ---

    def _build_buttons(self):
        previous = {button.center: button for button in self.buttons}
        self._layout_buttons()
        # Keep the pop animation of a button redrawn in place
        for button in self.buttons:
            old = previous.get(button.center)
            if old is not None:
                button.animation_scale = old.animation_scale
                button.is_animating = old.is_animating

    def _layout_buttons(self):
        cx = self.WIDTH / 2
        if self.state is not GameState.MENU:
            self.buttons = []
        elif self.menu_page is MenuPage.MAIN:
            self.buttons = [
                ui.Button("Play", (cx, self.HEIGHT / 2), self.start),
                ui.Button("Settings", (cx, self.HEIGHT / 2 + 60), lambda: self.show_page(MenuPage.SETTINGS)),
                ui.Button("Help", (cx, self.HEIGHT / 2 + 120), lambda: self.show_page(MenuPage.HELP)),
            ]
        elif self.menu_page is MenuPage.SETTINGS:
            label = f"Sound: {'ON' if self.audio.sound_enabled else 'OFF'}"
            self.buttons = [ui.Button(label, (cx, 200), self.toggle_sound)]
            for i, level in enumerate(self.LEVELS):
                self.buttons.append(ui.Button(
                    level, (cx, 300 + i * 50), lambda level=level: self.set_level(level), active=level == self.level
                ))
        else:
            self.buttons = []

    # --- Rendering ---

    def render(self):
        return self._get_observation()

    def _get_observation(self):
        if self.state is GameState.MENU:
            self._render_menu()
        else:
            self.screen.blit(self.background_surface, (0, 0))
            self._render_game()
            self._render_ui()

        arr = pygame.surfarray.array3d(self.screen)
        return np.transpose(arr, (1, 0, 2)).astype(np.uint8)

    def _get_info(self):
        return {
            "score": self.score,
            "steps": self.steps,
            "state": self.state.value,
            "level": self.level,
            "pipes": len(self.pipes),
        }

    def _render_game(self):
        for pipe in self.pipes:
            pipe.draw(self.screen)
        self.bird.draw(self.screen)

    def _render_ui(self):
        ui.draw_back_arrow(self.screen, self.font_large, self.WIDTH, self.COLOR_TEXT)
        if self.state is GameState.PLAYING:
            ui.draw_pause_glyph(self.screen, self.WIDTH, self.COLOR_TEXT)

        if self.state is not GameState.GAME_OVER:
            score_text = self.font_score.render(f"{self.score:g}", True, self.COLOR_TEXT)
            self.screen.blit(score_text, (8, 8))

        level_text = self.font_small.render(f"Level: {self.level}", True, self.COLOR_TEXT)
        self.screen.blit(level_text, (5, self.HEIGHT - 10 - level_text.get_height()))

        if self.state is GameState.PAUSED:
            ui.draw_overlay(self.screen)
            self._blit_centered("Game Paused", self.font_large, self.HEIGHT / 2)
        elif self.state is GameState.GAME_OVER:
            ui.draw_overlay(self.screen)
            self._blit_centered("GAME OVER!", self.font_large, self.HEIGHT / 2 - 30)
            self._blit_centered(f"Score: {self.score:g}", self.font_medium, self.HEIGHT / 2 + 20)
            if self.restart_pending:
                self._blit_centered("Get ready...", self.font_small, self.HEIGHT / 2 + 60)
            else:
                self._blit_centered("Press Space to play again", self.font_small, self.HEIGHT / 2 + 60)

    def _render_menu(self):
        self.screen.fill(self.COLOR_MENU_BG)
        if self.menu_page is MenuPage.MAIN:
            self._blit_centered("Flappy Bird", self.font_title, self.HEIGHT / 4, self.COLOR_TEXT_DARK)
        elif self.menu_page is MenuPage.SETTINGS:
            self._blit_centered("Settings", self.font_large, 80, self.COLOR_TEXT_DARK)
            self._blit_centered("Speed level", self.font_small, 265, self.COLOR_TEXT_DARK)
        else:
            self._blit_centered("Press SPACE, ArrowUP or X to jump", self.font_small, self.HEIGHT / 2 - 20,
                                self.COLOR_TEXT_DARK)
            self._blit_centered("Avoid hitting the pipes!", self.font_small, self.HEIGHT / 2 + 20,
                                self.COLOR_TEXT_DARK)

        for button in self.buttons:
            button.draw(self.screen, self.font_small)

        if self.menu_page is not MenuPage.MAIN:
            ui.draw_back_arrow(self.screen, self.font_large, self.WIDTH, self.COLOR_TEXT_DARK)

    def _blit_centered(self, text, font, y, color=COLOR_TEXT):
        surf = font.render(text, True, color)
        self.screen.blit(surf, surf.get_rect(center=(self.WIDTH // 2, int(y))))

    def _draw_background_gradient(self):
        for y in range(self.HEIGHT):
            # Interpolate color from top to bottom
            r = self.COLOR_SKY_TOP[0] + (self.COLOR_SKY_BOTTOM[0] - self.COLOR_SKY_TOP[0]) * y // self.HEIGHT
            g = self.COLOR_SKY_TOP[1] + (self.COLOR_SKY_BOTTOM[1] - self.COLOR_SKY_TOP[1]) * y // self.HEIGHT
            b = self.COLOR_SKY_TOP[2] + (self.COLOR_SKY_BOTTOM[2] - self.COLOR_SKY_TOP[2]) * y // self.HEIGHT
            pygame.draw.line(self.background_surface, (r, g, b), (0, y), (self.WIDTH, y))

    def close(self):
        pygame.font.quit()
        pygame.quit()

    def validate_implementation(self):
        '''
        Sanity-check the spaces and the reset/step contract.
        '''
        assert self.action_space.shape == (3,)
        assert self.action_space.nvec.tolist() == [2, 2, 2]

        test_obs = self._get_observation()
        assert test_obs.shape == (self.HEIGHT, self.WIDTH, 3)
        assert test_obs.dtype == np.uint8

        obs, info = self.reset()
        assert obs.shape == (self.HEIGHT, self.WIDTH, 3)
        assert isinstance(info, dict)

        test_action = self.action_space.sample()
        obs, reward, term, trunc, info = self.step(test_action)
        assert obs.shape == (self.HEIGHT, self.WIDTH, 3)
        assert isinstance(reward, (int, float))
        assert isinstance(term, bool)
        assert trunc == False
        assert isinstance(info, dict)

        logger.info("Implementation validated successfully")
