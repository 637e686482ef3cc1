import pygame


COLOR_BUTTON = (40, 70, 200)
COLOR_BUTTON_ACTIVE = (230, 120, 30)
COLOR_BUTTON_TEXT = (255, 255, 255)


def inside_rect(x, y, rect):
    rx, ry, rw, rh = rect
    return rx < x < rx + rw and ry < y < ry + rh


def inside_circle(x, y, cx, cy, radius):
    dx = x - cx
    dy = y - cy
    return dx * dx + dy * dy <= radius * radius


def back_button_rect(board_width):
    return (board_width - 40, 20, 40, 40)


def pause_button_rect(board_width):
    return (board_width / 2 - 10, 20, 20, 30)


def back_button_hit(x, y, board_width):
    return inside_rect(x, y, back_button_rect(board_width)) or inside_circle(x, y, board_width - 30, 30, 20)


def pause_button_hit(x, y, board_width):
    return inside_rect(x, y, pause_button_rect(board_width))


class Button:
    WIDTH = 140
    HEIGHT = 40
    POP_SCALE = 1.2
    POP_DECAY = 0.05

    def __init__(self, label, center, on_click, active=False):
        self.label = label
        self.center = center
        self.on_click = on_click
        self.active = active
        self.animation_scale = 1.0
        self.is_animating = False

    def contains(self, x, y):
        cx, cy = self.center
        return (cx - self.WIDTH / 2 < x < cx + self.WIDTH / 2
                and cy - self.HEIGHT / 2 < y < cy + self.HEIGHT / 2)

    def press(self):
        self.is_animating = True
        self.animation_scale = self.POP_SCALE
        self.on_click()

    def update(self):
        if not self.is_animating:
            return
        self.animation_scale -= self.POP_DECAY
        if self.animation_scale <= 1.0:
            self.animation_scale = 1.0
            self.is_animating = False

    def draw(self, surface, font):
        w = int(self.WIDTH * self.animation_scale)
        h = int(self.HEIGHT * self.animation_scale)
        rect = pygame.Rect(0, 0, w, h)
        rect.center = (int(self.center[0]), int(self.center[1]))
        color = COLOR_BUTTON_ACTIVE if self.active else COLOR_BUTTON
        pygame.draw.rect(surface, color, rect, border_radius=6)
        text = font.render(self.label, True, COLOR_BUTTON_TEXT)
        surface.blit(text, text.get_rect(center=rect.center))


def draw_overlay(surface, alpha=128):
    overlay = pygame.Surface(surface.get_size(), pygame.SRCALPHA)
    overlay.fill((0, 0, 0, alpha))
    surface.blit(overlay, (0, 0))


def draw_back_arrow(surface, font, board_width, color):
    # Plain ASCII glyph, the default font has no arrow
    text = font.render("<", True, color)
    surface.blit(text, text.get_rect(center=(board_width - 20, 40)))


def draw_pause_glyph(surface, board_width, color):
    x, y, w, h = pause_button_rect(board_width)
    pygame.draw.rect(surface, color, pygame.Rect(int(x) + 3, y + 4, 5, h - 8))
    pygame.draw.rect(surface, color, pygame.Rect(int(x) + w - 8, y + 4, 5, h - 8))


class LoadingScreen:
    """Fake progress bar shown before the main menu."""

    STEP = 2
    TICK_MS = 50

    def __init__(self, size):
        self.width, self.height = size
        self.progress = 0
        self.font = pygame.font.Font(None, 40)

    @property
    def done(self):
        return self.progress >= 100

    def update(self):
        if not self.done:
            self.progress = min(100, self.progress + self.STEP)

    def draw(self, surface):
        surface.fill((0, 0, 0))
        text = self.font.render("Loading...", True, (255, 255, 255))
        surface.blit(text, text.get_rect(center=(self.width // 2, self.height // 2 - 30)))

        bar = pygame.Rect(self.width // 4, self.height // 2, self.width // 2, 20)
        pygame.draw.rect(surface, (255, 255, 255), bar, 1)
        fill = bar.copy()
        fill.width = int(bar.width * self.progress / 100)
        pygame.draw.rect(surface, (255, 255, 255), fill)

    def run(self, screen, clock):
        """Block until the bar fills. Returns False if the window was closed."""
        while not self.done:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    return False
            self.update()
            self.draw(screen)
            pygame.display.flip()
            clock.tick(1000 // self.TICK_MS)
        return True
