import pygame
import pygame.gfxdraw


def rects_overlap(a, b):
    """Axis-aligned overlap test on (x, y, width, height) tuples. Touching edges do not overlap."""
    ax, ay, aw, ah = a
    bx, by, bw, bh = b
    return ax < bx + bw and ax + aw > bx and ay < by + bh and ay + ah > by


def detect_collision(a, b):
    return rects_overlap(a.bounds, b.bounds)


class Bird:
    GRAVITY = 0.4
    FLAP_VELOCITY = -6

    COLOR_BODY = (250, 210, 40)
    COLOR_WING = (240, 160, 30)
    COLOR_EYE = (255, 255, 255)
    COLOR_PUPIL = (20, 20, 20)
    COLOR_BEAK = (240, 90, 40)

    def __init__(self, x, y, width, height, gravity=GRAVITY):
        self.x = x
        self.y = y
        self.width = width
        self.height = height
        self.velocity_y = 0.0
        self.gravity = gravity

    @property
    def bounds(self):
        return (self.x, self.y, self.width, self.height)

    @property
    def bottom(self):
        return self.y + self.height

    def flap(self, velocity=FLAP_VELOCITY):
        self.velocity_y = velocity

    def move(self):
        self.velocity_y += self.gravity
        # Can't rise above the top of the board
        self.y = max(self.y + self.velocity_y, 0)

    def draw(self, surface):
        x, y = int(self.x), int(self.y)
        w, h = int(self.width), int(self.height)
        cx, cy = x + w // 2, y + h // 2

        pygame.gfxdraw.filled_ellipse(surface, cx, cy, w // 2, h // 2, self.COLOR_BODY)
        pygame.gfxdraw.aaellipse(surface, cx, cy, w // 2, h // 2, self.COLOR_BODY)

        # Wing tilts with vertical speed
        wing_dy = max(-4, min(4, int(self.velocity_y)))
        pygame.gfxdraw.filled_ellipse(surface, cx - w // 5, cy + wing_dy // 2, w // 5, h // 5, self.COLOR_WING)

        pygame.draw.circle(surface, self.COLOR_EYE, (x + w * 3 // 4, y + h // 3), 4)
        pygame.draw.circle(surface, self.COLOR_PUPIL, (x + w * 3 // 4 + 1, y + h // 3), 2)
        beak = [(x + w - 2, cy - 2), (x + w + 6, cy + 1), (x + w - 2, cy + 4)]
        pygame.gfxdraw.filled_polygon(surface, beak, self.COLOR_BEAK)


class Pipe:
    COLOR_BODY = (90, 190, 60)
    COLOR_EDGE = (50, 120, 30)
    COLOR_HIGHLIGHT = (160, 230, 120)
    LIP_HEIGHT = 24
    LIP_OVERHANG = 3

    def __init__(self, x, y, width, height, is_top):
        self.x = x
        self.y = y
        self.width = width
        self.height = height
        self.is_top = is_top
        self.passed = False

    @property
    def bounds(self):
        return (self.x, self.y, self.width, self.height)

    @property
    def right(self):
        return self.x + self.width

    def move(self, dx):
        self.x += dx

    def draw(self, surface):
        rect = pygame.Rect(int(self.x), int(self.y), int(self.width), int(self.height))
        pygame.draw.rect(surface, self.COLOR_BODY, rect)
        pygame.draw.rect(surface, self.COLOR_EDGE, rect, 2)
        pygame.draw.line(surface, self.COLOR_HIGHLIGHT, (rect.left + 6, rect.top), (rect.left + 6, rect.bottom), 3)

        # The lip sits on the end facing the gap
        lip_y = rect.bottom - self.LIP_HEIGHT if self.is_top else rect.top
        lip = pygame.Rect(
            rect.left - self.LIP_OVERHANG, lip_y, rect.width + 2 * self.LIP_OVERHANG, self.LIP_HEIGHT
        )
        pygame.draw.rect(surface, self.COLOR_BODY, lip)
        pygame.draw.rect(surface, self.COLOR_EDGE, lip, 2)
