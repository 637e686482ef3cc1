from __future__ import annotations

import pytest

from flappy.entities import Bird, Pipe, detect_collision, rects_overlap


def test_overlapping_rects_collide() -> None:
    assert rects_overlap((0, 0, 10, 10), (5, 5, 10, 10)) is True


def test_disjoint_rects_do_not_collide() -> None:
    assert rects_overlap((0, 0, 10, 10), (20, 20, 5, 5)) is False
    assert rects_overlap((0, 0, 10, 10), (0, 30, 10, 10)) is False


def test_touching_edges_are_not_an_overlap() -> None:
    assert rects_overlap((0, 0, 10, 10), (10, 0, 10, 10)) is False
    assert rects_overlap((0, 0, 10, 10), (0, 10, 10, 10)) is False


@pytest.mark.parametrize(
    "a, b",
    [
        ((0, 0, 10, 10), (5, 5, 10, 10)),
        ((0, 0, 10, 10), (20, 20, 5, 5)),
        ((0, 0, 10, 10), (2, 2, 3, 3)),
        ((45, 320, 34, 24), (40, -200, 64, 512)),
        ((-5.5, 1.25, 3, 3), (-4, 2, 0.5, 0.5)),
    ],
)
def test_overlap_is_symmetric(a, b) -> None:
    assert rects_overlap(a, b) == rects_overlap(b, a)


def test_contained_rect_overlaps() -> None:
    assert rects_overlap((0, 0, 10, 10), (2, 2, 3, 3)) is True


def test_bird_falls_under_constant_gravity() -> None:
    bird = Bird(45, 320, 34, 24)

    bird.move()
    assert bird.velocity_y == pytest.approx(0.4)
    assert bird.y == pytest.approx(320.4)

    bird.move()
    assert bird.velocity_y == pytest.approx(0.8)
    assert bird.y == pytest.approx(321.2)


def test_bird_is_clamped_at_top_of_board() -> None:
    bird = Bird(45, 5, 34, 24)
    for _ in range(50):
        bird.flap()
        bird.move()
        assert bird.y >= 0
    assert bird.y == 0


def test_flap_sets_upward_velocity() -> None:
    bird = Bird(45, 320, 34, 24)
    bird.move()
    bird.flap()
    assert bird.velocity_y == Bird.FLAP_VELOCITY


def test_pipe_moves_and_starts_unpassed() -> None:
    pipe = Pipe(360, -200, 64, 512, is_top=True)
    pipe.move(-2)
    assert pipe.x == 358
    assert pipe.right == 422
    assert pipe.passed is False


def test_detect_collision_uses_entity_bounds() -> None:
    bird = Bird(45, 320, 34, 24)
    assert detect_collision(bird, Pipe(60, 0, 64, 330, is_top=True)) is True
    assert detect_collision(bird, Pipe(60, 0, 64, 320, is_top=True)) is False
    assert detect_collision(bird, Pipe(200, 0, 64, 640, is_top=True)) is False
