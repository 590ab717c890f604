"""Pixel-level tests for the procedural element renderers (1024px reference surface)."""

from __future__ import annotations

import random

import pytest

from services import renderers
from services.surface import DrawSurface, PillowSurfaceBackend


SIZE = 1024
WHITE = (255, 255, 255, 255)


class FixedRandom(random.Random):
    """Random source that always returns the same value."""

    def __init__(self, value: float):
        super().__init__(0)
        self.value = value

    def random(self) -> float:
        return self.value


def _blank(color=WHITE) -> DrawSurface:
    surface = PillowSurfaceBackend().new_surface(SIZE, SIZE)
    surface.fill_rect(0, 0, SIZE, SIZE, color)
    return surface


def _rgb(surface: DrawSurface, x: int, y: int):
    return surface.image.getpixel((x, y))[:3]


def test_mountains_rock_snow_and_shade():
    surface = _blank()
    renderers.draw_mountains(surface, SIZE, SIZE, random.Random(0))

    assert _rgb(surface, 819, 460) == (139, 125, 107)
    assert _rgb(surface, 290, 315) == (255, 255, 255)
    shaded = _rgb(surface, 400, 600)
    assert all(s < r for s, r in zip(shaded, (139, 125, 107)))
    # Sky above the ridge is untouched
    assert _rgb(surface, 819, 200) == (255, 255, 255)


def test_trees_draw_five_trunks_on_the_horizon():
    surface = _blank()
    renderers.draw_trees(surface, SIZE, SIZE, random.Random(3))

    for i in range(5):
        x = int(SIZE * (0.1 + i * 0.2))
        assert _rgb(surface, x, 726) == (101, 67, 33)
        assert _rgb(surface, x, 700) == (34, 139, 34)


def test_tree_heights_follow_the_random_source():
    tall = _blank()
    renderers.draw_trees(tall, SIZE, SIZE, FixedRandom(1.0))
    short = _blank()
    renderers.draw_trees(short, SIZE, SIZE, FixedRandom(0.0))

    # 100px canopy reaches y=625, a 60px one does not
    assert _rgb(tall, 102, 625) == (34, 139, 34)
    assert _rgb(short, 102, 625) == (255, 255, 255)


def test_sun_disc_and_glow():
    surface = _blank()
    renderers.draw_sun(surface, SIZE, SIZE, random.Random(0))

    assert _rgb(surface, 870, 153) == (255, 215, 0)
    glow = _rgb(surface, 930, 153)
    assert glow[0] == 255 and glow[2] < 255
    assert _rgb(surface, 975, 153) == (255, 255, 255)


def test_clouds_are_translucent_white():
    surface = _blank((0, 0, 0, 255))
    renderers.draw_clouds(surface, SIZE, SIZE, random.Random(0))

    first = _rgb(surface, 205, 154)
    assert first == (204, 204, 204)
    # Overlapping puffs share one fill
    assert _rgb(surface, 222, 154) == first
    assert _rgb(surface, 615, 102) == first


def test_house_walls_roof_door_and_windows():
    surface = _blank()
    renderers.draw_house(surface, SIZE, SIZE, random.Random(0))

    assert _rgb(surface, 620, 680) == (210, 105, 30)
    assert _rgb(surface, 664, 600) == (139, 69, 19)
    assert _rgb(surface, 664, 685) == (101, 67, 33)
    assert _rgb(surface, 640, 645) == (135, 206, 235)
    assert _rgb(surface, 695, 645) == (135, 206, 235)


def test_atmosphere_only_touches_lower_half():
    surface = _blank((0, 0, 0, 255))
    renderers.add_atmosphere(surface, SIZE, SIZE, random.Random(0))

    assert _rgb(surface, 500, 100) == (0, 0, 0)
    assert _rgb(surface, 500, 500) == (0, 0, 0)
    bottom = _rgb(surface, 500, 1023)
    assert 70 <= bottom[0] <= 80


@pytest.mark.parametrize("width", [512, 2048])
def test_renderers_scale_with_surface(width):
    surface = PillowSurfaceBackend().new_surface(width, width)
    surface.fill_rect(0, 0, width, width, WHITE)
    renderers.draw_sun(surface, width, width, random.Random(0))

    assert _rgb(surface, int(width * 0.85), int(width * 0.15)) == (255, 215, 0)
