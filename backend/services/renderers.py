"""
Procedural element renderers.
Each renderer paints one fixed motif onto a DrawSurface. Positions are
fractions of the surface size; absolute lengths are given at the 1024px
reference resolution and scaled to the actual surface width.
"""

import logging
import random
from typing import Callable

from .surface import DrawSurface, hex_color, rgba

logger = logging.getLogger(__name__)

REFERENCE_SIZE = 1024

ElementRenderer = Callable[[DrawSurface, int, int, random.Random], None]

# Palette
MOUNTAIN_ROCK = hex_color("#8B7D6B")
SNOW = hex_color("#FFFFFF")
MOUNTAIN_SHADE = rgba(0, 0, 0, 0.2)
TRUNK_BROWN = hex_color("#654321")
FOLIAGE_GREEN = hex_color("#228B22")
SUN_GOLD = hex_color("#FFD700")
CLOUD_WHITE = rgba(255, 255, 255, 0.8)
WALL_ORANGE = hex_color("#D2691E")
ROOF_BROWN = hex_color("#8B4513")
DOOR_BROWN = hex_color("#654321")
WINDOW_BLUE = hex_color("#87CEEB")


def _px(value: float, width: int) -> float:
    """Scale a reference-resolution length to the surface width."""
    return value * width / REFERENCE_SIZE


def draw_mountains(surface: DrawSurface, width: int, height: int, rng: random.Random) -> None:
    """Rocky ridge with a snow cap on the first peak and a shaded flank."""
    logger.debug("Drawing mountains")

    surface.fill_polygon([
        (0, height * 0.7),
        (width * 0.3, height * 0.3),
        (width * 0.5, height * 0.4),
        (width * 0.7, height * 0.25),
        (width * 0.9, height * 0.45),
        (width, height * 0.5),
        (width, height),
        (0, height),
    ], MOUNTAIN_ROCK)

    peak_x = width * 0.3
    cap = _px(40, width)
    surface.fill_polygon([
        (peak_x - cap, height * 0.3),
        (peak_x, height * 0.3),
        (peak_x + cap, height * 0.3),
        (peak_x + cap / 2, height * 0.35),
        (peak_x, height * 0.33),
        (peak_x - cap / 2, height * 0.35),
    ], SNOW)

    surface.fill_polygon([
        (width * 0.3, height * 0.3),
        (width * 0.5, height * 0.4),
        (width * 0.5, height * 0.7),
        (width * 0.3, height * 0.7),
    ], MOUNTAIN_SHADE)


def draw_trees(surface: DrawSurface, width: int, height: int, rng: random.Random) -> None:
    """Five pine trees along the horizon with randomized heights."""
    logger.debug("Drawing trees")

    for i in range(5):
        x = width * (0.1 + i * 0.2)
        y = height * 0.7
        tree_height = _px(60 + rng.random() * 40, width)
        half_trunk = _px(5, width)
        half_canopy = _px(25, width)

        surface.fill_rect(x - half_trunk, y, half_trunk * 2, _px(20, width), TRUNK_BROWN)
        surface.fill_polygon([
            (x, y - tree_height),
            (x - half_canopy, y),
            (x + half_canopy, y),
        ], FOLIAGE_GREEN)


def draw_sun(surface: DrawSurface, width: int, height: int, rng: random.Random) -> None:
    """Sun disc in the upper right with a soft yellow glow."""
    logger.debug("Drawing sun")

    sun_x = width * 0.85
    sun_y = height * 0.15
    radius = _px(40, width)

    surface.fill_radial_gradient(
        sun_x,
        sun_y,
        radius * 2,
        [
            (0.0, rgba(255, 255, 0, 0.8)),
            (0.5, rgba(255, 255, 0, 0.3)),
            (1.0, rgba(255, 255, 0, 0.0)),
        ],
        box=(sun_x - radius * 2, sun_y - radius * 2, radius * 4, radius * 4),
    )
    surface.fill_circles([(sun_x, sun_y, radius)], SUN_GOLD)


def _draw_cloud(surface: DrawSurface, x: float, y: float, size: float) -> None:
    surface.fill_circles([
        (x, y, size * 0.5),
        (x + size * 0.3, y, size * 0.6),
        (x + size * 0.6, y, size * 0.4),
    ], CLOUD_WHITE)


def draw_clouds(surface: DrawSurface, width: int, height: int, rng: random.Random) -> None:
    """Two puffy clouds across the upper sky."""
    logger.debug("Drawing clouds")

    _draw_cloud(surface, width * 0.2, height * 0.15, _px(60, width))
    _draw_cloud(surface, width * 0.6, height * 0.1, _px(80, width))


def draw_house(surface: DrawSurface, width: int, height: int, rng: random.Random) -> None:
    """Small cottage with a pitched roof, a door and two windows."""
    logger.debug("Drawing house")

    house_x = width * 0.6
    house_y = height * 0.6
    house_w = _px(100, width)
    house_h = _px(80, width)
    overhang = _px(10, width)

    # Walls
    surface.fill_rect(house_x, house_y, house_w, house_h, WALL_ORANGE)

    # Roof
    surface.fill_polygon([
        (house_x - overhang, house_y),
        (house_x + house_w / 2, house_y - _px(40, width)),
        (house_x + house_w + overhang, house_y),
    ], ROOF_BROWN)

    # Door
    door_w = _px(30, width)
    door_h = _px(40, width)
    surface.fill_rect(house_x + house_w / 2 - door_w / 2, house_y + house_h - door_h, door_w, door_h, DOOR_BROWN)

    # Windows
    window = _px(25, width)
    inset = _px(15, width)
    sill = _px(20, width)
    surface.fill_rect(house_x + inset, house_y + sill, window, window, WINDOW_BLUE)
    surface.fill_rect(house_x + house_w - inset - window, house_y + sill, window, window, WINDOW_BLUE)


def add_atmosphere(surface: DrawSurface, width: int, height: int, rng: random.Random) -> None:
    """Low-lying haze fading in from mid-height to the bottom edge."""
    surface.fill_vertical_gradient(
        height * 0.5,
        height,
        [
            (0.0, rgba(255, 255, 255, 0.0)),
            (1.0, rgba(255, 255, 255, 0.3)),
        ],
    )
