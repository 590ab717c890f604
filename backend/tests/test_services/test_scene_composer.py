"""Tests for keyword-driven scene planning and composition."""

from __future__ import annotations

import base64

import pytest

from services.events import PipelineStage
from services.scene_composer import (
    DEFAULT_BACKGROUND,
    SceneComposer,
    excerpt,
    plan_scene,
)
from services.surface import interpolate_stops
from tests.conftest import MOUNTAIN_SCENE, decode_image


@pytest.mark.parametrize("description,expected", [
    ("A tall Mountain", ["mountains"]),
    ("una montaña nevada", ["mountains"]),
    ("a single TREE in a field", ["trees"]),
    ("un árbol grande", ["trees"]),
    ("the sun is shining", ["sun"]),
    ("el sol", ["sun"]),
    ("fluffy clouds", ["clouds"]),
    ("una nube", ["clouds"]),
    ("a little house", ["house"]),
    ("mi casa", ["house"]),
    ("abstract scribbles", []),
])
def test_keyword_selects_elements(description, expected):
    assert plan_scene(description).element_names == expected


def test_elements_follow_fixed_layering_order():
    plan = plan_scene("A house under clouds, a sun over trees and a mountain")
    assert plan.element_names == ["mountains", "trees", "sun", "clouds", "house"]


@pytest.mark.parametrize("description,background", [
    ("mountain at sunset", "mountain"),
    ("Sunset over the sea", "sunset"),
    ("un atardecer", "sunset"),
    ("waves on the OCEAN", "ocean"),
    ("el océano", "ocean"),
    ("a cat", "default"),
])
def test_background_precedence(description, background):
    assert plan_scene(description).background.name == background


def test_substring_matching_is_literal():
    # "sunset" contains "sun"
    assert plan_scene("sunset").element_names == ["sun"]
    assert plan_scene("").background is DEFAULT_BACKGROUND


def test_excerpt():
    long_text = "x" * 100
    assert excerpt(long_text) == "x" * 60 + "..."
    assert excerpt("Sun") == "Sun..."


def test_compose_returns_png_at_composition_size(png_sketch):
    composer = SceneComposer(seed=1)
    result = composer.compose(png_sketch, MOUNTAIN_SCENE)

    image = decode_image(result)
    assert image.format == "PNG"
    assert image.size == (1024, 1024)
    assert not result.startswith("data:")


def test_compose_keeps_jpeg_format(jpeg_sketch):
    result = SceneComposer(seed=1, size=256).compose(jpeg_sketch, "a house")
    assert decode_image(result).format == "JPEG"


def test_compose_accepts_data_uri(png_sketch):
    result = SceneComposer(seed=1, size=256).compose("data:image/png;base64," + png_sketch, "a tree")
    assert decode_image(result).size == (256, 256)


@pytest.mark.parametrize("sketch", [
    "not-an-image",
    base64.b64encode(b"hello world").decode("ascii"),
])
def test_undecodable_sketch_is_returned_unchanged(sketch, stage_events):
    composer = SceneComposer(on_stage=stage_events.append)
    assert composer.compose(sketch, MOUNTAIN_SCENE) == sketch
    assert [e.stage for e in stage_events] == [PipelineStage.DECODE_FAILED]


def test_seeded_composition_is_reproducible(png_sketch):
    first = SceneComposer(seed=42, size=256).compose(png_sketch, MOUNTAIN_SCENE)
    second = SceneComposer(seed=42, size=256).compose(png_sketch, MOUNTAIN_SCENE)
    assert decode_image(first).tobytes() == decode_image(second).tobytes()


@pytest.mark.parametrize("description", ["atardecer", "mountain at sunset", "a cat"])
def test_sky_gradient_matches_selected_background(png_sketch, description):
    result = SceneComposer(seed=1).compose(png_sketch, description)
    stops = plan_scene(description).background.stops

    pixel = decode_image(result).getpixel((5, 100))
    assert pixel[:3] == interpolate_stops(stops, 100.5 / 1024)[:3]


def test_guide_sketch_shows_through(png_sketch):
    plain = decode_image(SceneComposer(seed=1).compose(png_sketch, "a cat"))
    # Ridge line of the sketch starts at (0, 0.7h)
    line_pixel = plain.getpixel((2, 716))
    sky_pixel = plain.getpixel((2, 600))
    assert sum(line_pixel[:3]) < sum(sky_pixel[:3])


def test_compose_reports_stages(png_sketch, stage_events):
    SceneComposer(seed=1, size=256, on_stage=stage_events.append).compose(png_sketch, MOUNTAIN_SCENE)

    composing = stage_events[0]
    assert composing.stage == PipelineStage.COMPOSING
    assert composing.data == {"background": "mountain", "elements": ["mountains", "trees", "sun"]}
    rendering = [e.data["element"] for e in stage_events if e.stage == PipelineStage.RENDERING]
    assert rendering == ["mountains", "trees", "sun"]


def test_provenance_label_is_stamped(png_sketch):
    image = decode_image(SceneComposer(seed=1).compose(png_sketch, "a cat"))

    def differs_from_sky(x, y):
        return image.getpixel((x, y))[:3] != interpolate_stops(DEFAULT_BACKGROUND.stops, (y + 0.5) / 1024)[:3]

    # Text occupies the band just above the y=25 baseline at the right edge
    assert any(differs_from_sky(x, y) for x in range(860, 1009) for y in range(10, 25))
    # Left of the label the sky is untouched
    assert not any(differs_from_sky(x, y) for x in range(300, 400) for y in range(10, 25))
