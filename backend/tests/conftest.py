"""Shared test fixtures."""

from __future__ import annotations

import base64
import io
from typing import Any, List, Optional

import pytest
from PIL import Image, ImageDraw

from services.events import StageEvent
from services.scene_analyzer import SceneAnalyzer


MOUNTAIN_SCENE = "A mountain landscape with pine trees and a bright sun in a clear sky"


def make_sketch(fmt: str = "PNG", size: tuple = (256, 256)) -> str:
    """A hand-drawn-looking sketch: a dark ridge line on a blank canvas."""
    if fmt in ("JPEG", "BMP"):
        image = Image.new("RGB", size, (255, 255, 255))
    else:
        image = Image.new("RGBA", size, (0, 0, 0, 0))
    draw = ImageDraw.Draw(image)
    w, h = size
    draw.line([(0, h * 0.7), (w * 0.3, h * 0.3), (w * 0.5, h * 0.45), (w, h * 0.5)], fill=(20, 20, 20), width=3)
    buffer = io.BytesIO()
    image.save(buffer, format=fmt)
    return base64.b64encode(buffer.getvalue()).decode("ascii")


def decode_image(data: str) -> Image.Image:
    image = Image.open(io.BytesIO(base64.b64decode(data)))
    image.load()
    return image


class FakeResponse:
    def __init__(self, text: str):
        self.text = text


class FakeModel:
    """Stands in for a google-generativeai GenerativeModel."""

    def __init__(self, text: str = "", error: Optional[Exception] = None):
        self.text = text
        self.error = error
        self.calls: List[Any] = []
        self.api_key: Optional[str] = None
        self.model_name: Optional[str] = None

    def factory(self, api_key: str, model_name: str) -> "FakeModel":
        self.api_key = api_key
        self.model_name = model_name
        return self

    async def generate_content_async(self, contents, request_options=None):
        self.calls.append((contents, request_options))
        if self.error is not None:
            raise self.error
        return FakeResponse(self.text)


@pytest.fixture
def png_sketch() -> str:
    return make_sketch("PNG")


@pytest.fixture
def jpeg_sketch() -> str:
    return make_sketch("JPEG")


@pytest.fixture
def stage_events() -> List[StageEvent]:
    return []


@pytest.fixture
def make_analyzer(stage_events):
    """Build a SceneAnalyzer wired to a FakeModel instead of Gemini."""

    def build(text: str = MOUNTAIN_SCENE, error: Optional[Exception] = None, api_key: str = "AIza-test-key"):
        model = FakeModel(text=text, error=error)
        analyzer = SceneAnalyzer(
            api_key_provider=lambda: api_key,
            model_factory=model.factory,
            model_name="gemini-test",
            timeout=5,
            on_stage=stage_events.append,
        )
        return analyzer, model

    return build
