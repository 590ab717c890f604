"""
Scene composition service.
Turns a sketch plus its text description into an "enhanced" raster:
a keyword-selected sky, the sketch as a translucent guide, the matching
procedural elements, an atmosphere wash and a provenance stamp.
"""

import logging
import random
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from config import APP_NAME, COMPOSITION_SIZE

from . import renderers
from .events import PipelineStage, StageCallback, StageEvent, log_stage_event
from .renderers import ElementRenderer
from .surface import (
    ColorStop,
    DrawSurface,
    PillowSurfaceBackend,
    SurfaceDecodeError,
    decode_base64_image,
    encode_base64,
    hex_color,
    rgba,
)

logger = logging.getLogger(__name__)

GUIDE_OPACITY = 0.3
EXCERPT_LENGTH = 60
PROVENANCE_LABEL = f"{APP_NAME} AI"
PROVENANCE_COLOR = rgba(255, 220, 100, 0.9)
EXCERPT_COLOR = rgba(255, 255, 255, 0.8)
SHADOW_COLOR = rgba(0, 0, 0, 0.5)
SHADOW_BLUR = 4


@dataclass(frozen=True)
class Background:
    name: str
    keywords: Tuple[str, ...]
    stops: Tuple[ColorStop, ...]


@dataclass(frozen=True)
class SceneElement:
    name: str
    keywords: Tuple[str, ...]
    renderer: ElementRenderer


@dataclass(frozen=True)
class ScenePlan:
    background: Background
    elements: Tuple[SceneElement, ...]

    @property
    def element_names(self) -> List[str]:
        return [element.name for element in self.elements]


# Ordered, first match wins
BACKGROUNDS: Tuple[Background, ...] = (
    Background("mountain", ("mountain", "montaña"), (
        (0.0, hex_color("#87CEEB")),
        (0.6, hex_color("#E0F6FF")),
        (1.0, hex_color("#FFF8DC")),
    )),
    Background("sunset", ("sunset", "atardecer"), (
        (0.0, hex_color("#FF6B35")),
        (0.5, hex_color("#F7931E")),
        (1.0, hex_color("#FFC371")),
    )),
    Background("ocean", ("ocean", "sea", "océano"), (
        (0.0, hex_color("#87CEEB")),
        (1.0, hex_color("#98D8E8")),
    )),
)

DEFAULT_BACKGROUND = Background("default", (), (
    (0.0, hex_color("#87CEEB")),
    (1.0, hex_color("#F0F8FF")),
))

# Every match fires; order is back-to-front layering
ELEMENTS: Tuple[SceneElement, ...] = (
    SceneElement("mountains", ("mountain", "montaña"), renderers.draw_mountains),
    SceneElement("trees", ("tree", "árbol"), renderers.draw_trees),
    SceneElement("sun", ("sun", "sol"), renderers.draw_sun),
    SceneElement("clouds", ("cloud", "nube"), renderers.draw_clouds),
    SceneElement("house", ("house", "casa"), renderers.draw_house),
)


def _matches(text: str, keywords: Sequence[str]) -> bool:
    return any(keyword in text for keyword in keywords)


def plan_scene(description: str) -> ScenePlan:
    """
    Resolve which background and which elements a description calls for.
    Matching is a case-insensitive substring test.
    """
    text = description.lower()
    background = next((bg for bg in BACKGROUNDS if _matches(text, bg.keywords)), DEFAULT_BACKGROUND)
    elements = tuple(element for element in ELEMENTS if _matches(text, element.keywords))
    return ScenePlan(background=background, elements=elements)


def excerpt(description: str, limit: int = EXCERPT_LENGTH) -> str:
    """First `limit` characters of the description, always followed by '...'."""
    return description[:limit] + "..."


class SceneComposer:
    """
    Composes the enhanced image for a sketch and its description.
    Tree heights come from the injected random source; pass a seed for
    reproducible output.
    """

    def __init__(
        self,
        backend: Optional[PillowSurfaceBackend] = None,
        size: int = COMPOSITION_SIZE,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
        on_stage: StageCallback = log_stage_event,
    ):
        self.backend = backend or PillowSurfaceBackend()
        self.size = size
        self.rng = rng
        self.seed = seed
        self.on_stage = on_stage

    def _random_source(self) -> random.Random:
        if self.rng is not None:
            return self.rng
        return random.Random(self.seed)

    def plan(self, description: str) -> ScenePlan:
        return plan_scene(description)

    def compose(self, sketch: str, description: str) -> str:
        """
        Render the enhanced image.

        Args:
            sketch: Base64-encoded raster image (bare or data URI)
            description: Scene description driving the composition

        Returns:
            Base64 image in the sketch's format, without data-URI prefix.
            If the sketch cannot be decoded the input is returned unchanged.
        """
        try:
            guide = self.backend.decode(decode_base64_image(sketch))
        except SurfaceDecodeError as e:
            logger.error("Could not load sketch image: %s", e)
            self.on_stage(StageEvent(PipelineStage.DECODE_FAILED, "Sketch could not be decoded", {"error": str(e)}))
            return sketch

        plan = self.plan(description)
        self.on_stage(StageEvent(PipelineStage.COMPOSING, "Composing scene", {
            "background": plan.background.name,
            "elements": plan.element_names,
        }))

        width = height = self.size
        surface = self.backend.new_surface(width, height, format=guide.format)
        rng = self._random_source()

        surface.fill_vertical_gradient(0, height, plan.background.stops)

        with surface.global_alpha(GUIDE_OPACITY):
            surface.draw_surface(guide)

        for element in plan.elements:
            self.on_stage(StageEvent(PipelineStage.RENDERING, f"Drawing {element.name}", {"element": element.name}))
            element.renderer(surface, width, height, rng)

        renderers.add_atmosphere(surface, width, height, rng)
        self._stamp_provenance(surface, description)

        return encode_base64(self.backend.encode(surface, format=guide.format))

    def _stamp_provenance(self, surface: DrawSurface, description: str) -> None:
        surface.draw_text(
            surface.width - 15, 25, PROVENANCE_LABEL,
            size=16, color=PROVENANCE_COLOR, bold=True, align="right",
            shadow_color=SHADOW_COLOR, shadow_blur=SHADOW_BLUR,
        )
        surface.draw_text(
            15, surface.height - 15, "Detected: " + excerpt(description),
            size=14, color=EXCERPT_COLOR, align="left",
            shadow_color=SHADOW_COLOR, shadow_blur=SHADOW_BLUR,
        )


# Singleton instance
_scene_composer: Optional[SceneComposer] = None


def get_scene_composer() -> SceneComposer:
    """
    Get or create the scene composer singleton.

    Returns:
        SceneComposer instance
    """
    global _scene_composer
    if _scene_composer is None:
        _scene_composer = SceneComposer()
    return _scene_composer
