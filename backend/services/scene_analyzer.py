"""
Scene analysis service.
Sends the sketch to a Gemini vision model and returns a free-text
description of what was drawn. Never raises: any failure degrades to a
fixed fallback description so composition can always proceed.
"""

import logging
from typing import Any, Callable, Optional

from config import GEMINI_REQUEST_TIMEOUT, GEMINI_VISION_MODEL, get_gemini_api_key

from .events import PipelineStage, StageCallback, StageEvent, log_stage_event
from .surface import decode_base64_image, sniff_mime_type

logger = logging.getLogger(__name__)

FALLBACK_DESCRIPTION = "A landscape drawing with natural elements"

ANALYSIS_PROMPT = """Analyze this drawing/sketch and describe EXACTLY what you see.
Be specific about:
- What objects are drawn (mountains, trees, houses, people, etc.)
- Where they are positioned
- The style of the drawing
- What the user seems to be trying to represent

Respond in a clear, descriptive way that could be used to generate a realistic image.
Focus on the main elements and their arrangement."""

ModelFactory = Callable[[str, str], Any]


def gemini_model_factory(api_key: str, model_name: str) -> Any:
    """Build a google-generativeai model bound to the given key."""
    import google.generativeai as genai

    genai.configure(api_key=api_key)
    return genai.GenerativeModel(model_name)


def _first_text(response: Any) -> str:
    """Extract the first text part from a generate_content response."""
    text = getattr(response, "text", None)
    if text:
        return text
    for candidate in getattr(response, "candidates", None) or []:
        content = getattr(candidate, "content", None)
        for part in getattr(content, "parts", None) or []:
            if getattr(part, "text", None):
                return part.text
    raise ValueError("Gemini response contained no text")


class SceneAnalyzer:
    """
    Describes a sketch using a vision-capable Gemini model.
    The credential and model construction are injected so the service can
    run against fakes in tests.
    """

    def __init__(
        self,
        api_key_provider: Callable[[], str] = get_gemini_api_key,
        model_factory: ModelFactory = gemini_model_factory,
        model_name: str = GEMINI_VISION_MODEL,
        timeout: Optional[float] = GEMINI_REQUEST_TIMEOUT,
        on_stage: StageCallback = log_stage_event,
    ):
        self.api_key_provider = api_key_provider
        self.model_factory = model_factory
        self.model_name = model_name
        self.timeout = timeout
        self.on_stage = on_stage

    async def analyze(self, sketch: str) -> str:
        """
        Describe the contents of a sketch.

        Args:
            sketch: Base64-encoded raster image (bare or data URI)

        Returns:
            Model description, or FALLBACK_DESCRIPTION on any failure
        """
        self.on_stage(StageEvent(PipelineStage.ANALYZING, "Analyzing sketch", {"model": self.model_name}))

        try:
            image_bytes = decode_base64_image(sketch)
            model = self.model_factory(self.api_key_provider(), self.model_name)
            request_options = {"timeout": self.timeout} if self.timeout else None
            response = await model.generate_content_async(
                [
                    ANALYSIS_PROMPT,
                    {"mime_type": sniff_mime_type(image_bytes), "data": image_bytes},
                ],
                request_options=request_options,
            )
            description = _first_text(response).strip()
            if not description:
                raise ValueError("Gemini returned an empty description")
        except Exception as e:
            logger.warning("Sketch analysis failed, using fallback description: %s", e)
            self.on_stage(StageEvent(
                PipelineStage.ANALYSIS_FAILED,
                "Analysis failed, using fallback description",
                {"error": str(e)},
            ))
            return FALLBACK_DESCRIPTION

        self.on_stage(StageEvent(PipelineStage.ANALYZED, "Analysis complete", {"preview": description[:100]}))
        return description


# Singleton instance
_scene_analyzer: Optional[SceneAnalyzer] = None


def get_scene_analyzer() -> SceneAnalyzer:
    """
    Get or create the scene analyzer singleton.

    Returns:
        SceneAnalyzer instance
    """
    global _scene_analyzer
    if _scene_analyzer is None:
        _scene_analyzer = SceneAnalyzer()
    return _scene_analyzer
