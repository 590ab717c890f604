"""
Generation pipeline.
Runs analysis then composition for a sketch. The whole pipeline sits
behind one failure boundary: callers always get an image back, falling
back to the untouched sketch when anything goes wrong.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .events import PipelineStage, StageCallback, StageEvent, log_stage_event
from .scene_analyzer import SceneAnalyzer, get_scene_analyzer
from .scene_composer import SceneComposer, get_scene_composer

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    generated_images: List[str] = field(default_factory=list)
    # Left empty on the fallback path as well
    error: Optional[str] = None
    description: Optional[str] = None


class GenerationOrchestrator:
    """
    Top-level async pipeline: SceneAnalyzer -> SceneComposer.
    """

    def __init__(
        self,
        analyzer: Optional[SceneAnalyzer] = None,
        composer: Optional[SceneComposer] = None,
        on_stage: StageCallback = log_stage_event,
    ):
        self.analyzer = analyzer or SceneAnalyzer(on_stage=on_stage)
        self.composer = composer or SceneComposer(on_stage=on_stage)
        self.on_stage = on_stage

    async def generate(
        self,
        sketch: str,
        user_prompt: Optional[str] = None,
        styles: Optional[List[str]] = None,
    ) -> GenerationResult:
        """
        Generate an enhanced image from a sketch.

        Args:
            sketch: Base64-encoded raster image
            user_prompt: Accepted for API compatibility; does not affect rendering
            styles: Accepted for API compatibility; does not affect rendering

        Returns:
            GenerationResult holding exactly one base64 image
        """
        self.on_stage(StageEvent(PipelineStage.START, "Starting generation", {
            "sketch_length": len(sketch),
            "prompt": (user_prompt or "")[:50],
            "styles": list(styles or []),
        }))

        try:
            description = await self.analyzer.analyze(sketch)
            logger.info("Generating image from analysis: %s", description[:100])
            # Composition runs in a worker thread
            image = await asyncio.to_thread(self.composer.compose, sketch, description)
        except Exception as e:
            logger.error("Generation failed, returning original sketch: %s", e, exc_info=True)
            self.on_stage(StageEvent(PipelineStage.FAILED, "Generation failed", {"error": str(e)}))
            self.on_stage(StageEvent(PipelineStage.FALLBACK_DONE, "Returned original sketch"))
            return GenerationResult(generated_images=[sketch], error=None)

        self.on_stage(StageEvent(PipelineStage.DONE, "Image generated successfully"))
        return GenerationResult(generated_images=[image], error=None, description=description)


# Singleton instance
_orchestrator: Optional[GenerationOrchestrator] = None


def get_generation_orchestrator() -> GenerationOrchestrator:
    """
    Get or create the generation orchestrator singleton.

    Returns:
        GenerationOrchestrator instance
    """
    global _orchestrator
    if _orchestrator is None:
        _orchestrator = GenerationOrchestrator(
            analyzer=get_scene_analyzer(),
            composer=get_scene_composer(),
        )
    return _orchestrator
