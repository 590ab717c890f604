"""
Services package for the Nano Banana sketch enhancer.
"""

from .scene_analyzer import get_scene_analyzer, SceneAnalyzer, FALLBACK_DESCRIPTION
from .scene_composer import get_scene_composer, SceneComposer, plan_scene
from .generation_orchestrator import (
    get_generation_orchestrator,
    GenerationOrchestrator,
    GenerationResult,
)

__all__ = [
    "get_scene_analyzer",
    "SceneAnalyzer",
    "FALLBACK_DESCRIPTION",
    "get_scene_composer",
    "SceneComposer",
    "plan_scene",
    "get_generation_orchestrator",
    "GenerationOrchestrator",
    "GenerationResult",
]
