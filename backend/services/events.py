"""
Stage events emitted by the generation pipeline.
Components report progress through an injected callback instead of
printing; the default sink forwards everything to the logging module.
"""

import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict

logger = logging.getLogger(__name__)


class PipelineStage(str, enum.Enum):
    """Enum for the stages a generation request passes through."""
    START = "start"
    ANALYZING = "analyzing"
    ANALYZED = "analyzed"
    ANALYSIS_FAILED = "analysis_failed"
    COMPOSING = "composing"
    RENDERING = "rendering"
    DECODE_FAILED = "decode_failed"
    DONE = "done"
    FAILED = "failed"
    FALLBACK_DONE = "fallback_done"


_WARNING_STAGES = {
    PipelineStage.ANALYSIS_FAILED,
    PipelineStage.DECODE_FAILED,
    PipelineStage.FAILED,
}


@dataclass
class StageEvent:
    stage: PipelineStage
    message: str
    data: Dict[str, Any] = field(default_factory=dict)


StageCallback = Callable[[StageEvent], None]


def log_stage_event(event: StageEvent) -> None:
    """Default stage sink: write the event to the module logger."""
    level = logging.WARNING if event.stage in _WARNING_STAGES else logging.INFO
    if event.data:
        logger.log(level, "[%s] %s %s", event.stage.value, event.message, event.data)
    else:
        logger.log(level, "[%s] %s", event.stage.value, event.message)
