"""
Router for sketch enhancement endpoints.
Handles analysis of canvas sketches and procedural enhancement of them.
"""

from fastapi import APIRouter, Depends, HTTPException, status

from models.generation import (
    AnalyzeRequest,
    AnalyzeResponse,
    ErrorResponse,
    GenerateRequest,
    GenerateResponse,
)
from services.generation_orchestrator import GenerationOrchestrator, get_generation_orchestrator
from services.scene_analyzer import SceneAnalyzer, get_scene_analyzer
from config import ALLOWED_IMAGE_TYPES, MAX_IMAGE_BYTES
from services.surface import (
    SurfaceDecodeError,
    data_uri_mime_type,
    decode_base64_image,
    sniff_mime_type,
    strip_data_uri,
)

router = APIRouter(tags=["Generation"])


def _require_sketch(image: str) -> str:
    """
    Validate the sketch payload and return it as bare base64.

    Raises:
        HTTPException: 400 if empty, 413 if larger than MAX_IMAGE_BYTES,
            415 if the image type is not one of ALLOWED_IMAGE_TYPES
    """
    payload = strip_data_uri(image).strip()
    if not payload:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Draw something on the canvas before generating",
        )

    if len(payload) * 3 // 4 > MAX_IMAGE_BYTES:
        raise HTTPException(
            status_code=413,
            detail=f"Image exceeds the maximum size of {MAX_IMAGE_BYTES // (1024 * 1024)} MB",
        )

    mime_type = data_uri_mime_type(image)
    if mime_type is None:
        # Undecodable payloads pass through and are echoed by the pipeline
        try:
            mime_type = sniff_mime_type(decode_base64_image(payload), default=None)
        except SurfaceDecodeError:
            mime_type = None
    if mime_type is not None and mime_type not in ALLOWED_IMAGE_TYPES:
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail=f"Unsupported image type {mime_type}; use PNG, JPEG, WebP or GIF",
        )

    return payload


@router.post(
    "/generate",
    response_model=GenerateResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Empty sketch"},
        413: {"model": ErrorResponse, "description": "Sketch too large"},
        415: {"model": ErrorResponse, "description": "Unsupported image type"},
    },
    summary="Enhance Sketch",
    description="Analyze a sketch with Gemini and return a procedurally enhanced rendering. "
                "Always returns an image; on failure the original sketch is echoed back.",
)
async def generate_image(
    request: GenerateRequest,
    orchestrator: GenerationOrchestrator = Depends(get_generation_orchestrator),
):
    """
    Generate an enhanced image from a canvas sketch.

    Args:
        request: Sketch plus optional prompt and styles
        orchestrator: Generation pipeline

    Returns:
        One base64 image (no data-URI prefix) and the analysis that drove it
    """
    sketch = _require_sketch(request.image)
    result = await orchestrator.generate(sketch, user_prompt=request.prompt, styles=request.styles)

    return GenerateResponse(
        generated_images=result.generated_images,
        error=result.error,
        description=result.description,
    )


@router.post(
    "/analyze",
    response_model=AnalyzeResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Empty sketch"},
        413: {"model": ErrorResponse, "description": "Sketch too large"},
        415: {"model": ErrorResponse, "description": "Unsupported image type"},
    },
    summary="Analyze Sketch",
    description="Describe what a sketch contains. Falls back to a generic description on failure.",
)
async def analyze_image(
    request: AnalyzeRequest,
    analyzer: SceneAnalyzer = Depends(get_scene_analyzer),
):
    """
    Describe a canvas sketch.

    Args:
        request: Sketch to analyze
        analyzer: Scene analyzer

    Returns:
        Text description of the sketch
    """
    sketch = _require_sketch(request.image)
    description = await analyzer.analyze(sketch)
    return AnalyzeResponse(description=description)
