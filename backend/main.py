"""
Main FastAPI application for the Nano Banana sketch enhancer.

This application provides an API for:
- Sketch analysis using a Gemini vision model
- Procedural enhancement of the sketch guided by that analysis

Run with: uvicorn main:app --reload --host 0.0.0.0 --port 8000
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import logging

from config import (
    API_HOST,
    API_PORT,
    APP_NAME,
    APP_VERSION,
    CORS_ORIGINS,
    GEMINI_VISION_MODEL,
    LOG_LEVEL,
    is_gemini_configured,
)

# Import routers
from routers import generate

# Configure logging
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.
    Reports configuration on startup.
    """
    # Startup
    logger.info("Starting %s API...", APP_NAME)
    if not is_gemini_configured():
        logger.warning("Gemini API key not configured; analysis will use the fallback description")

    yield

    # Shutdown
    logger.info("Shutting down API...")


# Create FastAPI application
app = FastAPI(
    title=f"{APP_NAME} Sketch Enhancer",
    description="""
    Turns canvas sketches into enhanced scene renderings.

    ## Workflow

    1. The sketch is described by a Gemini vision model (`/analyze`)
    2. Keywords in the description select a sky, scene elements and layering
    3. `/generate` runs both steps and returns the enhanced image
    """,
    version=APP_VERSION,
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(generate.router)


@app.get("/", tags=["Health"])
async def root():
    """
    Root endpoint - API health check.

    Returns:
        API status and version information
    """
    return {
        "status": "healthy",
        "service": f"{APP_NAME} Sketch Enhancer",
        "version": APP_VERSION,
        "endpoints": {
            "generate": "/generate",
            "analyze": "/analyze",
        },
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Detailed health check endpoint.

    Returns:
        Health status of the analysis backend
    """
    return {
        "api": "healthy",
        "gemini": "configured" if is_gemini_configured() else "not configured: using fallback description",
        "model": GEMINI_VISION_MODEL,
    }


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """
    Global exception handler for unhandled errors.

    Args:
        request: The incoming request
        exc: The exception that was raised

    Returns:
        JSON error response
    """
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal server error",
            "detail": str(exc),
        },
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host=API_HOST,
        port=API_PORT,
        reload=True,
    )
