"""
Configuration module for the Nano Banana sketch enhancer.
Loads environment variables and provides configuration constants.
"""

import logging
import os

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)

# API Keys (the Vite name is what the canvas front-end's .env.local uses)
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY") or os.getenv("VITE_GEMINI_API_KEY", "")
PLACEHOLDER_API_KEY = "your-api-key-here"

# Gemini Configuration
GEMINI_VISION_MODEL = os.getenv("GEMINI_VISION_MODEL", "gemini-1.5-flash")
GEMINI_REQUEST_TIMEOUT = float(os.getenv("GEMINI_REQUEST_TIMEOUT", "30"))

# Composition Configuration
COMPOSITION_SIZE = 1024
APP_NAME = "Nano Banana"
APP_VERSION = "1.0.0"

# Upload Limits
MAX_IMAGE_BYTES = int(os.getenv("MAX_IMAGE_BYTES", str(10 * 1024 * 1024)))
ALLOWED_IMAGE_TYPES = {"image/png", "image/jpeg", "image/jpg", "image/webp", "image/gif"}

# Server Configuration
API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", "8000"))
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:5173").split(",")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def get_gemini_api_key() -> str:
    """
    Return the configured Gemini API key.

    Raises:
        ValueError: If the key is missing or still the placeholder value
    """
    api_key = GEMINI_API_KEY
    if not api_key or api_key == PLACEHOLDER_API_KEY:
        raise ValueError(
            "Gemini API key is not configured. Set GEMINI_API_KEY in your .env file"
        )

    # Google API keys share a common prefix
    if not api_key.startswith("AIza"):
        logger.warning("The Gemini API key format looks incorrect")

    return api_key


def is_gemini_configured() -> bool:
    """Check whether a usable Gemini API key is present."""
    try:
        get_gemini_api_key()
        return True
    except ValueError:
        return False
