"""
Pydantic models for API request/response validation.
These models define the schema for data transfer between the canvas front-end and backend.
"""

from pydantic import BaseModel, Field
from typing import Optional, List


# ============================================
# Generation Models
# ============================================

class GenerateRequest(BaseModel):
    """Request model for sketch enhancement."""
    image: str = Field(..., min_length=1, description="Base64-encoded sketch, bare or as a data URI")
    prompt: Optional[str] = Field(None, max_length=1000, description="Optional user prompt")
    styles: List[str] = Field(default_factory=list, description="Optional style identifiers")

    class Config:
        json_schema_extra = {
            "example": {
                "image": "iVBORw0KGgoAAAANSUhEUgAA...",
                "prompt": "A mountain valley at dawn",
                "styles": ["realista"],
            }
        }


class GenerateResponse(BaseModel):
    """Response model for sketch enhancement."""
    generated_images: List[str]
    error: Optional[str] = None
    description: Optional[str] = None


class AnalyzeRequest(BaseModel):
    """Request model for sketch analysis."""
    image: str = Field(..., min_length=1, description="Base64-encoded sketch, bare or as a data URI")


class AnalyzeResponse(BaseModel):
    """Response model for sketch analysis."""
    description: str


# ============================================
# Generic Response Models
# ============================================

class ErrorResponse(BaseModel):
    """Generic error response."""
    success: bool = False
    error: str
    detail: Optional[str] = None
