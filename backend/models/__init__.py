"""
Models package for the Nano Banana sketch enhancer.
"""

from .generation import *

__all__ = [
    "GenerateRequest",
    "GenerateResponse",
    "AnalyzeRequest",
    "AnalyzeResponse",
    "ErrorResponse",
]
