"""
Routers package for the Nano Banana sketch enhancer API.
"""

from . import generate

__all__ = ["generate"]
