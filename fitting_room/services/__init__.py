"""Inference capability interface and its Gemini implementation."""

from .capability import VisionCapability, SynthesisResponse, ResponsePart
from .gemini_client import GeminiClient

__all__ = [
    "VisionCapability",
    "SynthesisResponse",
    "ResponsePart",
    "GeminiClient",
]
