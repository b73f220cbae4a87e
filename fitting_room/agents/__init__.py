"""Garment analysis, prompt composition and size advice."""

from .composition_prompt import CompositionPromptBuilder
from .garment_analyzer import GarmentAnalyzer, select_strategy
from .size_advisor import SizeAdvisor

__all__ = [
    "CompositionPromptBuilder",
    "GarmentAnalyzer",
    "select_strategy",
    "SizeAdvisor",
]
