"""Data models for the Virtual Fitting Room pipelines."""

from .media import MediaDescriptor, GarmentItem
from .styling import AnalysisStrategy, AspectRatio, StylingFlags
from .sizing import BodyAnalysis, SizeRecommendation

__all__ = [
    "MediaDescriptor",
    "GarmentItem",
    "AnalysisStrategy",
    "AspectRatio",
    "StylingFlags",
    "BodyAnalysis",
    "SizeRecommendation",
]
