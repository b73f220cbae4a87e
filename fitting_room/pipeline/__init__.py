"""Try-on orchestration."""

from .tryon_pipeline import TryOnPipeline, TryOnStage

__all__ = ["TryOnPipeline", "TryOnStage"]
