"""Styling decisions derived per try-on call."""

from dataclasses import dataclass
from enum import Enum


class AnalysisStrategy(str, Enum):
    """How the garment images of one request are analyzed."""
    
    CONSOLIDATED = "consolidated"  # all images are views of one garment
    SINGLE_VISUAL_ONLY = "single_visual_only"  # one garment, no text pass
    PARALLEL_INDIVIDUAL = "parallel_individual"  # distinct garments, one call each


class AspectRatio(str, Enum):
    """Canonical output aspect ratios accepted by the image model."""
    
    SQUARE = "1:1"
    LANDSCAPE = "16:9"
    PORTRAIT = "9:16"
    CLASSIC = "4:3"
    CLASSIC_PORTRAIT = "3:4"
    
    @property
    def ratio(self) -> float:
        width, height = self.value.split(":")
        return int(width) / int(height)


@dataclass(frozen=True)
class StylingFlags:
    """Boolean styling cues detected in the garment descriptions."""
    has_full_body_outfit: bool = False
    has_necklace: bool = False
    has_shoes: bool = False
    replaces_bottoms: bool = False
    replaces_top: bool = False
    has_headwear: bool = False
