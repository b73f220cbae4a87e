"""Size & Fit models."""

from pydantic import BaseModel, Field, field_validator


class BodyAnalysis(BaseModel):
    """Body measurement estimate for one size-fit session.
    
    Produced by the capability, then freely editable by the caller before
    it is passed to size recommendation.
    """
    
    estimated_height_in: float = Field(description="Standing height in inches")
    bust_or_chest_in: float = Field(description="Bust or chest circumference in inches")
    waist_in: float = Field(description="Natural waist circumference in inches")
    hip_in: float = Field(description="Hip circumference in inches")
    build: str = Field(description="e.g., 'slim', 'athletic', 'curvy', 'broad'")
    posture_notes: str = Field(default="", description="Anything in the pose that affects the estimate")
    confidence_0_to_1: float = Field(default=0.5, description="Confidence in the estimate, 0 to 1")
    
    @field_validator("confidence_0_to_1")
    @classmethod
    def _clamp_confidence(cls, value: float) -> float:
        return min(1.0, max(0.0, value))


class SizeRecommendation(BaseModel):
    """Recommended size plus the sizes worth rendering."""
    
    base_size: str | None = Field(default=None, description="Best-fitting size, or null if undetermined")
    try_on_sizes: list[str] = Field(default_factory=list)
    skipped_sizes: list[str] = Field(default_factory=list)
    reason: str = ""
