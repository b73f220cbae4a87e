"""Configuration management for the Virtual Fitting Room pipeline."""

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings


class GeminiConfig(BaseModel):
    """Gemini model selection."""
    analysis_model: str = "gemini-3-flash-preview"  # text + structured analysis
    image_model: str = "gemini-3-pro-image-preview"  # native image output


class SizingConfig(BaseModel):
    """Size & Fit defaults."""
    default_sizes: list[str] = Field(default_factory=lambda: ["XS", "S", "M", "L", "XL"])
    default_outfit_type: str = "Dress"


class PipelineConfig(BaseSettings):
    """Main pipeline configuration."""
    
    # Sub-configs
    gemini: GeminiConfig = Field(default_factory=GeminiConfig)
    sizing: SizingConfig = Field(default_factory=SizingConfig)
    
    # Gemini (loaded from .env)
    gemini_api_key: str | None = None
    
    log_level: str = "info"
    
    class Config:
        env_file = ".env"
        env_prefix = ""
        extra = "ignore"


def load_config() -> PipelineConfig:
    """Load configuration from environment and defaults."""
    return PipelineConfig()
