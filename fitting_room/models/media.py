"""Image value types passed between the ingestion layer and the pipelines."""

import uuid

from pydantic import BaseModel, ConfigDict, Field


class MediaDescriptor(BaseModel):
    """An encoded image plus the metadata the pipelines need.

    The bytes are never decoded here; ``width``/``height`` are supplied by
    whoever ingested the image (0 when unknown).
    """
    
    model_config = ConfigDict(frozen=True)
    
    encoded_data: bytes = Field(repr=False)
    media_type: str = Field(default="image/png", description="e.g., 'image/png', 'image/jpeg'")
    width: int = Field(default=0, ge=0)
    height: int = Field(default=0, ge=0)


class GarmentItem(MediaDescriptor):
    """A garment reference image.
    
    ``description`` is None until the analysis stage runs. An empty string
    means the garment is matched visually only.
    """
    
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    description: str | None = None
    
    def with_description(self, description: str) -> "GarmentItem":
        return self.model_copy(update={"description": description})
