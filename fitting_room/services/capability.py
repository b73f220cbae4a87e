"""Interface to the vision-language inference capability.

The pipelines only ever talk to a ``VisionCapability``. ``GeminiClient`` is
the production implementation; tests substitute an in-memory fake.
"""

from typing import Protocol, Sequence

from pydantic import BaseModel, Field

from ..models import AspectRatio, MediaDescriptor


class ResponsePart(BaseModel):
    """One part of a multi-part synthesis reply."""
    text: str | None = None
    image: MediaDescriptor | None = None


class SynthesisResponse(BaseModel):
    """Ordered parts returned by an image synthesis call."""
    
    parts: list[ResponsePart] = Field(default_factory=list)
    
    @property
    def text(self) -> str:
        """All text parts, joined."""
        return "".join(p.text for p in self.parts if p.text).strip()
    
    def first_image(self) -> MediaDescriptor | None:
        """The first inline image in the reply, if any."""
        for part in self.parts:
            if part.image is not None:
                return part.image
        return None


class VisionCapability(Protocol):
    """The three operations the pipelines need from the inference service."""
    
    async def analyze_text(
        self,
        images: Sequence[MediaDescriptor],
        prompt: str,
    ) -> str:
        ...
    
    async def analyze_structured(
        self,
        images: Sequence[MediaDescriptor],
        prompt: str,
        schema: type[BaseModel],
    ) -> dict:
        ...
    
    async def synthesize_image(
        self,
        images: Sequence[MediaDescriptor],
        prompt: str,
        aspect_ratio: AspectRatio,
    ) -> SynthesisResponse:
        ...
