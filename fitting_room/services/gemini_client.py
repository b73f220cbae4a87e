"""Gemini implementation of the vision capability, via the google-genai SDK."""

import asyncio
import json
import re
import logging
from typing import Any, Sequence

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types
from pydantic import BaseModel

from ..config import GeminiConfig
from ..errors import AnalysisFailed, CapabilityCallFailed, CapabilityUnavailable
from ..models import AspectRatio, MediaDescriptor
from .capability import ResponsePart, SynthesisResponse

logger = logging.getLogger(__name__)


def parse_json_response(text: str) -> Any:
    """Parse JSON from a model reply, handling markdown code blocks."""
    text = text.strip()
    # Opening ```json and closing ``` fences, on their own lines or inline
    text = re.sub(r'^```[a-zA-Z]*\s*', '', text)
    text = re.sub(r'\s*```$', '', text)

    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return None


def to_part(media: MediaDescriptor) -> types.Part:
    return types.Part(
        inline_data=types.Blob(mime_type=media.media_type, data=media.encoded_data),
    )


class GeminiClient:
    """``VisionCapability`` backed by Gemini.
    
    The SDK is synchronous, so each call runs in a worker thread; several
    calls can be outstanding at once when the pipeline fans out.
    """
    
    def __init__(self, config: GeminiConfig, api_key: str | None):
        self.config = config
        self.api_key = api_key
        self._client: genai.Client | None = None
    
    @property
    def client(self) -> genai.Client:
        """Get or create the SDK client."""
        if self._client is None:
            if not self.api_key:
                raise CapabilityUnavailable(
                    "GEMINI_API_KEY is not set. Add it to the environment or .env file."
                )
            self._client = genai.Client(api_key=self.api_key)
        return self._client
    
    async def _generate(
        self,
        model: str,
        contents: list,
        config: types.GenerateContentConfig | None = None,
    ) -> types.GenerateContentResponse:
        client = self.client
        try:
            return await asyncio.to_thread(
                client.models.generate_content,
                model=model,
                contents=contents,
                config=config,
            )
        except (genai_errors.APIError, httpx.HTTPError) as e:
            raise CapabilityCallFailed(f"Gemini call to {model} failed: {e}") from e
    
    async def analyze_text(
        self,
        images: Sequence[MediaDescriptor],
        prompt: str,
    ) -> str:
        contents = [to_part(image) for image in images] + [prompt]
        response = await self._generate(self.config.analysis_model, contents)
        return response.text or ""
    
    async def analyze_structured(
        self,
        images: Sequence[MediaDescriptor],
        prompt: str,
        schema: type[BaseModel],
    ) -> dict:
        contents = [to_part(image) for image in images] + [prompt]
        config = types.GenerateContentConfig(
            response_mime_type="application/json",
            response_schema=schema,
        )
        response = await self._generate(self.config.analysis_model, contents, config)
        
        data = parse_json_response(response.text or "")
        if not isinstance(data, dict):
            raise AnalysisFailed(
                f"{self.config.analysis_model} returned no parsable {schema.__name__} payload"
            )
        return data
    
    async def synthesize_image(
        self,
        images: Sequence[MediaDescriptor],
        prompt: str,
        aspect_ratio: AspectRatio,
    ) -> SynthesisResponse:
        contents = [prompt] + [to_part(image) for image in images]
        config = types.GenerateContentConfig(
            response_modalities=["TEXT", "IMAGE"],
            image_config=types.ImageConfig(aspect_ratio=aspect_ratio.value),
        )
        response = await self._generate(self.config.image_model, contents, config)
        return self._to_synthesis_response(response)
    
    @staticmethod
    def _to_synthesis_response(response: types.GenerateContentResponse) -> SynthesisResponse:
        parts: list[ResponsePart] = []
        candidates = response.candidates or []
        if not candidates or candidates[0].content is None:
            return SynthesisResponse(parts=parts)
        
        for part in candidates[0].content.parts or []:
            if part.inline_data is not None and part.inline_data.data:
                parts.append(ResponsePart(image=MediaDescriptor(
                    encoded_data=part.inline_data.data,
                    media_type=part.inline_data.mime_type or "image/png",
                )))
            elif part.text is not None:
                parts.append(ResponsePart(text=part.text))
        
        return SynthesisResponse(parts=parts)
