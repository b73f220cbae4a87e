"""Unit tests for GeminiClient with the SDK mocked out."""

from unittest.mock import patch

import httpx
import pytest
from google.genai import types
from pydantic import BaseModel

from conftest import png_bytes
from fitting_room.agents import GarmentAnalyzer
from fitting_room.config import GeminiConfig, PipelineConfig
from fitting_room.errors import AnalysisFailed, CapabilityCallFailed, CapabilityUnavailable
from fitting_room.models import AnalysisStrategy, AspectRatio, GarmentItem, MediaDescriptor
from fitting_room.services.gemini_client import GeminiClient, parse_json_response


class Measurements(BaseModel):
    waist_in: float


def make_response(*parts: types.Part) -> types.GenerateContentResponse:
    return types.GenerateContentResponse(candidates=[
        types.Candidate(content=types.Content(role="model", parts=list(parts))),
    ])


@pytest.fixture
def image():
    return MediaDescriptor(encoded_data=b"jpeg-bytes", media_type="image/jpeg", width=10, height=10)


@pytest.fixture
def sdk():
    """Patched genai.Client; yields the mocked generate_content."""
    with patch("fitting_room.services.gemini_client.genai.Client") as client_cls:
        yield client_cls.return_value.models.generate_content


@pytest.fixture
def client(sdk):
    return GeminiClient(GeminiConfig(), api_key="test-key")


class TestParseJsonResponse:

    def test_plain_json(self):
        assert parse_json_response('{"a": 1}') == {"a": 1}

    def test_markdown_fenced(self):
        assert parse_json_response('```json\n{"a": 1}\n```') == {"a": 1}

    def test_fenced_on_one_line(self):
        assert parse_json_response('```json {"a": 1}```') == {"a": 1}
        assert parse_json_response('```{"a": 1} ```') == {"a": 1}

    def test_invalid(self):
        assert parse_json_response("not json") is None


class TestClientLifecycle:

    @pytest.mark.asyncio
    async def test_missing_key_is_unavailable(self, image):
        client = GeminiClient(GeminiConfig(), api_key=None)

        with pytest.raises(CapabilityUnavailable):
            await client.analyze_text([image], "describe")

    def test_sdk_client_is_cached(self, sdk):
        client = GeminiClient(GeminiConfig(), api_key="test-key")
        assert client.client is client.client


class TestAnalyzeText:

    @pytest.mark.asyncio
    async def test_images_then_prompt(self, client, sdk, image):
        sdk.return_value = make_response(types.Part(text="red wool coat"))

        text = await client.analyze_text([image], "describe this")

        assert text == "red wool coat"
        kwargs = sdk.call_args.kwargs
        assert kwargs["model"] == "gemini-3-flash-preview"
        contents = kwargs["contents"]
        assert contents[0].inline_data.data == b"jpeg-bytes"
        assert contents[0].inline_data.mime_type == "image/jpeg"
        assert contents[-1] == "describe this"

    @pytest.mark.asyncio
    async def test_transport_error_is_wrapped(self, client, sdk, image):
        sdk.side_effect = httpx.ConnectError("connection refused")

        with pytest.raises(CapabilityCallFailed) as exc_info:
            await client.analyze_text([image], "describe")

        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


class TestAnalyzeStructured:

    @pytest.mark.asyncio
    async def test_json_schema_request(self, client, sdk, image):
        sdk.return_value = make_response(types.Part(text='{"waist_in": 30}'))

        data = await client.analyze_structured([image], "measure", Measurements)

        assert data == {"waist_in": 30}
        config = sdk.call_args.kwargs["config"]
        assert config.response_mime_type == "application/json"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("reply", ["no json here", "[1, 2]"])
    async def test_unparsable_reply(self, client, sdk, image, reply):
        sdk.return_value = make_response(types.Part(text=reply))

        with pytest.raises(AnalysisFailed):
            await client.analyze_structured([image], "measure", Measurements)


class TestSynthesizeImage:

    @pytest.mark.asyncio
    async def test_prompt_first_and_aspect_ratio(self, client, sdk, image):
        sdk.return_value = make_response(
            types.Part(text="Here you go."),
            types.Part(inline_data=types.Blob(mime_type="image/png", data=b"png-out")),
        )

        response = await client.synthesize_image([image, image], "compose", AspectRatio.PORTRAIT)

        kwargs = sdk.call_args.kwargs
        assert kwargs["model"] == "gemini-3-pro-image-preview"
        assert kwargs["contents"][0] == "compose"
        assert len(kwargs["contents"]) == 3
        assert kwargs["config"].image_config.aspect_ratio == "9:16"
        assert "IMAGE" in kwargs["config"].response_modalities

        assert response.text == "Here you go."
        result = response.first_image()
        assert result.encoded_data == b"png-out"
        assert result.media_type == "image/png"

    @pytest.mark.asyncio
    async def test_text_only_reply(self, client, sdk, image):
        sdk.return_value = make_response(types.Part(text="I can't edit this photo."))

        response = await client.synthesize_image([image], "compose", AspectRatio.SQUARE)

        assert response.first_image() is None
        assert response.text == "I can't edit this photo."

    @pytest.mark.asyncio
    async def test_no_candidates(self, client, sdk, image):
        sdk.return_value = types.GenerateContentResponse(candidates=[])

        response = await client.synthesize_image([image], "compose", AspectRatio.SQUARE)

        assert response.parts == []


@pytest.mark.skipif(not PipelineConfig().gemini_api_key, reason="GEMINI_API_KEY not set")
class TestLiveGemini:
    """Calls the real API; run with `pytest -m integration`."""

    @pytest.mark.asyncio
    @pytest.mark.integration
    async def test_describe_plain_garment(self):
        config = PipelineConfig()
        swatch = MediaDescriptor(encoded_data=png_bytes(256, 256, "navy"), width=256, height=256)
        garment = GarmentItem(**swatch.model_dump())

        analyzed = await GarmentAnalyzer(GeminiClient(config.gemini, config.gemini_api_key)).analyze(
            [garment], AnalysisStrategy.PARALLEL_INDIVIDUAL,
        )

        assert analyzed[0].description
