# Test fixtures and configuration
import io
import sys
from pathlib import Path

import pytest
from PIL import Image

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from fitting_room.models import GarmentItem, MediaDescriptor
from fitting_room.services import ResponsePart, SynthesisResponse


class FakeCapability:
    """In-memory VisionCapability that records every call.

    Replies can be a value, an exception instance (raised), or a callable
    taking the call arguments.
    """

    def __init__(self, text_reply="a garment", structured_reply=None, synthesis_reply=None):
        self.text_reply = text_reply
        self.structured_reply = structured_reply if structured_reply is not None else {}
        self.synthesis_reply = synthesis_reply
        self.text_calls: list[tuple[list, str]] = []
        self.structured_calls: list[tuple[list, str, type]] = []
        self.synthesis_calls: list[tuple[list, str, object]] = []

    @staticmethod
    async def _resolve(reply, *args):
        if isinstance(reply, BaseException):
            raise reply
        if callable(reply):
            reply = reply(*args)
            if hasattr(reply, "__await__"):
                reply = await reply
        return reply

    async def analyze_text(self, images, prompt):
        self.text_calls.append((list(images), prompt))
        return await self._resolve(self.text_reply, list(images), prompt)

    async def analyze_structured(self, images, prompt, schema):
        self.structured_calls.append((list(images), prompt, schema))
        return await self._resolve(self.structured_reply, list(images), prompt, schema)

    async def synthesize_image(self, images, prompt, aspect_ratio):
        self.synthesis_calls.append((list(images), prompt, aspect_ratio))
        return await self._resolve(self.synthesis_reply, list(images), prompt, aspect_ratio)


def png_bytes(width: int = 1, height: int = 1, color: str = "red") -> bytes:
    """Real PNG bytes of the given size."""
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), color).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def result_image():
    """The image a successful synthesis returns."""
    return MediaDescriptor(encoded_data=b"\x89PNG\r\n\x1a\nresult", media_type="image/png")


@pytest.fixture
def image_reply(result_image):
    """A synthesis reply carrying an image after some text."""
    return SynthesisResponse(parts=[
        ResponsePart(text="Here is the try-on."),
        ResponsePart(image=result_image),
    ])


@pytest.fixture
def fake_capability(image_reply):
    return FakeCapability(synthesis_reply=image_reply)


@pytest.fixture
def subject():
    """Landscape photo of the person."""
    return MediaDescriptor(encoded_data=b"subject-bytes", media_type="image/jpeg", width=1920, height=1080)


@pytest.fixture
def make_garment():
    """Factory for garment items with distinct bytes."""
    def _make(name: str = "garment", media_type: str = "image/png") -> GarmentItem:
        return GarmentItem(encoded_data=name.encode(), media_type=media_type, width=800, height=800)
    return _make


@pytest.fixture
def sample_descriptions():
    """Sample garment descriptions as the analysis stage returns them."""
    return {
        "silk_dress": "a black silk dress",
        "blouse": "Cotton blend button-front blouse with long sleeves and button cuffs.",
        "jeans": "Mid-wash straight-leg jeans in rigid denim with a five-pocket construction.",
        "necklace": "Gold pendant necklace on a fine box chain.",
        "fedora": "Wool felt fedora with a grosgrain band.",
        "boots": "Knee-high leather boots with a block heel.",
    }
