"""Turn uploaded photos into MediaDescriptors.

This is the only place images are decoded; the pipelines receive the
encoded bytes untouched plus the dimensions read here.
"""

import base64
import binascii
import io
from urllib.parse import urlparse

import httpx
from PIL import Image, UnidentifiedImageError

from fitting_room.models import GarmentItem, MediaDescriptor


class IngestError(ValueError):
    """An uploaded image or garment URL could not be used."""

    def __init__(self, message: str, kind: str = "invalid_image"):
        super().__init__(message)
        self.kind = kind


def decode_data_url(data: str) -> tuple[bytes, str | None]:
    """Decode a base64 data URL (or raw base64) into bytes and its media type."""
    media_type = None
    if data.startswith("data:"):
        # e.g. "data:image/png;base64,...."
        header, sep, encoded = data.partition(",")
        if not sep:
            raise IngestError("Data URL has no payload after the header.")
        media_type = header[5:].split(";", 1)[0] or None
    else:
        encoded = data
    
    try:
        return base64.b64decode(encoded, validate=True), media_type
    except (binascii.Error, ValueError) as e:
        raise IngestError(f"Invalid base64 image data: {e}") from e


def to_media(raw_bytes: bytes, media_type: str | None = None) -> MediaDescriptor:
    """Read dimensions with Pillow and wrap the original bytes."""
    try:
        with Image.open(io.BytesIO(raw_bytes)) as img:
            width, height = img.size
            detected = Image.MIME.get(img.format or "")
    except UnidentifiedImageError as e:
        raise IngestError("Uploaded file is not a recognizable image.") from e
    
    return MediaDescriptor(
        encoded_data=raw_bytes,
        media_type=media_type or detected or "image/png",
        width=width,
        height=height,
    )


def media_from_data_url(data: str) -> MediaDescriptor:
    raw_bytes, media_type = decode_data_url(data)
    return to_media(raw_bytes, media_type)


def to_garments(images: list[MediaDescriptor]) -> list[GarmentItem]:
    """Assign each garment a stable id, keeping upload order."""
    return [GarmentItem(**image.model_dump()) for image in images]


async def fetch_image(url: str, client: httpx.AsyncClient | None = None) -> MediaDescriptor:
    """Download a garment image from a shop page URL."""
    try:
        parsed = urlparse(url)
        httpx.URL(url)
    except (httpx.InvalidURL, ValueError) as e:
        raise IngestError(f"Invalid garment URL {url!r}: {e}", kind="invalid_garment_url") from e

    # Extract the origin for Referer header (helps with hotlink protection)
    origin = f"{parsed.scheme}://{parsed.netloc}"
    
    headers = {
        "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
        "Accept": "image/avif,image/webp,image/apng,image/*,*/*;q=0.8",
        "Accept-Language": "en-US,en;q=0.9",
        "Referer": origin + "/",
        "Origin": origin,
    }
    
    if client is None:
        async with httpx.AsyncClient(timeout=30.0) as owned:
            response = await owned.get(url, headers=headers, follow_redirects=True)
    else:
        response = await client.get(url, headers=headers, follow_redirects=True)
    response.raise_for_status()
    
    content_type = response.headers.get("content-type", "").split(";", 1)[0].strip()
    return to_media(response.content, content_type if content_type.startswith("image/") else None)
