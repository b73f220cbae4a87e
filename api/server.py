"""FastAPI server for the Virtual Fitting Room.

Receives requests from the web front end with:
- model_photo: Base64-encoded photo of the user
- garment_photos / garment_urls: one or more garment images
- same_garment: whether the garment images are views of one item
Size & Fit endpoints additionally take a size guide image and product info.
"""

import base64
import logging

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from fitting_room import FittingRoomError, PipelineConfig, SizeAdvisor, TryOnPipeline
from fitting_room.models import BodyAnalysis, MediaDescriptor, SizeRecommendation
from fitting_room.services import GeminiClient

from .ingest import IngestError, fetch_image, media_from_data_url, to_garments

logger = logging.getLogger(__name__)


app = FastAPI(
    title="Virtual Fitting Room API",
    description="Multi-garment virtual try-on and size-fit rendering using Gemini",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class TryOnRequest(BaseModel):
    """Request body for try-on generation."""
    model_photo: str  # Base64 data URL
    garment_photos: list[str] = Field(default_factory=list)  # Base64 data URLs
    garment_urls: list[str] = Field(default_factory=list)  # Fetched server-side, appended after garment_photos
    same_garment: bool = False


class AnalyzeBodyRequest(BaseModel):
    model_photo: str


class RecommendSizeRequest(BaseModel):
    body_analysis: BodyAnalysis
    product_info: str
    available_sizes: list[str] | None = None  # None = configured defaults


class SizeFitTryOnRequest(BaseModel):
    model_photo: str
    garment_photo: str
    size_guide_photo: str
    body_analysis: BodyAnalysis
    target_size: str
    product_info: str = ""
    outfit_type: str | None = None


class ApiResponse(BaseModel):
    """Fields shared by every response."""
    success: bool
    error: str | None = None
    error_kind: str | None = None
    stage: str | None = None
    progress: list[str] = Field(default_factory=list)


class ImageResponse(ApiResponse):
    """Response with generated image."""
    image_base64: str | None = None
    media_type: str | None = None


class BodyAnalysisResponse(ApiResponse):
    body_analysis: BodyAnalysis | None = None


class SizeRecommendationResponse(ApiResponse):
    recommendation: SizeRecommendation | None = None


# Initialized on first request
_config: PipelineConfig | None = None
_pipeline: TryOnPipeline | None = None
_advisor: SizeAdvisor | None = None


def get_config() -> PipelineConfig:
    """Get or load the configuration."""
    global _config
    if _config is None:
        _config = PipelineConfig()  # Loads from .env automatically via pydantic-settings
        logging.basicConfig(
            level=_config.log_level.upper(),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
    return _config


def get_pipeline() -> TryOnPipeline:
    """Get or create the try-on pipeline."""
    global _pipeline
    if _pipeline is None:
        _pipeline = TryOnPipeline.from_config(get_config())
    return _pipeline


def get_advisor() -> SizeAdvisor:
    """Get or create the size advisor."""
    global _advisor
    if _advisor is None:
        config = get_config()
        _advisor = SizeAdvisor(GeminiClient(config.gemini, config.gemini_api_key), config.sizing)
    return _advisor


def _failure(response_cls: type[ApiResponse], error: Exception, progress: list[str]) -> ApiResponse:
    if isinstance(error, FittingRoomError):
        return response_cls(
            success=False,
            error=str(error),
            error_kind=error.kind,
            stage=error.stage,
            progress=progress,
        )
    if isinstance(error, IngestError):
        kind = error.kind
    else:
        kind = "garment_fetch_failed"
    return response_cls(success=False, error=str(error), error_kind=kind, progress=progress)


def _image_response(image: MediaDescriptor, progress: list[str]) -> ImageResponse:
    return ImageResponse(
        success=True,
        image_base64=base64.b64encode(image.encoded_data).decode("utf-8"),
        media_type=image.media_type,
        progress=progress,
    )


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "Virtual Fitting Room API", "version": "1.0.0"}


@app.get("/health")
async def health():
    """Detailed health check."""
    configured = bool(get_config().gemini_api_key)

    return {
        "status": "ok" if configured else "degraded",
        "gemini": "configured" if configured else "missing_api_key",
    }


@app.post("/api/tryon", response_model=ImageResponse)
async def generate_tryon(request: TryOnRequest):
    """Generate a virtual try-on image.

    Args:
        request: Model photo, garment photos and/or URLs, and the same-garment flag

    Returns:
        Base64-encoded image of the try-on result
    """
    progress: list[str] = []
    try:
        subject = media_from_data_url(request.model_photo)
        images = [media_from_data_url(photo) for photo in request.garment_photos]
        for url in request.garment_urls:
            images.append(await fetch_image(url))

        image = await get_pipeline().run(
            subject=subject,
            garments=to_garments(images),
            same_garment=request.same_garment,
            on_progress=progress.append,
        )
        return _image_response(image, progress)

    except (FittingRoomError, IngestError, httpx.HTTPError) as e:
        logger.warning("Try-on failed: %s", e)
        return _failure(ImageResponse, e, progress)


@app.post("/api/size-fit/analyze-body", response_model=BodyAnalysisResponse)
async def analyze_body(request: AnalyzeBodyRequest):
    """Estimate body measurements from the model photo."""
    progress: list[str] = []
    try:
        subject = media_from_data_url(request.model_photo)
        body = await get_advisor().analyze_body(subject, on_progress=progress.append)
        return BodyAnalysisResponse(success=True, body_analysis=body, progress=progress)

    except (FittingRoomError, IngestError) as e:
        logger.warning("Body analysis failed: %s", e)
        return _failure(BodyAnalysisResponse, e, progress)


@app.post("/api/size-fit/recommend", response_model=SizeRecommendationResponse)
async def recommend_size(request: RecommendSizeRequest):
    """Recommend a size for the (possibly user-edited) body analysis."""
    progress: list[str] = []
    try:
        recommendation = await get_advisor().recommend_size(
            request.body_analysis,
            request.product_info,
            request.available_sizes,
            on_progress=progress.append,
        )
        return SizeRecommendationResponse(success=True, recommendation=recommendation, progress=progress)

    except FittingRoomError as e:
        logger.warning("Size recommendation failed: %s", e)
        return _failure(SizeRecommendationResponse, e, progress)


@app.post("/api/size-fit/tryon", response_model=ImageResponse)
async def generate_size_fit_tryon(request: SizeFitTryOnRequest):
    """Render the garment on the model in the requested size."""
    progress: list[str] = []
    try:
        image = await get_advisor().generate_size_fit_tryon(
            subject=media_from_data_url(request.model_photo),
            garment=media_from_data_url(request.garment_photo),
            size_guide=media_from_data_url(request.size_guide_photo),
            body=request.body_analysis,
            target_size=request.target_size,
            product_info=request.product_info,
            outfit_type=request.outfit_type,
            on_progress=progress.append,
        )
        return _image_response(image, progress)

    except (FittingRoomError, IngestError) as e:
        logger.warning("Size-fit try-on failed: %s", e)
        return _failure(ImageResponse, e, progress)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
