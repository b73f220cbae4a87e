"""Size Advisor - body measurement estimates, size recommendation, size-fit renders."""

import logging
from typing import Callable

from pydantic import ValidationError

from ..config import SizingConfig
from ..errors import AnalysisFailed, CapabilityCallFailed, MissingInput, NoImageProduced
from ..models import BodyAnalysis, MediaDescriptor, SizeRecommendation
from ..services.capability import VisionCapability
from ..utils.aspect_ratio import resolve_aspect_ratio

logger = logging.getLogger(__name__)


BODY_ANALYSIS_PROMPT = """Act as an expert tailor taking measurements from a photo.
Estimate this person's body measurements in INCHES from the image.

Return a JSON object with exactly these fields:
{
  "estimated_height_in": standing height in inches,
  "bust_or_chest_in": bust or chest circumference in inches,
  "waist_in": natural waist circumference in inches,
  "hip_in": hip circumference at the widest point in inches,
  "build": one or two words (slim, athletic, average, curvy, broad, ...),
  "posture_notes": anything about the pose, clothing or camera angle that makes the estimate less reliable,
  "confidence_0_to_1": your confidence in these numbers, from 0 to 1
}

Use reference cues (doors, furniture, head-to-body proportions) to calibrate scale.
Return ONLY the JSON object, no explanation."""


SIZE_RECOMMENDATION_PROMPT = """Act as an expert fit consultant.

Body measurements (inches):
- Height: {height}
- Bust/Chest: {bust}
- Waist: {waist}
- Hips: {hip}
- Build: {build}
- Notes: {notes}

Product information:
{product_info}

Available sizes: {sizes}

Choose the single best-fitting size from the available sizes, then decide which sizes are worth
rendering as a try-on (typically the best fit plus its immediate neighbors) and which to skip.

Return a JSON object:
{{
  "base_size": the best-fitting size, or null if it cannot be determined,
  "try_on_sizes": sizes worth rendering,
  "skipped_sizes": sizes not worth rendering,
  "reason": one or two sentences explaining the choice
}}

Only use sizes from the available list. Return ONLY the JSON object."""


SIZE_FIT_PROMPT = """You are a hyper-realistic AI photo-editing tool performing a SIZE-ACCURATE virtual try-on.

**-- IMAGES --**
-   SUBJECT: The first image. This is the person.
-   GARMENT: The second image. This is the {outfit_type} to put on the subject.
-   SIZE GUIDE: The third image. This is the brand's size chart for the garment.

**-- SUBJECT MEASUREMENTS (inches) --**
Height {height}, bust/chest {bust}, waist {waist}, hips {hip}, build: {build}.

**-- PRODUCT INFORMATION --**
{product_info}

**-- SIZE LOGIC --**
1.  Read the SIZE GUIDE and find the true garment measurements for size **{target_size}**.
2.  Compare them to the subject's measurements.
3.  Render the fit that size would ACTUALLY produce on this body:
    -   Garment smaller than the body: show it TIGHT (pulling at seams, straining fabric, shorter hem).
    -   Garment matching the body: show a PERFECT fit.
    -   Garment larger than the body: show it LOOSE (excess fabric, sagging shoulders, longer hem).
4.  Take fabric stretch and the intended cut from the product information into account.

**-- CRITICAL CONSTRAINTS --**
1.  **DO NOT ALTER THE BODY:** The subject's body proportions, height, and shape must stay EXACTLY as in the photo. Only the garment changes.
2.  **IDENTITY LOCK:** Preserve face, hair, skin tone, pose, and background exactly.
3.  **NO CROPPING:** Keep the existing composition.
4.  **GARMENT FIDELITY:** Color, pattern, fabric, and construction must match the GARMENT image."""


ProgressCallback = Callable[[str], None]


def _notify(on_progress: ProgressCallback | None, message: str) -> None:
    logger.info(message)
    if on_progress is not None:
        on_progress(message)


class SizeAdvisor:
    """Size & Fit operations.

    The three operations are independent. The caller holds the
    ``BodyAnalysis`` between them and may edit it in the meantime.
    """

    def __init__(self, capability: VisionCapability, config: SizingConfig | None = None):
        self.capability = capability
        self.config = config or SizingConfig()

    async def _structured(self, images: list[MediaDescriptor], prompt: str, schema) -> dict:
        try:
            data = await self.capability.analyze_structured(images, prompt, schema)
        except CapabilityCallFailed as e:
            raise AnalysisFailed(f"{schema.__name__} request failed: {e.message}") from e
        if not data:
            raise AnalysisFailed(f"No {schema.__name__} returned.")
        return data

    async def analyze_body(
        self,
        subject: MediaDescriptor,
        on_progress: ProgressCallback | None = None,
    ) -> BodyAnalysis:
        """Estimate body measurements from the subject photo."""
        if subject is None:
            raise MissingInput("A subject photo is required for body analysis.")

        _notify(on_progress, "Analyzing body measurements...")
        data = await self._structured([subject], BODY_ANALYSIS_PROMPT, BodyAnalysis)
        try:
            return BodyAnalysis.model_validate(data)
        except ValidationError as e:
            raise AnalysisFailed(f"Body analysis returned an unusable payload: {e}") from e

    async def recommend_size(
        self,
        body: BodyAnalysis,
        product_info: str,
        available_sizes: list[str] | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> SizeRecommendation:
        """Recommend a size for ``body`` among ``available_sizes``.

        The returned size lists are taken exactly as the capability gives them.
        """
        sizes = available_sizes if available_sizes is not None else self.config.default_sizes
        if body is None:
            raise MissingInput("A body analysis is required for size recommendation.")
        if not product_info or not product_info.strip():
            raise MissingInput("Product information is required for size recommendation.")
        if not sizes:
            raise MissingInput("At least one available size is required.")

        _notify(on_progress, "Calculating best fit...")
        prompt = SIZE_RECOMMENDATION_PROMPT.format(
            height=body.estimated_height_in,
            bust=body.bust_or_chest_in,
            waist=body.waist_in,
            hip=body.hip_in,
            build=body.build,
            notes=body.posture_notes or "none",
            product_info=product_info.strip(),
            sizes=", ".join(sizes),
        )
        data = await self._structured([], prompt, SizeRecommendation)
        try:
            recommendation = SizeRecommendation.model_validate(data)
        except ValidationError as e:
            raise AnalysisFailed(f"Size recommendation returned an unusable payload: {e}") from e

        logger.info(
            "Recommended %s (try on %s, skip %s)",
            recommendation.base_size, recommendation.try_on_sizes, recommendation.skipped_sizes,
        )
        return recommendation

    async def generate_size_fit_tryon(
        self,
        subject: MediaDescriptor,
        garment: MediaDescriptor,
        size_guide: MediaDescriptor,
        body: BodyAnalysis,
        target_size: str,
        product_info: str = "",
        outfit_type: str | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> MediaDescriptor:
        """Render the subject wearing ``garment`` in ``target_size``."""
        if subject is None or garment is None or size_guide is None:
            raise MissingInput("Subject, garment, and size guide images are all required.")
        if body is None:
            raise MissingInput("A body analysis is required for a size-fit try-on.")
        if not target_size or not target_size.strip():
            raise MissingInput("A target size is required for a size-fit try-on.")

        _notify(on_progress, f"Generating size {target_size} try-on...")
        prompt = SIZE_FIT_PROMPT.format(
            outfit_type=(outfit_type or self.config.default_outfit_type).lower(),
            height=body.estimated_height_in,
            bust=body.bust_or_chest_in,
            waist=body.waist_in,
            hip=body.hip_in,
            build=body.build,
            product_info=product_info.strip() or "Not provided.",
            target_size=target_size.strip(),
        )
        aspect_ratio = resolve_aspect_ratio(subject.width, subject.height)

        response = await self.capability.synthesize_image(
            [subject, garment, size_guide], prompt, aspect_ratio,
        )

        _notify(on_progress, "Finalizing image...")
        image = response.first_image()
        if image is None:
            logger.warning("Size-fit synthesis returned no image. Text response: %s", response.text)
            raise NoImageProduced(
                "The AI failed to generate a size-fit image.",
                explanation=response.text,
            )
        return image
