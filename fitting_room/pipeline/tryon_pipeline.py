"""Virtual Try-On Pipeline: garment analysis, styling, prompt, synthesis."""

import logging
from enum import Enum
from typing import Callable

from ..agents.composition_prompt import CompositionPromptBuilder
from ..agents.garment_analyzer import GarmentAnalyzer, select_strategy
from ..config import PipelineConfig
from ..errors import FittingRoomError, MissingInput, NoImageProduced
from ..models import AnalysisStrategy, GarmentItem, MediaDescriptor
from ..services import GeminiClient, VisionCapability
from ..utils.aspect_ratio import resolve_aspect_ratio
from ..utils.attribute_classifier import classify

logger = logging.getLogger(__name__)


ProgressCallback = Callable[[str], None]


class TryOnStage(str, Enum):
    INIT = "init"
    ANALYZING = "analyzing"
    CLASSIFYING = "classifying"
    PROMPT_BUILDING = "prompt_building"
    SYNTHESIZING = "synthesizing"
    EXTRACTING_RESULT = "extracting_result"
    DONE = "done"


ANALYSIS_MESSAGES = {
    AnalysisStrategy.CONSOLIDATED: "Analyzing garment structure (Consolidated)...",
    AnalysisStrategy.SINGLE_VISUAL_ONLY: "Preparing garment for visual-only matching...",
    AnalysisStrategy.PARALLEL_INDIVIDUAL: "Analyzing and isolating garments (Parallel)...",
}


class TryOnPipeline:
    """Multi-garment virtual try-on.

    Flow:
    1. Pick an analysis strategy and describe the garments
    2. Detect styling cues in the descriptions
    3. Build the composition prompt
    4. Synthesize the image (subject first, then garments in upload order)
    5. Pull the first inline image out of the reply

    Each call is independent; nothing is cached between runs.
    """

    def __init__(
        self,
        capability: VisionCapability,
        analyzer: GarmentAnalyzer | None = None,
        prompt_builder: CompositionPromptBuilder | None = None,
    ):
        self.capability = capability
        self.analyzer = analyzer or GarmentAnalyzer(capability)
        self.prompt_builder = prompt_builder or CompositionPromptBuilder()

    @classmethod
    def from_config(cls, config: PipelineConfig) -> "TryOnPipeline":
        return cls(GeminiClient(config.gemini, config.gemini_api_key))

    async def run(
        self,
        subject: MediaDescriptor,
        garments: list[GarmentItem],
        same_garment: bool = False,
        on_progress: ProgressCallback | None = None,
    ) -> MediaDescriptor:
        """Run the try-on pipeline.

        Args:
            subject: Photo of the person
            garments: Garment images, in upload order
            same_garment: True if all garment images show the same item
            on_progress: Receives one message as each stage starts

        Returns:
            The generated image

        Raises:
            FittingRoomError: One terminal error, tagged with the stage it came from
        """
        stage = TryOnStage.INIT

        def enter(next_stage: TryOnStage, message: str) -> None:
            nonlocal stage
            stage = next_stage
            logger.info("[%s] %s", stage.value, message)
            if on_progress is not None:
                on_progress(message)

        try:
            if subject is None or not garments:
                raise MissingInput("Please upload a model image and at least one garment.")
            enter(TryOnStage.INIT, "Initializing virtual try-on...")

            strategy = select_strategy(len(garments), same_garment)
            logger.info("Strategy %s for %d garment(s)", strategy.value, len(garments))
            enter(TryOnStage.ANALYZING, ANALYSIS_MESSAGES[strategy])
            garments = await self.analyzer.analyze(garments, strategy)

            enter(TryOnStage.CLASSIFYING, "Detecting garment styling...")
            descriptions = [g.description or "" for g in garments]
            flags = classify(descriptions, consolidated=strategy is AnalysisStrategy.CONSOLIDATED)
            logger.debug("Detected styling: %s", flags)

            enter(TryOnStage.PROMPT_BUILDING, "Building composition directives...")
            aspect_ratio = resolve_aspect_ratio(subject.width, subject.height)
            prompt = self.prompt_builder.build(flags, aspect_ratio, descriptions, strategy)
            logger.info("Aspect ratio %s for %dx%d subject", aspect_ratio.value, subject.width, subject.height)
            logger.debug("Composition prompt: %d chars", len(prompt))

            enter(TryOnStage.SYNTHESIZING, "Compositing new look...")
            response = await self.capability.synthesize_image(
                [subject, *garments], prompt, aspect_ratio,
            )

            enter(TryOnStage.EXTRACTING_RESULT, "Finalizing image...")
            image = response.first_image()
            if image is None:
                logger.warning("Model did not return an image. Text response: %s", response.text)
                raise NoImageProduced(
                    "The AI failed to generate an image. It may have refused the request "
                    "or produced an invalid response.",
                    explanation=response.text,
                )

        except FittingRoomError as e:
            e.stage = stage.value
            raise

        logger.info("[%s] Try-on complete", TryOnStage.DONE.value)
        return image
