"""Garment Analyzer - picks an analysis strategy and describes garment images."""

import asyncio
import logging

from ..errors import AnalysisFailed, CapabilityCallFailed, MissingInput
from ..models import AnalysisStrategy, GarmentItem
from ..services.capability import VisionCapability

logger = logging.getLogger(__name__)


FALLBACK_DESCRIPTION = "garment"


CONSOLIDATED_ANALYSIS_PROMPT = """Act as a technical fashion designer.
These images are multiple views of a **SINGLE GARMENT**.
Analyze them together to create ONE cohesive, highly detailed technical description for this single item.
Focus on:
1. Fabric texture, weight, and material properties.
2. Precise construction details (e.g., seams, ruffles, hem style).
3. Exact fit and silhouette.
4. Accurate color and pattern.
5. IGNORE duplicate views; synthesize them into one description.
Be precise and technical."""


INDIVIDUAL_ANALYSIS_PROMPT = """Act as a technical fashion designer. Analyze this garment image and provide a highly detailed technical description.
Focus specifically on:
1. Fabric texture, weight, and material properties.
2. Precise construction details (e.g., specific ruffle types, pleat direction, seam placement, hem style).
3. Exact volume, silhouette, and fit.
4. Accurate color and pattern details.
Be precise and technical."""


def select_strategy(garment_count: int, same_garment: bool) -> AnalysisStrategy:
    """Choose how a batch of garment images is analyzed.
    
    ``same_garment`` wins regardless of count; otherwise a single garment is
    matched visually and two or more are analyzed one by one.
    """
    if garment_count < 1:
        raise MissingInput("At least one garment image is required.")
    if same_garment:
        return AnalysisStrategy.CONSOLIDATED
    if garment_count == 1:
        return AnalysisStrategy.SINGLE_VISUAL_ONLY
    return AnalysisStrategy.PARALLEL_INDIVIDUAL


class GarmentAnalyzer:
    """Attaches a description to every garment according to a strategy."""
    
    def __init__(self, capability: VisionCapability):
        self.capability = capability
    
    async def analyze(
        self,
        garments: list[GarmentItem],
        strategy: AnalysisStrategy,
    ) -> list[GarmentItem]:
        """Return copies of ``garments`` with ``description`` set.
        
        Output order matches input order. Either every garment is described
        or the whole stage fails with ``AnalysisFailed``.
        """
        if strategy is AnalysisStrategy.CONSOLIDATED:
            return await self._analyze_consolidated(garments)
        if strategy is AnalysisStrategy.PARALLEL_INDIVIDUAL:
            return await self._analyze_individually(garments)
        return [g.with_description("") for g in garments]
    
    async def _describe(self, garments: list[GarmentItem], prompt: str) -> str:
        try:
            text = await self.capability.analyze_text(garments, prompt)
        except CapabilityCallFailed as e:
            raise AnalysisFailed(f"Garment analysis failed: {e.message}") from e
        return (text or "").strip() or FALLBACK_DESCRIPTION
    
    async def _analyze_consolidated(self, garments: list[GarmentItem]) -> list[GarmentItem]:
        description = await self._describe(garments, CONSOLIDATED_ANALYSIS_PROMPT)
        logger.info("Consolidated description for %d view(s): %d chars", len(garments), len(description))
        return [g.with_description(description) for g in garments]
    
    async def _analyze_individually(self, garments: list[GarmentItem]) -> list[GarmentItem]:
        async def describe_one(garment: GarmentItem) -> tuple[str, str]:
            return garment.id, await self._describe([garment], INDIVIDUAL_ANALYSIS_PROMPT)
        
        # Wait for every call before deciding; one failure fails the stage.
        results = await asyncio.gather(
            *(describe_one(g) for g in garments),
            return_exceptions=True,
        )
        failures = [r for r in results if isinstance(r, BaseException)]
        if failures:
            logger.warning("%d of %d garment analyses failed", len(failures), len(garments))
            raise failures[0]
        
        descriptions = dict(results)
        return [g.with_description(descriptions.get(g.id, "")) for g in garments]
