"""Composition Prompt Builder - assembles the virtual try-on synthesis prompt."""

import logging

from ..models import AnalysisStrategy, AspectRatio, StylingFlags
from ..utils.attribute_classifier import combine_descriptions

logger = logging.getLogger(__name__)


ROLE_DIRECTIVE = (
    "You are a hyper-realistic AI photo-editing tool. "
    "Your sole function is to perform a virtual try-on."
)

GARMENT_ACCURACY_DIRECTIVES = """**-- GARMENT ACCURACY RULES --**
**-- 1:1 REPLICATION ENFORCEMENT --**
1.  **SHOES & GARMENTS:** Must be a PIXEL-PERFECT match to the reference. Do not hallucinate straps, heel height, or toe shape. Preserve buckles, bows, and hardware EXACTLY as they appear in the reference.
2.  **RUFFLES & CONSTRUCTION:** The specific count, placement, and "fall" of ruffles must exactly match the technical reality of the reference.
3.  **SOURCE OF TRUTH:** The "GARMENTS" images are the texture maps. Wrap them onto the subject."""

PHOTOREALISM_DIRECTIVES = """**-- PHOTOREALISM & LIGHTING RULES --**
1.  **LIGHTING MATCH:** The lighting on the new garments MUST perfectly match the lighting on the subject's skin and face.
2.  **NATURAL DRAPING:** Fabric must drape naturally over the body's curves.
3.  **CAST SHADOWS:** The garments must cast realistic shadows on the body and ground.
4.  **TEXTURE:** Enhance fabric texture (e.g., silk sheen, cotton matte) to look tangible."""

NECKLACE_DIRECTIVE = """**NECKWEAR LOGIC:** The user uploaded a NECKLACE.
    -   **ACTION:** The NECKLACE must be visible on the skin.
    -   **FORBIDDEN:** Do NOT place any matching dress scarves or ties on the neck.
    -   **REQUIRED STYLING:** Move any scarf or tie to the ARMS (shawl position) or let it trail behind. It is banned from the neck area."""

NECK_STYLING_DIRECTIVE = (
    "**NECKWEAR LOGIC:** Style scarves/ties naturally around the neck "
    "as intended by the original garment."
)

HEADWEAR_DIRECTIVE = (
    "**HEADWEAR LOGIC:** The user uploaded a HAT. Replace any existing headwear "
    "and make sure the hat sits naturally on the head."
)

SHOES_DIRECTIVE = (
    "**FOOTWEAR:** Replace the subject's shoes with the uploaded footwear. "
    "Keep the feet fully in frame if they are visible in the original photo."
)

FULL_BODY_DIRECTIVE = (
    "Ensure the garment is worn as a full-body outfit, completely replacing "
    "the original outfit. Do not render it as a vest or a partial garment."
)

SAME_GARMENT_NOTE = (
    "The GARMENTS images are different views of ONE garment. "
    "Render a single item that is consistent with every view."
)


class CompositionPromptBuilder:
    """Builds the synthesis prompt from styling flags and garment descriptions.

    Deterministic: the same inputs always give the same prompt. Each
    conditional clause is only emitted when its flag calls for it, so
    contradicting directives never appear together.
    """

    def build(
        self,
        flags: StylingFlags,
        aspect_ratio: AspectRatio,
        descriptions: list[str],
        strategy: AnalysisStrategy,
    ) -> str:
        """Assemble the full prompt.

        Args:
            flags: Styling cues detected in the descriptions
            aspect_ratio: Output bucket resolved from the subject photo
            descriptions: Per-garment descriptions, in ingestion order
            strategy: How the garments were analyzed

        Returns:
            Prompt text for the synthesis call
        """
        consolidated = strategy is AnalysisStrategy.CONSOLIDATED
        description = combine_descriptions(descriptions, consolidated)

        sections = [
            ROLE_DIRECTIVE,
            self._framing_section(aspect_ratio),
            GARMENT_ACCURACY_DIRECTIVES,
            self._styling_section(flags),
            PHOTOREALISM_DIRECTIVES,
            self._instruction_section(flags, description, consolidated),
        ]
        prompt = "\n\n".join(sections)

        logger.debug("Composition prompt: %d chars, flags=%s", len(prompt), flags)
        return prompt

    def _framing_section(self, aspect_ratio: AspectRatio) -> str:
        return (
            "**-- CRITICAL PRIORITY: PRESERVE IDENTITY AND FRAME --**\n"
            "1.  **NO CROPPING:** The output must keep the existing composition.\n"
            "2.  **IDENTITY LOCK:** The person's identity must be preserved EXACTLY: "
            "face, hair, skin tone, body shape, pose, and background.\n"
            f"3.  **ASPECT RATIO:** {aspect_ratio.value}."
        )

    def _styling_section(self, flags: StylingFlags) -> str:
        rules = [
            "**ACCESSORY ADAPTATION:** For accessories like bags, use expert fashion judgment to reduce clashing.",
            NECKLACE_DIRECTIVE if flags.has_necklace else NECK_STYLING_DIRECTIVE,
        ]
        if flags.has_headwear:
            rules.append(HEADWEAR_DIRECTIVE)
        if flags.has_shoes:
            rules.append(SHOES_DIRECTIVE)
        rules.append("**HARMONY:** Prioritize the overall look's cohesion.")

        numbered = [f"{i}.  {rule}" for i, rule in enumerate(rules, start=1)]
        return "**-- STYLING INTELLIGENCE --**\n" + "\n".join(numbered)

    def _instruction_section(
        self,
        flags: StylingFlags,
        description: str,
        consolidated: bool,
    ) -> str:
        if description:
            garment_line = f"New garments: USE VISUAL TEXTURE FROM IMAGES. (Description: {description})."
        else:
            garment_line = "New garments: USE VISUAL TEXTURE FROM IMAGES. Match them visually."

        actions = [garment_line]
        if consolidated:
            actions.append(SAME_GARMENT_NOTE)
        actions.append(
            "REPLACE the subject's top." if flags.replaces_top else "KEEP the subject's top."
        )
        actions.append(
            "REPLACE the subject's bottoms." if flags.replaces_bottoms else "KEEP the subject's bottoms."
        )
        actions.append(
            FULL_BODY_DIRECTIVE if flags.has_full_body_outfit else "Ensure seamless integration."
        )

        lines = [
            "**-- INSTRUCTIONS --**",
            "-   SUBJECT: The first image.",
            "-   GARMENTS: The subsequent images.",
            "-   ACTION: Dress the SUBJECT in the GARMENTS.",
        ]
        lines.extend(f"    -   {action}" for action in actions)
        return "\n".join(lines)
