"""Map image dimensions onto the image model's canonical aspect ratios."""

from ..models import AspectRatio


RATIO_TOLERANCE = 0.1

# Checked in order; anything that misses all of them renders square.
CANDIDATE_RATIOS = [
    AspectRatio.LANDSCAPE,
    AspectRatio.PORTRAIT,
    AspectRatio.CLASSIC,
    AspectRatio.CLASSIC_PORTRAIT,
]


def resolve_aspect_ratio(width: int | None, height: int | None) -> AspectRatio:
    """Return the first canonical ratio within tolerance of ``width/height``.
    
    Missing or non-positive dimensions resolve to 1:1.
    """
    if not width or not height or width <= 0 or height <= 0:
        return AspectRatio.SQUARE
    
    ratio = width / height
    for candidate in CANDIDATE_RATIOS:
        if abs(ratio - candidate.ratio) < RATIO_TOLERANCE:
            return candidate
    
    return AspectRatio.SQUARE
