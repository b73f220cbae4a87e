"""Pure helpers shared by the pipelines."""

from .aspect_ratio import resolve_aspect_ratio
from .attribute_classifier import classify, combine_descriptions

__all__ = [
    "resolve_aspect_ratio",
    "classify",
    "combine_descriptions",
]
