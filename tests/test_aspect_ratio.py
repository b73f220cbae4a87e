"""Unit tests for aspect ratio bucketing."""

import pytest

from fitting_room.models import AspectRatio
from fitting_room.utils.aspect_ratio import resolve_aspect_ratio


@pytest.mark.parametrize("width,height,expected", [
    (1920, 1080, AspectRatio.LANDSCAPE),
    (1080, 1920, AspectRatio.PORTRAIT),
    (800, 800, AspectRatio.SQUARE),
    (1024, 768, AspectRatio.CLASSIC),
    (768, 1024, AspectRatio.CLASSIC_PORTRAIT),
    (1800, 1000, AspectRatio.LANDSCAPE),  # 1.8, within 0.1 of 16:9
    (3000, 1000, AspectRatio.SQUARE),  # 3.0 matches nothing
    (1100, 1000, AspectRatio.SQUARE),  # 1.1 is closest to 1:1
])
def test_resolve(width, height, expected):
    assert resolve_aspect_ratio(width, height) == expected


@pytest.mark.parametrize("width,height", [
    (0, 0),
    (1920, 0),
    (0, 1080),
    (None, None),
])
def test_degenerate_dimensions(width, height):
    assert resolve_aspect_ratio(width, height) == AspectRatio.SQUARE


def test_values_are_model_ratios():
    assert [r.value for r in AspectRatio] == ["1:1", "16:9", "9:16", "4:3", "3:4"]
