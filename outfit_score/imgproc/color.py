"""Colour conversion and comparison helpers used by the scoring engine.

Every helper is total: malformed colour strings never raise. They parse to
``None``, sit at an infinite distance from any other colour and are never
classified as warm.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import NamedTuple

_HEX_PATTERN = re.compile(r"^#?([a-f\d]{2})([a-f\d]{2})([a-f\d]{2})$", re.IGNORECASE)


class RGB(NamedTuple):
    """Red, green and blue channels in the 0..255 range."""

    r: int
    g: int
    b: int


@dataclass(frozen=True, slots=True)
class ColorHarmonyComponents:
    """Bucketed inputs of the colour-harmony sub-score."""

    harmony: int
    contrast: int
    tone_consistency: int


def hex_to_rgb(value: str) -> RGB | None:
    """Parse ``#rrggbb`` (``#`` optional, any case) or return ``None``."""

    if not isinstance(value, str):
        return None
    match = _HEX_PATTERN.match(value)
    if match is None:
        return None
    return RGB(*(int(part, 16) for part in match.groups()))


def rgb_to_hex(r: int, g: int, b: int) -> str:
    """Return a lower-case ``#rrggbb`` string."""

    for channel in (r, g, b):
        if not 0 <= channel <= 255:
            raise ValueError(f"RGB channel out of range: {channel}")
    return f"#{r:02x}{g:02x}{b:02x}"


def color_distance(first: str, second: str) -> float:
    """Euclidean distance in RGB space; ``math.inf`` when a colour is unparseable."""

    rgb_a = hex_to_rgb(first)
    rgb_b = hex_to_rgb(second)
    if rgb_a is None or rgb_b is None:
        return math.inf
    return math.sqrt(sum((a - b) ** 2 for a, b in zip(rgb_a, rgb_b)))


def channel_contrast(first: str, second: str) -> float:
    """Sum of absolute per-channel differences; ``math.inf`` when unparseable."""

    rgb_a = hex_to_rgb(first)
    rgb_b = hex_to_rgb(second)
    if rgb_a is None or rgb_b is None:
        return math.inf
    return float(sum(abs(a - b) for a, b in zip(rgb_a, rgb_b)))


def is_warm_tone(value: str) -> bool:
    """Return ``True`` when red and green dominate blue."""

    rgb = hex_to_rgb(value)
    if rgb is None:
        return False
    return rgb.r > rgb.b and (rgb.r + rgb.g) > rgb.b * 2


def _distance_bucket(distance: float) -> int:
    if 50 < distance < 200:
        return 8
    if 30 < distance < 250:
        return 6
    return 4


def _contrast_bucket(contrast: float) -> int:
    if 150 < contrast < 400:
        return 7
    if 100 < contrast < 500:
        return 5
    return 3


def color_harmony_components(top_color: str, bottom_color: str) -> ColorHarmonyComponents:
    """Bucket the distance, contrast and tone relation of two dominant colours."""

    harmony = _distance_bucket(color_distance(top_color, bottom_color))
    contrast = _contrast_bucket(channel_contrast(top_color, bottom_color))
    tone = 6 if is_warm_tone(top_color) == is_warm_tone(bottom_color) else 3
    return ColorHarmonyComponents(
        harmony=min(10, harmony),
        contrast=min(8, contrast),
        tone_consistency=min(7, tone),
    )
