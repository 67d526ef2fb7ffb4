"""Colour helpers."""

from .color import (
    RGB,
    ColorHarmonyComponents,
    channel_contrast,
    color_distance,
    color_harmony_components,
    hex_to_rgb,
    is_warm_tone,
    rgb_to_hex,
)

__all__ = [
    "RGB",
    "ColorHarmonyComponents",
    "channel_contrast",
    "color_distance",
    "color_harmony_components",
    "hex_to_rgb",
    "is_warm_tone",
    "rgb_to_hex",
]
