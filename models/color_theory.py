"""Lightweight color profiling helpers for deterministic pair scoring."""
from __future__ import annotations

import colorsys
import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

logger = logging.getLogger(__name__)

NEUTRAL_HEXES = frozenset(
    {
        "#000000",
        "#FFFFFF",
        "#1C1917",
        "#78716C",
        "#D6D3D1",
        "#F5F5DC",
        "#D2B48C",
        "#FFFDD0",
        "#C0C0C0",
        "#808080",
        "#A9A9A9",
        "#696969",
        "#2F2F2F",
        "#3D3D3D",
        "#E5E5E5",
        "#F0F0F0",
        "#FAFAFA",
    }
)

LEVELS = ("low", "med", "high")


@dataclass(frozen=True)
class ColorProfile:
    """Coarse color description used by the color feature."""

    is_neutral: bool
    dominant_hue: Optional[int] = None
    saturation: str = "med"
    value: str = "med"

    def __post_init__(self) -> None:
        if self.saturation not in LEVELS:
            raise ValueError(f"Unsupported saturation level '{self.saturation}'. Allowed: {LEVELS}")
        if self.value not in LEVELS:
            raise ValueError(f"Unsupported value level '{self.value}'. Allowed: {LEVELS}")


NEUTRAL_PROFILE = ColorProfile(is_neutral=True)


def _normalise_hex(hex_value: str) -> str:
    cleaned = hex_value.strip().lstrip("#").upper()
    if len(cleaned) == 3:
        cleaned = "".join(ch * 2 for ch in cleaned)
    if len(cleaned) != 6:
        raise ValueError(f"Invalid hex color '{hex_value}'")
    int(cleaned, 16)
    return f"#{cleaned}"


def hex_to_hsv(hex_value: str) -> Tuple[float, float, float]:
    """Return ``(hue_degrees, saturation, value)`` for a ``#RRGGBB`` string."""

    normalised = _normalise_hex(hex_value)
    red, green, blue = (int(normalised[idx : idx + 2], 16) / 255 for idx in (1, 3, 5))
    hue, saturation, value = colorsys.rgb_to_hsv(red, green, blue)
    return hue * 360, saturation, value


def _level(component: float) -> str:
    if component < 0.33:
        return "low"
    if component < 0.66:
        return "med"
    return "high"


def is_neutral(hex_value: str) -> bool:
    """Return True for known neutral shades and desaturated colors."""

    normalised = _normalise_hex(hex_value)
    if normalised in NEUTRAL_HEXES:
        return True
    _, saturation, value = hex_to_hsv(normalised)
    if saturation < 0.15:
        return True
    return (value < 0.15 or value > 0.95) and saturation < 0.25


def to_color_profile(hexes: Iterable[str]) -> ColorProfile:
    """Profile the first color of an item; missing or unreadable colors read as neutral."""

    first = next((value for value in hexes if value), None)
    if first is None:
        return NEUTRAL_PROFILE
    try:
        hue, saturation, value = hex_to_hsv(first)
        neutral = is_neutral(first)
    except ValueError:
        logger.debug("Unreadable color %s, treating as neutral", first)
        return NEUTRAL_PROFILE
    return ColorProfile(
        is_neutral=neutral,
        dominant_hue=None if neutral else round(hue) % 360,
        saturation=_level(saturation),
        value=_level(value),
    )


def hue_distance(first: int, second: int) -> int:
    """Shortest distance between two hues on the 360 degree wheel."""

    diff = abs(first - second) % 360
    return min(diff, 360 - diff)


def level_index(level: str) -> int:
    return LEVELS.index(level)


__all__ = [
    "ColorProfile",
    "NEUTRAL_HEXES",
    "NEUTRAL_PROFILE",
    "hex_to_hsv",
    "is_neutral",
    "to_color_profile",
    "hue_distance",
    "level_index",
]
