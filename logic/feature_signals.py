"""Per-feature compatibility signals between two profiled items.

Each feature yields an integer in [-2, 2] plus a ``known`` flag. Unknown
features carry no weight in the pair score; their share is redistributed over
the known ones.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict

from logic.item_profiles import ConfidenceItem
from models.color_theory import hue_distance, level_index
from models.style_families import style_adjacency
from models.taxonomy import StyleFamily, TextureType


@dataclass(frozen=True)
class FeatureResult:
    value: int
    known: bool = True


@dataclass(frozen=True)
class FeatureSignals:
    C: FeatureResult
    S: FeatureResult
    F: FeatureResult
    T: FeatureResult
    U: FeatureResult

    def as_dict(self) -> Dict[str, FeatureResult]:
        return {"C": self.C, "S": self.S, "F": self.F, "T": self.T, "U": self.U}


UNKNOWN = FeatureResult(value=0, known=False)


def _clamp(value: int) -> int:
    return max(-2, min(2, value))


def _round(value: float) -> int:
    # halves round up, so -0.5 becomes 0
    return math.floor(value + 0.5)


def _hue_band(distance: int) -> int:
    if distance <= 30:
        return 2
    if distance <= 45:
        return -2
    if distance <= 90:
        return -1
    if distance <= 120:
        return 0
    if distance <= 150:
        return 1
    return 2


def color_signal(first: ConfidenceItem, second: ConfidenceItem) -> FeatureResult:
    a, b = first.color_profile, second.color_profile
    if a.is_neutral and b.is_neutral:
        return FeatureResult(2)
    if a.is_neutral or b.is_neutral:
        return FeatureResult(1)
    if a.dominant_hue is None or b.dominant_hue is None:
        return FeatureResult(1)

    value = _hue_band(hue_distance(a.dominant_hue, b.dominant_hue))
    if a.saturation == "high" and b.saturation == "high":
        value = value + 1 if value > 0 else value - 1
    elif a.saturation == "low" and b.saturation == "low":
        value = _round(value * 0.5)
    if abs(level_index(a.value) - level_index(b.value)) >= 2:
        value += 1
    return FeatureResult(_clamp(value))


def style_signal(first: ConfidenceItem, second: ConfidenceItem) -> FeatureResult:
    if StyleFamily.UNKNOWN in (first.style_family, second.style_family):
        return UNKNOWN
    return FeatureResult(style_adjacency(first.style_family, second.style_family))


def formality_signal(first: ConfidenceItem, second: ConfidenceItem) -> FeatureResult:
    gap = abs(first.formality_level - second.formality_level)
    return FeatureResult({0: 2, 1: 1, 2: 0, 3: -1}.get(gap, -2))


_TEXTURE_COMPLEMENTS = (
    frozenset({TextureType.SMOOTH, TextureType.TEXTURED}),
    frozenset({TextureType.SOFT, TextureType.STRUCTURED}),
)
_TEXTURE_COMPETING = frozenset({TextureType.TEXTURED, TextureType.STRUCTURED})


def texture_signal(first: ConfidenceItem, second: ConfidenceItem) -> FeatureResult:
    a, b = first.texture_type, second.texture_type
    if TextureType.UNKNOWN in (a, b):
        return UNKNOWN
    if a == b:
        return FeatureResult(1)
    pair = frozenset({a, b})
    if pair in _TEXTURE_COMPLEMENTS:
        return FeatureResult(2)
    if TextureType.MIXED in pair:
        return FeatureResult(1)
    if pair == _TEXTURE_COMPETING:
        return FeatureResult(-1)
    return FeatureResult(0)


def usage_signal(formality: FeatureResult, style: FeatureResult) -> FeatureResult:
    if style.known:
        return FeatureResult(_clamp(_round(formality.value * 0.6 + style.value * 0.4)))
    return FeatureResult(_clamp(_round(formality.value * 0.7)))


def compute_feature_signals(first: ConfidenceItem, second: ConfidenceItem) -> FeatureSignals:
    formality = formality_signal(first, second)
    style = style_signal(first, second)
    return FeatureSignals(
        C=color_signal(first, second),
        S=style,
        F=formality,
        T=texture_signal(first, second),
        U=usage_signal(formality, style),
    )


__all__ = [
    "FeatureResult",
    "FeatureSignals",
    "UNKNOWN",
    "color_signal",
    "style_signal",
    "formality_signal",
    "texture_signal",
    "usage_signal",
    "compute_feature_signals",
]
