"""Build scoring profiles for scanned and wardrobe items."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from models.color_theory import ColorProfile, to_color_profile
from models.items import ScannedItem, WardrobeItem
from models.style_families import infer_formality_level, infer_texture_type, to_style_family
from models.taxonomy import Category, StyleFamily, TextureType

logger = logging.getLogger(__name__)

STATEMENT_FAMILIES = frozenset({StyleFamily.EDGY, StyleFamily.ROMANTIC, StyleFamily.STREET, StyleFamily.BOHO})


@dataclass(frozen=True)
class ConfidenceItem:
    """The attributes the pair scorer reads, independent of item origin."""

    id: str
    category: Category
    color_profile: ColorProfile
    style_family: StyleFamily
    formality_level: int
    texture_type: TextureType
    label: Optional[str] = None

    @property
    def is_statement(self) -> bool:
        profile = self.color_profile
        if not profile.is_neutral and profile.saturation == "high":
            return True
        return self.style_family in STATEMENT_FAMILIES or self.formality_level >= 4


def _clamp_formality(level: int) -> int:
    return max(1, min(5, level))


def profile_scanned_item(item: ScannedItem) -> ConfidenceItem:
    """Profile the scanned item; explicit confidence signals win over inference."""

    if item.category is None:
        raise ValueError(f"Scanned item '{item.id}' has no category to profile")
    signals = item.item_signals
    structure = signals.structure if signals else None

    family = to_style_family(item.style_tags, item.style_notes)
    formality = infer_formality_level(family, item.category, item.style_notes, structure)
    if signals is not None:
        if signals.statement_level == "bold":
            formality += 1
        if signals.silhouette_volume in ("relaxed", "oversized"):
            formality -= 1
    texture = infer_texture_type(item.style_notes, structure)
    color_profile = to_color_profile(item.color_hexes)

    explicit = item.confidence_signals
    if explicit is not None:
        color_profile = explicit.color_profile or color_profile
        family = explicit.style_family or family
        formality = explicit.formality_level or formality
        texture = explicit.texture_type or texture

    return ConfidenceItem(
        id=item.id,
        category=item.category,
        color_profile=color_profile,
        style_family=family,
        formality_level=_clamp_formality(formality),
        texture_type=texture,
        label=item.descriptive_label or None,
    )


def profile_wardrobe_item(item: WardrobeItem) -> ConfidenceItem:
    family = to_style_family(item.style_tags, item.style_notes)
    return ConfidenceItem(
        id=item.id,
        category=item.category,
        color_profile=to_color_profile(item.color_hexes),
        style_family=family,
        formality_level=_clamp_formality(
            infer_formality_level(family, item.category, item.style_notes, item.structure)
        ),
        texture_type=infer_texture_type(item.style_notes, item.structure),
        label=item.detected_label,
    )


__all__ = ["ConfidenceItem", "STATEMENT_FAMILIES", "profile_scanned_item", "profile_wardrobe_item"]
