"""Scanned and wardrobe item data models and helpers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from models.color_theory import ColorProfile
from models.taxonomy import (
    Category,
    StyleFamily,
    StylingRisk,
    TextureType,
    coerce_enum,
    normalise_vibes,
    parse_category,
    validate_category,
)

_SIGNAL_CHOICES: Dict[str, Tuple[str, ...]] = {
    "silhouette_volume": ("fitted", "relaxed", "oversized"),
    "length_category": ("cropped", "mid", "long"),
    "leg_shape": ("slim", "straight", "wide"),
    "rise": ("low", "mid", "high"),
    "balance_requirement": ("low", "medium", "high"),
    "skirt_volume": ("straight", "flowy"),
    "dress_silhouette": ("fitted", "relaxed", "oversized", "structured"),
    "structure": ("soft", "structured"),
    "bulk": ("low", "medium", "high"),
    "layering_dependency": ("low", "medium", "high"),
    "style_versatility": ("low", "medium", "high"),
    "statement_level": ("neutral", "bold"),
}


def _ensure_tuple(value: Any) -> Tuple[Any, ...]:
    """Coerce a scalar or iterable into a tuple."""

    if value is None:
        return ()
    if isinstance(value, (list, tuple, set, frozenset)):
        return tuple(value)
    return (value,)


def _clean_strings(values: Any) -> Tuple[str, ...]:
    return tuple(str(v).strip() for v in _ensure_tuple(values) if str(v).strip())


@dataclass(frozen=True)
class ColorInfo:
    hex: str
    name: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "hex", str(self.hex).strip().upper())


@dataclass(frozen=True)
class ItemSignals:
    """Category-specific structural signals from image analysis.

    Every field is optional; values outside the allowed set are dropped so a
    noisy upstream record degrades to "unknown" rather than failing.
    """

    silhouette_volume: Optional[str] = None
    length_category: Optional[str] = None
    layering_friendly: Optional[bool] = None
    leg_shape: Optional[str] = None
    rise: Optional[str] = None
    balance_requirement: Optional[str] = None
    skirt_volume: Optional[str] = None
    dress_silhouette: Optional[str] = None
    structure: Optional[str] = None
    bulk: Optional[str] = None
    layering_dependency: Optional[str] = None
    style_versatility: Optional[str] = None
    statement_level: Optional[str] = None
    styling_risk: StylingRisk = StylingRisk.MEDIUM

    def __post_init__(self) -> None:
        for name, allowed in _SIGNAL_CHOICES.items():
            value = getattr(self, name)
            if value is None:
                continue
            key = str(value).strip().lower()
            object.__setattr__(self, name, key if key in allowed else None)
        object.__setattr__(
            self, "styling_risk", coerce_enum(StylingRisk, self.styling_risk, StylingRisk.MEDIUM)
        )


@dataclass(frozen=True)
class ConfidenceSignals:
    """Explicit scoring inputs that override anything inferred from metadata."""

    color_profile: Optional[ColorProfile] = None
    style_family: Optional[StyleFamily] = None
    formality_level: Optional[int] = None
    texture_type: Optional[TextureType] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "style_family", coerce_enum(StyleFamily, self.style_family))
        object.__setattr__(self, "texture_type", coerce_enum(TextureType, self.texture_type))
        if self.formality_level is not None:
            object.__setattr__(self, "formality_level", max(1, min(5, int(self.formality_level))))


@dataclass(frozen=True)
class ScannedItem:
    """The item the user just photographed."""

    id: str
    category: Optional[Category]
    colors: Tuple[ColorInfo, ...] = ()
    style_tags: Tuple[Any, ...] = ()
    style_notes: Tuple[str, ...] = ()
    descriptive_label: str = ""
    item_signals: Optional[ItemSignals] = None
    context_sufficient: bool = True
    is_fashion_item: bool = True
    confidence_signals: Optional[ConfidenceSignals] = None
    image_uri: Optional[str] = None

    def __post_init__(self) -> None:
        if not str(self.id).strip():
            raise ValueError("ScannedItem requires a non-empty id")
        object.__setattr__(self, "category", parse_category(self.category))
        object.__setattr__(self, "colors", _coerce_colors(self.colors))
        object.__setattr__(self, "style_tags", tuple(normalise_vibes(_ensure_tuple(self.style_tags))))
        object.__setattr__(self, "style_notes", _clean_strings(self.style_notes))

    @property
    def color_hexes(self) -> Tuple[str, ...]:
        return tuple(color.hex for color in self.colors)


@dataclass(frozen=True)
class WardrobeItem:
    """Represents an item in the user's wardrobe."""

    id: str
    category: Category
    image_uri: Optional[str] = None
    colors: Tuple[ColorInfo, ...] = ()
    style_tags: Tuple[Any, ...] = ()
    style_notes: Tuple[str, ...] = ()
    detected_label: Optional[str] = None
    structure: Optional[str] = None

    def __post_init__(self) -> None:
        if not str(self.id).strip():
            raise ValueError("WardrobeItem requires a non-empty id")
        object.__setattr__(self, "category", validate_category(self.category))
        object.__setattr__(self, "colors", _coerce_colors(self.colors))
        object.__setattr__(self, "style_tags", tuple(normalise_vibes(_ensure_tuple(self.style_tags))))
        object.__setattr__(self, "style_notes", _clean_strings(self.style_notes))
        if self.structure is not None and self.structure not in ("soft", "structured"):
            object.__setattr__(self, "structure", None)

    @property
    def color_hexes(self) -> Tuple[str, ...]:
        return tuple(color.hex for color in self.colors)


def _coerce_colors(values: Any) -> Tuple[ColorInfo, ...]:
    colors = []
    for value in _ensure_tuple(values):
        if isinstance(value, ColorInfo):
            colors.append(value)
        elif isinstance(value, dict) and value.get("hex"):
            colors.append(ColorInfo(hex=str(value["hex"]), name=value.get("name")))
        elif isinstance(value, str) and value.strip():
            colors.append(ColorInfo(hex=value))
    return tuple(colors)


def _signals_from_raw(raw: Any) -> Optional[ItemSignals]:
    if raw is None:
        return None
    if isinstance(raw, ItemSignals):
        return raw
    known = {key: raw[key] for key in ItemSignals.__dataclass_fields__ if key in raw}
    return ItemSignals(**known)


def scanned_item_from_raw(metadata: Dict[str, Any]) -> ScannedItem:
    """Factory to build a :class:`ScannedItem` from a loose analysis record."""

    if not metadata.get("id"):
        raise ValueError("Missing required fields for ScannedItem: ['id']")
    raw_signals = metadata.get("confidence_signals")
    confidence_signals = None
    if isinstance(raw_signals, ConfidenceSignals):
        confidence_signals = raw_signals
    elif raw_signals:
        profile = raw_signals.get("color_profile")
        if isinstance(profile, dict):
            profile = ColorProfile(**profile)
        confidence_signals = ConfidenceSignals(
            color_profile=profile,
            style_family=raw_signals.get("style_family"),
            formality_level=raw_signals.get("formality_level"),
            texture_type=raw_signals.get("texture_type"),
        )
    return ScannedItem(
        id=str(metadata["id"]),
        category=metadata.get("category"),
        colors=metadata.get("colors"),
        style_tags=metadata.get("style_tags"),
        style_notes=metadata.get("style_notes"),
        descriptive_label=str(metadata.get("descriptive_label") or ""),
        item_signals=_signals_from_raw(metadata.get("item_signals")),
        context_sufficient=bool(metadata.get("context_sufficient", True)),
        is_fashion_item=bool(metadata.get("is_fashion_item", True)),
        confidence_signals=confidence_signals,
        image_uri=metadata.get("image_uri"),
    )


def wardrobe_item_from_raw(metadata: Dict[str, Any]) -> WardrobeItem:
    """Factory to build a :class:`WardrobeItem` from a loose persistence record."""

    required_fields = ["id", "category"]
    missing = [name for name in required_fields if not metadata.get(name)]
    if missing:
        raise ValueError(f"Missing required fields for WardrobeItem: {missing}")

    return WardrobeItem(
        id=str(metadata["id"]),
        category=metadata["category"],
        image_uri=metadata.get("image_uri"),
        colors=metadata.get("colors"),
        style_tags=_ensure_tuple(metadata.get("style_tags")) + _ensure_tuple(metadata.get("user_style_tags")),
        style_notes=metadata.get("style_notes"),
        detected_label=metadata.get("detected_label"),
        structure=metadata.get("structure"),
    )


__all__ = [
    "ColorInfo",
    "ItemSignals",
    "ConfidenceSignals",
    "ScannedItem",
    "WardrobeItem",
    "scanned_item_from_raw",
    "wardrobe_item_from_raw",
]
