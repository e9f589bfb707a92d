"""Mappings between UI style vibes, style families, formality and texture."""
from __future__ import annotations

import logging
from typing import Dict, FrozenSet, Iterable, List, Optional, Sequence, Tuple

from models.taxonomy import Category, StyleFamily, StyleVibe, TextureType

logger = logging.getLogger(__name__)

STYLE_VIBE_TO_FAMILY: Dict[StyleVibe, StyleFamily] = {
    StyleVibe.CASUAL: StyleFamily.CLASSIC,
    StyleVibe.MINIMAL: StyleFamily.MINIMAL,
    StyleVibe.OFFICE: StyleFamily.CLASSIC,
    StyleVibe.STREET: StyleFamily.STREET,
    StyleVibe.FEMININE: StyleFamily.ROMANTIC,
    StyleVibe.SPORTY: StyleFamily.ATHLEISURE,
}

FAMILY_TO_UI_VIBE: Dict[StyleFamily, StyleVibe] = {
    StyleFamily.ROMANTIC: StyleVibe.FEMININE,
    StyleFamily.BOHO: StyleVibe.FEMININE,
    StyleFamily.MINIMAL: StyleVibe.MINIMAL,
    StyleFamily.ATHLEISURE: StyleVibe.SPORTY,
    StyleFamily.STREET: StyleVibe.STREET,
    StyleFamily.EDGY: StyleVibe.STREET,
    StyleFamily.PREPPY: StyleVibe.OFFICE,
    StyleFamily.FORMAL: StyleVibe.OFFICE,
    StyleFamily.CLASSIC: StyleVibe.CASUAL,
    StyleFamily.UNKNOWN: StyleVibe.CASUAL,
}

VIBE_PRIORITY: Tuple[StyleVibe, ...] = (
    StyleVibe.OFFICE,
    StyleVibe.MINIMAL,
    StyleVibe.STREET,
    StyleVibe.FEMININE,
    StyleVibe.SPORTY,
    StyleVibe.CASUAL,
)


def _pair(first: StyleFamily, second: StyleFamily) -> FrozenSet[StyleFamily]:
    return frozenset({first, second})


_F = StyleFamily
STYLE_ADJACENCY: Dict[FrozenSet[StyleFamily], int] = {
    # natural neighbours
    _pair(_F.MINIMAL, _F.CLASSIC): 2,
    _pair(_F.MINIMAL, _F.PREPPY): 2,
    _pair(_F.CLASSIC, _F.PREPPY): 2,
    _pair(_F.CLASSIC, _F.ROMANTIC): 2,
    _pair(_F.STREET, _F.ATHLEISURE): 2,
    _pair(_F.STREET, _F.EDGY): 2,
    _pair(_F.ROMANTIC, _F.BOHO): 2,
    _pair(_F.EDGY, _F.BOHO): 2,
    _pair(_F.FORMAL, _F.CLASSIC): 2,
    _pair(_F.FORMAL, _F.MINIMAL): 2,
    # compatible
    _pair(_F.MINIMAL, _F.EDGY): 1,
    _pair(_F.CLASSIC, _F.BOHO): 1,
    _pair(_F.PREPPY, _F.ROMANTIC): 1,
    _pair(_F.MINIMAL, _F.ROMANTIC): 1,
    # tension
    _pair(_F.PREPPY, _F.STREET): -1,
    _pair(_F.ROMANTIC, _F.STREET): -1,
    _pair(_F.FORMAL, _F.BOHO): -1,
    _pair(_F.ROMANTIC, _F.ATHLEISURE): -1,
    _pair(_F.ATHLEISURE, _F.MINIMAL): -1,
    _pair(_F.ATHLEISURE, _F.CLASSIC): -1,
    # opposing
    _pair(_F.FORMAL, _F.ATHLEISURE): -2,
    _pair(_F.FORMAL, _F.STREET): -2,
    _pair(_F.PREPPY, _F.EDGY): -2,
}

# Ordered: the first family whose keywords appear in the notes wins.
_FAMILY_KEYWORDS: List[Tuple[StyleFamily, Tuple[str, ...]]] = [
    (_F.ROMANTIC, ("wrap", "v-neck", "draped", "feminine", "soft", "ruffle", "lace", "floral", "delicate")),
    (_F.MINIMAL, ("clean lines", "simple", "understated", "sleek", "minimal", "streamlined")),
    (_F.CLASSIC, ("timeless", "tailored", "polished", "traditional", "classic", "refined")),
    (_F.EDGY, ("edgy", "punk", "bold", "leather", "hardware", "studded", "asymmetric")),
    (_F.BOHO, ("boho", "bohemian", "artistic", "free-spirited", "embroidered", "fringe")),
    (_F.PREPPY, ("preppy", "collegiate", "nautical", "polo")),
    (_F.FORMAL, ("formal", "elegant", "dressy", "evening", "business", "professional")),
    (_F.STREET, ("street", "urban", "graphic", "oversized", "cargo", "hoodie")),
    (_F.ATHLEISURE, ("athletic", "sporty", "active", "workout", "performance", "comfortable")),
]

_FORMALITY_KEYWORDS: List[Tuple[int, Tuple[str, ...]]] = [
    (5, ("formal", "black-tie", "evening")),
    (4, ("business", "professional", "office")),
    (3, ("smart casual", "polished")),
    (2, ("casual", "everyday")),
    (1, ("athleisure", "loungewear", "sporty")),
]

FAMILY_FORMALITY_BASELINE: Dict[StyleFamily, int] = {
    _F.FORMAL: 5,
    _F.CLASSIC: 3,
    _F.PREPPY: 3,
    _F.MINIMAL: 3,
    _F.ROMANTIC: 3,
    _F.BOHO: 2,
    _F.STREET: 2,
    _F.EDGY: 2,
    _F.UNKNOWN: 2,
    _F.ATHLEISURE: 1,
}

_TEXTURE_KEYWORDS: List[Tuple[TextureType, Tuple[str, ...]]] = [
    (TextureType.SMOOTH, ("silk", "satin", "polished", "sleek")),
    (TextureType.TEXTURED, ("knit", "tweed", "corduroy", "ribbed", "cable")),
    (TextureType.SOFT, ("cashmere", "jersey", "cotton", "soft", "fleece")),
    (TextureType.STRUCTURED, ("denim", "canvas", "stiff", "tailored", "structured")),
    (TextureType.MIXED, ("mixed", "contrast")),
]


def _notes_text(style_notes: Iterable[str]) -> str:
    return " ".join(str(note) for note in style_notes).lower()


def style_adjacency(first: StyleFamily, second: StyleFamily) -> int:
    """Return the adjacency value between two known families (0 when unlisted)."""

    if first == second:
        return 2
    return STYLE_ADJACENCY.get(_pair(first, second), 0)


def family_from_notes(style_notes: Sequence[str]) -> StyleFamily:
    """Infer a style family from free-text style notes."""

    text = _notes_text(style_notes)
    if not text:
        return StyleFamily.UNKNOWN
    for family, keywords in _FAMILY_KEYWORDS:
        if any(keyword in text for keyword in keywords):
            return family
    if "statement" in text:
        if any(word in text for word in ("fitted", "wrap", "silhouette")):
            return StyleFamily.ROMANTIC
        return StyleFamily.EDGY
    return StyleFamily.UNKNOWN


def to_style_family(style_tags: Sequence[StyleVibe], style_notes: Sequence[str] = ()) -> StyleFamily:
    """Map UI vibes (or, without any, style notes) to a style family.

    ``casual`` carries the lowest priority: the first non-casual vibe wins.
    """

    if style_tags:
        primary = next((vibe for vibe in style_tags if vibe != StyleVibe.CASUAL), style_tags[0])
        return STYLE_VIBE_TO_FAMILY[primary]
    return family_from_notes(style_notes)


def infer_formality_level(
    family: StyleFamily,
    category: Optional[Category] = None,
    style_notes: Sequence[str] = (),
    structure: Optional[str] = None,
) -> int:
    """Return a 1-5 formality level from notes, family baseline and structure."""

    text = _notes_text(style_notes)
    level: Optional[int] = None
    for keyword_level, keywords in _FORMALITY_KEYWORDS:
        if any(keyword in text for keyword in keywords):
            level = keyword_level
            break
    if level is None:
        level = FAMILY_FORMALITY_BASELINE.get(family, 2)
        if category == Category.OUTERWEAR and structure == "structured":
            level = min(5, level + 1)
    return level


def infer_texture_type(style_notes: Sequence[str] = (), structure: Optional[str] = None) -> TextureType:
    text = _notes_text(style_notes)
    for texture, keywords in _TEXTURE_KEYWORDS:
        if any(keyword in text for keyword in keywords):
            return texture
    if structure == "structured":
        return TextureType.STRUCTURED
    if structure == "soft":
        return TextureType.SOFT
    return TextureType.UNKNOWN


def resolve_ui_vibe_for_copy(
    style_tags: Sequence[StyleVibe],
    style_notes: Sequence[str] = (),
    explicit_family: Optional[StyleFamily] = None,
) -> StyleVibe:
    """Pick the vibe used to resolve per-vibe copy variants."""

    if explicit_family is not None and explicit_family != StyleFamily.UNKNOWN:
        if explicit_family == StyleFamily.CLASSIC and style_tags and all(
            vibe == StyleVibe.CASUAL for vibe in style_tags
        ):
            return StyleVibe.CASUAL
        return FAMILY_TO_UI_VIBE[explicit_family]
    for vibe in VIBE_PRIORITY:
        if vibe in style_tags:
            return vibe
    vibe = FAMILY_TO_UI_VIBE[family_from_notes(style_notes)]
    logger.debug("No vibe tags, resolved copy vibe %s from notes", vibe.value)
    return vibe


__all__ = [
    "STYLE_VIBE_TO_FAMILY",
    "FAMILY_TO_UI_VIBE",
    "VIBE_PRIORITY",
    "STYLE_ADJACENCY",
    "FAMILY_FORMALITY_BASELINE",
    "style_adjacency",
    "family_from_notes",
    "to_style_family",
    "infer_formality_level",
    "infer_texture_type",
    "resolve_ui_vibe_for_copy",
]
