"""Canonical taxonomy definitions for scanned and wardrobe items.

This module centralises the closed label sets used by the matching core:
categories and their core/optional split, confidence tiers, UI style vibes,
style families and texture types. Helper functions keep validation logic
consistent across the engine, the assembler and the payload schemas.
"""

from enum import Enum
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple


def _normalize_key(value: object) -> str:
    """Normalise a free-form string (or enum member) into a taxonomy key."""

    if isinstance(value, Enum):
        value = value.value
    return str(value).strip().lower().replace(" ", "_").replace("-", "_")


class Category(str, Enum):
    TOPS = "tops"
    BOTTOMS = "bottoms"
    DRESSES = "dresses"
    SKIRTS = "skirts"
    OUTERWEAR = "outerwear"
    SHOES = "shoes"
    BAGS = "bags"
    ACCESSORIES = "accessories"


class Tier(str, Enum):
    """Pair and outfit confidence tiers, ordered HIGH > MEDIUM > LOW."""

    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"

    @property
    def rank(self) -> int:
        return _TIER_RANK[self]


_TIER_RANK: Dict[Tier, int] = {Tier.HIGH: 2, Tier.MEDIUM: 1, Tier.LOW: 0}


class StyleVibe(str, Enum):
    CASUAL = "casual"
    MINIMAL = "minimal"
    OFFICE = "office"
    STREET = "street"
    FEMININE = "feminine"
    SPORTY = "sporty"


class StyleFamily(str, Enum):
    MINIMAL = "minimal"
    CLASSIC = "classic"
    STREET = "street"
    ATHLEISURE = "athleisure"
    ROMANTIC = "romantic"
    EDGY = "edgy"
    BOHO = "boho"
    PREPPY = "preppy"
    FORMAL = "formal"
    UNKNOWN = "unknown"


class TextureType(str, Enum):
    SMOOTH = "smooth"
    TEXTURED = "textured"
    SOFT = "soft"
    STRUCTURED = "structured"
    MIXED = "mixed"
    UNKNOWN = "unknown"


class StylingRisk(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class FitPreference(str, Enum):
    OVERSIZED = "oversized"
    REGULAR = "regular"
    SLIM = "slim"


CORE_CATEGORIES: FrozenSet[Category] = frozenset(
    {Category.TOPS, Category.BOTTOMS, Category.SHOES, Category.DRESSES, Category.SKIRTS}
)
OPTIONAL_CATEGORIES: FrozenSet[Category] = frozenset(
    {Category.OUTERWEAR, Category.BAGS, Category.ACCESSORIES}
)

CATEGORY_NOUNS: Dict[Category, Tuple[str, str]] = {
    Category.TOPS: ("top", "tops"),
    Category.BOTTOMS: ("bottom", "bottoms"),
    Category.DRESSES: ("dress", "dresses"),
    Category.SKIRTS: ("skirt", "skirts"),
    Category.OUTERWEAR: ("layer", "outerwear"),
    Category.SHOES: ("shoe", "shoes"),
    Category.BAGS: ("bag", "bags"),
    Category.ACCESSORIES: ("accessory", "accessories"),
}

_CATEGORY_ALIASES: Dict[str, Category] = {
    "top": Category.TOPS,
    "bottom": Category.BOTTOMS,
    "dress": Category.DRESSES,
    "skirt": Category.SKIRTS,
    "shoe": Category.SHOES,
    "bag": Category.BAGS,
    "accessory": Category.ACCESSORIES,
    "jacket": Category.OUTERWEAR,
    "coat": Category.OUTERWEAR,
}

# Unordered pairs that the engine knows how to score. Keys are the two
# category values joined with "_" in canonical order.
PAIR_TYPES: FrozenSet[str] = frozenset(
    {
        "tops_bottoms",
        "tops_shoes",
        "tops_outerwear",
        "bottoms_shoes",
        "bottoms_outerwear",
        "shoes_outerwear",
        "tops_accessories",
        "bottoms_accessories",
        "shoes_accessories",
        "outerwear_accessories",
        "tops_bags",
        "bottoms_bags",
        "dresses_shoes",
        "dresses_outerwear",
        "dresses_accessories",
        "dresses_bags",
        "skirts_tops",
        "skirts_shoes",
        "skirts_outerwear",
    }
)


def check_category_partition() -> None:
    """Raise :class:`ValueError` unless core and optional partition ``Category``."""

    overlap = CORE_CATEGORIES & OPTIONAL_CATEGORIES
    if overlap:
        raise ValueError(f"Categories marked both core and optional: {sorted(c.value for c in overlap)}")
    uncovered = [category.value for category in Category if category not in CORE_CATEGORIES | OPTIONAL_CATEGORIES]
    if uncovered:
        raise ValueError(f"Categories missing from the core/optional split: {uncovered}")


check_category_partition()


def is_core(category: Category) -> bool:
    return category in CORE_CATEGORIES


def parse_category(value: object) -> Optional[Category]:
    """Return the matching :class:`Category` or ``None`` for unknown input."""

    if isinstance(value, Category):
        return value
    if value is None:
        return None
    key = _normalize_key(value)
    try:
        return Category(key)
    except ValueError:
        return _CATEGORY_ALIASES.get(key)


def validate_category(value: object) -> Category:
    """Validate and normalise a category value.

    Raises a :class:`ValueError` if the category is not part of the canonical
    taxonomy.
    """

    category = parse_category(value)
    if category is None:
        raise ValueError(f"Unsupported category '{value}'. Allowed: {sorted(c.value for c in Category)}")
    return category


def pair_type_for(first: Category, second: Category) -> Optional[str]:
    """Return the canonical pair type for two categories, if one exists."""

    ordered = sorted([first.value, second.value])
    key = f"{ordered[0]}_{ordered[1]}"
    if key in PAIR_TYPES:
        return key
    reverse = f"{ordered[1]}_{ordered[0]}"
    if reverse in PAIR_TYPES:
        return reverse
    return None


def categories_in_pair(pair_type: str) -> Tuple[Category, Category]:
    first, second = pair_type.split("_", 1)
    return Category(first), Category(second)


def min_tier(tiers: Iterable[Tier]) -> Tier:
    """Return the floor tier of ``tiers`` (LOW when empty)."""

    values = list(tiers)
    if not values:
        return Tier.LOW
    return min(values, key=lambda tier: tier.rank)


def normalise_vibes(values: Iterable[str]) -> List[StyleVibe]:
    """Normalise and deduplicate style vibe tags, dropping unknown ones."""

    normalised: List[StyleVibe] = []
    for value in values:
        key = _normalize_key(value)
        try:
            vibe = StyleVibe(key)
        except ValueError:
            continue
        if vibe not in normalised:
            normalised.append(vibe)
    return normalised


def coerce_enum(enum_cls, value, default=None):
    """Return ``enum_cls(value)`` for known values, otherwise ``default``."""

    if value is None or isinstance(value, enum_cls):
        return value if value is not None else default
    try:
        return enum_cls(_normalize_key(value))
    except ValueError:
        return default


__all__ = [
    "Category",
    "Tier",
    "StyleVibe",
    "StyleFamily",
    "TextureType",
    "StylingRisk",
    "FitPreference",
    "CORE_CATEGORIES",
    "OPTIONAL_CATEGORIES",
    "CATEGORY_NOUNS",
    "PAIR_TYPES",
    "check_category_partition",
    "is_core",
    "parse_category",
    "validate_category",
    "pair_type_for",
    "categories_in_pair",
    "min_tier",
    "normalise_vibes",
    "coerce_enum",
]
