"""Taxonomy, slot model and item record tests."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Dict

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from models import taxonomy
from models.items import ItemSignals, ScannedItem, WardrobeItem, scanned_item_from_raw, wardrobe_item_from_raw
from models.slots import Slot, dress_track_slots, required_slots, slot_for_category
from models.taxonomy import Category, StyleVibe, StylingRisk, Tier


@pytest.fixture()
def sample_metadata() -> Dict[str, object]:
    return {
        "id": "item-1",
        "category": "Top",
        "image_uri": "https://example.com/image.jpg",
        "colors": [{"hex": "#1c1917", "name": "charcoal"}, "#ffffff"],
        "style_tags": ["Minimal", "not-a-vibe"],
        "user_style_tags": ["office"],
        "style_notes": ["  clean lines ", ""],
        "detected_label": "Charcoal knit",
        "structure": "floppy",
    }


def test_core_and_optional_partition_categories() -> None:
    """Every category is exactly one of core or optional."""

    assert taxonomy.CORE_CATEGORIES | taxonomy.OPTIONAL_CATEGORIES == frozenset(Category)
    assert not taxonomy.CORE_CATEGORIES & taxonomy.OPTIONAL_CATEGORIES
    taxonomy.check_category_partition()


def test_parse_category_handles_aliases_and_unknowns() -> None:
    assert taxonomy.parse_category("Top") == Category.TOPS
    assert taxonomy.parse_category(" shoes ") == Category.SHOES
    assert taxonomy.parse_category("coat") == Category.OUTERWEAR
    assert taxonomy.parse_category("umbrella") is None
    assert taxonomy.parse_category(None) is None

    with pytest.raises(ValueError):
        taxonomy.validate_category("umbrella")


def test_pair_type_is_order_independent() -> None:
    assert taxonomy.pair_type_for(Category.BOTTOMS, Category.TOPS) == "tops_bottoms"
    assert taxonomy.pair_type_for(Category.TOPS, Category.BOTTOMS) == "tops_bottoms"
    assert taxonomy.pair_type_for(Category.SHOES, Category.SKIRTS) == "skirts_shoes"
    assert taxonomy.pair_type_for(Category.BAGS, Category.SHOES) is None
    assert taxonomy.categories_in_pair("skirts_tops") == (Category.SKIRTS, Category.TOPS)


def test_min_tier_and_rank_ordering() -> None:
    assert Tier.HIGH.rank > Tier.MEDIUM.rank > Tier.LOW.rank
    assert taxonomy.min_tier([Tier.HIGH, Tier.MEDIUM]) == Tier.MEDIUM
    assert taxonomy.min_tier([]) == Tier.LOW


def test_normalise_vibes_and_coerce_enum() -> None:
    assert taxonomy.normalise_vibes(["Street", "street", "grunge", "SPORTY"]) == [StyleVibe.STREET, StyleVibe.SPORTY]
    assert taxonomy.coerce_enum(StylingRisk, "High") == StylingRisk.HIGH
    assert taxonomy.coerce_enum(StylingRisk, "extreme", StylingRisk.MEDIUM) == StylingRisk.MEDIUM
    assert taxonomy.coerce_enum(StylingRisk, None, StylingRisk.LOW) == StylingRisk.LOW


@pytest.mark.parametrize(
    "category, expected",
    [
        (Category.TOPS, (Slot.BOTTOM, Slot.SHOES)),
        (Category.SKIRTS, (Slot.TOP, Slot.SHOES)),
        (Category.SHOES, (Slot.TOP, Slot.BOTTOM)),
        (Category.DRESSES, (Slot.SHOES,)),
        (Category.OUTERWEAR, (Slot.TOP, Slot.BOTTOM, Slot.SHOES)),
        (Category.BAGS, (Slot.TOP, Slot.BOTTOM, Slot.SHOES)),
    ],
)
def test_required_slots_for_scanned_category(category: Category, expected: tuple) -> None:
    assert required_slots(category) == expected


def test_dress_track_only_for_shoes_and_outerwear() -> None:
    assert dress_track_slots(Category.SHOES) == (Slot.DRESS,)
    assert dress_track_slots(Category.OUTERWEAR) == (Slot.DRESS, Slot.SHOES)
    assert dress_track_slots(Category.TOPS) == ()
    assert slot_for_category(Category.SKIRTS) == Slot.BOTTOM
    assert slot_for_category(Category.BAGS) is None


def test_item_signals_drop_values_outside_allowed_sets() -> None:
    signals = ItemSignals(silhouette_volume="Oversized", leg_shape="bootcut", styling_risk="HIGH")
    assert signals.silhouette_volume == "oversized"
    assert signals.leg_shape is None
    assert signals.styling_risk == StylingRisk.HIGH
    assert ItemSignals(styling_risk="wild").styling_risk == StylingRisk.MEDIUM


def test_wardrobe_item_factory_normalises_metadata(sample_metadata: Dict[str, object]) -> None:
    """Factory merges user tags, cleans notes and upper-cases colours."""

    item = wardrobe_item_from_raw(sample_metadata)
    assert item.category == Category.TOPS
    assert item.style_tags == (StyleVibe.MINIMAL, StyleVibe.OFFICE)
    assert item.style_notes == ("clean lines",)
    assert item.color_hexes == ("#1C1917", "#FFFFFF")
    assert item.structure is None


def test_wardrobe_item_requires_known_category(sample_metadata: Dict[str, object]) -> None:
    with pytest.raises(ValueError):
        wardrobe_item_from_raw({**sample_metadata, "category": "umbrella"})
    with pytest.raises(ValueError):
        wardrobe_item_from_raw({**sample_metadata, "category": ""})
    with pytest.raises(ValueError):
        WardrobeItem(id=" ", category=Category.TOPS)


def test_scanned_item_keeps_unknown_category_as_none() -> None:
    item = scanned_item_from_raw({"id": "scan-1", "category": "umbrella", "item_signals": {"rise": "high"}})
    assert item.category is None
    assert item.item_signals.rise == "high"
    assert item.context_sufficient is True
    assert item.is_fashion_item is True

    with pytest.raises(ValueError):
        scanned_item_from_raw({"category": "tops"})
    with pytest.raises(ValueError):
        ScannedItem(id="", category=Category.TOPS)


def test_scanned_item_reads_explicit_confidence_signals() -> None:
    item = scanned_item_from_raw(
        {
            "id": "scan-2",
            "category": "dress",
            "confidence_signals": {
                "color_profile": {"is_neutral": False, "dominant_hue": 10, "saturation": "high", "value": "med"},
                "style_family": "romantic",
                "formality_level": 9,
                "texture_type": "smooth",
            },
        }
    )
    signals = item.confidence_signals
    assert item.category == Category.DRESSES
    assert signals.style_family == taxonomy.StyleFamily.ROMANTIC
    assert signals.formality_level == 5
    assert signals.color_profile.dominant_hue == 10
