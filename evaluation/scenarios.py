"""Evaluation scenarios covering the main results-screen states for a scan."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional


@dataclass
class EvaluationScenario:
    name: str
    description: str
    scanned_item: Dict[str, object]
    wardrobe_items: List[Dict[str, object]]
    expectations: Dict[str, object]
    fit_preference: Optional[str] = None
    active_tab: Optional[str] = None


def _scanned_top(**overrides: object) -> Dict[str, object]:
    item: Dict[str, object] = {
        "id": "scan_black_tee",
        "category": "tops",
        "colors": [{"hex": "#000000", "name": "black"}],
        "style_tags": ["minimal"],
        "style_notes": ["simple cotton tee"],
        "descriptive_label": "Black cotton tee",
        "item_signals": {"styling_risk": "low"},
    }
    item.update(overrides)
    return item


def _wardrobe_fixtures() -> List[Dict[str, object]]:
    return [
        {
            "id": "bottom_black_jeans",
            "category": "bottoms",
            "colors": [{"hex": "#000000", "name": "black"}],
            "style_tags": ["minimal"],
            "style_notes": ["denim"],
            "detected_label": "Black straight jeans",
            "image_uri": "https://example.com/black-jeans.jpg",
        },
        {
            "id": "shoes_black_loafers",
            "category": "shoes",
            "colors": [{"hex": "#000000", "name": "black"}],
            "style_tags": ["minimal"],
            "style_notes": ["tailored"],
            "detected_label": "Black loafers",
            "image_uri": "https://example.com/black-loafers.jpg",
        },
    ]


def _near_fixture() -> Dict[str, object]:
    return {
        "id": "bottom_cargo_pants",
        "category": "bottoms",
        "colors": [{"hex": "#808080", "name": "grey"}],
        "style_tags": ["street"],
        "style_notes": ["cargo"],
        "detected_label": "Grey cargo pants",
        "image_uri": "https://example.com/cargo.jpg",
    }


SCENARIOS = [
    EvaluationScenario(
        name="empty_wardrobe",
        description="First scan before anything has been added to the wardrobe.",
        scanned_item=_scanned_top(),
        wardrobe_items=[],
        expectations={
            "evaluated": True,
            "ui_state": "LOW",
            "matches_variant": "empty-cta",
            "suggestions_mode": "A",
            "outcome": "could_work_with_pieces",
            "high_outfits": 0,
            "near_outfits": 0,
        },
    ),
    EvaluationScenario(
        name="perfect_outfit",
        description="Neutral minimal top against a wardrobe that completes it cleanly.",
        scanned_item=_scanned_top(),
        wardrobe_items=_wardrobe_fixtures(),
        expectations={
            "evaluated": True,
            "ui_state": "HIGH",
            "matches_variant": "matches",
            "suggestions_mode": "A",
            "outcome": "looks_like_good_match",
            "verdict": "great",
            "min_high_outfits": 1,
            "near_outfits": 0,
            "active_tab": "high",
        },
    ),
    EvaluationScenario(
        name="wear_now_and_worth_trying",
        description="A confident outfit plus a looser street option; tabs must not share outfits.",
        scanned_item=_scanned_top(),
        wardrobe_items=_wardrobe_fixtures() + [_near_fixture()],
        expectations={
            "evaluated": True,
            "ui_state": "HIGH",
            "min_high_outfits": 1,
            "min_near_outfits": 1,
            "show_tabs": True,
            "tabs_exclusive": True,
        },
    ),
    EvaluationScenario(
        name="remembered_near_tab",
        description="The user switches to the near tab; the choice is echoed back.",
        scanned_item=_scanned_top(),
        wardrobe_items=_wardrobe_fixtures() + [_near_fixture()],
        active_tab="near",
        expectations={"selected_tab": "near", "tabs_exclusive": True},
    ),
    EvaluationScenario(
        name="blurry_photo",
        description="Image analysis could not read the item clearly.",
        scanned_item=_scanned_top(context_sufficient=False),
        wardrobe_items=_wardrobe_fixtures(),
        expectations={"outcome": "needs_more_context", "verdict": "context_needed"},
    ),
    EvaluationScenario(
        name="unknown_category",
        description="A scan whose category is outside the taxonomy is shown without scoring.",
        scanned_item=_scanned_top(category="umbrella"),
        wardrobe_items=_wardrobe_fixtures(),
        expectations={
            "evaluated": False,
            "ui_state": "LOW",
            "matches_variant": "hidden",
            "suggestions_mode": "A",
            "high_outfits": 0,
            "near_outfits": 0,
        },
    ),
]
