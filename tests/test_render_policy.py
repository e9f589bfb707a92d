"""Render policy tests for the results screen."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import List

sys.path.append(str(Path(__file__).resolve().parents[1]))

from logic.confidence_engine import MODE_A, MODE_B, ConfidenceResult, evaluate
from logic.render_policy import MatchesVariant, UiState, build_render_model, enrich_near_matches, ui_state_for
from logic.suggestions import SuggestionSet
from models.items import ScannedItem, WardrobeItem
from models.taxonomy import Category


def _scanned() -> ScannedItem:
    return ScannedItem(
        id="scan-1",
        category=Category.TOPS,
        colors=("#000000",),
        style_tags=("minimal",),
        style_notes=("simple cotton tee",),
    )


def _perfect_wardrobe() -> List[WardrobeItem]:
    return [
        WardrobeItem(id="jeans", category=Category.BOTTOMS, colors=("#000000",), style_tags=("minimal",), style_notes=("denim",)),
        WardrobeItem(id="loafers", category=Category.SHOES, colors=("#000000",), style_tags=("minimal",), style_notes=("tailored",)),
    ]


def _formal_trousers() -> WardrobeItem:
    return WardrobeItem(id="trousers", category=Category.BOTTOMS, colors=("#000000",), style_tags=("minimal",), style_notes=("formal",))


def test_high_state_shows_matches_and_optional_ideas() -> None:
    wardrobe = _perfect_wardrobe()
    model = build_render_model(evaluate(_scanned(), wardrobe), len(wardrobe), wardrobe)
    assert model.ui_state == UiState.HIGH
    assert model.matches_section.visible
    assert model.matches_section.variant == MatchesVariant.MATCHES
    assert {e.wardrobe_item_id for e in model.matches_section.matches} == {"jeans", "loafers"}
    assert model.suggestions_section.mode == MODE_A
    assert model.suggestions_section.title == "If you want to expand this look"
    assert not model.show_rescan_cta


def test_medium_state_leads_with_how_to_make_it_work() -> None:
    wardrobe = [_formal_trousers()]
    model = build_render_model(evaluate(_scanned(), wardrobe), len(wardrobe), wardrobe)
    assert model.ui_state == UiState.MEDIUM
    assert model.matches_section.variant == MatchesVariant.NEAR_MATCHES
    assert [m.wardrobe_item.id for m in model.matches_section.near_matches] == ["trousers"]
    assert model.suggestions_section.mode == MODE_B
    assert model.suggestions_section.visible and model.suggestions_section.bullets
    assert model.suggestions_section.intro == "To make this pairing work:"


def test_empty_wardrobe_shows_add_items_cta() -> None:
    model = build_render_model(evaluate(_scanned(), []), 0)
    assert model.ui_state == UiState.LOW
    assert not model.matches_section.visible
    assert model.matches_section.variant == MatchesVariant.EMPTY_CTA
    assert model.suggestions_section.visible
    assert not model.show_rescan_cta


def test_unevaluated_scan_hides_matches_without_rescan_prompt() -> None:
    result = evaluate(ScannedItem(id="scan-2", category="umbrella"), _perfect_wardrobe())
    model = build_render_model(result, 2, _perfect_wardrobe())
    assert ui_state_for(result) == UiState.LOW
    assert model.matches_section.variant == MatchesVariant.HIDDEN
    assert not model.show_rescan_cta


def test_nothing_to_show_offers_a_rescan() -> None:
    result = ConfidenceResult(evaluated=True, mode_a_suggestions=SuggestionSet(intro="", bullets=()))
    model = build_render_model(result, 4)
    assert not model.matches_section.visible
    assert not model.suggestions_section.visible
    assert model.show_rescan_cta


def test_near_matches_without_wardrobe_items_are_dropped() -> None:
    wardrobe = [_formal_trousers()]
    result = evaluate(_scanned(), wardrobe)
    assert enrich_near_matches(result.near_matches, []) == []
    assert len(enrich_near_matches(result.near_matches, wardrobe)) == 1
