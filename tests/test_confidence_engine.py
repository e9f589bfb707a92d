"""Confidence engine tests: tiering, near matches and suggestion mode."""

from __future__ import annotations

import sys
from pathlib import Path
from types import SimpleNamespace
from typing import List

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from logic import confidence_engine
from logic.confidence_engine import MODE_A, MODE_B, evaluate, outfit_confidence, rank_high_matches
from models.items import ItemSignals, ScannedItem, WardrobeItem
from models.taxonomy import Category, StyleVibe, Tier


def _scanned(category: object = Category.TOPS, **overrides: object) -> ScannedItem:
    fields = {
        "id": "scan-1",
        "category": category,
        "colors": ("#000000",),
        "style_tags": ("minimal",),
        "style_notes": ("simple cotton tee",),
        "item_signals": ItemSignals(styling_risk="low"),
    }
    fields.update(overrides)
    return ScannedItem(**fields)


def _wardrobe() -> List[WardrobeItem]:
    return [
        WardrobeItem(
            id="jeans",
            category=Category.BOTTOMS,
            colors=("#000000",),
            style_tags=("minimal",),
            style_notes=("denim",),
        ),
        WardrobeItem(
            id="loafers",
            category=Category.SHOES,
            colors=("#000000",),
            style_tags=("minimal",),
            style_notes=("tailored",),
        ),
        WardrobeItem(
            id="cargo",
            category=Category.BOTTOMS,
            colors=("#808080",),
            style_tags=("street",),
            style_notes=("cargo",),
        ),
    ]


def _formal_trousers() -> WardrobeItem:
    return WardrobeItem(
        id="trousers",
        category=Category.BOTTOMS,
        colors=("#000000",),
        style_tags=("minimal",),
        style_notes=("formal",),
    )


def test_empty_wardrobe_is_evaluated_with_mode_a() -> None:
    result = evaluate(_scanned(), [])
    assert result.evaluated
    assert result.matches == () and result.near_matches == ()
    assert result.suggestions_mode == MODE_A
    assert result.debug_tier == Tier.LOW
    assert result.mode_a_suggestions is not None and result.mode_a_suggestions.bullets


def test_unknown_category_is_not_evaluated() -> None:
    result = evaluate(_scanned(category="umbrella"), _wardrobe())
    assert not result.evaluated
    assert result.diagnostics["reason"] == "unknown_category"
    assert result.suggestions_mode == MODE_A
    assert result.mode_a_suggestions.bullets


def test_non_fashion_item_is_not_evaluated() -> None:
    result = evaluate(_scanned(is_fashion_item=False), _wardrobe())
    assert not result.evaluated
    assert result.diagnostics["reason"] == "not_fashion_item"


def test_high_matches_and_near_matches_are_disjoint() -> None:
    result = evaluate(_scanned(), _wardrobe())
    high_ids = {e.wardrobe_item_id for e in result.matches}
    near_ids = {e.wardrobe_item_id for e in result.near_matches}

    assert high_ids == {"jeans", "loafers"}
    assert near_ids == {"cargo"}
    assert result.matched_categories == frozenset({Category.BOTTOMS, Category.SHOES})
    assert result.show_matches_section
    assert result.debug_tier == Tier.HIGH
    assert result.suggestions_mode == MODE_A
    assert all(e.tier == Tier.HIGH for e in result.matches)
    assert all(e.tier == Tier.MEDIUM for e in result.near_matches)


def test_high_matches_carry_explanations() -> None:
    result = evaluate(_scanned(), _wardrobe())
    for evaluation in result.matches:
        assert evaluation.explanation or evaluation.explanation_forbidden_reason
    assert all(e.explanation is None for e in result.near_matches)


def test_capped_near_matches_switch_to_mode_b() -> None:
    result = evaluate(_scanned(), [_formal_trousers()])
    assert result.matches == ()
    assert [e.wardrobe_item_id for e in result.near_matches] == ["trousers"]
    assert result.suggestions_mode == MODE_B
    assert result.mode_b_suggestions.bullets


def test_scanned_item_is_never_paired_with_itself_or_unknown_pairs() -> None:
    scanned = _scanned(category=Category.SHOES, id="shoe-1")
    wardrobe = [
        WardrobeItem(id="shoe-1", category=Category.SHOES),
        WardrobeItem(id="bag-1", category=Category.BAGS),
    ]
    result = evaluate(scanned, wardrobe)
    assert result.evaluated
    assert result.evaluations == ()
    assert result.diagnostics["pairs_skipped"] == 1


def test_scoring_failures_degrade_to_not_evaluated(monkeypatch: pytest.MonkeyPatch) -> None:
    def _boom(*_args, **_kwargs):
        raise RuntimeError("scoring exploded")

    monkeypatch.setattr(confidence_engine, "evaluate_pair", _boom)
    result = evaluate(_scanned(), _wardrobe())
    assert not result.evaluated
    assert result.diagnostics["reason"] == "scoring_error"


def test_copy_vibe_follows_style_tags() -> None:
    assert evaluate(_scanned(style_tags=("street",)), []).ui_vibe_for_copy == StyleVibe.STREET


@pytest.mark.parametrize(
    "tiers, expected",
    [
        ([Tier.HIGH, Tier.HIGH, Tier.LOW], Tier.HIGH),
        ([Tier.HIGH, Tier.LOW], Tier.MEDIUM),
        ([Tier.HIGH, Tier.MEDIUM], Tier.HIGH),
        ([Tier.MEDIUM, Tier.LOW], Tier.MEDIUM),
        ([Tier.LOW], Tier.LOW),
        ([], Tier.LOW),
    ],
)
def test_outfit_confidence(tiers: List[Tier], expected: Tier) -> None:
    assert outfit_confidence([SimpleNamespace(tier=tier) for tier in tiers]) == expected


def test_equal_scores_prefer_an_open_core_slot() -> None:
    matches = [
        SimpleNamespace(wardrobe_item_id="a-coat", wardrobe_category=Category.OUTERWEAR, raw_score=0.9),
        SimpleNamespace(wardrobe_item_id="b-shoes", wardrobe_category=Category.SHOES, raw_score=0.9),
        SimpleNamespace(wardrobe_item_id="c-jeans", wardrobe_category=Category.BOTTOMS, raw_score=0.95),
    ]
    ranked = rank_high_matches(Category.TOPS, matches)
    assert [m.wardrobe_item_id for m in ranked] == ["c-jeans", "b-shoes", "a-coat"]
