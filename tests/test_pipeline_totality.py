"""Every stage returns a result for any scanned category and wardrobe shape."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import List, Optional

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from logic.combo_assembler import AssemblyPass, ComboResult, assemble
from logic.confidence_engine import ConfidenceResult, evaluate
from logic.decision_tree import DecisionTreeResult, classify
from logic.render_policy import ResultsRenderModel, build_render_model
from logic.results_tabs import TabsState, build_tabs_state
from models.items import ItemSignals, ScannedItem, WardrobeItem
from models.taxonomy import Category, FitPreference

_COLORS = ("#000000", "#1E3A8A", "#C0392B", "#F5F5DC", "#808080", "#2E8B57", "#FFFFFF", "#8B4513")


def _mixed_wardrobe() -> List[WardrobeItem]:
    return [
        WardrobeItem(
            id=f"w-{category.value}",
            category=category,
            colors=(_COLORS[index % len(_COLORS)],),
            style_tags=("minimal",) if index % 2 else ("street",),
            style_notes=("denim",) if category == Category.BOTTOMS else (),
        )
        for index, category in enumerate(Category)
    ]


@pytest.mark.parametrize("category", list(Category) + [None])
@pytest.mark.parametrize("context_sufficient", [True, False])
@pytest.mark.parametrize("wardrobe_kind", ["empty", "mixed"])
def test_every_stage_returns_for_any_input(
    category: Optional[Category], context_sufficient: bool, wardrobe_kind: str
) -> None:
    wardrobe = _mixed_wardrobe() if wardrobe_kind == "mixed" else []
    scanned = ScannedItem(
        id="scan",
        category=category,
        colors=("#1E3A8A",),
        style_tags=("minimal",),
        context_sufficient=context_sufficient,
        item_signals=ItemSignals(styling_risk="high"),
    )

    confidence = evaluate(scanned, wardrobe)
    decision = classify(category, scanned.item_signals, FitPreference.SLIM, context_sufficient, len(wardrobe))
    high = assemble(scanned, confidence, AssemblyPass.HIGH, wardrobe)
    near = assemble(scanned, confidence, AssemblyPass.HIGH_AND_MEDIUM, wardrobe)
    render = build_render_model(confidence, len(wardrobe), wardrobe)
    tabs = build_tabs_state("scan", confidence, (high, near), wardrobe, category)

    assert isinstance(confidence, ConfidenceResult)
    assert isinstance(decision, DecisionTreeResult)
    assert isinstance(high, ComboResult) and isinstance(near, ComboResult)
    assert isinstance(render, ResultsRenderModel)
    assert isinstance(tabs, TabsState)
    assert confidence.evaluated == (category is not None)
    assert not {e.wardrobe_item_id for e in confidence.matches} & {e.wardrobe_item_id for e in confidence.near_matches}
