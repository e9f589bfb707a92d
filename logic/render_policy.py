"""Pure projection from a confidence result to what the results screen shows."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from logic.confidence_engine import MODE_A, MODE_B, ConfidenceResult
from logic.pair_scoring import PairEvaluation
from logic.suggestions import Bullet, SuggestionSet
from models.items import WardrobeItem

logger = logging.getLogger(__name__)


class UiState(str, Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class MatchesVariant(str, Enum):
    MATCHES = "matches"
    NEAR_MATCHES = "near-matches"
    EMPTY_CTA = "empty-cta"
    HIDDEN = "hidden"


# (title, intro) for the suggestions section per UI state.
SECTION_COPY: Dict[UiState, Tuple[str, str]] = {
    UiState.HIGH: ("If you want to expand this look", "Optional ideas to try:"),
    UiState.MEDIUM: ("To make this work", "To make this pairing work:"),
    UiState.LOW: ("What would help", "To make this easier to style:"),
}


@dataclass(frozen=True)
class EnrichedMatch:
    evaluation: PairEvaluation
    wardrobe_item: WardrobeItem


@dataclass(frozen=True)
class MatchesSection:
    visible: bool
    variant: MatchesVariant
    matches: Tuple[PairEvaluation, ...] = ()
    near_matches: Tuple[EnrichedMatch, ...] = ()


@dataclass(frozen=True)
class SuggestionsSection:
    visible: bool
    mode: str
    title: str
    intro: str
    bullets: Tuple[Bullet, ...] = ()


@dataclass(frozen=True)
class ResultsRenderModel:
    ui_state: UiState
    matches_section: MatchesSection
    suggestions_section: SuggestionsSection
    show_rescan_cta: bool


def ui_state_for(result: ConfidenceResult) -> UiState:
    if not result.evaluated:
        return UiState.LOW
    if result.high_match_count > 0:
        return UiState.HIGH
    if result.near_match_count > 0:
        return UiState.MEDIUM
    return UiState.LOW


def enrich_near_matches(
    near_matches: Sequence[PairEvaluation], wardrobe: Sequence[WardrobeItem]
) -> List[EnrichedMatch]:
    """Join near matches to their wardrobe items, dropping any that are gone."""

    by_id = {item.id: item for item in wardrobe}
    enriched = [
        EnrichedMatch(evaluation=e, wardrobe_item=by_id[e.wardrobe_item_id])
        for e in near_matches
        if e.wardrobe_item_id in by_id
    ]
    dropped = len(near_matches) - len(enriched)
    if dropped:
        logger.debug("Dropped %s near matches without a wardrobe item", dropped)
    return sorted(enriched, key=lambda m: (-m.evaluation.raw_score, m.evaluation.pair_type))


def _pick_suggestions(result: ConfidenceResult, ui_state: UiState) -> Tuple[str, Optional[SuggestionSet]]:
    if ui_state == UiState.MEDIUM and result.mode_b_suggestions and result.mode_b_suggestions.bullets:
        return MODE_B, result.mode_b_suggestions
    return MODE_A, result.mode_a_suggestions


def _check_invariants(result: ConfidenceResult, model: ResultsRenderModel) -> None:
    if result.high_match_count != len(result.matches):
        logger.warning("HIGH match count %s differs from matches %s", result.high_match_count, len(result.matches))
    if model.ui_state == UiState.HIGH and not result.matches:
        logger.warning("UI state is HIGH without any HIGH matches")
    if model.suggestions_section.visible and not model.suggestions_section.bullets:
        logger.warning("Suggestions section is visible with no bullets")
    if model.show_rescan_cta and (model.matches_section.visible or model.suggestions_section.visible):
        logger.warning("Rescan CTA shown alongside visible sections")


def build_render_model(
    confidence_result: ConfidenceResult, wardrobe_count: int, wardrobe: Sequence[WardrobeItem] = ()
) -> ResultsRenderModel:
    """Decide section visibility, variants and copy for the results screen."""

    ui_state = ui_state_for(confidence_result)
    enriched = enrich_near_matches(confidence_result.near_matches, wardrobe)
    evaluated = confidence_result.evaluated

    matches_visible = evaluated and (confidence_result.high_match_count > 0 or bool(enriched))
    if ui_state == UiState.HIGH:
        variant = MatchesVariant.MATCHES
    elif matches_visible:
        variant = MatchesVariant.NEAR_MATCHES
    elif wardrobe_count == 0:
        variant = MatchesVariant.EMPTY_CTA
    else:
        variant = MatchesVariant.HIDDEN

    mode, suggestions = _pick_suggestions(confidence_result, ui_state)
    title, intro = SECTION_COPY[ui_state]
    bullets = suggestions.bullets if suggestions else ()
    suggestions_section = SuggestionsSection(
        visible=bool(bullets), mode=mode, title=title, intro=intro, bullets=tuple(bullets)
    )

    model = ResultsRenderModel(
        ui_state=ui_state,
        matches_section=MatchesSection(
            visible=matches_visible,
            variant=variant,
            matches=tuple(confidence_result.matches),
            near_matches=tuple(enriched),
        ),
        suggestions_section=suggestions_section,
        show_rescan_cta=evaluated and wardrobe_count > 0 and not (matches_visible or suggestions_section.visible),
    )
    _check_invariants(confidence_result, model)
    return model


__all__ = [
    "UiState",
    "MatchesVariant",
    "SECTION_COPY",
    "EnrichedMatch",
    "MatchesSection",
    "SuggestionsSection",
    "ResultsRenderModel",
    "ui_state_for",
    "enrich_near_matches",
    "build_render_model",
]
