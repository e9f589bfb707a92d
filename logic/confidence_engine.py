"""Confidence engine: score a scanned item against every wardrobe item.

``evaluate`` is the single entry point. It profiles both sides, scores each
valid pair, splits the results into HIGH matches and MEDIUM near matches, and
chooses which suggestion mode the results screen should lead with. It is
total: unknown categories, empty wardrobes and unexpected scoring failures
all produce a well-formed :class:`ConfidenceResult`.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Dict, FrozenSet, List, Optional, Sequence, Tuple

from logic.explanations import with_explanation
from logic.item_profiles import profile_scanned_item, profile_wardrobe_item
from logic.pair_scoring import DEFAULT_THRESHOLDS, PairEvaluation, ScoringThresholds, evaluate_pair
from logic.suggestions import (
    MODE_B_NEAR_MATCH_LIMIT,
    SuggestionSet,
    build_mode_a,
    covered_categories,
    filter_mode_a_bullets,
    generate_outfit_mode_b,
    select_near_matches,
)
from match_app.logging_config import log_event
from models.items import ScannedItem, WardrobeItem
from models.slots import required_slots, slot_for_category
from models.style_families import resolve_ui_vibe_for_copy
from models.taxonomy import CORE_CATEGORIES, Category, StyleVibe, Tier

logger = logging.getLogger(__name__)

MODE_A = "A"
MODE_B = "B"


@dataclass(frozen=True)
class ConfidenceResult:
    evaluated: bool
    matches: Tuple[PairEvaluation, ...] = ()
    near_matches: Tuple[PairEvaluation, ...] = ()
    evaluations: Tuple[PairEvaluation, ...] = ()
    show_matches_section: bool = False
    debug_tier: Optional[Tier] = None
    suggestions_mode: str = MODE_A
    mode_a_suggestions: Optional[SuggestionSet] = None
    mode_b_suggestions: Optional[SuggestionSet] = None
    ui_vibe_for_copy: StyleVibe = StyleVibe.CASUAL
    matched_categories: FrozenSet[Category] = frozenset()
    scanned_category: Optional[Category] = None
    diagnostics: Dict[str, object] = field(default_factory=dict)

    @property
    def high_match_count(self) -> int:
        return len(self.matches)

    @property
    def near_match_count(self) -> int:
        return len(self.near_matches)


def outfit_confidence(evaluations: Sequence[PairEvaluation]) -> Tier:
    """Collapse pair tiers into a single outfit-level tier."""

    tiers = [evaluation.tier for evaluation in evaluations]
    high_count = tiers.count(Tier.HIGH)
    if high_count >= 2:
        return Tier.HIGH
    if high_count == 1:
        return Tier.MEDIUM if Tier.LOW in tiers else Tier.HIGH
    return Tier.MEDIUM if Tier.MEDIUM in tiers else Tier.LOW


def rank_high_matches(scanned_category: Category, matches: Sequence[PairEvaluation]) -> List[PairEvaluation]:
    """Rank HIGH matches by score; equal scores favour an unfilled core slot, then id."""

    open_slots = set(required_slots(scanned_category))
    remaining = sorted(matches, key=lambda e: (-e.raw_score, e.wardrobe_item_id))
    ranked: List[PairEvaluation] = []
    while remaining:
        top_score = remaining[0].raw_score
        tied = [e for e in remaining if e.raw_score == top_score]
        pick = next((e for e in tied if slot_for_category(e.wardrobe_category) in open_slots), tied[0])
        ranked.append(pick)
        remaining.remove(pick)
        open_slots.discard(slot_for_category(pick.wardrobe_category))
    return ranked


def _annotate_high(evaluation: PairEvaluation) -> PairEvaluation:
    """Attach explanation copy and core coverage to HIGH pairs."""

    if evaluation.tier != Tier.HIGH:
        return evaluation
    if evaluation.wardrobe_category in CORE_CATEGORIES:
        evaluation = replace(evaluation, matched_categories=frozenset({evaluation.wardrobe_category}))
    return with_explanation(evaluation)


def _not_evaluated(item: ScannedItem, vibe: StyleVibe, reason: str) -> ConfidenceResult:
    mode_a = build_mode_a(None, vibe)
    return ConfidenceResult(
        evaluated=False,
        suggestions_mode=MODE_A,
        mode_a_suggestions=mode_a,
        ui_vibe_for_copy=vibe,
        scanned_category=item.category,
        diagnostics={"reason": reason},
    )


def choose_suggestions_mode(
    wardrobe_count: int, matches: Sequence[PairEvaluation], near_matches: Sequence[PairEvaluation]
) -> str:
    if wardrobe_count == 0 or matches:
        return MODE_A
    if any(evaluation.cap_reasons for evaluation in near_matches):
        return MODE_B
    return MODE_A


def evaluate(
    scanned_item: ScannedItem,
    wardrobe: Sequence[WardrobeItem],
    thresholds: ScoringThresholds = DEFAULT_THRESHOLDS,
) -> ConfidenceResult:
    """Score ``scanned_item`` against ``wardrobe`` and pick the suggestion mode."""

    explicit_family = scanned_item.confidence_signals.style_family if scanned_item.confidence_signals else None
    vibe = resolve_ui_vibe_for_copy(scanned_item.style_tags, scanned_item.style_notes, explicit_family)
    if scanned_item.category is None:
        logger.info("Scanned item %s has no usable category; skipping scoring", scanned_item.id)
        return _not_evaluated(scanned_item, vibe, "unknown_category")
    if not scanned_item.is_fashion_item:
        logger.info("Scanned item %s is not a fashion item; skipping scoring", scanned_item.id)
        return _not_evaluated(scanned_item, vibe, "not_fashion_item")

    try:
        return _evaluate(scanned_item, wardrobe, thresholds, vibe)
    except Exception:  # noqa: BLE001
        log_event(
            logger,
            logging.ERROR,
            "confidence_evaluation_failed",
            scanned_item_id=scanned_item.id,
            wardrobe_count=len(wardrobe),
            exc_info=True,
        )
        return _not_evaluated(scanned_item, vibe, "scoring_error")


def _evaluate(
    scanned_item: ScannedItem,
    wardrobe: Sequence[WardrobeItem],
    thresholds: ScoringThresholds,
    vibe: StyleVibe,
) -> ConfidenceResult:
    category = scanned_item.category
    target = profile_scanned_item(scanned_item)

    evaluations: List[PairEvaluation] = []
    skipped = 0
    for owned in wardrobe:
        if owned.id == scanned_item.id:
            continue
        evaluation = evaluate_pair(target, profile_wardrobe_item(owned), thresholds)
        if evaluation is None:
            skipped += 1
            continue
        evaluations.append(_annotate_high(evaluation))

    matches = rank_high_matches(category, [e for e in evaluations if e.tier == Tier.HIGH])
    near_matches = select_near_matches(evaluations, thresholds)
    matched_categories = frozenset(c for e in matches for c in e.matched_categories)

    mode = choose_suggestions_mode(len(wardrobe), matches, near_matches)
    mode_a = build_mode_a(category, vibe)
    covered = covered_categories(category, matches) if matches else frozenset()
    mode_a = SuggestionSet(
        intro=mode_a.intro,
        bullets=filter_mode_a_bullets(mode_a.bullets, len(wardrobe), covered, vibe),
    )
    mode_b = None
    if near_matches:
        mode_b = generate_outfit_mode_b(near_matches[:MODE_B_NEAR_MATCH_LIMIT], vibe, thresholds)
    if mode == MODE_B and mode_b is None:
        mode = MODE_A

    tier_counts = {tier.value: sum(1 for e in evaluations if e.tier == tier) for tier in Tier}
    diagnostics: Dict[str, object] = {
        "wardrobe_count": len(wardrobe),
        "pairs_scored": len(evaluations),
        "pairs_skipped": skipped,
        "tier_counts": tier_counts,
        "covered_categories": sorted(c.value for c in covered),
    }
    logger.info(
        "Evaluated %s against %s items: %s HIGH, %s near, mode %s",
        scanned_item.id,
        len(wardrobe),
        len(matches),
        len(near_matches),
        mode,
    )
    return ConfidenceResult(
        evaluated=True,
        matches=tuple(matches),
        near_matches=tuple(near_matches),
        evaluations=tuple(evaluations),
        show_matches_section=bool(matches),
        debug_tier=outfit_confidence(evaluations),
        suggestions_mode=mode,
        mode_a_suggestions=mode_a,
        mode_b_suggestions=mode_b,
        ui_vibe_for_copy=vibe,
        matched_categories=matched_categories,
        scanned_category=category,
        diagnostics=diagnostics,
    )


__all__ = [
    "MODE_A",
    "MODE_B",
    "ConfidenceResult",
    "outfit_confidence",
    "rank_high_matches",
    "choose_suggestions_mode",
    "evaluate",
]
