"""Mode A ("what to add") and Mode B ("how to make it work") suggestions."""
from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, FrozenSet, Iterable, List, Optional, Sequence, Tuple

from logic.pair_scoring import DEFAULT_THRESHOLDS, PairEvaluation, ScoringThresholds, near_match_type
from models.suggestion_copy import (
    MODE_A_TEMPLATES,
    MODE_B_COPY,
    MODE_B_FALLBACK,
    MODE_B_INTRO,
    mode_a_template_for,
    resolve_bullet_title,
)
from models.taxonomy import Category, StyleVibe, Tier, categories_in_pair

if TYPE_CHECKING:
    from logic.combo_assembler import SlotCandidate

logger = logging.getLogger(__name__)

REASON_PRIORITY: Dict[str, int] = {
    "FORMALITY_TENSION": 5,
    "STYLE_TENSION": 4,
    "COLOR_TENSION": 3,
    "USAGE_MISMATCH": 2,
    "SHOES_CONFIDENCE_DAMPEN": 1,
    "TEXTURE_CLASH": 0,
    "MISSING_KEY_SIGNAL": 0,
}
CAP_REASON_STABLE_ORDER: Tuple[str, ...] = (
    "FORMALITY_TENSION",
    "STYLE_TENSION",
    "COLOR_TENSION",
    "USAGE_MISMATCH",
    "SHOES_CONFIDENCE_DAMPEN",
    "TEXTURE_CLASH",
    "MISSING_KEY_SIGNAL",
)
MODE_B_MAX_BULLETS = 3
MODE_B_MIN_BULLETS = 2
MODE_B_EXCLUDED_REASONS = frozenset({"TEXTURE_CLASH"})
MODE_B_NEAR_MATCH_LIMIT = 5

# Never counted as covered: a matching bag says nothing about the outfit.
_NEVER_COVERED = frozenset({Category.ACCESSORIES, Category.BAGS})


@dataclass(frozen=True)
class Bullet:
    key: str
    text: str
    target: Optional[Category] = None


@dataclass(frozen=True)
class SuggestionSet:
    intro: str
    bullets: Tuple[Bullet, ...]
    reasons_used: Tuple[str, ...] = ()


def select_near_matches(
    evaluations: Iterable[PairEvaluation], thresholds: ScoringThresholds = DEFAULT_THRESHOLDS
) -> List[PairEvaluation]:
    """Return MEDIUM near matches: capped-but-strong (2a) first, then strong MEDIUM (2b)."""

    type_2a: List[PairEvaluation] = []
    type_2b: List[PairEvaluation] = []
    for evaluation in evaluations:
        kind = near_match_type(evaluation, thresholds)
        if kind == "2a":
            type_2a.append(evaluation)
        elif kind == "2b":
            type_2b.append(evaluation)
    order = lambda e: (-e.base_score, e.wardrobe_item_id)  # noqa: E731
    return sorted(type_2a, key=order) + sorted(type_2b, key=order)


def covered_categories(scanned_category: Category, high_matches: Iterable[PairEvaluation]) -> FrozenSet[Category]:
    """Categories that HIGH matches already fill around the scanned item."""

    covered = set()
    for evaluation in high_matches:
        first, second = categories_in_pair(evaluation.pair_type)
        other = second if first == scanned_category else first
        if other not in _NEVER_COVERED:
            covered.add(other)
    return frozenset(covered)


def build_mode_a(category: Optional[Category], vibe: Optional[StyleVibe]) -> SuggestionSet:
    template = mode_a_template_for(category)
    bullets = tuple(Bullet(key=b.key, text=b.resolve(vibe), target=b.target) for b in template.bullets)
    return SuggestionSet(intro=template.intro, bullets=bullets)


def _apply_filter(
    bullets: Sequence[Bullet], wardrobe_count: int, covered: FrozenSet[Category]
) -> List[Bullet]:
    kept = []
    for bullet in bullets:
        if wardrobe_count == 0 and bullet.target is None:
            continue
        if bullet.target is not None and bullet.target in covered:
            continue
        kept.append(bullet)
    return kept


def filter_mode_a_bullets(
    bullets: Sequence[Bullet],
    wardrobe_count: int,
    covered: FrozenSet[Category] = frozenset(),
    vibe: Optional[StyleVibe] = None,
) -> Tuple[Bullet, ...]:
    """Drop bullets for covered categories (and target-less ones for an empty wardrobe).

    Never turns a non-empty list into an empty one: the default template is
    tried next, then the unfiltered input is returned. Applying the filter to
    its own output is a no-op.
    """

    kept = _apply_filter(bullets, wardrobe_count, covered)
    if kept or not bullets:
        return tuple(kept)
    defaults = [Bullet(key=b.key, text=b.resolve(vibe), target=b.target) for b in MODE_A_TEMPLATES["default"].bullets]
    fallback = _apply_filter(defaults, wardrobe_count, covered)
    if fallback:
        logger.debug("Mode A filter emptied %s bullets, using default template", len(bullets))
        return tuple(fallback)
    logger.debug("Mode A filter emptied %s bullets, keeping them unfiltered", len(bullets))
    return tuple(bullets)


def aggregate_cap_reasons(evaluations: Iterable[PairEvaluation]) -> List[str]:
    """Cap reasons across evaluations, most frequent first, ties by priority."""

    counts = Counter(reason for evaluation in evaluations for reason in evaluation.cap_reasons)
    return sorted(counts, key=lambda reason: (-counts[reason], -REASON_PRIORITY.get(reason, 0)))


def build_mode_b_bullets(reasons: Sequence[str], vibe: Optional[StyleVibe]) -> SuggestionSet:
    valid = [reason for reason in reasons if reason not in MODE_B_EXCLUDED_REASONS]
    ordered = sorted(
        valid,
        key=lambda reason: (
            -REASON_PRIORITY.get(reason, 0),
            CAP_REASON_STABLE_ORDER.index(reason) if reason in CAP_REASON_STABLE_ORDER else 999,
        ),
    )

    bullets: List[Bullet] = []
    used: List[str] = []
    for reason in ordered[:MODE_B_MAX_BULLETS]:
        copy = MODE_B_COPY.get(reason)
        if not copy:
            continue
        bullets.append(Bullet(key=copy[0].key, text=resolve_bullet_title(copy[0].key, vibe)))
        used.append(reason)

    if len(bullets) < MODE_B_MIN_BULLETS and not used:
        bullets.append(Bullet(key=MODE_B_FALLBACK.key, text=MODE_B_FALLBACK.resolve(vibe)))
    return SuggestionSet(intro=MODE_B_INTRO, bullets=tuple(bullets), reasons_used=tuple(used))


def _is_uncapped_strong_medium(evaluation: PairEvaluation, thresholds: ScoringThresholds) -> bool:
    return (
        not evaluation.cap_reasons
        and thresholds.near_match_min <= evaluation.base_score < evaluation.high_threshold_used
    )


def generate_outfit_mode_b(
    near_matches: Sequence[PairEvaluation],
    vibe: Optional[StyleVibe],
    thresholds: ScoringThresholds = DEFAULT_THRESHOLDS,
) -> Optional[SuggestionSet]:
    if not near_matches:
        return None
    reasons = aggregate_cap_reasons(near_matches)
    if reasons:
        return build_mode_b_bullets(reasons, vibe)
    if any(_is_uncapped_strong_medium(evaluation, thresholds) for evaluation in near_matches):
        return build_mode_b_bullets(["MISSING_KEY_SIGNAL"], vibe)
    logger.warning("Near matches without cap reasons or strong medium scores: %s", len(near_matches))
    return None


def get_mode_b_bullets(
    selected_candidates: Optional[Sequence[SlotCandidate]],
    near_matches: Sequence[PairEvaluation],
    vibe: Optional[StyleVibe],
    thresholds: ScoringThresholds = DEFAULT_THRESHOLDS,
) -> Optional[SuggestionSet]:
    """Mode B for a selected outfit's MEDIUM slots, else for the aggregate near matches."""

    if selected_candidates:
        medium = [candidate.evaluation for candidate in selected_candidates if candidate.tier == Tier.MEDIUM]
        if medium:
            return generate_outfit_mode_b(medium, vibe, thresholds)
        logger.debug("Selected outfit has no MEDIUM slots, using aggregate near matches")
    return generate_outfit_mode_b(near_matches[:MODE_B_NEAR_MATCH_LIMIT], vibe, thresholds)


__all__ = [
    "REASON_PRIORITY",
    "CAP_REASON_STABLE_ORDER",
    "MODE_B_EXCLUDED_REASONS",
    "MODE_B_NEAR_MATCH_LIMIT",
    "Bullet",
    "SuggestionSet",
    "select_near_matches",
    "covered_categories",
    "build_mode_a",
    "filter_mode_a_bullets",
    "aggregate_cap_reasons",
    "build_mode_b_bullets",
    "generate_outfit_mode_b",
    "get_mode_b_bullets",
]
