"""Deterministic scoring, gating and tiering for a single item pair."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from logic.feature_signals import FeatureSignals, compute_feature_signals
from logic.item_profiles import ConfidenceItem
from models.taxonomy import Category, Tier, pair_type_for

logger = logging.getLogger(__name__)

FEATURE_CODES = ("C", "S", "F", "T", "U")

DEFAULT_WEIGHTS: Dict[str, float] = {"C": 0.20, "S": 0.20, "F": 0.25, "T": 0.15, "U": 0.20}
_SHOES_WEIGHTS: Dict[str, float] = {"C": 0.15, "S": 0.20, "F": 0.25, "T": 0.10, "U": 0.30}
_OUTERWEAR_WEIGHTS: Dict[str, float] = {"C": 0.15, "S": 0.20, "F": 0.20, "T": 0.25, "U": 0.20}

WEIGHTS_BY_PAIR_TYPE: Dict[str, Dict[str, float]] = {
    "tops_bottoms": DEFAULT_WEIGHTS,
    "skirts_tops": DEFAULT_WEIGHTS,
    "tops_shoes": _SHOES_WEIGHTS,
    "bottoms_shoes": _SHOES_WEIGHTS,
    "dresses_shoes": _SHOES_WEIGHTS,
    "skirts_shoes": _SHOES_WEIGHTS,
    "tops_outerwear": _OUTERWEAR_WEIGHTS,
    "bottoms_outerwear": _OUTERWEAR_WEIGHTS,
    "dresses_outerwear": _OUTERWEAR_WEIGHTS,
    "shoes_outerwear": {"C": 0.10, "S": 0.20, "F": 0.25, "T": 0.20, "U": 0.25},
}

HARD_FAIL_REASONS = (
    "FORMALITY_CLASH_WITH_USAGE",
    "STYLE_OPPOSITION_NO_OVERLAP",
    "SHOES_TEXTURE_FORMALITY_CLASH",
)
CAP_REASONS = (
    "FORMALITY_TENSION",
    "STYLE_TENSION",
    "COLOR_TENSION",
    "USAGE_MISMATCH",
    "SHOES_CONFIDENCE_DAMPEN",
    "TEXTURE_CLASH",
    "MISSING_KEY_SIGNAL",
)

# Keeps a gated score strictly below the threshold it was held under.
SCORE_EPSILON = 0.001


@dataclass(frozen=True)
class ScoringThresholds:
    """Tier cut-offs; tunable through :class:`match_app.config.MatchingConfig`."""

    high: float = 0.78
    high_shoes: float = 0.82
    medium: float = 0.58
    near_match_min: float = 0.70

    def __post_init__(self) -> None:
        if not 0.0 <= self.medium < self.high <= self.high_shoes <= 1.0:
            raise ValueError(
                "Thresholds must satisfy 0 <= medium < high <= high_shoes <= 1, "
                f"got medium={self.medium} high={self.high} high_shoes={self.high_shoes}"
            )

    def high_for(self, is_shoes: bool) -> float:
        return self.high_shoes if is_shoes else self.high

    def tier_for_score(self, score: float) -> Tier:
        if score >= self.high:
            return Tier.HIGH
        if score >= self.medium:
            return Tier.MEDIUM
        return Tier.LOW


DEFAULT_THRESHOLDS = ScoringThresholds()


@dataclass(frozen=True)
class GateResult:
    forced_tier: Optional[Tier]
    hard_fail_reason: Optional[str]
    cap_reasons: Tuple[str, ...]


@dataclass(frozen=True)
class PairEvaluation:
    """Outcome of scoring the scanned item against one wardrobe item."""

    scanned_item_id: str
    wardrobe_item_id: str
    wardrobe_category: Category
    pair_type: str
    raw_score: float
    base_score: float
    tier: Tier
    features: FeatureSignals
    weights_used: Dict[str, float]
    high_threshold_used: float
    is_shoes_involved: bool
    both_statement: bool
    forced_tier: Optional[Tier] = None
    hard_fail_reason: Optional[str] = None
    cap_reasons: Tuple[str, ...] = ()
    explanation: Optional[str] = None
    explanation_template_id: Optional[str] = None
    explanation_forbidden_reason: Optional[str] = None
    matched_categories: frozenset = field(default_factory=frozenset)

    @property
    def is_capped(self) -> bool:
        return bool(self.cap_reasons)


def weights_for_pair_type(pair_type: str) -> Dict[str, float]:
    return WEIGHTS_BY_PAIR_TYPE.get(pair_type, DEFAULT_WEIGHTS)


def redistribute_weights(features: FeatureSignals, base_weights: Dict[str, float]) -> Dict[str, float]:
    """Zero unknown features and scale the known ones back up to the full total."""

    signals = features.as_dict()
    known_total = sum(base_weights[code] for code in FEATURE_CODES if signals[code].known)
    unknown_total = sum(base_weights[code] for code in FEATURE_CODES if not signals[code].known)
    if known_total == 0:
        return {code: 0.0 for code in FEATURE_CODES}
    factor = (known_total + unknown_total) / known_total
    return {code: base_weights[code] * factor if signals[code].known else 0.0 for code in FEATURE_CODES}


def compute_base_score(features: FeatureSignals, pair_type: str) -> Tuple[float, Dict[str, float]]:
    """Weighted mean of normalised feature values; 0.5 when nothing is known."""

    weights = redistribute_weights(features, weights_for_pair_type(pair_type))
    signals = features.as_dict()
    weighted_sum = 0.0
    total_weight = 0.0
    for code in FEATURE_CODES:
        weight = weights[code]
        if weight > 0 and signals[code].known:
            weighted_sum += (signals[code].value + 2) / 4 * weight
            total_weight += weight
    if total_weight == 0:
        return 0.5, weights
    return weighted_sum / total_weight, weights


def evaluate_gates(features: FeatureSignals, is_shoes: bool) -> GateResult:
    F, S, T, U, C = features.F, features.S, features.T, features.U, features.C
    hard_fail: Optional[str] = None
    if F.known and F.value == -2 and U.known and U.value <= -1:
        hard_fail = "FORMALITY_CLASH_WITH_USAGE"
    elif S.known and S.value == -2 and U.known and U.value <= -1:
        hard_fail = "STYLE_OPPOSITION_NO_OVERLAP"
    elif is_shoes and T.known and T.value == -2 and F.known and F.value <= -1:
        hard_fail = "SHOES_TEXTURE_FORMALITY_CLASH"
    if hard_fail:
        return GateResult(forced_tier=Tier.LOW, hard_fail_reason=hard_fail, cap_reasons=())

    caps = []
    if F.known and F.value <= 0:
        caps.append("FORMALITY_TENSION")
    if S.known and S.value <= -2:
        caps.append("STYLE_TENSION")
    if C.known and C.value <= -1:
        caps.append("COLOR_TENSION")
    if T.known and T.value == -2:
        caps.append("TEXTURE_CLASH")
    if U.known and U.value == -2:
        caps.append("USAGE_MISMATCH")
    if is_shoes and ((F.known and F.value <= -1) or (S.known and S.value <= -1)):
        caps.append("SHOES_CONFIDENCE_DAMPEN")
    if not S.known and not T.known:
        caps.append("MISSING_KEY_SIGNAL")
    return GateResult(forced_tier=None, hard_fail_reason=None, cap_reasons=tuple(caps))


def gated_score(base_score: float, gates: GateResult, is_shoes: bool, thresholds: ScoringThresholds) -> float:
    """Clamp the base score under the threshold its gates hold it below.

    The returned score maps to the pair's tier through a single monotone step
    function, so a higher score never sits in a lower tier.
    """

    if gates.forced_tier == Tier.LOW:
        return min(base_score, thresholds.medium - SCORE_EPSILON)
    if gates.cap_reasons or (is_shoes and base_score < thresholds.high_shoes):
        return min(base_score, thresholds.high - SCORE_EPSILON)
    return base_score


def evaluate_pair(
    scanned: ConfidenceItem,
    owned: ConfidenceItem,
    thresholds: ScoringThresholds = DEFAULT_THRESHOLDS,
) -> Optional[PairEvaluation]:
    """Score one pair; returns ``None`` when the categories do not form a known pair."""

    pair_type = pair_type_for(scanned.category, owned.category)
    if pair_type is None:
        logger.debug("Skipping %s x %s: no pair type", scanned.category.value, owned.category.value)
        return None

    is_shoes = Category.SHOES in (scanned.category, owned.category)
    features = compute_feature_signals(scanned, owned)
    base_score, weights = compute_base_score(features, pair_type)
    gates = evaluate_gates(features, is_shoes)
    raw_score = gated_score(base_score, gates, is_shoes, thresholds)

    return PairEvaluation(
        scanned_item_id=scanned.id,
        wardrobe_item_id=owned.id,
        wardrobe_category=owned.category,
        pair_type=pair_type,
        raw_score=raw_score,
        base_score=base_score,
        tier=thresholds.tier_for_score(raw_score),
        features=features,
        weights_used=weights,
        high_threshold_used=thresholds.high_for(is_shoes),
        is_shoes_involved=is_shoes,
        both_statement=scanned.is_statement and owned.is_statement,
        forced_tier=gates.forced_tier,
        hard_fail_reason=gates.hard_fail_reason,
        cap_reasons=gates.cap_reasons,
    )


def near_match_type(evaluation: PairEvaluation, thresholds: ScoringThresholds = DEFAULT_THRESHOLDS) -> Optional[str]:
    """Return ``"2a"`` (capped but strong) or ``"2b"`` (strong medium) for near matches."""

    if evaluation.tier != Tier.MEDIUM or evaluation.forced_tier == Tier.LOW:
        return None
    if evaluation.base_score >= evaluation.high_threshold_used and evaluation.cap_reasons:
        return "2a"
    if evaluation.base_score >= thresholds.near_match_min:
        return "2b"
    return None


__all__ = [
    "FEATURE_CODES",
    "DEFAULT_WEIGHTS",
    "WEIGHTS_BY_PAIR_TYPE",
    "HARD_FAIL_REASONS",
    "CAP_REASONS",
    "ScoringThresholds",
    "DEFAULT_THRESHOLDS",
    "GateResult",
    "PairEvaluation",
    "weights_for_pair_type",
    "redistribute_weights",
    "compute_base_score",
    "evaluate_gates",
    "gated_score",
    "evaluate_pair",
    "near_match_type",
]
