"""Feature signal, pair scoring and gating tests."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from logic.feature_signals import (
    FeatureResult,
    FeatureSignals,
    UNKNOWN,
    color_signal,
    compute_feature_signals,
    formality_signal,
    texture_signal,
    usage_signal,
)
from logic.item_profiles import ConfidenceItem
from logic.pair_scoring import (
    DEFAULT_THRESHOLDS,
    SCORE_EPSILON,
    ScoringThresholds,
    compute_base_score,
    evaluate_gates,
    evaluate_pair,
    gated_score,
    near_match_type,
    redistribute_weights,
)
from models.color_theory import ColorProfile, NEUTRAL_PROFILE
from models.taxonomy import Category, StyleFamily, TextureType, Tier


def _item(
    item_id: str,
    category: Category,
    family: StyleFamily = StyleFamily.MINIMAL,
    formality: int = 3,
    texture: TextureType = TextureType.SOFT,
    color: Optional[ColorProfile] = None,
) -> ConfidenceItem:
    return ConfidenceItem(
        id=item_id,
        category=category,
        color_profile=color or NEUTRAL_PROFILE,
        style_family=family,
        formality_level=formality,
        texture_type=texture,
    )


def _hue(hue: int, saturation: str = "med", value: str = "med") -> ColorProfile:
    return ColorProfile(is_neutral=False, dominant_hue=hue, saturation=saturation, value=value)


def _signals(C: int = 2, S: Optional[int] = 2, F: int = 2, T: Optional[int] = 2, U: int = 2) -> FeatureSignals:
    return FeatureSignals(
        C=FeatureResult(C),
        S=FeatureResult(S) if S is not None else UNKNOWN,
        F=FeatureResult(F),
        T=FeatureResult(T) if T is not None else UNKNOWN,
        U=FeatureResult(U),
    )


@pytest.mark.parametrize(
    "first, second, expected",
    [
        (NEUTRAL_PROFILE, NEUTRAL_PROFILE, 2),
        (NEUTRAL_PROFILE, _hue(200), 1),
        (_hue(0), _hue(20), 2),
        (_hue(0), _hue(40), -2),
        (_hue(0), _hue(160, "high"), 2),
        (_hue(0, "high"), _hue(60, "high"), -2),
        (_hue(0, "low"), _hue(60, "low"), 0),
        (_hue(0, value="low"), _hue(100, value="high"), 1),
    ],
)
def test_color_signal_bands(first: ColorProfile, second: ColorProfile, expected: int) -> None:
    top = _item("a", Category.TOPS, color=first)
    bottom = _item("b", Category.BOTTOMS, color=second)
    assert color_signal(top, bottom).value == expected
    assert color_signal(bottom, top).value == expected


def test_formality_signal_by_gap() -> None:
    values = [formality_signal(_item("a", Category.TOPS, formality=1), _item("b", Category.BOTTOMS, formality=level)).value for level in range(1, 6)]
    assert values == [2, 1, 0, -1, -2]


@pytest.mark.parametrize(
    "first, second, expected",
    [
        (TextureType.SOFT, TextureType.SOFT, 1),
        (TextureType.SMOOTH, TextureType.TEXTURED, 2),
        (TextureType.SOFT, TextureType.STRUCTURED, 2),
        (TextureType.MIXED, TextureType.SMOOTH, 1),
        (TextureType.TEXTURED, TextureType.STRUCTURED, -1),
        (TextureType.SOFT, TextureType.SMOOTH, 0),
    ],
)
def test_texture_signal(first: TextureType, second: TextureType, expected: int) -> None:
    result = texture_signal(_item("a", Category.TOPS, texture=first), _item("b", Category.BOTTOMS, texture=second))
    assert result == FeatureResult(expected)


def test_unknown_style_and_texture_are_flagged_unknown() -> None:
    signals = compute_feature_signals(
        _item("a", Category.TOPS, family=StyleFamily.UNKNOWN, texture=TextureType.UNKNOWN),
        _item("b", Category.BOTTOMS),
    )
    assert not signals.S.known
    assert not signals.T.known
    assert signals.F.known and signals.C.known


def test_usage_signal_blends_formality_and_style() -> None:
    assert usage_signal(FeatureResult(2), FeatureResult(-2)).value == 0
    assert usage_signal(FeatureResult(-2), UNKNOWN).value == -1
    assert usage_signal(FeatureResult(2), FeatureResult(2)).value == 2


def test_redistributed_weights_keep_full_total() -> None:
    weights = redistribute_weights(_signals(S=None, T=None), {"C": 0.2, "S": 0.2, "F": 0.25, "T": 0.15, "U": 0.2})
    assert weights["S"] == 0.0 and weights["T"] == 0.0
    assert sum(weights.values()) == pytest.approx(1.0)


def test_base_score_extremes() -> None:
    assert compute_base_score(_signals(), "tops_bottoms")[0] == pytest.approx(1.0)
    assert compute_base_score(_signals(-2, -2, -2, -2, -2), "tops_shoes")[0] == pytest.approx(0.0)


def test_hard_fail_forces_low_tier() -> None:
    gates = evaluate_gates(_signals(F=-2, U=-1), is_shoes=False)
    assert gates.forced_tier == Tier.LOW
    assert gates.hard_fail_reason == "FORMALITY_CLASH_WITH_USAGE"
    assert gated_score(0.9, gates, False, DEFAULT_THRESHOLDS) == pytest.approx(DEFAULT_THRESHOLDS.medium - SCORE_EPSILON)


def test_caps_collect_every_matching_reason() -> None:
    gates = evaluate_gates(_signals(C=-1, S=None, F=0, T=None, U=1), is_shoes=True)
    assert gates.forced_tier is None
    assert gates.cap_reasons == ("FORMALITY_TENSION", "COLOR_TENSION", "MISSING_KEY_SIGNAL")


def test_perfect_pair_is_high() -> None:
    evaluation = evaluate_pair(
        _item("top", Category.TOPS), _item("jeans", Category.BOTTOMS, texture=TextureType.STRUCTURED)
    )
    assert evaluation.pair_type == "tops_bottoms"
    assert evaluation.base_score == pytest.approx(1.0)
    assert evaluation.tier == Tier.HIGH
    assert not evaluation.cap_reasons


def test_shoes_pair_below_shoe_threshold_is_held_in_medium() -> None:
    evaluation = evaluate_pair(
        _item("top", Category.TOPS),
        _item("loafers", Category.SHOES, formality=4, texture=TextureType.SMOOTH),
    )
    assert evaluation.is_shoes_involved
    assert DEFAULT_THRESHOLDS.high <= evaluation.base_score < DEFAULT_THRESHOLDS.high_shoes
    assert evaluation.raw_score < DEFAULT_THRESHOLDS.high
    assert evaluation.tier == Tier.MEDIUM
    assert near_match_type(evaluation) == "2b"


def test_capped_strong_pair_is_a_type_2a_near_match() -> None:
    evaluation = evaluate_pair(
        _item("top", Category.TOPS, texture=TextureType.UNKNOWN),
        _item("trousers", Category.BOTTOMS, formality=5, texture=TextureType.UNKNOWN),
    )
    assert "FORMALITY_TENSION" in evaluation.cap_reasons
    assert evaluation.base_score >= DEFAULT_THRESHOLDS.high
    assert evaluation.tier == Tier.MEDIUM
    assert near_match_type(evaluation) == "2a"


def test_unpaired_categories_are_skipped() -> None:
    assert evaluate_pair(_item("bag", Category.BAGS), _item("shoe", Category.SHOES)) is None


def test_tier_is_monotone_in_score() -> None:
    """A higher gated score never lands in a lower tier."""

    scores = [step / 100 for step in range(0, 101)]
    ranks = [DEFAULT_THRESHOLDS.tier_for_score(score).rank for score in scores]
    assert ranks == sorted(ranks)


def test_thresholds_must_be_ordered() -> None:
    with pytest.raises(ValueError):
        ScoringThresholds(high=0.5, medium=0.6)
    assert ScoringThresholds().high_for(True) == 0.82
