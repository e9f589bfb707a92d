"""Rule cascade that classifies a scanned item into a verdict.

The cascade is an ordered tuple of rules; the first rule whose predicate holds
decides the outcome. Rules are not mutually exclusive, so their order is part
of the contract.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional, Sequence, Tuple

from models.items import ItemSignals
from models.taxonomy import CATEGORY_NOUNS, Category, FitPreference, StylingRisk

logger = logging.getLogger(__name__)


class OutcomeState(str, Enum):
    LOOKS_LIKE_GOOD_MATCH = "looks_like_good_match"
    COULD_WORK_WITH_PIECES = "could_work_with_pieces"
    MIGHT_FEEL_TRICKY = "might_feel_tricky"
    NEEDS_MORE_CONTEXT = "needs_more_context"
    SAVED_TO_REVISIT = "saved_to_revisit"


class VerdictUIState(str, Enum):
    GREAT = "great"
    OKAY = "okay"
    RISKY = "risky"
    CONTEXT_NEEDED = "context_needed"


class PreferenceAlignment(str, Enum):
    ALIGNED = "aligned"
    NEUTRAL = "neutral"
    MISALIGNED = "misaligned"


@dataclass(frozen=True)
class DecisionInputs:
    category: Optional[Category]
    styling_risk: StylingRisk
    alignment: PreferenceAlignment
    context_sufficient: bool
    wardrobe_count: int


@dataclass(frozen=True)
class DecisionTreeResult:
    outcome: OutcomeState
    explanation: str
    verdict_ui_state: VerdictUIState
    preference_alignment: PreferenceAlignment
    styling_risk: StylingRisk
    show_fit_section: bool
    reason_code: Optional[str] = None
    rule: Optional[str] = None


Rule = Tuple[str, Callable[[DecisionInputs], bool], OutcomeState]

RULES: Tuple[Rule, ...] = (
    ("context_insufficient", lambda i: not i.context_sufficient, OutcomeState.NEEDS_MORE_CONTEXT),
    (
        "high_risk_misaligned",
        lambda i: i.styling_risk == StylingRisk.HIGH and i.alignment == PreferenceAlignment.MISALIGNED,
        OutcomeState.MIGHT_FEEL_TRICKY,
    ),
    (
        "empty_wardrobe_or_medium_risk",
        lambda i: i.wardrobe_count == 0 or i.styling_risk == StylingRisk.MEDIUM,
        OutcomeState.COULD_WORK_WITH_PIECES,
    ),
    ("default", lambda i: True, OutcomeState.LOOKS_LIKE_GOOD_MATCH),
)

OUTCOME_TO_VERDICT: Dict[OutcomeState, VerdictUIState] = {
    OutcomeState.LOOKS_LIKE_GOOD_MATCH: VerdictUIState.GREAT,
    OutcomeState.COULD_WORK_WITH_PIECES: VerdictUIState.OKAY,
    OutcomeState.SAVED_TO_REVISIT: VerdictUIState.OKAY,
    OutcomeState.MIGHT_FEEL_TRICKY: VerdictUIState.RISKY,
    OutcomeState.NEEDS_MORE_CONTEXT: VerdictUIState.CONTEXT_NEEDED,
}

# Fixed inverse used to restore an outcome when a saved scan is unsaved.
VERDICT_TO_OUTCOME: Dict[VerdictUIState, OutcomeState] = {
    VerdictUIState.GREAT: OutcomeState.LOOKS_LIKE_GOOD_MATCH,
    VerdictUIState.OKAY: OutcomeState.COULD_WORK_WITH_PIECES,
    VerdictUIState.RISKY: OutcomeState.MIGHT_FEEL_TRICKY,
    VerdictUIState.CONTEXT_NEEDED: OutcomeState.NEEDS_MORE_CONTEXT,
}

EXPLANATIONS: Dict[Tuple[OutcomeState, str], str] = {
    (OutcomeState.LOOKS_LIKE_GOOD_MATCH, "default"): (
        "This {noun} aligns well with your fit preferences and should be easy to style with your wardrobe."
    ),
    (OutcomeState.COULD_WORK_WITH_PIECES, "empty_wardrobe"): (
        "Add some items to your wardrobe for more personalized guidance on this {noun}."
    ),
    (OutcomeState.COULD_WORK_WITH_PIECES, "neutral_preference"): (
        "This {noun} could work well with the right styling choices from your wardrobe."
    ),
    (OutcomeState.COULD_WORK_WITH_PIECES, "medium_risk"): (
        "With thoughtful pairing, this {noun} could integrate nicely into your wardrobe."
    ),
    (OutcomeState.COULD_WORK_WITH_PIECES, "default"): (
        "This {noun} could work with the right pieces from your wardrobe."
    ),
    (OutcomeState.MIGHT_FEEL_TRICKY, "high_risk"): (
        "This {noun} may require more deliberate styling effort to make it work."
    ),
    (OutcomeState.MIGHT_FEEL_TRICKY, "misaligned"): (
        "This {noun} differs from your usual fit preference, so it may need more thought to style."
    ),
    (OutcomeState.MIGHT_FEEL_TRICKY, "default"): "This {noun} might take some extra thought to style well.",
    (OutcomeState.NEEDS_MORE_CONTEXT, "default"): (
        "We couldn't get a clear read on this {noun}. Try a sharper, well-lit photo."
    ),
    (OutcomeState.SAVED_TO_REVISIT, "default"): "Saved for later consideration.",
}

_NO_FIT_SECTION = frozenset({Category.ACCESSORIES, Category.BAGS})


def item_silhouette(category: Optional[Category], signals: Optional[ItemSignals]) -> Optional[str]:
    """Collapse category-specific shape signals into fitted/relaxed/oversized."""

    if category is None or signals is None:
        return None
    if category == Category.TOPS:
        return signals.silhouette_volume
    if category == Category.DRESSES and signals.dress_silhouette:
        return "fitted" if signals.dress_silhouette == "structured" else signals.dress_silhouette
    if category == Category.BOTTOMS and signals.leg_shape:
        return {"slim": "fitted", "straight": "relaxed", "wide": "oversized"}[signals.leg_shape]
    if category == Category.OUTERWEAR:
        if signals.structure == "structured" and signals.bulk == "low":
            return "fitted"
        if signals.bulk == "high":
            return "oversized"
        return "relaxed"
    if category == Category.SKIRTS:
        return "fitted" if signals.skirt_volume == "straight" else "relaxed"
    return None


def preference_alignment(
    category: Optional[Category], signals: Optional[ItemSignals], preference: FitPreference
) -> PreferenceAlignment:
    silhouette = item_silhouette(category, signals)
    if silhouette is None:
        return PreferenceAlignment.NEUTRAL
    if preference == FitPreference.REGULAR:
        return PreferenceAlignment.ALIGNED if silhouette == "relaxed" else PreferenceAlignment.NEUTRAL
    if preference == FitPreference.SLIM:
        return {
            "fitted": PreferenceAlignment.ALIGNED,
            "relaxed": PreferenceAlignment.NEUTRAL,
            "oversized": PreferenceAlignment.MISALIGNED,
        }[silhouette]
    if silhouette in ("oversized", "relaxed"):
        return PreferenceAlignment.ALIGNED
    return PreferenceAlignment.MISALIGNED


def resolve_outcome(inputs: DecisionInputs, rules: Sequence[Rule] = RULES) -> Tuple[str, OutcomeState]:
    for name, predicate, outcome in rules:
        if predicate(inputs):
            return name, outcome
    raise ValueError("Decision rules must end with a catch-all rule")


def okay_reason_code(inputs: DecisionInputs) -> str:
    if inputs.alignment == PreferenceAlignment.NEUTRAL:
        return "OK_NEUTRAL_PREFERENCE"
    if inputs.styling_risk == StylingRisk.MEDIUM:
        return "OK_MEDIUM_RISK"
    if inputs.wardrobe_count == 0:
        return "OK_LOW_WARDROBE_DATA"
    return "OK_NEEDS_STYLING"


def verdict_for_outcome(outcome: OutcomeState, inputs: DecisionInputs) -> Tuple[VerdictUIState, Optional[str]]:
    verdict = OUTCOME_TO_VERDICT[outcome]
    if outcome == OutcomeState.NEEDS_MORE_CONTEXT:
        return verdict, "OK_CONTEXT_INSUFFICIENT"
    if outcome == OutcomeState.COULD_WORK_WITH_PIECES:
        return verdict, okay_reason_code(inputs)
    return verdict, None


def outcome_for_verdict(state: VerdictUIState) -> OutcomeState:
    """Representative outcome for a verdict, without re-running the rules."""

    return VERDICT_TO_OUTCOME[VerdictUIState(state)]


def _explanation_flag(outcome: OutcomeState, inputs: DecisionInputs) -> str:
    if outcome == OutcomeState.COULD_WORK_WITH_PIECES:
        if inputs.wardrobe_count == 0:
            return "empty_wardrobe"
        if inputs.alignment == PreferenceAlignment.NEUTRAL:
            return "neutral_preference"
        if inputs.styling_risk == StylingRisk.MEDIUM:
            return "medium_risk"
    if outcome == OutcomeState.MIGHT_FEEL_TRICKY:
        if inputs.styling_risk == StylingRisk.HIGH:
            return "high_risk"
        if inputs.alignment == PreferenceAlignment.MISALIGNED:
            return "misaligned"
    return "default"


def build_explanation(
    outcome: OutcomeState, inputs: DecisionInputs, style_notes: Sequence[str] = ()
) -> str:
    noun = CATEGORY_NOUNS[inputs.category][0] if inputs.category else "piece"
    template = EXPLANATIONS.get((outcome, _explanation_flag(outcome, inputs)), EXPLANATIONS[(outcome, "default")])
    text = template.format(noun=noun)
    if style_notes and outcome in (OutcomeState.LOOKS_LIKE_GOOD_MATCH, OutcomeState.COULD_WORK_WITH_PIECES):
        text = f"{text} Its {style_notes[0].lower()} feel is the thing to build around."
    return text


def classify(
    category: Optional[Category],
    item_signals: Optional[ItemSignals],
    user_fit_preference: Optional[FitPreference],
    context_sufficient: bool,
    wardrobe_count: int,
    style_notes: Sequence[str] = (),
) -> DecisionTreeResult:
    """Classify a scanned item; deterministic and total over its inputs."""

    preference = user_fit_preference or FitPreference.REGULAR
    risk = item_signals.styling_risk if item_signals else StylingRisk.MEDIUM
    inputs = DecisionInputs(
        category=category,
        styling_risk=risk,
        alignment=preference_alignment(category, item_signals, preference),
        context_sufficient=context_sufficient,
        wardrobe_count=max(0, wardrobe_count),
    )
    rule, outcome = resolve_outcome(inputs)
    verdict, reason_code = verdict_for_outcome(outcome, inputs)
    logger.debug("Decision rule %s -> %s (%s)", rule, outcome.value, verdict.value)
    return DecisionTreeResult(
        outcome=outcome,
        explanation=build_explanation(outcome, inputs, style_notes),
        verdict_ui_state=verdict,
        preference_alignment=inputs.alignment,
        styling_risk=risk,
        show_fit_section=category not in _NO_FIT_SECTION,
        reason_code=reason_code,
        rule=rule,
    )


__all__ = [
    "OutcomeState",
    "VerdictUIState",
    "PreferenceAlignment",
    "DecisionInputs",
    "DecisionTreeResult",
    "RULES",
    "OUTCOME_TO_VERDICT",
    "VERDICT_TO_OUTCOME",
    "item_silhouette",
    "preference_alignment",
    "resolve_outcome",
    "okay_reason_code",
    "verdict_for_outcome",
    "outcome_for_verdict",
    "build_explanation",
    "classify",
]
