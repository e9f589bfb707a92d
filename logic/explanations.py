"""Short "why it works" copy for HIGH pairs."""
from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass, replace
from typing import Optional

from logic.pair_scoring import PairEvaluation
from models.suggestion_copy import ExplanationTemplate, templates_for_pair
from models.taxonomy import Tier

logger = logging.getLogger(__name__)

# Shoes pairs read as contentious, so they never get an explanation.
EXPLANATIONS_ALLOW_SHOES = False


@dataclass(frozen=True)
class ExplanationResult:
    allowed: bool
    text: Optional[str] = None
    template_id: Optional[str] = None
    forbidden_reason: Optional[str] = None


def forbidden_reason(evaluation: PairEvaluation) -> Optional[str]:
    if evaluation.both_statement:
        return "statement_statement"
    if evaluation.is_shoes_involved and not EXPLANATIONS_ALLOW_SHOES:
        return "shoes_contentious"
    if "TEXTURE_CLASH" in evaluation.cap_reasons:
        return "texture_clash"
    if evaluation.hard_fail_reason == "STYLE_OPPOSITION_NO_OVERLAP":
        return "style_opposition"
    return None


def _stable_index(evaluation: PairEvaluation, size: int) -> int:
    key = f"{evaluation.scanned_item_id}:{evaluation.wardrobe_item_id}".encode("utf-8")
    return int(hashlib.sha1(key).hexdigest(), 16) % size


def _wants_soft_variant(evaluation: PairEvaluation, template: ExplanationTemplate) -> bool:
    S, F = evaluation.features.S, evaluation.features.F
    strong = (S.known and S.value >= 2) or (F.known and F.value >= 2)
    return strong and template.soft_text is not None


def generate_explanation(evaluation: PairEvaluation) -> ExplanationResult:
    """Pick a template for a HIGH pair; the same pair always gets the same copy."""

    if evaluation.tier != Tier.HIGH:
        return ExplanationResult(allowed=False, forbidden_reason="confidence_too_low")
    reason = forbidden_reason(evaluation)
    if reason:
        return ExplanationResult(allowed=False, forbidden_reason=reason)

    templates = templates_for_pair(evaluation.pair_type)
    if not templates:
        return ExplanationResult(allowed=False, forbidden_reason="no_template_found")
    template = templates[_stable_index(evaluation, len(templates))]
    text = template.soft_text if _wants_soft_variant(evaluation, template) else template.text
    return ExplanationResult(allowed=True, text=text, template_id=template.id)


def with_explanation(evaluation: PairEvaluation) -> PairEvaluation:
    result = generate_explanation(evaluation)
    if not result.allowed:
        logger.debug(
            "No explanation for %s: %s", evaluation.wardrobe_item_id, result.forbidden_reason
        )
    return replace(
        evaluation,
        explanation=result.text,
        explanation_template_id=result.template_id,
        explanation_forbidden_reason=result.forbidden_reason,
    )


__all__ = [
    "EXPLANATIONS_ALLOW_SHOES",
    "ExplanationResult",
    "forbidden_reason",
    "generate_explanation",
    "with_explanation",
]
