"""Assemble complete outfits from scored wardrobe pairs.

The assembler never re-scores anything. It groups the engine's pair
evaluations into slot buckets, fills the standard (top, bottom, shoes) and
dress tracks tier pattern by tier pattern, drops combos that fail the
coherence rules and ranks what is left. When nothing can be formed it says
why, so the results screen can tell the user what to add.
"""
from __future__ import annotations

import functools
import itertools
import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from logic.confidence_engine import ConfidenceResult
from logic.outfit_coherence import filter_incoherent
from logic.pair_scoring import SCORE_EPSILON, PairEvaluation
from models.items import ScannedItem, WardrobeItem
from models.slots import (
    SLOT_TO_CATEGORY,
    Slot,
    categories_for_slot,
    dress_track_slots,
    required_slots,
    slot_for_category,
)
from models.taxonomy import Category, Tier, min_tier

logger = logging.getLogger(__name__)

MAX_CANDIDATES_PER_SLOT = 10
MAX_COMBOS = 12
MAX_REASONS_PER_COMBO = 4


class AssemblyPass(str, Enum):
    """Which candidate tiers an assembly pass may use. LOW never qualifies."""

    HIGH = "HIGH"
    HIGH_AND_MEDIUM = "HIGH_AND_MEDIUM"

    @property
    def allowed_tiers(self) -> Tuple[Tier, ...]:
        if self == AssemblyPass.HIGH:
            return (Tier.HIGH,)
        return (Tier.HIGH, Tier.MEDIUM)


class EmptyReasonKind(str, Enum):
    MISSING_CORE_PIECES = "missingCorePieces"
    MISSING_HIGH_TIER_CORE_PIECES = "missingHighTierCorePieces"
    HAS_ITEMS_BUT_NO_MATCHES = "hasItemsButNoMatches"
    HAS_CORE_PIECES_BUT_NO_COMBOS = "hasCorePiecesButNoCombos"


@dataclass(frozen=True)
class AssemblerSettings:
    max_candidates_per_slot: int = MAX_CANDIDATES_PER_SLOT
    max_combos: int = MAX_COMBOS
    max_reasons_per_combo: int = MAX_REASONS_PER_COMBO

    def __post_init__(self) -> None:
        if self.max_candidates_per_slot < 1 or self.max_combos < 1:
            raise ValueError("Assembler limits must be positive")


DEFAULT_SETTINGS = AssemblerSettings()


@dataclass(frozen=True)
class SlotCandidate:
    item_id: str
    slot: Slot
    tier: Tier
    score: float
    evaluation: PairEvaluation


@dataclass(frozen=True)
class MissingSlot:
    slot: Slot
    category: Category


@dataclass(frozen=True)
class EmptyReason:
    kind: EmptyReasonKind
    missing: Tuple[MissingSlot, ...] = ()
    blocking_categories: Tuple[Category, ...] = ()
    weak_categories: Tuple[Category, ...] = ()


@dataclass(frozen=True)
class AssembledCombo:
    id: str
    candidates: Tuple[SlotCandidate, ...]
    slots: Dict[Slot, str]
    tier_floor: Tier
    avg_score: float
    reasons: Tuple[str, ...] = ()
    optional_outerwear: Optional[SlotCandidate] = None
    coherence_penalty: int = 0
    missing_slots: Tuple[MissingSlot, ...] = ()

    @property
    def needs_tweak_slots(self) -> Tuple[Slot, ...]:
        return tuple(candidate.slot for candidate in self.candidates if candidate.tier == Tier.MEDIUM)

    @property
    def medium_count(self) -> int:
        return len(self.needs_tweak_slots)

    @property
    def item_ids(self) -> Tuple[str, ...]:
        return tuple(candidate.item_id for candidate in self.candidates)


@dataclass(frozen=True)
class ComboResult:
    combos: Tuple[AssembledCombo, ...]
    can_form_combos: bool
    tier_floor: AssemblyPass
    missing_slots: Tuple[MissingSlot, ...] = ()
    missing_message: Optional[str] = None
    empty_reason: Optional[EmptyReason] = None
    candidates_by_slot: Dict[Slot, Tuple[SlotCandidate, ...]] = field(default_factory=dict)
    diagnostics: Dict[str, object] = field(default_factory=dict)


def _compare_candidates(a: SlotCandidate, b: SlotCandidate) -> int:
    if a.tier != b.tier:
        return b.tier.rank - a.tier.rank
    if abs(a.score - b.score) > SCORE_EPSILON:
        return -1 if a.score > b.score else 1
    return (a.item_id > b.item_id) - (a.item_id < b.item_id)


def build_candidates_by_slot(
    scanned_category: Category,
    evaluations: Iterable[PairEvaluation],
    assembly_pass: AssemblyPass,
    settings: AssemblerSettings = DEFAULT_SETTINGS,
) -> Dict[Slot, Tuple[SlotCandidate, ...]]:
    """Bucket pass-eligible evaluations by the slot their wardrobe item fills."""

    scanned_slot = slot_for_category(scanned_category)
    buckets: Dict[Slot, List[SlotCandidate]] = {slot: [] for slot in Slot}
    for evaluation in evaluations:
        if evaluation.tier not in assembly_pass.allowed_tiers:
            continue
        slot = slot_for_category(evaluation.wardrobe_category)
        if slot is None or slot == scanned_slot:
            continue
        buckets[slot].append(
            SlotCandidate(
                item_id=evaluation.wardrobe_item_id,
                slot=slot,
                tier=evaluation.tier,
                score=evaluation.raw_score,
                evaluation=evaluation,
            )
        )
    return {
        slot: tuple(sorted(items, key=functools.cmp_to_key(_compare_candidates))[: settings.max_candidates_per_slot])
        for slot, items in buckets.items()
    }


@functools.lru_cache(maxsize=None)
def tier_patterns(slot_count: int, tiers: Tuple[Tier, ...]) -> Tuple[Tuple[Tier, ...], ...]:
    """Every tier assignment for ``slot_count`` slots, most HIGH slots first."""

    patterns = itertools.product(tiers, repeat=slot_count)
    return tuple(sorted(patterns, key=lambda p: (-p.count(Tier.HIGH), p.count(Tier.MEDIUM))))


def combo_id_for(item_ids: Iterable[str]) -> str:
    return "_".join(sorted(item_ids))


def _combo_reasons(candidates: Sequence[SlotCandidate], limit: int) -> Tuple[str, ...]:
    reasons: List[str] = []
    for candidate in candidates:
        text = candidate.evaluation.explanation
        if text and text not in reasons:
            reasons.append(text)
    return tuple(reasons[:limit])


def _build_combo(candidates: Sequence[SlotCandidate], max_reasons: int) -> AssembledCombo:
    return AssembledCombo(
        id=combo_id_for(c.item_id for c in candidates),
        candidates=tuple(candidates),
        slots={c.slot: c.item_id for c in candidates},
        tier_floor=min_tier(c.tier for c in candidates),
        avg_score=sum(c.score for c in candidates) / len(candidates),
        reasons=_combo_reasons(candidates, max_reasons),
    )


def floor_budget(assembly_pass: AssemblyPass, max_combos: int) -> Dict[Tier, int]:
    """A separate combo allowance for each outfit floor the pass can produce."""

    return {tier: max_combos for tier in assembly_pass.allowed_tiers}


def generate_track_combos(
    candidates_by_slot: Dict[Slot, Tuple[SlotCandidate, ...]],
    slots: Sequence[Slot],
    assembly_pass: AssemblyPass,
    seen_ids: Set[str],
    budget: Dict[Tier, int],
    max_reasons: int = MAX_REASONS_PER_COMBO,
) -> List[AssembledCombo]:
    """Fill ``slots`` pattern by pattern, drawing on ``budget`` per outfit floor.

    All-HIGH patterns come first but only spend the HIGH allowance, so a
    wardrobe full of strong pieces still leaves room for MEDIUM-floor combos.
    """

    if not slots or any(not candidates_by_slot.get(slot) for slot in slots):
        return []

    combos: List[AssembledCombo] = []
    for pattern in tier_patterns(len(slots), assembly_pass.allowed_tiers):
        floor = min_tier(pattern)
        if budget.get(floor, 0) <= 0:
            continue
        buckets = [
            [c for c in candidates_by_slot[slot] if c.tier == tier] for slot, tier in zip(slots, pattern)
        ]
        if any(not bucket for bucket in buckets):
            continue
        for picked in itertools.product(*buckets):
            if budget[floor] <= 0:
                break
            item_ids = [c.item_id for c in picked]
            if len(set(item_ids)) != len(item_ids):
                continue
            combo = _build_combo(picked, max_reasons)
            if combo.id in seen_ids:
                continue
            seen_ids.add(combo.id)
            combos.append(combo)
            budget[floor] -= 1
    return combos


def best_outerwear(candidates: Sequence[SlotCandidate]) -> Optional[SlotCandidate]:
    eligible = [c for c in candidates if c.tier != Tier.LOW]
    if not eligible:
        return None
    return sorted(eligible, key=functools.cmp_to_key(_compare_candidates))[0]


def _compare_combos(a: AssembledCombo, b: AssembledCombo) -> int:
    if a.tier_floor != b.tier_floor:
        return b.tier_floor.rank - a.tier_floor.rank
    if a.coherence_penalty != b.coherence_penalty:
        return a.coherence_penalty - b.coherence_penalty
    if a.medium_count != b.medium_count:
        return a.medium_count - b.medium_count
    if abs(a.avg_score - b.avg_score) > SCORE_EPSILON:
        return -1 if a.avg_score > b.avg_score else 1
    return (a.id > b.id) - (a.id < b.id)


def rank_combos(combos: Iterable[AssembledCombo]) -> List[AssembledCombo]:
    return sorted(combos, key=functools.cmp_to_key(_compare_combos))


def diversity_slot_for(scanned_category: Optional[Category]) -> Slot:
    return Slot.BOTTOM if scanned_category == Category.SHOES else Slot.SHOES


def _bucket_key(combo: AssembledCombo, slot: Slot) -> Optional[str]:
    if slot == Slot.BOTTOM:
        return combo.slots.get(Slot.BOTTOM) or combo.slots.get(Slot.DRESS)
    return combo.slots.get(slot)


def diversify(combos: Sequence[AssembledCombo], diversity_slot: Slot) -> List[AssembledCombo]:
    """Reorder ranked combos so distinct items in ``diversity_slot`` come first.

    The first pass keeps combos whose bucket item has not been seen yet (combos
    without the slot always pass); the second appends the rest in rank order.
    """

    first: List[AssembledCombo] = []
    seen: Set[str] = set()
    for combo in combos:
        key = _bucket_key(combo, diversity_slot)
        if key is None:
            first.append(combo)
        elif key not in seen:
            seen.add(key)
            first.append(combo)
    taken = {combo.id for combo in first}
    return first + [combo for combo in combos if combo.id not in taken]


def join_and(values: Sequence[str]) -> str:
    if len(values) <= 1:
        return "".join(values)
    return f"{', '.join(values[:-1])} and {values[-1]}"


def missing_message(missing: Sequence[MissingSlot]) -> Optional[str]:
    if not missing:
        return None
    return f"Add {join_and([m.category.value for m in missing])} to see outfit ideas"


def wardrobe_category_counts(
    wardrobe: Iterable[WardrobeItem], evaluations: Iterable[PairEvaluation] = ()
) -> Dict[Category, int]:
    """Count wardrobe items per category, from evaluations when no wardrobe is given."""

    counts: Dict[Category, int] = {}
    items = list(wardrobe)
    categories = [item.category for item in items] if items else [e.wardrobe_category for e in evaluations]
    for category in categories:
        counts[category] = counts.get(category, 0) + 1
    return counts


def wardrobe_has_slot(slot: Slot, counts: Dict[Category, int]) -> bool:
    return any(counts.get(category, 0) > 0 for category in categories_for_slot(slot))


def classify_empty_reason(
    slots: Sequence[Slot],
    candidates_by_slot: Dict[Slot, Tuple[SlotCandidate, ...]],
    counts: Dict[Category, int],
) -> EmptyReason:
    """Explain an empty combo list; the first two kinds never overlap."""

    absent = tuple(MissingSlot(slot, SLOT_TO_CATEGORY[slot]) for slot in slots if not wardrobe_has_slot(slot, counts))
    if absent:
        return EmptyReason(EmptyReasonKind.MISSING_CORE_PIECES, missing=absent)
    unfilled = tuple(MissingSlot(slot, SLOT_TO_CATEGORY[slot]) for slot in slots if not candidates_by_slot.get(slot))
    if unfilled:
        return EmptyReason(EmptyReasonKind.MISSING_HIGH_TIER_CORE_PIECES, missing=unfilled)
    return EmptyReason(EmptyReasonKind.HAS_CORE_PIECES_BUT_NO_COMBOS)


def _empty_result(assembly_pass: AssemblyPass, reason: str) -> ComboResult:
    return ComboResult(combos=(), can_form_combos=False, tier_floor=assembly_pass, diagnostics={"reason": reason})


def assemble(
    scanned_item: ScannedItem,
    confidence_result: ConfidenceResult,
    tier_floor: AssemblyPass = AssemblyPass.HIGH_AND_MEDIUM,
    wardrobe: Sequence[WardrobeItem] = (),
    settings: Optional[AssemblerSettings] = None,
) -> ComboResult:
    """Assemble ranked outfits for one pass over the engine's evaluations."""

    settings = settings or DEFAULT_SETTINGS
    assembly_pass = AssemblyPass(tier_floor)
    category = scanned_item.category
    if category is None or not confidence_result.evaluated:
        return _empty_result(assembly_pass, "not_evaluated")

    evaluations = confidence_result.evaluations
    candidates = build_candidates_by_slot(category, evaluations, assembly_pass, settings)
    standard = required_slots(category)
    dress = dress_track_slots(category)
    standard_missing = tuple(
        MissingSlot(slot, SLOT_TO_CATEGORY[slot]) for slot in standard if not candidates[slot]
    )
    dress_possible = bool(dress) and all(candidates[slot] for slot in dress)

    seen: Set[str] = set()
    budget = floor_budget(assembly_pass, settings.max_combos)
    combos = generate_track_combos(candidates, standard, assembly_pass, seen, budget, settings.max_reasons_per_combo)
    if dress and any(remaining > 0 for remaining in budget.values()):
        combos += generate_track_combos(candidates, dress, assembly_pass, seen, budget, settings.max_reasons_per_combo)
    generated = len(combos)

    if category != Category.OUTERWEAR:
        outerwear = best_outerwear(candidates[Slot.OUTERWEAR])
        if outerwear is not None:
            combos = [replace(combo, optional_outerwear=outerwear) for combo in combos]

    filtered = filter_incoherent([(combo.id, combo.slots) for combo in combos], wardrobe)
    kept_ids = set(filtered.combo_ids)
    combos = [
        replace(combo, coherence_penalty=filtered.penalty_by_id.get(combo.id, 0))
        for combo in combos
        if combo.id in kept_ids
    ]
    ranked = tuple(rank_combos(combos))

    missing = () if dress_possible else standard_missing
    empty_reason = None
    if not ranked:
        counts = wardrobe_category_counts(wardrobe, evaluations)
        empty_reason = classify_empty_reason(standard if not dress_possible else dress, candidates, counts)

    diagnostics: Dict[str, object] = {
        "candidates": {slot.value: len(items) for slot, items in candidates.items()},
        "generated": generated,
        "coherence_rejected": filtered.rejected_count,
        "rejections_by_reason": filtered.rejections_by_reason,
    }
    logger.info(
        "Assembled %s combos for %s (%s pass, %s rejected by coherence)",
        len(ranked),
        scanned_item.id,
        assembly_pass.value,
        filtered.rejected_count,
    )
    return ComboResult(
        combos=ranked,
        can_form_combos=bool(ranked),
        tier_floor=assembly_pass,
        missing_slots=missing,
        missing_message=missing_message(missing),
        empty_reason=empty_reason,
        candidates_by_slot=candidates,
        diagnostics=diagnostics,
    )


__all__ = [
    "MAX_CANDIDATES_PER_SLOT",
    "MAX_COMBOS",
    "AssemblyPass",
    "AssemblerSettings",
    "DEFAULT_SETTINGS",
    "SlotCandidate",
    "MissingSlot",
    "EmptyReasonKind",
    "EmptyReason",
    "AssembledCombo",
    "ComboResult",
    "build_candidates_by_slot",
    "tier_patterns",
    "combo_id_for",
    "floor_budget",
    "generate_track_combos",
    "best_outerwear",
    "rank_combos",
    "diversity_slot_for",
    "diversify",
    "join_and",
    "missing_message",
    "wardrobe_category_counts",
    "wardrobe_has_slot",
    "classify_empty_reason",
    "assemble",
]
