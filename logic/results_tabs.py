"""Tabs controller for the results screen ("Wear now" and "Worth trying").

``build_tabs_state`` projects engine and assembler output into two tabs that
each carry their matches, their outfits and, when there are no outfits, an
empty reason with user-facing copy. ``TabSelection`` and its helpers track
the active tab and the selected outfit between renders.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple, Union

from logic.combo_assembler import (
    AssembledCombo,
    ComboResult,
    EmptyReason,
    EmptyReasonKind,
    MissingSlot,
    SlotCandidate,
    diversify,
    diversity_slot_for,
    join_and,
    wardrobe_category_counts,
    wardrobe_has_slot,
)
from logic.confidence_engine import ConfidenceResult
from logic.pair_scoring import PairEvaluation
from memory.tab_memory import TabMemory
from models.items import WardrobeItem
from models.slots import SLOT_TO_CATEGORY, Slot, dress_track_slots, required_slots
from models.taxonomy import CORE_CATEGORIES, Category, Tier

logger = logging.getLogger(__name__)

MAX_OUTFITS_SINGLE_TAB = 5
MAX_OUTFITS_BOTH_TABS = 3
WEAK_BEST_SCORE_THRESHOLD = 0.70
WEAK_MIN_MEDIUM_COUNT = 2

# Shoes most often gate a "wear now" outfit, then the lower half.
SLOT_PRIORITY: Tuple[Slot, ...] = (Slot.SHOES, Slot.BOTTOM, Slot.DRESS, Slot.TOP)
SLOT_NOUN: Dict[Slot, str] = {Slot.SHOES: "shoe", Slot.BOTTOM: "bottom", Slot.TOP: "top", Slot.DRESS: "dress"}

NO_COMBOS_MESSAGE = "No outfit combinations found yet."

ComboInput = Union[ComboResult, Tuple[ComboResult, ComboResult]]


class ResultsTab(str, Enum):
    HIGH = "high"
    NEAR = "near"


class SlotQuality(str, Enum):
    BLOCKING = "blocking"
    WEAK = "weak"
    CONFIDENT = "confident"


@dataclass(frozen=True)
class TabContent:
    matches: Tuple[PairEvaluation, ...] = ()
    near_matches: Tuple[PairEvaluation, ...] = ()
    outfits: Tuple[AssembledCombo, ...] = ()
    outfit_empty_reason: Optional[EmptyReason] = None
    missing_message: Optional[str] = None


@dataclass(frozen=True)
class TabsState:
    scanned_item_id: str
    show_high: bool
    show_near: bool
    show_tabs: bool
    show_empty_state: bool
    active_tab: ResultsTab
    high_tab: TabContent
    near_tab: TabContent
    max_outfits_per_tab: int
    high_match_count: int = 0
    near_match_count: int = 0
    high_outfit_count: int = 0
    near_outfit_count: int = 0

    @property
    def active_tab_content(self) -> TabContent:
        return self.high_tab if self.active_tab == ResultsTab.HIGH else self.near_tab

    def is_visible(self, tab: ResultsTab) -> bool:
        return self.show_high if tab == ResultsTab.HIGH else self.show_near

    def default_tab(self) -> ResultsTab:
        return ResultsTab.HIGH if self.show_high else ResultsTab.NEAR


def slot_quality(candidates: Optional[Sequence[SlotCandidate]]) -> SlotQuality:
    """Blocking with no candidates, weak when only a thin or low-scoring MEDIUM set exists."""

    if not candidates:
        return SlotQuality.BLOCKING
    if any(candidate.tier == Tier.HIGH for candidate in candidates):
        return SlotQuality.CONFIDENT
    medium_count = sum(1 for candidate in candidates if candidate.tier == Tier.MEDIUM)
    best = max(candidate.score for candidate in candidates)
    if best < WEAK_BEST_SCORE_THRESHOLD or medium_count < WEAK_MIN_MEDIUM_COUNT:
        return SlotQuality.WEAK
    return SlotQuality.CONFIDENT


def _split_outfits(combo_result: ComboInput) -> Tuple[List[AssembledCombo], List[AssembledCombo], ComboResult]:
    """Return (high outfits, near outfits, the broad HIGH+MEDIUM result)."""

    if isinstance(combo_result, tuple):
        high_result, near_result = combo_result
        high = [combo for combo in high_result.combos if combo.tier_floor == Tier.HIGH]
        near = [combo for combo in near_result.combos if combo.tier_floor == Tier.MEDIUM]
        return high, near, near_result
    high = [combo for combo in combo_result.combos if combo.tier_floor == Tier.HIGH]
    near = [combo for combo in combo_result.combos if combo.tier_floor == Tier.MEDIUM]
    return high, near, combo_result


def _track_slots(category: Optional[Category], candidates: Dict[Slot, Tuple[SlotCandidate, ...]]) -> Tuple[Slot, ...]:
    dress = dress_track_slots(category)
    if dress and candidates.get(Slot.DRESS):
        return dress
    return required_slots(category)


def _missing_reason(
    result: ComboResult, counts: Dict[Category, int], category: Optional[Category]
) -> Optional[EmptyReason]:
    if not result.missing_slots:
        return None
    absent = tuple(m for m in result.missing_slots if not wardrobe_has_slot(m.slot, counts))
    if absent:
        return EmptyReason(EmptyReasonKind.MISSING_CORE_PIECES, missing=absent)
    blocking_slots = {m.slot for m in result.missing_slots}
    weak = tuple(
        SLOT_TO_CATEGORY[slot]
        for slot in _track_slots(category, result.candidates_by_slot)
        if slot not in blocking_slots
        and result.candidates_by_slot.get(slot)
        and slot_quality(result.candidates_by_slot[slot]) == SlotQuality.WEAK
    )
    return EmptyReason(
        EmptyReasonKind.HAS_ITEMS_BUT_NO_MATCHES,
        blocking_categories=tuple(SLOT_TO_CATEGORY[m.slot] for m in result.missing_slots),
        weak_categories=weak,
    )


def high_outfit_empty_reason(
    result: ComboResult, counts: Dict[Category, int], category: Optional[Category]
) -> EmptyReason:
    reason = _missing_reason(result, counts, category)
    if reason is not None:
        return reason
    candidates = result.candidates_by_slot
    without_high = tuple(
        MissingSlot(slot, SLOT_TO_CATEGORY[slot])
        for slot in _track_slots(category, candidates)
        if candidates.get(slot) and not any(c.tier == Tier.HIGH for c in candidates[slot])
    )
    if without_high:
        return EmptyReason(EmptyReasonKind.MISSING_HIGH_TIER_CORE_PIECES, missing=without_high)
    return EmptyReason(EmptyReasonKind.HAS_CORE_PIECES_BUT_NO_COMBOS)


def near_outfit_empty_reason(
    result: ComboResult, counts: Dict[Category, int], category: Optional[Category]
) -> EmptyReason:
    reason = _missing_reason(result, counts, category)
    if reason is not None:
        return reason
    return EmptyReason(EmptyReasonKind.HAS_CORE_PIECES_BUT_NO_COMBOS)


def _join_or(values: Sequence[str]) -> str:
    if len(values) <= 1:
        return "".join(values)
    if len(values) == 2:
        return f"{values[0]} or {values[1]}"
    return f"{', '.join(values[:-1])}, or {values[-1]}"


def _join_and_serial(values: Sequence[str]) -> str:
    if len(values) <= 2:
        return " and ".join(values)
    return f"{', '.join(values[:-1])}, and {values[-1]}"


def primary_missing_slot(missing: Sequence[MissingSlot]) -> Optional[MissingSlot]:
    by_slot = {m.slot: m for m in missing}
    for slot in SLOT_PRIORITY:
        if slot in by_slot:
            return by_slot[slot]
    return missing[0] if missing else None


def tab_missing_message(reason: Optional[EmptyReason]) -> Optional[str]:
    """User-facing copy for a tab without outfits."""

    if reason is None:
        return None
    if reason.kind == EmptyReasonKind.HAS_CORE_PIECES_BUT_NO_COMBOS:
        return NO_COMBOS_MESSAGE
    if reason.kind == EmptyReasonKind.MISSING_HIGH_TIER_CORE_PIECES:
        primary = primary_missing_slot(reason.missing)
        noun = SLOT_NOUN.get(primary.slot, "piece") if primary else "piece"
        return f"We didn't find strong {noun} matches, but you have close options in Worth trying."
    if reason.kind == EmptyReasonKind.HAS_ITEMS_BUT_NO_MATCHES:
        blocking = [c.value for c in reason.blocking_categories]
        weak = [c.value for c in reason.weak_categories]
        if blocking and not weak:
            return f"None of your {_join_or(blocking)} match this item's style."
        if blocking:
            weak_label = _join_and_serial(weak)
            return (
                f"None of your {_join_or(blocking)} match this item's style. "
                f"{weak_label[:1].upper()}{weak_label[1:]} are close, but "
                f"{_join_and_serial(blocking)} are what's blocking outfits."
            )
        if weak:
            return f"Only close matches found for {_join_or(weak)}."
        return None

    categories = [m.category.value for m in reason.missing]
    if not categories:
        return None
    if len(categories) == 1:
        return f"Add {categories[0]} to put complete outfits together from these matches."
    return f"Add {join_and(categories)} to put complete outfits together."


def _is_core(evaluation: PairEvaluation) -> bool:
    return evaluation.wardrobe_category in CORE_CATEGORIES


def build_tabs_state(
    scanned_item_id: str,
    confidence_result: ConfidenceResult,
    combo_result: ComboInput,
    wardrobe: Sequence[WardrobeItem],
    category: Optional[Category],
    tab_memory: Optional[TabMemory] = None,
    max_outfits_single_tab: int = MAX_OUTFITS_SINGLE_TAB,
    max_outfits_both_tabs: int = MAX_OUTFITS_BOTH_TABS,
) -> TabsState:
    """Derive both tabs' visibility and content; "high" and "near" never share an outfit."""

    high_outfits, near_outfits, broad = _split_outfits(combo_result)
    near_outfits = diversify(near_outfits, diversity_slot_for(category))

    high_matches = tuple(confidence_result.matches)
    near_matches = tuple(confidence_result.near_matches)
    show_high = bool(high_outfits) or any(_is_core(e) for e in high_matches)
    show_near = bool(near_outfits) or any(_is_core(e) for e in near_matches)
    show_tabs = show_high and show_near
    cap = max_outfits_both_tabs if show_tabs else max_outfits_single_tab

    counts = wardrobe_category_counts(wardrobe, confidence_result.evaluations)
    high_reason = None if high_outfits else high_outfit_empty_reason(broad, counts, category)
    near_reason = None if near_outfits else near_outfit_empty_reason(broad, counts, category)

    default = ResultsTab.HIGH if show_high else ResultsTab.NEAR
    active = default
    stored = tab_memory.get(scanned_item_id) if tab_memory is not None else None
    if stored == ResultsTab.HIGH.value and show_high:
        active = ResultsTab.HIGH
    elif stored == ResultsTab.NEAR.value and show_near:
        active = ResultsTab.NEAR

    state = TabsState(
        scanned_item_id=scanned_item_id,
        show_high=show_high,
        show_near=show_near,
        show_tabs=show_tabs,
        show_empty_state=not (show_high or show_near),
        active_tab=active,
        high_tab=TabContent(
            matches=high_matches,
            outfits=tuple(high_outfits[:cap]),
            outfit_empty_reason=high_reason,
            missing_message=tab_missing_message(high_reason),
        ),
        near_tab=TabContent(
            near_matches=near_matches,
            outfits=tuple(near_outfits[:cap]),
            outfit_empty_reason=near_reason,
            missing_message=tab_missing_message(near_reason),
        ),
        max_outfits_per_tab=cap,
        high_match_count=len(high_matches),
        near_match_count=len(near_matches),
        high_outfit_count=len(high_outfits),
        near_outfit_count=len(near_outfits),
    )
    logger.debug(
        "Tabs for %s: high=%s near=%s active=%s cap=%s", scanned_item_id, show_high, show_near, active.value, cap
    )
    return state


@dataclass(frozen=True)
class TabSelection:
    scan_id: str
    active_tab: ResultsTab
    selected_combo_id: Optional[str] = None


def initial_selection(tabs_state: TabsState) -> TabSelection:
    return TabSelection(scan_id=tabs_state.scanned_item_id, active_tab=tabs_state.active_tab)


def select_tab(selection: TabSelection, tab: ResultsTab, tab_memory: Optional[TabMemory] = None) -> TabSelection:
    """Switch tabs, remembering the choice for this scan and clearing the outfit."""

    tab = ResultsTab(tab)
    if tab_memory is not None:
        tab_memory.store(selection.scan_id, tab.value)
    return replace(selection, active_tab=tab, selected_combo_id=None)


def select_outfit(selection: TabSelection, combo_id: Optional[str]) -> TabSelection:
    return replace(selection, selected_combo_id=combo_id)


def reconcile_selection(selection: TabSelection, tabs_state: TabsState) -> TabSelection:
    """Bring a possibly stale selection in line with freshly built tabs."""

    if selection.scan_id != tabs_state.scanned_item_id:
        return initial_selection(tabs_state)
    if not tabs_state.is_visible(selection.active_tab) and tabs_state.is_visible(tabs_state.default_tab()):
        return TabSelection(scan_id=selection.scan_id, active_tab=tabs_state.default_tab())
    if selection.selected_combo_id is None:
        return selection
    content = tabs_state.high_tab if selection.active_tab == ResultsTab.HIGH else tabs_state.near_tab
    if selection.selected_combo_id not in {combo.id for combo in content.outfits}:
        logger.debug("Clearing stale outfit selection %s", selection.selected_combo_id)
        return replace(selection, selected_combo_id=None)
    return selection


__all__ = [
    "MAX_OUTFITS_SINGLE_TAB",
    "MAX_OUTFITS_BOTH_TABS",
    "NO_COMBOS_MESSAGE",
    "ResultsTab",
    "SlotQuality",
    "TabContent",
    "TabsState",
    "TabSelection",
    "slot_quality",
    "high_outfit_empty_reason",
    "near_outfit_empty_reason",
    "primary_missing_slot",
    "tab_missing_message",
    "build_tabs_state",
    "initial_selection",
    "select_tab",
    "select_outfit",
    "reconcile_selection",
]
