"""Wardrobe-to-wardrobe coherence checks for assembled outfits.

Each wardrobe piece in a combo pairs acceptably with the scanned item, but
the pieces still have to make sense next to each other. Four rules apply:

* S2 rejects a sporty bottom or dress worn with heels, with no exceptions.
* S1 rejects a bottom/dress and shoes whose formality bands are two apart.
* TB1 rejects a top and bottom whose formality bands are two apart.
* S3 demotes (penalty 1) a formal bottom or dress worn with athletic shoes.

S1 and TB1 are bypassed when any piece carries an exception vibe such as
streetwear, and S1 defers to S3 for the formal-plus-sneakers case.
"""
from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from logic.item_profiles import profile_wardrobe_item
from models.items import WardrobeItem
from models.slots import Slot
from models.taxonomy import Category

logger = logging.getLogger(__name__)

S1_FORMALITY_CLASH = "S1_FORMALITY_CLASH"
S2_SPORTY_HEELS = "S2_SPORTY_HEELS"
TB1_TOP_BOTTOM_CLASH = "TB1_TOP_BOTTOM_CLASH"
S3_FORMAL_WITH_ATHLETIC = "S3_FORMAL_WITH_ATHLETIC"

HEEL_KEYWORDS: Tuple[str, ...] = (
    "heel",
    "stiletto",
    "pump",
    "kitten heel",
)
FORMAL_SHOE_KEYWORDS: Tuple[str, ...] = HEEL_KEYWORDS + (
    "oxford",
    "derby",
    "dress shoe",
    "court shoe",
)
ATHLETIC_SHOE_KEYWORDS: Tuple[str, ...] = (
    "sneaker",
    "trainer",
    "running",
    "runner",
    "basketball",
    "tennis shoe",
    "athletic",
    "sport",
    "gym",
)
SPORTY_KEYWORDS: Tuple[str, ...] = (
    "sporty",
    "athleisure",
    "athletic",
    "activewear",
    "jogger",
    "track",
    "sweatpant",
    "legging",
    "gym",
    "workout",
)
EXCEPTION_VIBE_KEYWORDS: Tuple[str, ...] = (
    "streetwear",
    "edgy",
    "fashion-forward",
    "statement",
    "avant-garde",
    "avant",
)
SPORTY_STYLE_TAGS = frozenset({"sporty"})
EXCEPTION_STYLE_TAGS = frozenset({"street"})


@dataclass(frozen=True)
class CoherenceResult:
    ok: bool
    penalty: int = 0
    reasons: Tuple[str, ...] = ()
    reject_reason: Optional[str] = None
    details: Optional[str] = None


@dataclass(frozen=True)
class CoherenceRejection:
    combo_id: str
    reason: str
    details: str


@dataclass(frozen=True)
class FilteredCombos:
    combo_ids: Tuple[str, ...]
    penalty_by_id: Dict[str, int] = field(default_factory=dict)
    rejections: Tuple[CoherenceRejection, ...] = ()

    @property
    def rejected_count(self) -> int:
        return len(self.rejections)

    @property
    def rejections_by_reason(self) -> Dict[str, int]:
        return dict(Counter(rejection.reason for rejection in self.rejections))


def formality_band(level: Optional[int]) -> Optional[int]:
    """0 = casual, 1 = smart casual, 2 = formal."""

    if level is None:
        return None
    if level <= 2:
        return 0
    if level == 3:
        return 1
    return 2


def _searchable_text(item: WardrobeItem) -> str:
    parts: List[str] = []
    if item.detected_label:
        parts.append(item.detected_label)
    parts.extend(item.style_notes)
    return " ".join(parts).lower()


def _contains_any(text: str, keywords: Iterable[str]) -> bool:
    return any(keyword in text for keyword in keywords)


def _tag_values(item: WardrobeItem) -> frozenset:
    return frozenset(getattr(tag, "value", tag) for tag in item.style_tags)


def is_heel_shoe(item: WardrobeItem) -> bool:
    return item.category == Category.SHOES and _contains_any(_searchable_text(item), HEEL_KEYWORDS)


def is_formal_shoe(item: WardrobeItem) -> bool:
    return item.category == Category.SHOES and _contains_any(_searchable_text(item), FORMAL_SHOE_KEYWORDS)


def is_athletic_shoe(item: WardrobeItem) -> bool:
    return item.category == Category.SHOES and _contains_any(_searchable_text(item), ATHLETIC_SHOE_KEYWORDS)


def is_sporty_item(item: WardrobeItem) -> bool:
    if _tag_values(item) & SPORTY_STYLE_TAGS:
        return True
    return _contains_any(_searchable_text(item), SPORTY_KEYWORDS)


def has_exception_vibe(item: WardrobeItem) -> bool:
    if _tag_values(item) & EXCEPTION_STYLE_TAGS:
        return True
    return _contains_any(_searchable_text(item), EXCEPTION_VIBE_KEYWORDS)


def item_formality_band(item: WardrobeItem) -> Optional[int]:
    return formality_band(profile_wardrobe_item(item).formality_level)


def check_outfit_coherence(
    slots: Mapping[Slot, str], wardrobe_by_id: Mapping[str, WardrobeItem]
) -> CoherenceResult:
    """Check one combo's filled slots against the rules above."""

    bottom_id = slots.get(Slot.BOTTOM) or slots.get(Slot.DRESS)
    bottom = wardrobe_by_id.get(bottom_id) if bottom_id else None
    shoes = wardrobe_by_id.get(slots.get(Slot.SHOES, ""))
    top = wardrobe_by_id.get(slots.get(Slot.TOP, ""))

    # Nothing to compare without both a lower half and shoes from the wardrobe.
    if bottom is None or shoes is None:
        return CoherenceResult(ok=True)

    bottom_band = item_formality_band(bottom)
    shoes_band = item_formality_band(shoes)
    top_band = item_formality_band(top) if top is not None else None
    exception = any(has_exception_vibe(item) for item in (bottom, shoes, top) if item is not None)

    if is_sporty_item(bottom) and is_heel_shoe(shoes):
        return CoherenceResult(
            ok=False,
            reject_reason=S2_SPORTY_HEELS,
            details=f"Sporty {bottom.category.value} ({bottom.detected_label or 'unknown'}) "
            f"with heels ({shoes.detected_label or 'unknown'})",
        )

    formal_with_athletic = bottom_band == 2 and is_athletic_shoe(shoes)
    if bottom_band is not None and shoes_band is not None and not exception:
        gap = abs(bottom_band - shoes_band)
        if gap >= 2 and not formal_with_athletic:
            return CoherenceResult(
                ok=False,
                reject_reason=S1_FORMALITY_CLASH,
                details=f"Bottom/dress band {bottom_band} vs shoes band {shoes_band}",
            )

    if top_band is not None and bottom_band is not None and not exception:
        if abs(top_band - bottom_band) >= 2:
            return CoherenceResult(
                ok=False,
                reject_reason=TB1_TOP_BOTTOM_CLASH,
                details=f"Top band {top_band} vs bottom band {bottom_band}",
            )

    if formal_with_athletic:
        return CoherenceResult(ok=True, penalty=1, reasons=(S3_FORMAL_WITH_ATHLETIC,))
    return CoherenceResult(ok=True)


def filter_incoherent(
    combos: Sequence[Tuple[str, Mapping[Slot, str]]], wardrobe: Iterable[WardrobeItem]
) -> FilteredCombos:
    """Split ``(combo_id, slots)`` pairs into kept ids, penalties and rejections."""

    wardrobe_by_id = {item.id: item for item in wardrobe}
    kept: List[str] = []
    penalties: Dict[str, int] = {}
    rejections: List[CoherenceRejection] = []
    for combo_id, slots in combos:
        result = check_outfit_coherence(slots, wardrobe_by_id)
        if not result.ok:
            rejections.append(CoherenceRejection(combo_id, result.reject_reason or "", result.details or ""))
            continue
        kept.append(combo_id)
        if result.penalty:
            penalties[combo_id] = result.penalty

    if rejections:
        logger.debug("Coherence filter rejected %s combos: %s", len(rejections), [r.reason for r in rejections])
    return FilteredCombos(combo_ids=tuple(kept), penalty_by_id=penalties, rejections=tuple(rejections))


__all__ = [
    "S1_FORMALITY_CLASH",
    "S2_SPORTY_HEELS",
    "TB1_TOP_BOTTOM_CLASH",
    "S3_FORMAL_WITH_ATHLETIC",
    "CoherenceResult",
    "CoherenceRejection",
    "FilteredCombos",
    "formality_band",
    "is_heel_shoe",
    "is_formal_shoe",
    "is_athletic_shoe",
    "is_sporty_item",
    "has_exception_vibe",
    "item_formality_band",
    "check_outfit_coherence",
    "filter_incoherent",
]
