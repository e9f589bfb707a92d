"""Outfit slot model shared by the engine tie-break and the combo assembler."""

from enum import Enum
from typing import Dict, Optional, Tuple

from models.taxonomy import Category


class Slot(str, Enum):
    TOP = "TOP"
    BOTTOM = "BOTTOM"
    SHOES = "SHOES"
    OUTERWEAR = "OUTERWEAR"
    DRESS = "DRESS"


CATEGORY_TO_SLOT: Dict[Category, Slot] = {
    Category.TOPS: Slot.TOP,
    Category.BOTTOMS: Slot.BOTTOM,
    Category.SKIRTS: Slot.BOTTOM,
    Category.SHOES: Slot.SHOES,
    Category.OUTERWEAR: Slot.OUTERWEAR,
    Category.DRESSES: Slot.DRESS,
}

# Category shown to the user when a slot has to be filled.
SLOT_TO_CATEGORY: Dict[Slot, Category] = {
    Slot.TOP: Category.TOPS,
    Slot.BOTTOM: Category.BOTTOMS,
    Slot.SHOES: Category.SHOES,
    Slot.OUTERWEAR: Category.OUTERWEAR,
    Slot.DRESS: Category.DRESSES,
}

STANDARD_CORE_SLOTS: Tuple[Slot, ...] = (Slot.TOP, Slot.BOTTOM, Slot.SHOES)


def slot_for_category(category: Optional[Category]) -> Optional[Slot]:
    if category is None:
        return None
    return CATEGORY_TO_SLOT.get(category)


def categories_for_slot(slot: Slot) -> Tuple[Category, ...]:
    return tuple(category for category, mapped in CATEGORY_TO_SLOT.items() if mapped == slot)


def required_slots(category: Optional[Category]) -> Tuple[Slot, ...]:
    """Slots the wardrobe must fill on the standard (separates) track."""

    scanned_slot = slot_for_category(category)
    if scanned_slot == Slot.DRESS:
        return (Slot.SHOES,)
    return tuple(slot for slot in STANDARD_CORE_SLOTS if slot != scanned_slot)


def dress_track_slots(category: Optional[Category]) -> Tuple[Slot, ...]:
    """Slots for the dress track, empty when the scan cannot anchor one."""

    scanned_slot = slot_for_category(category)
    if scanned_slot == Slot.SHOES:
        return (Slot.DRESS,)
    if scanned_slot == Slot.OUTERWEAR:
        return (Slot.DRESS, Slot.SHOES)
    return ()


__all__ = [
    "Slot",
    "CATEGORY_TO_SLOT",
    "SLOT_TO_CATEGORY",
    "STANDARD_CORE_SLOTS",
    "slot_for_category",
    "categories_for_slot",
    "required_slots",
    "dress_track_slots",
]
