"""Model package exports."""

from models.taxonomy import *  # noqa: F401,F403
from models.items import ScannedItem, WardrobeItem, scanned_item_from_raw, wardrobe_item_from_raw

__all__ = ["ScannedItem", "WardrobeItem", "scanned_item_from_raw", "wardrobe_item_from_raw"]
