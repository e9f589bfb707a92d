"""Pydantic schemas and helpers for validating scan check payloads."""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field, ValidationError, field_validator

from models.items import ScannedItem, WardrobeItem, scanned_item_from_raw, wardrobe_item_from_raw
from models.taxonomy import FitPreference, parse_category, validate_category


class ColorPayload(BaseModel):
    """One detected colour, as produced by image analysis."""

    hex: str = Field(min_length=1)
    name: Optional[str] = None


class ColorProfilePayload(BaseModel):
    """Pre-computed colour profile; mirrors :class:`models.color_theory.ColorProfile`."""

    is_neutral: bool
    dominant_hue: Optional[int] = Field(default=None, ge=0, lt=360)
    saturation: Literal["low", "med", "high"] = "med"
    value: Literal["low", "med", "high"] = "med"


class ConfidenceSignalsPayload(BaseModel):
    """Explicit scoring inputs. Unknown family or texture names fall back to inference."""

    color_profile: Optional[ColorProfilePayload] = None
    style_family: Optional[str] = None
    formality_level: Optional[int] = Field(default=None, ge=1, le=5)
    texture_type: Optional[str] = None


class ScannedItemPayload(BaseModel):
    """Upstream analysis record for the scanned item.

    Unknown categories are kept as ``None`` so the item is treated as
    uncertain instead of being rejected outright.
    """

    id: str = Field(min_length=1)
    category: Optional[str] = None
    colors: List[Union[ColorPayload, str]] = []
    style_tags: List[str] = []
    style_notes: List[str] = []
    descriptive_label: str = ""
    item_signals: Optional[Dict[str, Any]] = None
    context_sufficient: bool = True
    is_fashion_item: bool = True
    confidence_signals: Optional[ConfidenceSignalsPayload] = None
    image_uri: Optional[str] = None

    @field_validator("category", mode="before")
    @classmethod
    def _route_unknown_category(cls, value: Any) -> Optional[str]:
        category = parse_category(value) if value is not None else None
        return category.value if category else None

    def to_item(self) -> ScannedItem:
        return scanned_item_from_raw(self.model_dump())


class WardrobeItemPayload(BaseModel):
    """Wardrobe snapshot entry supplied by the persistence layer."""

    id: str = Field(min_length=1)
    category: str
    image_uri: Optional[str] = None
    colors: List[Union[ColorPayload, str]] = []
    style_tags: List[str] = []
    user_style_tags: List[str] = []
    style_notes: List[str] = []
    detected_label: Optional[str] = None
    structure: Optional[str] = None

    @field_validator("category", mode="before")
    @classmethod
    def _known_category(cls, value: Any) -> str:
        return validate_category(value).value

    def to_item(self) -> WardrobeItem:
        return wardrobe_item_from_raw(self.model_dump())


class CheckRequest(BaseModel):
    """One "does this go with my wardrobe" check."""

    scanned_item: ScannedItemPayload
    wardrobe: List[WardrobeItemPayload] = []
    fit_preference: Optional[FitPreference] = None
    active_tab: Optional[Literal["high", "near"]] = None
    selected_combo_id: Optional[str] = None


class ValidationResult(BaseModel):
    """Wrapper returned to callers when validation fails."""

    status: Literal["needs_review"] = "needs_review"
    message: str
    details: List[Dict[str, Any]]


def validation_failure(message: str, exc: ValidationError) -> Dict[str, Any]:
    """Translate Pydantic errors into a consistent review payload."""

    details = [
        {key: value for key, value in error.items() if key in ("type", "loc", "msg", "input")}
        for error in exc.errors()
    ]
    return ValidationResult(message=message, details=details).model_dump()


__all__ = [
    "ColorPayload",
    "ColorProfilePayload",
    "ConfidenceSignalsPayload",
    "ScannedItemPayload",
    "WardrobeItemPayload",
    "CheckRequest",
    "ValidationResult",
    "validation_failure",
]
