"""Request payload validation tests."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest
from pydantic import ValidationError

sys.path.append(str(Path(__file__).resolve().parents[1]))

from logic.validation import CheckRequest, ScannedItemPayload, validation_failure
from models.taxonomy import Category, FitPreference


def test_check_request_builds_domain_records() -> None:
    request = CheckRequest.model_validate(
        {
            "scanned_item": {
                "id": "scan-1",
                "category": "Top",
                "colors": [{"hex": "#000000", "name": "black"}, "#ffffff"],
                "style_tags": ["minimal"],
            },
            "wardrobe": [{"id": "jeans", "category": "bottoms", "user_style_tags": ["street"]}],
            "fit_preference": "slim",
            "active_tab": "near",
        }
    )

    scanned = request.scanned_item.to_item()
    assert scanned.category == Category.TOPS
    assert [color.hex for color in scanned.colors] == ["#000000", "#FFFFFF"]
    assert request.fit_preference == FitPreference.SLIM

    wardrobe_item = request.wardrobe[0].to_item()
    assert wardrobe_item.category == Category.BOTTOMS
    assert "street" in wardrobe_item.style_tags


def test_unknown_scanned_category_is_kept_as_uncertain() -> None:
    payload = ScannedItemPayload.model_validate({"id": "scan-2", "category": "umbrella"})
    assert payload.category is None
    assert payload.to_item().category is None


def test_bad_wardrobe_category_is_reported() -> None:
    with pytest.raises(ValidationError) as excinfo:
        CheckRequest.model_validate(
            {"scanned_item": {"id": "scan-3"}, "wardrobe": [{"id": "w1", "category": "umbrella"}]}
        )

    failure = validation_failure("Invalid check request payload", excinfo.value)
    assert failure["status"] == "needs_review"
    assert failure["message"] == "Invalid check request payload"
    assert list(failure["details"][0]["loc"]) == ["wardrobe", 0, "category"]


@pytest.mark.parametrize(
    "payload",
    [
        {"scanned_item": {"id": ""}},
        {"scanned_item": {"id": "s"}, "active_tab": "sideways"},
        {"scanned_item": {"id": "s"}, "fit_preference": "baggy"},
        {"wardrobe": []},
    ],
)
def test_malformed_requests_are_rejected(payload: dict) -> None:
    with pytest.raises(ValidationError):
        CheckRequest.model_validate(payload)


def test_confidence_signals_are_typed() -> None:
    payload = ScannedItemPayload.model_validate(
        {
            "id": "scan-4",
            "category": "tops",
            "confidence_signals": {
                "formality_level": "4",
                "style_family": "minimal",
                "color_profile": {"is_neutral": False, "dominant_hue": 210, "saturation": "high"},
            },
        }
    )
    signals = payload.to_item().confidence_signals
    assert signals.formality_level == 4
    assert signals.color_profile.dominant_hue == 210
    assert signals.color_profile.value == "med"


@pytest.mark.parametrize(
    "signals",
    [
        {"formality_level": "formal"},
        {"formality_level": 9},
        {"color_profile": {"is_neutral": False, "saturation": "vivid"}},
        {"color_profile": {"dominant_hue": 400, "is_neutral": False}},
        {"color_profile": {"saturation": "low"}},
    ],
)
def test_bad_confidence_signals_fail_validation(signals: dict) -> None:
    with pytest.raises(ValidationError) as excinfo:
        CheckRequest.model_validate({"scanned_item": {"id": "scan-5", "confidence_signals": signals}})
    assert excinfo.value.errors()[0]["loc"][:2] == ("scanned_item", "confidence_signals")
