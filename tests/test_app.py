"""End-to-end tests for the scan match app and its HTTP surface."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Dict

import pytest
from fastapi.testclient import TestClient

sys.path.append(str(Path(__file__).resolve().parents[1]))

from match_app.app import ScanMatchApp, summarize_for_analytics, to_jsonable
from match_app.config import MatchingConfig
from memory.tab_memory import TabMemory
from models.items import ScannedItem, WardrobeItem
from models.taxonomy import Category, Tier


def _payload(**overrides: Any) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "scanned_item": {
            "id": "scan-42",
            "category": "tops",
            "colors": [{"hex": "#000000", "name": "black"}],
            "style_tags": ["minimal"],
            "style_notes": ["simple cotton tee"],
            "descriptive_label": "Black crew neck tee",
        },
        "wardrobe": [
            {
                "id": "jeans",
                "category": "bottoms",
                "colors": ["#000000"],
                "style_tags": ["minimal"],
                "style_notes": ["denim"],
            },
            {
                "id": "loafers",
                "category": "shoes",
                "colors": ["#000000"],
                "style_tags": ["minimal"],
                "style_notes": ["tailored"],
            },
            {
                "id": "cargo",
                "category": "bottoms",
                "colors": ["#808080"],
                "style_tags": ["street"],
                "style_notes": ["cargo"],
            },
        ],
    }
    payload.update(overrides)
    return payload


@pytest.fixture()
def app() -> ScanMatchApp:
    return ScanMatchApp(config=MatchingConfig(), tab_memory=TabMemory())


def test_check_returns_serialised_results(app: ScanMatchApp) -> None:
    response = app.check(_payload())

    assert response["status"] == "ok"
    assert response["correlation_id"]
    assert response["scan_id"] == "scan-42"
    assert response["evaluated"] is True
    assert response["debug_tier"] == "HIGH"
    assert response["render"]["ui_state"] == "HIGH"
    assert response["matched_categories"] == ["bottoms", "shoes"]

    high_ids = [outfit["id"] for outfit in response["tabs"]["high_tab"]["outfits"]]
    near_ids = [outfit["id"] for outfit in response["tabs"]["near_tab"]["outfits"]]
    assert high_ids == ["jeans_loafers"]
    assert near_ids == ["cargo_loafers"]
    assert response["tabs"]["show_tabs"] is True


def test_invalid_payload_returns_review_payload(app: ScanMatchApp) -> None:
    response = app.check({"scanned_item": {"id": "scan-1"}, "wardrobe": [{"id": "w1", "category": "umbrella"}]})
    assert response["status"] == "needs_review"
    assert response["details"]


def test_selected_tab_is_remembered_between_checks(app: ScanMatchApp) -> None:
    first = app.check(_payload(active_tab="near", selected_combo_id="cargo_loafers"))
    assert first["selection"] == {"scan_id": "scan-42", "active_tab": "near", "selected_combo_id": "cargo_loafers"}

    second = app.check(_payload())
    assert second["tabs"]["active_tab"] == "near"
    assert second["selection"]["selected_combo_id"] is None


def test_analytics_summary_carries_no_item_content(app: ScanMatchApp) -> None:
    scanned = ScannedItem(id="scan-7", category=Category.TOPS, descriptive_label="Silk blouse")
    wardrobe = [WardrobeItem(id="w1", category=Category.BOTTOMS)]
    summary = summarize_for_analytics(app.run(scanned, wardrobe))

    assert summary["scan_id"] == "scan-7"
    assert summary["category"] == "tops"
    assert summary["wardrobe_count"] == 1
    assert "Silk blouse" not in {str(value) for value in summary.values()}


def test_to_jsonable_flattens_enums_and_sets() -> None:
    assert to_jsonable({Tier.HIGH: frozenset({"b", "a"}), "score": 0.123456}) == {
        "HIGH": ["a", "b"],
        "score": 0.1235,
    }


@pytest.fixture()
def client() -> TestClient:
    from server.api import app as api_app

    return TestClient(api_app)


def test_healthcheck(client: TestClient) -> None:
    response = client.get("/healthz")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["thresholds"]["high_shoes"] == 0.82


def test_create_check_endpoint(client: TestClient) -> None:
    response = client.post("/v1/checks", json=_payload())
    assert response.status_code == 200
    assert response.json()["render"]["ui_state"] == "HIGH"


def test_create_check_rejects_invalid_payload(client: TestClient) -> None:
    response = client.post("/v1/checks", json={"wardrobe": []})
    assert response.status_code == 422
    assert response.json()["detail"]["status"] == "needs_review"


def test_bad_confidence_signal_returns_review_payload(app: ScanMatchApp) -> None:
    response = app.check(
        {
            "scanned_item": {"id": "x", "category": "tops", "confidence_signals": {"formality_level": "formal"}},
            "wardrobe": [],
        }
    )
    assert response["status"] == "needs_review"
    assert list(response["details"][0]["loc"]) == ["scanned_item", "confidence_signals", "formality_level"]


def test_selected_near_outfit_gets_targeted_tips(app: ScanMatchApp) -> None:
    response = app.check(_payload(active_tab="near", selected_combo_id="cargo_loafers"))
    tips = response["outfit_suggestions"]
    assert tips["intro"] == "To make this pairing work:"
    assert [bullet["key"] for bullet in tips["bullets"]] == ["MISSING_KEY_SIGNAL__SIMPLE_VERSATILE"]

    assert app.check(_payload())["outfit_suggestions"] is None


def test_hidden_tab_request_is_not_remembered(app: ScanMatchApp) -> None:
    payload = _payload(active_tab="near")
    payload["wardrobe"] = payload["wardrobe"][:2]

    response = app.check(payload)

    assert response["tabs"]["show_near"] is False
    assert response["selection"]["active_tab"] == "high"
    assert app.tab_memory.get("scan-42") is None
