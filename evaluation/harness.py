"""Lightweight evaluation harness for deterministic scenarios."""

from __future__ import annotations

from typing import Dict, List

from evaluation.scenarios import EvaluationScenario, SCENARIOS
from match_app.app import ScanMatchApp
from match_app.config import MatchingConfig
from memory.tab_memory import TabMemory


def _outfit_ids(tab: Dict[str, object]) -> List[str]:
    return [outfit["id"] for outfit in tab.get("outfits", [])]


def _evaluate_expectations(expectations: Dict[str, object], response: Dict[str, object]) -> Dict[str, object]:
    checks: Dict[str, bool] = {"status_ok": response.get("status") == "ok"}
    if not checks["status_ok"]:
        return {"passed": False, "checks": checks}

    render = response["render"]
    tabs = response["tabs"]
    decision = response["decision"]
    high_ids = _outfit_ids(tabs["high_tab"])
    near_ids = _outfit_ids(tabs["near_tab"])

    if "evaluated" in expectations:
        checks["evaluated"] = response["evaluated"] == expectations["evaluated"]
    if "ui_state" in expectations:
        checks["ui_state"] = render["ui_state"] == expectations["ui_state"]
    if "matches_variant" in expectations:
        checks["matches_variant"] = render["matches_section"]["variant"] == expectations["matches_variant"]
    if "suggestions_mode" in expectations:
        checks["suggestions_mode"] = response["suggestions_mode"] == expectations["suggestions_mode"]
    if "outcome" in expectations:
        checks["outcome"] = decision["outcome"] == expectations["outcome"]
    if "verdict" in expectations:
        checks["verdict"] = decision["verdict_ui_state"] == expectations["verdict"]
    if "high_outfits" in expectations:
        checks["high_outfits"] = len(high_ids) == expectations["high_outfits"]
    if "near_outfits" in expectations:
        checks["near_outfits"] = len(near_ids) == expectations["near_outfits"]
    if "min_high_outfits" in expectations:
        checks["min_high_outfits"] = len(high_ids) >= int(expectations["min_high_outfits"])
    if "min_near_outfits" in expectations:
        checks["min_near_outfits"] = len(near_ids) >= int(expectations["min_near_outfits"])
    if "show_tabs" in expectations:
        checks["show_tabs"] = tabs["show_tabs"] == expectations["show_tabs"]
    if "active_tab" in expectations:
        checks["active_tab"] = tabs["active_tab"] == expectations["active_tab"]
    if "selected_tab" in expectations:
        checks["selected_tab"] = response["selection"]["active_tab"] == expectations["selected_tab"]
    if expectations.get("tabs_exclusive"):
        checks["tabs_exclusive"] = not set(high_ids) & set(near_ids)
    return {"passed": all(checks.values()), "checks": checks}


def _payload(scenario: EvaluationScenario) -> Dict[str, object]:
    payload: Dict[str, object] = {
        "scanned_item": scenario.scanned_item,
        "wardrobe": scenario.wardrobe_items,
    }
    if scenario.fit_preference:
        payload["fit_preference"] = scenario.fit_preference
    if scenario.active_tab:
        payload["active_tab"] = scenario.active_tab
    return payload


def run_scenario(scenario: EvaluationScenario) -> Dict[str, object]:
    app = ScanMatchApp(config=MatchingConfig(), tab_memory=TabMemory())
    response = app.check(_payload(scenario))
    evaluation = _evaluate_expectations(scenario.expectations, response)
    tabs = response.get("tabs", {})
    return {
        "scenario": scenario.name,
        "passed": evaluation["passed"],
        "checks": evaluation["checks"],
        "outfit_count": len(tabs.get("high_tab", {}).get("outfits", []))
        + len(tabs.get("near_tab", {}).get("outfits", [])),
        "response": response,
    }


def run_evaluation_suite() -> List[Dict[str, object]]:
    return [run_scenario(scenario) for scenario in SCENARIOS]


def run_smoke_checks() -> List[str]:
    results = run_evaluation_suite()
    return [f"{result['scenario']}: {'passed' if result['passed'] else 'failed'}" for result in results]


__all__ = ["run_evaluation_suite", "run_scenario", "run_smoke_checks"]
