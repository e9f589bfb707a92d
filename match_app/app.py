"""Scan match app: runs one check through the whole matching pipeline."""

from dataclasses import dataclass, fields, is_dataclass
from enum import Enum
import logging
from typing import Any, Dict, Iterable, Optional

from pydantic import ValidationError

from logic.combo_assembler import AssembledCombo, AssemblyPass, ComboResult, SlotCandidate, assemble
from logic.confidence_engine import ConfidenceResult, evaluate
from logic.decision_tree import DecisionTreeResult, classify
from logic.pair_scoring import PairEvaluation
from logic.render_policy import ResultsRenderModel, build_render_model
from logic.results_tabs import (
    ResultsTab,
    TabSelection,
    TabsState,
    build_tabs_state,
    initial_selection,
    reconcile_selection,
    select_outfit,
    select_tab,
)
from logic.suggestions import SuggestionSet, get_mode_b_bullets
from logic.validation import CheckRequest, validation_failure
from match_app.config import MatchingConfig
from match_app.logging_config import configure_logging, get_logger, log_event, operation_context
from memory.tab_memory import TabMemory
from models.items import ScannedItem, WardrobeItem
from tools.observability import instrument_stage

LOGGER = get_logger(__name__)

evaluate_stage = instrument_stage("confidence_engine")(evaluate)
classify_stage = instrument_stage("decision_tree")(classify)
assemble_stage = instrument_stage("combo_assembler")(assemble)
render_stage = instrument_stage("render_policy")(build_render_model)
tabs_stage = instrument_stage("results_tabs")(build_tabs_state)


@dataclass(frozen=True)
class ResultsBundle:
    """Everything the results screen needs for one scan."""

    scanned_item: ScannedItem
    wardrobe_count: int
    confidence: ConfidenceResult
    decision: DecisionTreeResult
    high_combos: ComboResult
    near_combos: ComboResult
    render: ResultsRenderModel
    tabs: TabsState
    selection: TabSelection
    outfit_suggestions: Optional[SuggestionSet] = None


def _evaluation_view(evaluation: PairEvaluation) -> Dict[str, Any]:
    return {
        "wardrobe_item_id": evaluation.wardrobe_item_id,
        "wardrobe_category": evaluation.wardrobe_category.value,
        "pair_type": evaluation.pair_type,
        "tier": evaluation.tier.value,
        "raw_score": round(evaluation.raw_score, 4),
        "cap_reasons": list(evaluation.cap_reasons),
        "explanation": evaluation.explanation,
    }


def to_jsonable(value: Any) -> Any:
    """Convert result dataclasses into JSON-friendly structures."""

    if isinstance(value, PairEvaluation):
        return _evaluation_view(value)
    if isinstance(value, SlotCandidate):
        return {"item_id": value.item_id, "slot": value.slot.value, "tier": value.tier.value, "score": round(value.score, 4)}
    if isinstance(value, WardrobeItem):
        return {"id": value.id, "category": value.category.value, "image_uri": value.image_uri}
    if isinstance(value, AssembledCombo):
        payload = {f.name: to_jsonable(getattr(value, f.name)) for f in fields(value)}
        payload["needs_tweak_slots"] = [slot.value for slot in value.needs_tweak_slots]
        return payload
    if isinstance(value, Enum):
        return value.value
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_jsonable(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, dict):
        return {str(to_jsonable(key)): to_jsonable(item) for key, item in value.items()}
    if isinstance(value, (frozenset, set)):
        return sorted(to_jsonable(item) for item in value)
    if isinstance(value, (list, tuple)):
        return [to_jsonable(item) for item in value]
    if isinstance(value, float):
        return round(value, 4)
    return value


def serialize_bundle(bundle: ResultsBundle) -> Dict[str, Any]:
    confidence = bundle.confidence
    return {
        "scan_id": bundle.scanned_item.id,
        "evaluated": confidence.evaluated,
        "debug_tier": to_jsonable(confidence.debug_tier),
        "suggestions_mode": confidence.suggestions_mode,
        "matched_categories": to_jsonable(confidence.matched_categories),
        "decision": to_jsonable(bundle.decision),
        "render": to_jsonable(bundle.render),
        "tabs": to_jsonable(bundle.tabs),
        "selection": to_jsonable(bundle.selection),
        "outfit_suggestions": to_jsonable(bundle.outfit_suggestions),
        "missing_message": bundle.near_combos.missing_message,
    }


def summarize_for_analytics(bundle: ResultsBundle) -> Dict[str, Any]:
    """Plain counts and labels an analytics layer may forward; no item content."""

    confidence = bundle.confidence
    return {
        "scan_id": bundle.scanned_item.id,
        "category": bundle.scanned_item.category.value if bundle.scanned_item.category else None,
        "evaluated": confidence.evaluated,
        "tier": confidence.debug_tier.value if confidence.debug_tier else None,
        "ui_state": bundle.render.ui_state.value,
        "wardrobe_count": bundle.wardrobe_count,
        "high_match_count": confidence.high_match_count,
        "near_match_count": confidence.near_match_count,
        "high_outfit_count": bundle.tabs.high_outfit_count,
        "near_outfit_count": bundle.tabs.near_outfit_count,
        "suggestions_mode": confidence.suggestions_mode,
        "outcome": bundle.decision.outcome.value,
        "verdict": bundle.decision.verdict_ui_state.value,
    }


class ScanMatchApp:
    """Wires configuration, tab memory and the four pipeline stages together."""

    def __init__(self, config: MatchingConfig | None = None, tab_memory: TabMemory | None = None) -> None:
        self.config = config or MatchingConfig.from_env()
        configure_logging(self.config.log_level)
        self.thresholds = self.config.thresholds()
        self.assembler_settings = self.config.assembler_settings()
        self.tab_memory = tab_memory if tab_memory is not None else TabMemory()

    def run(
        self,
        scanned_item: ScannedItem,
        wardrobe: Iterable[WardrobeItem],
        fit_preference=None,
        active_tab: Optional[str] = None,
        selected_combo_id: Optional[str] = None,
    ) -> ResultsBundle:
        """Run the pipeline on already-built records."""

        wardrobe = list(wardrobe)
        confidence = evaluate_stage(scanned_item, wardrobe, self.thresholds)
        decision = classify_stage(
            scanned_item.category,
            scanned_item.item_signals,
            fit_preference or self.config.default_fit_preference,
            scanned_item.context_sufficient,
            len(wardrobe),
            scanned_item.style_notes,
        )
        high = assemble_stage(scanned_item, confidence, AssemblyPass.HIGH, wardrobe, self.assembler_settings)
        near = assemble_stage(
            scanned_item, confidence, AssemblyPass.HIGH_AND_MEDIUM, wardrobe, self.assembler_settings
        )
        render = render_stage(confidence, len(wardrobe), wardrobe)
        tabs = tabs_stage(
            scanned_item.id,
            confidence,
            (high, near),
            wardrobe,
            scanned_item.category,
            self.tab_memory,
            self.config.max_outfits_single_tab,
            self.config.max_outfits_both_tabs,
        )

        selection = initial_selection(tabs)
        if active_tab:
            requested = ResultsTab(active_tab)
            if tabs.is_visible(requested):
                selection = select_tab(selection, requested, self.tab_memory)
            else:
                LOGGER.debug("Ignoring hidden tab %s for scan %s", requested.value, scanned_item.id)
        if selected_combo_id:
            selection = select_outfit(selection, selected_combo_id)
        selection = reconcile_selection(selection, tabs)
        outfit_suggestions = self._selected_outfit_suggestions(confidence, tabs, selection)

        return ResultsBundle(
            scanned_item=scanned_item,
            wardrobe_count=len(wardrobe),
            confidence=confidence,
            decision=decision,
            high_combos=high,
            near_combos=near,
            render=render,
            tabs=tabs,
            selection=selection,
            outfit_suggestions=outfit_suggestions,
        )

    def _selected_outfit_suggestions(
        self, confidence: ConfidenceResult, tabs: TabsState, selection: TabSelection
    ) -> Optional[SuggestionSet]:
        """Mode B tips for the selected outfit's weak slots, if an outfit is selected."""

        if selection.selected_combo_id is None:
            return None
        content = tabs.high_tab if selection.active_tab == ResultsTab.HIGH else tabs.near_tab
        combo = next((c for c in content.outfits if c.id == selection.selected_combo_id), None)
        if combo is None:
            return None
        return get_mode_b_bullets(
            combo.candidates, confidence.near_matches, confidence.ui_vibe_for_copy, self.thresholds
        )

    def check(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Validate a raw check payload and return the serialised results bundle."""

        with operation_context("app:check") as correlation_id:
            try:
                request = CheckRequest.model_validate(payload)
            except ValidationError as exc:
                log_event(
                    LOGGER,
                    level=logging.WARNING,
                    event="app_request_invalid",
                    method="check",
                    error_count=exc.error_count(),
                    correlation_id=correlation_id,
                )
                return validation_failure("Invalid check request payload", exc)

            bundle = self.run(
                request.scanned_item.to_item(),
                [item.to_item() for item in request.wardrobe],
                fit_preference=request.fit_preference,
                active_tab=request.active_tab,
                selected_combo_id=request.selected_combo_id,
            )
            log_event(
                LOGGER,
                level=logging.INFO,
                event="app_check_completed",
                method="check",
                correlation_id=correlation_id,
                **summarize_for_analytics(bundle),
            )
            return {"status": "ok", "correlation_id": correlation_id, **serialize_bundle(bundle)}


__all__ = [
    "ResultsBundle",
    "ScanMatchApp",
    "serialize_bundle",
    "summarize_for_analytics",
    "to_jsonable",
]
