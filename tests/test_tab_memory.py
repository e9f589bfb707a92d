"""Tab memory tests."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from logic.results_tabs import ResultsTab
from memory.tab_memory import DEFAULT_CAPACITY, TabMemory


def test_store_and_get_round_trip_enum_values() -> None:
    memory = TabMemory()
    memory.store("scan-1", ResultsTab.NEAR)
    assert memory.get("scan-1") == "near"
    assert "scan-1" in memory
    assert memory.get("unknown") is None


def test_oldest_scan_is_evicted_past_capacity() -> None:
    memory = TabMemory(capacity=3)
    for index in range(4):
        memory.store(f"scan-{index}", "high")
    assert len(memory) == 3
    assert "scan-0" not in memory
    assert list(memory.snapshot()) == ["scan-1", "scan-2", "scan-3"]


def test_restoring_a_scan_refreshes_its_position() -> None:
    memory = TabMemory(capacity=2)
    memory.store("a", "high")
    memory.store("b", "high")
    memory.store("a", "near")
    memory.store("c", "high")
    assert memory.snapshot() == {"a": "near", "c": "high"}


def test_forget_and_clear() -> None:
    memory = TabMemory()
    memory.store("a", "high")
    memory.store("b", "near")
    memory.forget("a")
    memory.forget("missing")
    assert memory.snapshot() == {"b": "near"}
    memory.clear()
    assert len(memory) == 0


def test_capacity_must_be_positive() -> None:
    assert TabMemory().capacity == DEFAULT_CAPACITY
    with pytest.raises(ValueError):
        TabMemory(capacity=0)
