"""Colour profiling and style family inference tests."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from models.color_theory import ColorProfile, hue_distance, is_neutral, to_color_profile
from models.style_families import (
    STYLE_ADJACENCY,
    family_from_notes,
    infer_formality_level,
    infer_texture_type,
    resolve_ui_vibe_for_copy,
    style_adjacency,
    to_style_family,
)
from models.taxonomy import Category, StyleFamily, StyleVibe, TextureType


def test_neutral_detection_covers_palette_and_desaturated_colors() -> None:
    assert is_neutral("#000")
    assert is_neutral("#f5f5dc")
    assert is_neutral("#7A7A7C")
    assert not is_neutral("#FF0000")


def test_color_profile_for_saturated_red() -> None:
    profile = to_color_profile(["#FF0000"])
    assert profile == ColorProfile(is_neutral=False, dominant_hue=0, saturation="high", value="high")


def test_missing_or_unreadable_colors_read_as_neutral() -> None:
    assert to_color_profile([]).is_neutral
    assert to_color_profile(["not-a-color"]).is_neutral


def test_color_profile_rejects_unknown_levels() -> None:
    with pytest.raises(ValueError):
        ColorProfile(is_neutral=False, saturation="extreme")


def test_hue_distance_wraps_around_the_wheel() -> None:
    assert hue_distance(350, 10) == 20
    assert hue_distance(0, 180) == 180
    assert hue_distance(90, 90) == 0


def test_style_adjacency_is_symmetric() -> None:
    for pair, value in STYLE_ADJACENCY.items():
        first, second = sorted(pair, key=lambda family: family.value)
        assert style_adjacency(first, second) == style_adjacency(second, first) == value
    assert style_adjacency(StyleFamily.EDGY, StyleFamily.EDGY) == 2
    assert style_adjacency(StyleFamily.BOHO, StyleFamily.STREET) == 0
    assert style_adjacency(StyleFamily.FORMAL, StyleFamily.ATHLEISURE) == -2


def test_casual_vibe_has_lowest_priority() -> None:
    assert to_style_family([StyleVibe.CASUAL, StyleVibe.STREET]) == StyleFamily.STREET
    assert to_style_family([StyleVibe.CASUAL]) == StyleFamily.CLASSIC
    assert to_style_family([], ["floral wrap blouse"]) == StyleFamily.ROMANTIC
    assert to_style_family([], []) == StyleFamily.UNKNOWN


def test_family_from_notes_handles_statement_pieces() -> None:
    assert family_from_notes(["statement fitted piece"]) == StyleFamily.ROMANTIC
    assert family_from_notes(["a statement piece"]) == StyleFamily.EDGY
    assert family_from_notes(["nothing useful"]) == StyleFamily.UNKNOWN


def test_formality_prefers_notes_then_family_baseline() -> None:
    assert infer_formality_level(StyleFamily.MINIMAL, Category.TOPS, ["office shirt"]) == 4
    assert infer_formality_level(StyleFamily.ATHLEISURE, Category.TOPS) == 1
    assert infer_formality_level(StyleFamily.CLASSIC, Category.OUTERWEAR, (), "structured") == 4
    assert infer_formality_level(StyleFamily.FORMAL, Category.OUTERWEAR, (), "structured") == 5


def test_texture_from_notes_or_structure() -> None:
    assert infer_texture_type(["chunky cable knit"]) == TextureType.TEXTURED
    assert infer_texture_type(["raw denim"]) == TextureType.STRUCTURED
    assert infer_texture_type([], "soft") == TextureType.SOFT
    assert infer_texture_type([]) == TextureType.UNKNOWN


def test_copy_vibe_resolution() -> None:
    assert resolve_ui_vibe_for_copy((StyleVibe.CASUAL,), (), StyleFamily.CLASSIC) == StyleVibe.CASUAL
    assert resolve_ui_vibe_for_copy((), (), StyleFamily.FORMAL) == StyleVibe.OFFICE
    assert resolve_ui_vibe_for_copy((StyleVibe.SPORTY, StyleVibe.OFFICE)) == StyleVibe.OFFICE
    assert resolve_ui_vibe_for_copy((), ["urban hoodie"]) == StyleVibe.STREET
