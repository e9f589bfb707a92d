"""Static suggestion copy: Mode A templates, Mode B bullets and explanations.

Mode A bullets describe what to add around the scanned item; each carries a
``target`` category so bullets for pieces the wardrobe already covers can be
filtered out. Mode B bullets explain how to make a near match work and are
keyed by the cap reason that held the pair below HIGH. Per-vibe variants
override the default text when the resolved copy vibe has one.
"""
from __future__ import annotations

import functools
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from models.taxonomy import Category, StyleVibe

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BulletTemplate:
    key: str
    text: str
    target: Optional[Category] = None
    text_by_vibe: Dict[StyleVibe, str] = field(default_factory=dict)

    def resolve(self, vibe: Optional[StyleVibe]) -> str:
        if vibe is not None and vibe in self.text_by_vibe:
            return self.text_by_vibe[vibe]
        return self.text


@dataclass(frozen=True)
class ModeATemplate:
    intro: str
    bullets: Tuple[BulletTemplate, ...]


def _b(key: str, text: str, target: Optional[Category] = None, **by_vibe: str) -> BulletTemplate:
    variants = {StyleVibe(name): value for name, value in by_vibe.items()}
    return BulletTemplate(key=key, text=text, target=target, text_by_vibe=variants)


C = Category

MODE_A_TEMPLATES: Dict[str, ModeATemplate] = {
    "tops": ModeATemplate(
        intro="To make this item easy to wear:",
        bullets=(
            _b(
                "TOPS__BOTTOMS_DARK_STRUCTURED",
                "Dark, structured bottoms",
                C.BOTTOMS,
                office="Tailored dark trousers",
                minimal="Clean-line trousers in a dark neutral",
                street="Dark straight-leg jeans or cargo pants",
            ),
            _b(
                "TOPS__SHOES_NEUTRAL",
                "Neutral everyday shoes",
                C.SHOES,
                office="Loafers or simple flats",
                minimal="Clean low-profile shoes",
                street="Clean white sneakers or simple flats",
            ),
            _b(
                "TOPS__OUTERWEAR_LIGHT_LAYER",
                "Light layer for balance",
                C.OUTERWEAR,
                office="A light blazer or refined cardigan",
                minimal="A streamlined coat or simple cardigan",
                street="An oversized jacket or zip-up hoodie",
            ),
        ),
    ),
    "bottoms": ModeATemplate(
        intro="To complete this look:",
        bullets=(
            _b(
                "BOTTOMS__TOP_NEUTRAL_SIMPLE",
                "Simple top in a neutral tone",
                C.TOPS,
                office="A crisp button-down or polished blouse",
                minimal="A clean tee or sleek knit top",
                street="A relaxed graphic tee or oversized shirt",
            ),
            _b(
                "BOTTOMS__SHOES_EVERYDAY",
                "Everyday shoes that don't compete",
                C.SHOES,
                office="Classic loafers or understated heels",
                minimal="Simple leather sneakers or ballet flats",
                street="Clean sneakers or simple flats",
            ),
            _b(
                "BOTTOMS__OUTERWEAR_OPTIONAL",
                "Optional outer layer for structure",
                C.OUTERWEAR,
                office="A tailored blazer or trench coat",
                minimal="A sleek jacket or structured cardigan",
                street="A denim jacket or leather jacket",
            ),
        ),
    ),
    "shoes": ModeATemplate(
        intro="This works best with:",
        bullets=(
            _b(
                "SHOES__TOP_RELAXED",
                "Relaxed everyday top",
                C.TOPS,
                office="A tucked blouse or fitted knit",
                minimal="A simple tee or clean sweater",
                street="An oversized tee or hoodie",
            ),
            _b(
                "SHOES__BOTTOMS_STRUCTURED",
                "Simple structured bottoms",
                C.BOTTOMS,
                office="Tailored trousers or straight-leg pants",
                minimal="Straight-leg pants in a neutral tone",
                street="Relaxed jeans or cargo pants",
            ),
            _b(
                "SHOES__OUTERWEAR_MINIMAL",
                "Minimal layering",
                C.OUTERWEAR,
                office="A light blazer or lightweight jacket",
                minimal="A simple jacket or lightweight layer",
                street="A utility jacket or lightweight outer layer",
            ),
        ),
    ),
    "outerwear": ModeATemplate(
        intro="This pairs well with:",
        bullets=(
            _b(
                "OUTERWEAR__TOP_BASE",
                "Easy base layer",
                C.TOPS,
                office="A button-down or fine-knit sweater",
                minimal="A fitted tee or simple turtleneck",
                street="A graphic tee or relaxed hoodie",
            ),
            _b(
                "OUTERWEAR__BOTTOMS_BALANCED",
                "Balanced bottoms",
                C.BOTTOMS,
                office="Tailored trousers or wide-leg pants",
                minimal="Clean straight-leg pants",
                street="Relaxed jeans or wide-leg pants",
            ),
            _b(
                "OUTERWEAR__SHOES_SIMPLE",
                "Simple shoes",
                C.SHOES,
                office="Loafers or simple flats",
                minimal="Low-profile sneakers or simple flats",
                street="Clean sneakers or simple flats",
            ),
        ),
    ),
    "dresses": ModeATemplate(
        intro="To complete this look:",
        bullets=(
            _b(
                "DRESSES__SHOES_SIMPLE",
                "Simple shoes that don't compete",
                C.SHOES,
                office="Classic pumps or elegant flats",
                minimal="Sleek sandals or simple mules",
                street="Clean sneakers or simple flats",
                feminine="Ballet flats or delicate heeled sandals",
            ),
            _b(
                "DRESSES__OUTERWEAR_LIGHT",
                "Light outer layer for cooler moments",
                C.OUTERWEAR,
                office="A lightweight blazer or structured cardigan",
                minimal="A lightweight trench or light coat",
                street="A denim jacket or lightweight blazer",
                feminine="A soft cardigan or cropped jacket",
            ),
            _b(
                "DRESSES__ACCESSORIES_MINIMAL",
                "Minimal accessories",
                C.ACCESSORIES,
                office="Simple jewelry and a structured bag",
                minimal="One understated piece",
                street="A cap or simple chain",
                feminine="Delicate jewelry or a small bag",
            ),
        ),
    ),
    "skirts": ModeATemplate(
        intro="To make this item easy to wear:",
        bullets=(
            _b(
                "SKIRTS__TOP_COMPLEMENTARY",
                "Simple top in a complementary tone",
                C.TOPS,
                office="A tucked blouse or fine knit",
                minimal="A fitted tee or simple tank",
                street="A cropped tee or relaxed button-down",
                feminine="A soft blouse or fitted top",
            ),
            _b(
                "SKIRTS__SHOES_EVERYDAY",
                "Everyday shoes",
                C.SHOES,
                office="Loafers or kitten heels",
                minimal="Simple flats or low sneakers",
                street="Clean sneakers or simple flats",
                feminine="Ballet flats or strappy sandals",
            ),
            _b(
                "SKIRTS__OUTERWEAR_OPTIONAL",
                "Optional light layer",
                C.OUTERWEAR,
                office="A cropped blazer or cardigan",
                minimal="A simple jacket",
                street="A denim or utility jacket",
                feminine="A soft cardigan or light jacket",
            ),
        ),
    ),
    "bags": ModeATemplate(
        intro="This works well with:",
        bullets=(
            _b(
                "BAGS__OUTFIT_CLEAN",
                "Clean, simple outfit pieces",
                C.TOPS,
                office="A polished blouse or fine knit",
                minimal="A clean tee or simple top",
                street="A relaxed tee or simple sweatshirt",
            ),
            _b(
                "BAGS__SHOES_NEUTRAL",
                "Neutral everyday shoes",
                C.SHOES,
                office="Classic loafers or simple heels",
                minimal="Sleek flats or low-profile sneakers",
                street="Clean sneakers",
            ),
            _b("BAGS__ACCESSORIES_MINIMAL", "Minimal competing accessories", C.ACCESSORIES),
        ),
    ),
    "accessories": ModeATemplate(
        intro="This complements:",
        bullets=(
            _b("ACCESSORIES__SHOES_NEUTRAL", "Neutral everyday shoes", C.SHOES),
            _b("ACCESSORIES__OUTERWEAR_CLEAN", "Clean layering", C.OUTERWEAR),
        ),
    ),
    "default": ModeATemplate(
        intro="To make this item easy to wear:",
        bullets=(
            _b("DEFAULT__KEEP_SIMPLE", "Keep the other pieces simple"),
            _b("DEFAULT__NEUTRAL_COLORS", "Choose neutral colors"),
            _b("DEFAULT__AVOID_TEXTURE", "Avoid competing textures"),
        ),
    ),
}

MODE_B_INTRO = "To make this pairing work:"

MODE_B_COPY: Dict[str, Tuple[BulletTemplate, ...]] = {
    "FORMALITY_TENSION": (
        _b(
            "FORMALITY_TENSION__MATCH_DRESSINESS",
            "Keep the rest of the outfit at the same level of dressiness.",
            office="Stick to equally polished pieces throughout.",
            street="Keep everything at the same relaxed level.",
        ),
        _b("FORMALITY_TENSION__AVOID_MIX", "Avoid mixing very dressy pieces with very casual ones."),
    ),
    "STYLE_TENSION": (
        _b(
            "STYLE_TENSION__LET_ONE_LEAD",
            "Let one piece set the vibe, and keep the rest simple.",
            minimal="Let this piece stand alone with quiet basics.",
            street="Let this be the statement and keep everything else low-key.",
        ),
        _b("STYLE_TENSION__STICK_CLASSIC", "Stick to clean, classic pieces around this item."),
    ),
    "COLOR_TENSION": (
        _b(
            "COLOR_TENSION__NEUTRAL_OTHERS",
            "Keep the other pieces neutral to avoid competing colors.",
            minimal="Stick to tonal neutrals for the rest.",
            street="Let this color pop against simple black or white.",
        ),
        _b("COLOR_TENSION__CONTRAST_OR_TONAL", "Go for either clear contrast or a tonal look, not both."),
    ),
    "USAGE_MISMATCH": (
        _b(
            "USAGE_MISMATCH__CLEAR_CONTEXT",
            "Match the outfit to one clear context (everyday vs dressy).",
            office="Decide: is this for work or weekend?",
            street="Keep the whole outfit in the same casual lane.",
        ),
        _b("USAGE_MISMATCH__CONSISTENT_PURPOSE", "Keep every piece suited to the same occasion."),
    ),
    "SHOES_CONFIDENCE_DAMPEN": (
        _b(
            "SHOES_CONFIDENCE_DAMPEN__SIMPLE_SHOES",
            "Choose simple shoes that don't compete with the outfit.",
            minimal="Go for sleek, low-profile shoes.",
            street="Clean sneakers work best here.",
            office="Simple loafers or flats won't fight the look.",
        ),
        _b("SHOES_CONFIDENCE_DAMPEN__MINIMAL_SHAPE", "Pick shoes with a minimal shape and color."),
    ),
    "TEXTURE_CLASH": (),
    "MISSING_KEY_SIGNAL": (
        _b("MISSING_KEY_SIGNAL__SIMPLE_VERSATILE", "Keep the other pieces simple and versatile."),
    ),
}

MODE_B_FALLBACK = _b("DEFAULT__GENERIC_FALLBACK", "Let one piece stand out and keep the rest simple.")


@dataclass(frozen=True)
class ExplanationTemplate:
    id: str
    text: str
    soft_text: Optional[str] = None
    pair_types: Tuple[str, ...] = ("any",)


EXPLANATION_TEMPLATES: Tuple[ExplanationTemplate, ...] = (
    ExplanationTemplate(
        "top_bottom_balance",
        "Easy + easy: clean, effortless balance.",
        "The shapes feel consistent, so the outfit reads put-together.",
        ("tops_bottoms",),
    ),
    ExplanationTemplate(
        "top_bottom_relaxed",
        "Same level of relaxedness, it looks intentional.",
        "The shapes feel consistent, so the outfit reads put-together.",
        ("tops_bottoms",),
    ),
    ExplanationTemplate(
        "top_shoes_cohesive",
        "Simple shoes keep the look cohesive.",
        "The shoe vibe matches the top's energy.",
        ("tops_shoes",),
    ),
    ExplanationTemplate("top_shoes_casual", "Keeps the outfit grounded and everyday.", None, ("tops_shoes",)),
    ExplanationTemplate(
        "bottom_shoes_ground",
        "Balanced proportions from the ground up.",
        "They share the same level of polish.",
        ("bottoms_shoes",),
    ),
    ExplanationTemplate(
        "bottom_shoes_function",
        "A clean finish that doesn't compete with the silhouette.",
        None,
        ("bottoms_shoes",),
    ),
    ExplanationTemplate(
        "top_outerwear_structure",
        "Adds structure without changing the vibe.",
        "A light layer makes it feel finished.",
        ("tops_outerwear",),
    ),
    ExplanationTemplate(
        "dress_shoes_balance",
        "Same dressiness level, nothing feels off.",
        "A simple pairing that lets the dress lead.",
        ("dresses_shoes",),
    ),
    ExplanationTemplate("generic_harmony", "Easy to wear together."),
    ExplanationTemplate("generic_no_compete", "A safe, cohesive pairing."),
)

def mode_a_template_for(category: Optional[Category]) -> ModeATemplate:
    if category is None:
        return MODE_A_TEMPLATES["default"]
    return MODE_A_TEMPLATES.get(category.value, MODE_A_TEMPLATES["default"])


def templates_for_pair(pair_type: str) -> List[ExplanationTemplate]:
    """Pair-specific explanation templates, falling back to the generic set."""

    specific = [template for template in EXPLANATION_TEMPLATES if pair_type in template.pair_types]
    if specific:
        return specific
    return [template for template in EXPLANATION_TEMPLATES if "any" in template.pair_types]


def _all_bullets() -> Dict[str, BulletTemplate]:
    index: Dict[str, BulletTemplate] = {}
    for template in MODE_A_TEMPLATES.values():
        for bullet in template.bullets:
            index.setdefault(bullet.key, bullet)
    for bullets in MODE_B_COPY.values():
        for bullet in bullets:
            index.setdefault(bullet.key, bullet)
    index.setdefault(MODE_B_FALLBACK.key, MODE_B_FALLBACK)
    return index


_BULLET_INDEX = _all_bullets()


@functools.lru_cache(maxsize=None)
def _warn_unknown_key(key: str) -> None:
    logger.warning("Unknown suggestion bullet key '%s'", key)


def resolve_bullet_title(key: str, vibe: Optional[StyleVibe] = None) -> Optional[str]:
    """Resolve display text for any Mode A or Mode B bullet key.

    Returns ``None`` for unknown keys; each unknown key is logged once.
    """

    bullet = _BULLET_INDEX.get(key)
    if bullet is None:
        _warn_unknown_key(key)
        return None
    return bullet.resolve(vibe)


__all__ = [
    "BulletTemplate",
    "ModeATemplate",
    "ExplanationTemplate",
    "MODE_A_TEMPLATES",
    "MODE_B_INTRO",
    "MODE_B_COPY",
    "MODE_B_FALLBACK",
    "EXPLANATION_TEMPLATES",
    "mode_a_template_for",
    "templates_for_pair",
    "resolve_bullet_title",
]
