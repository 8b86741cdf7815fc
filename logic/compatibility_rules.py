"""Pairwise compatibility rules and the outfit validation verdict."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from itertools import combinations
from typing import List, Sequence

from composer_app.config import DEFAULT_SETTINGS, EngineSettings
from models.color_theory import best_pair_harmony
from models.outfit import CompatibilityRule, OutfitValidation
from models.taxonomy import (
    CATEGORY_COMPATIBILITY,
    TEXTURE_COMPATIBILITY,
    Category,
    Formality,
    RuleAxis,
    Texture,
    surface_family,
)
from models.wardrobe_item import ClothingItem

logger = logging.getLogger(__name__)

CHECKS_PER_PAIR = 4


@dataclass(frozen=True)
class PairCheck:
    """Outcome of a single axis check for one item pair."""

    passed: bool
    rule: CompatibilityRule
    rationale: str | None = None
    suggestion: str | None = None


def _colors_label(colors: Sequence[str]) -> str:
    return ", ".join(colors) if colors else "no listed colors"


def texture_compatible(first: Texture, second: Texture) -> bool:
    """Both items' own rows must accept the other's surface family."""

    family_a, family_b = surface_family(first), surface_family(second)
    return family_b in TEXTURE_COMPATIBILITY[family_a] and family_a in TEXTURE_COMPATIBILITY[family_b]


def formality_compatible(first: Formality, second: Formality, max_gap: int = 1) -> bool:
    return abs(first.level - second.level) <= max_gap


def category_compatible(first: Category, second: Category) -> bool:
    return second in CATEGORY_COMPATIBILITY[first]


def check_color(first: ClothingItem, second: ClothingItem, settings: EngineSettings = DEFAULT_SETTINGS) -> PairCheck:
    score = best_pair_harmony(first.colors, second.colors)
    colors_a, colors_b = _colors_label(first.colors), _colors_label(second.colors)
    if score > settings.color_pass_threshold:
        return PairCheck(
            passed=True,
            rule=CompatibilityRule(
                axis=RuleAxis.COLOR,
                statement=f"Colors {colors_a} and {colors_b} work well together",
                rationale=f"Color compatibility score: {score * 100:.0f}%",
                weight=score,
                passed=True,
            ),
            rationale=f"Good color harmony between {first.category.value} and {second.category.value}",
        )
    if score < settings.color_clash_threshold:
        return PairCheck(
            passed=False,
            rule=CompatibilityRule(
                axis=RuleAxis.COLOR,
                statement=f"Colors {colors_a} and {colors_b} may clash",
                rationale="Consider using neutral colors or complementary shades",
                weight=0.8,
                passed=False,
            ),
            suggestion=f"Try pairing {first.category.value} with neutral colors",
        )
    return PairCheck(
        passed=False,
        rule=CompatibilityRule(
            axis=RuleAxis.COLOR,
            statement=f"Colors {colors_a} and {colors_b} are neither harmonious nor clashing",
            rationale=f"Color compatibility score: {score * 100:.0f}%",
            weight=score,
            passed=False,
        ),
        suggestion=(
            f"Swap the {second.category.value} for a neutral or analogous shade "
            f"to lift the harmony with {first.category.value}"
        ),
    )


def check_texture(first: ClothingItem, second: ClothingItem) -> PairCheck:
    texture_a, texture_b = first.texture.value, second.texture.value
    if texture_compatible(first.texture, second.texture):
        return PairCheck(
            passed=True,
            rule=CompatibilityRule(
                axis=RuleAxis.TEXTURE,
                statement=f"{texture_a} and {texture_b} textures complement each other",
                rationale="Textures create visual interest without overwhelming",
                weight=0.7,
                passed=True,
            ),
        )
    return PairCheck(
        passed=False,
        rule=CompatibilityRule(
            axis=RuleAxis.TEXTURE,
            statement=f"{texture_a} and {texture_b} textures may not work well together",
            rationale="Consider balancing smooth and textured pieces",
            weight=0.6,
            passed=False,
        ),
        suggestion=f"Balance {texture_a} texture with contrasting textures",
    )


def check_formality(
    first: ClothingItem, second: ClothingItem, settings: EngineSettings = DEFAULT_SETTINGS
) -> PairCheck:
    formality_a, formality_b = first.formality.value, second.formality.value
    if formality_compatible(first.formality, second.formality, settings.max_formality_gap):
        return PairCheck(
            passed=True,
            rule=CompatibilityRule(
                axis=RuleAxis.FORMALITY,
                statement=f"{formality_a} and {formality_b} formality levels are compatible",
                rationale="Formality levels create a cohesive look",
                weight=0.8,
                passed=True,
            ),
        )
    return PairCheck(
        passed=False,
        rule=CompatibilityRule(
            axis=RuleAxis.FORMALITY,
            statement=f"{formality_a} and {formality_b} formality levels may not match",
            rationale="Consider matching formality levels for better cohesion",
            weight=0.7,
            passed=False,
        ),
        suggestion=f"Match formality levels between {first.category.value} and {second.category.value}",
    )


def check_category(first: ClothingItem, second: ClothingItem) -> PairCheck:
    category_a, category_b = first.category.value, second.category.value
    if category_compatible(first.category, second.category):
        return PairCheck(
            passed=True,
            rule=CompatibilityRule(
                axis=RuleAxis.CATEGORY,
                statement=f"{category_a} and {category_b} categories work well together",
                rationale="These categories are designed to be paired",
                weight=0.9,
                passed=True,
            ),
        )
    return PairCheck(
        passed=False,
        rule=CompatibilityRule(
            axis=RuleAxis.CATEGORY,
            statement=f"{category_a} and {category_b} categories may not be ideal",
            rationale="Consider standard category pairings",
            weight=0.5,
            passed=False,
        ),
        suggestion=f"Swap one of the two {category_a} for a piece from a pairing category"
        if first.category == second.category
        else f"Pair {category_a} with a category it is usually worn with",
    )


def validate_outfit(
    items: Sequence[ClothingItem], settings: EngineSettings = DEFAULT_SETTINGS
) -> OutfitValidation:
    """Score every unordered item pair on color, texture, formality and category.

    The score is the share of passing checks across all pairs and axes. Zero or
    one item has no pair to fail, so it is vacuously valid with a score of 100.
    """

    rules: List[CompatibilityRule] = []
    rationale: List[str] = []
    suggestions: List[str] = []
    passes = 0
    pairs = 0

    for first, second in combinations(items, 2):
        pairs += 1
        for check in (
            check_color(first, second, settings),
            check_texture(first, second),
            check_formality(first, second, settings),
            check_category(first, second),
        ):
            rules.append(check.rule)
            if check.passed:
                passes += 1
            if check.rationale:
                rationale.append(check.rationale)
            if check.suggestion and check.suggestion not in suggestions:
                suggestions.append(check.suggestion)

    score = math.floor(passes / (pairs * CHECKS_PER_PAIR) * 100 + 0.5) if pairs else 100
    is_valid = score >= settings.validity_threshold
    rationale.append(
        "Outfit has good overall compatibility" if is_valid else "Outfit needs adjustments for better compatibility"
    )
    logger.debug("validated %s items over %s pairs -> score=%s valid=%s", len(items), pairs, score, is_valid)
    return OutfitValidation(
        is_valid=is_valid,
        score=score,
        rules=rules,
        rationale=rationale,
        suggestions=suggestions,
    )


__all__ = [
    "PairCheck",
    "texture_compatible",
    "formality_compatible",
    "category_compatible",
    "check_color",
    "check_texture",
    "check_formality",
    "check_category",
    "validate_outfit",
]
