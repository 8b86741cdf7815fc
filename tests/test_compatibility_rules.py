"""Tests for pairwise compatibility rules and outfit validation."""
from __future__ import annotations

import sys
from itertools import permutations
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from logic.compatibility_rules import (
    category_compatible,
    check_color,
    formality_compatible,
    texture_compatible,
    validate_outfit,
)
from models.taxonomy import Category, Formality, RuleAxis, Texture
from models.wardrobe_item import ClothingItem


def _item(item_id: str, category: str, colors, texture: str = "smooth", formality: str = "casual") -> ClothingItem:
    return ClothingItem(item_id=item_id, category=category, texture=texture, formality=formality, colors=colors)


def test_neutral_top_and_bottom_is_fully_compatible() -> None:
    top = _item("top", "tops", ["white"])
    bottom = _item("bottom", "bottoms", ["navy"])

    result = validate_outfit([top, bottom])

    assert result.is_valid
    assert result.score == 100
    assert len(result.rules) == 4
    assert {rule.axis for rule in result.rules} == set(RuleAxis)
    assert result.suggestions == []
    assert result.rationale[-1] == "Outfit has good overall compatibility"


def test_same_category_pair_scores_lower() -> None:
    first = _item("top-a", "tops", ["white"])
    second = _item("top-b", "tops", ["navy"])

    result = validate_outfit([first, second])

    assert result.score == 75
    assert result.is_valid
    assert any("pairing category" in suggestion for suggestion in result.suggestions)


def test_failing_every_axis_is_invalid() -> None:
    first = _item("gala", "tops", ["purple"], texture="shiny", formality="black_tie")
    second = _item("knit", "tops", ["gold"], texture="textured", formality="casual")

    result = validate_outfit([first, second])

    assert result.score == 0
    assert not result.is_valid
    assert result.rationale[-1] == "Outfit needs adjustments for better compatibility"
    assert not any(rule.passed for rule in result.rules)


def test_empty_and_single_item_outfits_are_vacuously_valid() -> None:
    assert validate_outfit([]).score == 100
    single = validate_outfit([_item("solo", "dresses", ["red"])])
    assert single.is_valid and single.score == 100
    assert single.rules == []


def test_score_does_not_depend_on_item_order() -> None:
    items = [
        _item("a", "tops", ["white"], texture="cotton"),
        _item("b", "bottoms", ["navy"], texture="wool", formality="smart_casual"),
        _item("c", "shoes", ["brown"], texture="shiny", formality="business"),
    ]

    scores = {validate_outfit(list(order)).score for order in permutations(items)}
    validity = {validate_outfit(list(order)).is_valid for order in permutations(items)}

    assert len(scores) == 1
    assert len(validity) == 1


def test_validity_tracks_the_threshold() -> None:
    pool = [
        _item("a", "tops", ["white"]),
        _item("b", "tops", ["gold"], texture="shiny", formality="formal"),
        _item("c", "bottoms", ["purple"], texture="rough"),
        _item("d", "shoes", [], texture="matte", formality="business"),
    ]
    for first, second in permutations(pool, 2):
        result = validate_outfit([first, second])
        assert 0 <= result.score <= 100
        assert result.is_valid == (result.score >= 60)


def test_items_without_colors_are_flagged_as_clashing() -> None:
    top = _item("top", "tops", [])
    bottom = _item("bottom", "bottoms", ["navy"])

    check = check_color(top, bottom)

    assert not check.passed
    assert "may clash" in check.rule.statement
    assert check.suggestion == "Try pairing tops with neutral colors"


def test_texture_rules_require_mutual_acceptance() -> None:
    assert texture_compatible(Texture.SMOOTH, Texture.PATTERNED)
    assert texture_compatible(Texture.SHINY, Texture.MATTE)
    assert not texture_compatible(Texture.SHINY, Texture.TEXTURED)
    assert not texture_compatible(Texture.TEXTURED, Texture.SHINY)
    # fabric tags collapse onto their surface family
    assert texture_compatible(Texture.COTTON, Texture.WOOL)


def test_formality_gap_of_one_is_allowed() -> None:
    assert formality_compatible(Formality.CASUAL, Formality.SMART_CASUAL)
    assert not formality_compatible(Formality.CASUAL, Formality.BUSINESS_CASUAL)
    assert formality_compatible(Formality.CASUAL, Formality.BUSINESS_CASUAL, max_gap=2)


def test_category_table_is_symmetric_without_self_pairs() -> None:
    for first in Category:
        assert not category_compatible(first, first)
        for second in Category:
            assert category_compatible(first, second) == category_compatible(second, first)
