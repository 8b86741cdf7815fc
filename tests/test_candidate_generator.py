"""Tests for exhaustive outfit seeding."""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import List

sys.path.append(str(Path(__file__).resolve().parents[1]))

from composer_app.config import EngineSettings
from logic.candidate_generator import combination_count, suggest_outfits
from models.wardrobe_item import ClothingItem


def _wardrobe() -> List[ClothingItem]:
    return [
        ClothingItem("t1", "tops", "smooth", "casual", colors=["white"]),
        ClothingItem("b1", "bottoms", "smooth", "casual", colors=["navy"]),
        ClothingItem("s1", "shoes", "smooth", "casual", colors=["white"]),
    ]


def test_combination_count_covers_sizes_two_to_four() -> None:
    assert combination_count(2) == 1
    assert combination_count(3) == 4
    assert combination_count(5) == 25
    assert combination_count(1) == 0


def test_suggestions_keep_lexicographic_order_for_ties() -> None:
    suggestions = suggest_outfits(_wardrobe())

    assert [s.item_ids for s in suggestions] == [
        ("t1", "b1"),
        ("t1", "s1"),
        ("b1", "s1"),
        ("t1", "b1", "s1"),
    ]
    assert all(s.score == 100 for s in suggestions)
    assert "good overall compatibility" in suggestions[0].rationale


def test_low_scoring_pairs_are_excluded() -> None:
    items = _wardrobe() + [ClothingItem("t2", "tops", "smooth", "black_tie", colors=["navy"])]

    suggestions = suggest_outfits(items)

    assert ("t1", "t2") not in [s.item_ids for s in suggestions]
    assert all(s.score >= 70 for s in suggestions)
    scores = [s.score for s in suggestions]
    assert scores == sorted(scores, reverse=True)


def test_min_score_and_limit_are_honoured() -> None:
    assert suggest_outfits(_wardrobe(), min_score=101) == []
    assert len(suggest_outfits(_wardrobe(), limit=2)) == 2


def test_large_inventory_logs_a_warning(caplog) -> None:
    settings = EngineSettings(inventory_soft_cap=2)
    with caplog.at_level(logging.WARNING, logger="logic.candidate_generator"):
        suggest_outfits(_wardrobe(), settings=settings)
    assert any("soft cap" in record.getMessage() for record in caplog.records)
