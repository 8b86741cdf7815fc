"""Tests for hard gates and objective scoring."""
from __future__ import annotations

import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import List

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from logic.objective_evaluator import ObjectiveEvaluator, weather_compatibility, weather_suggestions
from memory.history_store import InMemoryHistoryStore
from models.errors import InputError, UnknownItemError
from models.optimization import Objective, OptimizationConfig, OutfitConstraints, WeatherSnapshot
from models.wardrobe_item import ClothingItem

NOW = datetime(2026, 1, 31, 12, 0, tzinfo=timezone.utc)


def _items() -> List[ClothingItem]:
    return [
        ClothingItem("top", "tops", "cotton", "casual", colors=["white"], cost=2000),
        ClothingItem("bottom", "bottoms", "smooth", "casual", colors=["navy"], cost=3000),
        ClothingItem("coat", "outerwear", "wool", "smart_casual", colors=["gray"], cost=9000),
    ]


def _evaluator(history: InMemoryHistoryStore | None = None) -> ObjectiveEvaluator:
    return ObjectiveEvaluator(OptimizationConfig(), history or InMemoryHistoryStore(), now=lambda: NOW)


def test_unconstrained_candidate_scores_every_objective() -> None:
    candidate = _evaluator().evaluate(["top", "bottom"], _items())

    assert candidate is not None
    assert candidate.objectives == {"style": 100.0, "novelty": 100.0, "rewear": 100.0, "cost": 30.0}
    assert candidate.score == pytest.approx(89.5)
    assert candidate.metadata.total_cost == 5000
    assert candidate.metadata.weather_score is None
    assert candidate.key == "bottom,top"


def test_budget_gate_rejects_expensive_outfits() -> None:
    evaluator = _evaluator()
    assert evaluator.evaluate(["top", "bottom"], _items(), OutfitConstraints(max_cost=4000)) is None

    within = evaluator.evaluate(["top", "bottom"], _items(), OutfitConstraints(max_cost=10000))
    assert within is not None and within.objectives["cost"] == 100.0


def test_formality_gate_requires_every_item_to_match() -> None:
    evaluator = _evaluator()
    assert evaluator.evaluate(["top", "bottom"], _items(), OutfitConstraints(formality="business")) is None
    assert evaluator.evaluate(["top", "coat"], _items(), OutfitConstraints(formality="casual")) is None
    assert evaluator.evaluate(["top", "bottom"], _items(), OutfitConstraints(formality="casual")) is not None


def test_weather_gate_drops_low_weather_scores() -> None:
    evaluator = _evaluator()
    chilly = OutfitConstraints(weather=WeatherSnapshot(temperature_c=5))
    stormy = OutfitConstraints(weather=WeatherSnapshot(temperature_c=5, precipitation_mm_h=2))

    candidate = evaluator.evaluate(["top", "bottom"], _items(), chilly)
    assert candidate is not None and candidate.metadata.weather_score == 60.0
    assert evaluator.evaluate(["top", "bottom"], _items(), stormy) is None
    # outerwear covers both cold and rain
    covered = evaluator.evaluate(["top", "bottom", "coat"], _items(), stormy)
    assert covered is not None and covered.metadata.weather_score == 100.0


def test_weather_compatibility_penalties() -> None:
    items = _items()[:2]
    assert weather_compatibility(items, WeatherSnapshot(temperature_c=30)) == 100.0
    assert weather_compatibility(items[1:], WeatherSnapshot(temperature_c=30)) == 70.0
    assert weather_compatibility(items[:1], WeatherSnapshot(temperature_c=18, wind_speed_kmh=25)) == 80.0
    assert weather_compatibility(items[1:], WeatherSnapshot(temperature_c=18, humidity_pct=85)) == 90.0
    assert weather_compatibility([], WeatherSnapshot(temperature_c=-5, precipitation_mm_h=3, wind_speed_kmh=40)) == 10.0


def test_weather_suggestions_follow_conditions() -> None:
    cold = weather_suggestions(WeatherSnapshot(temperature_c=2, precipitation_mm_h=1))
    assert "Layer up with warm outerwear" in cold
    assert "Include water-resistant outerwear" in cold
    assert weather_suggestions(WeatherSnapshot(temperature_c=18)) == []


def test_novelty_reflects_history() -> None:
    history = InMemoryHistoryStore()
    evaluator = _evaluator(history)

    history.record_wear("top")
    history.record_wear("top")
    assert evaluator.novelty_score(["top", "bottom"]) == 90.0

    history.record_outfit_shown(["bottom", "top"])
    assert evaluator.novelty_score(["top", "bottom"]) == 20.0


def test_rewear_penalises_recent_and_heavily_worn_items() -> None:
    items = [
        ClothingItem("a", "tops", "smooth", "casual", last_worn=datetime(2026, 1, 25)),
        ClothingItem("b", "bottoms", "smooth", "casual", wear_count=12),
        ClothingItem("c", "shoes", "smooth", "casual", last_worn="2025-11-01T08:00:00Z", wear_count=3),
    ]
    assert _evaluator().rewear_score(items) == 70.0


def test_cost_score_bands() -> None:
    cheap = [
        ClothingItem("a", "tops", "smooth", "casual", cost=20),
        ClothingItem("b", "bottoms", "smooth", "casual", cost=40),
    ]
    assert ObjectiveEvaluator.cost_score(cheap) == 90.0
    assert ObjectiveEvaluator.cost_score(cheap, 0) == 90.0
    assert ObjectiveEvaluator.cost_score(cheap, 70) == 80.0
    assert ObjectiveEvaluator.cost_score(cheap, 50) == pytest.approx(90.0)


def test_weighted_score_handles_zero_weights() -> None:
    objectives = {"style": 100.0, "novelty": 100.0, "rewear": 100.0, "cost": 90.0}
    assert ObjectiveEvaluator.weighted_score(objectives, OptimizationConfig()) == pytest.approx(98.5)
    zero = OptimizationConfig(objectives=(Objective("style", weight=0.0),))
    assert ObjectiveEvaluator.weighted_score(objectives, zero) == 0.0


def test_rationale_lists_the_strong_points() -> None:
    objectives = {"style": 100.0, "novelty": 100.0, "rewear": 100.0, "cost": 90.0}
    constraints = OutfitConstraints(occasion="dinner", weather=WeatherSnapshot(temperature_c=8))

    assert ObjectiveEvaluator.rationale(objectives, constraints) == (
        "Excellent style coordination. Fresh combination. Perfect for rotation. "
        "Budget-friendly. Weather-appropriate for 8°C. Suitable for dinner."
    )
    assert ObjectiveEvaluator.rationale({"style": 65.0}, OutfitConstraints()) == "Good style balance."
    assert ObjectiveEvaluator.rationale({}, OutfitConstraints()) == ""


def test_malformed_candidates_raise() -> None:
    evaluator = _evaluator()
    with pytest.raises(UnknownItemError) as excinfo:
        evaluator.evaluate(["top", "ghost"], _items())
    assert excinfo.value.item_ids == ["ghost"]
    with pytest.raises(InputError):
        evaluator.evaluate(["top", "top"], _items())
    with pytest.raises(InputError):
        evaluator.evaluate(["top"], _items())


def test_garment_labels_count_as_warm_layers() -> None:
    sweater = ClothingItem("sweater", "sweater", "cotton", "casual", colors=["red"])
    bottom = ClothingItem("bottom", "bottoms", "smooth", "casual", colors=["navy"])
    cold = WeatherSnapshot(temperature_c=3)

    assert sweater.category.value == "tops"
    assert sweater.kind == "sweater"
    assert weather_compatibility([sweater, bottom], cold) == 100.0
    assert weather_compatibility([ClothingItem("tee", "tops", "cotton", "casual"), bottom], cold) == 60.0
