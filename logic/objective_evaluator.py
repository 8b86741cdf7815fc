"""Hard-gate filtering and multi-objective scoring for one candidate outfit."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Mapping, Optional, Sequence

from composer_app.config import DEFAULT_SETTINGS, EngineSettings
from logic.candidate_generator import MAX_OUTFIT_SIZE, MIN_OUTFIT_SIZE
from logic.compatibility_rules import validate_outfit
from memory.history_store import HistoryStore
from models.errors import InputError, UnknownItemError
from models.optimization import (
    COST,
    NOVELTY,
    REWEAR,
    STYLE,
    OptimizationConfig,
    OutfitConstraints,
    WeatherSnapshot,
)
from models.outfit import CandidateMetadata, OutfitCandidate, clamp_score
from models.taxonomy import (
    BREATHABLE_TEXTURES,
    LIGHT_CATEGORIES,
    LIGHT_TEXTURES,
    SECURE_CATEGORIES,
    SECURE_TEXTURES,
    WARM_CATEGORIES,
    WARM_KINDS,
    WARM_TEXTURES,
    WATER_RESISTANT_CATEGORIES,
    WATER_RESISTANT_TEXTURES,
)
from models.wardrobe_item import ClothingItem

logger = logging.getLogger(__name__)

Inventory = Mapping[str, ClothingItem]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def index_inventory(items: Sequence[ClothingItem] | Inventory) -> Inventory:
    """Key an inventory by item id; later duplicates are ignored."""

    if isinstance(items, Mapping):
        return items
    indexed: Dict[str, ClothingItem] = {}
    for item in items:
        indexed.setdefault(item.item_id, item)
    return indexed


def _any_item(items: Sequence[ClothingItem], categories, textures, kinds=frozenset()) -> bool:
    return any(
        item.category in categories or item.texture in textures or item.kind in kinds for item in items
    )


def weather_compatibility(
    items: Sequence[ClothingItem], weather: WeatherSnapshot, settings: EngineSettings = DEFAULT_SETTINGS
) -> float:
    """Score 0-100 for how well the items suit the weather snapshot."""

    score = 100.0
    if weather.temperature_c < settings.cold_below_c:
        if not _any_item(items, WARM_CATEGORIES, WARM_TEXTURES, WARM_KINDS):
            score -= settings.cold_penalty
    elif weather.temperature_c > settings.hot_above_c:
        if not _any_item(items, LIGHT_CATEGORIES, LIGHT_TEXTURES):
            score -= settings.hot_penalty

    if weather.precipitation_mm_h > settings.rain_above_mm_h:
        if not _any_item(items, WATER_RESISTANT_CATEGORIES, WATER_RESISTANT_TEXTURES):
            score -= settings.rain_penalty

    if weather.wind_speed_kmh is not None and weather.wind_speed_kmh > settings.wind_above_kmh:
        if not _any_item(items, SECURE_CATEGORIES, SECURE_TEXTURES):
            score -= settings.wind_penalty

    if weather.humidity_pct is not None and weather.humidity_pct > settings.humidity_above_pct:
        if not _any_item(items, frozenset(), BREATHABLE_TEXTURES):
            score -= settings.humidity_penalty

    return max(0.0, score)


def weather_suggestions(weather: WeatherSnapshot, settings: EngineSettings = DEFAULT_SETTINGS) -> List[str]:
    """Dressing tips for a weather snapshot, shown next to the candidates."""

    suggestions: List[str] = []
    if weather.temperature_c < settings.cold_below_c:
        suggestions.append("Layer up with warm outerwear")
        suggestions.append("Choose wool or fleece textures")
    elif weather.temperature_c > settings.hot_above_c:
        suggestions.append("Opt for light, breathable fabrics")
        suggestions.append("Consider cotton or linen materials")

    if weather.precipitation_mm_h > settings.rain_above_mm_h:
        suggestions.append("Include water-resistant outerwear")
        suggestions.append("Choose waterproof footwear")

    if weather.wind_speed_kmh is not None and weather.wind_speed_kmh > settings.wind_above_kmh:
        suggestions.append("Secure items that won't blow around")
        suggestions.append("Consider heavier fabrics")

    if weather.humidity_pct is not None and weather.humidity_pct > settings.humidity_above_pct:
        suggestions.append("Choose breathable, moisture-wicking fabrics")
        suggestions.append("Avoid heavy, non-breathable materials")
    return suggestions


class ObjectiveEvaluator:
    """Applies hard gates then scores style, novelty, re-wear and cost.

    The evaluator only reads the history store; recording wears and shown
    outfits is left to explicit calls on the owning optimizer.
    """

    def __init__(
        self,
        config: OptimizationConfig,
        history: HistoryStore,
        settings: EngineSettings = DEFAULT_SETTINGS,
        now: Callable[[], datetime] = utc_now,
    ) -> None:
        self.config = config
        self.history = history
        self.settings = settings
        self._now = now

    def evaluate(
        self,
        item_ids: Sequence[str],
        inventory: Sequence[ClothingItem] | Inventory,
        constraints: Optional[OutfitConstraints] = None,
        config: Optional[OptimizationConfig] = None,
    ) -> Optional[OutfitCandidate]:
        """Return a scored candidate, or ``None`` when a hard gate rejects it."""

        ids = [str(item_id) for item_id in item_ids]
        if len(set(ids)) != len(ids):
            raise InputError(f"Candidate repeats an item: {ids}")
        if not MIN_OUTFIT_SIZE <= len(ids) <= MAX_OUTFIT_SIZE:
            raise InputError(f"Candidate size {len(ids)} outside [{MIN_OUTFIT_SIZE}, {MAX_OUTFIT_SIZE}]")
        indexed = index_inventory(inventory)
        missing = [item_id for item_id in ids if item_id not in indexed]
        if missing:
            raise UnknownItemError(missing)
        items = [indexed[item_id] for item_id in ids]
        constraints = constraints or OutfitConstraints()
        total_cost = sum(item.cost or 0 for item in items)

        if constraints.max_cost is not None and total_cost > constraints.max_cost:
            logger.debug("Rejected %s: cost %s over budget %s", ids, total_cost, constraints.max_cost)
            return None
        if constraints.formality is not None and any(item.formality != constraints.formality for item in items):
            logger.debug("Rejected %s: formality differs from %s", ids, constraints.formality.value)
            return None
        weather_score: Optional[float] = None
        if constraints.weather is not None:
            weather_score = weather_compatibility(items, constraints.weather, self.settings)
            if weather_score < self.settings.weather_gate:
                logger.debug("Rejected %s: weather score %.0f", ids, weather_score)
                return None

        style = float(validate_outfit(items, self.settings).score)
        novelty = self.novelty_score(ids)
        rewear = self.rewear_score(items)
        cost = self.cost_score(items, constraints.max_cost)
        objectives = {STYLE: style, NOVELTY: novelty, REWEAR: rewear, COST: cost}

        return OutfitCandidate(
            item_ids=ids,
            score=self.weighted_score(objectives, config or self.config),
            objectives=objectives,
            rationale=self.rationale(objectives, constraints),
            metadata=CandidateMetadata(
                style_score=style,
                novelty_score=novelty,
                rewear_score=rewear,
                cost_score=cost,
                total_cost=total_cost,
                wear_count=sum(item.wear_count or 0 for item in items),
                weather_score=weather_score,
            ),
        )

    def novelty_score(self, item_ids: List[str]) -> float:
        if self.history.has_seen(item_ids):
            return clamp_score(self.settings.novelty_seen_score)
        mean_wears = self.history.mean_wear_count(item_ids)
        return clamp_score(100 - self.settings.novelty_wear_penalty * mean_wears)

    def rewear_score(self, items: Sequence[ClothingItem]) -> float:
        cutoff = self._now() - timedelta(days=self.settings.recent_wear_days)
        score = 100.0
        for item in items:
            if item.last_worn is not None and item.last_worn > cutoff:
                score -= self.settings.recent_wear_penalty
            if item.wear_count is not None and item.wear_count > self.settings.over_worn_threshold:
                score -= self.settings.over_worn_penalty
        return max(0.0, score)

    @staticmethod
    def cost_score(items: Sequence[ClothingItem], max_cost: Optional[int] = None) -> float:
        total_cost = sum(item.cost or 0 for item in items)
        if not max_cost:
            mean_cost = total_cost / len(items) if items else 0
            if mean_cost < 50:
                return 90.0
            if mean_cost < 100:
                return 70.0
            if mean_cost < 200:
                return 50.0
            return 30.0

        ratio = total_cost / max_cost
        if ratio <= 0.7:
            return 100.0
        if ratio <= 0.9:
            return 80.0
        if ratio <= 1.0:
            return 60.0
        return max(0.0, 100 - (ratio - 1) * 50)

    @staticmethod
    def weighted_score(objectives: Mapping[str, float], config: OptimizationConfig) -> float:
        total = 0.0
        total_weight = 0.0
        for objective in config.objectives:
            total += objective.normalise(objectives.get(objective.name, 0.0)) * objective.weight
            total_weight += objective.weight
        if total_weight <= 0:
            return 0.0
        return clamp_score(total / total_weight * 100)

    @staticmethod
    def rationale(objectives: Mapping[str, float], constraints: OutfitConstraints) -> str:
        lines: List[str] = []
        style = objectives.get(STYLE, 0.0)
        if style > 80:
            lines.append("Excellent style coordination")
        elif style > 60:
            lines.append("Good style balance")
        if objectives.get(NOVELTY, 0.0) > 70:
            lines.append("Fresh combination")
        if objectives.get(REWEAR, 0.0) > 80:
            lines.append("Perfect for rotation")
        if objectives.get(COST, 0.0) > 80:
            lines.append("Budget-friendly")
        if constraints.weather is not None:
            lines.append(f"Weather-appropriate for {constraints.weather.temperature_c:g}°C")
        if constraints.occasion:
            lines.append(f"Suitable for {constraints.occasion}")
        return ". ".join(lines) + "." if lines else ""


__all__ = [
    "ObjectiveEvaluator",
    "index_inventory",
    "utc_now",
    "weather_compatibility",
    "weather_suggestions",
]
