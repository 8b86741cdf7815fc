"""Exhaustive seeding of rule-approved outfits from a small inventory."""
from __future__ import annotations

import logging
from itertools import combinations
from math import comb
from typing import List, Sequence

from composer_app.config import DEFAULT_SETTINGS, EngineSettings
from logic.compatibility_rules import validate_outfit
from models.outfit import OutfitSuggestion
from models.wardrobe_item import ClothingItem

logger = logging.getLogger(__name__)

MIN_OUTFIT_SIZE = 2
MAX_OUTFIT_SIZE = 4


def combination_count(inventory_size: int) -> int:
    """Number of combinations ``suggest_outfits`` validates for an inventory."""

    upper = min(MAX_OUTFIT_SIZE, inventory_size)
    return sum(comb(inventory_size, size) for size in range(MIN_OUTFIT_SIZE, upper + 1))


def suggest_outfits(
    items: Sequence[ClothingItem],
    min_score: int | None = None,
    limit: int | None = None,
    settings: EngineSettings = DEFAULT_SETTINGS,
) -> List[OutfitSuggestion]:
    """Return the best-scoring valid combinations of 2 to 4 items.

    Combinations are enumerated in lexicographic order and the sort is stable,
    so equal scores keep that order. This path is not time boxed; callers must
    keep the inventory small.
    """

    threshold = settings.suggestion_min_score if min_score is None else min_score
    cap = settings.suggestion_limit if limit is None else limit
    if len(items) > settings.inventory_soft_cap:
        logger.warning(
            "Inventory of %s items exceeds the soft cap of %s; validating %s combinations",
            len(items),
            settings.inventory_soft_cap,
            combination_count(len(items)),
        )

    suggestions: List[OutfitSuggestion] = []
    scanned = 0
    for size in range(MIN_OUTFIT_SIZE, min(MAX_OUTFIT_SIZE, len(items)) + 1):
        for combination in combinations(items, size):
            scanned += 1
            validation = validate_outfit(combination, settings)
            if validation.is_valid and validation.score >= threshold:
                suggestions.append(
                    OutfitSuggestion(
                        item_ids=tuple(item.item_id for item in combination),
                        score=validation.score,
                        rationale="; ".join(validation.rationale),
                    )
                )

    suggestions.sort(key=lambda suggestion: suggestion.score, reverse=True)
    logger.info("Scanned %s combinations, %s passed the %s cutoff", scanned, len(suggestions), threshold)
    return suggestions[:cap]


__all__ = ["MIN_OUTFIT_SIZE", "MAX_OUTFIT_SIZE", "combination_count", "suggest_outfits"]
