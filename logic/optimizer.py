"""Time-boxed genetic refinement of outfit candidates."""

from __future__ import annotations

import logging
import math
import random
import time
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from composer_app.config import DEFAULT_SETTINGS, EngineSettings
from logic.candidate_generator import MAX_OUTFIT_SIZE, MIN_OUTFIT_SIZE, suggest_outfits
from logic.objective_evaluator import Inventory, ObjectiveEvaluator, index_inventory, utc_now
from memory.history_store import HistoryStore, InMemoryHistoryStore
from models.optimization import OptimizationConfig, OutfitConstraints
from models.outfit import OutfitCandidate, canonical_outfit_key
from models.wardrobe_item import ClothingItem

logger = logging.getLogger(__name__)


def _rank(candidates: Iterable[OutfitCandidate]) -> List[OutfitCandidate]:
    return sorted(candidates, key=lambda candidate: candidate.score, reverse=True)


class OutfitOptimizer:
    """Seeds a population from the rule engine and refines it generation by generation.

    One optimizer owns one history store and is meant to serve a single user
    session. The deadline is polled between generations only, so a generation
    that has started always finishes; callers keep ``population_size`` small
    enough that one generation is cheap.
    """

    def __init__(
        self,
        config: Optional[OptimizationConfig] = None,
        history: Optional[HistoryStore] = None,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.monotonic,
        settings: EngineSettings = DEFAULT_SETTINGS,
        now: Callable[[], datetime] = utc_now,
    ) -> None:
        self.settings = settings
        self.config = config or OptimizationConfig.from_settings(settings)
        self.history = history or InMemoryHistoryStore()
        self.rng = rng or random.Random(settings.random_seed)
        self._clock = clock
        self.evaluator = ObjectiveEvaluator(self.config, self.history, settings=settings, now=now)

    def record_wear(self, item_id: str) -> int:
        return self.history.record_wear(item_id)

    def record_outfit_shown(self, item_ids: Sequence[str]) -> str:
        return self.history.record_outfit_shown(item_ids)

    def reset_history(self) -> None:
        self.history.reset()

    def optimize_outfits(
        self,
        items: Sequence[ClothingItem],
        constraints: Optional[OutfitConstraints] = None,
        seeds: Iterable[Sequence[str]] = (),
        config: Optional[OptimizationConfig] = None,
    ) -> List[OutfitCandidate]:
        """Return up to ``max_candidates`` outfits ranked by aggregate score.

        An empty list means no combination survived the hard gates; it is a
        complete answer rather than an error.
        """

        run_config = config or self.config
        start = self._clock()
        if len(items) < MIN_OUTFIT_SIZE:
            logger.info("Inventory has %s items; at least %s are needed", len(items), MIN_OUTFIT_SIZE)
            return []

        inventory = index_inventory(items)
        if len(inventory) < len(items):
            logger.warning(
                "Inventory repeats %s item ids; keeping the first row of each", len(items) - len(inventory)
            )
        cache: Dict[str, Optional[OutfitCandidate]] = {}

        def evaluate(item_ids: Sequence[str]) -> Optional[OutfitCandidate]:
            key = canonical_outfit_key(item_ids)
            if key not in cache:
                cache[key] = self.evaluator.evaluate(item_ids, inventory, constraints, run_config)
            return cache[key]

        population = self._seed(list(inventory.values()), seeds, evaluate)
        logger.info("Seeded population with %s candidates", len(population))

        generation = 0
        while generation < run_config.generations:
            elapsed_ms = (self._clock() - start) * 1000
            if elapsed_ms >= run_config.time_limit_ms:
                logger.info(
                    "Time budget of %sms reached after %s generations", run_config.time_limit_ms, generation
                )
                break
            if not population:
                logger.info("Population empty after %s generations", generation)
                break
            population = self._next_generation(population, inventory, run_config, evaluate)
            generation += 1

        ranked = _rank(population)
        results: List[OutfitCandidate] = []
        returned: set[str] = set()
        for candidate in ranked:
            if candidate.key in returned:
                continue
            returned.add(candidate.key)
            results.append(candidate)
            if len(results) >= run_config.max_candidates:
                break
        logger.info(
            "Optimisation finished: generations=%s population=%s returned=%s",
            generation,
            len(population),
            len(results),
        )
        return results

    def _seed(
        self,
        items: Sequence[ClothingItem],
        seeds: Iterable[Sequence[str]],
        evaluate: Callable[[Sequence[str]], Optional[OutfitCandidate]],
    ) -> List[OutfitCandidate]:
        proposals = [list(suggestion.item_ids) for suggestion in suggest_outfits(items, settings=self.settings)]
        proposals += [list(seed) for seed in seeds]
        population: List[OutfitCandidate] = []
        seen: set[str] = set()
        for item_ids in proposals:
            key = canonical_outfit_key(item_ids)
            if key in seen:
                continue
            seen.add(key)
            candidate = evaluate(item_ids)
            if candidate is not None:
                population.append(candidate)
        return population

    def _next_generation(
        self,
        population: List[OutfitCandidate],
        inventory: Inventory,
        config: OptimizationConfig,
        evaluate: Callable[[Sequence[str]], Optional[OutfitCandidate]],
    ) -> List[OutfitCandidate]:
        ranked = _rank(population)
        elite_size = max(1, math.floor(len(ranked) * self.settings.elite_fraction))
        elite = ranked[:elite_size]

        offspring: List[List[str]] = []
        for _ in range(max(0, config.population_size - len(elite))):
            first = self.rng.choice(elite)
            second = self.rng.choice(elite)
            child = self.crossover(first.item_ids, second.item_ids, inventory)
            if child is not None:
                offspring.append(child)

        for child in offspring:
            if self.rng.random() < self.settings.mutation_rate:
                self.mutate(child, inventory)

        survivors = [candidate for candidate in (evaluate(child) for child in offspring) if candidate is not None]
        logger.debug("Generation produced %s children, %s survived the gates", len(offspring), len(survivors))
        return elite + survivors

    @staticmethod
    def crossover(
        first: Sequence[str], second: Sequence[str], inventory: Inventory
    ) -> Optional[List[str]]:
        """Union both parents, keeping the first item seen per category.

        Returns ``None`` when fewer than two items remain; never more than four.
        """

        union: List[str] = []
        for item_id in list(first) + list(second):
            if item_id not in union:
                union.append(item_id)

        categories = set()
        child: List[str] = []
        for item_id in union:
            item = inventory.get(item_id)
            if item is None or item.category in categories:
                continue
            categories.add(item.category)
            child.append(item_id)

        child = child[:MAX_OUTFIT_SIZE]
        if len(child) < MIN_OUTFIT_SIZE:
            return None
        return child

    def mutate(self, child: List[str], inventory: Inventory) -> List[str]:
        """Replace one random position with an inventory item not already in ``child``."""

        available = [item_id for item_id in inventory if item_id not in child]
        if available and child:
            child[self.rng.randrange(len(child))] = self.rng.choice(available)
        return child


__all__ = ["OutfitOptimizer"]
