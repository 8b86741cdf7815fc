"""Optimisation objectives, run configuration and caller constraints."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Optional, Tuple

from models.taxonomy import Formality, validate_formality

STYLE = "style"
NOVELTY = "novelty"
REWEAR = "rewear"
COST = "cost"


@dataclass(frozen=True)
class Objective:
    """A named sub-score with its weight and normalisation bounds."""

    name: str
    weight: float
    min_value: float = 0.0
    max_value: float = 100.0
    target_value: Optional[float] = None

    def __post_init__(self) -> None:
        if self.weight < 0:
            raise ValueError(f"Objective '{self.name}' has a negative weight")
        if self.max_value < self.min_value:
            raise ValueError(f"Objective '{self.name}' has max_value below min_value")

    def normalise(self, value: float) -> float:
        span = self.max_value - self.min_value
        if span == 0:
            return 0.0
        return (value - self.min_value) / span


DEFAULT_OBJECTIVES: Tuple[Objective, ...] = (
    Objective(STYLE, weight=0.4, target_value=80),
    Objective(NOVELTY, weight=0.2, target_value=60),
    Objective(REWEAR, weight=0.25, target_value=70),
    Objective(COST, weight=0.15, target_value=50),
)


@dataclass(frozen=True)
class OptimizationConfig:
    objectives: Tuple[Objective, ...] = DEFAULT_OBJECTIVES
    max_candidates: int = 6
    time_limit_ms: int = 1500
    population_size: int = 50
    generations: int = 10

    def __post_init__(self) -> None:
        object.__setattr__(self, "objectives", tuple(self.objectives))
        if self.max_candidates < 0 or self.population_size < 0 or self.generations < 0:
            raise ValueError("max_candidates, population_size and generations must be non-negative")
        if self.time_limit_ms < 0:
            raise ValueError("time_limit_ms must be non-negative")

    def with_overrides(self, **overrides: object) -> "OptimizationConfig":
        """Return a copy with the non-``None`` overrides applied."""

        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes) if changes else self

    @classmethod
    def from_settings(cls, settings: object) -> "OptimizationConfig":
        return cls(
            max_candidates=getattr(settings, "max_candidates"),
            time_limit_ms=getattr(settings, "time_limit_ms"),
            population_size=getattr(settings, "population_size"),
            generations=getattr(settings, "generations"),
        )


@dataclass(frozen=True)
class WeatherSnapshot:
    """Already-aggregated weather values from an external provider."""

    temperature_c: float
    precipitation_mm_h: float = 0.0
    wind_speed_kmh: Optional[float] = None
    humidity_pct: Optional[float] = None


@dataclass(frozen=True)
class OutfitConstraints:
    max_cost: Optional[int] = None
    formality: Optional[Formality] = None
    occasion: Optional[str] = None
    weather: Optional[WeatherSnapshot] = field(default=None)

    def __post_init__(self) -> None:
        if self.formality is not None:
            object.__setattr__(self, "formality", validate_formality(self.formality))


__all__ = [
    "STYLE",
    "NOVELTY",
    "REWEAR",
    "COST",
    "Objective",
    "DEFAULT_OBJECTIVES",
    "OptimizationConfig",
    "WeatherSnapshot",
    "OutfitConstraints",
]
