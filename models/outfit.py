"""Outfit validation and candidate schemas."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from models.taxonomy import RuleAxis


def canonical_outfit_key(item_ids: Sequence[str]) -> str:
    """Order-independent identity of an item set."""

    return ",".join(sorted(str(item_id) for item_id in item_ids))


def clamp_score(value: float) -> float:
    return max(0.0, min(100.0, float(value)))


@dataclass(frozen=True)
class CompatibilityRule:
    axis: RuleAxis
    statement: str
    rationale: str
    weight: float
    passed: bool


@dataclass
class OutfitValidation:
    is_valid: bool
    score: int
    rules: List[CompatibilityRule] = field(default_factory=list)
    rationale: List[str] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        return {
            "is_valid": self.is_valid,
            "score": self.score,
            "rules": [
                {
                    "type": rule.axis.value,
                    "rule": rule.statement,
                    "rationale": rule.rationale,
                    "weight": rule.weight,
                    "passed": rule.passed,
                }
                for rule in self.rules
            ],
            "rationale": list(self.rationale),
            "suggestions": list(self.suggestions),
        }


@dataclass(frozen=True)
class OutfitSuggestion:
    """A rule-approved item combination produced by the candidate generator."""

    item_ids: Tuple[str, ...]
    score: int
    rationale: str


@dataclass(frozen=True)
class CandidateMetadata:
    style_score: float
    novelty_score: float
    rewear_score: float
    cost_score: float
    total_cost: int
    wear_count: int
    weather_score: Optional[float] = None


@dataclass
class OutfitCandidate:
    """A scored outfit proposal.

    ``objectives`` maps objective names to their raw 0-100 values and ``score``
    is the weighted aggregate, always within [0, 100].
    """

    item_ids: List[str]
    score: float = 0.0
    objectives: Dict[str, float] = field(default_factory=dict)
    rationale: str = ""
    metadata: Optional[CandidateMetadata] = None

    @property
    def key(self) -> str:
        return canonical_outfit_key(self.item_ids)

    def to_dict(self) -> Dict[str, object]:
        return {
            "id": "-".join(self.item_ids),
            "items": list(self.item_ids),
            "score": round(self.score, 2),
            "objectives": {name: round(value, 2) for name, value in self.objectives.items()},
            "rationale": self.rationale,
            "metadata": asdict(self.metadata) if self.metadata else {},
        }


__all__ = [
    "canonical_outfit_key",
    "clamp_score",
    "CompatibilityRule",
    "OutfitValidation",
    "OutfitSuggestion",
    "CandidateMetadata",
    "OutfitCandidate",
]
