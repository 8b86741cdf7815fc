"""Wear and seen-outfit history owned by a single optimizer session."""
from __future__ import annotations

from typing import Dict, Iterable, List

from models.outfit import canonical_outfit_key


class HistoryStore:
    """Interface for per-session wear counts and previously shown outfits.

    Entries only grow through ``record_wear`` and ``record_outfit_shown``;
    nothing is removed until ``reset`` is called. Implementations are not
    synchronised, so a store must not be shared by concurrent optimisation runs.
    """

    def record_wear(self, item_id: str) -> int:
        raise NotImplementedError

    def record_outfit_shown(self, item_ids: Iterable[str]) -> str:
        raise NotImplementedError

    def wear_count(self, item_id: str) -> int:
        raise NotImplementedError

    def mean_wear_count(self, item_ids: List[str]) -> float:
        if not item_ids:
            return 0.0
        return sum(self.wear_count(item_id) for item_id in item_ids) / len(item_ids)

    def has_seen(self, item_ids: Iterable[str]) -> bool:
        raise NotImplementedError

    def reset(self) -> None:
        raise NotImplementedError

    def snapshot(self) -> Dict[str, object]:
        raise NotImplementedError


class InMemoryHistoryStore(HistoryStore):
    """Process-local history kept in plain dictionaries."""

    def __init__(self) -> None:
        self._wear_counts: Dict[str, int] = {}
        self._seen_outfits: set[str] = set()

    def record_wear(self, item_id: str) -> int:
        count = self._wear_counts.get(item_id, 0) + 1
        self._wear_counts[item_id] = count
        return count

    def record_outfit_shown(self, item_ids: Iterable[str]) -> str:
        key = canonical_outfit_key(list(item_ids))
        self._seen_outfits.add(key)
        return key

    def wear_count(self, item_id: str) -> int:
        return self._wear_counts.get(item_id, 0)

    def has_seen(self, item_ids: Iterable[str]) -> bool:
        return canonical_outfit_key(list(item_ids)) in self._seen_outfits

    def reset(self) -> None:
        self._wear_counts.clear()
        self._seen_outfits.clear()

    def snapshot(self) -> Dict[str, object]:
        return {
            "wear_counts": dict(self._wear_counts),
            "seen_outfits": sorted(self._seen_outfits),
        }


__all__ = ["HistoryStore", "InMemoryHistoryStore"]
