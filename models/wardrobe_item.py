"""Clothing item data model and helpers."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from models.color_theory import normalize_color_name
from models.taxonomy import (
    Category,
    Formality,
    Texture,
    garment_kind,
    validate_category,
    validate_formality,
    validate_texture,
)


def _ensure_list(value: Any) -> List[Any]:
    """Coerce a scalar or iterable into a list."""

    if value is None:
        return []
    if isinstance(value, (list, tuple, set, frozenset)):
        return list(value)
    return [value]


def _normalise_colors(values: Iterable[str]) -> List[str]:
    """Normalise color names using the canonical color mapping."""

    normalised = []
    seen = set()
    for value in values:
        key = normalize_color_name(str(value))
        if key and key not in seen:
            normalised.append(key)
            seen.add(key)
    return normalised


def _as_utc(value: datetime | str | None) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass
class ClothingItem:
    """A wardrobe item as the engine sees it.

    Instances are owned by the caller and never mutated by the engine. ``cost``
    is expressed in the smallest currency unit and naive ``last_worn`` values
    are treated as UTC. ``kind`` keeps the garment label the category was
    parsed from, such as ``sweater`` for a top.
    """

    item_id: str
    category: Category
    texture: Texture
    formality: Formality
    colors: List[str] = field(default_factory=list)
    cost: Optional[int] = None
    last_worn: Optional[datetime] = None
    wear_count: Optional[int] = None
    kind: Optional[str] = None

    def __post_init__(self) -> None:
        self.item_id = str(self.item_id)
        self.kind = garment_kind(self.kind or self.category)
        self.category = validate_category(self.category)
        self.texture = validate_texture(self.texture)
        self.formality = validate_formality(self.formality)
        self.colors = _normalise_colors(_ensure_list(self.colors))
        self.last_worn = _as_utc(self.last_worn)
        if self.cost is not None:
            if self.cost < 0:
                raise ValueError(f"Item {self.item_id} has a negative cost")
            self.cost = int(self.cost)
        if self.wear_count is not None:
            self.wear_count = max(0, int(self.wear_count))


def from_raw_metadata(metadata: Dict[str, Any]) -> ClothingItem:
    """Factory to build a :class:`ClothingItem` from a loose storage row.

    Accepts both ``snake_case`` and ``camelCase`` keys.
    """

    def pick(*keys: str) -> Any:
        for key in keys:
            if metadata.get(key) is not None:
                return metadata[key]
        return None

    item_id = pick("item_id", "id")
    required = {
        "item_id": item_id,
        "category": pick("category"),
        "texture": pick("texture"),
        "formality": pick("formality"),
    }
    missing = [name for name, value in required.items() if value in (None, "")]
    if missing:
        raise ValueError(f"Missing required fields for ClothingItem: {missing}")

    return ClothingItem(
        item_id=str(item_id),
        category=str(required["category"]),  # type: ignore[arg-type]
        texture=str(required["texture"]),  # type: ignore[arg-type]
        formality=str(required["formality"]),  # type: ignore[arg-type]
        colors=_ensure_list(pick("colors")),
        cost=pick("cost"),
        last_worn=pick("last_worn", "lastWorn"),
        wear_count=pick("wear_count", "wearCount"),
        kind=pick("kind", "sub_category", "subCategory"),
    )


__all__ = ["ClothingItem", "from_raw_metadata"]
