"""Canonical taxonomy definitions for clothing items.

This module centralises the canonical labels for categories, textures and
formality levels together with the lookup tables the compatibility rules read.
Every table is keyed by an enum and checked for exhaustiveness at import time,
so a new label cannot silently fall through to a default row.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, FrozenSet, Mapping


def _normalize_key(value: str) -> str:
    """Normalise a free-form string into a taxonomy key."""

    return value.strip().lower().replace(" ", "_").replace("-", "_")


class Category(str, Enum):
    TOPS = "tops"
    BOTTOMS = "bottoms"
    OUTERWEAR = "outerwear"
    DRESSES = "dresses"
    SHOES = "shoes"
    ACCESSORIES = "accessories"


class Texture(str, Enum):
    SMOOTH = "smooth"
    TEXTURED = "textured"
    PATTERNED = "patterned"
    ROUGH = "rough"
    SHINY = "shiny"
    MATTE = "matte"
    WOOL = "wool"
    FLEECE = "fleece"
    KNIT = "knit"
    THICK = "thick"
    HEAVY = "heavy"
    LIGHT = "light"
    COTTON = "cotton"
    LINEN = "linen"
    WATERPROOF = "waterproof"
    WATER_RESISTANT = "water_resistant"
    NYLON = "nylon"


class Formality(str, Enum):
    CASUAL = "casual"
    SMART_CASUAL = "smart_casual"
    BUSINESS_CASUAL = "business_casual"
    BUSINESS = "business"
    FORMAL = "formal"
    BLACK_TIE = "black_tie"

    @property
    def level(self) -> int:
        return FORMALITY_LEVELS[self]


class RuleAxis(str, Enum):
    COLOR = "color"
    TEXTURE = "texture"
    FORMALITY = "formality"
    CATEGORY = "category"


FORMALITY_LEVELS: Dict[Formality, int] = {
    Formality.CASUAL: 1,
    Formality.SMART_CASUAL: 2,
    Formality.BUSINESS_CASUAL: 3,
    Formality.BUSINESS: 4,
    Formality.FORMAL: 5,
    Formality.BLACK_TIE: 6,
}

# Surface families drive pairwise texture rules; fabric tags map onto them.
SURFACE_FAMILIES: FrozenSet[Texture] = frozenset(
    {Texture.SMOOTH, Texture.TEXTURED, Texture.PATTERNED, Texture.ROUGH, Texture.SHINY, Texture.MATTE}
)

TEXTURE_FAMILY: Dict[Texture, Texture] = {
    Texture.SMOOTH: Texture.SMOOTH,
    Texture.TEXTURED: Texture.TEXTURED,
    Texture.PATTERNED: Texture.PATTERNED,
    Texture.ROUGH: Texture.ROUGH,
    Texture.SHINY: Texture.SHINY,
    Texture.MATTE: Texture.MATTE,
    Texture.WOOL: Texture.TEXTURED,
    Texture.FLEECE: Texture.TEXTURED,
    Texture.KNIT: Texture.TEXTURED,
    Texture.THICK: Texture.ROUGH,
    Texture.HEAVY: Texture.ROUGH,
    Texture.LIGHT: Texture.SMOOTH,
    Texture.COTTON: Texture.SMOOTH,
    Texture.LINEN: Texture.TEXTURED,
    Texture.WATERPROOF: Texture.SHINY,
    Texture.WATER_RESISTANT: Texture.MATTE,
    Texture.NYLON: Texture.SHINY,
}

TEXTURE_COMPATIBILITY: Dict[Texture, FrozenSet[Texture]] = {
    Texture.SMOOTH: frozenset({Texture.SMOOTH, Texture.TEXTURED, Texture.PATTERNED}),
    Texture.TEXTURED: frozenset({Texture.SMOOTH, Texture.TEXTURED, Texture.PATTERNED}),
    Texture.PATTERNED: frozenset({Texture.SMOOTH, Texture.TEXTURED, Texture.PATTERNED}),
    Texture.ROUGH: frozenset({Texture.SMOOTH, Texture.TEXTURED}),
    Texture.SHINY: frozenset({Texture.MATTE, Texture.TEXTURED}),
    Texture.MATTE: frozenset({Texture.SHINY, Texture.TEXTURED, Texture.PATTERNED}),
}

_CATEGORY_PAIRINGS: Dict[Category, FrozenSet[Category]] = {
    Category.TOPS: frozenset({Category.BOTTOMS, Category.OUTERWEAR, Category.ACCESSORIES}),
    Category.BOTTOMS: frozenset({Category.TOPS, Category.OUTERWEAR, Category.ACCESSORIES}),
    Category.OUTERWEAR: frozenset({Category.TOPS, Category.BOTTOMS, Category.ACCESSORIES}),
    Category.DRESSES: frozenset({Category.OUTERWEAR, Category.ACCESSORIES, Category.SHOES}),
    Category.SHOES: frozenset({Category.TOPS, Category.BOTTOMS, Category.DRESSES, Category.ACCESSORIES}),
    Category.ACCESSORIES: frozenset(
        {Category.TOPS, Category.BOTTOMS, Category.DRESSES, Category.OUTERWEAR, Category.SHOES}
    ),
}


def _symmetric_closure(table: Mapping[Category, FrozenSet[Category]]) -> Dict[Category, FrozenSet[Category]]:
    closed: Dict[Category, set] = {category: set(partners) for category, partners in table.items()}
    for category, partners in table.items():
        for partner in partners:
            closed[partner].add(category)
    return {category: frozenset(partners) for category, partners in closed.items()}


CATEGORY_COMPATIBILITY: Dict[Category, FrozenSet[Category]] = _symmetric_closure(_CATEGORY_PAIRINGS)

CATEGORY_ALIASES: Dict[str, Category] = {
    "top": Category.TOPS,
    "shirt": Category.TOPS,
    "shirts": Category.TOPS,
    "tee": Category.TOPS,
    "blouse": Category.TOPS,
    "sweater": Category.TOPS,
    "sweaters": Category.TOPS,
    "bottom": Category.BOTTOMS,
    "pants": Category.BOTTOMS,
    "trousers": Category.BOTTOMS,
    "jeans": Category.BOTTOMS,
    "skirt": Category.BOTTOMS,
    "skirts": Category.BOTTOMS,
    "shorts": Category.BOTTOMS,
    "jacket": Category.OUTERWEAR,
    "jackets": Category.OUTERWEAR,
    "coat": Category.OUTERWEAR,
    "coats": Category.OUTERWEAR,
    "dress": Category.DRESSES,
    "jumpsuit": Category.DRESSES,
    "shoe": Category.SHOES,
    "sneakers": Category.SHOES,
    "boots": Category.SHOES,
    "accessory": Category.ACCESSORIES,
    "bag": Category.ACCESSORIES,
    "belt": Category.ACCESSORIES,
    "hat": Category.ACCESSORIES,
    "scarf": Category.ACCESSORIES,
}

TEXTURE_ALIASES: Dict[str, Texture] = {
    "waterresistant": Texture.WATER_RESISTANT,
    "knitted": Texture.KNIT,
    "lightweight": Texture.LIGHT,
    "satin": Texture.SHINY,
    "silk": Texture.SHINY,
    "leather": Texture.SMOOTH,
    "denim": Texture.TEXTURED,
    "tweed": Texture.ROUGH,
    "print": Texture.PATTERNED,
    "printed": Texture.PATTERNED,
}

FORMALITY_ALIASES: Dict[str, Formality] = {
    "informal": Formality.CASUAL,
    "smart": Formality.SMART_CASUAL,
    "office": Formality.BUSINESS_CASUAL,
    "black_tie_optional": Formality.FORMAL,
    "evening": Formality.FORMAL,
}

# Items that satisfy the weather rules.
WARM_CATEGORIES: FrozenSet[Category] = frozenset({Category.OUTERWEAR})
WARM_TEXTURES: FrozenSet[Texture] = frozenset({Texture.WOOL, Texture.FLEECE, Texture.THICK, Texture.KNIT})
# Garment labels that read as a warm layer whatever category they fold into.
WARM_KINDS: FrozenSet[str] = frozenset({"sweater", "sweaters", "jacket", "jackets", "coat", "coats"})
LIGHT_CATEGORIES: FrozenSet[Category] = frozenset({Category.DRESSES})
LIGHT_TEXTURES: FrozenSet[Texture] = frozenset({Texture.LIGHT, Texture.COTTON, Texture.LINEN})
WATER_RESISTANT_CATEGORIES: FrozenSet[Category] = frozenset({Category.OUTERWEAR})
WATER_RESISTANT_TEXTURES: FrozenSet[Texture] = frozenset(
    {Texture.WATERPROOF, Texture.WATER_RESISTANT, Texture.NYLON}
)
SECURE_CATEGORIES: FrozenSet[Category] = frozenset({Category.BOTTOMS})
SECURE_TEXTURES: FrozenSet[Texture] = frozenset({Texture.HEAVY, Texture.THICK})
BREATHABLE_TEXTURES: FrozenSet[Texture] = frozenset({Texture.COTTON, Texture.LINEN, Texture.LIGHT})


def _parse(value: str | Enum, enum_type: type[Enum], aliases: Mapping[str, Enum], label: str) -> Enum:
    if isinstance(value, enum_type):
        return value
    key = _normalize_key(str(value.value if isinstance(value, Enum) else value))
    try:
        return enum_type(key)
    except ValueError:
        pass
    if key in aliases:
        return aliases[key]
    allowed = sorted(member.value for member in enum_type)
    raise ValueError(f"Unsupported {label} '{value}'. Allowed: {allowed}")


def validate_category(value: str | Category) -> Category:
    """Validate and normalise a category value.

    Raises a :class:`ValueError` if the category is not part of the canonical
    taxonomy or its alias table.
    """

    return _parse(value, Category, CATEGORY_ALIASES, "category")  # type: ignore[return-value]


def validate_texture(value: str | Texture) -> Texture:
    """Validate and normalise a texture tag."""

    return _parse(value, Texture, TEXTURE_ALIASES, "texture")  # type: ignore[return-value]


def validate_formality(value: str | Formality) -> Formality:
    """Validate and normalise a formality tag."""

    return _parse(value, Formality, FORMALITY_ALIASES, "formality")  # type: ignore[return-value]


def surface_family(texture: Texture) -> Texture:
    return TEXTURE_FAMILY[texture]


def garment_kind(value: str | Enum) -> str:
    """Normalised free-form garment label, kept next to the canonical category."""

    return _normalize_key(str(value.value if isinstance(value, Enum) else value))


def _check_exhaustive() -> None:
    missing = [texture for texture in Texture if texture not in TEXTURE_FAMILY]
    missing += [family for family in SURFACE_FAMILIES if family not in TEXTURE_COMPATIBILITY]
    missing += [category for category in Category if category not in CATEGORY_COMPATIBILITY]
    missing += [formality for formality in Formality if formality not in FORMALITY_LEVELS]
    if missing:
        raise RuntimeError(f"Taxonomy tables are missing rows for {missing}")


_check_exhaustive()


__all__ = [
    "Category",
    "Texture",
    "Formality",
    "RuleAxis",
    "FORMALITY_LEVELS",
    "TEXTURE_FAMILY",
    "TEXTURE_COMPATIBILITY",
    "CATEGORY_COMPATIBILITY",
    "WARM_CATEGORIES",
    "WARM_TEXTURES",
    "WARM_KINDS",
    "LIGHT_CATEGORIES",
    "LIGHT_TEXTURES",
    "WATER_RESISTANT_CATEGORIES",
    "WATER_RESISTANT_TEXTURES",
    "SECURE_CATEGORIES",
    "SECURE_TEXTURES",
    "BREATHABLE_TEXTURES",
    "validate_category",
    "validate_texture",
    "validate_formality",
    "surface_family",
    "garment_kind",
]
