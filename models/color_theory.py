"""Fashion color catalog, nearest-color lookup and pairwise harmony scoring."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

LabCoordinate = Tuple[float, float, float]


@dataclass(frozen=True)
class ColorDescriptor:
    """A named catalog color.

    ``hue`` is the position on the painter's (RYB) fashion wheel, which puts the
    classic complementary pairs red/green, blue/orange and yellow/purple 180°
    apart. ``lab`` is the CIE L*a*b* coordinate of ``hex`` used for nearest
    color lookups.
    """

    name: str
    hex: str
    lab: LabCoordinate
    hue: float
    saturation: float
    lightness: float


FASHION_COLORS: Tuple[ColorDescriptor, ...] = (
    ColorDescriptor("red", "#FF0000", (53.24, 80.09, 67.20), 0, 100, 50),
    ColorDescriptor("blue", "#0000FF", (32.30, 79.19, -107.86), 240, 100, 50),
    ColorDescriptor("yellow", "#FFFF00", (97.14, -21.55, 94.48), 120, 100, 50),
    ColorDescriptor("green", "#00FF00", (87.73, -86.18, 83.18), 180, 100, 50),
    ColorDescriptor("purple", "#800080", (30.33, 58.20, -36.78), 300, 100, 25),
    ColorDescriptor("orange", "#FFA500", (74.93, 23.93, 78.95), 60, 100, 50),
    ColorDescriptor("black", "#000000", (0.0, 0.0, 0.0), 0, 0, 0),
    ColorDescriptor("white", "#FFFFFF", (100.0, 0.0, 0.0), 0, 0, 100),
    ColorDescriptor("gray", "#808080", (53.59, 0.0, 0.0), 0, 0, 50),
    ColorDescriptor("navy", "#000080", (12.97, 47.56, -64.70), 240, 100, 25),
    ColorDescriptor("brown", "#A52A2A", (35.56, 47.53, 26.89), 30, 59, 41),
    ColorDescriptor("pink", "#FFC0CB", (83.24, 32.30, 5.84), 350, 100, 88),
    ColorDescriptor("mint", "#98FF98", (91.11, -25.63, 15.72), 170, 100, 80),
    ColorDescriptor("rose", "#FFE4E1", (93.47, 8.47, 5.31), 10, 100, 94),
    ColorDescriptor("gold", "#FFD700", (85.41, 9.57, 85.31), 100, 100, 50),
    ColorDescriptor("silver", "#C0C0C0", (77.70, 0.0, 0.0), 0, 0, 75),
)

NEUTRAL_COLORS = frozenset({"black", "white", "gray", "navy", "brown"})

# Hue-difference buckets, in degrees.
ANALOGOUS_SPAN = 30
COMPLEMENTARY_ANGLE = 180
COMPLEMENTARY_TOLERANCE = 15
TRIADIC_ANGLE = 120
TRIADIC_TOLERANCE = 20
CLASH_ABOVE = 120

COLOR_MAP = {
    "navy blue": "navy",
    "light blue": "blue",
    "sky blue": "blue",
    "off white": "white",
    "ivory": "white",
    "cream": "white",
    "grey": "gray",
    "charcoal": "gray",
    "tan": "brown",
    "camel": "brown",
    "olive": "green",
    "burgundy": "red",
    "maroon": "red",
    "blush": "rose",
    "violet": "purple",
    "lavender": "purple",
}

_BY_NAME: Dict[str, ColorDescriptor] = {color.name: color for color in FASHION_COLORS}


def normalize_color_name(raw_string: str) -> str:
    """Map a raw color string to a canonical color name."""

    key = raw_string.strip().lower()
    return COLOR_MAP.get(key, key)


def get_color(name: str) -> Optional[ColorDescriptor]:
    """Return the catalog entry for ``name`` or ``None`` when it is unknown."""

    return _BY_NAME.get(normalize_color_name(name))


def is_neutral(color: ColorDescriptor) -> bool:
    return color.name in NEUTRAL_COLORS


def _distance(first: Sequence[float], second: Sequence[float]) -> float:
    return math.sqrt(sum((a - b) ** 2 for a, b in zip(first, second)))


def nearest_color(lab: Sequence[float]) -> ColorDescriptor:
    """Return the catalog color closest to ``lab``; earlier entries win ties."""

    if len(lab) != 3:
        raise ValueError(f"Expected an L*a*b* triple, got {len(lab)} components")
    nearest = FASHION_COLORS[0]
    min_distance = math.inf
    for color in FASHION_COLORS:
        distance = _distance(lab, color.lab)
        if distance < min_distance:
            min_distance = distance
            nearest = color
    logger.debug("nearest color for %s -> %s (%.2f)", tuple(lab), nearest.name, min_distance)
    return nearest


def hue_difference(first: ColorDescriptor, second: ColorDescriptor) -> float:
    """Shortest angular distance between two hues on the wheel."""

    diff = abs(first.hue - second.hue) % 360
    return min(diff, 360 - diff)


def _resolve(color: ColorDescriptor | str) -> ColorDescriptor:
    if isinstance(color, ColorDescriptor):
        return color
    resolved = get_color(color)
    if resolved is None:
        raise ValueError(f"Unknown color '{color}'")
    return resolved


def harmony(color_a: ColorDescriptor | str, color_b: ColorDescriptor | str) -> float:
    """Score how well two colors pair, from 0 (clash) to 1.

    Buckets are checked in order: analogous 0.9, complementary 0.8, triadic 0.7,
    any neutral 0.7, far apart 0.3 and 0.5 otherwise.
    """

    first, second = _resolve(color_a), _resolve(color_b)
    diff = hue_difference(first, second)

    if diff <= ANALOGOUS_SPAN:
        return 0.9
    if abs(diff - COMPLEMENTARY_ANGLE) <= COMPLEMENTARY_TOLERANCE:
        return 0.8
    if abs(diff - TRIADIC_ANGLE) <= TRIADIC_TOLERANCE:
        return 0.7
    if is_neutral(first) or is_neutral(second):
        return 0.7
    if diff > CLASH_ABOVE:
        return 0.3
    return 0.5


def best_pair_harmony(colors_a: Iterable[str], colors_b: Iterable[str]) -> float:
    """Best harmony across every color pairing of two items.

    Unknown color names are skipped; with no resolvable pair the result is 0.
    """

    resolved_b = [color for color in (get_color(name) for name in colors_b) if color]
    best = 0.0
    for name in colors_a:
        first = get_color(name)
        if first is None:
            continue
        for second in resolved_b:
            best = max(best, harmony(first, second))
    return best


__all__ = [
    "ColorDescriptor",
    "FASHION_COLORS",
    "NEUTRAL_COLORS",
    "normalize_color_name",
    "get_color",
    "is_neutral",
    "nearest_color",
    "hue_difference",
    "harmony",
    "best_pair_harmony",
]
