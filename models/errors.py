"""Exceptions raised by the outfit composition engine.

An empty recommendation list is a valid answer and never raises; these errors
only signal malformed input.
"""


class OutfitEngineError(Exception):
    """Base class for engine errors."""


class InputError(OutfitEngineError, ValueError):
    """The caller supplied too few items or otherwise unusable input."""


class UnknownItemError(InputError):
    """A candidate referenced an item id missing from the inventory."""

    def __init__(self, item_ids):
        self.item_ids = sorted(item_ids)
        super().__init__(f"Unknown item ids: {', '.join(self.item_ids)}")


__all__ = ["OutfitEngineError", "InputError", "UnknownItemError"]
