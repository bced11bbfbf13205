"""Errors raised by deck and shuffle operations.

An empty deck is not an error: pop/draw operations return None instead.
"""

from __future__ import annotations


class DeckError(Exception):
    """Base class for deck errors."""


class IndexOutOfBounds(DeckError, IndexError):
    """An index-addressed operation referenced a position outside the deck."""

    def __init__(self, index: int, length: int):
        self.index = index
        self.length = length
        super().__init__(f"index {index} out of bounds for deck of {length}")


class InvalidArgument(DeckError, ValueError):
    """A shuffle or sampling precondition was violated (nothing was mutated)."""
