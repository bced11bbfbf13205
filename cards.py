"""Playing cards: one possible item type for a Deck, plus the new-deck-order preset."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import total_ordering
from typing import List, Optional

from deck import Deck
from errors import InvalidArgument
from randomness import Seed


class Suit(str, Enum):
    SPADES = "S"
    HEARTS = "H"
    DIAMONDS = "D"
    CLUBS = "C"

    @property
    def pip(self) -> str:
        return _PIPS[self]

    @property
    def display_name(self) -> str:
        return self.name.capitalize()


class Rank(str, Enum):
    ACE = "A"
    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    TEN = "T"
    JACK = "J"
    QUEEN = "Q"
    KING = "K"

    @property
    def display_name(self) -> str:
        return self.name.capitalize()


_PIPS = {Suit.SPADES: "♠", Suit.HEARTS: "♥", Suit.DIAMONDS: "♦", Suit.CLUBS: "♣"}
_SUITS_BY_PIP = {pip: s for s, pip in _PIPS.items()}

# Unicode "Playing Cards" block: one row of 16 code points per suit.
_GLYPH_BASE = {Suit.SPADES: 0x1F0A0, Suit.HEARTS: 0x1F0B0, Suit.DIAMONDS: 0x1F0C0, Suit.CLUBS: 0x1F0D0}
# Ace is 1, numbers are themselves, 0xC is the knight (skipped), then queen and king.
_GLYPH_OFFSET = {r: i + 1 for i, r in enumerate(list(Rank)[:11])}
_GLYPH_OFFSET.update({Rank.QUEEN: 0xD, Rank.KING: 0xE})

_SUIT_ORDER = {s: i for i, s in enumerate(Suit)}
_RANK_ORDER = {r: i for i, r in enumerate(Rank)}


@total_ordering
@dataclass(frozen=True)
class Card:
    rank: Rank
    suit: Suit

    def __str__(self) -> str:
        return self.symbol()

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Card):
            return NotImplemented
        return self._key() < other._key()

    def _key(self) -> tuple[int, int]:
        return _SUIT_ORDER[self.suit], _RANK_ORDER[self.rank]

    @classmethod
    def from_symbol(cls, text: str) -> Card:
        """Parse the symbol() form back into a card. The suit may also be its pip, e.g. 'A♠'."""
        if len(text) != 2:
            raise InvalidArgument(f"card symbol must be two characters, got {text!r}")
        r, s = text
        try:
            rank = Rank(r.upper())
        except ValueError:
            raise InvalidArgument(f"unknown rank {r!r} in {text!r}") from None
        suit = _SUITS_BY_PIP.get(s)
        if suit is None:
            try:
                suit = Suit(s.upper())
            except ValueError:
                raise InvalidArgument(f"unknown suit {s!r} in {text!r}") from None
        return cls(rank, suit)

    def symbol(self) -> str:
        """Two-character form, e.g. 'AS', 'TD'."""
        return f"{self.rank.value}{self.suit.value}"

    def name(self) -> str:
        return f"{self.rank.display_name} of {self.suit.display_name}"

    def glyph(self) -> str:
        return chr(_GLYPH_BASE[self.suit] + _GLYPH_OFFSET[self.rank])


def new_deck_order() -> List[Card]:
    """The order of a freshly opened deck, top first: A-K spades, A-K diamonds, K-A clubs, K-A hearts."""
    ranks = list(Rank)
    return (
        [Card(r, Suit.SPADES) for r in ranks]
        + [Card(r, Suit.DIAMONDS) for r in ranks]
        + [Card(r, Suit.CLUBS) for r in reversed(ranks)]
        + [Card(r, Suit.HEARTS) for r in reversed(ranks)]
    )


def standard_deck(seed: Optional[Seed] = None) -> Deck[Card]:
    return Deck(new_deck_order(), seed=seed)
