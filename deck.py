"""
Deck container: an ordered, double-ended sequence of items plus its own RandomSource.

Index 0 is the top of the deck. Items can be anything; the deck only needs
orderable items for sort() and printable items for str().

A deck is not thread-safe. Share one across threads only behind a lock.
"""

from __future__ import annotations

from collections import deque
from itertools import islice
from typing import Any, Callable, Generic, Iterable, Iterator, Optional, TypeVar

from errors import IndexOutOfBounds, InvalidArgument
from randomness import RandomSource, Seed

T = TypeVar("T")


class Deck(Generic[T]):
    """Ordered items (front = top) backed by a deque, with an owned RandomSource."""

    def __init__(
        self,
        items: Iterable[T] = (),
        *,
        seed: Optional[Seed] = None,
        source: Optional[RandomSource] = None,
    ):
        """
        :param items: initial cards, top first
        :param seed: 16-byte block or 64-bit int; entropy when omitted
        :param source: ready-made RandomSource (takes precedence over seed)
        """
        self._items: deque[T] = deque(items)
        self.source = source if source is not None else RandomSource(seed)

    @classmethod
    def empty(cls, *, seed: Optional[Seed] = None) -> Deck[T]:
        return cls(seed=seed)

    @classmethod
    def concat(cls, decks: Iterable[Deck[T]], *, seed: Optional[Seed] = None) -> Deck[T]:
        """Stack decks top to bottom in the given order, consuming each of them."""
        out: Deck[T] = cls(seed=seed)
        for d in decks:
            out.extend(d)
        return out

    def seed(self, seed: Optional[Seed]) -> None:
        """Reseed the deck's source. Card order is untouched."""
        self.source.reseed(seed)

    def uniform(self) -> int:
        return self.source.uniform(len(self._items))

    def binomial(self) -> int:
        return self.source.binomial_index(len(self._items))

    # -- inspection --------------------------------------------------------

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Deck):
            return NotImplemented
        return self._items == other._items

    __hash__ = None  # mutable

    def __repr__(self) -> str:
        return f"Deck({list(self._items)!r})"

    def __str__(self) -> str:
        return "[" + ", ".join(str(c) for c in self._items) + "]"

    def to_list(self) -> list[T]:
        return list(self._items)

    def top(self) -> Optional[T]:
        return self._items[0] if self._items else None

    def bottom(self) -> Optional[T]:
        return self._items[-1] if self._items else None

    def _check_index(self, i: int, limit: int) -> None:
        if not 0 <= i < limit:
            raise IndexOutOfBounds(i, len(self._items))

    def _check_slot(self, n: int) -> None:
        if not 0 <= n <= len(self._items):
            raise InvalidArgument(f"position {n} outside [0, {len(self._items)}]")

    # -- index access ------------------------------------------------------

    def get(self, i: int) -> T:
        self._check_index(i, len(self._items))
        return self._items[i]

    def set(self, i: int, item: T) -> None:
        self._check_index(i, len(self._items))
        self._items[i] = item

    def remove_at(self, i: int) -> T:
        self._check_index(i, len(self._items))
        item = self._items[i]
        del self._items[i]
        return item

    def insert_at(self, i: int, item: T) -> None:
        """
        Insert so that item ends up at index i.

        Unlike the other index operations, i == len(deck) is accepted and places
        the item on the bottom; faro() and riffle_with() rely on this.
        """
        self._check_index(i, len(self._items) + 1)
        self._items.insert(i, item)

    def swap(self, i: int, j: int) -> None:
        n = len(self._items)
        self._check_index(i, n)
        self._check_index(j, n)
        self._items[i], self._items[j] = self._items[j], self._items[i]

    def cycle(self, indices: Iterable[int]) -> None:
        """Swap each adjacent pair of indices in turn. Nothing moves if any index is bad."""
        indices = list(indices)
        for i in indices:
            self._check_index(i, len(self._items))
        for i, j in zip(indices, indices[1:]):
            self.swap(i, j)

    # -- ends --------------------------------------------------------------

    def push_top(self, item: T) -> None:
        self._items.appendleft(item)

    def push_bottom(self, item: T) -> None:
        self._items.append(item)

    def pop_top(self) -> Optional[T]:
        """Remove the top card; None when the deck is empty."""
        return self._items.popleft() if self._items else None

    def pop_bottom(self) -> Optional[T]:
        return self._items.pop() if self._items else None

    draw = pop_top

    # -- random positions --------------------------------------------------

    def draw_random(self) -> Optional[T]:
        if not self._items:
            return None
        return self.remove_at(self.uniform())

    def draw_biased(self) -> Optional[T]:
        if not self._items:
            return None
        return self.remove_at(self.binomial())

    def place_random(self, item: T) -> None:
        # len + 1 slots: above the top card through below the bottom card
        self.insert_at(self.source.uniform(len(self._items) + 1), item)

    def place_biased(self, item: T) -> None:
        self.insert_at(self.source.binomial_index(len(self._items) + 1), item)

    # -- cuts and splits ---------------------------------------------------

    def cut(self, n: int) -> None:
        """Move the top n cards to the bottom, keeping the order of both packets."""
        self._check_slot(n)
        self._items.rotate(-n)

    def cut_random(self) -> None:
        # cutting at 0 and at len give the same order, so only 0..len-1 are drawn
        if not self._items:
            return
        self.cut(self.source.uniform(len(self._items)))

    def cut_biased(self) -> None:
        self.cut(self.source.binomial_index(len(self._items) + 1))

    def split_off(self, n: int) -> Deck[T]:
        """Keep the top n cards; return the rest as a new deck."""
        self._check_slot(n)
        rest: Deck[T] = Deck(islice(self._items, n, None), source=self.source.spawn())
        for _ in range(len(self._items) - n):
            self._items.pop()
        return rest

    def split_off_random(self) -> Deck[T]:
        return self.split_off(self.source.uniform(len(self._items) + 1))

    def split_off_biased(self) -> Deck[T]:
        return self.split_off(self.source.binomial_index(len(self._items) + 1))

    def split_at(self, n: int) -> tuple[Deck[T], Deck[T]]:
        """
        Partition into (cards [0, n), cards [n, len)).

        Both halves are new decks with their own sources; this deck is left empty.
        """
        bottom = self.split_off(n)
        top: Deck[T] = Deck(self._items, source=self.source.spawn())
        self._items.clear()
        return top, bottom

    def split_random(self) -> tuple[Deck[T], Deck[T]]:
        return self.split_at(self.source.uniform(len(self._items) + 1))

    def split_biased(self) -> tuple[Deck[T], Deck[T]]:
        return self.split_at(self.source.binomial_index(len(self._items) + 1))

    # -- whole-deck --------------------------------------------------------

    def extend(self, other: Deck[T]) -> None:
        """Place other's cards below this deck's cards, consuming other."""
        if other is self:
            raise InvalidArgument("cannot extend a deck with itself")
        self._items.extend(other._items)
        other._items.clear()

    def reverse(self) -> None:
        self._items.reverse()

    def sort(self, *, key: Optional[Callable[[T], Any]] = None, reverse: bool = False) -> None:
        ordered = sorted(self._items, key=key, reverse=reverse)
        self._items.clear()
        self._items.extend(ordered)
