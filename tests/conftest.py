from collections import Counter
from typing import Callable, Iterable, Optional

import pytest

from deck import Deck


@pytest.fixture
def make_deck() -> Callable[..., Deck]:
    """Factory for seeded decks so every test replays the same draws."""

    def _factory(items: Iterable = range(52), seed: Optional[int] = 1234) -> Deck:
        return Deck(items, seed=seed)

    return _factory


@pytest.fixture
def same_cards() -> Callable[[Iterable, Iterable], bool]:
    """True when two sequences hold the same multiset of items."""

    def _check(a: Iterable, b: Iterable) -> bool:
        return Counter(a) == Counter(b)

    return _check
