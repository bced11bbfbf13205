"""
Shuffle algorithms and shuffle strategies.

Every shuffle permutes a Deck in place using only the deck's public operations
and its RandomSource, so the result is reproducible from the deck's seed.
Parameters are checked before the first card moves. An empty deck is a valid
input to every shuffle.

Callers can use the functions directly or pick strategies for different
situations (e.g. a thorough first shuffle, then a quick cut between rounds).
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

from deck import Deck
from errors import InvalidArgument

logger = logging.getLogger(__name__)

DEFAULT_RIFFLES = 7  # Bayer & Diaconis: seven riffles mix a 52-card deck
DEFAULT_OVERHAND_CUT_PROBABILITY = 0.3
DEFAULT_PILES = 5


def _check_probability(p: float) -> None:
    if not 0.0 <= p <= 1.0:
        raise InvalidArgument(f"probability must be in [0, 1], got {p}")


def _packet(deck: Deck[Any]) -> Deck[Any]:
    """Empty scratch deck with a source derived from deck's."""
    return Deck(source=deck.source.spawn())


def shuffle(deck: Deck[Any]) -> None:
    """Fisher-Yates. Every ordering is equally likely."""
    for i in range(len(deck) - 1, 0, -1):
        deck.swap(i, deck.source.uniform(i + 1))


def riffle_with(deck: Deck[Any], other: Deck[Any]) -> None:
    """
    Riffle other into deck in place (Gilbert-Shannon-Reeds drop rule).

    A cursor walks down deck. At each step the next card comes from other with
    probability r / (l + r), where l and r are the cards still unplaced in each
    packet; that card is moved out of other and inserted at the cursor.
    Otherwise deck's own card at the cursor stays put. other ends up empty.
    """
    if other is deck:
        raise InvalidArgument("cannot riffle a deck with itself")
    left = len(deck)
    right = len(other)
    cursor = 0
    while right:
        if left == 0:
            deck.extend(other)
            return
        if deck.source.bernoulli(right / (left + right)):
            deck.insert_at(cursor, other.pop_top())
            right -= 1
        else:
            left -= 1
        cursor += 1


def from_riffle(left: Deck[Any], right: Deck[Any]) -> Deck[Any]:
    """Riffle two decks into a new one, consuming both. Uses a source derived from left's."""
    if left is right:
        raise InvalidArgument("cannot riffle a deck with itself")
    out = _packet(left)
    while left and right:
        l, r = len(left), len(right)
        if out.source.bernoulli(r / (l + r)):
            out.push_bottom(right.pop_top())
        else:
            out.push_bottom(left.pop_top())
    out.extend(left)
    out.extend(right)
    return out


def riffle(deck: Deck[Any], times: int = 1) -> None:
    """
    GSR riffle shuffle, repeated `times` times.

    Each pass cuts at a binomially chosen point and riffles the two packets
    back together. One pass is a poor shuffle; see DEFAULT_RIFFLES.
    """
    if times < 0:
        raise InvalidArgument(f"times must be non-negative, got {times}")
    logger.debug("riffle x%d on %d cards", times, len(deck))
    for _ in range(times):
        riffle_with(deck, deck.split_off_biased())


def inverse_riffle(deck: Deck[Any]) -> None:
    """
    Inverse of one riffle: a fair coin per card (top to bottom) decides whether
    it is lifted into the lower packet. Both packets keep their relative order.
    """
    lifted = _packet(deck)
    for _ in range(len(deck)):
        card = deck.pop_top()
        if deck.source.bernoulli(0.5):
            lifted.push_bottom(card)
        else:
            deck.push_bottom(card)
    deck.extend(lifted)


def faro(deck: Deck[Any], out: bool = True, *, strict: bool = True) -> None:
    """
    Perfect interleave of the two halves.

    :param out: True keeps the top card on top (out-faro); False puts it second (in-faro)
    :param strict: reject decks of odd length. When False, the out-faro gives the
        extra card to the top half (top and bottom cards stay put) and the
        in-faro gives it to the bottom half.
    """
    n = len(deck)
    if strict and n % 2:
        raise InvalidArgument(f"a faro shuffle requires an even number of cards, got {n}")
    half = (n + 1) // 2 if out else n // 2
    lower = deck.split_off(half)
    offset = 1 if out else 0
    i = 0
    while lower:
        deck.insert_at(2 * i + offset, lower.pop_top())
        i += 1


def gilbreath(deck: Deck[Any], n: int) -> None:
    """Deal the top n cards into a packet (reversing them) and riffle it back in."""
    if not 0 <= n <= len(deck):
        raise InvalidArgument(f"n must be in [0, {len(deck)}], got {n}")
    packet = _packet(deck)
    for _ in range(n):
        packet.push_top(deck.pop_top())
    riffle_with(deck, packet)


def _reverse_range(deck: Deck[Any], lo: int, hi: int) -> None:
    while lo < hi:
        deck.swap(lo, hi)
        lo += 1
        hi -= 1


def _reverse_blocks(deck: Deck[Any], p: float) -> None:
    n = len(deck)
    start = 0
    for i in range(n):
        # the last card always closes the final block
        if i == n - 1 or deck.source.bernoulli(p):
            _reverse_range(deck, start, i)
            start = i + 1


def pemantle(deck: Deck[Any], p: float = DEFAULT_OVERHAND_CUT_PROBABILITY) -> None:
    """Split into blocks (a break after each card with probability p) and reverse each block."""
    _check_probability(p)
    _reverse_blocks(deck, p)


def overhand(deck: Deck[Any], p: float = DEFAULT_OVERHAND_CUT_PROBABILITY) -> None:
    """
    Overhand shuffle: packets peeled off the top land in reverse packet order,
    each packet keeping its own order. Same as pemantle() followed by a reversal.
    """
    _check_probability(p)
    _reverse_blocks(deck, p)
    deck.reverse()


def pile_shuffle(deck: Deck[Any], piles: int = DEFAULT_PILES) -> None:
    """
    Deal round robin onto `piles` piles, then stack the piles in random order.

    With at least as many piles as cards this is exactly shuffle(deck).
    """
    if piles < 1:
        raise InvalidArgument(f"piles must be at least 1, got {piles}")
    if piles >= len(deck):
        shuffle(deck)
        return
    stacks = [_packet(deck) for _ in range(piles)]
    k = 0
    while deck:
        stacks[k % piles].push_top(deck.pop_top())
        k += 1
    order = list(range(piles))
    for i in range(piles - 1, 0, -1):
        j = deck.source.uniform(i + 1)
        order[i], order[j] = order[j], order[i]
    for k in order:
        deck.extend(stacks[k])


class ShuffleStrategy(ABC):
    """Base class for how to shuffle a deck (in place)."""

    @abstractmethod
    def shuffle(self, deck: Deck[Any]) -> None:
        """
        Shuffle the deck in place.

        :param deck: deck to permute; its own source supplies the randomness
        """
        ...


class WashShuffleStrategy(ShuffleStrategy):
    """Full uniform shuffle."""

    def shuffle(self, deck: Deck[Any]) -> None:
        shuffle(deck)


class RiffleShuffleStrategy(ShuffleStrategy):
    def __init__(self, times: int = DEFAULT_RIFFLES):
        if times < 0:
            raise InvalidArgument(f"times must be non-negative, got {times}")
        self.times = times

    def shuffle(self, deck: Deck[Any]) -> None:
        riffle(deck, self.times)


class OverhandShuffleStrategy(ShuffleStrategy):
    """
    Overhand shuffle repeated `passes` times. With pemantle=True the final
    reversal is skipped each pass.
    """

    def __init__(
        self,
        p: float = DEFAULT_OVERHAND_CUT_PROBABILITY,
        passes: int = 1,
        *,
        pemantle: bool = False,
    ):
        _check_probability(p)
        if passes < 0:
            raise InvalidArgument(f"passes must be non-negative, got {passes}")
        self.p = p
        self.passes = passes
        self.pemantle = pemantle

    def shuffle(self, deck: Deck[Any]) -> None:
        step = pemantle if self.pemantle else overhand
        for _ in range(self.passes):
            step(deck, self.p)


class PileShuffleStrategy(ShuffleStrategy):
    def __init__(self, piles: int = DEFAULT_PILES):
        if piles < 1:
            raise InvalidArgument(f"piles must be at least 1, got {piles}")
        self.piles = piles

    def shuffle(self, deck: Deck[Any]) -> None:
        pile_shuffle(deck, self.piles)


class FaroShuffleStrategy(ShuffleStrategy):
    """Deterministic: `times` perfect faros. Odd decks are accepted (non-strict)."""

    def __init__(self, out: bool = True, times: int = 1):
        if times < 0:
            raise InvalidArgument(f"times must be non-negative, got {times}")
        self.out = out
        self.times = times

    def shuffle(self, deck: Deck[Any]) -> None:
        for _ in range(self.times):
            faro(deck, self.out, strict=False)


class DeckCuttingStrategy(ShuffleStrategy):
    """
    Each step: cut the deck at a random proportion (proportion_min/max).
    With probability deck_interleaving_probability: split the top packet in two
    (at interleaving_proportion_min/max) and drop the bottom packet in between
    (top1 + bottom + top2). Otherwise: move the bottom packet to the top.
    Repeated n times.
    """

    def __init__(
        self,
        proportion_min: float = 0.3,
        proportion_max: float = 0.7,
        deck_interleaving_probability: float = 1/3,
        interleaving_proportion_min: float = 0.3,
        interleaving_proportion_max: float = 0.7,
        n: int = 5,
    ):
        for lo, hi in (
            (proportion_min, proportion_max),
            (interleaving_proportion_min, interleaving_proportion_max),
        ):
            if not 0.0 <= lo <= hi <= 1.0:
                raise InvalidArgument(f"proportions must satisfy 0 <= min <= max <= 1, got {lo}, {hi}")
        _check_probability(deck_interleaving_probability)
        if n < 0:
            raise InvalidArgument(f"n must be non-negative, got {n}")
        self.proportion_min = proportion_min
        self.proportion_max = proportion_max
        self.deck_interleaving_probability = deck_interleaving_probability
        self.interleaving_proportion_min = interleaving_proportion_min
        self.interleaving_proportion_max = interleaving_proportion_max
        self.n = n

    @staticmethod
    def _pick(deck: Deck[Any], size: int, lo: float, hi: float) -> int:
        """Uniform index between int(size * lo) and int(size * hi), inclusive."""
        a = int(size * lo)
        b = int(size * hi)
        return a + deck.source.uniform(b - a + 1)

    def _interleave(self, deck: Deck[Any], cut_index: int) -> None:
        """Split top packet at the interleaving proportion; result = top1 + bottom + top2."""
        bottom = deck.split_off(cut_index)
        split_at = self._pick(
            deck, cut_index, self.interleaving_proportion_min, self.interleaving_proportion_max
        )
        split_at = min(max(split_at, 1), cut_index - 1)
        top2 = deck.split_off(split_at)
        deck.extend(bottom)
        deck.extend(top2)

    def shuffle(self, deck: Deck[Any]) -> None:
        for _ in range(self.n):
            if len(deck) < 2:
                return
            cut_index = self._pick(deck, len(deck), self.proportion_min, self.proportion_max)
            if cut_index <= 0 or cut_index >= len(deck):
                continue
            if deck.source.bernoulli(self.deck_interleaving_probability):
                # need at least 2 cards in the top packet to split it
                if cut_index >= 2:
                    self._interleave(deck, cut_index)
            else:
                deck.cut(cut_index)


class CompositeShuffleStrategy(ShuffleStrategy):
    """Run several strategies in sequence, e.g. riffle, riffle, overhand, riffle, cut."""

    def __init__(self, *strategies: ShuffleStrategy):
        self.strategies = strategies

    def shuffle(self, deck: Deck[Any]) -> None:
        for s in self.strategies:
            s.shuffle(deck)
