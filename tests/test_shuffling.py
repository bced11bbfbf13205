import pytest
from scipy import stats

from deck import Deck
from errors import InvalidArgument
from shuffling import (
    CompositeShuffleStrategy,
    DeckCuttingStrategy,
    FaroShuffleStrategy,
    OverhandShuffleStrategy,
    PileShuffleStrategy,
    RiffleShuffleStrategy,
    WashShuffleStrategy,
    faro,
    from_riffle,
    gilbreath,
    inverse_riffle,
    overhand,
    pemantle,
    pile_shuffle,
    riffle,
    riffle_with,
    shuffle,
)

ALL_SHUFFLES = {
    "fisher_yates": shuffle,
    "riffle": riffle,
    "riffle_x7": lambda d: riffle(d, 7),
    "inverse_riffle": inverse_riffle,
    "faro_out": lambda d: faro(d, True, strict=False),
    "faro_in": lambda d: faro(d, False, strict=False),
    "gilbreath": lambda d: gilbreath(d, len(d) // 2),
    "overhand": lambda d: overhand(d, 0.3),
    "pemantle": lambda d: pemantle(d, 0.3),
    "pile": lambda d: pile_shuffle(d, 5),
    "wash_strategy": WashShuffleStrategy().shuffle,
    "riffle_strategy": RiffleShuffleStrategy().shuffle,
    "overhand_strategy": OverhandShuffleStrategy(passes=3).shuffle,
    "pemantle_strategy": OverhandShuffleStrategy(passes=3, pemantle=True).shuffle,
    "pile_strategy": PileShuffleStrategy(4).shuffle,
    "faro_strategy": FaroShuffleStrategy(out=False, times=3).shuffle,
    "cutting_strategy": DeckCuttingStrategy().shuffle,
}


def runs_of_increasing(values):
    """Number of maximal increasing runs when reading left to right."""
    return 1 + sum(1 for a, b in zip(values, values[1:]) if b < a)


def is_merge_of_two_blocks(values):
    """True if values interleave [0, k) and [k, n) for some k, each kept in order."""
    n = len(values)
    for k in range(n + 1):
        low = [v for v in values if v < k]
        high = [v for v in values if v >= k]
        if low == list(range(k)) and high == list(range(k, n)):
            return True
    return False


@pytest.mark.parametrize("name", sorted(ALL_SHUFFLES))
@pytest.mark.parametrize("size", [0, 1, 2, 7, 52])
def test_every_shuffle_is_a_permutation(name, size, make_deck):
    deck = make_deck(range(size))
    ALL_SHUFFLES[name](deck)
    assert len(deck) == size
    assert sorted(deck) == list(range(size))


def test_permutation_with_duplicate_items(make_deck, same_cards):
    items = ["a", "a", "b", "c", "c", "c"] * 3
    for name, fn in ALL_SHUFFLES.items():
        deck = make_deck(items)
        fn(deck)
        assert same_cards(deck, items), name


def test_fisher_yates_is_uniform():
    size = 6
    trials = 3000
    where_top_lands = [0] * size
    who_ends_on_top = [0] * size
    for seed in range(trials):
        deck = Deck(range(size), seed=seed)
        shuffle(deck)
        cards = deck.to_list()
        where_top_lands[cards.index(0)] += 1
        who_ends_on_top[cards[0]] += 1
    assert stats.chisquare(where_top_lands).pvalue > 1e-4
    assert stats.chisquare(who_ends_on_top).pvalue > 1e-4


def test_one_riffle_is_not_uniform():
    size = 20
    where_top_lands = [0] * size
    for seed in range(2000):
        deck = Deck(range(size), seed=seed)
        riffle(deck)
        where_top_lands[deck.to_list().index(0)] += 1
    assert stats.chisquare(where_top_lands).pvalue < 1e-6


def test_same_seed_same_result():
    def run(seed):
        deck = Deck(range(52), seed=seed)
        riffle(deck, 3)
        overhand(deck, 0.2)
        deck.cut_biased()
        pile_shuffle(deck, 6)
        inverse_riffle(deck)
        gilbreath(deck, 20)
        pemantle(deck, 0.5)
        shuffle(deck)
        return deck.to_list()

    assert run(2024) == run(2024)
    assert run(2024) != run(2025)


def test_seeded_riffle_order_is_frozen():
    deck = Deck(range(10), seed=42)
    riffle(deck)
    assert deck.to_list() == [0, 1, 2, 6, 3, 4, 5, 7, 8, 9]


def test_riffle_merges_two_packets(make_deck):
    for seed in range(50):
        deck = make_deck(range(30), seed=seed)
        riffle(deck)
        assert is_merge_of_two_blocks(deck.to_list())


def test_riffle_times():
    deck = Deck(range(10), seed=1)
    riffle(deck, 0)
    assert deck.to_list() == list(range(10))
    with pytest.raises(InvalidArgument):
        riffle(deck, -1)


def test_riffle_with_keeps_packet_order():
    for seed in range(30):
        deck = Deck(range(10), seed=seed)
        other = Deck(range(10, 20))
        riffle_with(deck, other)
        assert len(other) == 0
        assert is_merge_of_two_blocks(deck.to_list())
        assert len(deck) == 20


def test_riffle_with_into_empty_deck():
    deck = Deck.empty(seed=1)
    riffle_with(deck, Deck([1, 2, 3]))
    assert deck.to_list() == [1, 2, 3]
    riffle_with(deck, Deck.empty())
    assert deck.to_list() == [1, 2, 3]
    with pytest.raises(InvalidArgument):
        riffle_with(deck, deck)


def test_from_riffle_rejects_same_deck_twice():
    deck = Deck(range(6), seed=2)
    with pytest.raises(InvalidArgument):
        from_riffle(deck, deck)
    assert deck.to_list() == list(range(6))


def test_from_riffle_consumes_both():
    left = Deck(range(5), seed=9)
    right = Deck(range(5, 12))
    out = from_riffle(left, right)
    assert len(left) == len(right) == 0
    assert is_merge_of_two_blocks(out.to_list())
    assert len(out) == 12


def test_inverse_riffle_has_at_most_two_rising_runs():
    for seed in range(50):
        deck = Deck(range(30), seed=seed)
        inverse_riffle(deck)
        assert runs_of_increasing(deck.to_list()) <= 2


def test_faro_out_and_in():
    deck = Deck(range(10))
    faro(deck, out=True)
    assert deck.to_list() == [0, 5, 1, 6, 2, 7, 3, 8, 4, 9]

    deck = Deck(range(10))
    faro(deck, out=False)
    assert deck.to_list() == [5, 0, 6, 1, 7, 2, 8, 3, 9, 4]


@pytest.mark.parametrize("size, out, period", [(2, True, 1), (4, True, 2), (8, True, 3), (52, True, 8), (52, False, 52)])
def test_faro_cycle_lengths(size, out, period):
    deck = Deck(range(size))
    for k in range(1, period + 1):
        faro(deck, out)
        if k < period:
            assert deck.to_list() != list(range(size))
    assert deck.to_list() == list(range(size))


def test_faro_rejects_odd_deck_when_strict():
    deck = Deck(range(5))
    with pytest.raises(InvalidArgument):
        faro(deck)
    assert deck.to_list() == list(range(5))


def test_faro_odd_deck_when_lenient():
    deck = Deck(range(5))
    faro(deck, out=True, strict=False)
    assert deck.to_list() == [0, 3, 1, 4, 2]

    deck = Deck(range(5))
    faro(deck, out=False, strict=False)
    assert deck.to_list() == [2, 0, 3, 1, 4]


def test_gilbreath_bounds():
    deck = Deck(range(5), seed=1)
    with pytest.raises(InvalidArgument):
        gilbreath(deck, 6)
    with pytest.raises(InvalidArgument):
        gilbreath(deck, -1)
    assert deck.to_list() == list(range(5))
    gilbreath(deck, 0)
    assert deck.to_list() == list(range(5))
    gilbreath(deck, 5)
    assert deck.to_list() == [4, 3, 2, 1, 0]


def test_gilbreath_principle():
    # alternating parities stay paired up after any Gilbreath shuffle
    for seed in range(20):
        for n in (1, 13, 26, 40, 52):
            deck = Deck(range(52), seed=seed)
            gilbreath(deck, n)
            cards = deck.to_list()
            assert all(cards[i] % 2 != cards[i + 1] % 2 for i in range(0, 52, 2))


def test_overhand_and_pemantle_extremes():
    deck = Deck(range(8), seed=1)
    overhand(deck, 0.0)
    assert deck.to_list() == list(range(8))
    overhand(deck, 1.0)
    assert deck.to_list() == list(range(7, -1, -1))

    deck = Deck(range(8), seed=1)
    pemantle(deck, 1.0)
    assert deck.to_list() == list(range(8))
    pemantle(deck, 0.0)
    assert deck.to_list() == list(range(7, -1, -1))


def test_overhand_is_pemantle_then_reverse():
    a = Deck(range(52), seed=77)
    b = Deck(range(52), seed=77)
    overhand(a, 0.3)
    pemantle(b, 0.3)
    b.reverse()
    assert a == b


def test_overhand_keeps_packets_intact():
    # the packets land in reverse order, each keeping its own order
    for seed in range(20):
        deck = Deck(range(30), seed=seed)
        overhand(deck, 0.3)
        packets = [[]]
        for card in deck:
            if packets[-1] and card < packets[-1][-1]:
                packets.append([])
            packets[-1].append(card)
        assert [c for packet in reversed(packets) for c in packet] == list(range(30))


@pytest.mark.parametrize("p", [-0.5, 1.5])
def test_overhand_rejects_bad_probability(p):
    deck = Deck(range(10))
    with pytest.raises(InvalidArgument):
        overhand(deck, p)
    with pytest.raises(InvalidArgument):
        pemantle(deck, p)
    with pytest.raises(InvalidArgument):
        pemantle(Deck.empty(), p)
    assert deck.to_list() == list(range(10))


@pytest.mark.parametrize("piles", [52, 53, 100])
def test_pile_shuffle_falls_back_to_uniform(piles):
    a = Deck(range(52), seed=31)
    b = Deck(range(52), seed=31)
    pile_shuffle(a, piles)
    shuffle(b)
    assert a == b


def test_pile_shuffle_single_pile_reverses():
    deck = Deck(range(10), seed=1)
    pile_shuffle(deck, 1)
    assert deck.to_list() == list(range(9, -1, -1))


def test_pile_shuffle_two_piles():
    outcomes = set()
    for seed in range(30):
        deck = Deck(range(6), seed=seed)
        pile_shuffle(deck, 2)
        outcomes.add(tuple(deck))
    assert outcomes == {(4, 2, 0, 5, 3, 1), (5, 3, 1, 4, 2, 0)}


def test_pile_shuffle_rejects_zero_piles():
    with pytest.raises(InvalidArgument):
        pile_shuffle(Deck(range(4)), 0)
    with pytest.raises(InvalidArgument):
        pile_shuffle(Deck.empty(), 0)


def test_wash_strategy_matches_shuffle():
    a = Deck(range(52), seed=3)
    b = Deck(range(52), seed=3)
    WashShuffleStrategy().shuffle(a)
    shuffle(b)
    assert a == b


def test_faro_strategy_restores_after_full_cycle():
    deck = Deck(range(52))
    CompositeShuffleStrategy(FaroShuffleStrategy(times=4), FaroShuffleStrategy(times=4)).shuffle(deck)
    assert deck.to_list() == list(range(52))


def test_composite_runs_in_order():
    deck = Deck(range(10))
    CompositeShuffleStrategy(FaroShuffleStrategy(out=True), OverhandShuffleStrategy(p=1.0)).shuffle(deck)
    assert deck.to_list() == [9, 4, 8, 3, 7, 2, 6, 1, 5, 0]


def test_cutting_strategy_preserves_cards_and_moves_them():
    deck = Deck(range(52), seed=12)
    DeckCuttingStrategy(n=10).shuffle(deck)
    assert sorted(deck) == list(range(52))
    assert deck.to_list() != list(range(52))


def test_cutting_strategy_without_interleaving_is_a_rotation():
    deck = Deck(range(20), seed=4)
    DeckCuttingStrategy(deck_interleaving_probability=0.0, n=6).shuffle(deck)
    cards = deck.to_list()
    start = cards.index(0)
    assert cards[start:] + cards[:start] == list(range(20))


@pytest.mark.parametrize(
    "factory",
    [
        lambda: RiffleShuffleStrategy(-1),
        lambda: OverhandShuffleStrategy(p=2.0),
        lambda: OverhandShuffleStrategy(passes=-1),
        lambda: PileShuffleStrategy(0),
        lambda: FaroShuffleStrategy(times=-2),
        lambda: DeckCuttingStrategy(proportion_min=0.8, proportion_max=0.2),
        lambda: DeckCuttingStrategy(deck_interleaving_probability=1.5),
        lambda: DeckCuttingStrategy(n=-1),
    ],
)
def test_strategies_validate_parameters(factory):
    with pytest.raises(InvalidArgument):
        factory()
