#!/usr/bin/env python3
"""
Benchmark the shuffles: speed, and how well one pass mixes.

Speed: shuffle one deck TRIALS times with each algorithm.
Mixing: start from a fresh deck MIXING_TRIALS times (seeds seed, seed+1, ...),
apply one pass, record where the original top card lands, and test that
position distribution against uniform (chi-square).

uv run benchmark.py --cards 52 --trials 50000 --plot mixing.png
"""

from __future__ import annotations

import argparse
import time
from pathlib import Path
from typing import Any, Callable

import matplotlib.pyplot as plt
from scipy import stats

from deck import Deck
from shuffling import (
    DEFAULT_OVERHAND_CUT_PROBABILITY,
    DEFAULT_PILES,
    overhand,
    pemantle,
    pile_shuffle,
    riffle,
    shuffle,
)

NUM_CARDS_DEFAULT = 52
NUM_TRIALS_DEFAULT = 50_000
MIXING_TRIALS_DEFAULT = 2_000
SEED_DEFAULT = 0

SHUFFLES: dict[str, Callable[[Deck[Any]], None]] = {
    "Fisher-Yates": shuffle,
    "Riffle": riffle,
    "Overhand": lambda d: overhand(d, DEFAULT_OVERHAND_CUT_PROBABILITY),
    "Pemantle": lambda d: pemantle(d, DEFAULT_OVERHAND_CUT_PROBABILITY),
    "Pile Shuffle": lambda d: pile_shuffle(d, DEFAULT_PILES),
}


def time_shuffle(fn: Callable[[Deck[Any]], None], num_cards: int, trials: int, seed: int) -> float:
    deck = Deck(range(num_cards), seed=seed)
    start = time.perf_counter()
    for _ in range(trials):
        fn(deck)
    return time.perf_counter() - start


def top_card_positions(
    fn: Callable[[Deck[Any]], None], num_cards: int, trials: int, seed: int
) -> list[int]:
    """Histogram of where card 0 ends up after one pass from a fresh deck."""
    counts = [0] * num_cards
    for t in range(trials):
        deck = Deck(range(num_cards), seed=seed + t)
        fn(deck)
        counts[deck.to_list().index(0)] += 1
    return counts


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Benchmark shuffle speed and single-pass mixing.")
    p.add_argument(
        "-c",
        "--cards",
        type=int,
        default=NUM_CARDS_DEFAULT,
        metavar="N",
        help=f"Cards in the deck (default: {NUM_CARDS_DEFAULT})",
    )
    p.add_argument(
        "-t",
        "--trials",
        type=int,
        default=NUM_TRIALS_DEFAULT,
        metavar="N",
        help=f"Shuffles per algorithm for the speed test (default: {NUM_TRIALS_DEFAULT})",
    )
    p.add_argument(
        "-m",
        "--mixing-trials",
        type=int,
        default=MIXING_TRIALS_DEFAULT,
        metavar="N",
        help=f"Fresh decks per algorithm for the mixing test, 0 to skip (default: {MIXING_TRIALS_DEFAULT})",
    )
    p.add_argument("--seed", type=int, default=SEED_DEFAULT, metavar="S", help=f"Base seed (default: {SEED_DEFAULT})")
    p.add_argument("--plot", type=Path, default=None, metavar="PATH", help="Save mixing histograms to PATH")
    args = p.parse_args()
    if args.cards < 2:
        p.error("--cards must be at least 2")
    if args.trials < 1:
        p.error("--trials must be positive")
    if args.mixing_trials < 0:
        p.error("--mixing-trials must be non-negative")
    if not 0 <= args.seed < 2**64:
        p.error("--seed must fit in 64 unsigned bits")
    # mixing trial t is seeded with seed + t
    if args.seed + max(args.mixing_trials - 1, 0) >= 2**64:
        p.error("--seed + --mixing-trials - 1 must fit in 64 unsigned bits")
    if args.plot is not None and args.mixing_trials == 0:
        p.error("--plot needs --mixing-trials > 0")
    return args


def main() -> None:
    args = parse_args()

    print(f"Shuffle a deck of {args.cards} cards {args.trials} times.")
    for name, fn in SHUFFLES.items():
        elapsed = time_shuffle(fn, args.cards, args.trials, args.seed)
        print(f"  {name + ':':<14} {elapsed:.3f}s")

    if args.mixing_trials == 0:
        return

    print(f"\nTop card position after one pass ({args.mixing_trials} fresh decks each):")
    histograms: dict[str, list[int]] = {}
    for name, fn in SHUFFLES.items():
        counts = top_card_positions(fn, args.cards, args.mixing_trials, args.seed)
        histograms[name] = counts
        chi2, p_value = stats.chisquare(counts)
        print(f"  {name + ':':<14} chi2 = {chi2:10.2f}, p = {p_value:.4f}")

    if args.plot is None:
        return

    fig, axes = plt.subplots(1, len(histograms), figsize=(4 * len(histograms), 3.5), sharey=True)
    positions = list(range(args.cards))
    expected = args.mixing_trials / args.cards
    for ax, (name, counts) in zip(axes, histograms.items()):
        ax.bar(positions, counts, width=1.0, edgecolor="black", alpha=0.8)
        ax.axhline(expected, color="red", linestyle="--", label="Uniform")
        ax.set_xlabel("Final position of original top card")
        ax.set_title(name)
        ax.legend()
    axes[0].set_ylabel("Count")
    plt.tight_layout()
    plt.savefig(args.plot, dpi=150)
    print(f"\nPlots saved to {args.plot}")


if __name__ == "__main__":
    main()
