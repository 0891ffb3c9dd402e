"""Deck creation, shuffling and dealing for Hearts."""

from __future__ import annotations

import math
from typing import Callable, List, MutableSequence, Sequence, Tuple, TypeVar

from .cards import Card, RANK_ORDER, SUIT_ORDER, sort_cards

T = TypeVar("T")

# Uniform source returning floats in [0, 1), e.g. ``random.Random(seed).random``.
UniformSource = Callable[[], float]


def build_deck(copies: int = 1) -> List[Card]:
    """Return the ordered deck: every suit crossed with every rank, ``copies`` times."""
    if copies not in (1, 2):
        raise ValueError("Deck must be built from one or two standard sets.")
    single = [Card(rank, suit) for suit in SUIT_ORDER for rank in RANK_ORDER]
    return single * copies


def shuffle_deck(deck: MutableSequence[T], rng: UniformSource) -> MutableSequence[T]:
    """Fisher-Yates shuffle in place and return the same sequence."""
    for i in range(len(deck) - 1, 0, -1):
        j = math.floor(rng() * (i + 1))
        deck[i], deck[j] = deck[j], deck[i]
    return deck


def deal_hands(deck: Sequence[Card], seat_count: int) -> Tuple[int, List[List[Card]]]:
    """Deal round-robin from the top of ``deck`` and return ``(hand_size, hands)``.

    Every seat receives ``len(deck) // seat_count`` cards. The remaining
    ``len(deck) % seat_count`` cards stay undealt. Hands come back sorted.
    """
    if seat_count <= 0:
        raise ValueError("Cannot deal to an empty table.")
    hand_size = len(deck) // seat_count
    hands: List[List[Card]] = [[] for _ in range(seat_count)]
    cards = iter(deck)
    for _ in range(hand_size):
        for hand in hands:
            hand.append(next(cards))
    return hand_size, [sort_cards(hand) for hand in hands]
