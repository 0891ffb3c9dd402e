"""Card-related data structures and helpers for Hearts."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterable, List, Tuple


class CardParseError(ValueError):
    """Raised when card text does not match ``"<rank> of <suit>"``."""


class Suit(Enum):
    # Declaration order is the canonical suit priority used for sorting hands.
    CLUBS = auto()
    DIAMONDS = auto()
    HEARTS = auto()
    SPADES = auto()

    def __str__(self) -> str:
        return self.name.title()


class Rank(Enum):
    TWO = auto()
    THREE = auto()
    FOUR = auto()
    FIVE = auto()
    SIX = auto()
    SEVEN = auto()
    EIGHT = auto()
    NINE = auto()
    TEN = auto()
    JACK = auto()
    QUEEN = auto()
    KING = auto()
    ACE = auto()

    def __str__(self) -> str:
        return RANK_LABELS[self]


# Rank order from lowest to highest for trick resolution.
RANK_ORDER: list[Rank] = list(Rank)

RANK_STRENGTH: dict[Rank, int] = {rank: index for index, rank in enumerate(RANK_ORDER)}

SUIT_ORDER: list[Suit] = list(Suit)

SUIT_PRIORITY: dict[Suit, int] = {suit: index for index, suit in enumerate(SUIT_ORDER)}

RANK_LABELS: dict[Rank, str] = {
    Rank.TWO: "2",
    Rank.THREE: "3",
    Rank.FOUR: "4",
    Rank.FIVE: "5",
    Rank.SIX: "6",
    Rank.SEVEN: "7",
    Rank.EIGHT: "8",
    Rank.NINE: "9",
    Rank.TEN: "10",
    Rank.JACK: "J",
    Rank.QUEEN: "Q",
    Rank.KING: "K",
    Rank.ACE: "A",
}

_RANKS_BY_LABEL: dict[str, Rank] = {label: rank for rank, label in RANK_LABELS.items()}
_SUITS_BY_NAME: dict[str, Suit] = {suit.name.title(): suit for suit in Suit}


@dataclass(frozen=True)
class Card:
    """Immutable representation of a playing card."""

    rank: Rank
    suit: Suit

    def __str__(self) -> str:
        return card_label(self)


def card_strength(card: Card) -> int:
    """Return an integer strength used for ordering cards within a suit."""
    return RANK_STRENGTH[card.rank]


def sort_key(card: Card) -> Tuple[int, int]:
    """Canonical hand order: suit priority first, then rank ascending."""
    return SUIT_PRIORITY[card.suit], RANK_STRENGTH[card.rank]


def sort_cards(cards: Iterable[Card]) -> List[Card]:
    return sorted(cards, key=sort_key)


def card_label(card: Card) -> str:
    return f"{RANK_LABELS[card.rank]} of {card.suit.name.title()}"


def parse_card(text: str) -> Card:
    """Parse the wire form ``"Q of Spades"`` into a :class:`Card`."""
    if not isinstance(text, str):
        raise CardParseError(f"Card must be text, got {type(text).__name__}.")
    parts = text.strip().split(" of ")
    if len(parts) != 2:
        raise CardParseError(f"Malformed card: {text!r}")
    rank_label, suit_name = parts[0].strip(), parts[1].strip()
    try:
        rank = _RANKS_BY_LABEL[rank_label.upper()]
        suit = _SUITS_BY_NAME[suit_name.title()]
    except KeyError as exc:
        raise CardParseError(f"Unknown card: {text!r}") from exc
    return Card(rank, suit)
