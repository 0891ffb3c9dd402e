"""Trick representation and resolution."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .cards import Card, Suit, card_strength
from .scoring import calculate_points


class TrickError(RuntimeError):
    """Raised when trick play breaks ordering constraints."""


@dataclass(frozen=True)
class TrickResult:
    winner_id: str
    points: int
    cards: Tuple[Card, ...]


@dataclass
class Trick:
    size: int = 4
    plays: List[Tuple[str, Card]] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.plays

    def is_full(self) -> bool:
        return len(self.plays) == self.size

    def add_play(self, player_id: str, card: Card) -> None:
        if self.is_full():
            raise TrickError("Trick already complete.")
        if any(pid == player_id for pid, _ in self.plays):
            raise TrickError("Player cannot play twice in the same trick.")
        self.plays.append((player_id, card))

    def led_suit(self) -> Optional[Suit]:
        return self.plays[0][1].suit if self.plays else None

    def cards(self) -> List[Card]:
        return [card for _, card in self.plays]

    def winning_play(self) -> Tuple[str, Card]:
        """Highest card of the led suit; an equal card played later takes over."""
        if not self.plays:
            raise TrickError("Cannot determine winner on empty trick.")
        led = self.led_suit()
        winning_player, winning_card = self.plays[0]
        for player_id, card in self.plays[1:]:
            if card.suit is led and card_strength(card) >= card_strength(winning_card):
                winning_player, winning_card = player_id, card
        return winning_player, winning_card

    def clear(self) -> None:
        self.plays.clear()


def resolve_trick(trick: Trick, *, heart_points: int = 1, queen_of_spades_points: int = 12) -> TrickResult:
    if not trick.is_full():
        raise TrickError("Cannot resolve an incomplete trick.")
    winner_id, _ = trick.winning_play()
    cards = tuple(trick.cards())
    points = calculate_points(cards, heart_points=heart_points, queen_of_spades_points=queen_of_spades_points)
    return TrickResult(winner_id=winner_id, points=points, cards=cards)
