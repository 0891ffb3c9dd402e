"""Trick points and per-round score bookkeeping for Hearts."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Sequence, Tuple

from .cards import Card, Rank, Suit

if TYPE_CHECKING:
    from .state import Player


HEART_POINTS = 1
QUEEN_OF_SPADES_POINTS = 12


class ScoringError(ValueError):
    """Raised when round bookkeeping is driven out of order."""


def is_queen_of_spades(card: Card) -> bool:
    return card.rank is Rank.QUEEN and card.suit is Suit.SPADES


def calculate_points(
    cards: Iterable[Card],
    *,
    heart_points: int = HEART_POINTS,
    queen_of_spades_points: int = QUEEN_OF_SPADES_POINTS,
) -> int:
    """Each heart scores ``heart_points``; every Queen of Spades scores separately."""
    total = 0
    for card in cards:
        if card.suit is Suit.HEARTS:
            total += heart_points
        if is_queen_of_spades(card):
            total += queen_of_spades_points
    return total


@dataclass(frozen=True)
class PlayerRoundResult:
    player_id: str
    name: str
    round_points: int
    cumulative_score: int


@dataclass(frozen=True)
class RoundSummary:
    round_number: int
    results: Tuple[PlayerRoundResult, ...]

    def total_points(self) -> int:
        return sum(result.round_points for result in self.results)


@dataclass
class RoundLedger:
    """Count resolved tricks and credit trick points for one round."""

    hand_size: int
    trick_count: int = 0

    def is_complete(self) -> bool:
        return self.trick_count == self.hand_size

    def record_trick(self, winner: "Player", points: int) -> None:
        if self.is_complete():
            raise ScoringError("All tricks of this round are already resolved.")
        if points < 0:
            raise ScoringError("Trick points cannot be negative.")
        winner.round_score += points
        self.trick_count += 1

    def close(self, players: Sequence["Player"], round_number: int) -> RoundSummary:
        """Fold round scores into cumulative scores exactly once and reset them."""
        if not self.is_complete():
            raise ScoringError("Round closed before its last trick was resolved.")
        results = []
        for player in players:
            player.cumulative_score += player.round_score
            results.append(
                PlayerRoundResult(
                    player_id=player.id,
                    name=player.name,
                    round_points=player.round_score,
                    cumulative_score=player.cumulative_score,
                )
            )
            player.round_score = 0
        return RoundSummary(round_number=round_number, results=tuple(results))
