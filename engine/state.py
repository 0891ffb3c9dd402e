"""Player and in-round state management for Hearts."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from .cards import Card
from .mechanics import legal_moves, validate_play
from .scoring import HEART_POINTS, QUEEN_OF_SPADES_POINTS, RoundLedger
from .trick import Trick, TrickResult, resolve_trick
from .turns import TurnSequencer


@dataclass
class Player:
    id: str
    name: str
    hand: List[Card] = field(default_factory=list)
    round_score: int = 0
    cumulative_score: int = 0

    def take_card(self, card: Card) -> None:
        # Two-deck hands can hold duplicates; only one copy leaves the hand.
        self.hand.remove(card)


@dataclass
class Round:
    """One deal: hands are played out trick by trick until ``trick_count == hand_size``."""

    players: Sequence[Player]
    hand_size: int
    heart_points: int = HEART_POINTS
    queen_of_spades_points: int = QUEEN_OF_SPADES_POINTS
    trick: Trick = field(init=False)
    ledger: RoundLedger = field(init=False)
    turns: TurnSequencer = field(init=False)
    cards_dealt: int = field(init=False)
    taken_cards: List[Card] = field(init=False, default_factory=list)

    def __post_init__(self) -> None:
        seat_count = len(self.players)
        self.trick = Trick(size=seat_count)
        self.ledger = RoundLedger(hand_size=self.hand_size)
        self.turns = TurnSequencer(seat_count=seat_count)
        self.cards_dealt = sum(len(player.hand) for player in self.players)

    @property
    def trick_count(self) -> int:
        return self.ledger.trick_count

    @property
    def current_player(self) -> Player:
        return self.players[self.turns.current_index]

    def is_complete(self) -> bool:
        return self.ledger.is_complete()

    def seat_of(self, player_id: str) -> int:
        for index, player in enumerate(self.players):
            if player.id == player_id:
                return index
        raise KeyError(player_id)

    def available_moves(self, player_id: str) -> List[Card]:
        player = self.players[self.seat_of(player_id)]
        return legal_moves(player.hand, self.trick)

    def validate(self, player_id: str, card: Card) -> None:
        player = self.current_player
        validate_play(
            acting_player_id=player_id,
            seat_player_id=player.id,
            hand=player.hand,
            trick=self.trick,
            card=card,
        )

    def play_card(self, player_id: str, card: Card) -> Optional[TrickResult]:
        """Validate and apply one play; return the trick result if it completed a trick."""
        self.validate(player_id, card)
        player = self.current_player
        player.take_card(card)
        self.trick.add_play(player_id, card)
        if not self.trick.is_full():
            self.turns.advance()
            return None
        return self._complete_trick()

    def _complete_trick(self) -> TrickResult:
        result = resolve_trick(
            self.trick,
            heart_points=self.heart_points,
            queen_of_spades_points=self.queen_of_spades_points,
        )
        winner_seat = self.seat_of(result.winner_id)
        self.ledger.record_trick(self.players[winner_seat], result.points)
        self.taken_cards.extend(result.cards)
        self.trick.clear()
        self.turns.jump_to(winner_seat)
        return result

    def cards_accounted(self) -> int:
        in_hands = sum(len(player.hand) for player in self.players)
        return in_hands + len(self.trick.plays) + len(self.taken_cards)
