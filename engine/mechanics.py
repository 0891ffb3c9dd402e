"""Legal move generation and play validation for Hearts."""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from .cards import Card, sort_cards
from .errors import CardNotInHand, GameNotInProgress, MustFollowSuit, NotYourTurn
from .trick import Trick


def legal_moves(hand: Iterable[Card], trick: Trick) -> List[Card]:
    """Return the subset of cards that are legal to play given the current trick."""
    cards = sort_cards(hand)
    led = trick.led_suit()
    if led is None:
        return cards
    in_led = [card for card in cards if card.suit is led]
    return in_led if in_led else cards


def validate_play(
    *,
    acting_player_id: str,
    seat_player_id: Optional[str],
    hand: Sequence[Card],
    trick: Trick,
    card: Card,
) -> None:
    """Raise a :class:`~engine.errors.PlayRejected` if ``card`` may not be played.

    Checks run in order: turn ownership, card ownership, then follow-suit.
    Nothing is mutated.
    """
    if seat_player_id is None:
        raise GameNotInProgress()
    if acting_player_id != seat_player_id:
        raise NotYourTurn()
    if card not in hand:
        raise CardNotInHand()
    led = trick.led_suit()
    if led is not None and card.suit is not led:
        if any(held.suit is led for held in hand):
            raise MustFollowSuit(led)
