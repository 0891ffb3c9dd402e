import pytest

from engine.cards import Card, Rank, Suit
from engine.trick import Trick, TrickError, resolve_trick


def full_trick(*cards: Card) -> Trick:
    trick = Trick()
    for seat, card in enumerate(cards):
        trick.add_play(f"p{seat}", card)
    return trick


def test_highest_card_of_leading_suit_wins():
    trick = full_trick(
        Card(Rank.FIVE, Suit.CLUBS),
        Card(Rank.ACE, Suit.HEARTS),
        Card(Rank.JACK, Suit.CLUBS),
        Card(Rank.NINE, Suit.CLUBS),
    )
    result = resolve_trick(trick)
    assert result.winner_id == "p2"
    assert result.points == 1


def test_off_suit_cards_never_win():
    trick = full_trick(
        Card(Rank.TWO, Suit.DIAMONDS),
        Card(Rank.ACE, Suit.SPADES),
        Card(Rank.ACE, Suit.CLUBS),
        Card(Rank.ACE, Suit.HEARTS),
    )
    assert resolve_trick(trick).winner_id == "p0"


def test_later_duplicate_wins_tie():
    trick = full_trick(
        Card(Rank.FIVE, Suit.HEARTS),
        Card(Rank.KING, Suit.HEARTS),
        Card(Rank.KING, Suit.HEARTS),
        Card(Rank.TWO, Suit.CLUBS),
    )
    result = resolve_trick(trick)
    assert result.winner_id == "p2"
    assert result.points == 3


def test_duplicate_queens_of_spades_both_score():
    trick = full_trick(
        Card(Rank.QUEEN, Suit.SPADES),
        Card(Rank.QUEEN, Suit.SPADES),
        Card(Rank.TWO, Suit.HEARTS),
        Card(Rank.THREE, Suit.SPADES),
    )
    result = resolve_trick(trick)
    assert result.winner_id == "p1"
    assert result.points == 25
    assert result.cards[0] == Card(Rank.QUEEN, Suit.SPADES)


def test_trick_structure_is_guarded():
    trick = Trick()
    assert trick.led_suit() is None
    with pytest.raises(TrickError):
        trick.winning_play()
    trick.add_play("p0", Card(Rank.TWO, Suit.CLUBS))
    assert trick.led_suit() is Suit.CLUBS
    with pytest.raises(TrickError):
        trick.add_play("p0", Card(Rank.THREE, Suit.CLUBS))
    with pytest.raises(TrickError):
        resolve_trick(trick)

    full = full_trick(*[Card(Rank.TWO, Suit.CLUBS)] * 4)
    with pytest.raises(TrickError):
        full.add_play("p9", Card(Rank.ACE, Suit.CLUBS))
