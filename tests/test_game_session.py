from random import Random

import pytest

from engine.cards import Card, Rank, Suit
from engine.errors import CardNotInHand, GameNotInProgress, MustFollowSuit, NotYourTurn, RoomFull
from engine.events import CardPlayed, HandDealt, Message, PlayerListChanged, RoundEnded, SessionReset, StateChanged, TrickResolved
from engine.game import GameSession, TablePhase
from engine.rules_schema import RuleSet
from engine.scheduler import ManualScheduler
from engine.scoring import calculate_points


def keep_order():
    return 0.9999999


def make_session(copies: int = 2, rng=None):
    scheduler = ManualScheduler()
    session = GameSession(
        rules=RuleSet(deck_copies=copies, round_restart_delay=10),
        rng=rng or Random(42).random,
        scheduler=scheduler,
    )
    events = []
    session.events.subscribe(events.append)
    return session, scheduler, events


def seat_four(session):
    return [session.join_player(name, player_id=f"id-{name}") for name in ("Ann", "Bob", "Cid", "Dee")]


def play_one(session):
    player_id = session.current_turn_player_id
    card = session.current_round.available_moves(player_id)[0]
    session.play_card(player_id, card)
    return player_id, card


def autoplay_round(session):
    plays = []
    while session.game_in_progress:
        plays.append(play_one(session))
    return plays


def test_fourth_join_deals_the_canonical_double_deck():
    session, _, events = make_session()
    ids = seat_four(session)

    assert session.game_in_progress
    assert session.phase is TablePhase.TRICK_PLAY
    assert session.current_turn_player_id == ids[0]
    assert session.current_round.hand_size == 26
    assert [len(player.hand) for player in session.players] == [26] * 4
    dealt = [event for event in events if isinstance(event, HandDealt)]
    assert [event.recipient for event in dealt] == ids
    assert Message(text="Round 1 started!") in events


def test_join_rejected_when_room_full():
    session, _, events = make_session()
    seat_four(session)
    before = len(events)
    with pytest.raises(RoomFull):
        session.join_player("Eve")
    assert len(session.players) == 4
    assert len(events) == before


def test_blank_names_get_seat_placeholder():
    session, _, _ = make_session()
    session.join_player("   ", player_id="x")
    assert session.players[0].name == "Player 1"


def test_play_before_game_starts_is_rejected():
    session, _, _ = make_session()
    player_id = session.join_player("Ann")
    with pytest.raises(NotYourTurn) as info:
        session.play_card(player_id, Card(Rank.TWO, Suit.CLUBS))
    assert isinstance(info.value, GameNotInProgress)


def test_rejections_leave_state_untouched():
    session, _, events = make_session()
    ids = seat_four(session)
    first_hand = list(session.players[0].hand)
    before = len(events)

    with pytest.raises(NotYourTurn):
        session.play_card(ids[1], session.players[1].hand[0])

    missing = next(card for card in session.players[1].hand if card not in first_hand)
    with pytest.raises(CardNotInHand):
        session.play_card(ids[0], missing)

    assert session.players[0].hand == first_hand
    assert session.current_turn_player_id == ids[0]
    assert session.trick_in_progress() == ()
    assert len(events) == before


def test_must_follow_suit_through_session():
    session, _, _ = make_session(copies=1, rng=keep_order)
    ids = seat_four(session)
    session.play_card(ids[0], Card(Rank.TWO, Suit.CLUBS))
    seat_one = session.players[1]
    off_suit = next(card for card in seat_one.hand if card.suit is not Suit.CLUBS)
    with pytest.raises(MustFollowSuit):
        session.play_card(ids[1], off_suit)
    assert session.current_turn_player_id == ids[1]


def test_turn_advances_then_jumps_to_trick_winner():
    session, _, events = make_session()
    ids = seat_four(session)

    play_one(session)
    assert session.current_round.turns.current_index == 1
    assert isinstance(events[-3], CardPlayed)
    assert isinstance(events[-2], StateChanged)
    assert isinstance(events[-1], PlayerListChanged)

    play_one(session)
    play_one(session)
    play_one(session)
    resolved = [event for event in events if isinstance(event, TrickResolved)]
    assert len(resolved) == 1
    assert session.current_turn_player_id == resolved[0].winner_id
    assert session.current_round.turns.current_index == ids.index(resolved[0].winner_id)
    assert session.trick_count == 1
    assert session.trick_in_progress() == ()


def test_cards_are_conserved_during_play():
    session, _, _ = make_session()
    seat_four(session)
    current = session.current_round
    for _ in range(30):
        play_one(session)
        assert current.cards_accounted() == current.cards_dealt == 104


def test_single_deck_round_scores_twenty_five():
    session, scheduler, events = make_session(copies=1, rng=keep_order)
    ids = seat_four(session)

    plays = autoplay_round(session)

    assert plays[0] == (ids[0], Card(Rank.TWO, Suit.CLUBS))
    assert len(plays) == 52
    assert len([event for event in events if isinstance(event, TrickResolved)]) == 13
    summary = session.round_history[0]
    assert summary.total_points() == 25
    assert sum(player.cumulative_score for player in session.players) == 25
    assert all(player.round_score == 0 for player in session.players)
    assert session.phase is TablePhase.ROUND_END
    assert not session.game_in_progress
    assert session.round_number == 2
    assert scheduler.pending() == 1


def test_round_ends_exactly_on_last_trick():
    session, _, events = make_session()
    seat_four(session)
    current = session.current_round
    for _ in range(26 * 4 - 1):
        play_one(session)
    assert session.game_in_progress
    assert current.trick_count == 25
    assert not any(isinstance(event, RoundEnded) for event in events)

    play_one(session)
    ended = [event for event in events if isinstance(event, RoundEnded)]
    assert len(ended) == 1
    assert ended[0].round_number == 1
    awarded = sum(event.points for event in events if isinstance(event, TrickResolved))
    assert awarded == calculate_points(current.taken_cards) == 50
    assert sum(entry.round_points for entry in ended[0].per_player) == 50


def test_next_round_starts_after_delay():
    session, scheduler, events = make_session()
    seat_four(session)
    autoplay_round(session)
    after_first = {player.id: player.cumulative_score for player in session.players}

    assert scheduler.advance(9.5) == 0
    assert not session.game_in_progress

    assert scheduler.advance(0.5) == 1
    assert session.game_in_progress
    assert session.round_number == 2
    assert session.trick_count == 0
    assert session.current_round.turns.current_index == 0
    assert [len(player.hand) for player in session.players] == [26] * 4
    assert Message(text="Starting Round 2...") in events

    autoplay_round(session)
    second = session.round_history[1]
    for result in second.results:
        assert result.cumulative_score == after_first[result.player_id] + result.round_points
    assert session.round_number == 3


def test_removal_resets_everything():
    session, scheduler, events = make_session()
    ids = seat_four(session)
    play_one(session)

    session.remove_player(ids[2])

    assert isinstance(events[-1], SessionReset)
    assert session.players == []
    assert session.current_round is None
    assert not session.game_in_progress
    assert session.phase is TablePhase.WAITING_FOR_PLAYERS
    assert session.round_number == 1
    assert session.current_turn_player_id is None


def test_pending_restart_is_dropped_after_reset():
    session, scheduler, _ = make_session()
    ids = seat_four(session)
    autoplay_round(session)
    assert scheduler.pending() == 1

    session.remove_player(ids[0])
    assert scheduler.pending() == 0
    assert scheduler.advance(10) == 0
    assert session.players == []
    assert not session.game_in_progress


def test_stale_restart_does_not_touch_new_table():
    session, scheduler, _ = make_session()
    ids = seat_four(session)
    autoplay_round(session)
    stale = session._pending_restart

    session.remove_player(ids[0])
    seat_four(session)
    play_one(session)
    snapshot = (session.round_number, session.trick_in_progress(), session.current_turn_player_id)

    # Fire the old callback even though reset cancelled it.
    stale.cancelled = False
    scheduler.advance(10)
    assert (session.round_number, session.trick_in_progress(), session.current_turn_player_id) == snapshot
