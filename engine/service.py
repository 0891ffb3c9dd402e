"""Convenience service layer between the table engine and a transport."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Union

from .cards import Card, CardParseError, card_label, parse_card
from .errors import GameError, MustFollowSuit
from .events import (
    CardPlayed,
    GameEvent,
    HandDealt,
    Message,
    PlayerListChanged,
    PlayerSnapshot,
    RoundEnded,
    SessionReset,
    StateChanged,
    TrickResolved,
)
from .game import GameSession


@dataclass
class TrickPlayView:
    player_id: str
    card: str


@dataclass
class PlayerView:
    player_id: str
    name: str
    round_score: int
    cumulative_score: int
    hand_count: int


@dataclass
class TableView:
    phase: str
    round_number: int
    trick_count: int
    hand_size: Optional[int]
    current_turn_player_id: Optional[str]
    leading_suit: Optional[str]
    trick: list[TrickPlayView]
    players: list[PlayerView]


@dataclass
class SeatView:
    table: TableView
    hand: list[str]
    legal_moves: list[str]


def _player_payload(snapshot: PlayerSnapshot) -> Dict[str, object]:
    return {
        "id": snapshot.player_id,
        "name": snapshot.name,
        "roundScore": snapshot.round_score,
        "cumulativeScore": snapshot.cumulative_score,
        "handCount": snapshot.hand_count,
    }


def _labels(cards) -> List[str]:
    return [card_label(card) for card in cards]


def event_to_wire(event: GameEvent) -> Dict[str, object]:
    """Encode an engine event as the JSON payload existing clients expect."""
    if isinstance(event, PlayerListChanged):
        return {"type": "playerList", "players": [_player_payload(p) for p in event.players]}
    if isinstance(event, HandDealt):
        return {"type": "yourCards", "cards": _labels(event.cards)}
    if isinstance(event, CardPlayed):
        return {"type": "cardPlayed", "playerId": event.player_id, "card": card_label(event.card)}
    if isinstance(event, TrickResolved):
        return {
            "type": "trickWon",
            "winnerId": event.winner_id,
            "winnerName": event.winner_name,
            "cardsTaken": _labels(event.cards_taken),
            "points": event.points,
        }
    if isinstance(event, RoundEnded):
        return {
            "type": "roundEnd",
            "roundNumber": event.round_number,
            "perPlayer": [
                {
                    "id": entry.player_id,
                    "name": entry.name,
                    "roundPoints": entry.round_points,
                    "cumulativeScore": entry.cumulative_score,
                }
                for entry in event.per_player
            ],
        }
    if isinstance(event, StateChanged):
        return {
            "type": "gameState",
            "currentTurnPlayerId": event.current_turn_player_id,
            "trick": [{"playerId": pid, "card": card_label(card)} for pid, card in event.trick_in_progress],
            "roundNumber": event.round_number,
            "trickCount": event.trick_count,
        }
    if isinstance(event, SessionReset):
        return {"type": "reset"}
    if isinstance(event, Message):
        return {"type": "message", "text": event.text}
    raise TypeError(f"Unknown event type: {type(event).__name__}")


def error_payload(exc: Exception) -> Dict[str, object]:
    if isinstance(exc, CardParseError):
        return {"error": "InvalidCard", "message": str(exc)}
    payload: Dict[str, object] = {"error": getattr(exc, "code", type(exc).__name__), "message": str(exc)}
    if isinstance(exc, MustFollowSuit):
        payload["suit"] = str(exc.suit)
    return payload


class TableService:
    """Facade around GameSession returning request/response payloads."""

    def __init__(self, session: Optional[GameSession] = None) -> None:
        self.session = session or GameSession()

    def subscribe(self, handler: Callable[[GameEvent], None]) -> Callable[[], None]:
        return self.session.events.subscribe(handler)

    # Actions -----------------------------------------------------------

    def join(self, name: str, player_id: Optional[str] = None) -> Dict[str, object]:
        try:
            return {"playerId": self.session.join_player(name, player_id=player_id)}
        except GameError as exc:
            return error_payload(exc)

    def play_card(self, player_id: str, card: Union[Card, str]) -> Dict[str, object]:
        try:
            parsed = parse_card(card) if isinstance(card, str) else card
            self.session.play_card(player_id, parsed)
        except (GameError, CardParseError) as exc:
            return error_payload(exc)
        return {"success": True}

    def remove_player(self, player_id: str) -> Dict[str, object]:
        self.session.remove_player(player_id)
        return {"success": True}

    # Views -------------------------------------------------------------

    def table_view(self) -> TableView:
        with self.session.lock:
            return self._table_view()

    def _table_view(self) -> TableView:
        session = self.session
        current = session.current_round
        led = current.trick.led_suit() if current else None
        return TableView(
            phase=session.phase.name.lower(),
            round_number=session.round_number,
            trick_count=session.trick_count,
            hand_size=current.hand_size if current else None,
            current_turn_player_id=session.current_turn_player_id,
            leading_suit=str(led) if led else None,
            trick=[TrickPlayView(player_id=pid, card=card_label(card)) for pid, card in session.trick_in_progress()],
            players=[
                PlayerView(
                    player_id=s.player_id,
                    name=s.name,
                    round_score=s.round_score,
                    cumulative_score=s.cumulative_score,
                    hand_count=s.hand_count,
                )
                for s in session.player_snapshots()
            ],
        )

    def seat_view(self, player_id: str) -> SeatView:
        with self.session.lock:
            player = self.session.find_player(player_id)
            if player is None:
                raise KeyError(player_id)
            legal: List[Card] = []
            current = self.session.current_round
            if current is not None and self.session.current_turn_player_id == player_id:
                legal = current.available_moves(player_id)
            return SeatView(table=self._table_view(), hand=_labels(player.hand), legal_moves=_labels(legal))
