"""Events published by the engine and a small synchronous event bus.

Events are plain frozen dataclasses. ``EventBus.publish`` calls every
subscriber in subscription order on the publishing thread; a failing
subscriber is logged and skipped so observers cannot break the table.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from threading import Lock
from typing import Callable, Dict, List, Optional, Tuple

from .cards import Card

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlayerSnapshot:
    player_id: str
    name: str
    round_score: int
    cumulative_score: int
    hand_count: int


@dataclass(frozen=True)
class GameEvent:
    """Base class. ``recipient`` is set only for events meant for one player."""

    @property
    def recipient(self) -> Optional[str]:
        return None


@dataclass(frozen=True)
class PlayerListChanged(GameEvent):
    players: Tuple[PlayerSnapshot, ...]


@dataclass(frozen=True)
class HandDealt(GameEvent):
    player_id: str
    cards: Tuple[Card, ...]

    @property
    def recipient(self) -> Optional[str]:
        return self.player_id


@dataclass(frozen=True)
class CardPlayed(GameEvent):
    player_id: str
    card: Card


@dataclass(frozen=True)
class TrickResolved(GameEvent):
    winner_id: str
    winner_name: str
    cards_taken: Tuple[Card, ...]
    points: int


@dataclass(frozen=True)
class RoundResultEntry:
    player_id: str
    name: str
    round_points: int
    cumulative_score: int


@dataclass(frozen=True)
class RoundEnded(GameEvent):
    round_number: int
    per_player: Tuple[RoundResultEntry, ...]


@dataclass(frozen=True)
class StateChanged(GameEvent):
    current_turn_player_id: Optional[str]
    trick_in_progress: Tuple[Tuple[str, Card], ...]
    round_number: int
    trick_count: int


@dataclass(frozen=True)
class SessionReset(GameEvent):
    pass


@dataclass(frozen=True)
class Message(GameEvent):
    text: str


EventHandler = Callable[[GameEvent], None]


class EventBus:
    def __init__(self) -> None:
        self._handlers: Dict[int, EventHandler] = {}
        self._next_id = 0
        self._lock = Lock()

    def subscribe(self, handler: EventHandler) -> Callable[[], None]:
        """Register ``handler`` and return a callable that unsubscribes it."""
        with self._lock:
            token = self._next_id
            self._next_id += 1
            self._handlers[token] = handler

        def unsubscribe() -> None:
            with self._lock:
                self._handlers.pop(token, None)

        return unsubscribe

    def publish(self, event: GameEvent) -> None:
        with self._lock:
            handlers: List[EventHandler] = list(self._handlers.values())
        logger.debug("Publishing %s", type(event).__name__)
        for handler in handlers:
            try:
                handler(event)
            except Exception:
                logger.exception("Event handler %r failed on %s", handler, type(event).__name__)
