"""High-level table orchestration for Hearts.

``GameSession`` owns the only mutable state of a table: the seated players,
the round being played and the round counter. Every public operation runs
under one re-entrant lock, so joins, plays, removals and the delayed round
restart are applied one at a time in arrival order.
"""

from __future__ import annotations

import logging
import random
import uuid
from dataclasses import dataclass, field
from enum import Enum, auto
from threading import RLock
from typing import List, Optional, Tuple

from .cards import Card, card_label
from .deck import UniformSource, build_deck, deal_hands, shuffle_deck
from .errors import AlreadySeated, GameNotInProgress, PlayRejected, RoomFull
from .events import (
    CardPlayed,
    EventBus,
    GameEvent,
    HandDealt,
    Message,
    PlayerListChanged,
    PlayerSnapshot,
    RoundEnded,
    RoundResultEntry,
    SessionReset,
    StateChanged,
    TrickResolved,
)
from .rules_schema import SEAT_COUNT, RuleSet
from .scheduler import ScheduledCall, Scheduler, TimerScheduler
from .scoring import RoundSummary
from .state import Player, Round
from .trick import TrickResult

logger = logging.getLogger(__name__)


class TablePhase(Enum):
    WAITING_FOR_PLAYERS = auto()
    DEALING = auto()
    TRICK_PLAY = auto()
    ROUND_END = auto()


@dataclass
class GameSession:
    """Track seats, rounds and scores for a single four-seat table."""

    rules: RuleSet = field(default_factory=RuleSet)
    rng: Optional[UniformSource] = None
    scheduler: Optional[Scheduler] = None
    events: EventBus = field(default_factory=EventBus)

    players: List[Player] = field(init=False, default_factory=list)
    phase: TablePhase = field(init=False, default=TablePhase.WAITING_FOR_PLAYERS)
    current_round: Optional[Round] = field(init=False, default=None)
    round_number: int = field(init=False, default=1)
    game_in_progress: bool = field(init=False, default=False)
    round_history: List[RoundSummary] = field(init=False, default_factory=list)
    lock: RLock = field(init=False, repr=False, compare=False, default_factory=RLock)
    _epoch: int = field(init=False, default=0)
    _pending_restart: Optional[ScheduledCall] = field(init=False, default=None)

    def __post_init__(self) -> None:
        if self.rng is None:
            self.rng = random.Random().random
        if self.scheduler is None:
            self.scheduler = TimerScheduler()

    # Operations --------------------------------------------------------

    def join_player(self, name: str, player_id: Optional[str] = None) -> str:
        with self.lock:
            if len(self.players) >= SEAT_COUNT:
                raise RoomFull()
            player_id = player_id or uuid.uuid4().hex
            if self.find_player(player_id) is not None:
                raise AlreadySeated()
            display = (name or "").strip() or f"Player {len(self.players) + 1}"
            self.players.append(Player(id=player_id, name=display))
            logger.info("Player %s (%s) joined seat %d", display, player_id, len(self.players) - 1)
            self._publish_players()
            if len(self.players) == SEAT_COUNT:
                self._start_round()
            return player_id

    def play_card(self, player_id: str, card: Card) -> Optional[TrickResult]:
        """Apply one play. Rejections raise before any state changes."""
        with self.lock:
            if not self.game_in_progress or self.current_round is None:
                logger.debug("Rejected play from %s: no round in progress", player_id)
                raise GameNotInProgress()
            current = self.current_round
            try:
                result = current.play_card(player_id, card)
            except PlayRejected as exc:
                logger.debug("Rejected %s from %s: %s", card_label(card), player_id, exc)
                raise
            logger.debug("%s played %s", player_id, card_label(card))
            self._publish(CardPlayed(player_id=player_id, card=card))
            if result is not None:
                self._on_trick_resolved(result)
            self._publish_state()
            self._publish_players()
            if result is not None and current.is_complete():
                self._end_round()
            return result

    def remove_player(self, player_id: str) -> None:
        """Vacate a seat. The whole table is reset; no seat is ever paused or substituted."""
        with self.lock:
            logger.info("Player %s left; resetting session", player_id)
            self._reset()
            self._publish(SessionReset())

    # Queries -----------------------------------------------------------

    def find_player(self, player_id: str) -> Optional[Player]:
        for player in self.players:
            if player.id == player_id:
                return player
        return None

    @property
    def current_turn_player_id(self) -> Optional[str]:
        if not self.game_in_progress or self.current_round is None:
            return None
        return self.current_round.current_player.id

    @property
    def trick_count(self) -> int:
        return self.current_round.trick_count if self.current_round else 0

    def trick_in_progress(self) -> Tuple[Tuple[str, Card], ...]:
        if self.current_round is None:
            return ()
        return tuple(self.current_round.trick.plays)

    def player_snapshots(self) -> Tuple[PlayerSnapshot, ...]:
        return tuple(
            PlayerSnapshot(
                player_id=player.id,
                name=player.name,
                round_score=player.round_score,
                cumulative_score=player.cumulative_score,
                hand_count=len(player.hand),
            )
            for player in self.players
        )

    # Lifecycle ---------------------------------------------------------

    def _start_round(self) -> None:
        if self.game_in_progress:
            return
        self.phase = TablePhase.DEALING
        deck = shuffle_deck(build_deck(self.rules.deck_copies), self.rng)
        hand_size, hands = deal_hands(deck, len(self.players))
        for player, hand in zip(self.players, hands):
            player.hand = hand
        if self.rules.debug:
            self._check_deal(hand_size, len(deck))

        self.current_round = Round(
            players=self.players,
            hand_size=hand_size,
            heart_points=self.rules.heart_points,
            queen_of_spades_points=self.rules.queen_of_spades_points,
        )
        self.game_in_progress = True
        self.phase = TablePhase.TRICK_PLAY
        logger.info("Round %d started with %d cards per hand", self.round_number, hand_size)

        for player in self.players:
            self._publish(HandDealt(player_id=player.id, cards=tuple(player.hand)))
        self._publish(Message(text=f"Round {self.round_number} started!"))
        self._publish_players()
        self._publish_state()

    def _check_deal(self, hand_size: int, deck_size: int) -> None:
        counts = [len(player.hand) for player in self.players]
        expected = hand_size * len(self.players)
        logger.debug(
            "handSize=%d counts=%s totalDealt=%d expected=%d undealt=%d",
            hand_size, counts, sum(counts), expected, deck_size - sum(counts),
        )
        if sum(counts) != expected or any(count != hand_size for count in counts):
            logger.warning("Dealing mismatch: dealt %s, expected %d each", counts, hand_size)
            self._publish(Message(text=f"Dealing mismatch: dealt {sum(counts)} expected {expected}"))

    def _on_trick_resolved(self, result: TrickResult) -> None:
        winner = self.find_player(result.winner_id)
        assert winner is not None
        logger.debug("Trick won by %s for %d points", winner.name, result.points)
        self._publish(
            TrickResolved(
                winner_id=winner.id,
                winner_name=winner.name,
                cards_taken=result.cards,
                points=result.points,
            )
        )

    def _end_round(self) -> None:
        assert self.current_round is not None
        summary = self.current_round.ledger.close(self.players, self.round_number)
        self.round_history.append(summary)
        logger.info(
            "Round %d ended: %s",
            summary.round_number,
            ", ".join(f"{r.name}={r.round_points}/{r.cumulative_score}" for r in summary.results),
        )
        self._publish(
            RoundEnded(
                round_number=summary.round_number,
                per_player=tuple(
                    RoundResultEntry(
                        player_id=r.player_id,
                        name=r.name,
                        round_points=r.round_points,
                        cumulative_score=r.cumulative_score,
                    )
                    for r in summary.results
                ),
            )
        )
        self.current_round = None
        self.game_in_progress = False
        self.phase = TablePhase.ROUND_END
        self.round_number += 1
        self._publish_players()

        epoch = self._epoch
        self._pending_restart = self.scheduler.schedule(
            self.rules.round_restart_delay, lambda: self._restart_round(epoch)
        )

    def _restart_round(self, epoch: int) -> None:
        with self.lock:
            if epoch != self._epoch or self.game_in_progress or len(self.players) != SEAT_COUNT:
                logger.debug("Ignoring stale round restart (epoch %d, current %d)", epoch, self._epoch)
                return
            self._pending_restart = None
            self._publish(Message(text=f"Starting Round {self.round_number}..."))
            self._start_round()

    def _reset(self) -> None:
        if self._pending_restart is not None:
            self._pending_restart.cancel()
            self._pending_restart = None
        self._epoch += 1
        self.players = []
        self.current_round = None
        self.game_in_progress = False
        self.phase = TablePhase.WAITING_FOR_PLAYERS
        self.round_number = 1
        self.round_history = []

    # Publishing --------------------------------------------------------

    def _publish(self, event: GameEvent) -> None:
        self.events.publish(event)

    def _publish_players(self) -> None:
        self._publish(PlayerListChanged(players=self.player_snapshots()))

    def _publish_state(self) -> None:
        self._publish(
            StateChanged(
                current_turn_player_id=self.current_turn_player_id,
                trick_in_progress=self.trick_in_progress(),
                round_number=self.round_number,
                trick_count=self.trick_count,
            )
        )
