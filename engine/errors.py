"""Rejections raised by the Hearts engine.

Every error here is recoverable: the engine raises it before mutating any
state, so the table keeps waiting on the same seat.
"""

from __future__ import annotations

from typing import Optional

from .cards import Suit


class GameError(RuntimeError):
    """Base class for engine rejections. ``code`` is stable across releases."""

    code = "GameError"


class PlayRejected(GameError):
    """A proposed card play is not legal right now."""

    code = "PlayRejected"


class NotYourTurn(PlayRejected):
    code = "NotYourTurn"

    def __init__(self, message: str = "Not your turn") -> None:
        super().__init__(message)


class GameNotInProgress(NotYourTurn):
    """Play submitted while no round is being played."""

    def __init__(self, message: str = "Game not in progress") -> None:
        super().__init__(message)


class CardNotInHand(PlayRejected):
    code = "CardNotInHand"

    def __init__(self, message: str = "Card not found") -> None:
        super().__init__(message)


class MustFollowSuit(PlayRejected):
    code = "MustFollowSuit"

    def __init__(self, suit: Suit, message: Optional[str] = None) -> None:
        self.suit = suit
        super().__init__(message or f"You must follow {suit}")


class RoomFull(GameError):
    code = "RoomFull"

    def __init__(self, message: str = "Room full") -> None:
        super().__init__(message)


class AlreadySeated(GameError):
    code = "AlreadySeated"

    def __init__(self, message: str = "Already seated") -> None:
        super().__init__(message)
