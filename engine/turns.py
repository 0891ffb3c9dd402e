"""Turn order tracking."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class TurnSequencer:
    seat_count: int
    current_index: int = 0

    def __post_init__(self) -> None:
        if self.seat_count <= 0:
            raise ValueError("TurnSequencer needs at least one seat.")
        self._check(self.current_index)

    def advance(self) -> int:
        self.current_index = (self.current_index + 1) % self.seat_count
        return self.current_index

    def jump_to(self, seat_index: int) -> int:
        """Hand the turn to ``seat_index`` directly, e.g. to a trick winner."""
        self._check(seat_index)
        self.current_index = seat_index
        return self.current_index

    def reset(self) -> None:
        self.current_index = 0

    def _check(self, seat_index: int) -> None:
        if not 0 <= seat_index < self.seat_count:
            raise ValueError(f"Seat {seat_index} is outside 0..{self.seat_count - 1}.")
