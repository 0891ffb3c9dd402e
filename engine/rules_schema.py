"""Validation schema for Hearts table configuration."""

from __future__ import annotations

import os
from typing import Mapping, Optional

from pydantic import BaseModel, Field, validator

SEAT_COUNT = 4

_TRUTHY = {"1", "true", "yes", "on"}


class RuleSet(BaseModel):
    deck_copies: int = Field(2, description="Standard 52-card sets shuffled together; two gives 26 cards per seat.")
    round_restart_delay: float = Field(10.0, ge=0, description="Seconds between the end of a round and the next deal.")
    heart_points: int = Field(1, gt=0, description="Points carried by each heart.")
    queen_of_spades_points: int = Field(12, gt=0, description="Points carried by each Queen of Spades.")
    debug: bool = Field(False, description="Verify dealing counts after every deal.")

    @validator("deck_copies")
    def validate_deck_copies(cls, value: int) -> int:
        if value not in (1, 2):
            raise ValueError("deck_copies must be 1 or 2.")
        return value

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "RuleSet":
        env = os.environ if environ is None else environ
        values: dict[str, object] = {}
        if "HEARTS_DECK_COPIES" in env:
            values["deck_copies"] = env["HEARTS_DECK_COPIES"]
        if "HEARTS_ROUND_DELAY" in env:
            values["round_restart_delay"] = env["HEARTS_ROUND_DELAY"]
        debug = env.get("HEARTS_DEBUG") or env.get("DEBUG_GAME")
        if debug is not None:
            values["debug"] = debug.strip().lower() in _TRUTHY
        return cls(**values)
