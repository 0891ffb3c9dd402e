"""Core engine package for the Hearts table."""

__all__ = [
    "cards",
    "deck",
    "turns",
    "errors",
    "mechanics",
    "trick",
    "scoring",
    "state",
    "events",
    "scheduler",
    "rules_schema",
    "game",
    "service",
]
