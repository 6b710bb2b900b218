"""Utility modules for astrograph."""

from .logging import AstrographLogger, EventType, JournalEntry, generate_session_id

__all__ = [
    "AstrographLogger",
    "EventType",
    "JournalEntry",
    "generate_session_id",
]
