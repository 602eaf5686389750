"""Event system for change notifications."""

from mynotes.events.bus import EventBus
from mynotes.events.types import (
    ErrorEvent,
    Event,
    HistoryEvent,
    NoteCreated,
    NoteDeleted,
    NoteEvent,
    NoteUpdated,
)

__all__ = [
    "Event",
    "NoteEvent",
    "NoteCreated",
    "NoteUpdated",
    "NoteDeleted",
    "HistoryEvent",
    "ErrorEvent",
    "EventBus",
]
