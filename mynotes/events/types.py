"""Event dataclasses published by the notes core."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any, Literal

if TYPE_CHECKING:
    from mynotes.notes.types import Note


@dataclass(frozen=True)
class Event:
    """Base event class."""

    timestamp: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True)
class NoteEvent(Event):
    """Base class for note lifecycle events."""

    note_id: int = 0
    note: "Note | None" = None


@dataclass(frozen=True)
class NoteCreated(NoteEvent):
    """A note was inserted (or restored by undo)."""


@dataclass(frozen=True)
class NoteUpdated(NoteEvent):
    """A note's fields changed."""


@dataclass(frozen=True)
class NoteDeleted(NoteEvent):
    """A note was removed."""


@dataclass(frozen=True)
class HistoryEvent(Event):
    """Undo/redo stack movement."""

    action: Literal["execute", "undo", "redo"] = "execute"
    command: str = ""
    can_undo: bool = False
    can_redo: bool = False


@dataclass(frozen=True)
class ErrorEvent(Event):
    """Error notification event."""

    error_type: str = ""  # Category: "validation", "not_found", "storage"
    message: str = ""
    severity: Literal["warning", "error", "critical"] = "error"
    context: dict[str, Any] = field(default_factory=dict)
