"""Note entity, palette and validating repository."""

from mynotes.notes.palette import DEFAULT_COLOR, NoteColor, resolve_color
from mynotes.notes.repository import NoteRepository, validate_note
from mynotes.notes.types import Note

__all__ = [
    "DEFAULT_COLOR",
    "Note",
    "NoteColor",
    "NoteRepository",
    "resolve_color",
    "validate_note",
]
