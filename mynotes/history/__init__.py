"""Undoable note commands and their history."""

from mynotes.history.commands import (
    AddNoteCommand,
    DeleteNoteCommand,
    EditNoteCommand,
    NoteCommand,
)
from mynotes.history.invoker import CommandHistory

__all__ = [
    "NoteCommand",
    "AddNoteCommand",
    "EditNoteCommand",
    "DeleteNoteCommand",
    "CommandHistory",
]
