"""Test fixtures for mynotes."""

from tests.fixtures.notes import (
    BASE_TIME,
    FrozenClock,
    NotesStack,
    SteppingClock,
    apply_changes,
    make_note,
    stored_note,
)

__all__ = [
    "BASE_TIME",
    "FrozenClock",
    "NotesStack",
    "SteppingClock",
    "apply_changes",
    "make_note",
    "stored_note",
]
