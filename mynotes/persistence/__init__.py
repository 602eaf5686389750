"""Persistence layer for SQLite storage."""

from mynotes.persistence.database import Database
from mynotes.persistence.store import NoteStore, utc_now

__all__ = ["Database", "NoteStore", "utc_now"]
