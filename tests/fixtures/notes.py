"""Note factories and helpers shared by the tests."""

from datetime import datetime, timedelta, timezone
from pathlib import Path

from mynotes.events import EventBus
from mynotes.history import CommandHistory
from mynotes.notes.repository import NoteRepository
from mynotes.notes.types import Note
from mynotes.persistence.database import Database
from mynotes.persistence.store import NoteStore
from mynotes.presentation.adapter import ListChange
from mynotes.worker import BackgroundWorker

BASE_TIME = datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc)


def make_note(
    title: str = "Groceries",
    body: str = "milk, eggs",
    **fields,
) -> Note:
    """Create an unsaved note."""
    return Note(title=title, body=body, **fields)


def stored_note(
    note_id: int,
    title: str = "Note",
    minutes: int = 0,
    **fields,
) -> Note:
    """Create a note that looks like it came out of the store."""
    stamp = BASE_TIME + timedelta(minutes=minutes)
    return Note(
        id=note_id,
        title=title,
        body=fields.pop("body", f"body of {title}"),
        created_at=fields.pop("created_at", stamp),
        updated_at=fields.pop("updated_at", stamp),
        **fields,
    )


class SteppingClock:
    """Deterministic clock; advances by ``step`` on every call."""

    def __init__(self, start: datetime = BASE_TIME, step: timedelta = timedelta(seconds=1)) -> None:
        self.now = start
        self.step = step

    def __call__(self) -> datetime:
        current = self.now
        self.now = self.now + self.step
        return current


class FrozenClock:
    """Clock that never moves."""

    def __init__(self, at: datetime = BASE_TIME) -> None:
        self.at = at

    def __call__(self) -> datetime:
        return self.at


def apply_changes(rows: list[Note], changes: list[ListChange]) -> list[Note]:
    """Replay adapter notifications on a copy of ``rows``."""
    result = list(rows)
    for change in changes:
        if change.kind == "removed":
            result.pop(change.position)
        elif change.kind == "inserted":
            result.insert(change.position, change.note)
        elif change.kind == "moved":
            result.insert(change.to_position, result.pop(change.position))
        elif change.kind == "changed":
            result[change.position] = change.note
    return result


class NotesStack:
    """Storage, bus, repository, history and worker over a temporary database."""

    def __init__(self, path: Path, clock=None) -> None:
        self.db = Database(path)
        self.store = NoteStore(self.db, clock or SteppingClock())
        self.event_bus = EventBus()
        self.repo = NoteRepository(self.store, self.event_bus)
        self.history = CommandHistory(self.event_bus, max_depth=10)
        self.worker = BackgroundWorker()

    async def start(self) -> "NotesStack":
        await self.db.connect()
        await self.event_bus.start()
        return self

    async def stop(self) -> None:
        await self.worker.stop()
        await self.event_bus.stop()
        await self.db.disconnect()

    async def settle(self) -> None:
        """Let submitted work and the resulting notifications finish."""
        while True:
            await self.worker.drain()
            await self.event_bus.wait_empty()
            if self.worker.pending == 0:
                break
