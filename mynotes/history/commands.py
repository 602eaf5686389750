"""Undoable note commands."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from mynotes.notes.types import Note

if TYPE_CHECKING:
    from mynotes.notes.repository import NoteRepository


class NoteCommand(ABC):
    """A note mutation that can be reversed."""

    def __init__(self, repository: "NoteRepository") -> None:
        self._repo = repository

    @property
    @abstractmethod
    def name(self) -> str:
        """Short label used in logs and history events."""
        ...

    @abstractmethod
    async def execute(self) -> Note:
        """Apply the mutation and return the affected note."""
        ...

    @abstractmethod
    async def undo(self) -> Note:
        """Reverse the mutation and return the affected note."""
        ...


class AddNoteCommand(NoteCommand):
    """Insert a note; undo deletes it again."""

    def __init__(self, repository: "NoteRepository", note: Note) -> None:
        super().__init__(repository)
        self._note = note
        self._created: Note | None = None

    @property
    def name(self) -> str:
        return "add"

    @property
    def created(self) -> Note | None:
        """The stored note, once executed."""
        return self._created

    async def execute(self) -> Note:
        if self._created is None:
            self._created = await self._repo.create(self._note)
        else:
            # Redo keeps the id handed out the first time
            self._created = await self._repo.restore(self._created)
        return self._created

    async def undo(self) -> Note:
        if self._created is None:
            raise RuntimeError("Cannot undo a command that never ran")
        return await self._repo.delete(self._created.id)


class EditNoteCommand(NoteCommand):
    """Overwrite a note's fields; undo writes the previous values back."""

    def __init__(self, repository: "NoteRepository", old_note: Note, new_note: Note) -> None:
        if old_note.id is None or old_note.id != new_note.id:
            raise ValueError("Edit needs two versions of the same stored note")
        super().__init__(repository)
        self._old = old_note
        self._new = new_note

    @property
    def name(self) -> str:
        return "edit"

    async def execute(self) -> Note:
        return await self._repo.update(self._new)

    async def undo(self) -> Note:
        return await self._repo.update(self._old)


class DeleteNoteCommand(NoteCommand):
    """Delete a note; undo restores it under the same id."""

    def __init__(self, repository: "NoteRepository", note_id: int) -> None:
        super().__init__(repository)
        self._note_id = note_id
        self._removed: Note | None = None

    @property
    def name(self) -> str:
        return "delete"

    async def execute(self) -> Note:
        self._removed = await self._repo.delete(self._note_id)
        return self._removed

    async def undo(self) -> Note:
        if self._removed is None:
            raise RuntimeError("Cannot undo a command that never ran")
        return await self._repo.restore(self._removed)
