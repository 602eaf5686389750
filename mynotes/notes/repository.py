"""Validating mediator between the store and the screens."""

import logging
import re
from typing import TYPE_CHECKING

from pydantic import HttpUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from mynotes.errors import NotesError, NotFoundError, ValidationError
from mynotes.events import ErrorEvent, EventBus, NoteCreated, NoteDeleted, NoteUpdated
from mynotes.monitor.logger import get_audit_logger
from mynotes.notes.types import Note

if TYPE_CHECKING:
    from mynotes.persistence.store import NoteStore

logger = logging.getLogger(__name__)
audit_logger = get_audit_logger()

_COLOR_PATTERN = re.compile(r"^#[0-9A-Fa-f]{6}$")
_URL_ADAPTER = TypeAdapter(HttpUrl)


def validate_note(note: Note) -> Note:
    """
    Check user input and return the note with normalized optional fields.

    Args:
        note: Note as entered by the user

    Returns:
        The note with colour upper-cased and blank optional fields cleared

    Raises:
        ValidationError: On the first offending field
    """
    if not note.title.strip() and not note.body.strip():
        raise ValidationError("Note needs a title or some text", field="title", code="empty")

    color = (note.color or "").strip().upper()
    if not _COLOR_PATTERN.match(color):
        raise ValidationError(f"Invalid color: {note.color!r}", field="color")

    web_link = (note.web_link or "").strip() or None
    if web_link is not None:
        try:
            _URL_ADAPTER.validate_python(web_link)
        except PydanticValidationError:
            raise ValidationError("Enter a valid URL", field="web_link") from None

    image_path = (note.image_path or "").strip() or None

    return note.with_changes(color=color, web_link=web_link, image_path=image_path)


class NoteRepository:
    """Create/read/update/delete notes with validation and change events."""

    def __init__(self, store: "NoteStore", event_bus: EventBus) -> None:
        self._store = store
        self._event_bus = event_bus

    async def create(self, note: Note) -> Note:
        """Validate and insert a new note."""
        note = validate_note(note)
        stored = await self._guard(self._store.insert(note), "create")
        await self._event_bus.publish(NoteCreated(note_id=stored.id, note=stored))
        audit_logger.info("created", extra={"note_id": stored.id, "title": stored.title})
        logger.info("Created note %d", stored.id)
        return stored

    async def update(self, note: Note) -> Note:
        """Validate and overwrite an existing note."""
        note = validate_note(note)
        stored = await self._guard(self._store.update(note), "update", note.id)
        await self._event_bus.publish(NoteUpdated(note_id=stored.id, note=stored))
        audit_logger.info("updated", extra={"note_id": stored.id, "title": stored.title})
        logger.info("Updated note %d", stored.id)
        return stored

    async def delete(self, note_id: int) -> Note:
        """Delete a note, returning its last stored state."""
        removed = await self._guard(self._store.delete(note_id), "delete", note_id)
        await self._event_bus.publish(NoteDeleted(note_id=note_id, note=removed))
        audit_logger.info("deleted", extra={"note_id": note_id, "title": removed.title})
        logger.info("Deleted note %d", note_id)
        return removed

    async def restore(self, note: Note) -> Note:
        """Bring back a deleted note with its original id."""
        stored = await self._guard(self._store.restore(note), "restore", note.id)
        await self._event_bus.publish(NoteCreated(note_id=stored.id, note=stored))
        audit_logger.info("restored", extra={"note_id": stored.id, "title": stored.title})
        logger.info("Restored note %d", stored.id)
        return stored

    async def get(self, note_id: int) -> Note:
        """Get a note by id."""
        return await self._guard(self._store.get(note_id), "get", note_id)

    async def list_notes(self) -> list[Note]:
        """Get all notes by recency."""
        return await self._guard(self._store.list(), "list")

    async def search(self, query: str) -> list[Note]:
        """Get notes matching a text query."""
        return await self._guard(self._store.search(query), "search")

    async def count(self) -> int:
        """Number of stored notes."""
        return await self._guard(self._store.count(), "count")

    async def _guard(self, operation, action: str, note_id: int | None = None):
        """Await a store call, reporting failures on the bus before re-raising."""
        try:
            return await operation
        except NotesError as e:
            severity = "warning" if isinstance(e, NotFoundError) else "error"
            logger.log(
                logging.WARNING if severity == "warning" else logging.ERROR,
                "Note %s failed: %s",
                action,
                e,
            )
            await self._event_bus.publish(ErrorEvent(
                error_type=e.code or "storage",
                message=str(e),
                severity=severity,
                context={"action": action, "note_id": note_id},
            ))
            raise
