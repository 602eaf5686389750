"""Create/edit note screen controller."""

import asyncio
import logging
from typing import TYPE_CHECKING, Callable

from pydantic import HttpUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from mynotes.errors import NotFoundError, StorageError, ValidationError
from mynotes.history import AddNoteCommand, DeleteNoteCommand, EditNoteCommand
from mynotes.notes.palette import DEFAULT_COLOR, lookup_color, palette_codes
from mynotes.notes.repository import validate_note
from mynotes.notes.types import EDITABLE_FIELDS, Note
from mynotes.persistence.store import utc_now
from mynotes.presentation.adapter import format_date

if TYPE_CHECKING:
    from mynotes.history import CommandHistory
    from mynotes.notes.repository import NoteRepository
    from mynotes.worker import BackgroundWorker

logger = logging.getLogger(__name__)

FinishedCallback = Callable[[Note | None], object]

_URL_ADAPTER = TypeAdapter(HttpUrl)


class NoteEditorController:
    """
    Form state for creating or editing one note.

    Field errors are kept per field name so the view can show them inline.
    Saving and deleting go through the command history, so both can be
    undone from the list screen.
    """

    def __init__(
        self,
        repository: "NoteRepository",
        history: "CommandHistory",
        worker: "BackgroundWorker",
        note: Note | None = None,
        on_finished: FinishedCallback | None = None,
    ) -> None:
        self._repo = repository
        self._history = history
        self._worker = worker
        self._note = note
        self._on_finished = on_finished
        self._opened_at = utc_now()

        self.fields: dict[str, object] = (
            note.editable_values()
            if note is not None
            else {
                "title": "",
                "subtitle": "",
                "body": "",
                "color": DEFAULT_COLOR,
                "image_path": None,
                "web_link": None,
            }
        )
        self.errors: dict[str, str] = {}
        self.message: str | None = None
        self.busy = False
        self.finished = False

    @property
    def is_new(self) -> bool:
        return self._note is None

    @property
    def note(self) -> Note | None:
        """The stored note being edited, if any."""
        return self._note

    @property
    def date_text(self) -> str:
        if self._note is not None:
            return format_date(self._note.updated_at)
        return format_date(self._opened_at)

    @property
    def color_options(self) -> list[str]:
        return palette_codes()

    # --- Field editing ---

    def set_field(self, name: str, value: object) -> None:
        """Update one form field and clear its error."""
        if name not in EDITABLE_FIELDS:
            raise KeyError(name)
        self.fields[name] = value
        self.errors.pop(name, None)

    def select_color(self, code: str) -> None:
        """Pick a palette colour."""
        color = lookup_color(code)
        if color is None:
            raise ValueError(f"{code!r} is not a palette colour")
        self.set_field("color", color.value)

    def attach_image(self, path: str) -> None:
        self.set_field("image_path", path)

    def remove_image(self) -> None:
        self.set_field("image_path", None)

    def add_web_link(self, url: str) -> bool:
        """Set the web link if it looks like a URL; otherwise record an error."""
        url = url.strip()
        if not url:
            self.errors["web_link"] = "Enter URL"
            return False
        try:
            _URL_ADAPTER.validate_python(url)
        except PydanticValidationError:
            self.errors["web_link"] = "Enter valid URL"
            return False
        self.set_field("web_link", url)
        return True

    def remove_web_link(self) -> None:
        self.set_field("web_link", None)

    def build_note(self) -> Note:
        """Note as currently entered."""
        base = self._note or Note()
        return base.with_changes(**self.fields)

    # --- Actions ---

    def save(self) -> asyncio.Task | None:
        """
        Validate and store the note.

        Returns:
            The task doing the write, or None if nothing is written
            (validation failed, an existing note is unchanged, or a
            write is already in flight)
        """
        if self.busy:
            return None
        self.errors.clear()
        self.message = None
        try:
            candidate = validate_note(self.build_note())
        except ValidationError as e:
            self.errors[e.field] = str(e)
            return None

        if self._note is None:
            command = AddNoteCommand(self._repo, candidate)
        elif candidate.editable_values() == self._note.editable_values():
            self._finish(self._note)
            return None
        else:
            command = EditNoteCommand(self._repo, self._note, candidate)

        self.busy = True
        return self._worker.submit(
            lambda: self._history.execute(command),
            on_success=self._finish,
            on_error=self._on_error,
            name=f"save_{command.name}",
        )

    def delete(self) -> asyncio.Task | None:
        """Delete the note being edited."""
        if self._note is None or self.busy:
            return None
        command = DeleteNoteCommand(self._repo, self._note.id)
        self.busy = True
        return self._worker.submit(
            lambda: self._history.execute(command),
            on_success=lambda _removed: self._finish(None),
            on_error=self._on_error,
            name="delete",
        )

    def _finish(self, note: Note | None) -> None:
        self.busy = False
        self._note = note
        self.finished = True
        if self._on_finished is not None:
            self._on_finished(note)

    def _on_error(self, error: Exception) -> None:
        self.busy = False
        if isinstance(error, ValidationError):
            self.errors[error.field] = str(error)
        elif isinstance(error, NotFoundError):
            self.message = "This note no longer exists"
        elif isinstance(error, StorageError):
            self.message = f"Could not save: {error}"
        else:
            logger.error("Unexpected editor error: %s", error)
            self.message = "Something went wrong"
