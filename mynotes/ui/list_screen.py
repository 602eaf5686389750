"""Note list screen controller."""

import asyncio
import logging
from typing import TYPE_CHECKING, Callable

from mynotes.errors import NotesError, NotFoundError, StorageError
from mynotes.events import ErrorEvent
from mynotes.notes.types import Note
from mynotes.presentation.adapter import NotesAdapter
from mynotes.presentation.sorting import create_sorter

if TYPE_CHECKING:
    from mynotes.events import EventBus
    from mynotes.history import CommandHistory
    from mynotes.notes.repository import NoteRepository
    from mynotes.worker import BackgroundWorker

logger = logging.getLogger(__name__)

EditorOpener = Callable[[Note | None], object]


class NoteListController:
    """
    Drives the list of notes.

    Loads notes through the background worker, filters them as the user
    types (debounced), switches sort order, and forwards undo/redo to the
    command history. A stale reference (NotFoundError) reloads the list;
    a storage failure is shown as a transient message.
    """

    def __init__(
        self,
        repository: "NoteRepository",
        history: "CommandHistory",
        worker: "BackgroundWorker",
        event_bus: "EventBus",
        adapter: NotesAdapter | None = None,
        search_debounce_ms: int = 500,
        open_editor: EditorOpener | None = None,
    ) -> None:
        self._repo = repository
        self._history = history
        self._worker = worker
        self._event_bus = event_bus
        self.adapter = adapter or NotesAdapter()
        self._debounce_seconds = search_debounce_ms / 1000
        self._open_editor = open_editor
        self._pending_search: asyncio.TimerHandle | None = None
        self._is_open = False

        self.loading = False
        self.message: str | None = None

        self.adapter.set_click_listener(self.on_note_clicked)

    @property
    def sort_order(self) -> str:
        return self.adapter.sorter.name

    @property
    def can_undo(self) -> bool:
        return self._history.can_undo

    @property
    def can_redo(self) -> bool:
        return self._history.can_redo

    async def open(self) -> None:
        """Start following note changes and load the list."""
        if not self._is_open:
            self.adapter.attach(self._event_bus)
            self._event_bus.subscribe(ErrorEvent, self.on_error_event)
            self._is_open = True
        self.refresh()

    async def close(self) -> None:
        """Stop following note changes."""
        self._cancel_pending_search()
        if self._is_open:
            self.adapter.detach(self._event_bus)
            self._event_bus.unsubscribe(ErrorEvent, self.on_error_event)
            self._is_open = False

    def refresh(self) -> asyncio.Task:
        """Reload every note from the store."""
        self.loading = True
        return self._worker.submit(
            self._repo.list_notes,
            on_success=self._on_loaded,
            on_error=self._on_load_failed,
            name="list_notes",
        )

    def _on_loaded(self, notes: list[Note]) -> None:
        self.loading = False
        self.adapter.set_notes(notes)
        logger.debug("Loaded %d notes", len(notes))

    def _on_load_failed(self, error: Exception) -> None:
        self.loading = False
        self._on_error(error)

    # --- Search ---

    def update_search_query(self, query: str) -> None:
        """Record a keystroke; the filter runs once typing pauses."""
        self._cancel_pending_search()
        if self._debounce_seconds <= 0:
            self.apply_search(query)
            return
        loop = asyncio.get_running_loop()
        self._pending_search = loop.call_later(
            self._debounce_seconds, self.apply_search, query
        )

    def apply_search(self, query: str) -> None:
        """Filter the list now."""
        self._pending_search = None
        self.adapter.set_query(query)

    def _cancel_pending_search(self) -> None:
        if self._pending_search is not None:
            self._pending_search.cancel()
            self._pending_search = None

    # --- Sorting ---

    def set_sort_order(self, name: str) -> None:
        """Switch to a registered sort order."""
        self.adapter.set_sorter(create_sorter(name))
        self.message = f"{name.title()} sort"

    # --- Undo / redo ---

    def undo(self) -> asyncio.Task:
        return self._worker.submit(
            self._history.undo, on_error=self._on_error, name="undo"
        )

    def redo(self) -> asyncio.Task:
        return self._worker.submit(
            self._history.redo, on_error=self._on_error, name="redo"
        )

    # --- Navigation ---

    def open_new_note(self) -> object:
        """Open the editor for a blank note."""
        if self._open_editor is None:
            return None
        return self._open_editor(None)

    def on_note_clicked(self, note: Note, position: int) -> object:
        """Open the editor for the clicked note."""
        logger.debug("Clicked note %s at row %d", note.id, position)
        if self._open_editor is None:
            return None
        return self._open_editor(note)

    # --- Errors ---

    def on_error_event(self, event: ErrorEvent) -> None:
        """Reload when any screen hit a note that no longer exists."""
        if event.error_type == "not_found" and not self.loading:
            self.refresh()

    def dismiss_message(self) -> None:
        self.message = None

    def _on_error(self, error: Exception) -> None:
        if isinstance(error, NotFoundError):
            self.message = "That note no longer exists"
            self.refresh()
        elif isinstance(error, StorageError):
            self.message = f"Could not access notes: {error}"
        elif isinstance(error, NotesError):
            self.message = str(error)
        else:
            logger.error("Unexpected list screen error: %s", error)
            self.message = "Something went wrong"
