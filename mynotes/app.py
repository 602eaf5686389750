"""Application orchestrator."""

import logging

from mynotes.config import Settings
from mynotes.events import EventBus
from mynotes.history import CommandHistory
from mynotes.monitor.logger import setup_logging
from mynotes.notes.repository import NoteRepository
from mynotes.notes.types import Note
from mynotes.persistence.database import Database
from mynotes.persistence.store import NoteStore
from mynotes.presentation.adapter import NotesAdapter
from mynotes.presentation.sorting import create_sorter
from mynotes.ui.editor_screen import NoteEditorController
from mynotes.ui.list_screen import NoteListController
from mynotes.worker import BackgroundWorker

logger = logging.getLogger(__name__)


class Application:
    """Wires storage, events, history and screens together."""

    def __init__(self, settings: Settings, configure_logging: bool = True) -> None:
        self._settings = settings
        self._configure_logging = configure_logging
        self._running = False

        self._db: Database | None = None
        self._store: NoteStore | None = None
        self._event_bus: EventBus | None = None
        self._repo: NoteRepository | None = None
        self._history: CommandHistory | None = None
        self._worker: BackgroundWorker | None = None
        self._list_screen: NoteListController | None = None

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def repository(self) -> NoteRepository:
        if self._repo is None:
            raise RuntimeError("Application not started")
        return self._repo

    @property
    def event_bus(self) -> EventBus:
        if self._event_bus is None:
            raise RuntimeError("Application not started")
        return self._event_bus

    @property
    def worker(self) -> BackgroundWorker:
        if self._worker is None:
            raise RuntimeError("Application not started")
        return self._worker

    @property
    def history(self) -> CommandHistory:
        if self._history is None:
            raise RuntimeError("Application not started")
        return self._history

    async def start(self) -> None:
        """Open the database and start background services."""
        if self._configure_logging:
            setup_logging(
                self._settings.logging.log_dir,
                self._settings.logging.level,
                self._settings.logging.json_format,
            )
        logger.info("Starting mynotes...")

        self._db = Database(self._settings.database.path)
        await self._db.connect()
        self._store = NoteStore(self._db)

        self._event_bus = EventBus()
        await self._event_bus.start()

        self._repo = NoteRepository(self._store, self._event_bus)
        self._history = CommandHistory(
            self._event_bus, max_depth=self._settings.history.max_depth
        )
        self._worker = BackgroundWorker()

        self._running = True
        logger.info("mynotes started (db=%s)", self._settings.database.path)

    async def stop(self) -> None:
        """Flush pending work and close the database."""
        if self._list_screen is not None:
            await self._list_screen.close()
            self._list_screen = None
        if self._worker is not None:
            await self._worker.drain()
            await self._worker.stop()
        if self._event_bus is not None:
            await self._event_bus.stop()
        if self._db is not None:
            await self._db.disconnect()
        self._running = False
        logger.info("mynotes stopped")

    async def __aenter__(self) -> "Application":
        await self.start()
        return self

    async def __aexit__(self, *args) -> None:
        await self.stop()

    async def settle(self) -> None:
        """Wait until queued operations and their notifications are done."""
        while True:
            await self.worker.drain()
            await self.event_bus.wait_empty()
            # Handlers may have queued more work (e.g. a refresh)
            if self.worker.pending == 0:
                break

    def list_screen(self) -> NoteListController:
        """Get the list screen, creating it on first use."""
        if self._list_screen is None:
            list_config = self._settings.list_screen
            adapter = NotesAdapter(
                sorter=create_sorter(list_config.default_sort),
                pool_size=list_config.row_pool_size,
            )
            self._list_screen = NoteListController(
                self.repository,
                self.history,
                self.worker,
                self.event_bus,
                adapter=adapter,
                search_debounce_ms=list_config.search_debounce_ms,
                open_editor=self.editor,
            )
        return self._list_screen

    def editor(self, note: Note | None = None) -> NoteEditorController:
        """Open an editor for a new note or an existing one."""
        return NoteEditorController(
            self.repository,
            self.history,
            self.worker,
            note=note,
        )

    async def open_editor(self, note_id: int) -> NoteEditorController:
        """Load a stored note and open it in the editor."""
        note = await self.repository.get(note_id)
        return self.editor(note)
