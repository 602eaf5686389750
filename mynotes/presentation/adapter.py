"""Recycling list adapter for the note list."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterable, Literal

from mynotes.events import EventBus, NoteCreated, NoteDeleted, NoteEvent, NoteUpdated
from mynotes.notes.palette import resolve_color
from mynotes.notes.types import Note
from mynotes.presentation.sorting import DateSorter, NoteSorter

logger = logging.getLogger(__name__)

DATE_FORMAT = "%A, %d %B %Y %H:%M %p"


@dataclass(frozen=True)
class ListChange:
    """One row-level change notification.

    Applying a batch of changes in order to the previous rows yields the
    current rows.
    """

    kind: Literal["inserted", "removed", "changed", "moved"]
    position: int
    note: Note | None = None
    to_position: int | None = None


ChangeObserver = Callable[[list[ListChange]], None]
ClickListener = Callable[[Note, int], None]


def format_date(value: datetime | None) -> str:
    """Render a note timestamp in local time."""
    if value is None:
        return ""
    return value.astimezone().strftime(DATE_FORMAT)


class NoteRowView:
    """Display state for one visible row; instances are recycled."""

    __slots__ = (
        "note_id",
        "position",
        "title",
        "subtitle",
        "subtitle_visible",
        "date_text",
        "color",
        "image_path",
        "image_visible",
        "web_link",
    )

    def __init__(self) -> None:
        self.clear()

    def clear(self) -> None:
        """Drop every reference to the previously bound note."""
        self.note_id: int | None = None
        self.position = -1
        self.title = ""
        self.subtitle = ""
        self.subtitle_visible = False
        self.date_text = ""
        self.color = resolve_color(None).value
        self.image_path: str | None = None
        self.image_visible = False
        self.web_link: str | None = None

    def bind(self, note: Note, position: int) -> None:
        """Fill the row from a note."""
        self.note_id = note.id
        self.position = position
        self.title = note.title
        self.subtitle = note.subtitle
        self.subtitle_visible = bool(note.subtitle.strip())
        self.date_text = format_date(note.updated_at)
        self.color = resolve_color(note.color).value
        self.image_path = note.image_path
        self.image_visible = note.image_path is not None
        self.web_link = note.web_link


def diff_rows(old: list[Note], new: list[Note]) -> list[ListChange]:
    """
    Compute row notifications turning ``old`` into ``new``.

    Rows are matched by note id. Removals come first (highest position
    first), then rows are settled left to right with moves and inserts,
    and a row whose content differs gets a ``changed`` notification.
    """
    changes: list[ListChange] = []
    new_ids = {note.id for note in new}

    working = list(old)
    for position in range(len(working) - 1, -1, -1):
        if working[position].id not in new_ids:
            changes.append(ListChange("removed", position, working.pop(position)))

    for target, note in enumerate(new):
        current = next(
            (i for i in range(target, len(working)) if working[i].id == note.id),
            None,
        )
        if current is None:
            working.insert(target, note)
            changes.append(ListChange("inserted", target, note))
            continue
        if current != target:
            working.insert(target, working.pop(current))
            changes.append(ListChange("moved", current, working[target], to_position=target))
        if working[target] != note:
            working[target] = note
            changes.append(ListChange("changed", target, note))

    return changes


class NotesAdapter:
    """
    Presents notes as an ordered list of rows.

    Keeps a mirror of the stored notes plus the visible rows derived from
    it with the active search filter and sort order. Every change is
    reported to observers as row-level notifications so a view only
    redraws the rows that differ. The adapter holds references to notes
    for display only; it never writes them back.
    """

    def __init__(self, sorter: NoteSorter | None = None, pool_size: int = 16) -> None:
        self._mirror: dict[int, Note] = {}
        self._rows: list[Note] = []
        self._sorter = sorter or DateSorter()
        self._query = ""
        self._observers: list[ChangeObserver] = []
        self._click_listener: ClickListener | None = None
        self._pool: list[NoteRowView] = []
        self._pool_size = pool_size
        self._bound: dict[int, NoteRowView] = {}

    # --- Data ---

    @property
    def item_count(self) -> int:
        """Number of visible rows."""
        return len(self._rows)

    def __len__(self) -> int:
        return len(self._rows)

    @property
    def notes(self) -> tuple[Note, ...]:
        """Visible notes in display order."""
        return tuple(self._rows)

    @property
    def sorter(self) -> NoteSorter:
        return self._sorter

    @property
    def query(self) -> str:
        return self._query

    def get_item(self, position: int) -> Note:
        """Get the note shown at a row."""
        return self._rows[position]

    def position_of(self, note_id: int) -> int | None:
        """Row of a note, or None if it is not visible."""
        for position, note in enumerate(self._rows):
            if note.id == note_id:
                return position
        return None

    def set_notes(self, notes: Iterable[Note]) -> list[ListChange]:
        """Replace the mirror with a fresh listing from the store."""
        self._mirror = {note.id: note for note in notes}
        return self._refresh()

    def set_sorter(self, sorter: NoteSorter) -> list[ListChange]:
        """Switch sort order."""
        self._sorter = sorter
        logger.debug("Sort order: %s", sorter.name)
        return self._refresh()

    def set_query(self, query: str) -> list[ListChange]:
        """Filter rows to notes matching ``query``; blank shows everything."""
        self._query = query.strip()
        return self._refresh()

    # --- Change notifications ---

    def add_observer(self, observer: ChangeObserver) -> None:
        """Register a callable receiving each batch of row changes."""
        self._observers.append(observer)

    def remove_observer(self, observer: ChangeObserver) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    def attach(self, event_bus: EventBus) -> None:
        """Follow note lifecycle events from the bus."""
        event_bus.subscribe(NoteEvent, self.on_note_event)

    def detach(self, event_bus: EventBus) -> None:
        event_bus.unsubscribe(NoteEvent, self.on_note_event)

    def on_note_event(self, event: NoteEvent) -> None:
        """Apply a single create/update/delete to the mirror."""
        if isinstance(event, NoteDeleted):
            if self._mirror.pop(event.note_id, None) is None:
                return
        elif isinstance(event, (NoteCreated, NoteUpdated)) and event.note is not None:
            self._mirror[event.note_id] = event.note
        else:
            return
        self._refresh()

    def _refresh(self) -> list[ListChange]:
        visible = self._sorter.sort(
            note for note in self._mirror.values() if note.matches(self._query)
        )
        changes = diff_rows(self._rows, visible)
        self._rows = visible
        if changes:
            self._rebind(changes)
            for observer in list(self._observers):
                observer(changes)
        return changes

    # --- Row views ---

    def bind(self, position: int) -> NoteRowView:
        """Get a row view filled for ``position``, reusing a recycled one if possible."""
        note = self._rows[position]
        view = self._bound.pop(position, None) or (self._pool.pop() if self._pool else NoteRowView())
        view.bind(note, position)
        self._bound[position] = view
        return view

    def recycle(self, view: NoteRowView) -> None:
        """Return a row view that scrolled out of sight."""
        if self._bound.get(view.position) is view:
            del self._bound[view.position]
        view.clear()
        if len(self._pool) < self._pool_size:
            self._pool.append(view)

    @property
    def pooled_views(self) -> int:
        """Number of idle views waiting for reuse."""
        return len(self._pool)

    def _rebind(self, changes: list[ListChange]) -> None:
        """Keep bound row views pointing at the right notes after a change."""
        if not self._bound:
            return
        if all(change.kind == "changed" for change in changes):
            for change in changes:
                if change.position in self._bound:
                    self._bound[change.position].bind(self._rows[change.position], change.position)
            return
        views = list(self._bound.values())
        self._bound.clear()
        for view in views:
            if view.position < len(self._rows):
                view.bind(self._rows[view.position], view.position)
                self._bound[view.position] = view
            else:
                self.recycle(view)

    # --- Clicks ---

    def set_click_listener(self, listener: ClickListener | None) -> None:
        self._click_listener = listener

    def click(self, position: int) -> None:
        """Deliver a row click to the listener."""
        if self._click_listener is None:
            return
        self._click_listener(self._rows[position], position)
