"""List presentation: adapter and sort orders."""

from mynotes.presentation.adapter import (
    ListChange,
    NoteRowView,
    NotesAdapter,
    diff_rows,
    format_date,
)
from mynotes.presentation.sorting import (
    NoteSorter,
    create_sorter,
    get_available_sorters,
    register_sorter,
)

__all__ = [
    "ListChange",
    "NoteRowView",
    "NotesAdapter",
    "diff_rows",
    "format_date",
    "NoteSorter",
    "create_sorter",
    "get_available_sorters",
    "register_sorter",
]
