"""Sort orders for the note list.

Sort orders are registered by name so the list screen can switch between
them at runtime and the configured default can be looked up.

To add a new sort order:
1. Subclass NoteSorter and implement ``name`` and ``key``
2. Register it with ``register_sorter("my_order", MySorter)``
3. Set MYNOTES_LIST_SCREEN__DEFAULT_SORT=my_order to make it the default
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Iterable, Type

from mynotes.notes.palette import resolve_color
from mynotes.notes.types import Note

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def recency_key(note: Note) -> tuple[float, int]:
    """Ascending key that puts the most recently changed note first."""
    updated = note.updated_at or _EPOCH
    return (-updated.timestamp(), -(note.id or 0))


class NoteSorter(ABC):
    """A total order over notes."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Registry name."""
        ...

    @abstractmethod
    def key(self, note: Note) -> Any:
        """Sort key; lower sorts first."""
        ...

    def sort(self, notes: Iterable[Note]) -> list[Note]:
        """Return a new sorted list."""
        return sorted(notes, key=self.key)


class DateSorter(NoteSorter):
    """Most recently changed first."""

    @property
    def name(self) -> str:
        return "date"

    def key(self, note: Note) -> Any:
        return recency_key(note)


class TitleSorter(NoteSorter):
    """Alphabetical by title, ignoring case."""

    @property
    def name(self) -> str:
        return "title"

    def key(self, note: Note) -> Any:
        return (note.title.strip().casefold(), recency_key(note))


class ColorSorter(NoteSorter):
    """Grouped by palette colour, in palette order."""

    @property
    def name(self) -> str:
        return "color"

    def key(self, note: Note) -> Any:
        return (resolve_color(note.color).rank, recency_key(note))


# Registry mapping sort names to their classes
SORTER_REGISTRY: dict[str, Type[NoteSorter]] = {
    "date": DateSorter,
    "title": TitleSorter,
    "color": ColorSorter,
}


def register_sorter(name: str, factory: Type[NoteSorter]) -> None:
    """
    Register a sort order.

    Args:
        name: Unique sort name (used in config and on the command line)
        factory: NoteSorter subclass

    Raises:
        ValueError: If name is already registered
        TypeError: If factory is not a NoteSorter subclass
    """
    if name in SORTER_REGISTRY:
        raise ValueError(f"Sort order '{name}' is already registered")

    if not (isinstance(factory, type) and issubclass(factory, NoteSorter)):
        raise TypeError("Sort order factory must be a subclass of NoteSorter")

    SORTER_REGISTRY[name] = factory


def get_available_sorters() -> list[str]:
    """Get registered sort names, alphabetically."""
    return sorted(SORTER_REGISTRY.keys())


def create_sorter(name: str) -> NoteSorter:
    """
    Create a sort order by name.

    Raises:
        ValueError: If the name is not registered
    """
    if name not in SORTER_REGISTRY:
        available = get_available_sorters()
        raise ValueError(
            f"Sort order '{name}' not found. "
            f"Available sort orders: {available}"
        )

    return SORTER_REGISTRY[name]()
