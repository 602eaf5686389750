"""Note entity."""

from dataclasses import dataclass, replace
from datetime import datetime

from mynotes.notes.palette import DEFAULT_COLOR

# Fields a user can change through the editor
EDITABLE_FIELDS = ("title", "subtitle", "body", "color", "image_path", "web_link")


@dataclass(frozen=True)
class Note:
    """A user-authored text record.

    Instances are immutable; edits produce a new Note via ``with_changes``
    so the id assigned by the store can never drift.
    """

    title: str = ""
    body: str = ""
    subtitle: str = ""
    color: str = DEFAULT_COLOR
    image_path: str | None = None
    web_link: str | None = None
    id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_stored(self) -> bool:
        """Check if the store has assigned an id."""
        return self.id is not None

    def with_changes(self, **changes: object) -> "Note":
        """Return a copy with editable fields replaced."""
        unknown = set(changes) - set(EDITABLE_FIELDS)
        if unknown:
            raise TypeError(f"Not editable: {', '.join(sorted(unknown))}")
        return replace(self, **changes)

    def editable_values(self) -> dict[str, object]:
        """Snapshot of the user-editable fields."""
        return {name: getattr(self, name) for name in EDITABLE_FIELDS}

    def matches(self, query: str) -> bool:
        """Case-folded substring match on title, subtitle and body."""
        needle = query.strip().casefold()
        if not needle:
            return True
        return any(
            needle in (text or "").casefold()
            for text in (self.title, self.subtitle, self.body)
        )
