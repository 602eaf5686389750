"""Error types surfaced by the notes core."""


class NotesError(Exception):
    """Base class for all notes errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.code = code


class ValidationError(NotesError):
    """User-correctable input problem, rendered next to the offending field."""

    def __init__(
        self,
        message: str,
        field: str,
        code: str | None = "invalid",
    ) -> None:
        super().__init__(message, code)
        self.field = field


class NotFoundError(NotesError):
    """Referenced note no longer exists."""

    def __init__(
        self,
        note_id: int,
        message: str | None = None,
        code: str | None = "not_found",
    ) -> None:
        super().__init__(message or f"Note {note_id} not found", code)
        self.note_id = note_id


class StorageError(NotesError):
    """Unexpected failure of the underlying database."""

    def __init__(self, message: str, code: str | None = "storage") -> None:
        super().__init__(message, code)
