"""Note storage on top of the SQLite database."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable

from mynotes.errors import NotFoundError, StorageError
from mynotes.notes.types import Note
from mynotes.persistence.database import Database

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

_TICK = timedelta(microseconds=1)

_SELECT_NOTES = "SELECT * FROM notes"
_RECENCY = "ORDER BY updated_at DESC, id DESC"


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def _encode_time(value: datetime) -> str:
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


def _decode_time(value: str) -> datetime:
    return datetime.fromisoformat(value)


class NoteStore:
    """Owns note records.

    Every read re-queries the database; callers get plain lists, never a
    live cursor, so ``list()`` can be called again at any time.
    """

    def __init__(self, db: Database, clock: Clock = utc_now) -> None:
        self._db = db
        self._clock = clock

    def _next_timestamp(self, previous: datetime | None = None) -> datetime:
        now = self._clock()
        if previous is not None and now <= previous:
            return previous + _TICK
        return now

    def _note_from_row(self, row) -> Note:
        return Note(
            id=row["id"],
            title=row["title"],
            subtitle=row["subtitle"],
            body=row["body"],
            color=row["color"],
            image_path=row["image_path"],
            web_link=row["web_link"],
            created_at=_decode_time(row["created_at"]),
            updated_at=_decode_time(row["updated_at"]),
        )

    async def insert(self, note: Note) -> Note:
        """Store a new note and return it with its generated id."""
        if note.id is not None:
            raise ValueError("insert() assigns ids; use restore() for known notes")

        now = self._next_timestamp()
        try:
            cursor = await self._db.execute(
                """
                INSERT INTO notes
                (title, subtitle, body, color, image_path, web_link,
                 created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    note.title,
                    note.subtitle,
                    note.body,
                    note.color,
                    note.image_path,
                    note.web_link,
                    _encode_time(now),
                    _encode_time(now),
                ),
            )
            await self._db.commit()
        except StorageError:
            await self._safe_rollback()
            raise

        stored = Note(
            id=cursor.lastrowid,
            title=note.title,
            subtitle=note.subtitle,
            body=note.body,
            color=note.color,
            image_path=note.image_path,
            web_link=note.web_link,
            created_at=now,
            updated_at=now,
        )
        logger.debug("Inserted note %d", stored.id)
        return stored

    async def restore(self, note: Note) -> Note:
        """Put a previously deleted note back under its original id."""
        if note.id is None or note.created_at is None or note.updated_at is None:
            raise ValueError("restore() needs a note that was stored before")

        if await self._db.fetchone("SELECT id FROM notes WHERE id = ?", (note.id,)):
            raise StorageError(f"Note {note.id} already exists", code="conflict")

        try:
            await self._db.execute(
                """
                INSERT INTO notes
                (id, title, subtitle, body, color, image_path, web_link,
                 created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    note.id,
                    note.title,
                    note.subtitle,
                    note.body,
                    note.color,
                    note.image_path,
                    note.web_link,
                    _encode_time(note.created_at),
                    _encode_time(note.updated_at),
                ),
            )
            await self._db.commit()
        except StorageError:
            await self._safe_rollback()
            raise

        logger.debug("Restored note %d", note.id)
        return note

    async def update(self, note: Note) -> Note:
        """Overwrite the stored fields of an existing note (last write wins)."""
        if note.id is None:
            raise ValueError("update() needs a stored note")

        row = await self._db.fetchone(
            "SELECT updated_at FROM notes WHERE id = ?", (note.id,)
        )
        if row is None:
            raise NotFoundError(note.id)

        updated_at = self._next_timestamp(_decode_time(row["updated_at"]))
        try:
            cursor = await self._db.execute(
                """
                UPDATE notes SET
                    title = ?,
                    subtitle = ?,
                    body = ?,
                    color = ?,
                    image_path = ?,
                    web_link = ?,
                    updated_at = ?
                WHERE id = ?
                """,
                (
                    note.title,
                    note.subtitle,
                    note.body,
                    note.color,
                    note.image_path,
                    note.web_link,
                    _encode_time(updated_at),
                    note.id,
                ),
            )
            await self._db.commit()
        except StorageError:
            await self._safe_rollback()
            raise

        if cursor.rowcount == 0:
            raise NotFoundError(note.id)

        logger.debug("Updated note %d", note.id)
        return await self.get(note.id)

    async def delete(self, note_id: int) -> Note:
        """Remove a note and return what was stored."""
        existing = await self.get(note_id)
        try:
            cursor = await self._db.execute(
                "DELETE FROM notes WHERE id = ?", (note_id,)
            )
            await self._db.commit()
        except StorageError:
            await self._safe_rollback()
            raise

        if cursor.rowcount == 0:
            raise NotFoundError(note_id)

        logger.debug("Deleted note %d", note_id)
        return existing

    async def get(self, note_id: int) -> Note:
        """Get a note by id."""
        row = await self._db.fetchone(
            f"{_SELECT_NOTES} WHERE id = ?", (note_id,)
        )
        if row is None:
            raise NotFoundError(note_id)
        return self._note_from_row(row)

    async def search(self, query: str) -> list[Note]:
        """Get notes whose title, subtitle or body contains ``query``."""
        needle = query.strip()
        if not needle:
            return await self.list()

        folded = needle.casefold()
        rows = await self._db.fetchall(
            f"""
            {_SELECT_NOTES}
            WHERE instr(casefold(title), ?) > 0
               OR instr(casefold(subtitle), ?) > 0
               OR instr(casefold(body), ?) > 0
            {_RECENCY}
            """,
            (folded, folded, folded),
        )
        return [self._note_from_row(row) for row in rows]

    # Shadows the builtin below this point in the class body.
    async def list(self) -> list[Note]:
        """Get all notes, most recently changed first."""
        rows = await self._db.fetchall(f"{_SELECT_NOTES} {_RECENCY}")
        return [self._note_from_row(row) for row in rows]

    async def count(self) -> int:
        """Number of stored notes."""
        row = await self._db.fetchone("SELECT COUNT(*) AS count FROM notes")
        return row["count"] if row else 0

    async def _safe_rollback(self) -> None:
        try:
            await self._db.rollback()
        except StorageError as e:
            logger.warning("Rollback failed: %s", e)
