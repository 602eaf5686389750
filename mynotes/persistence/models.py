"""Database schema definitions."""

SCHEMA_VERSION = 1

SCHEMA = [
    # Schema version tracking
    """
    CREATE TABLE IF NOT EXISTS schema_version (
        version INTEGER PRIMARY KEY
    )
    """,
    # Notes
    """
    CREATE TABLE IF NOT EXISTS notes (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        title TEXT NOT NULL DEFAULT '',
        subtitle TEXT NOT NULL DEFAULT '',
        body TEXT NOT NULL DEFAULT '',
        color TEXT NOT NULL DEFAULT '#333333',
        image_path TEXT,
        web_link TEXT,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    )
    """,
    # Index for recency listing
    """
    CREATE INDEX IF NOT EXISTS idx_notes_recency
    ON notes(updated_at DESC, id DESC)
    """,
]
