"""
Database module for Jotter.

SQLite storage for notes. One named, versioned database holding a single
``notes`` collection keyed by an auto-incremented integer id, with secondary
indexes on content and timestamp.

The connection is opened once and held for the life of the session. Every
operation runs in a worker thread so callers can await it without blocking
the event loop.
"""

import asyncio
import logging
import sqlite3
import time
from enum import Enum
from pathlib import Path
from threading import Lock
from typing import Callable

from pydantic import ValidationError

from jotter.config import get_db_path, load_config
from jotter.errors import ReadFailed, StorageNotReady, StorageUnavailable, WriteFailed
from jotter.models import Note

logger = logging.getLogger(__name__)

SCHEMA = """
-- Notes collection
-- AUTOINCREMENT: ids are never reused, even after out-of-band deletes.
CREATE TABLE IF NOT EXISTS notes (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    content TEXT NOT NULL,
    timestamp INTEGER NOT NULL              -- Unix time ms, set by the writer
);

-- Indexes (non-unique)
CREATE INDEX IF NOT EXISTS idx_notes_content ON notes(content);
CREATE INDEX IF NOT EXISTS idx_notes_timestamp ON notes(timestamp);
"""


class ConnectionState(str, Enum):
    """Lifecycle of the store connection."""

    UNINITIALIZED = "uninitialized"
    OPENING = "opening"
    READY = "ready"
    FAILED = "failed"


def now_ms() -> int:
    """Current Unix time in milliseconds."""
    return int(time.time() * 1000)


class NoteStore:
    """Async SQLite store for notes."""

    def __init__(
        self,
        db_path: Path | None = None,
        version: int | None = None,
        clock: Callable[[], int] = now_ms,
    ):
        config = load_config()
        self.db_path = db_path or get_db_path(config)
        self.version = version or int(config["storage"]["db_version"])
        self.state = ConnectionState.UNINITIALIZED
        self._clock = clock
        self._conn: sqlite3.Connection | None = None
        self._lock = Lock()
        self._failure: str | None = None

    @property
    def name(self) -> str:
        """Database name (file stem)."""
        return self.db_path.stem

    async def open(self) -> "NoteStore":
        """
        Open the database, creating or upgrading the schema if needed.

        Idempotent once READY. A failed open is terminal: later calls
        re-raise StorageUnavailable without touching the disk again.
        """
        if self.state is ConnectionState.READY:
            return self
        if self.state is ConnectionState.FAILED:
            raise StorageUnavailable(self._failure)
        if self.state is ConnectionState.OPENING:
            raise StorageNotReady(f"{self.name} is already opening")

        self.state = ConnectionState.OPENING
        try:
            self._conn = await asyncio.to_thread(self._connect)
        except StorageUnavailable as e:
            self._fail(str(e))
            raise
        except (sqlite3.Error, OSError) as e:
            self._fail(f"Cannot open {self.db_path}: {e}")
            raise StorageUnavailable(self._failure) from e

        self.state = ConnectionState.READY
        logger.info("Opened %s (version %d)", self.db_path, self.version)
        return self

    def close(self) -> None:
        """Release the connection. The store may be opened again afterwards."""
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None
        if self.state is ConnectionState.READY:
            self.state = ConnectionState.UNINITIALIZED

    async def create(self, content: str) -> int:
        """Insert a note and return its id. Raises WriteFailed on any DB error."""
        self._require_ready()
        if not content:
            raise ValueError("Note content must be non-empty")
        return await asyncio.to_thread(self._insert, content)

    async def list_all(self) -> list[Note]:
        """Return every note in key order. Raises ReadFailed on any DB error."""
        self._require_ready()
        return await asyncio.to_thread(self._scan)

    def _fail(self, reason: str) -> None:
        self.state = ConnectionState.FAILED
        self._failure = reason
        logger.error("Storage unavailable: %s", reason)

    def _require_ready(self) -> None:
        if self.state is not ConnectionState.READY or self._conn is None:
            raise StorageNotReady(
                f"{self.name} is {self.state.value}; call open() first"
            )

    def _connect(self) -> sqlite3.Connection:
        """Connect and bring the schema to the target version."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(self.db_path, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        try:
            self._upgrade(conn)
        except BaseException:
            conn.close()
            raise
        return conn

    def _upgrade(self, conn: sqlite3.Connection) -> None:
        conn.execute(
            "CREATE TABLE IF NOT EXISTS schema_version (version INTEGER PRIMARY KEY)"
        )
        current = conn.execute("SELECT MAX(version) FROM schema_version").fetchone()[0] or 0

        if current > self.version:
            raise StorageUnavailable(
                f"{self.name} is at version {current}, newer than {self.version}"
            )

        if current < self.version:
            logger.info("Upgrading %s from version %d to %d", self.name, current, self.version)
            conn.executescript(SCHEMA)
            conn.execute(
                "INSERT OR REPLACE INTO schema_version (version) VALUES (?)",
                (self.version,),
            )
        conn.commit()

    def _insert(self, content: str) -> int:
        timestamp = self._clock()
        with self._lock:
            if self._conn is None:
                raise StorageNotReady(f"{self.name} was closed before the write")
            try:
                cursor = self._conn.execute(
                    "INSERT INTO notes (content, timestamp) VALUES (?, ?)",
                    (content, timestamp),
                )
                self._conn.commit()
            except sqlite3.Error as e:
                self._conn.rollback()
                raise WriteFailed(f"Error adding note: {e}") from e

        logger.debug("Inserted note %d at %d", cursor.lastrowid, timestamp)
        return cursor.lastrowid

    def _scan(self) -> list[Note]:
        notes: list[Note] = []
        with self._lock:
            if self._conn is None:
                raise StorageNotReady(f"{self.name} was closed before the read")
            try:
                cursor = self._conn.execute(
                    "SELECT id, content, timestamp FROM notes ORDER BY id"
                )
                for row in cursor:
                    notes.append(Note(**dict(row)))
            except (sqlite3.Error, ValidationError) as e:
                raise ReadFailed(f"Error fetching notes: {e}") from e
        return notes
