"""
Widget state for Jotter.

Small SQLite key/value store in state.db, plus the three collaborators that
live in it:
- LoginGate: visibility flag with an expiry. NOT authentication.
- DraftCache: the unsaved text in the input buffer.
- SortPreferenceStore: the last chosen sort directive.
"""

import logging
import sqlite3
import time
from contextlib import contextmanager
from datetime import timedelta
from pathlib import Path
from typing import Callable, Iterator

from jotter.config import get_state_path
from jotter.models import DEFAULT_DIRECTIVE, SortDirective

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS kv (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    expires_at REAL                         -- Unix time s, NULL = never
);
"""

LOGIN_KEY = "login"
DRAFT_KEY = "draft"
SORT_KEY = "sortPreference"


class KeyValueStore:
    """Persist string values with optional per-key expiration."""

    def __init__(
        self,
        db_path: Path | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self.db_path = db_path or get_state_path()
        self._clock = clock
        self._ensure_db()

    def _ensure_db(self) -> None:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        with self._connect() as conn:
            conn.executescript(SCHEMA)

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        """Context manager for database connections."""
        conn = sqlite3.connect(self.db_path)
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def get(self, key: str) -> str | None:
        """Return the value for ``key``, or None if missing or expired."""
        with self._connect() as conn:
            row = conn.execute(
                "SELECT value, expires_at FROM kv WHERE key = ?", (key,)
            ).fetchone()
            if row is None:
                return None

            value, expires_at = row
            if expires_at is not None and expires_at <= self._clock():
                conn.execute("DELETE FROM kv WHERE key = ?", (key,))
                logger.debug("Purged expired key %s", key)
                return None
            return value

    def set(self, key: str, value: str, ttl: timedelta | None = None) -> None:
        """Store ``value`` for ``key``, expiring after ``ttl`` if given."""
        expires_at = self._clock() + ttl.total_seconds() if ttl else None
        with self._connect() as conn:
            conn.execute("""
                INSERT INTO kv (key, value, expires_at) VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    expires_at = excluded.expires_at
            """, (key, value, expires_at))

    def delete(self, key: str) -> None:
        """Remove ``key`` if present."""
        with self._connect() as conn:
            conn.execute("DELETE FROM kv WHERE key = ?", (key,))


class LoginGate:
    """
    Boolean visibility gate persisted across runs.

    This is not authentication. It only decides whether the note list is
    shown, exactly like a "login=true" cookie would.
    """

    def __init__(self, kv: KeyValueStore, ttl: timedelta = timedelta(days=30)):
        self.kv = kv
        self.ttl = ttl

    def is_logged_in(self) -> bool:
        return self.kv.get(LOGIN_KEY) == "true"

    def login(self) -> None:
        self.kv.set(LOGIN_KEY, "true", ttl=self.ttl)

    def logout(self) -> None:
        self.kv.delete(LOGIN_KEY)


class DraftCache:
    """Unsaved input text, kept for recovery across runs."""

    def __init__(self, kv: KeyValueStore):
        self.kv = kv

    def get(self) -> str | None:
        return self.kv.get(DRAFT_KEY)

    def save(self, content: str) -> None:
        """Store the draft; an empty buffer removes it."""
        if content:
            self.kv.set(DRAFT_KEY, content)
        else:
            self.kv.delete(DRAFT_KEY)

    def clear(self) -> None:
        self.kv.delete(DRAFT_KEY)


class SortPreferenceStore:
    """The user's last chosen sort directive."""

    def __init__(self, kv: KeyValueStore):
        self.kv = kv

    def get(self) -> SortDirective | str:
        """
        Return the stored directive, or the default if unset.

        An unknown stored value is returned as-is; sorting by it leaves the
        notes in storage order.
        """
        value = self.kv.get(SORT_KEY)
        if value is None:
            return DEFAULT_DIRECTIVE
        try:
            return SortDirective(value)
        except ValueError:
            logger.warning("Unknown sort preference %r, notes stay in storage order", value)
            return value

    def set(self, directive: SortDirective) -> None:
        self.kv.set(SORT_KEY, SortDirective(directive).value)

    def clear(self) -> None:
        self.kv.delete(SORT_KEY)
