"""Durable storage for sleep sessions.

All records live in a single SQLite table:

    sleep_sessions(id, start_time, end_time, quality)

Every operation opens its own connection and runs inside one transaction,
so a reader sees either the state before a write or the state after it.
The store is shared process-wide through acquire().
"""

import logging
import sqlite3
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from sleeptrack.core.config import get_database_path
from sleeptrack.core.session import SessionRecord

logger = logging.getLogger(__name__)

SCHEMA = """
PRAGMA journal_mode=WAL;

CREATE TABLE IF NOT EXISTS sleep_sessions (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  start_time INTEGER NOT NULL,     -- epoch ms
  end_time INTEGER NOT NULL,       -- epoch ms, equals start_time while open
  quality INTEGER NOT NULL DEFAULT -1
);
"""

_COLUMNS = "id, start_time, end_time, quality"


class StoreError(Exception):
    """Base class for session store errors."""

    pass


class StorageFailure(StoreError):
    """Raised when the backing database fails."""

    pass


class NotFound(StoreError):
    """Raised when an update targets a session id that does not exist."""

    pass


def _row_to_record(row: sqlite3.Row) -> SessionRecord:
    return SessionRecord(
        id=row["id"],
        start_time=row["start_time"],
        end_time=row["end_time"],
        quality=row["quality"],
    )


class SessionStore:
    """SQLite-backed session store.

    Use acquire() rather than constructing this directly, so the whole
    process shares one instance.
    """

    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageFailure(f"Cannot create {self.db_path.parent}: {e}") from e
        try:
            with self._connect() as conn:
                conn.executescript(SCHEMA)
        except sqlite3.Error as e:
            raise StorageFailure(f"Cannot open {self.db_path}: {e}") from e
        logger.info("Opened session store at %s", self.db_path)

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        conn = sqlite3.connect(self.db_path, timeout=5.0)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except BaseException:
            conn.rollback()
            raise
        finally:
            conn.close()

    @contextmanager
    def _transaction(self, action: str) -> Iterator[sqlite3.Connection]:
        """Run one store operation, translating engine errors to StorageFailure."""
        try:
            with self._connect() as conn:
                yield conn
        except sqlite3.Error as e:
            logger.error("Storage failure during %s: %s", action, e)
            raise StorageFailure(f"{action} failed: {e}") from e

    def insert(self, record: SessionRecord) -> int:
        """Insert a new session.

        The record's own id is ignored; the store assigns the next one.

        Args:
            record: Session to insert.

        Returns:
            The id assigned to the new row.
        """
        with self._transaction("insert") as conn:
            cursor = conn.execute(
                "INSERT INTO sleep_sessions (start_time, end_time, quality) VALUES (?, ?, ?)",
                (record.start_time, record.end_time, record.quality),
            )
            new_id = cursor.lastrowid
        logger.debug("Inserted session %s", new_id)
        return new_id

    def update(self, record: SessionRecord) -> None:
        """Replace the stored session with the same id.

        Args:
            record: New value for the session.

        Raises:
            NotFound: If no session has record.id.
        """
        with self._transaction("update") as conn:
            cursor = conn.execute(
                "UPDATE sleep_sessions SET start_time = ?, end_time = ?, quality = ? WHERE id = ?",
                (record.start_time, record.end_time, record.quality, record.id),
            )
            updated = cursor.rowcount
        if updated == 0:
            raise NotFound(f"Session {record.id} not found")
        logger.debug("Updated session %s", record.id)

    def get_by_id(self, session_id: int) -> SessionRecord | None:
        """Load a session by id, or None if it doesn't exist."""
        with self._transaction("get_by_id") as conn:
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM sleep_sessions WHERE id = ?", (session_id,)
            ).fetchone()
        return _row_to_record(row) if row else None

    def get_latest(self) -> SessionRecord | None:
        """Load the session with the greatest id, or None if the store is empty."""
        with self._transaction("get_latest") as conn:
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM sleep_sessions ORDER BY id DESC LIMIT 1"
            ).fetchone()
        return _row_to_record(row) if row else None

    def get_all_descending(self) -> list[SessionRecord]:
        """Load every session, newest (greatest id) first.

        Each call re-reads the table; the returned list is a snapshot.
        """
        with self._transaction("get_all_descending") as conn:
            rows = conn.execute(
                f"SELECT {_COLUMNS} FROM sleep_sessions ORDER BY id DESC"
            ).fetchall()
        return [_row_to_record(row) for row in rows]

    def count(self) -> int:
        """Number of stored sessions."""
        with self._transaction("count") as conn:
            (total,) = conn.execute("SELECT COUNT(*) FROM sleep_sessions").fetchone()
        return total

    def clear(self) -> None:
        """Delete every session in a single transaction."""
        with self._transaction("clear") as conn:
            deleted = conn.execute("DELETE FROM sleep_sessions").rowcount
        logger.info("Cleared %d sessions", deleted)


_instance: SessionStore | None = None
_instance_lock = threading.Lock()


def _build_store(context: Path | None) -> SessionStore:
    return SessionStore(get_database_path(context))


def acquire(context: Path | None = None) -> SessionStore:
    """Get the process-wide session store, creating it on first use.

    Safe to call from several threads at once: exactly one store is built
    and every caller gets that same, fully initialized instance.

    Args:
        context: Application data directory. Only used by the call that
            builds the store; defaults to the configured data directory.

    Returns:
        The shared SessionStore.
    """
    global _instance
    instance = _instance
    if instance is not None:
        return instance

    with _instance_lock:
        # Another thread may have built it while we waited for the lock
        if _instance is None:
            _instance = _build_store(context)
        return _instance
