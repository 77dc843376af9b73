"""Email log persistence.

Stores one row per outgoing email in the ``email_logs`` SQLite table so
queue listeners can record delivery status.
"""

from __future__ import annotations

import logging
import sqlite3
import threading
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

EMAIL_LOG_SCHEMA = """
CREATE TABLE IF NOT EXISTS email_logs (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    subject TEXT NOT NULL DEFAULT '',
    recipient TEXT NOT NULL DEFAULT '',
    status TEXT NOT NULL DEFAULT 'pending',
    sent_at TEXT DEFAULT NULL,
    error TEXT DEFAULT NULL,
    job_uuid TEXT DEFAULT NULL,
    created_at TEXT NOT NULL DEFAULT (datetime('now'))
);
"""

_UPDATABLE = {"subject", "recipient", "status", "sent_at", "error", "job_uuid"}


class EmailLogStore:
    """Read/write email log rows backed by SQLite."""

    def __init__(
        self,
        db_conn: sqlite3.Connection,
        write_lock: threading.Lock | None = None,
    ) -> None:
        self._conn = db_conn
        self._conn.row_factory = sqlite3.Row
        self._write_lock: threading.Lock = write_lock or threading.Lock()
        self._conn.executescript(EMAIL_LOG_SCHEMA)

    @classmethod
    def open(cls, db_path: Path | str) -> EmailLogStore:
        """Open (creating if needed) a store at ``db_path``.

        ``":memory:"`` gives a throwaway in-memory store.
        """
        if str(db_path) != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(db_path), check_same_thread=False)
        return cls(conn)

    def create(self, subject: str, recipient: str) -> int:
        """Insert a pending email log and return its id."""
        with self._write_lock:
            cursor = self._conn.execute(
                "INSERT INTO email_logs (subject, recipient) VALUES (?, ?)",
                (subject, recipient),
            )
            self._conn.commit()
        return int(cursor.lastrowid)

    def update(self, log_id: int, **fields: Any) -> bool:
        """Update columns of one log row.

        Returns:
            True if a row was updated.

        Raises:
            ValueError: If an unknown column is given.
        """
        unknown = set(fields) - _UPDATABLE
        if unknown:
            raise ValueError(f"Unknown email log field(s): {', '.join(sorted(unknown))}")
        if not fields:
            return False

        columns = ", ".join(f"{name} = ?" for name in fields)
        with self._write_lock:
            cursor = self._conn.execute(
                f"UPDATE email_logs SET {columns} WHERE id = ?",
                (*fields.values(), log_id),
            )
            self._conn.commit()
        return cursor.rowcount > 0

    def get(self, log_id: int) -> dict[str, Any] | None:
        """Return one log row as a dict, or None."""
        row = self._conn.execute(
            "SELECT * FROM email_logs WHERE id = ?", (log_id,)
        ).fetchone()
        return dict(row) if row is not None else None

    def close(self) -> None:
        self._conn.close()
